class InvalidInputError(ValueError):
    """Raised when the scheduler is handed input it cannot interpret.

    Covers raw quality values that fail validation, qualities that are not
    numbers at all, and unknown label locales.
    """

    def __init__(self, message: str, value=None):
        super().__init__(message)
        self.value = value
