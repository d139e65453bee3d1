"""Recall quality grades and validation of raw grades at the caller boundary"""

import math
from enum import Enum, IntEnum

from review_scheduler.config import settings
from review_scheduler.errors import InvalidInputError

MIN_QUALITY = 0
MAX_QUALITY = 5
PASSING_QUALITY = 3


class RecallQuality(IntEnum):
    """SM-2 response quality (0-5 scale)"""
    BLACKOUT = 0  # complete blackout, wrong answer
    INCORRECT = 1  # wrong, but the answer was recognized
    INCORRECT_FAMILIAR = 2  # wrong, but the answer felt familiar once shown
    DIFFICULT = 3  # correct after significant effort
    HESITANT = 4  # correct after some hesitation
    PERFECT = 5  # perfect recall


class ReviewStatus(str, Enum):
    """Binary judgment offered by the simple study-session UI"""
    LEARNED = "learned"
    REVIEW = "review"


def validate_quality(value) -> int:
    """
    Validate a raw quality grade supplied by a user or client.

    Accepts ints, integral floats and numeric strings in 0-5. Anything else
    raises InvalidInputError; the engine itself only clamps.
    """
    if isinstance(value, bool):
        raise InvalidInputError(f"Quality must be an integer 0-5, got {value!r}", value)

    if isinstance(value, str):
        try:
            quality = int(value.strip())
        except ValueError:
            raise InvalidInputError(f"Quality must be an integer 0-5, got {value!r}", value) from None
    elif isinstance(value, int):
        quality = int(value)
    elif isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise InvalidInputError(f"Quality must be an integer 0-5, got {value!r}", value)
        quality = int(value)
    else:
        raise InvalidInputError(f"Quality must be an integer 0-5, got {value!r}", value)

    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise InvalidInputError(f"Quality must be between 0 and 5, got {quality}", value)

    return quality


def map_status_to_quality(status) -> int:
    """Map a learned/review judgment to the configured SM-2 quality"""
    try:
        status = ReviewStatus(status)
    except ValueError:
        raise InvalidInputError(
            f"Status must be 'learned' or 'review', got {status!r}", status
        ) from None

    if status is ReviewStatus.LEARNED:
        return validate_quality(settings.learned_quality)
    return validate_quality(settings.review_quality)
