from pydantic_settings import BaseSettings
from pathlib import Path

# Get the project root directory (parent of review_scheduler folder)
PROJECT_ROOT = Path(__file__).parent.parent

class Settings(BaseSettings):
    """Scheduler configuration loaded from environment variables"""

    # Default locale for "next review" labels ("en" or "pl")
    locale: str = "en"

    # Binary study-session status -> SM-2 quality (0-5)
    learned_quality: int = 4
    review_quality: int = 2

    # Logging level used by the CLI
    log_level: str = "WARNING"

    class Config:
        env_prefix = "REVIEW_SCHEDULER_"
        env_file = str(PROJECT_ROOT / ".env")
        extra = "ignore"

settings = Settings()
