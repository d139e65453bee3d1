from pydantic import BaseModel, Field, ValidationError, field_validator
from typing import Optional
from datetime import datetime
import logging
import math

from review_scheduler.quality import ReviewStatus

logger = logging.getLogger(__name__)


def _as_float(value) -> Optional[float]:
    """Read a stored number, or None when it cannot be read as one"""
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return None


class ReviewState(BaseModel):
    """SM-2 memory-strength record for one (user, card) pair

    Values are not range-checked on load so corrupted rows can still be read;
    SM2Algorithm repairs them before scheduling. Fractional counts are rounded
    half up, unreadable values become None so the defaults apply.
    """
    easiness_factor: Optional[float] = 2.5  # EF: interval growth multiplier
    interval_days: Optional[int] = 0  # days until next review
    repetition_count: Optional[int] = 0  # consecutive successful reviews

    last_reviewed_at: Optional[datetime] = None
    next_review_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        frozen = True

    @field_validator("easiness_factor", mode="before")
    @classmethod
    def read_easiness(cls, value):
        if value is None or isinstance(value, float):
            return value
        number = _as_float(value)
        if number is None:
            logger.warning("Unreadable easiness_factor %r ignored", value)
        return number

    @field_validator("interval_days", "repetition_count", mode="before")
    @classmethod
    def read_whole_number(cls, value, info):
        if value is None or (isinstance(value, int) and not isinstance(value, bool)):
            return value
        number = _as_float(value)
        if number is None or not math.isfinite(number):
            logger.warning("Unreadable %s %r ignored", info.field_name, value)
            return None
        return math.floor(number + 0.5)

    @field_validator("last_reviewed_at", "next_review_at", mode="wrap")
    @classmethod
    def read_timestamp(cls, value, handler, info):
        try:
            return handler(value)
        except ValidationError:
            logger.warning("Unreadable %s %r ignored", info.field_name, value)
            return None


class LearningStats(BaseModel):
    """Progress summary over a batch of review states"""
    mastered: int = 0
    in_progress: int = 0
    new: int = 0
    average_easiness: float = 0.0
    completion_percentage: int = 0


class ReviewRequest(BaseModel):
    """Schema for a graded review coming from a study session"""
    quality: int = Field(ge=0, le=5, description="Recall quality, 0=blackout, 5=perfect")
    reviewed_at: Optional[datetime] = None


class StatusReviewRequest(BaseModel):
    """Schema for a binary learned/review judgment from a study session"""
    status: ReviewStatus
    reviewed_at: Optional[datetime] = None
