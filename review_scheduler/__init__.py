from review_scheduler.config import Settings, settings
from review_scheduler.errors import InvalidInputError
from review_scheduler.quality import (
    RecallQuality,
    ReviewStatus,
    map_status_to_quality,
    validate_quality
)
from review_scheduler.schemas import (
    LearningStats,
    ReviewRequest,
    ReviewState,
    StatusReviewRequest
)
from review_scheduler.sm2 import SM2Algorithm
from review_scheduler.describe import describe_next_review
from review_scheduler.stats import aggregate_stats

__all__ = [
    "Settings",
    "settings",
    "InvalidInputError",
    "RecallQuality",
    "ReviewStatus",
    "map_status_to_quality",
    "validate_quality",
    "LearningStats",
    "ReviewRequest",
    "ReviewState",
    "StatusReviewRequest",
    "SM2Algorithm",
    "describe_next_review",
    "aggregate_stats",
]
