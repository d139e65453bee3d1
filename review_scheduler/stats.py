import logging
import math
from typing import Iterable

from review_scheduler.schemas import LearningStats
from review_scheduler.sm2 import INITIAL_EASINESS, coerce_state, round_half_up

logger = logging.getLogger(__name__)

# Interval (days) from which a card counts as mastered
MASTERED_INTERVAL = 30


def aggregate_stats(states: Iterable) -> LearningStats:
    """
    Summarize learning progress over a batch of review states.

    Args:
        states: ReviewStates (or mappings / ORM rows with the same fields)

    Returns:
        LearningStats with mastered / in-progress / new counts, mean easiness
        and the whole-percent share of mastered cards. All zeros when empty.
    """
    states = [coerce_state(s) for s in states]
    if not states:
        return LearningStats()

    mastered = 0
    in_progress = 0
    new = 0
    total_easiness = 0.0

    for state in states:
        interval = state.interval_days or 0
        repetitions = state.repetition_count or 0

        if interval >= MASTERED_INTERVAL:
            mastered += 1
        if repetitions > 0 and interval < MASTERED_INTERVAL:
            in_progress += 1
        if repetitions == 0:
            new += 1

        ef = state.easiness_factor
        if ef is None or not math.isfinite(ef):
            ef = INITIAL_EASINESS
        total_easiness += ef

    stats = LearningStats(
        mastered=mastered,
        in_progress=in_progress,
        new=new,
        average_easiness=total_easiness / len(states),
        completion_percentage=round_half_up(mastered / len(states) * 100),
    )
    logger.debug("Aggregated %d states: %s", len(states), stats)
    return stats
