import logging
import math
import numbers
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from pydantic import ValidationError

from review_scheduler.errors import InvalidInputError
from review_scheduler.quality import MAX_QUALITY, MIN_QUALITY, PASSING_QUALITY
from review_scheduler.schemas import ReviewState

logger = logging.getLogger(__name__)

INITIAL_EASINESS = 2.5
MIN_EASINESS = 1.3

FIRST_INTERVAL = 1
SECOND_INTERVAL = 6
MIN_INTERVAL = 1
MAX_INTERVAL = 365


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values"""
    return int(math.floor(value + 0.5))


def current_time(reference: Optional[datetime] = None) -> datetime:
    """Current time, naive if reference is naive, otherwise UTC-aware"""
    if reference is not None and reference.tzinfo is None:
        return datetime.now()
    return datetime.now(timezone.utc)


def coerce_state(state) -> ReviewState:
    """Accept a ReviewState, a mapping or an ORM row"""
    if isinstance(state, ReviewState):
        return state
    try:
        return ReviewState.model_validate(state)
    except ValidationError as e:
        raise InvalidInputError(f"Cannot read review state: {e}", state) from e


class SM2Algorithm:
    """
    SM-2 spaced repetition algorithm for calculating review intervals.
    Based on SuperMemo 2 algorithm by Piotr Wozniak.

    Stateless: every method is a pure function of its arguments, with the
    current time as the only implicit input when `now` is omitted.
    """

    @staticmethod
    def clamp_quality(quality) -> int:
        """
        Force a quality score into the 0-5 scale.

        Out-of-range numbers are clamped (and logged) rather than rejected so a
        batch of historical reviews never fails halfway. Numeric strings are
        read as numbers. Values that are not numbers at all raise
        InvalidInputError.
        """
        if isinstance(quality, bool):
            raise InvalidInputError(f"Quality must be a number, got {quality!r}", quality)

        value = quality
        if isinstance(value, str):
            try:
                value = float(value.strip())
            except ValueError:
                raise InvalidInputError(f"Quality must be a number, got {quality!r}", quality) from None

        if not isinstance(value, numbers.Real):
            raise InvalidInputError(f"Quality must be a number, got {quality!r}", quality)
        if value != value:
            raise InvalidInputError("Quality must be a number, got NaN", quality)

        # Compare before converting so huge ints never reach float()
        if value < MIN_QUALITY:
            clamped = float(MIN_QUALITY)
        elif value > MAX_QUALITY:
            clamped = float(MAX_QUALITY)
        else:
            clamped = float(value)

        if clamped != value:
            logger.warning("Quality %r outside 0-5, clamped to %s", quality, clamped)

        return round_half_up(clamped)

    @staticmethod
    def normalize_state(state: ReviewState):
        """
        Read SM-2 parameters from a state, repairing missing or corrupted values.

        Returns:
            (easiness_factor, interval_days, repetition_count)
        """
        ef = state.easiness_factor
        if ef is None:
            ef = INITIAL_EASINESS
        elif not math.isfinite(ef):
            logger.warning("Easiness factor %r is not finite, reset to %s", ef, INITIAL_EASINESS)
            ef = INITIAL_EASINESS
        elif ef < MIN_EASINESS:
            logger.warning("Easiness factor %s below floor, raised to %s", ef, MIN_EASINESS)
            ef = MIN_EASINESS

        interval = state.interval_days
        if interval is None:
            interval = 0
        elif interval < 0:
            logger.warning("Negative interval %s reset to 0", interval)
            interval = 0
        elif interval > MAX_INTERVAL:
            logger.warning("Interval %s above cap, lowered to %s", interval, MAX_INTERVAL)
            interval = MAX_INTERVAL

        repetitions = state.repetition_count
        if repetitions is None:
            repetitions = 0
        elif repetitions < 0:
            logger.warning("Negative repetition count %s reset to 0", repetitions)
            repetitions = 0

        return ef, interval, repetitions

    @staticmethod
    def schedule(state, quality, now: Optional[datetime] = None) -> ReviewState:
        """
        Apply one review to a card and return its new SM-2 state.

        Args:
            state: Current ReviewState (or a mapping / ORM row with the same fields)
            quality: Response quality (0-5). 0=total blackout, 5=perfect
            now: Review time (defaults to the current UTC time)

        Returns:
            New ReviewState; the input is left untouched
        """
        state = coerce_state(state)
        quality = SM2Algorithm.clamp_quality(quality)
        easiness_factor, interval, repetitions = SM2Algorithm.normalize_state(state)

        # Update easiness factor based on quality, on success and failure alike
        new_ef = easiness_factor + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02))

        # Ensure EF stays within bounds
        if new_ef < MIN_EASINESS:
            new_ef = MIN_EASINESS

        # If quality < 3, reset repetitions (failed recall)
        if quality < PASSING_QUALITY:
            new_repetitions = 0
            new_interval = FIRST_INTERVAL
        else:
            new_repetitions = repetitions + 1

            # Calculate new interval based on repetition count
            if new_repetitions == 1:
                new_interval = FIRST_INTERVAL
            elif new_repetitions == 2:
                new_interval = SECOND_INTERVAL
            else:
                grown = interval * new_ef
                if not math.isfinite(grown) or grown > MAX_INTERVAL:
                    new_interval = MAX_INTERVAL
                else:
                    new_interval = round_half_up(grown)

        new_interval = max(MIN_INTERVAL, min(new_interval, MAX_INTERVAL))

        reviewed_at = now if now is not None else current_time()
        next_review_at = reviewed_at + timedelta(days=new_interval)

        logger.debug(
            "q=%d: ef %.2f -> %.2f, interval %d -> %d, reps %d -> %d",
            quality, easiness_factor, new_ef, interval, new_interval, repetitions, new_repetitions
        )

        return ReviewState(
            easiness_factor=new_ef,
            interval_days=new_interval,
            repetition_count=new_repetitions,
            last_reviewed_at=reviewed_at,
            next_review_at=next_review_at,
        )

    @staticmethod
    def was_successful(quality) -> bool:
        """Check whether a quality score counts as a successful recall"""
        return SM2Algorithm.clamp_quality(quality) >= PASSING_QUALITY

    @staticmethod
    def initialize_state(now: Optional[datetime] = None) -> ReviewState:
        """
        Initialize SM-2 parameters for a card studied for the first time.

        A new card is due immediately.
        """
        created_at = now if now is not None else current_time()
        return ReviewState(
            easiness_factor=INITIAL_EASINESS,
            interval_days=0,
            repetition_count=0,
            last_reviewed_at=created_at,
            next_review_at=created_at,
        )

    @staticmethod
    def is_due_for_review(state, now: Optional[datetime] = None) -> bool:
        """Check if a card is due for review"""
        state = coerce_state(state)
        if state.next_review_at is None:
            return True
        if now is None:
            now = current_time(state.next_review_at)
        return now >= state.next_review_at

    @staticmethod
    def get_days_overdue(state, now: Optional[datetime] = None) -> int:
        """Calculate how many whole days overdue a review is"""
        state = coerce_state(state)
        if state.next_review_at is None:
            return 0
        if now is None:
            now = current_time(state.next_review_at)
        if now < state.next_review_at:
            return 0
        return (now - state.next_review_at).days

    @staticmethod
    def select_due(
        states: Iterable,
        now: Optional[datetime] = None,
        limit: Optional[int] = None
    ) -> List[ReviewState]:
        """
        Build the review queue: due states, most overdue first.

        Args:
            states: ReviewStates (or mappings / ORM rows)
            now: Reference time (defaults to the current time)
            limit: Optional maximum number of states to return
        """
        if limit is not None and limit < 0:
            raise InvalidInputError(f"Limit must not be negative, got {limit}", limit)

        states = [coerce_state(s) for s in states]
        if now is None:
            reference = next((s.next_review_at for s in states if s.next_review_at is not None), None)
            now = current_time(reference)

        due = [s for s in states if SM2Algorithm.is_due_for_review(s, now)]
        # Never-scheduled cards first, then oldest due date
        due.sort(key=lambda s: (s.next_review_at is not None, s.next_review_at))

        if limit is not None:
            due = due[:limit]
        return due
