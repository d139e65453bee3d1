"""Shared fixtures for scheduler tests."""

import pytest
from datetime import datetime, timezone

from review_scheduler.schemas import ReviewState


@pytest.fixture
def now():
    """Fixed review time so results are reproducible."""
    return datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def fresh_state(now):
    """A card that has never been reviewed."""
    return ReviewState(
        easiness_factor=2.5,
        interval_days=0,
        repetition_count=0,
        last_reviewed_at=now,
        next_review_at=now
    )


@pytest.fixture
def mature_state():
    """A card with a long run of successful reviews."""
    return ReviewState(easiness_factor=2.5, interval_days=10, repetition_count=5)
