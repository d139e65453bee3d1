from datetime import datetime
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from review_scheduler.quality import ReviewStatus
from review_scheduler.schemas import ReviewRequest, ReviewState, StatusReviewRequest


def test_review_state_defaults():
    state = ReviewState()

    assert state.easiness_factor == 2.5
    assert state.interval_days == 0
    assert state.repetition_count == 0
    assert state.last_reviewed_at is None
    assert state.next_review_at is None


def test_review_state_is_immutable(mature_state):
    with pytest.raises(ValidationError):
        mature_state.interval_days = 99


def test_review_state_from_orm_row():
    row = SimpleNamespace(
        easiness_factor=2.2,
        interval_days=15,
        repetition_count=3,
        last_reviewed_at=datetime(2026, 1, 1),
        next_review_at=datetime(2026, 1, 16)
    )
    state = ReviewState.model_validate(row)

    assert state.interval_days == 15
    assert state.next_review_at == datetime(2026, 1, 16)


@pytest.mark.parametrize("raw,expected", [(12.5, 13), ("29.6", 30), (4.0, 4), ("garbage", None), (float("inf"), None)])
def test_review_state_reads_stored_interval(raw, expected):
    assert ReviewState.model_validate({"interval_days": raw}).interval_days == expected


def test_review_state_ignores_unreadable_values(caplog):
    state = ReviewState.model_validate({
        "easiness_factor": "very easy",
        "repetition_count": [2],
        "next_review_at": "soon",
    })

    assert state.easiness_factor is None
    assert state.repetition_count is None
    assert state.next_review_at is None
    assert "next_review_at" in caplog.text


def test_review_state_reads_numeric_strings():
    state = ReviewState.model_validate({"easiness_factor": "2.2", "repetition_count": "3"})

    assert state.easiness_factor == pytest.approx(2.2)
    assert state.repetition_count == 3


def test_review_state_json_round_trip(mature_state):
    payload = mature_state.model_dump(mode="json")
    assert ReviewState.model_validate(payload) == mature_state


@pytest.mark.parametrize("quality", [-1, 6])
def test_review_request_bounds(quality):
    with pytest.raises(ValidationError):
        ReviewRequest(quality=quality)


def test_status_review_request():
    request = StatusReviewRequest(status="learned")
    assert request.status is ReviewStatus.LEARNED

    with pytest.raises(ValidationError):
        StatusReviewRequest(status="forgot")
