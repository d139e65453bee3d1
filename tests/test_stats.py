import pytest

from review_scheduler.schemas import LearningStats, ReviewState
from review_scheduler.stats import aggregate_stats


def test_empty_input_is_all_zero():
    result = aggregate_stats([])

    assert result == LearningStats()
    assert result.model_dump() == {
        "mastered": 0,
        "in_progress": 0,
        "new": 0,
        "average_easiness": 0.0,
        "completion_percentage": 0,
    }


def test_counts_by_learning_stage():
    states = [
        ReviewState(easiness_factor=2.5, interval_days=30, repetition_count=4),
        ReviewState(easiness_factor=2.0, interval_days=6, repetition_count=2),
        ReviewState(easiness_factor=None, interval_days=0, repetition_count=0),
        ReviewState(easiness_factor=2.7, interval_days=100, repetition_count=7),
    ]
    result = aggregate_stats(states)

    assert result.mastered == 2
    assert result.in_progress == 1
    assert result.new == 1
    assert result.average_easiness == pytest.approx(2.425)
    assert result.completion_percentage == 50


@pytest.mark.parametrize("mastered,total,expected", [(1, 3, 33), (2, 3, 67), (3, 3, 100)])
def test_completion_is_a_whole_percent(mastered, total, expected):
    states = [ReviewState(interval_days=40, repetition_count=5)] * mastered
    states += [ReviewState(interval_days=1, repetition_count=1)] * (total - mastered)

    assert aggregate_stats(states).completion_percentage == expected


def test_accepts_mappings_and_tolerates_corrupted_easiness():
    states = [
        {"easiness_factor": float("nan"), "interval_days": 6, "repetition_count": 2},
        {"easiness_factor": 2.1},
    ]
    result = aggregate_stats(states)

    assert result.in_progress == 1
    assert result.new == 1
    assert result.average_easiness == pytest.approx(2.3)


def test_accepts_generators():
    result = aggregate_stats(ReviewState() for _ in range(3))
    assert result.new == 3
    assert result.average_easiness == pytest.approx(2.5)


def test_fractional_and_garbage_intervals_do_not_abort_the_batch():
    states = [
        {"interval_days": 12.5, "repetition_count": 2},
        {"interval_days": 40, "repetition_count": 5},
        {"interval_days": "garbage", "repetition_count": 1},
    ]
    result = aggregate_stats(states)

    assert result.mastered == 1
    assert result.in_progress == 2
    assert result.new == 0
    assert result.completion_percentage == 33
