import pytest

from review_scheduler.config import settings
from review_scheduler.errors import InvalidInputError
from review_scheduler.quality import (
    RecallQuality,
    ReviewStatus,
    map_status_to_quality,
    validate_quality
)


@pytest.mark.parametrize("raw,expected", [
    (0, 0),
    (5, 5),
    ("3", 3),
    (" 4 ", 4),
    (2.0, 2),
    (RecallQuality.PERFECT, 5),
])
def test_validate_quality_accepts(raw, expected):
    assert validate_quality(raw) == expected


@pytest.mark.parametrize("raw", [-1, 6, 3.5, "abc", "", None, True, float("nan"), [4]])
def test_validate_quality_rejects(raw):
    with pytest.raises(InvalidInputError) as exc_info:
        validate_quality(raw)
    assert exc_info.value.value is raw


def test_invalid_input_is_a_value_error():
    with pytest.raises(ValueError):
        validate_quality(10)


def test_status_mapping():
    assert map_status_to_quality("learned") == 4
    assert map_status_to_quality("review") == 2
    assert map_status_to_quality(ReviewStatus.LEARNED) == 4


def test_status_mapping_follows_settings(monkeypatch):
    monkeypatch.setattr(settings, "learned_quality", 5)
    assert map_status_to_quality(ReviewStatus.LEARNED) == 5


def test_unknown_status():
    with pytest.raises(InvalidInputError, match="learned"):
        map_status_to_quality("mastered")


def test_recall_quality_grades():
    assert [q.value for q in RecallQuality] == [0, 1, 2, 3, 4, 5]
    assert RecallQuality.DIFFICULT == 3
