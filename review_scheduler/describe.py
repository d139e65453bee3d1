"""Human-readable labels for when a card's next review falls"""

import math
from datetime import datetime
from typing import Optional

from review_scheduler.config import settings
from review_scheduler.errors import InvalidInputError
from review_scheduler.sm2 import current_time

SECONDS_PER_DAY = 24 * 60 * 60


def _english(count: int, unit: str) -> str:
    return f"In {count} {unit}" if count == 1 else f"In {count} {unit}s"


def _polish(count: int, one: str, few: str, many: str) -> str:
    if count == 1:
        return f"Za {count} {one}"
    if count % 10 in (2, 3, 4) and count % 100 not in (12, 13, 14):
        return f"Za {count} {few}"
    return f"Za {count} {many}"


LABELS = {
    "en": {
        "today": lambda: "Today",
        "tomorrow": lambda: "Tomorrow",
        "days": lambda n: f"In {n} days",
        "weeks": lambda n: _english(n, "week"),
        "months": lambda n: _english(n, "month"),
        "years": lambda n: _english(n, "year"),
    },
    "pl": {
        "today": lambda: "Dziś",
        "tomorrow": lambda: "Jutro",
        "days": lambda n: f"Za {n} dni",
        "weeks": lambda n: _polish(n, "tydzień", "tygodnie", "tygodni"),
        "months": lambda n: _polish(n, "miesiąc", "miesiące", "miesięcy"),
        "years": lambda n: _polish(n, "rok", "lata", "lat"),
    },
}


def days_until(next_review_at: datetime, now: Optional[datetime] = None) -> int:
    """Whole days until a review; any part of a day counts as a full day"""
    if now is None:
        now = current_time(next_review_at)
    return math.ceil((next_review_at - now).total_seconds() / SECONDS_PER_DAY)


def describe_next_review(
    next_review_at: datetime,
    now: Optional[datetime] = None,
    locale: Optional[str] = None
) -> str:
    """
    Describe how far away a review is, e.g. "Tomorrow" or "In 2 weeks".

    Weeks, months (30 days) and years (365 days) are rounded down.

    Args:
        next_review_at: When the card is next due
        now: Reference time (defaults to the current time)
        locale: "en" or "pl" (defaults to settings.locale)
    """
    locale = locale or settings.locale
    labels = LABELS.get(locale)
    if labels is None:
        raise InvalidInputError(f"Unsupported locale {locale!r}", locale)

    diff_days = days_until(next_review_at, now)

    if diff_days <= 0:
        return labels["today"]()
    elif diff_days == 1:
        return labels["tomorrow"]()
    elif diff_days < 7:
        return labels["days"](diff_days)
    elif diff_days < 30:
        return labels["weeks"](diff_days // 7)
    elif diff_days < 365:
        return labels["months"](diff_days // 30)
    else:
        return labels["years"](diff_days // 365)
