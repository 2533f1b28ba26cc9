from __future__ import annotations

from datetime import date

from .policy_config import MAX_DAYS
from .policy_models import UnitAge


def evaluate_unit_age(updated: date, now: date, max_days: int, skip_days: int) -> UnitAge:
    """Is the unit test too old?

    A unit test runs for max_days after it was last updated, then shows as
    skipped for skip_days, then falls silent. max_days == 0 disables aging.

    now is always passed in; this function never reads a clock.
    """

    if max_days == 0:
        return UnitAge.young()

    # Negative for future dates, which are always young.
    age = (now - updated).days
    if age < max_days:
        return UnitAge.young()

    silent_age = min(max_days + skip_days, MAX_DAYS)
    skip_left = max(0, silent_age - age)
    if skip_left > 0:
        return UnitAge.aged(f"Silenced in {skip_left} days")
    return UnitAge.old()
