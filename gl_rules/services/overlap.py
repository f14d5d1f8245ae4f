"""
Rule set overlap checks.

Within one rule set type, date ranges must never share a day.
Ranges are inclusive at both ends, so a rule set ending on
2024-01-31 and another starting on 2024-01-31 overlap.
Rule sets of different types never conflict.
"""

from datetime import date
from typing import Iterable

from gl_rules.exceptions import InvalidDateRangeError
from gl_rules.models.enums import RuleSetType


def validate_date_range(start_date: date, end_date: date) -> None:
    """
    Reject ranges where the start is not strictly before the end.

    Callers run this before the overlap check. A one-day rule set
    (start == end) is rejected too.
    """
    if start_date >= end_date:
        raise InvalidDateRangeError("End date must be after start date")


def ranges_overlap(
    a_start: date, a_end: date, b_start: date, b_end: date
) -> bool:
    """Closed-interval intersection test. Symmetric in its two ranges."""
    return a_start <= b_end and a_end >= b_start


def find_overlapping(
    rule_set_type: RuleSetType,
    start_date: date,
    end_date: date,
    existing: Iterable,
    exclude_id: int | None = None,
) -> list:
    """Return the active rule sets of the same type that share a day."""
    return [
        row for row in existing
        if row.type == rule_set_type
        and not row.deleted
        and (exclude_id is None or row.id != exclude_id)
        and ranges_overlap(row.start_date, row.end_date, start_date, end_date)
    ]


def has_overlap(
    rule_set_type: RuleSetType,
    start_date: date,
    end_date: date,
    existing: Iterable,
    exclude_id: int | None = None,
) -> bool:
    """
    True if the candidate range collides with an existing rule set.

    When editing, pass the edited rule set's id as exclude_id so it
    is not compared with itself. Never raises.
    """
    return bool(
        find_overlapping(rule_set_type, start_date, end_date, existing, exclude_id)
    )
