"""
Smart default dates for a new rule set.

When someone adds a rule set, pre-fill a date range that does not
collide with the existing rule sets of that type and that lines up
with calendar months where possible. The cases, in order:

1. No rule sets yet: this month through the end of the month
   11 months later (12 months in total).
2. Gap before the first rule set: end the day before it starts,
   start on the 1st of the month 11 months earlier.
3. Gap after the last rule set (or no gap selected): start on the
   1st of the month after the last one ends, run for 12 months.
4. Gap between two rule sets: fill the space between them, moving
   to a month boundary only where that stays inside the space.

All arithmetic uses plain calendar dates, so there is no timezone
or DST shift to worry about. "Today" is taken in UTC.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Iterable


ONE_DAY = timedelta(days=1)

# A default rule set covers this many calendar months
DEFAULT_SPAN_MONTHS = 12


@dataclass(frozen=True)
class TimelineGap:
    """A free stretch of the timeline picked by the user."""
    start: date
    end: date


@dataclass(frozen=True)
class DateRange:
    start_date: date
    end_date: date


def first_day_of_month(d: date) -> date:
    return d.replace(day=1)


def last_day_of_month(d: date) -> date:
    return d.replace(day=calendar.monthrange(d.year, d.month)[1])


def add_months(d: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's length."""
    month_index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _twelve_months_from(start: date) -> DateRange:
    start = first_day_of_month(start)
    end = last_day_of_month(add_months(start, DEFAULT_SPAN_MONTHS - 1))
    return DateRange(start_date=start, end_date=end)


def _after(last_end: date) -> DateRange:
    return _twelve_months_from(add_months(first_day_of_month(last_end), 1))


def calculate_default_dates(
    selected_gap: TimelineGap | None,
    rule_sets: Iterable,
    today: date | None = None,
) -> DateRange:
    """
    Suggest a start and end date for a new rule set.

    rule_sets should be the existing rule sets of the type being
    added. Soft-deleted ones are ignored.
    """
    ordered = sorted(
        (rs for rs in rule_sets if not rs.deleted),
        key=lambda rs: rs.start_date,
    )

    if not ordered:
        return _twelve_months_from(today or utc_today())

    first_start = ordered[0].start_date
    last_end = max(rs.end_date for rs in ordered)

    if selected_gap is None:
        return _after(last_end)

    if selected_gap.end < first_start:
        end = first_start - ONE_DAY
        start = first_day_of_month(add_months(end, -(DEFAULT_SPAN_MONTHS - 1)))
        return DateRange(start_date=start, end_date=end)

    if selected_gap.start > last_end:
        return _after(last_end)

    lower, upper = selected_gap.start, selected_gap.end
    for current, following in zip(ordered, ordered[1:]):
        if (selected_gap.start >= current.end_date
                and selected_gap.end <= following.start_date):
            lower = current.end_date + ONE_DAY
            upper = following.start_date - ONE_DAY
            break

    aligned_start = first_day_of_month(lower)
    aligned_end = last_day_of_month(upper)

    return DateRange(
        start_date=aligned_start if aligned_start >= lower else lower,
        end_date=aligned_end if aligned_end <= upper else upper,
    )
