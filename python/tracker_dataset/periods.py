"""Calculation period resolution.

Maps a symbolic period code and a reference date to a half-open
[start, end) range of local-midnight timestamps.
"""

import datetime

from ._types import SECONDS_PER_DAY, Period, parse_period
from .errors import InvalidPeriod

QUARTER_MONTHS = 3


def first_of_month(year: int, month: int) -> datetime.date:
    """First day of a month, where month may run past 12 or below 1."""
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return datetime.date(year, month, 1)


def quarter_start_month(month: int) -> int:
    """First month (1, 4, 7 or 10) of the quarter containing month."""
    return month - (month - 1) % QUARTER_MONTHS


def period_dates(
    period: Period, today: datetime.date
) -> tuple[datetime.date, datetime.date]:
    """Return the (first, after-last) calendar dates covered by a period."""
    y, m = today.year, today.month
    match period:
        case Period.NEXT_DAY:
            return today + datetime.timedelta(days=1), today + datetime.timedelta(days=2)
        case Period.THIS_DAY:
            return today, today + datetime.timedelta(days=1)
        case Period.NEXT_MONTH:
            return first_of_month(y, m + 1), first_of_month(y, m + 2)
        case Period.THIS_MONTH:
            return first_of_month(y, m), first_of_month(y, m + 1)
        case Period.NEXT_QUARTER:
            q = quarter_start_month(m)
            return (
                first_of_month(y, q + QUARTER_MONTHS),
                first_of_month(y, q + 2 * QUARTER_MONTHS),
            )
        case Period.THIS_QUARTER:
            q = quarter_start_month(m)
            return first_of_month(y, q), first_of_month(y, q + QUARTER_MONTHS)
        case Period.NEXT_YEAR:
            return datetime.date(y + 1, 1, 1), datetime.date(y + 2, 1, 1)
        case Period.THIS_YEAR:
            return datetime.date(y, 1, 1), datetime.date(y + 1, 1, 1)
        case Period.TWO_YEARS:
            return datetime.date(y, 1, 1), datetime.date(y + 2, 1, 1)
        case Period.TEN_YEARS:
            return datetime.date(y, 1, 1), datetime.date(y + 10, 1, 1)
        case _:
            raise InvalidPeriod(period)


def local_midnight(d: datetime.date, tzinfo: datetime.tzinfo) -> datetime.datetime:
    """Midnight at the start of d in tzinfo."""
    return datetime.datetime(d.year, d.month, d.day, tzinfo=tzinfo)


def resolve_period(
    code, today: datetime.date, tzinfo: datetime.tzinfo = datetime.timezone.utc
) -> tuple[datetime.datetime, datetime.datetime]:
    """Resolve a period code against today into a [start, end) range.

    Both timestamps fall on local midnight in tzinfo. Raises InvalidPeriod
    for unknown codes or an empty range.
    """
    period = parse_period(code)
    first, after_last = period_dates(period, today)
    start = local_midnight(first, tzinfo)
    end = local_midnight(after_last, tzinfo)
    if start >= end:
        raise InvalidPeriod(code)
    return start, end


def day_count(start: datetime.datetime, end: datetime.datetime) -> int:
    """Number of whole days in [start, end)."""
    return int((end - start).total_seconds()) // SECONDS_PER_DAY
