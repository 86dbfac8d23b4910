import math
from datetime import date
from typing import List, Optional, Sequence, TypeVar

from .types import Period

T = TypeVar("T")


def within_period(iso_date: str, period: Period, today: Optional[date] = None) -> bool:
    """
    True if iso_date falls in the trailing window of `period` ending today.
    The date exactly `period.days` back is already outside (a day is measured
    from its midnight to now). Future dates are inside any window; unparseable
    dates are outside.
    """
    if period.days is None:
        return True
    try:
        d = date.fromisoformat(iso_date)
    except ValueError:
        return False
    today = today or date.today()
    return (today - d).days < period.days


def filter_dates(dates: Sequence[str], period: Period, today: Optional[date] = None) -> List[str]:
    """ Dates inside the window, or all of them if the window misses every date. """
    selected = [d for d in dates if within_period(d, period, today)]
    return selected or list(dates)


def downsample(items: Sequence[T], cap: int) -> List[T]:
    """ Keeps every ceil(n/cap)-th item starting with the first, so len <= cap. """
    if cap <= 0 or len(items) <= cap:
        return list(items)
    step = math.ceil(len(items) / cap)
    return list(items[::step])
