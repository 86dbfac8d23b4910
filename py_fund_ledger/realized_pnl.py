from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional

from .ledger import sort_by_date
from .periods import downsample, filter_dates
from .position_engine import AverageCostBook
from .types import Period, PnlBar, PnlMode, Transaction, TransactionKind

PNL_BAR_CAP = 60


def realized_by_date(transactions: Iterable[Transaction]) -> Dict[str, Decimal]:
    """
    Realized PnL per sale date (not cumulative).
    Uses the same weighted-average replay as compute_positions.
    """
    # Oversells are already reported by compute_positions
    book = AverageCostBook(warn_oversell=False)
    pnl_day: Dict[str, Decimal] = defaultdict(Decimal)

    for t in sort_by_date(transactions):
        realized = book.apply(t)
        if t.kind == TransactionKind.SELL:
            pnl_day[t.date] += realized

    return dict(pnl_day)


def month_key(iso_date: str) -> str:
    return (iso_date or "")[:7]  # YYYY-MM


def monthly_totals(by_date: Mapping[str, Decimal]) -> Dict[str, Decimal]:
    months: Dict[str, Decimal] = defaultdict(Decimal)
    for d in sorted(by_date):
        months[month_key(d)] += by_date[d]
    return dict(months)


def pnl_bars(
    by_date: Mapping[str, Decimal],
    mode: PnlMode = PnlMode.MONTHLY,
    period: Period = Period.ONE_YEAR,
    today: Optional[date] = None,
    cap: int = PNL_BAR_CAP,
) -> List[PnlBar]:
    """
    Bars for the realized PnL chart.

    Daily: dates inside the period (all dates if none are), downsampled to `cap`.
    Monthly: the most recent 1/3/12 months for 1M/3M/1Y, every month for ALL.
    """
    keys = sorted(by_date)
    if not keys:
        return []

    if mode == PnlMode.DAILY:
        selected = filter_dates(keys, period, today)
        bars = [PnlBar(label=k, value=by_date[k]) for k in selected]
        return downsample(bars, cap)

    months = monthly_totals(by_date)
    month_keys = sorted(months)
    if period.months is not None:
        month_keys = month_keys[-period.months:]
    return [PnlBar(label=k, value=months[k]) for k in month_keys]
