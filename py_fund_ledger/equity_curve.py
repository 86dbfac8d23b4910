from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional

from .ledger import sort_by_date
from .periods import downsample, filter_dates
from .types import EquityPoint, Period, Transaction, TransactionKind

EQUITY_POINT_CAP = 220


def build_equity_curve(
    transactions: Iterable[Transaction],
    prices: Mapping[str, Decimal],
    period: Period = Period.ALL,
    today: Optional[date] = None,
    cap: int = EQUITY_POINT_CAP,
) -> List[EquityPoint]:
    """
    Mark-to-market value of the holdings after each transaction date.

    Every date is valued with the CURRENT price map, so the curve shows what
    today's prices say each past position would be worth. Dates where no held
    instrument has a price are skipped instead of producing a false zero.
    """
    sorted_txns = sort_by_date(transactions)
    if not sorted_txns:
        return []

    all_dates = sorted({t.date for t in sorted_txns})
    dates = filter_dates(all_dates, period, today)

    holdings: Dict[str, Decimal] = defaultdict(Decimal)
    idx = 0
    points = []

    for d in dates:
        while idx < len(sorted_txns) and sorted_txns[idx].date <= d:
            t = sorted_txns[idx]
            delta = t.units if t.kind == TransactionKind.BUY else -t.units
            holdings[t.instrument] += delta
            idx += 1

        total = Decimal("0")
        used = False
        for code, units in holdings.items():
            if not units:
                continue
            price = prices.get(code)
            if price is not None:
                total += units * price
                used = True

        if used:
            points.append(EquityPoint(date=d, value=total))

    return downsample(points, cap)
