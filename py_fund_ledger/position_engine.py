import logging
from decimal import Decimal
from typing import Dict, Iterable, Optional

from .ledger import sort_by_date
from .types import PositionSnapshot, Transaction, TransactionKind

ZERO = Decimal("0")


class AverageCostBook:
    """
    Weighted-average cost replay.

    All held units of an instrument share one blended cost. A sale is
    measured against the average cost at that instant, then removes its
    share of the cost basis. Sales larger than the holding are clamped.
    """

    def __init__(self, warn_oversell: bool = True):
        self.positions: Dict[str, PositionSnapshot] = {}
        self.warn_oversell = warn_oversell

    def _position(self, instrument: str) -> PositionSnapshot:
        if instrument not in self.positions:
            self.positions[instrument] = PositionSnapshot(instrument=instrument)
        return self.positions[instrument]

    def apply(self, t: Transaction) -> Decimal:
        """ Applies one transaction, returns the PnL it realized (0 for buys). """
        pos = self._position(t.instrument)

        if t.kind == TransactionKind.BUY:
            pos.units += t.units
            pos.cost_basis += t.units * t.price
            pos.avg_cost = pos.cost_basis / pos.units if pos.units > 0 else ZERO
            return ZERO

        sell_qty = min(t.units, pos.units)
        if sell_qty < t.units:
            pos.unfilled_units += t.units - sell_qty
            if self.warn_oversell:
                logging.warning(
                    f"SELL {t.units} {t.instrument} on {t.date} exceeds holding of {pos.units}. "
                    f"Only {sell_qty} units realized."
                )

        avg_before = pos.cost_basis / pos.units if pos.units > 0 else ZERO
        realized = sell_qty * (t.price - avg_before)
        pos.realized_pnl += realized
        pos.units -= sell_qty
        pos.cost_basis -= sell_qty * avg_before
        # Re-derived from the totals so rounding cannot accumulate in avg_cost
        pos.avg_cost = pos.cost_basis / pos.units if pos.units > 0 else ZERO
        if pos.units == 0:
            pos.cost_basis = ZERO
        return realized


def compute_positions(
    transactions: Iterable[Transaction], cutoff: Optional[str] = None
) -> Dict[str, PositionSnapshot]:
    """
    Replays the log in date order and returns instrument -> PositionSnapshot.

    Args:
        transactions: The full log, any order.
        cutoff: Optional ISO date; records dated after it are ignored.
    """
    book = AverageCostBook()
    for t in sort_by_date(transactions):
        if cutoff is not None and t.date > cutoff:
            continue
        if not t.instrument:
            continue
        book.apply(t)
    return book.positions
