from decimal import Decimal
from typing import Dict, List, Mapping, Optional

from .types import PortfolioTotals, PositionSnapshot, ValuationRow

HUNDRED = Decimal("100")


def value_position(pos: PositionSnapshot, price: Optional[Decimal]) -> ValuationRow:
    row = ValuationRow(
        instrument=pos.instrument,
        units=pos.units,
        cost_basis=pos.cost_basis,
        avg_cost=pos.avg_cost,
        realized_pnl=pos.realized_pnl,
    )
    # Unpriced stays unknown: a zero would show the position as worthless
    if price is None:
        return row

    row.price = price
    row.current_value = pos.units * price
    row.unrealized_pnl = row.current_value - pos.cost_basis
    row.total_pnl = row.unrealized_pnl + pos.realized_pnl
    if pos.cost_basis > 0:
        row.return_pct = row.total_pnl / pos.cost_basis * HUNDRED
    return row


def value_positions(
    positions: Dict[str, PositionSnapshot], prices: Mapping[str, Decimal]
) -> List[ValuationRow]:
    """ One ValuationRow per instrument, sorted by instrument code. """
    return [value_position(positions[code], prices.get(code)) for code in sorted(positions)]


def portfolio_totals(rows: List[ValuationRow]) -> PortfolioTotals:
    total_cost = sum((r.cost_basis for r in rows), Decimal("0"))
    total_value = sum((r.current_value for r in rows if r.current_value is not None), Decimal("0"))
    total_realized = sum((r.realized_pnl for r in rows), Decimal("0"))
    any_price = any(r.price is not None for r in rows)

    pnl = None
    pct = None
    if any_price:
        pnl = total_value - total_cost + total_realized
        if total_cost > 0:
            pct = pnl / total_cost * HUNDRED

    return PortfolioTotals(
        total_cost=total_cost,
        total_value=total_value,
        total_realized=total_realized,
        pnl=pnl,
        pct=pct,
        any_price=any_price,
    )
