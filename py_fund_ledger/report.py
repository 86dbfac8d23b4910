from datetime import date
from decimal import Decimal
from typing import Iterable, Mapping, Optional

import pandas as pd

from .config_loader import LedgerConfig
from .drawdown import compute_drawdown, equity_frame, max_drawdown
from .equity_curve import build_equity_curve
from .number_parser import fmt2, fmt4
from .position_engine import compute_positions
from .realized_pnl import pnl_bars, realized_by_date
from .types import Period, PnlMode, PortfolioReport, Transaction
from .valuation import portfolio_totals, value_positions


def build_report(
    transactions: Iterable[Transaction],
    prices: Mapping[str, Decimal],
    period: Optional[Period] = None,
    pnl_mode: Optional[PnlMode] = None,
    today: Optional[date] = None,
    config: Optional[LedgerConfig] = None,
) -> PortfolioReport:
    """
    Computes every derived structure from one snapshot of the log and prices.
    Pure: nothing is cached between calls.
    """
    config = config or LedgerConfig()
    period = period or config.default_period
    pnl_mode = pnl_mode or config.default_pnl_mode
    transactions = list(transactions)

    positions = compute_positions(transactions)
    rows = value_positions(positions, prices)
    equity = build_equity_curve(transactions, prices, period, today, config.equity_point_cap)
    drawdown = compute_drawdown(equity)

    return PortfolioReport(
        positions=positions,
        rows=rows,
        totals=portfolio_totals(rows),
        equity=equity,
        drawdown=drawdown,
        max_drawdown=max_drawdown(drawdown),
        pnl_bars=pnl_bars(realized_by_date(transactions), pnl_mode, period, today, config.pnl_bar_cap),
    )


def journal_frame(report: PortfolioReport) -> pd.DataFrame:
    """ Equity curve with running peak and drawdown, one row per equity point. """
    return equity_frame(report.equity)


def positions_frame(report: PortfolioReport) -> pd.DataFrame:
    """ Valuation rows as display text; unknown values render as '-'. """
    return pd.DataFrame([{
        'Instrument': r.instrument,
        'Units': fmt4(r.units),
        'Avg_Cost': fmt4(r.avg_cost),
        'Cost': fmt2(r.cost_basis),
        'Price': fmt4(r.price),
        'Value': fmt2(r.current_value),
        'Realized': fmt2(r.realized_pnl),
        'Unrealized': fmt2(r.unrealized_pnl),
        'Total_PnL': fmt2(r.total_pnl),
        'Return_Pct': fmt2(r.return_pct),
    } for r in report.rows])
