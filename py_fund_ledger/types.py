from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional


class TransactionKind(Enum):
    BUY = "BUY"
    SELL = "SELL"


class Period(Enum):
    ONE_MONTH = "1M"
    THREE_MONTHS = "3M"
    ONE_YEAR = "1Y"
    ALL = "ALL"

    @property
    def days(self) -> Optional[int]:
        """ Trailing window length in days, None for unbounded. """
        return {"1M": 30, "3M": 90, "1Y": 365}.get(self.value)

    @property
    def months(self) -> Optional[int]:
        """ Number of most recent months kept in monthly PnL mode. """
        return {"1M": 1, "3M": 3, "1Y": 12}.get(self.value)


class PnlMode(Enum):
    DAILY = "daily"
    MONTHLY = "monthly"


# --- Input ---

@dataclass(frozen=True)
class Transaction:
    id: str
    date: str  # ISO YYYY-MM-DD
    instrument: str  # normalized code, see ledger.normalize_instrument
    kind: TransactionKind
    units: Decimal
    price: Decimal  # per unit


# --- Derived ---

@dataclass
class PositionSnapshot:
    instrument: str
    units: Decimal = Decimal("0")
    cost_basis: Decimal = Decimal("0")
    avg_cost: Decimal = Decimal("0")
    realized_pnl: Decimal = Decimal("0")
    # Sell units dropped because they exceeded the holding at sale time
    unfilled_units: Decimal = Decimal("0")


@dataclass
class ValuationRow:
    """ A PositionSnapshot valued at the current price. None means unknown. """
    instrument: str
    units: Decimal
    cost_basis: Decimal
    avg_cost: Decimal
    realized_pnl: Decimal
    price: Optional[Decimal] = None
    current_value: Optional[Decimal] = None
    unrealized_pnl: Optional[Decimal] = None
    total_pnl: Optional[Decimal] = None
    return_pct: Optional[Decimal] = None


@dataclass
class PortfolioTotals:
    total_cost: Decimal
    total_value: Decimal
    total_realized: Decimal
    pnl: Optional[Decimal]
    pct: Optional[Decimal]
    any_price: bool


@dataclass
class EquityPoint:
    date: str
    value: Decimal


@dataclass
class DrawdownPoint:
    date: str
    percent: float  # <= 0


@dataclass
class PnlBar:
    label: str  # YYYY-MM-DD (daily) or YYYY-MM (monthly)
    value: Decimal


@dataclass
class PortfolioReport:
    positions: Dict[str, PositionSnapshot]
    rows: List[ValuationRow]
    totals: PortfolioTotals
    equity: List[EquityPoint]
    drawdown: List[DrawdownPoint]
    max_drawdown: float
    pnl_bars: List[PnlBar] = field(default_factory=list)


# --- Errors ---

class FundLedgerError(Exception):
    pass


class InvalidTransactionError(FundLedgerError):
    """ Raised when a manually entered transaction fails validation. """
    pass
