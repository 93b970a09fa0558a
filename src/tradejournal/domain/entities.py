"""Domain model entities for tradejournal.

These are pure data classes representing business concepts, independent of
database schema. Monetary amounts and prices are Decimals; trade dates are
stored as seconds since the epoch plus a sub-second remainder.
"""

from dataclasses import dataclass, field
from datetime import datetime, UTC
from decimal import Decimal
from enum import Enum
from typing import Optional


LONG = "long"
SHORT = "short"
TRADE_TYPES = (LONG, SHORT)

MARKET_TYPES = ("forex", "futures", "stocks", "crypto", "options")

ACCOUNT_TYPES = ("real", "demo", "prop")


@dataclass(frozen=True, order=True)
class TradeDate:
    """Point in time as seconds since the epoch plus nanoseconds."""

    seconds: int
    nanoseconds: int = 0

    @property
    def is_set(self) -> bool:
        """False for the epoch-zero sentinel used for unparseable dates."""
        return self.seconds != 0 or self.nanoseconds != 0

    def to_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.seconds, UTC).replace(
            microsecond=self.nanoseconds // 1000
        )

    @classmethod
    def from_datetime(cls, value: datetime) -> "TradeDate":
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        seconds = int(value.replace(microsecond=0).timestamp())
        return cls(seconds=seconds, nanoseconds=value.microsecond * 1000)


EPOCH_ZERO = TradeDate(0, 0)


@dataclass(frozen=True)
class Trade:
    """Trade record as stored on an account.

    Candidate trades produced by the import pipeline use the same shape.
    """

    id: str
    symbol: str
    date: TradeDate
    trade_type: str
    market_type: str
    entry: Decimal
    exit: Decimal
    size: Decimal
    pnl: Decimal
    commission: Decimal = Decimal("0")
    tp: Optional[Decimal] = None
    sl: Optional[Decimal] = None
    tick_value: Optional[Decimal] = None
    pip_value: Optional[Decimal] = None
    notes: Optional[str] = None
    exit_time: str = "00:00:00"
    followed_rules: tuple[str, ...] = ()
    created_at: int = 0


@dataclass(frozen=True)
class Account:
    """Trading account domain entity."""

    id: str
    broker: str
    account_type: str
    balance: Decimal
    created_at: datetime
    trades: tuple[Trade, ...] = ()


@dataclass(frozen=True)
class ImportFormat:
    """Saved set of column mappings for a recurring CSV layout."""

    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class ImportFormatMapping:
    """Single column mapping of a saved import format."""

    id: int
    format_id: int
    csv_column_name: str
    target_field: str


@dataclass(frozen=True)
class ImportDefaults:
    """Values used for numeric fields that are not mapped."""

    commission: Decimal = Decimal("0")
    tick_value: Decimal = Decimal("5")
    pip_value: Decimal = Decimal("10")
    market_type: str = "futures"


@dataclass(frozen=True)
class RowValidationError:
    """Violations found for one CSV row (row number as displayed)."""

    row: int
    errors: tuple[str, ...]


@dataclass(frozen=True)
class ValidationResult:
    """Partition of candidate trades into valid trades and row errors."""

    valid_trades: tuple[Trade, ...] = ()
    errors: tuple[RowValidationError, ...] = ()

    @property
    def total_pnl(self) -> Decimal:
        return sum((trade.pnl for trade in self.valid_trades), Decimal("0"))


@dataclass(frozen=True)
class ImportResult:
    """Outcome of committing valid trades to accounts."""

    imported: int
    accounts_updated: tuple[str, ...]
    total_pnl: Decimal
    trades_created: int = 0


class ImportStep(str, Enum):
    """Progression of an import session."""

    UPLOAD = "upload"
    MAP = "map"
    VALIDATE = "validate"
    CONFIRM = "confirm"
    DONE = "done"


@dataclass(frozen=True)
class Streaks:
    """Longest and current runs of winning and losing trades."""

    longest_win: int = 0
    longest_loss: int = 0
    current: int = 0


@dataclass(frozen=True)
class TradeStats:
    """Aggregated performance statistics for a set of trades."""

    total_trades: int
    winning_trades: int
    losing_trades: int
    win_rate: float
    profit_factor: float
    net_pnl: Decimal
    today_pnl: Decimal
    average_win: Decimal
    average_loss: Decimal
    max_drawdown: float
    streaks: Streaks = field(default_factory=Streaks)
