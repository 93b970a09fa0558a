"""Field transformers for raw CSV cell values.

Each transformer is a pure function of a single raw value. None of them
raise: unparseable input maps to a neutral value (epoch zero, long,
zero, futures) that the validator or the defaults then deal with.
"""

import re
from datetime import datetime, UTC
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional

from dateutil import parser as date_parser

from tradejournal.domain.entities import EPOCH_ZERO, LONG, SHORT, TradeDate

LONG_SYNONYMS = frozenset({"buy", "long", "b", "l", "1", "true", "bullish", "up"})
SHORT_SYNONYMS = frozenset({"sell", "short", "s", "-1", "false", "bearish", "down"})

MARKET_TYPE_SYNONYMS = {
    "fx": "forex",
    "for": "forex",
    "forex": "forex",
    "fut": "futures",
    "futures": "futures",
    "stock": "stocks",
    "stocks": "stocks",
    "equity": "stocks",
    "equities": "stocks",
    "crypto": "crypto",
    "cryptocurrency": "crypto",
    "btc": "crypto",
    "opt": "options",
    "options": "options",
}
DEFAULT_MARKET_TYPE = "futures"

_NON_NUMERIC = re.compile(r"[^\d.,\-]")
_NUMERIC_PREFIX = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")


def _split_date(value: str, separator: str) -> Optional[list[int]]:
    parts = value.split(separator)
    if len(parts) != 3:
        return None
    try:
        return [int(part) for part in parts]
    except ValueError:
        return None


def _month_day_year(value: str) -> Optional[datetime]:
    parts = _split_date(value, "/")
    if parts is None:
        return None
    month, day, year = parts
    return datetime(year, month, day, tzinfo=UTC)


def _year_month_day(value: str) -> Optional[datetime]:
    parts = _split_date(value, "-")
    if parts is None:
        return None
    year, month, day = parts
    return datetime(year, month, day, tzinfo=UTC)


def _day_month_year_dash(value: str) -> Optional[datetime]:
    parts = _split_date(value, "-")
    if parts is None:
        return None
    day, month, year = parts
    return datetime(year, month, day, tzinfo=UTC)


def _day_month_year_dot(value: str) -> Optional[datetime]:
    parts = _split_date(value, ".")
    if parts is None:
        return None
    day, month, year = parts
    return datetime(year, month, day, tzinfo=UTC)


# Priority order matters: MM/DD/YYYY wins over any other reading.
DATE_FORMATS: tuple[Callable[[str], Optional[datetime]], ...] = (
    _month_day_year,
    _year_month_day,
    _day_month_year_dash,
    _day_month_year_dot,
)

# Two unrelated dates; a complete cell parses identically against both
_FALLBACK_DEFAULTS = (
    datetime(2000, 1, 1),
    datetime(2001, 2, 2),
)


def transform_date(value: Optional[str]) -> TradeDate:
    """Parse a date cell into a TradeDate.

    Tries MM/DD/YYYY, YYYY-MM-DD, DD-MM-YYYY and DD.MM.YYYY in that order,
    then falls back to a generic parse. Dates without a timezone are UTC.
    A generic parse that would need the year, month or day filled in is
    rejected rather than completed from the current date.

    Returns:
        TradeDate, or EPOCH_ZERO if the value cannot be parsed
    """
    if not value or not value.strip():
        return EPOCH_ZERO
    value = value.strip()

    for date_format in DATE_FORMATS:
        try:
            parsed = date_format(value)
        except (ValueError, OverflowError):
            continue
        if parsed is not None:
            return TradeDate.from_datetime(parsed)

    try:
        parsed = date_parser.parse(value, default=_FALLBACK_DEFAULTS[0])
        check = date_parser.parse(value, default=_FALLBACK_DEFAULTS[1])
    except (ValueError, OverflowError, TypeError):
        return EPOCH_ZERO
    if parsed != check:
        # A part of the date was missing from the cell
        return EPOCH_ZERO
    return TradeDate.from_datetime(parsed)


def transform_type(value: Optional[str]) -> str:
    """Normalize a trade direction cell to 'long' or 'short'.

    Unrecognized values default to 'long'.
    """
    normalized = (value or "").strip().lower()
    if normalized in LONG_SYNONYMS:
        return LONG
    if normalized in SHORT_SYNONYMS:
        return SHORT
    return LONG


def transform_numeric(value: Optional[str]) -> Decimal:
    """Parse a numeric cell into a Decimal.

    Handles various formats:
    - "123.45"
    - "$1,234.56" (the last separator is the decimal point)
    - "12,5" (comma as decimal separator)
    - "-0.75"

    Returns:
        Decimal value, or zero for empty or unparseable input
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, (int, Decimal)):
        return Decimal(value)

    normalized = _NON_NUMERIC.sub("", str(value)).replace(",", ".")
    parts = normalized.split(".")
    if len(parts) > 2:
        decimal_part = parts.pop()
        normalized = f"{''.join(parts)}.{decimal_part}"

    match = _NUMERIC_PREFIX.match(normalized)
    if match is None:
        return Decimal("0")
    try:
        return Decimal(match.group(0))
    except InvalidOperation:
        return Decimal("0")


def transform_market_type(value: Optional[str]) -> str:
    """Normalize a market type cell to forex, futures, stocks, crypto or options.

    Unrecognized values default to 'futures'.
    """
    normalized = (value or "").strip().lower()
    return MARKET_TYPE_SYNONYMS.get(normalized, DEFAULT_MARKET_TYPE)
