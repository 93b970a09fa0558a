"""Trade statistics domain service."""

from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Optional, Sequence

from tradejournal.database.base import Database
from tradejournal.domain.entities import Streaks, Trade, TradeStats
from tradejournal.domain.errors import NotFoundError, account_not_found

ZERO = Decimal("0")


def _chronological(trades: Sequence[Trade]) -> list[Trade]:
    return sorted(trades, key=lambda t: (t.date, t.created_at))


def win_rate(trades: Sequence[Trade]) -> float:
    """Percentage of trades with a positive P&L."""
    if not trades:
        return 0.0
    winners = sum(1 for t in trades if t.pnl > 0)
    return winners / len(trades) * 100


def profit_factor(trades: Sequence[Trade]) -> float:
    """Gross profit divided by gross loss.

    Break-even trades count as losses. Returns inf when there are wins but
    no losses, and 0 when there is neither.
    """
    total_wins = sum((t.pnl for t in trades if t.pnl > 0), ZERO)
    total_losses = sum((abs(t.pnl) for t in trades if t.pnl <= 0), ZERO)
    if total_losses > 0:
        return float(total_wins / total_losses)
    return float("inf") if total_wins > 0 else 0.0


def net_pnl(trades: Sequence[Trade]) -> Decimal:
    return sum((t.pnl for t in trades), ZERO)


def pnl_on(trades: Sequence[Trade], day: date) -> Decimal:
    """Summed P&L of trades dated on the given (UTC) day."""
    return sum((t.pnl for t in trades if t.date.to_datetime().date() == day), ZERO)


def max_drawdown(trades: Sequence[Trade]) -> float:
    """Largest drop from a running P&L peak, as a percentage of that peak.

    The running balance starts at zero, so drawdowns only count once the
    cumulative P&L has been positive.
    """
    peak = ZERO
    running = ZERO
    deepest = 0.0
    for trade in _chronological(trades):
        running += trade.pnl
        if running > peak:
            peak = running
        if peak > 0:
            drawdown = float((peak - running) / peak * 100)
            deepest = max(deepest, drawdown)
    return deepest


def streaks(trades: Sequence[Trade]) -> Streaks:
    """Longest winning and losing runs plus the current run.

    The current run is positive for consecutive wins and negative for
    consecutive losses (break-even trades count as losses).
    """
    longest_win = longest_loss = current = 0
    for trade in _chronological(trades):
        if trade.pnl > 0:
            current = current + 1 if current > 0 else 1
            longest_win = max(longest_win, current)
        else:
            current = current - 1 if current < 0 else -1
            longest_loss = max(longest_loss, -current)
    return Streaks(longest_win=longest_win, longest_loss=longest_loss, current=current)


def compute_stats(trades: Sequence[Trade], today: Optional[date] = None) -> TradeStats:
    """Compute all statistics for a set of trades."""
    if today is None:
        today = datetime.now(UTC).date()

    winners = [t for t in trades if t.pnl > 0]
    losers = [t for t in trades if t.pnl <= 0]
    average_win = net_pnl(winners) / len(winners) if winners else ZERO
    average_loss = net_pnl(losers) / len(losers) if losers else ZERO

    return TradeStats(
        total_trades=len(trades),
        winning_trades=len(winners),
        losing_trades=len(losers),
        win_rate=win_rate(trades),
        profit_factor=profit_factor(trades),
        net_pnl=net_pnl(trades),
        today_pnl=pnl_on(trades, today),
        average_win=average_win,
        average_loss=average_loss,
        max_drawdown=max_drawdown(trades),
        streaks=streaks(trades),
    )


class StatsService:
    """Service for computing account performance statistics."""

    def __init__(self, db: Database, user_id: str):
        """Initialize stats service.

        Args:
            db: Database instance
            user_id: Owner of the accounts
        """
        self.db = db
        self.user_id = user_id

    def account_stats(
        self, account_id: Optional[str] = None, today: Optional[date] = None
    ) -> TradeStats:
        """Compute statistics for one account, or across all accounts.

        Raises:
            NotFoundError: If account_id is given but not found
        """
        accounts = self.db.get_accounts(self.user_id)
        if account_id is not None:
            accounts = [acc for acc in accounts if acc.id == account_id]
            if not accounts:
                raise NotFoundError(account_not_found(account_id))

        trades = [trade for account in accounts for trade in account.trades]
        return compute_stats(trades, today=today)
