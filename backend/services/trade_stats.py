"""Trade analytics: aggregate statistics, daily widget numbers, date groups.

All functions are pure computation over a snapshot of journal entries — no
I/O, no database access, no shared state. Entries may be ORM rows or plain
mappings with the same field names.
"""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Any

import numpy as np

from backend.utils.constants import DATE_GROUPS, START_LABEL, UNKNOWN_PAIR


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class CurvePoint:
    """One point of the equity curve."""
    label: str
    period_pnl: float
    cumulative_equity: float
    drawdown_percent: float = 0.0


@dataclass
class PairStats:
    pair: str
    count: int
    pnl: float
    win_rate: float
    profit_factor: float


@dataclass
class DirectionStats:
    count: int = 0
    pnl: float = 0.0
    win_rate: float = 0.0


@dataclass
class AggregateStats:
    """Aggregate performance over one trade set."""
    total_trades: int = 0
    wins: int = 0
    losses: int = 0
    breakevens: int = 0
    win_rate: float = 0.0
    net_pnl: float = 0.0
    gross_profit: float = 0.0
    gross_loss: float = 0.0
    profit_factor: float = 0.0
    expectancy: float = 0.0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    best_trade: float = 0.0
    worst_trade: float = 0.0
    max_drawdown: float = 0.0
    max_drawdown_percent: float = 0.0
    pnl_curve: list[CurvePoint] = field(default_factory=list)
    pair_stats: list[PairStats] = field(default_factory=list)
    long_stats: DirectionStats = field(default_factory=DirectionStats)
    short_stats: DirectionStats = field(default_factory=DirectionStats)


@dataclass
class DailyStats:
    """Today's numbers for the dashboard widget (outcome based)."""
    pnl: float = 0.0
    wins: int = 0
    losses: int = 0
    total_trades: int = 0
    win_rate: int = 0


@dataclass
class DateGroup:
    label: str  # "TODAY", "YESTERDAY", "THIS_WEEK", "OLDER"
    entries: list[Any]
    total_pnl: float
    wins: int
    losses: int


# ---------------------------------------------------------------------------
# Field access helpers
# ---------------------------------------------------------------------------

def _get(entry: Any, name: str, default: Any = None) -> Any:
    if isinstance(entry, Mapping):
        return entry.get(name, default)
    return getattr(entry, name, default)


def _pnl(entry: Any) -> float:
    value = _get(entry, "pnl")
    return float(value) if value is not None else 0.0


def _timestamp(entry: Any) -> datetime:
    """created_at as an aware datetime; naive values are taken as UTC."""
    value = _get(entry, "created_at")
    if value is None:
        return datetime.min.replace(tzinfo=timezone.utc)
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def _is_trade(entry: Any) -> bool:
    return _get(entry, "type", "trade") == "trade"


def _ratio(profit: float, loss: float) -> float:
    if loss > 0:
        return profit / loss
    return math.inf if profit > 0 else 0.0


def _percent(part: float, whole: float) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def _side(entry: Any) -> str:
    # Missing direction is long, any other non-long value is short
    return "long" if (_get(entry, "direction") or "long") == "long" else "short"


def _direction_stats(trades: list[Any], direction: str) -> DirectionStats:
    pnls = [_pnl(t) for t in trades if _side(t) == direction]
    wins = sum(1 for p in pnls if p > 0)
    return DirectionStats(count=len(pnls), pnl=sum(pnls), win_rate=_percent(wins, len(pnls)))


def _drawdowns(equity: list[float]) -> tuple[np.ndarray, np.ndarray]:
    """Absolute and percent drawdown at each point against the running peak."""
    values = np.asarray(equity, dtype=float)
    peaks = np.maximum.accumulate(values)
    drawdown = peaks - values
    percent = np.divide(
        drawdown * 100, peaks, out=np.zeros_like(drawdown), where=peaks > 0
    )
    return drawdown, percent


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def aggregate_trades(entries: Iterable[Any], starting_balance: float = 0.0) -> AggregateStats:
    """Reduce a trade log to aggregate statistics and an equity curve.

    Wins and losses are classified by the sign of ``pnl``; the stored
    ``outcome`` label is display metadata and is ignored here. Pending trades
    are included like any other trade.

    Args:
        entries: Journal entries in any order. Only ``type == "trade"`` is used.
        starting_balance: Account equity seeding the curve.
    """
    start = CurvePoint(label=START_LABEL, period_pnl=0.0, cumulative_equity=starting_balance)
    trades = [e for e in entries if _is_trade(e)]
    if not trades:
        return AggregateStats(pnl_curve=[start])

    # sorted() is stable, so equal timestamps keep their input order
    trades = sorted(trades, key=_timestamp)

    wins = losses = breakevens = 0
    net_pnl = gross_profit = gross_loss = 0.0
    equity = starting_balance
    labels = [START_LABEL]
    period = [0.0]
    cumulative = [starting_balance]
    pairs: dict[str, dict[str, float]] = {}

    for trade in trades:
        pnl = _pnl(trade)
        net_pnl += pnl
        equity += pnl

        if pnl > 0:
            wins += 1
            gross_profit += pnl
        elif pnl < 0:
            losses += 1
            gross_loss += abs(pnl)
        else:
            breakevens += 1

        created = _get(trade, "created_at")
        labels.append(_timestamp(trade).date().isoformat() if created is not None else "")
        period.append(pnl)
        cumulative.append(equity)

        bucket = pairs.setdefault(
            _get(trade, "pair") or UNKNOWN_PAIR,
            {"count": 0, "pnl": 0.0, "wins": 0, "gross_profit": 0.0, "gross_loss": 0.0},
        )
        bucket["count"] += 1
        bucket["pnl"] += pnl
        if pnl > 0:
            bucket["wins"] += 1
            bucket["gross_profit"] += pnl
        elif pnl < 0:
            bucket["gross_loss"] += abs(pnl)

    drawdown, drawdown_pct = _drawdowns(cumulative)
    curve = [
        CurvePoint(label=lbl, period_pnl=p, cumulative_equity=eq, drawdown_percent=float(dd))
        for lbl, p, eq, dd in zip(labels, period, cumulative, drawdown_pct)
    ]

    pair_stats = sorted(
        (
            PairStats(
                pair=name,
                count=int(b["count"]),
                pnl=b["pnl"],
                win_rate=_percent(b["wins"], b["count"]),
                profit_factor=_ratio(b["gross_profit"], b["gross_loss"]),
            )
            for name, b in pairs.items()
        ),
        key=lambda s: s.pnl,
        reverse=True,
    )

    total = len(trades)
    pnls = period[1:]
    return AggregateStats(
        total_trades=total,
        wins=wins,
        losses=losses,
        breakevens=breakevens,
        win_rate=_percent(wins, total),
        net_pnl=net_pnl,
        gross_profit=gross_profit,
        gross_loss=gross_loss,
        profit_factor=_ratio(gross_profit, gross_loss),
        expectancy=net_pnl / total,
        avg_win=gross_profit / wins if wins else 0.0,
        avg_loss=gross_loss / losses if losses else 0.0,
        best_trade=max(pnls),
        worst_trade=min(pnls),
        max_drawdown=float(drawdown.max()),
        max_drawdown_percent=float(drawdown_pct.max()),
        pnl_curve=curve,
        pair_stats=pair_stats,
        long_stats=_direction_stats(trades, "long"),
        short_stats=_direction_stats(trades, "short"),
    )


# ---------------------------------------------------------------------------
# Dashboard helpers (outcome based)
# ---------------------------------------------------------------------------

def _outcome_counts(entries: list[Any]) -> tuple[int, int]:
    wins = sum(1 for e in entries if _get(e, "outcome") == "win")
    losses = sum(1 for e in entries if _get(e, "outcome") == "loss")
    return wins, losses


def daily_stats(entries: Iterable[Any], today: date) -> DailyStats:
    """PnL and win rate for trades logged on ``today`` (UTC date).

    Unlike aggregate_trades, wins/losses here come from the stored outcome,
    so breakeven and pending trades are left out of the win rate.
    """
    todays = [e for e in entries if _is_trade(e) and _timestamp(e).date() == today]
    wins, losses = _outcome_counts(todays)
    decided = wins + losses
    win_rate = math.floor(wins / decided * 100 + 0.5) if decided else 0
    return DailyStats(
        pnl=sum(_pnl(e) for e in todays),
        wins=wins,
        losses=losses,
        total_trades=decided,
        win_rate=win_rate,
    )


def _date_bucket(day: date, today: date) -> str:
    if day == today:
        return "TODAY"
    if day == today - timedelta(days=1):
        return "YESTERDAY"
    if day >= today - timedelta(days=7):
        return "THIS_WEEK"
    return "OLDER"


def group_by_date(entries: Iterable[Any], today: date) -> list[DateGroup]:
    """Bucket entries into TODAY / YESTERDAY / THIS_WEEK / OLDER, skipping empty buckets."""
    buckets: dict[str, list[Any]] = {label: [] for label in DATE_GROUPS}
    for entry in entries:
        buckets[_date_bucket(_timestamp(entry).date(), today)].append(entry)

    groups = []
    for label, members in buckets.items():
        if not members:
            continue
        wins, losses = _outcome_counts(members)
        groups.append(DateGroup(
            label=label,
            entries=members,
            total_pnl=sum(_pnl(e) for e in members),
            wins=wins,
            losses=losses,
        ))
    return groups
