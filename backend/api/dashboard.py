"""Dashboard API — aggregate stats, equity curve and today's numbers."""

import logging
import math
from dataclasses import asdict
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session, select

from backend.database import get_session
from backend.api.auth import user_settings
from backend.api.deps import get_current_user
from backend.models.journal_entry import JournalEntry
from backend.models.user import User
from backend.services.trade_stats import aggregate_trades, daily_stats

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


def _json_profit_factor(payload: dict) -> dict:
    """Replace an infinite profit factor with None plus an explicit flag.

    JSON has no infinity, so the flag keeps "no losing trades" distinct.
    """
    value = payload["profit_factor"]
    infinite = isinstance(value, float) and math.isinf(value)
    payload["profit_factor"] = None if infinite else value
    payload["profit_factor_infinite"] = infinite
    return payload


def _trades(session: Session, user: User) -> list[JournalEntry]:
    return list(session.exec(
        select(JournalEntry)
        .where(JournalEntry.user_id == user.id)
        .where(JournalEntry.type == "trade")
    ).all())


@router.get("/stats")
def trade_stats(
    starting_balance: float | None = Query(default=None, ge=0),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Aggregated performance across all of the user's trades."""
    if starting_balance is None:
        starting_balance = user_settings(user).starting_balance

    stats = asdict(aggregate_trades(_trades(session, user), starting_balance))
    logger.debug(f"Aggregated {stats['total_trades']} trades for '{user.username}'")

    _json_profit_factor(stats)
    for pair in stats["pair_stats"]:
        _json_profit_factor(pair)
    return stats


@router.get("/equity")
def equity_curve(
    starting_balance: float | None = Query(default=None, ge=0),
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Equity curve points only, for the chart widget."""
    if starting_balance is None:
        starting_balance = user_settings(user).starting_balance
    stats = aggregate_trades(_trades(session, user), starting_balance)
    return [
        {
            "label": p.label,
            "pnl": round(p.period_pnl, 2),
            "equity": round(p.cumulative_equity, 2),
            "drawdown_pct": round(p.drawdown_percent, 2),
        }
        for p in stats.pnl_curve
    ]


@router.get("/daily")
def today_stats(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    """Today's PnL and outcome-based win rate."""
    today = datetime.now(timezone.utc).date()
    return asdict(daily_stats(_trades(session, user), today))
