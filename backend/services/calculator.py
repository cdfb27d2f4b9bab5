"""Per-trade derived numbers for the entry form.

Pure functions of a single trade's fields. Missing inputs are an expected
state while a trade is being filled in, so every function returns ``None``
rather than raising when it cannot compute yet.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class DerivedTradeMetrics:
    """Calculator output for one trade."""
    risk_reward_ratio: float | None = None
    realized_pnl: float | None = None


def _known(*values: float | None) -> bool:
    return all(v is not None and math.isfinite(v) for v in values)


def compute_risk_reward(
    entry: float | None,
    stop_loss: float | None,
    take_profit: float | None,
) -> float | None:
    """Reward-to-risk ratio, rounded to 2 decimals.

    Returns None if a price is missing or the entry sits on the stop.
    """
    if not _known(entry, stop_loss, take_profit) or entry == stop_loss:
        return None
    risk = abs(entry - stop_loss)
    reward = abs(take_profit - entry)
    return round(reward / risk, 2)


def compute_realized_pnl(
    entry: float | None,
    exit: float | None,
    quantity: float | None,
    fees: float | None = None,
    direction: str = "long",
) -> float | None:
    """Signed PnL net of fees, rounded to 2 decimals. None until entry/exit/quantity are known."""
    if not _known(entry, exit, quantity):
        return None
    if direction == "short":
        raw = (entry - exit) * quantity
    else:
        raw = (exit - entry) * quantity
    if fees is not None and math.isfinite(fees):
        raw -= fees
    return round(raw, 2)


def derive_metrics(
    entry_price: float | None = None,
    exit_price: float | None = None,
    quantity: float | None = None,
    fees: float | None = None,
    stop_loss: float | None = None,
    take_profit: float | None = None,
    direction: str = "long",
) -> DerivedTradeMetrics:
    """Compute both form-side metrics at once."""
    return DerivedTradeMetrics(
        risk_reward_ratio=compute_risk_reward(entry_price, stop_loss, take_profit),
        realized_pnl=compute_realized_pnl(entry_price, exit_price, quantity, fees, direction),
    )
