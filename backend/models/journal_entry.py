"""JournalEntry model — a logged trade or a bookmarked link."""

from datetime import datetime, timezone

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import JSON


class JournalEntry(SQLModel, table=True):
    __tablename__ = "journal_entry"

    id: int | None = Field(default=None, primary_key=True)
    user_id: int | None = Field(default=None, foreign_key="user.id", index=True)
    type: str = Field(default="trade", index=True)  # "trade" or "link"

    # Link / shared fields
    title: str = ""
    url: str = ""
    description: str = ""
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON))
    favorite: bool = False

    # Trade fields
    pair: str | None = Field(default=None, index=True)  # e.g. "EURUSD"
    direction: str | None = None  # "long" or "short"
    outcome: str | None = None  # "win", "loss", "be", "pending"
    entry_price: float | None = None
    exit_price: float | None = None
    stop_loss: float | None = None
    take_profit: float | None = None
    quantity: float | None = None
    fees: float | None = None
    pnl: float | None = None  # realized, account currency
    notes: str | None = None
    screenshot_url: str | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
