"""User model for authentication and per-user journal settings."""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)
    hashed_password: str
    totp_secret: str
    is_active: bool = Field(default=True)

    # Journal settings; None falls back to the service defaults
    starting_balance: float | None = None
    currency: str | None = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
