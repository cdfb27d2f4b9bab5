"""Pydantic schemas for the journal API."""

from datetime import datetime
from typing import Annotated
import re

import nh3
from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, field_validator, model_validator

from backend.utils.constants import (
    DIRECTIONS,
    ENTRY_TYPES,
    MAX_NOTES_LENGTH,
    OUTCOMES,
    PAIR_MAX_LENGTH,
    PAIR_MIN_LENGTH,
)

_PAIR_RE = re.compile(rf"^[A-Z]{{{PAIR_MIN_LENGTH},{PAIR_MAX_LENGTH}}}$")
_http_url = TypeAdapter(HttpUrl)

Price = Annotated[float, Field(gt=0, allow_inf_nan=False)]


def _strip_html(value: str) -> str:
    """Drop all markup, including script/style bodies."""
    return nh3.clean(value, tags=set())


class EntryCreate(BaseModel):
    type: str = "trade"
    title: str = Field(default="", max_length=300)
    url: str = ""
    description: str = Field(default="", max_length=2000)
    tags: list[str] = []
    favorite: bool = False

    pair: str | None = None
    direction: str | None = None
    outcome: str | None = None
    entry_price: Price | None = None
    exit_price: Price | None = None
    stop_loss: Price | None = None
    take_profit: Price | None = None
    quantity: Price | None = None
    fees: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    pnl: float | None = Field(default=None, allow_inf_nan=False)
    notes: str | None = Field(default=None, max_length=MAX_NOTES_LENGTH)
    screenshot_url: str | None = None
    created_at: datetime | None = None  # backdated entries; defaults to now

    @field_validator("type")
    @classmethod
    def _validate_type(cls, value: str) -> str:
        if value not in ENTRY_TYPES:
            raise ValueError(f"must be one of: {', '.join(ENTRY_TYPES)}")
        return value

    @field_validator("pair")
    @classmethod
    def _validate_pair(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        if not _PAIR_RE.fullmatch(text):
            raise ValueError(
                f"must be {PAIR_MIN_LENGTH}-{PAIR_MAX_LENGTH} uppercase letters"
            )
        return text

    @field_validator("direction")
    @classmethod
    def _validate_direction(cls, value: str | None) -> str | None:
        if value is not None and value not in DIRECTIONS:
            raise ValueError(f"must be one of: {', '.join(DIRECTIONS)}")
        return value

    @field_validator("outcome")
    @classmethod
    def _validate_outcome(cls, value: str | None) -> str | None:
        if value == "breakeven":
            return "be"
        if value is not None and value not in OUTCOMES:
            raise ValueError(f"must be one of: {', '.join(OUTCOMES)}")
        return value

    @field_validator("tags")
    @classmethod
    def _clean_tags(cls, value: list[str]) -> list[str]:
        tags = []
        for tag in value:
            text = tag.strip().lstrip("#")
            if text and text not in tags:
                tags.append(text)
        return tags

    @field_validator("notes")
    @classmethod
    def _sanitize_notes(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _strip_html(value)

    @field_validator("screenshot_url")
    @classmethod
    def _validate_screenshot_url(cls, value: str | None) -> str | None:
        if not value:
            return value
        _http_url.validate_python(value)
        return value

    @model_validator(mode="after")
    def _validate_required_by_type(self):
        if self.type == "link":
            if not self.url.strip():
                raise ValueError("url is required for link entries")
            return self
        missing = [
            name for name in ("pair", "direction", "outcome", "entry_price", "quantity")
            if getattr(self, name) is None
        ]
        if missing:
            raise ValueError(f"trade entries require: {', '.join(missing)}")
        return self


class EntryUpdate(BaseModel):
    title: str | None = None
    url: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    favorite: bool | None = None
    pair: str | None = None
    direction: str | None = None
    outcome: str | None = None
    entry_price: float | None = None
    exit_price: float | None = None
    stop_loss: float | None = None
    take_profit: float | None = None
    quantity: float | None = None
    fees: float | None = None
    pnl: float | None = None
    notes: str | None = None
    screenshot_url: str | None = None
    created_at: datetime | None = None


class EntryRead(BaseModel):
    id: int
    type: str
    title: str
    url: str
    description: str
    tags: list[str]
    favorite: bool
    pair: str | None
    direction: str | None
    outcome: str | None
    entry_price: float | None
    exit_price: float | None
    stop_loss: float | None
    take_profit: float | None
    quantity: float | None
    fees: float | None
    pnl: float | None
    notes: str | None
    screenshot_url: str | None
    risk_reward_ratio: float | None = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TagRequest(BaseModel):
    tag: str = Field(min_length=1, max_length=50)


class BulkDeleteRequest(BaseModel):
    ids: list[int] = Field(min_length=1)


class CalculateRequest(BaseModel):
    entry_price: float | None = None
    exit_price: float | None = None
    stop_loss: float | None = None
    take_profit: float | None = None
    quantity: float | None = None
    fees: float | None = None
    direction: str = "long"

    @field_validator("direction")
    @classmethod
    def _validate_direction(cls, value: str) -> str:
        if value not in DIRECTIONS:
            raise ValueError(f"must be one of: {', '.join(DIRECTIONS)}")
        return value


class CalculateResponse(BaseModel):
    risk_reward_ratio: float | None
    realized_pnl: float | None


class SettingsRead(BaseModel):
    starting_balance: float
    currency: str


class SettingsUpdate(BaseModel):
    starting_balance: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    currency: str | None = Field(default=None, min_length=3, max_length=3)

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, value: str | None) -> str | None:
        return value.upper() if value is not None else None
