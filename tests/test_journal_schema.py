"""Tests for journal entry validation."""

import math

import pytest
from pydantic import ValidationError

from backend.schemas.journal import EntryCreate, SettingsUpdate


def _trade(**overrides) -> dict:
    data = {
        "pair": "BTCUSD",
        "direction": "long",
        "entry_price": 50000,
        "quantity": 1,
        "outcome": "pending",
    }
    data.update(overrides)
    return data


# ---------------------------------------------------------------------------
# 1. Trade entries
# ---------------------------------------------------------------------------

class TestTradeEntry:
    def test_valid_long_trade(self):
        entry = EntryCreate(**_trade())
        assert entry.type == "trade"
        assert entry.pnl is None

    def test_valid_short_trade_with_pnl(self):
        entry = EntryCreate(**_trade(pair="ETHUSD", direction="short", entry_price=3000,
                                     quantity=10, outcome="win", pnl=500))
        assert entry.pnl == 500

    def test_lowercase_pair_rejected(self):
        with pytest.raises(ValidationError):
            EntryCreate(**_trade(pair="btcusd"))

    @pytest.mark.parametrize("pair", ["BTC", "BTCUSDTPERP1", "BTC/USD"])
    def test_pair_shape(self, pair):
        with pytest.raises(ValidationError):
            EntryCreate(**_trade(pair=pair))

    def test_negative_entry_price_rejected(self):
        with pytest.raises(ValidationError):
            EntryCreate(**_trade(entry_price=-100))

    def test_zero_quantity_rejected(self):
        with pytest.raises(ValidationError):
            EntryCreate(**_trade(quantity=0))

    @pytest.mark.parametrize("field", ["entry_price", "exit_price", "stop_loss", "pnl", "fees"])
    def test_non_finite_numbers_rejected(self, field):
        with pytest.raises(ValidationError):
            EntryCreate(**_trade(**{field: math.inf}))

    def test_negative_fees_rejected(self):
        with pytest.raises(ValidationError):
            EntryCreate(**_trade(fees=-1))

    def test_negative_pnl_allowed(self):
        assert EntryCreate(**_trade(pnl=-250.5)).pnl == -250.5

    def test_missing_required_trade_fields(self):
        with pytest.raises(ValidationError, match="entry_price"):
            EntryCreate(pair="BTCUSD", direction="long", quantity=1, outcome="pending")

    def test_unknown_direction_and_outcome(self):
        with pytest.raises(ValidationError):
            EntryCreate(**_trade(direction="sideways"))
        with pytest.raises(ValidationError):
            EntryCreate(**_trade(outcome="scratch"))

    def test_breakeven_is_normalised(self):
        assert EntryCreate(**_trade(outcome="breakeven")).outcome == "be"


# ---------------------------------------------------------------------------
# 2. Free text
# ---------------------------------------------------------------------------

class TestFreeText:
    def test_notes_are_sanitized(self):
        entry = EntryCreate(**_trade(notes='<script>alert("xss")</script>Good trade'))
        assert entry.notes == "Good trade"

    def test_notes_keep_plain_text(self):
        assert EntryCreate(**_trade(notes="Waited for the retest")).notes == "Waited for the retest"

    def test_notes_length_limit(self):
        with pytest.raises(ValidationError):
            EntryCreate(**_trade(notes="x" * 5001))

    def test_screenshot_url(self):
        assert EntryCreate(**_trade(screenshot_url="")).screenshot_url == ""
        url = "https://img.example.com/chart.png"
        assert EntryCreate(**_trade(screenshot_url=url)).screenshot_url == url
        with pytest.raises(ValidationError):
            EntryCreate(**_trade(screenshot_url="not a url"))

    def test_tags_are_trimmed_and_deduplicated(self):
        entry = EntryCreate(**_trade(tags=[" #london ", "london", "", "fomo"]))
        assert entry.tags == ["london", "fomo"]


# ---------------------------------------------------------------------------
# 3. Links and settings
# ---------------------------------------------------------------------------

class TestLinkEntry:
    def test_link_needs_only_url(self):
        entry = EntryCreate(type="link", url="https://example.com", title="Playbook")
        assert entry.pair is None

    def test_link_without_url_rejected(self):
        with pytest.raises(ValidationError):
            EntryCreate(type="link", title="Playbook")

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            EntryCreate(type="note", url="https://example.com")


class TestSettingsUpdate:
    def test_currency_uppercased(self):
        assert SettingsUpdate(currency="eur").currency == "EUR"

    def test_negative_balance_rejected(self):
        with pytest.raises(ValidationError):
            SettingsUpdate(starting_balance=-1)
