"""Tests for nftmarket data models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from nftmarket.models.config import DEFAULT_LISTING_FEE, MarketConfig
from nftmarket.models.events import MarketItemCreated
from nftmarket.models.items import MarketItem
from nftmarket.models.journal import JournalEntry, TransactionKind


def _item(**overrides) -> MarketItem:
    defaults = dict(
        token_id=1,
        token_uri="ipfs://a",
        creator="0xalice",
        seller="0xalice",
        owner="0xmarket",
        price=100,
    )
    defaults.update(overrides)
    return MarketItem(**defaults)


class TestMarketItem:
    def test_defaults(self):
        item = _item()
        assert item.sold is False
        assert item.cancelled is False

    def test_frozen(self):
        item = _item()
        with pytest.raises(ValidationError):
            item.price = 5

    def test_token_id_starts_at_one(self):
        with pytest.raises(ValidationError):
            _item(token_id=0)

    def test_is_listed_by(self):
        assert _item().is_listed_by("0xmarket") is True
        assert _item(sold=True).is_listed_by("0xmarket") is False
        assert _item(owner="0xbob").is_listed_by("0xmarket") is False
        assert _item(sold=True, cancelled=True, owner="0xalice").is_listed_by(
            "0xmarket"
        ) is False


class TestMarketConfig:
    def test_defaults(self):
        config = MarketConfig(owner="0xowner", custodial_address="0xmarket")
        assert config.listing_fee == DEFAULT_LISTING_FEE
        assert config.fee_payee == "0xowner"
        assert config.collection_symbol == "METT"

    def test_fee_recipient(self):
        config = MarketConfig(
            owner="0xowner", custodial_address="0xmarket", fee_recipient="0xfees"
        )
        assert config.fee_payee == "0xfees"

    def test_listing_fee_must_be_positive(self):
        with pytest.raises(ValidationError):
            MarketConfig(owner="0xowner", custodial_address="0xmarket", listing_fee=0)

    def test_custodial_address_must_be_distinct(self):
        with pytest.raises(ValidationError):
            MarketConfig(owner="0xsame", custodial_address="0xsame")


class TestMarketItemCreated:
    def test_as_args(self):
        event = MarketItemCreated(
            token_id=3, seller="0xalice", owner="0xmarket", price=100
        )
        assert event.as_args() == (3, "0xalice", "0xmarket", 100, False)
        assert event.event_name == "MarketItemCreated"


class TestJournalEntry:
    def test_defaults(self):
        entry = JournalEntry(kind=TransactionKind.CREATE_TOKEN, caller="0xalice")
        assert entry.sequence == 0
        assert entry.value == "0"
        assert entry.entry_hash == ""
        assert entry.arguments == {}

    def test_kind_from_string(self):
        entry = JournalEntry(kind="market_sale", caller="0xbob", token_id=1)
        assert entry.kind is TransactionKind.MARKET_SALE
