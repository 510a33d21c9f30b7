"""Shared test fixtures for nftmarket."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from nftmarket.core.journal import TransactionJournal
from nftmarket.core.marketplace import Marketplace
from nftmarket.models.config import MarketConfig

OWNER = "0xowner"
BUYER = "0xbuyer"
MARKET_ADDRESS = "0xmarket"
TOKEN_URI = "http://sometoken.uri"
# 100 ether in wei
AUCTION_PRICE = 100 * 10**18


@pytest.fixture
def config() -> MarketConfig:
    """Provide a marketplace config with the default listing fee."""
    return MarketConfig(owner=OWNER, custodial_address=MARKET_ADDRESS)


@pytest.fixture
def market(config: MarketConfig) -> Marketplace:
    """Provide a fresh in-memory marketplace."""
    return Marketplace(config)


@pytest.fixture
def listing_fee(market: Marketplace) -> int:
    return market.get_listing_price()


@pytest.fixture
def journal(tmp_path: Path) -> TransactionJournal:
    """Provide a fresh TransactionJournal backed by a temp SQLite database."""
    return TransactionJournal(tmp_path / "journal.db")


@pytest.fixture
def journaled_market(config: MarketConfig, journal: TransactionJournal) -> Marketplace:
    """Provide a marketplace that journals every transaction."""
    return Marketplace(config, journal=journal)


@pytest.fixture
def mint_and_list() -> Callable[..., int]:
    """Factory fixture: mint a token on *market* paying the correct fee."""

    def _mint(
        market: Marketplace,
        caller: str = OWNER,
        token_uri: str = TOKEN_URI,
        price: int = AUCTION_PRICE,
    ) -> int:
        return market.create_token(
            token_uri, price, caller=caller, value=market.get_listing_price()
        )

    return _mint
