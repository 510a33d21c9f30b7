"""Tests for process settings — env-driven configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from nftmarket.config import MarketSettings
from nftmarket.models.config import DEFAULT_LISTING_FEE


class TestMarketSettings:
    def test_defaults(self):
        settings = MarketSettings()
        assert settings.environment == "development"
        assert settings.log_level == "INFO"
        assert settings.listing_fee == DEFAULT_LISTING_FEE
        assert settings.journal_path == Path(".nftmarket/journal.db")

    def test_is_production(self):
        assert MarketSettings().is_production is False
        assert MarketSettings(environment="production").is_production is True

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("NFTMARKET_LISTING_FEE", "1000")
        monkeypatch.setenv("NFTMARKET_OWNER", "0xdeployer")
        settings = MarketSettings()
        assert settings.listing_fee == 1000
        assert settings.owner == "0xdeployer"

    def test_to_market_config(self):
        settings = MarketSettings(owner="0xdeployer", fee_recipient="0xfees")
        config = settings.to_market_config("0xmarket")
        assert config.custodial_address == "0xmarket"
        assert config.owner == "0xdeployer"
        assert config.fee_payee == "0xfees"
        assert config.listing_fee == settings.listing_fee


class TestConfigureLogging:
    @pytest.fixture
    def basic_config_calls(self, monkeypatch: pytest.MonkeyPatch) -> list[dict]:
        calls: list[dict] = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
        return calls

    def test_uses_log_level(self, basic_config_calls: list[dict]):
        MarketSettings(log_level="warning").configure_logging()
        assert basic_config_calls[0]["level"] == "WARNING"

    def test_debug_outside_production(self, basic_config_calls: list[dict]):
        MarketSettings(debug=True).configure_logging()
        assert basic_config_calls[0]["level"] == logging.DEBUG

    def test_debug_ignored_in_production(
        self, basic_config_calls: list[dict], caplog: pytest.LogCaptureFixture
    ):
        with caplog.at_level(logging.WARNING, logger="nftmarket.config"):
            MarketSettings(environment="production", debug=True).configure_logging()
        assert basic_config_calls[0]["level"] == "INFO"
        assert "Ignoring NFTMARKET_DEBUG in production" in caplog.text
