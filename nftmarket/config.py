"""Process configuration — env-driven via pydantic-settings.

Reads from a .env file and NFTMARKET_* environment variables, e.g.::

    export NFTMARKET_LOG_LEVEL=DEBUG
    export NFTMARKET_JOURNAL_PATH=/data/journal.db
    export NFTMARKET_LISTING_FEE=25000000000000000
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from nftmarket.models.config import DEFAULT_LISTING_FEE, MarketConfig

logger = logging.getLogger(__name__)


class MarketSettings(BaseSettings):
    """Marketplace settings with environment variable overrides."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="NFTMARKET_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"
    debug: bool = False

    # Storage
    journal_path: Path = Path(".nftmarket/journal.db")

    # Marketplace identities and fees (amounts in wei)
    owner: str = "0x0000000000000000000000000000000000000001"
    fee_recipient: str | None = None
    listing_fee: int = DEFAULT_LISTING_FEE
    collection_name: str = "Metaverse Tokens"
    collection_symbol: str = "METT"

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"

    def to_market_config(self, custodial_address: str) -> MarketConfig:
        """Build the ledger configuration for a marketplace at *custodial_address*."""
        return MarketConfig(
            owner=self.owner,
            custodial_address=custodial_address,
            fee_recipient=self.fee_recipient,
            listing_fee=self.listing_fee,
            collection_name=self.collection_name,
            collection_symbol=self.collection_symbol,
        )

    def configure_logging(self) -> None:
        """Apply ``log_level`` to the root logger.

        ``debug`` forces DEBUG output, except in production where it is
        ignored and a warning is logged instead.
        """
        debug = self.debug and not self.is_production
        logging.basicConfig(
            level=logging.DEBUG if debug else self.log_level.upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        if self.debug and self.is_production:
            logger.warning(
                "Ignoring NFTMARKET_DEBUG in production; using level %s.",
                self.log_level.upper(),
            )


# Module-level singleton, import as `from nftmarket.config import settings`
settings = MarketSettings()
