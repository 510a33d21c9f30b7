"""Marketplace configuration passed to the ledger at construction."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator

# 0.025 ether expressed in wei
DEFAULT_LISTING_FEE = 25_000_000_000_000_000


class MarketConfig(BaseModel):
    """Process-wide marketplace settings.

    ``owner`` deployed the marketplace and is the only identity allowed to
    change the listing fee.  When ``fee_recipient`` is not given, collected
    listing fees are paid to the owner.
    """

    model_config = ConfigDict(frozen=True)

    owner: str
    custodial_address: str
    fee_recipient: str | None = None
    listing_fee: int = DEFAULT_LISTING_FEE
    collection_name: str = "Metaverse Tokens"
    collection_symbol: str = "METT"

    @model_validator(mode="after")
    def _check_identities(self) -> MarketConfig:
        if self.listing_fee <= 0:
            raise ValueError("listing_fee must be greater than 0")
        if self.custodial_address in (self.owner, self.fee_recipient):
            raise ValueError(
                "custodial_address must differ from owner and fee_recipient"
            )
        return self

    @property
    def fee_payee(self) -> str:
        """Identity that receives collected listing fees."""
        return self.fee_recipient or self.owner
