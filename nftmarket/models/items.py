"""Market item record — the unit of sale tracked by the marketplace ledger."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class MarketItem(BaseModel):
    """A minted token and its current listing state.

    ``sold`` is False while the item is listed and purchasable.  A cancelled
    listing keeps ``sold=True`` and additionally sets ``cancelled``, so an
    item withdrawn by its seller never shows up as an unsold listing.

    Examples
    --------
    >>> item = MarketItem(
    ...     token_id=1,
    ...     token_uri="http://sometoken.uri",
    ...     creator="0xalice",
    ...     seller="0xalice",
    ...     owner="0xmarket",
    ...     price=100,
    ... )
    >>> item.sold
    False
    """

    model_config = ConfigDict(frozen=True)

    token_id: int = Field(ge=1)
    token_uri: str
    creator: str
    seller: str
    owner: str
    price: int
    sold: bool = False
    cancelled: bool = False

    def is_listed_by(self, custodial_address: str) -> bool:
        """Whether the item is an active listing held by *custodial_address*."""
        return (
            not self.sold
            and not self.cancelled
            and self.owner == custodial_address
        )
