"""Notifications published by the marketplace ledger for external indexers."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class MarketItemCreated(BaseModel):
    """Emitted once per successful ``create_token``.

    Carries the new token id and the listing fields in the order external
    indexers expect: ``(token_id, seller, owner, price, sold)``.
    """

    model_config = ConfigDict(frozen=True)

    event_name: str = "MarketItemCreated"
    token_id: int
    seller: str
    owner: str
    price: int
    sold: bool = False
    emitted_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    def as_args(self) -> tuple[int, str, str, int, bool]:
        """Return the positional event arguments."""
        return (self.token_id, self.seller, self.owner, self.price, self.sold)
