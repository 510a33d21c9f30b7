"""nftmarket data models — all Pydantic v2, all frozen (immutable)."""

from nftmarket.models.config import MarketConfig
from nftmarket.models.events import MarketItemCreated
from nftmarket.models.items import MarketItem
from nftmarket.models.journal import JournalEntry, TransactionKind

__all__ = [
    # config
    "MarketConfig",
    # items
    "MarketItem",
    # events
    "MarketItemCreated",
    # journal
    "JournalEntry",
    "TransactionKind",
]
