"""nftmarket: an NFT marketplace ledger with a hash-chained transaction journal.

Mint a token and list it in one step, buy it, resell it, cancel a listing,
and query unsold, purchased and listed items.  Every committed transaction
can be journaled to SQLite and replayed to rebuild the ledger.
"""

__version__ = "0.1.0"
__description__ = "NFT marketplace ledger with a replayable transaction journal"

from nftmarket.core.errors import MarketError
from nftmarket.core.marketplace import Marketplace, MarketSession
from nftmarket.models.config import MarketConfig
from nftmarket.models.items import MarketItem

__all__ = [
    "Marketplace",
    "MarketSession",
    "MarketConfig",
    "MarketItem",
    "MarketError",
    "__version__",
]
