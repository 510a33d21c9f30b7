"""Transaction journal entry model (append-only, hash-chained).

Every committed marketplace transaction is recorded as one entry.  The
journal is the durable source of truth: replaying its entries in order
rebuilds the exact ledger state.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TransactionKind(str, Enum):
    """Kinds of committed transactions."""

    DEPLOY = "deploy"
    CREATE_TOKEN = "create_token"
    MARKET_SALE = "market_sale"
    RESELL_TOKEN = "resell_token"
    CANCEL_LISTING = "cancel_listing"
    UPDATE_LISTING_PRICE = "update_listing_price"


class JournalEntry(BaseModel):
    """A single committed transaction.

    ``arguments`` holds the operation inputs other than the caller and the
    attached value (e.g. ``{"token_uri": ..., "price": ...}``).  Amounts are
    stored as strings so large wei values survive JSON and SQLite intact.
    """

    model_config = ConfigDict(frozen=True)

    sequence: int = 0
    kind: TransactionKind
    caller: str
    token_id: int | None = None
    arguments: dict[str, Any] = Field(default_factory=dict)
    value: str = "0"
    timestamp_utc: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    previous_entry_hash: str = ""
    entry_hash: str = ""
