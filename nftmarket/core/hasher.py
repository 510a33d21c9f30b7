"""Canonical hashing helpers for the transaction journal and addresses."""

from __future__ import annotations

import hashlib
import json
from typing import Any


def canonical_json_bytes(obj: Any) -> bytes:
    """Produce canonical JSON bytes — deterministic, sorted, compact.

    - sorted keys
    - no whitespace separators (",", ":")
    - ensure_ascii=True
    - UTF-8 encoding
    """
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True
    ).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    """Return the SHA-256 hex digest of raw bytes."""
    return hashlib.sha256(data).hexdigest()


def compute_entry_hash(entry_dict: dict[str, Any]) -> str:
    """SHA-256 of a journal entry (excluding the entry_hash field itself).

    This is the seal that makes each entry tamper-evident.
    """
    d = {k: v for k, v in entry_dict.items() if k != "entry_hash"}
    return sha256_hex(canonical_json_bytes(d))


def derive_address(deployer: str, salt: str) -> str:
    """Derive a deterministic ``0x``-prefixed, 20-byte address.

    Used to give a freshly deployed marketplace its own custodial identity.

    Examples
    --------
    >>> derive_address("0xalice", "1").startswith("0x")
    True
    >>> len(derive_address("0xalice", "1"))
    42
    """
    digest = sha256_hex(canonical_json_bytes({"deployer": deployer, "salt": salt}))
    return "0x" + digest[-40:]
