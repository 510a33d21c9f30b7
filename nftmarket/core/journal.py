"""Append-only, hash-chained transaction journal backed by SQLite.

The journal is the durable record of every committed marketplace
transaction.  The in-memory ledger is a projection of it: replaying the
entries in sequence order rebuilds the same items and balances.

Design:
- Append-only: only ``append()`` writes; no update, no delete.
- Hash-chained: each entry includes the SHA-256 of the previous entry.
- WAL journal mode for concurrent readers.
- entry_hash UNIQUE constraint for tamper detection.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from nftmarket.core.hasher import compute_entry_hash
from nftmarket.models.journal import JournalEntry, TransactionKind

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------

_CREATE_JOURNAL = """
CREATE TABLE IF NOT EXISTS market_journal (
    sequence              INTEGER PRIMARY KEY AUTOINCREMENT,
    kind                  TEXT NOT NULL,
    caller                TEXT NOT NULL,
    token_id              INTEGER,
    arguments_json        TEXT NOT NULL DEFAULT '{}',
    value                 TEXT NOT NULL DEFAULT '0',
    timestamp_utc         TEXT NOT NULL,
    previous_entry_hash   TEXT NOT NULL DEFAULT '',
    entry_hash            TEXT NOT NULL UNIQUE
);
"""

_CREATE_IDX_TOKEN = """
CREATE INDEX IF NOT EXISTS idx_token_id ON market_journal(token_id, sequence);
"""


class JournalIntegrityError(RuntimeError):
    """Raised when the hash chain is broken."""


class TransactionJournal:
    """Append-only, hash-chained transaction journal.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file. Created if it does not exist.
    """

    def __init__(self, db_path: Path) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    @property
    def path(self) -> Path:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(_CREATE_JOURNAL)
            conn.execute(_CREATE_IDX_TOKEN)
            conn.commit()

    # ------------------------------------------------------------------
    # Core: append-only write
    # ------------------------------------------------------------------

    def append(self, entry: JournalEntry) -> JournalEntry:
        """Append an entry, assigning its sequence number and hash chain links.

        Returns the sealed entry.  This is the ONLY write method.
        """
        latest = self.get_latest()
        previous_hash = latest.entry_hash if latest else ""
        sequence = latest.sequence + 1 if latest else 1

        entry_dict = entry.model_dump(mode="json")
        entry_dict["sequence"] = sequence
        entry_dict["previous_entry_hash"] = previous_hash
        entry_dict["entry_hash"] = ""

        sealed = entry.model_copy(
            update={
                "sequence": sequence,
                "previous_entry_hash": previous_hash,
                "entry_hash": compute_entry_hash(entry_dict),
            }
        )
        self._insert(sealed)
        logger.debug(
            "Journaled #%d %s (token %s).",
            sealed.sequence,
            sealed.kind.value,
            sealed.token_id,
        )
        return sealed

    def _insert(self, entry: JournalEntry) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO market_journal
                    (sequence, kind, caller, token_id, arguments_json, value,
                     timestamp_utc, previous_entry_hash, entry_hash)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.sequence,
                    entry.kind.value,
                    entry.caller,
                    entry.token_id,
                    json.dumps(entry.arguments, sort_keys=True),
                    entry.value,
                    entry.timestamp_utc.isoformat()
                    if isinstance(entry.timestamp_utc, datetime)
                    else entry.timestamp_utc,
                    entry.previous_entry_hash,
                    entry.entry_hash,
                ),
            )
            conn.commit()

    # ------------------------------------------------------------------
    # Query methods (read-only)
    # ------------------------------------------------------------------

    def get_latest(self) -> JournalEntry | None:
        """Return the most recent entry, or None for an empty journal."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM market_journal ORDER BY sequence DESC LIMIT 1"
            ).fetchone()
        return self._row_to_entry(row) if row else None

    def get_entries(self) -> list[JournalEntry]:
        """Return all entries in commit order."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM market_journal ORDER BY sequence ASC"
            ).fetchall()
        return [self._row_to_entry(row) for row in rows]

    def get_token_history(self, token_id: int) -> list[JournalEntry]:
        """Return every transaction that touched *token_id*, oldest first."""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM market_journal WHERE token_id = ? ORDER BY sequence ASC",
                (token_id,),
            ).fetchall()
        return [self._row_to_entry(row) for row in rows]

    def get_genesis(self) -> JournalEntry | None:
        """Return the deploy entry that opens the journal, if any."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM market_journal WHERE kind = ? ORDER BY sequence ASC LIMIT 1",
                (TransactionKind.DEPLOY.value,),
            ).fetchone()
        return self._row_to_entry(row) if row else None

    def __len__(self) -> int:
        with self._connect() as conn:
            (count,) = conn.execute("SELECT COUNT(*) FROM market_journal").fetchone()
        return count

    # ------------------------------------------------------------------
    # Chain verification
    # ------------------------------------------------------------------

    def verify_chain(self) -> bool:
        """Verify the hash chain integrity of the whole journal.

        Walks all entries in order, recomputes each entry_hash, and
        verifies that previous_entry_hash links match.

        Returns True if the chain is valid, raises JournalIntegrityError otherwise.
        """
        prev_hash = ""
        expected_sequence = 1
        for entry in self.get_entries():
            if entry.sequence != expected_sequence:
                raise JournalIntegrityError(
                    f"Chain broken at sequence {entry.sequence}: "
                    f"expected sequence {expected_sequence}"
                )

            if entry.previous_entry_hash != prev_hash:
                raise JournalIntegrityError(
                    f"Chain broken at sequence {entry.sequence}: "
                    f"expected previous_hash={prev_hash!r}, "
                    f"got {entry.previous_entry_hash!r}"
                )

            expected_hash = compute_entry_hash(entry.model_dump(mode="json"))
            if entry.entry_hash != expected_hash:
                raise JournalIntegrityError(
                    f"Tampered entry at sequence {entry.sequence}: "
                    f"expected hash={expected_hash!r}, "
                    f"got {entry.entry_hash!r}"
                )

            prev_hash = entry.entry_hash
            expected_sequence += 1

        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _row_to_entry(row: tuple) -> JournalEntry:
        (
            sequence,
            kind,
            caller,
            token_id,
            arguments_json,
            value,
            timestamp_utc,
            previous_entry_hash,
            entry_hash,
        ) = row
        return JournalEntry(
            sequence=sequence,
            kind=TransactionKind(kind),
            caller=caller,
            token_id=token_id,
            arguments=json.loads(arguments_json),
            value=value,
            timestamp_utc=timestamp_utc,
            previous_entry_hash=previous_entry_hash,
            entry_hash=entry_hash,
        )
