"""Core marketplace machinery: ledger, journal, event bus, hashing."""
