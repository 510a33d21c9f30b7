"""Helpers shared by CLI commands: journal loading and error reporting."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from nftmarket.config import settings
from nftmarket.core.errors import MarketError
from nftmarket.core.journal import JournalIntegrityError, TransactionJournal
from nftmarket.core.marketplace import Marketplace
from nftmarket.core.units import parse_units

console = Console()


def journal_option() -> Optional[Path]:
    return typer.Option(
        None,
        "--journal",
        "-j",
        help="Path to the journal SQLite database (default: NFTMARKET_JOURNAL_PATH).",
    )


def resolve_journal_path(journal: Optional[Path]) -> Path:
    return journal if journal is not None else settings.journal_path


def load_market(journal: Optional[Path]) -> Marketplace:
    """Restore the marketplace recorded in *journal*, or exit with code 1."""
    db_path = resolve_journal_path(journal)
    if not db_path.exists():
        console.print(f"[bold red]Journal not found:[/bold red] {db_path}")
        console.print("[dim]Deploy a marketplace first with: nftmarket deploy[/dim]")
        raise typer.Exit(code=1)

    try:
        return Marketplace.restore(TransactionJournal(db_path))
    except (JournalIntegrityError, MarketError, ValueError) as exc:
        console.print(f"[bold red]Cannot load journal:[/bold red] {exc}")
        raise typer.Exit(code=1)


def to_wei(amount: str) -> int:
    """Parse an ether amount from the command line, or exit with code 2."""
    try:
        return parse_units(amount)
    except ValueError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=2)


@contextmanager
def transaction(action: str) -> Iterator[None]:
    """Report a rejected marketplace transaction and exit with code 1."""
    try:
        yield
    except MarketError as exc:
        console.print(f"[bold red]{action} reverted:[/bold red] {exc}")
        raise typer.Exit(code=1)
