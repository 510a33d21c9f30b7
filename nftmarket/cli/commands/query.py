"""Read-only commands: ``items``, ``purchased``, ``listed``, ``stats``, ``history``, ``verify``.

Queries never write to the journal; each one restores the marketplace
and renders a snapshot of its current state.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from nftmarket.cli._common import (
    console,
    journal_option,
    load_market,
    resolve_journal_path,
)
from nftmarket.cli.render import render_history, render_items, render_stats
from nftmarket.core.errors import UnknownItem
from nftmarket.core.journal import JournalIntegrityError, TransactionJournal
from nftmarket.core.units import format_units


def items_cmd(journal: Optional[Path] = journal_option()) -> None:
    """List every unsold item on the market."""
    market = load_market(journal)
    items = market.fetch_market_items()
    if not items:
        console.print("[dim]No items for sale.[/dim]")
        return
    console.print(render_items(items, "Market Items", market.address))


def purchased_cmd(
    caller: str = typer.Option(..., "--caller", "-c", help="Identity to query."),
    journal: Optional[Path] = journal_option(),
) -> None:
    """List the tokens owned by --caller."""
    market = load_market(journal)
    items = market.fetch_purchased_nfts(caller=caller)
    if not items:
        console.print(f"[dim]{caller} owns no tokens.[/dim]")
        return
    console.print(render_items(items, f"Owned by {caller}", market.address))


def listed_cmd(
    caller: str = typer.Option(..., "--caller", "-c", help="Identity to query."),
    journal: Optional[Path] = journal_option(),
) -> None:
    """List the active listings created by --caller."""
    market = load_market(journal)
    items = market.fetch_items_listed(caller=caller)
    if not items:
        console.print(f"[dim]{caller} has no active listings.[/dim]")
        return
    console.print(render_items(items, f"Listed by {caller}", market.address))


def stats_cmd(
    caller: Optional[str] = typer.Option(
        None, "--caller", "-c", help="Also show the balance credited to this identity."
    ),
    journal: Optional[Path] = journal_option(),
) -> None:
    """Show marketplace totals and escrowed fees."""
    market = load_market(journal)
    console.print(render_stats(market.get_stats(), market.address))
    if caller:
        console.print(
            f"[bold]Balance of {caller}:[/bold] "
            f"{format_units(market.balance_of(caller))} ETH"
        )


def history_cmd(
    token_id: int = typer.Argument(..., help="Token id to trace."),
    journal: Optional[Path] = journal_option(),
) -> None:
    """Show every journaled transaction that touched a token."""
    market = load_market(journal)
    try:
        market.get_item(token_id)
    except UnknownItem as exc:
        console.print(f"[bold red]Token {token_id}:[/bold red] {exc}")
        raise typer.Exit(code=1)
    entries = market.journal.get_token_history(token_id)
    console.print(render_history(entries, token_id))


def verify_cmd(journal: Optional[Path] = journal_option()) -> None:
    """Verify the journal's hash chain."""
    db_path = resolve_journal_path(journal)
    if not db_path.exists():
        console.print(f"[bold red]Journal not found:[/bold red] {db_path}")
        raise typer.Exit(code=1)

    tx_journal = TransactionJournal(db_path)
    try:
        tx_journal.verify_chain()
    except JournalIntegrityError as exc:
        console.print(f"[bold red]Chain BROKEN:[/bold red] {exc}")
        raise typer.Exit(code=1)
    console.print(
        f"[bold green]Chain valid[/bold green] ({len(tx_journal)} entries)."
    )
