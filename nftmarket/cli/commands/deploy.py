"""``nftmarket deploy`` — create a marketplace and publish its address.

Derives the marketplace's custodial address, opens a new transaction
journal with a genesis entry holding the configuration, and prints the
address for clients to discover.
"""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import Optional

import typer
from rich.panel import Panel

from nftmarket.cli._common import console, journal_option, resolve_journal_path, to_wei
from nftmarket.config import settings
from nftmarket.core.hasher import derive_address
from nftmarket.core.journal import TransactionJournal
from nftmarket.core.marketplace import Marketplace
from nftmarket.core.units import format_units


def deploy_cmd(
    owner: Optional[str] = typer.Option(
        None,
        "--owner",
        "-o",
        help="Deployer identity; may change the listing fee (default: NFTMARKET_OWNER).",
    ),
    fee_recipient: Optional[str] = typer.Option(
        None,
        "--fee-recipient",
        help="Identity paid the listing fees (default: the owner).",
    ),
    listing_fee: Optional[str] = typer.Option(
        None,
        "--listing-fee",
        help="Listing fee in ETH (default: NFTMARKET_LISTING_FEE).",
    ),
    journal: Optional[Path] = journal_option(),
) -> None:
    """Deploy a new marketplace into an empty journal."""
    db_path = resolve_journal_path(journal)
    if db_path.exists() and len(TransactionJournal(db_path)) > 0:
        console.print(
            f"[bold red]A marketplace is already deployed in[/bold red] {db_path}"
        )
        raise typer.Exit(code=1)

    overrides: dict[str, object] = {}
    if owner:
        overrides["owner"] = owner
    if fee_recipient:
        overrides["fee_recipient"] = fee_recipient
    if listing_fee is not None:
        overrides["listing_fee"] = to_wei(listing_fee)
    active = settings.model_copy(update=overrides)

    address = derive_address(active.owner, uuid.uuid4().hex)
    try:
        config = active.to_market_config(address)
    except ValueError as exc:
        console.print(f"[bold red]Invalid configuration:[/bold red] {exc}")
        raise typer.Exit(code=2)

    market = Marketplace(config, journal=TransactionJournal(db_path))

    console.print()
    console.print(
        Panel(
            "\n".join([
                "[bold green]Marketplace deployed![/bold green]",
                "",
                f"[bold]Address:[/bold]       {market.address}",
                f"[bold]Owner:[/bold]         {config.owner}",
                f"[bold]Fee recipient:[/bold] {config.fee_payee}",
                f"[bold]Listing fee:[/bold]   {format_units(config.listing_fee)} ETH",
                f"[bold]Journal:[/bold]       {db_path}",
            ]),
            title=f"[bold]{config.collection_name} ({config.collection_symbol})[/bold]",
            border_style="green",
            padding=(1, 2),
        )
    )
    console.print()

    # Print the address plainly for scripting
    console.print(f"Contract deployed to : {market.address}")
