"""Rich rendering of market items and marketplace summaries."""

from __future__ import annotations

from rich.panel import Panel
from rich.table import Table

from nftmarket.core.units import format_units
from nftmarket.models.items import MarketItem
from nftmarket.models.journal import JournalEntry


def _status(item: MarketItem, custodial_address: str) -> str:
    if item.cancelled:
        return "[dim]CANCELLED[/dim]"
    if item.sold:
        return "[yellow]SOLD[/yellow]"
    if item.is_listed_by(custodial_address):
        return "[green]LISTED[/green]"
    return "[dim]HELD[/dim]"


def render_items(
    items: list[MarketItem], title: str, custodial_address: str
) -> Table:
    """Render *items* as a table, one row per token."""
    table = Table(title=title)
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("URI")
    table.add_column("Seller")
    table.add_column("Owner")
    table.add_column("Price (ETH)", justify="right", style="green")
    table.add_column("Status", justify="center")

    for item in items:
        table.add_row(
            str(item.token_id),
            item.token_uri,
            item.seller,
            item.owner,
            format_units(item.price),
            _status(item, custodial_address),
        )
    return table


def render_stats(stats: dict, address: str) -> Panel:
    """Render ``Marketplace.get_stats()`` output as a summary panel."""
    lines = [
        f"[bold]Marketplace:[/bold] {address}",
        f"[bold]Minted:[/bold]      {stats['minted']}",
        f"[bold]Listed:[/bold]      {stats['listed']}",
        f"[bold]Sold:[/bold]        {stats['sold']}",
        f"[bold]Cancelled:[/bold]   {stats['cancelled']}",
        f"[bold]Listing fee:[/bold] {format_units(stats['listing_fee'])} ETH",
        f"[bold]Escrow:[/bold]      {format_units(stats['escrow'])} ETH",
    ]
    return Panel(
        "\n".join(lines),
        title="[bold]NFT Marketplace[/bold]",
        border_style="cyan",
        padding=(1, 2),
    )


def render_history(entries: list[JournalEntry], token_id: int) -> Table:
    """Render the journaled transactions of one token, oldest first."""
    table = Table(title=f"History of token {token_id} (amounts in ETH)")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Time (UTC)")
    table.add_column("Kind")
    table.add_column("Caller")
    table.add_column("Price", justify="right")
    table.add_column("Paid", justify="right", style="green")

    for entry in entries:
        price = entry.arguments.get("price")
        table.add_row(
            str(entry.sequence),
            entry.timestamp_utc.strftime("%Y-%m-%d %H:%M:%S"),
            entry.kind.value,
            entry.caller,
            format_units(int(price)) if price is not None else "-",
            format_units(int(entry.value)),
        )
    return table
