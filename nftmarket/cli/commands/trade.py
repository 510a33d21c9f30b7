"""Trading commands: ``mint``, ``buy``, ``resell``, ``cancel``, ``set-fee``.

Each command restores the marketplace from its journal, submits one
transaction as ``--caller`` and journals it on success.  Amounts are given
in ETH.  A reverted transaction prints its reason and exits with code 1.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from nftmarket.cli._common import console, journal_option, load_market, to_wei, transaction
from nftmarket.core.units import format_units

_CALLER = typer.Option(..., "--caller", "-c", help="Identity submitting the transaction.")


def mint_cmd(
    token_uri: str = typer.Argument(..., help="Token metadata URI."),
    price: str = typer.Argument(..., help="Asking price in ETH."),
    caller: str = _CALLER,
    journal: Optional[Path] = journal_option(),
) -> None:
    """Mint a token and list it for sale, paying the listing fee."""
    market = load_market(journal)
    with transaction("createToken"):
        token_id = market.create_token(
            token_uri,
            to_wei(price),
            caller=caller,
            value=market.get_listing_price(),
        )
    console.print(
        f"[bold green]Minted token {token_id}[/bold green] listed for {price} ETH."
    )


def buy_cmd(
    token_id: int = typer.Argument(..., help="Token to buy."),
    caller: str = _CALLER,
    value: Optional[str] = typer.Option(
        None, "--value", "-v", help="Payment in ETH (default: the asking price)."
    ),
    journal: Optional[Path] = journal_option(),
) -> None:
    """Buy a listed token."""
    market = load_market(journal)
    with transaction("createMarketSale"):
        if value is None:
            payment = market.get_item(token_id).price
        else:
            payment = to_wei(value)
        market.create_market_sale(token_id, caller=caller, value=payment)
    console.print(
        f"[bold green]Bought token {token_id}[/bold green] for "
        f"{format_units(payment)} ETH."
    )


def resell_cmd(
    token_id: int = typer.Argument(..., help="Token to put back on the market."),
    price: str = typer.Argument(..., help="New asking price in ETH."),
    caller: str = _CALLER,
    journal: Optional[Path] = journal_option(),
) -> None:
    """Relist an owned token, paying the listing fee."""
    market = load_market(journal)
    with transaction("resellToken"):
        market.resell_token(
            token_id,
            to_wei(price),
            caller=caller,
            value=market.get_listing_price(),
        )
    console.print(
        f"[bold green]Relisted token {token_id}[/bold green] for {price} ETH."
    )


def cancel_cmd(
    token_id: int = typer.Argument(..., help="Token whose listing to cancel."),
    caller: str = _CALLER,
    journal: Optional[Path] = journal_option(),
) -> None:
    """Cancel a listing and return the token to its seller."""
    market = load_market(journal)
    with transaction("cancelItemListing"):
        market.cancel_item_listing(token_id, caller=caller)
    console.print(f"[bold green]Cancelled listing for token {token_id}.[/bold green]")


def set_fee_cmd(
    listing_fee: str = typer.Argument(..., help="New listing fee in ETH."),
    caller: str = _CALLER,
    journal: Optional[Path] = journal_option(),
) -> None:
    """Change the listing fee (marketplace owner only)."""
    market = load_market(journal)
    with transaction("updateListingPrice"):
        market.update_listing_price(to_wei(listing_fee), caller=caller)
    console.print(f"[bold green]Listing fee set to {listing_fee} ETH.[/bold green]")
