"""Main Typer application — imports and registers all CLI commands.

Entry point: ``nftmarket`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import typer

from nftmarket.cli.commands.deploy import deploy_cmd
from nftmarket.cli.commands.query import (
    history_cmd,
    items_cmd,
    listed_cmd,
    purchased_cmd,
    stats_cmd,
    verify_cmd,
)
from nftmarket.cli.commands.trade import (
    buy_cmd,
    cancel_cmd,
    mint_cmd,
    resell_cmd,
    set_fee_cmd,
)
from nftmarket.config import settings

app = typer.Typer(
    name="nftmarket",
    help="nftmarket: mint, list, buy and resell NFTs on a journaled marketplace ledger.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def _configure() -> None:
    settings.configure_logging()


# Register subcommands
app.command(name="deploy", help="Deploy a marketplace and print its address.")(deploy_cmd)
app.command(name="mint", help="Mint a token and list it for sale.")(mint_cmd)
app.command(name="buy", help="Buy a listed token.")(buy_cmd)
app.command(name="resell", help="Relist an owned token.")(resell_cmd)
app.command(name="cancel", help="Cancel a listing.")(cancel_cmd)
app.command(name="set-fee", help="Change the listing fee (owner only).")(set_fee_cmd)
app.command(name="items", help="Show unsold market items.")(items_cmd)
app.command(name="purchased", help="Show tokens owned by an identity.")(purchased_cmd)
app.command(name="listed", help="Show active listings created by an identity.")(listed_cmd)
app.command(name="stats", help="Show marketplace totals.")(stats_cmd)
app.command(name="history", help="Show the journaled transactions of a token.")(history_cmd)
app.command(name="verify", help="Verify the journal hash chain.")(verify_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
