"""nftmarket CLI — Typer-based command-line interface.

Provides the ``nftmarket`` command with subcommands for deploying a
marketplace journal, trading tokens and querying listings.

All output uses Rich for formatted terminal display.
"""
