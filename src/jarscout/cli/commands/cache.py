"""Cache command for CLI."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from jarscout.cli.formatting import format_size, format_state
from jarscout.cli.main import app, resolve_cache_dir


@app.command()
def cache(
    cache_dir: Path | None = typer.Option(
        None,
        "--cache-dir",
        "-c",
        help="Cache root. Defaults to JARSCOUT_CACHE_DIR or ~/.cache/jarscout.",
    ),
) -> None:
    """Show unpacked collection slots and their state."""
    from jarscout.adapters.cache import CollectionCache

    collection_cache = CollectionCache(resolve_cache_dir(cache_dir))
    slots = collection_cache.slots()

    if not slots:
        typer.echo(f"No unpacked collections in {collection_cache.cache_dir}.")
        return

    # Build Rich table
    table = Table()
    table.add_column("Slot")
    table.add_column("State")
    table.add_column("Size", justify="right")

    for slot in slots:
        table.add_row(slot.name, format_state(slot.state), format_size(slot.size_bytes()))

    # Force terminal output to ensure tables render correctly in all environments
    console = Console(force_terminal=True)
    console.print(table)

    stats = collection_cache.statistics()
    typer.echo(
        f"{stats['valid_count']}/{stats['slot_count']} valid, "
        f"{format_size(stats['total_size'])} in {stats['file_count']} files"
    )
