"""CLI commands for jarscout."""

from __future__ import annotations

import logging
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING

import typer

from jarscout.core.exceptions import JarscoutError
from jarscout.core.models import ClasspathMode


if TYPE_CHECKING:
    from jarscout.core.ports import LoadingContext


app = typer.Typer(
    name="jarscout",
    help="Locate the classpath for an embedded Kotlin compiler.",
    no_args_is_help=True,
)


class Library(StrEnum):
    """Libraries the lib command can resolve."""

    STDLIB = "stdlib"
    REFLECT = "reflect"
    SCRIPT_RUNTIME = "script-runtime"
    COMPILER = "compiler"
    COMPILER_SCRIPTING = "compiler-scripting"


def _fail(error: JarscoutError) -> typer.Exit:
    """Print an error with its recovery hint and build the exit."""
    typer.echo(f"Error: {error}", err=True)
    if error.recovery_hint:
        typer.echo(f"Hint: {error.recovery_hint}", err=True)
    return typer.Exit(1)


def build_context(paths: list[Path] | None) -> LoadingContext:
    """Context over explicit --path entries, or the ambient context."""
    from jarscout.adapters.contexts import PathListContext, default_context

    if paths:
        return PathListContext(paths, label="--path")
    return default_context()


def resolve_cache_dir(cache_dir: Path | None) -> Path:
    """The --cache-dir value, or the configured default."""
    from jarscout.config import default_cache_dir

    return cache_dir if cache_dir is not None else default_cache_dir()


@app.callback()
def configure(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log discovery details to stderr.",
    ),
) -> None:
    """Locate the classpath for an embedded Kotlin compiler."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


@app.command()
def classpath(
    names: list[str] = typer.Argument(..., help="Required library names, e.g. kotlin-stdlib.jar."),
    mode: ClasspathMode = typer.Option(
        ClasspathMode.MINIMAL,
        "--mode",
        "-m",
        help="all: whole list if all match; minimal: one entry per name; any: whole list if any match.",
    ),
    paths: list[Path] | None = typer.Option(
        None,
        "--path",
        "-p",
        help="Directory or archive to search. Repeatable. Defaults to sys.path and CLASSPATH.",
    ),
    cache_dir: Path | None = typer.Option(
        None,
        "--cache-dir",
        "-c",
        help="Where to unpack collection archives. Defaults to JARSCOUT_CACHE_DIR or ~/.cache/jarscout.",
    ),
    no_unpack: bool = typer.Option(
        False,
        "--no-unpack",
        help="Do not unpack collection archives.",
    ),
) -> None:
    """Print a classpath satisfying the required names, one entry per line."""
    from jarscout.core.services import ClasspathDiscovery

    context = build_context(paths)
    unpack_to = None if no_unpack else resolve_cache_dir(cache_dir)

    try:
        result = ClasspathDiscovery().discover_or_raise(context, names, mode, unpack_to)
    except JarscoutError as e:
        raise _fail(e) from None

    for entry in result:
        typer.echo(str(entry))


@app.command()
def lib(
    library: Library = typer.Argument(..., help="Library to resolve."),
    paths: list[Path] | None = typer.Option(
        None,
        "--path",
        "-p",
        help="Directory or archive to search. Repeatable. Defaults to sys.path and CLASSPATH.",
    ),
) -> None:
    """Print the location of a well-known Kotlin library."""
    from jarscout.core.resolver import KnownLibraryResolver

    resolver = KnownLibraryResolver(context=build_context(paths))
    lookups = {
        Library.STDLIB: lambda: [resolver.stdlib()],
        Library.REFLECT: lambda: [resolver.reflect_or_none()],
        Library.SCRIPT_RUNTIME: lambda: [resolver.script_runtime()],
        Library.COMPILER: resolver.compiler_classpath,
        Library.COMPILER_SCRIPTING: resolver.compiler_with_scripting_classpath,
    }

    try:
        found = lookups[library]()
    except JarscoutError as e:
        raise _fail(e) from None

    if not any(found):
        typer.echo(f"Library '{library}' not found.", err=True)
        raise typer.Exit(1)
    for entry in found:
        typer.echo(str(entry))


@app.command()
def unpack(
    archive: Path = typer.Argument(..., help="Collection archive (war, jar or zip)."),
    cache_dir: Path | None = typer.Option(
        None,
        "--cache-dir",
        "-c",
        help="Cache root. Defaults to JARSCOUT_CACHE_DIR or ~/.cache/jarscout.",
    ),
) -> None:
    """Unpack a collection archive into the cache and list its entries."""
    from jarscout.adapters.cache import CollectionCache

    if not archive.is_file():
        typer.echo(f"Error: Archive not found: {archive}", err=True)
        raise typer.Exit(1)

    cache = CollectionCache(resolve_cache_dir(cache_dir))
    try:
        entries = cache.unpack(archive)
    except JarscoutError as e:
        raise _fail(e) from None

    for entry in entries:
        typer.echo(f"{entry.kind}: {entry.path}")


def main() -> None:
    """Entry point for the CLI."""
    app()
