"""Click CLI for imgcache: fetch remote images through the tiered cache."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from imgcache.config.hierarchy import load_settings
from imgcache.errors.exceptions import ImageCacheError, InvalidLocatorError
from imgcache.types import LoadPriority

console = Console()
error_console = Console(stderr=True)

_PRIORITY_CHOICES = [p.name.lower() for p in LoadPriority]


def _setup_logging(verbosity: int, base_level: str = "WARNING") -> None:
    """Configure logging from the configured level, lowered by -v flags."""
    level = logging.getLevelNamesMapping().get(base_level.upper(), logging.WARNING)
    if verbosity == 1:
        level = min(level, logging.INFO)
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


def _format_bytes(size: int) -> str:
    if size < 1024:
        return f"{size:,} B"
    value = size / 1024
    for unit in ("KB", "MB", "GB"):
        if value < 1024:
            return f"{value:,.1f} {unit}"
        value /= 1024
    return f"{value:,.1f} TB"


@click.group()
@click.version_option(package_name="imgcache")
def cli() -> None:
    """imgcache: tiered memory/disk/network cache for remote images."""


@cli.command()
@click.argument("url")
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Write the payload here.")
@click.option(
    "--priority",
    type=click.Choice(_PRIORITY_CHOICES, case_sensitive=False),
    default="standard",
    show_default=True,
    help="Request priority hint.",
)
@click.option("--retries", type=int, default=None, help="Attempts for transient network errors.")
@click.option("--cache-dir", type=click.Path(file_okay=False), help="Override the cache directory.")
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def fetch(
    url: str,
    output: str | None,
    priority: str,
    retries: int | None,
    cache_dir: str | None,
    verbose: int,
) -> None:
    """Fetch URL through the cache."""
    from imgcache.core import create_image_cache
    from imgcache.errors.retry import resolve_with_retry

    settings = load_settings(cache_dir=cache_dir, max_retries=retries)
    _setup_logging(verbose, settings.log_level)
    load_priority = LoadPriority[priority.upper()]

    async def _run() -> tuple[bytes, str]:
        async with create_image_cache(settings) as cache:
            key = cache.key_for(url)
            data = await resolve_with_retry(
                cache,
                url,
                load_priority,
                max_attempts=settings.max_retries,
                strategy=settings.retry_strategy,
            )
            return data, str(key)

    try:
        data, key = asyncio.run(_run())
    except InvalidLocatorError as e:
        error_console.print(f"[red]Invalid URL:[/red] {e}")
        sys.exit(2)
    except ImageCacheError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if output:
        Path(output).write_bytes(data)
        console.print(f"[green]Written {len(data):,} bytes to {output}[/green]")
    else:
        _print_summary(url, key, data)


def _print_summary(url: str, key: str, data: bytes) -> None:
    """Print what was fetched."""
    from imgcache.utils.image import describe_image

    table = Table(title="Fetch Summary", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    table.add_row("URL", url)
    table.add_row("Key", key)
    table.add_row("Size", _format_bytes(len(data)))

    info = describe_image(data)
    if info is not None:
        table.add_row("Format", info.format)
        table.add_row("Dimensions", f"{info.width}x{info.height} ({info.mode})")
    else:
        table.add_row("Format", "[yellow]not a recognised image[/yellow]")

    console.print(table)


@cli.command()
@click.argument("url")
@click.option("--cache-dir", type=click.Path(file_okay=False), help="Override the cache directory.")
def key(url: str, cache_dir: str | None) -> None:
    """Show the storage key and on-disk path for URL."""
    from imgcache.cache.disk import FileDiskStore
    from imgcache.cache.keys import derive_key

    try:
        storage_key = derive_key(url)
    except InvalidLocatorError as e:
        error_console.print(f"[red]Invalid URL:[/red] {e}")
        sys.exit(2)

    settings = load_settings(cache_dir=cache_dir)
    store = FileDiskStore(settings.cache_dir)
    path = store.path_for(storage_key)

    console.print(f"Key:  {storage_key}", soft_wrap=True)
    console.print(f"Path: {path}", soft_wrap=True)
    console.print(f"Cached on disk: {'yes' if path.is_file() else 'no'}")


@cli.group()
def cache() -> None:
    """Cache management commands."""


@cache.command("stats")
@click.option("--cache-dir", type=click.Path(file_okay=False), help="Override the cache directory.")
def cache_stats(cache_dir: str | None) -> None:
    """Show disk cache statistics."""
    from imgcache.cache.disk import FileDiskStore
    from imgcache.errors.exceptions import SpaceQueryError

    settings = load_settings(cache_dir=cache_dir)
    store = FileDiskStore(settings.cache_dir)

    table = Table(title="Cache Statistics", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")

    table.add_row("Directory", str(store.cache_dir))
    table.add_row("Entries", str(store.entry_count))
    table.add_row("Size", _format_bytes(store.size_bytes))
    try:
        table.add_row("Free space", _format_bytes(store.available_bytes()))
    except SpaceQueryError:
        table.add_row("Free space", "[yellow]unknown[/yellow]")

    console.print(table)


@cache.command("clear")
@click.option("--cache-dir", type=click.Path(file_okay=False), help="Override the cache directory.")
@click.confirmation_option(prompt="Are you sure you want to clear the cache?")
def cache_clear(cache_dir: str | None) -> None:
    """Remove all cached files."""
    from imgcache.cache.disk import FileDiskStore

    settings = load_settings(cache_dir=cache_dir)
    store = FileDiskStore(settings.cache_dir)
    try:
        removed = store.clear()
    except ImageCacheError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    console.print(f"[green]Cache cleared ({removed} files).[/green]")


def main() -> None:
    """Entry point for the CLI."""
    cli()
