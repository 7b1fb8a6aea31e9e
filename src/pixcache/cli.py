"""Click CLI for pixcache: inspect and manage an on-disk image cache."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from pixcache.cache.manager import ImageCache
from pixcache.config.hierarchy import load_config_hierarchy
from pixcache.errors.exceptions import CodecError, ConfigError

console = Console()
error_console = Console(stderr=True)


def _setup_logging(verbosity: int, default_level: str = "WARNING") -> None:
    """Configure logging based on verbosity level."""
    level = logging.getLevelName(str(default_level).upper())
    if not isinstance(level, int):
        level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
    )


def _open_cache(ctx: click.Context) -> ImageCache:
    from pixcache.core import create_cache

    try:
        return create_cache(**ctx.obj)
    except ConfigError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


@click.group()
@click.version_option(package_name="pixcache")
@click.option("--namespace", type=str, default=None, help="Cache namespace.")
@click.option(
    "--cache-dir", type=click.Path(path_type=Path), help="Base dir of the expiring partition."
)
@click.option(
    "--data-dir", type=click.Path(path_type=Path), help="Base dir of the permanent partition."
)
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
@click.pass_context
def cli(
    ctx: click.Context,
    namespace: str | None,
    cache_dir: Path | None,
    data_dir: Path | None,
    verbose: int,
) -> None:
    """pixcache: two-tier image cache with a permanent partition."""
    _setup_logging(verbose, load_config_hierarchy().get("log_level", "WARNING"))
    ctx.obj = {"namespace": namespace, "cache_dir": cache_dir, "data_dir": data_dir}


@cli.command()
@click.argument("key")
@click.argument("image_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--permanent", is_flag=True, default=False, help="Store in the permanent partition.")
@click.option("--memory-only", is_flag=True, default=False, help="Skip the disk write.")
@click.pass_context
def put(
    ctx: click.Context, key: str, image_path: Path, permanent: bool, memory_only: bool
) -> None:
    """Store IMAGE_PATH under KEY."""
    from pixcache.utils.image import PillowCodec, load_image_bytes

    data = load_image_bytes(image_path)
    try:
        image = PillowCodec().decode(data)
    except CodecError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    with _open_cache(ctx) as cache:
        if memory_only:
            cache.store(key, image, to_disk=False)
            console.print(f"[green]Stored {key} in memory only[/green]")
            return
        written = cache.store(key, image, data=data, permanent=permanent).result()
        target = cache.path_for_key(key, permanent=permanent)

    if not written:
        error_console.print(f"[red]Error:[/red] could not write {target}")
        sys.exit(1)
    console.print(f"[green]Stored {key} at {target}[/green]")


@cli.command()
@click.argument("key")
@click.option("-o", "--output", type=click.Path(path_type=Path), help="Save the image here.")
@click.pass_context
def get(ctx: click.Context, key: str, output: Path | None) -> None:
    """Look KEY up and describe (or save) the cached image."""
    with _open_cache(ctx) as cache:
        result = asyncio.run(cache.query_async(key))
        persisted = cache.is_persisted(key)

    if not result.found:
        error_console.print(f"[yellow]Not cached:[/yellow] {key}")
        sys.exit(1)

    image = result.image
    if output:
        try:
            image.save(output)
        except (ValueError, OSError) as e:
            error_console.print(f"[red]Error:[/red] could not write {output}: {e}")
            sys.exit(1)
        console.print(f"[green]Written to {output}[/green]")
        return

    table = Table(title="Cached Image", show_header=True)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Key", key)
    table.add_row("Source", result.cache_type.value)
    table.add_row("Size", f"{image.width}x{image.height}")
    table.add_row("Mode", image.mode)
    table.add_row("Permanent", "yes" if persisted else "no")
    console.print(table)


@cli.command()
@click.argument("key")
@click.option("--memory-only", is_flag=True, default=False, help="Keep the files on disk.")
@click.pass_context
def remove(ctx: click.Context, key: str, memory_only: bool) -> None:
    """Remove KEY from memory and (unless --memory-only) both partitions."""
    with _open_cache(ctx) as cache:
        cache.remove(key, from_disk=not memory_only).result()
    console.print(f"[green]Removed {key}[/green]")


@cli.command()
@click.argument("keys", nargs=-1, required=True)
@click.option("--urls", is_flag=True, default=False, help="Treat arguments as URLs.")
@click.pass_context
def persisted(ctx: click.Context, keys: tuple[str, ...], urls: bool) -> None:
    """Show which KEYS are held by the permanent partition."""
    with _open_cache(ctx) as cache:
        check = cache.url_persisted if urls else cache.is_persisted
        rows = [(key, check(key)) for key in keys]

    table = Table(title="Permanent Partition", show_header=True)
    table.add_column("Key", style="cyan")
    table.add_column("Persisted")
    for key, flag in rows:
        table.add_row(key, "[green]yes[/green]" if flag else "no")
    console.print(table)


@cli.command()
@click.option("--max-age", type=float, default=None, help="Age in seconds (default: settings).")
@click.pass_context
def sweep(ctx: click.Context, max_age: float | None) -> None:
    """Remove expired files from the expiring partition."""
    with _open_cache(ctx) as cache:
        removed = cache.sweep_expired(max_age).result()
    console.print(f"[green]Swept {removed or 0} expired file(s).[/green]")


@cli.command()
@click.confirmation_option(prompt="Are you sure you want to clear both partitions?")
@click.pass_context
def clear(ctx: click.Context) -> None:
    """Delete every cached file, permanent ones included."""
    with _open_cache(ctx) as cache:
        cache.clear_disk().result()
    console.print("[green]Cache cleared.[/green]")


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show resolved settings and storage roots."""
    with _open_cache(ctx) as cache:
        settings = cache.settings

    table = Table(title="Cache Settings", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Namespace", settings.namespace)
    table.add_row("Expiring root", str(settings.expiring_root))
    table.add_row("Permanent root", str(settings.permanent_root))
    table.add_row("Max cache age (s)", f"{settings.max_cache_age:,.0f}")
    table.add_row("Retention", settings.retention.value)
    table.add_row("Memory cost limit", _limit(settings.memory_cost_limit))
    table.add_row("Memory count limit", _limit(settings.memory_count_limit))
    console.print(table)


def _limit(value: float) -> str:
    return f"{value:,.0f}" if value else "unbounded"


def main() -> None:
    """Entry point for the CLI."""
    cli()
