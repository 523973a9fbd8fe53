"""CLI entrypoint using typer."""

from __future__ import annotations

import json
from typing import Any

import structlog
import typer
from rich.console import Console

from nscache_core.config.settings import Settings
from nscache_core.exceptions import CacheInitializationError, UnsupportedOperationError
from nscache_engine.facade import CleanMode, NamespacedCache
from nscache_engine.observability import configure_logging

app = typer.Typer(
    name="nscache",
    help="Namespaced cache on a shared memcached cluster",
)
console = Console()
logger = structlog.get_logger()

_MISSING = object()


def _open_cache(prefix: str | None, verbose: bool) -> NamespacedCache:
    """Load settings, configure logging, and build the cache or exit 1."""
    settings = Settings()
    if prefix:
        settings.prefix = prefix
    if verbose:
        settings.log_level = "DEBUG"

    configure_logging(settings)
    try:
        cache = NamespacedCache.from_settings(settings)
    except CacheInitializationError as exc:
        console.print(f"[red]Error:[/red] {exc}", style="bold")
        raise typer.Exit(code=1) from exc
    logger.debug("cache_opened", index=settings.store_cache_info)
    return cache


def _print_value(value: Any, as_json: bool) -> None:  # noqa: ANN401
    if as_json:
        console.print_json(json.dumps(value, default=str))
    else:
        console.print(str(value), markup=False, highlight=False)


PrefixOption = typer.Option(None, "--prefix", "-p", help="Namespace (overrides NSC_PREFIX)")
VerboseOption = typer.Option(False, "-v", "--verbose", help="Enable debug logging")


@app.command()
def get(
    key: str = typer.Argument(..., help="Logical cache key"),
    as_json: bool = typer.Option(False, "--json", help="Print the value as JSON"),
    prefix: str | None = PrefixOption,
    verbose: bool = VerboseOption,
) -> None:
    """Print the value stored under KEY."""
    cache = _open_cache(prefix, verbose)
    value = cache.get(key, _MISSING)
    if value is _MISSING:
        console.print(f"[yellow]Not found:[/yellow] {key}")
        raise typer.Exit(code=1)
    _print_value(value, as_json)


@app.command("set")
def set_(
    key: str = typer.Argument(..., help="Logical cache key"),
    value: str = typer.Argument(..., help="Value to store"),
    ttl: int | None = typer.Option(None, "--ttl", min=0, help="Lifetime in seconds"),
    as_json: bool = typer.Option(False, "--json", help="Parse VALUE as JSON"),
    prefix: str | None = PrefixOption,
    verbose: bool = VerboseOption,
) -> None:
    """Store VALUE under KEY."""
    payload: Any = value
    if as_json:
        try:
            payload = json.loads(value)
        except json.JSONDecodeError as exc:
            console.print(f"[red]Error:[/red] invalid JSON value: {exc}")
            raise typer.Exit(code=1) from exc

    cache = _open_cache(prefix, verbose)
    if not cache.set(key, payload, ttl):
        console.print(f"[red]Error:[/red] store rejected write for {key}")
        raise typer.Exit(code=1)
    console.print(f"[green]Stored[/green] {key}")


@app.command()
def has(
    key: str = typer.Argument(..., help="Logical cache key"),
    prefix: str | None = PrefixOption,
    verbose: bool = VerboseOption,
) -> None:
    """Print whether KEY holds a value."""
    cache = _open_cache(prefix, verbose)
    console.print("true" if cache.has(key) else "false")


@app.command()
def remove(
    key: str = typer.Argument(..., help="Logical cache key"),
    prefix: str | None = PrefixOption,
    verbose: bool = VerboseOption,
) -> None:
    """Remove KEY and its metadata."""
    cache = _open_cache(prefix, verbose)
    if cache.remove(key):
        console.print(f"[green]Removed[/green] {key}")
    else:
        console.print(f"[yellow]Nothing to remove:[/yellow] {key}")


@app.command()
def clean(
    mode: CleanMode = typer.Option(CleanMode.ALL, "--mode", help="all, old, or namespace"),
    prefix: str | None = PrefixOption,
    verbose: bool = VerboseOption,
) -> None:
    """Clean the cache. Mode 'all' flushes every namespace on the cluster."""
    cache = _open_cache(prefix, verbose)
    try:
        cleaned = cache.clean(mode)
    except UnsupportedOperationError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    if not cleaned:
        console.print("[red]Error:[/red] store rejected flush")
        raise typer.Exit(code=1)
    console.print(f"[green]Cleaned[/green] mode={mode.value}")


@app.command()
def keys(
    prefix: str | None = PrefixOption,
    verbose: bool = VerboseOption,
) -> None:
    """List keys recorded in the namespace key index."""
    cache = _open_cache(prefix, verbose)
    if not cache.tracker.enabled:
        console.print("[yellow]Key index disabled[/yellow] (set NSC_STORE_CACHE_INFO=true)")
        raise typer.Exit(code=1)
    for key in cache.get_cache_info():
        console.print(key, markup=False, highlight=False)


@app.command()
def metadata(
    key: str = typer.Argument(..., help="Logical cache key"),
    prefix: str | None = PrefixOption,
    verbose: bool = VerboseOption,
) -> None:
    """Print lastModified/timeout for KEY."""
    cache = _open_cache(prefix, verbose)
    meta = cache.get_metadata(key)
    if meta is None:
        console.print(f"[yellow]No metadata:[/yellow] {key}")
        raise typer.Exit(code=1)
    console.print_json(json.dumps(meta.to_record()))


@app.command()
def version() -> None:
    """Show version."""
    console.print("nscache v0.1.0")


if __name__ == "__main__":
    app()
