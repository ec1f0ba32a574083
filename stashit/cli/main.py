"""
stashit CLI entry point.

Commands:
    stashit check             — Run the adapter self-test
    stashit set KEY VALUE     — Store an item
    stashit get KEY           — Show an item
    stashit has KEY           — Check if an item exists
    stashit remove KEY        — Remove an item
    stashit set-extra KEY JSON
    stashit get-extra KEY
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable

import typer
from rich.console import Console
from rich.markup import escape

from stashit.core.config import StashItConfig
from stashit.core.errors import StashItError
from stashit.core.log import setup_logging
from stashit.core.stash import StashIt

app = typer.Typer(
    name="stashit",
    help="stashit — one key/value/extra API over pluggable storage.",
    add_completion=False,
)

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    config: Path = typer.Option(None, "--config", "-c", help="Config file (TOML)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug output"),
) -> None:
    """Options shared by all commands."""
    ctx.obj = {"config": config, "verbose": verbose}


def _load_config(ctx: typer.Context) -> StashItConfig:
    config_path: Path | None = ctx.obj["config"]
    if config_path is not None and not config_path.exists():
        raise StashItError(f"Config file not found: {config_path}")

    config = StashItConfig.load(project_path=config_path)

    log_level = logging.DEBUG if ctx.obj["verbose"] else config.logging.level
    log_dir = Path(config.logging.log_dir) if config.logging.log_dir else None
    setup_logging(log_dir=log_dir, console_level=log_level)
    return config


def _run(ctx: typer.Context, operation: Callable[[StashIt], Awaitable[Any]]) -> Any:
    """Build the configured StashIt and run one operation on it."""
    try:
        stash = StashIt.from_config(_load_config(ctx))
        return asyncio.run(operation(stash))
    except StashItError as e:
        console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(1)


def _parse_value(text: str) -> Any:
    """Parse JSON, falling back to the raw string."""
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def _parse_extra(text: str | None) -> dict[str, Any]:
    if text is None:
        return {}
    try:
        extra = json.loads(text)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"Extra must be a JSON object: {e}")
    if not isinstance(extra, dict):
        raise typer.BadParameter("Extra must be a JSON object")
    return extra


def _print_json(data: Any) -> None:
    console.print_json(json.dumps(data))


@app.command()
def check(ctx: typer.Context) -> None:
    """Run the storage self-test against the configured backend."""
    _run(ctx, lambda stash: stash.check_storage())
    console.print("[green]Storage OK[/green]")


@app.command("set")
def set_(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Item key"),
    value: str = typer.Argument(..., help="Value (JSON, or a plain string)"),
    extra: str = typer.Option(None, "--extra", "-e", help="Extra metadata (JSON object)"),
) -> None:
    """Store an item, replacing any existing one."""
    parsed_extra = _parse_extra(extra)
    item = _run(ctx, lambda stash: stash.set_item(key, _parse_value(value), parsed_extra))
    _print_json(item.to_dict())


@app.command()
def get(ctx: typer.Context, key: str = typer.Argument(..., help="Item key")) -> None:
    """Show an item."""
    item = _run(ctx, lambda stash: stash.get_item(key))
    if item is None:
        console.print(f"[yellow]Item '{escape(key)}' not found[/yellow]")
        raise typer.Exit(1)
    _print_json(item.to_dict())


@app.command()
def has(ctx: typer.Context, key: str = typer.Argument(..., help="Item key")) -> None:
    """Print true if the item exists, false otherwise."""
    _print_json(_run(ctx, lambda stash: stash.has_item(key)))


@app.command()
def remove(ctx: typer.Context, key: str = typer.Argument(..., help="Item key")) -> None:
    """Remove an item. Prints whether anything was removed."""
    _print_json(_run(ctx, lambda stash: stash.remove_item(key)))


@app.command("set-extra")
def set_extra(
    ctx: typer.Context,
    key: str = typer.Argument(..., help="Item key"),
    extra: str = typer.Argument(..., help="Extra metadata (JSON object)"),
) -> None:
    """Replace the extra metadata of an existing item."""
    parsed_extra = _parse_extra(extra)
    result = _run(ctx, lambda stash: stash.set_extra(key, parsed_extra))
    if result is False:
        console.print(f"[yellow]Item '{escape(key)}' not found[/yellow]")
        raise typer.Exit(1)
    _print_json(result)


@app.command("get-extra")
def get_extra(ctx: typer.Context, key: str = typer.Argument(..., help="Item key")) -> None:
    """Show the extra metadata of an item."""
    extra = _run(ctx, lambda stash: stash.get_extra(key))
    if extra is None:
        console.print(f"[yellow]Item '{escape(key)}' not found[/yellow]")
        raise typer.Exit(1)
    _print_json(extra)


@app.command()
def version() -> None:
    """Show stashit version."""
    from stashit import __version__

    console.print(f"stashit v{__version__}")


if __name__ == "__main__":
    app()
