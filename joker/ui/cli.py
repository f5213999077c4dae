"""Main CLI entry point - one subcommand per registry or shipper operation."""

import logging
from typing import List, Tuple

import typer

from joker import commands
from joker.core.configs import ClientSettings, get_client_settings
from joker.core.store import RegistryStore

app = typer.Typer(
    add_completion=False,
    help="A cli component of the joker project.",
)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


# ============================================================================
# Shared Setup - called on every invocation
# ============================================================================

def _configure_logging(level: str) -> None:
    numeric_level = getattr(logging, level, None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING
    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _load_settings(verbose: bool) -> ClientSettings:
    """Load settings and set up logging. Exits on error."""
    try:
        settings = get_client_settings()
    except ValueError as e:
        typer.echo(f"Error loading configuration: {e}", err=True)
        raise typer.Exit(1)

    _configure_logging("DEBUG" if verbose else settings.log_level)
    return settings


def _setup(ctx: typer.Context) -> Tuple[ClientSettings, RegistryStore]:
    """Returns: (settings, store)"""
    settings = _load_settings(ctx.obj.get("verbose", False) if ctx.obj else False)
    return settings, RegistryStore(settings.registry_path)


def _finish(exit_code: int) -> None:
    if exit_code != commands.EXIT_OK:
        raise typer.Exit(exit_code)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    ctx.obj = {"verbose": verbose}
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


# ============================================================================
# Commands
# ============================================================================

@app.command()
def add(
    ctx: typer.Context,
    name: str = typer.Argument(..., metavar="DAEMON_NAME", help="The name of the daemon."),
    ip: str = typer.Option(..., "--ip", "-i", help="The ip-address of the host."),
    port: str = typer.Option(..., "--port", "-p", help="The port of the host."),
) -> None:
    """
    Add a new daemon with custom ip and port.

    Example: joker add west --ip 10.0.0.5 --port 9000
    """
    _, store = _setup(ctx)
    _finish(commands.handle_add(store, name, ip, port))


@app.command()
def checkout(
    ctx: typer.Context,
    name: str = typer.Argument(..., metavar="DAEMON_NAME", help="The name of the daemon to checkout."),
) -> None:
    """Switch to a daemon."""
    _, store = _setup(ctx)
    _finish(commands.handle_checkout(store, name))


@app.command()
def run(
    ctx: typer.Context,
    containers: List[str] = typer.Argument(
        ..., metavar="CONTAINER_PATH...", help="Container binaries to send; each needs a <path>.joker manifest."
    ),
) -> None:
    """Run specified containers on the current daemon."""
    settings, store = _setup(ctx)
    _finish(commands.handle_run(store, settings, containers))


@app.command()
def trace(ctx: typer.Context) -> None:
    """Traces the events on the daemon. Uses stdout by default."""
    _setup(ctx)
    _finish(commands.handle_trace())


@app.command()
def logs(
    ctx: typer.Context,
    name: str = typer.Argument(..., metavar="CONTAINER_NAME", help="The name of the container to get logs from."),
) -> None:
    """Gets the output of the specified container."""
    _setup(ctx)
    _finish(commands.handle_logs(name))


@app.command("list")
def list_daemons(ctx: typer.Context) -> None:
    """List registered daemons; the active one is marked with '*'."""
    _, store = _setup(ctx)
    _finish(commands.handle_list(store))


@app.command()
def current(ctx: typer.Context) -> None:
    """Show the active daemon."""
    _, store = _setup(ctx)
    _finish(commands.handle_current(store))


def run_app() -> None:
    """Entry point for console script mapping."""
    app()


if __name__ == "__main__":
    run_app()
