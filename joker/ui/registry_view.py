"""
Rich rendering of the daemon registry.

Lazy-loaded by the `list` command only, so Rich is not imported on the
hot path of add/checkout/run.
"""

from rich.console import Console
from rich.table import Table

from joker.core.registry import RegistryState


def build_registry_table(state: RegistryState) -> Table:
    """Table of registered daemons with the active one marked."""
    active = state.active_daemon
    table = Table(title="Daemons")
    table.add_column("", width=1)
    table.add_column("Name", style="bold")
    table.add_column("Address")

    for name, address in sorted(state.daemons.items()):
        marker = "*" if active is not None and active.name == name else ""
        table.add_row(marker, name, str(address))

    # Active daemon that is no longer in the map is still what `run` targets
    if active is not None and active.name not in state.daemons:
        table.add_row("*", active.name, f"{active.address} (unregistered)")

    return table


def show_registry(state: RegistryState, console: Console = None) -> None:
    console = console or Console()
    if not state.daemons and state.active_daemon is None:
        console.print("[yellow]No daemons registered. Use 'joker add' first.[/yellow]")
        return
    console.print(build_registry_table(state))
