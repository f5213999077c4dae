"""
Command handlers for the joker CLI.

Each handler receives its RegistryStore explicitly, runs
load -> mutate in memory -> save, and reports through UIManager.
Handlers never raise taxonomy errors: they print one line and return a
non-zero exit code. Registry state is only saved after a fully successful
mutation.
"""

import logging
from typing import Optional, Sequence

from joker.core.configs import ClientSettings
from joker.core.registry import add_daemon, checkout_daemon, current_daemon
from joker.core.store import RegistryStore
from joker.daemon.client import ArtifactShipper
from joker.errors import JokerError, NotImplementedCommand
from joker.ui.output import UIManager

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1


def handle_add(
    store: RegistryStore,
    name: str,
    ip: str,
    port: str,
    ui: Optional[UIManager] = None,
) -> int:
    """
    Register a daemon under ``name``; an existing name keeps its address.

    The registry is saved after every successful add, including the
    no-op case where the name was already taken.
    """
    ui = ui or UIManager()
    try:
        state, inserted = add_daemon(store.load_or_empty(), name, ip, port)
        store.save(state)
    except (JokerError, ValueError) as e:
        ui.error(f"Error while adding daemon: {e}")
        return EXIT_ERROR

    if inserted:
        ui.success(f"Added daemon {name} at ip {ip} and port {port}.")
    else:
        ui.warning(
            f"Daemon {name} already registered at {state.daemons[name]}; "
            "keeping the existing address."
        )
    return EXIT_OK


def handle_checkout(
    store: RegistryStore, name: str, ui: Optional[UIManager] = None
) -> int:
    """Make ``name`` the active daemon."""
    ui = ui or UIManager()
    try:
        state = checkout_daemon(store.load_or_empty(), name)
        store.save(state)
    except JokerError as e:
        ui.error(f"Error while switching to daemon {name}: {e}")
        return EXIT_ERROR

    ui.success(f"Switching to daemon {name}.")
    return EXIT_OK


def handle_current(store: RegistryStore, ui: Optional[UIManager] = None) -> int:
    ui = ui or UIManager()
    try:
        record = current_daemon(store.load_or_empty())
    except JokerError as e:
        ui.error(f"Error: {e}")
        return EXIT_ERROR

    ui.info(f"{record.name} ({record.address})")
    return EXIT_OK


def handle_list(store: RegistryStore, ui: Optional[UIManager] = None) -> int:
    """Print the registry as a table."""
    ui = ui or UIManager()
    try:
        state = store.load_or_empty()
    except JokerError as e:
        ui.error(f"Error: {e}")
        return EXIT_ERROR

    from joker.ui.registry_view import show_registry
    show_registry(state)
    return EXIT_OK


def handle_run(
    store: RegistryStore,
    settings: ClientSettings,
    paths: Sequence[str],
    ui: Optional[UIManager] = None,
) -> int:
    """
    Ship artifacts to the active daemon.

    Artifacts written before a failure stay delivered; the error message
    says how many made it.
    """
    ui = ui or UIManager()
    try:
        record = current_daemon(store.load_or_empty())
    except JokerError as e:
        ui.error(f"Error: {e}")
        return EXIT_ERROR

    shipper = ArtifactShipper(
        record.address,
        connect_timeout=settings.connect_timeout,
        write_timeout=settings.write_timeout,
    )
    try:
        names = shipper.ship(paths)
    except JokerError as e:
        ui.error(f"Error while running containers at daemon {record.name}: {e}")
        if shipper.sent:
            ui.warning(f"Already sent: {', '.join(shipper.sent)}")
        return EXIT_ERROR

    ui.success(
        f"Sent containers {', '.join(names)} to daemon {record.name} at {record.address}."
    )
    return EXIT_OK


def handle_trace() -> int:
    """Event tracing is reserved; nothing to do yet."""
    logger.debug("trace requested; no events are traced yet")
    return EXIT_OK


def handle_logs(name: str, ui: Optional[UIManager] = None) -> int:
    ui = ui or UIManager()
    error = NotImplementedCommand(f"logs for container '{name}' are not implemented yet")
    ui.error(f"Error: {error}")
    return EXIT_ERROR
