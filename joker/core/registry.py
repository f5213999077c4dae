"""Daemon registry data model.

The registry maps daemon names to network addresses and remembers which
daemon is active. The functions here operate purely in memory; loading and
saving is the job of joker.core.store.RegistryStore.
"""

import ipaddress
import logging
import re
from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple, Union

from joker.errors import InvalidAddress, NoActiveDaemon, UnknownDaemon

logger = logging.getLogger(__name__)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

_PORT_PATTERN = re.compile(r"\+?[0-9]{1,5}")
MAX_PORT = 65535


@dataclass(frozen=True)
class DaemonAddress:
    """Resolved network endpoint of a daemon."""
    ip: IPAddress
    port: int

    @classmethod
    def parse(cls, ip_text: str, port_text: str) -> "DaemonAddress":
        """
        Parse textual IP and port.

        Raises:
            InvalidAddress: If the IP is not a valid IPv4/IPv6 address or the
                port is not an integer in 0..65535.
        """
        try:
            ip = ipaddress.ip_address(str(ip_text).strip())
        except ValueError as exc:
            raise InvalidAddress(f"invalid IP address '{ip_text}'") from exc

        port_text = str(port_text).strip()
        if not _PORT_PATTERN.fullmatch(port_text) or int(port_text) > MAX_PORT:
            raise InvalidAddress(f"invalid port '{port_text}'")

        return cls(ip=ip, port=int(port_text))

    def as_tuple(self) -> Tuple[str, int]:
        """(host, port) pair suitable for socket.create_connection."""
        return str(self.ip), self.port

    def __str__(self) -> str:
        if self.ip.version == 6:
            return f"[{self.ip}]:{self.port}"
        return f"{self.ip}:{self.port}"


@dataclass(frozen=True)
class DaemonRecord:
    name: str
    address: DaemonAddress


@dataclass
class RegistryState:
    """
    Persisted process-wide state.

    ``active_daemon`` is kept verbatim and is not required to still be
    present in ``daemons``.
    """
    daemons: Dict[str, DaemonAddress] = field(default_factory=dict)
    active_daemon: Optional[DaemonRecord] = None


def add_daemon(
    state: RegistryState, name: str, ip_text: str, port_text: str
) -> Tuple[RegistryState, bool]:
    """
    Register a daemon if the name is not taken yet.

    The first registration of a name wins: adding an existing name leaves the
    stored address untouched and is not an error.

    Returns:
        (new_state, inserted) where inserted is False for an existing name.

    Raises:
        InvalidAddress: If ip_text or port_text cannot be parsed.
        ValueError: If name is empty.
    """
    if not name:
        raise ValueError("Daemon name must not be empty.")

    address = DaemonAddress.parse(ip_text, port_text)

    if name in state.daemons:
        logger.warning(
            "Daemon %s already registered at %s; ignoring new address %s",
            name,
            state.daemons[name],
            address,
        )
        return state, False

    daemons = dict(state.daemons)
    daemons[name] = address
    return replace(state, daemons=daemons), True


def checkout_daemon(state: RegistryState, name: str) -> RegistryState:
    """
    Make ``name`` the active daemon.

    Raises:
        UnknownDaemon: If the name is not registered. The state is unchanged.
    """
    address = state.daemons.get(name)
    if address is None:
        raise UnknownDaemon(f"no such daemon '{name}'")

    return replace(state, active_daemon=DaemonRecord(name=name, address=address))


def current_daemon(state: RegistryState) -> DaemonRecord:
    """Return the active daemon as stored, without checking ``daemons``."""
    if state.active_daemon is None:
        raise NoActiveDaemon(
            "no active daemon; run 'joker checkout <name>' first"
        )
    return state.active_daemon
