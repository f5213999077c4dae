"""Persistence for the daemon registry.

The registry is stored as JSON:

    {
        "daemons": {"west": {"ip": "127.0.0.1", "port": 9000}},
        "active_daemon": {"name": "west", "ip": "127.0.0.1", "port": 9000}
    }

``active_daemon`` is null until the first checkout. Saves go through a
temporary file in the same directory and ``os.replace``, so a reader sees
either the previous file or the new one.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict

from joker.core.registry import DaemonAddress, DaemonRecord, RegistryState
from joker.errors import (
    ConfigCorrupt,
    ConfigUnavailable,
    ConfigUnwritable,
    InvalidAddress,
)

logger = logging.getLogger(__name__)


def _address_to_dict(address: DaemonAddress) -> Dict[str, Any]:
    return {"ip": str(address.ip), "port": address.port}


def _address_from_dict(data: Any, where: str) -> DaemonAddress:
    if not isinstance(data, dict) or "ip" not in data or "port" not in data:
        raise ConfigCorrupt(f"{where}: expected an object with 'ip' and 'port'")
    if not isinstance(data["port"], int) or isinstance(data["port"], bool):
        raise ConfigCorrupt(f"{where}: port must be an integer")
    try:
        return DaemonAddress.parse(data["ip"], str(data["port"]))
    except InvalidAddress as exc:
        raise ConfigCorrupt(f"{where}: {exc}") from exc


def state_to_dict(state: RegistryState) -> Dict[str, Any]:
    active = None
    if state.active_daemon is not None:
        active = {"name": state.active_daemon.name}
        active.update(_address_to_dict(state.active_daemon.address))

    return {
        "daemons": {
            name: _address_to_dict(address)
            for name, address in sorted(state.daemons.items())
        },
        "active_daemon": active,
    }


def state_from_dict(data: Any) -> RegistryState:
    """
    Rebuild a RegistryState from decoded JSON.

    Raises:
        ConfigCorrupt: If the data does not have the expected shape.
    """
    if not isinstance(data, dict):
        raise ConfigCorrupt("registry root must be an object")

    raw_daemons = data.get("daemons", {})
    if not isinstance(raw_daemons, dict):
        raise ConfigCorrupt("'daemons' must be an object")

    daemons = {}
    for name, raw_address in raw_daemons.items():
        if not name:
            raise ConfigCorrupt("daemon names must not be empty")
        daemons[name] = _address_from_dict(raw_address, f"daemon '{name}'")

    active = None
    raw_active = data.get("active_daemon")
    if raw_active is not None:
        if not isinstance(raw_active, dict) or not isinstance(raw_active.get("name"), str) \
                or not raw_active["name"]:
            raise ConfigCorrupt("'active_daemon' must be an object with a 'name'")
        active = DaemonRecord(
            name=raw_active["name"],
            address=_address_from_dict(raw_active, "active daemon"),
        )

    return RegistryState(daemons=daemons, active_daemon=active)


class RegistryStore:
    """
    Load/save interface for the registry file.

    Command handlers receive a store instead of touching the file directly,
    which lets tests point them at a temporary path.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> RegistryState:
        """
        Read the registry.

        Raises:
            ConfigUnavailable: If the file is missing or unreadable.
            ConfigCorrupt: If the file is not a valid registry.
        """
        try:
            raw = self.path.read_bytes()
        except OSError as exc:
            raise ConfigUnavailable(
                f"cannot read registry at {self.path}: {exc.strerror or exc}"
            ) from exc

        try:
            data = json.loads(raw.decode("utf-8"))
        except (ValueError, RecursionError) as exc:
            raise ConfigCorrupt(f"registry at {self.path} is not valid JSON: {exc}") from exc

        state = state_from_dict(data)
        logger.debug("Loaded %d daemon(s) from %s", len(state.daemons), self.path)
        return state

    def load_or_empty(self) -> RegistryState:
        """Like load(), but a registry that was never written is empty."""
        if not self.path.exists():
            logger.debug("No registry at %s yet, starting empty", self.path)
            return RegistryState()
        return self.load()

    def save(self, state: RegistryState) -> None:
        """
        Overwrite the registry with ``state``.

        Raises:
            ConfigUnwritable: On any I/O failure.
        """
        payload = json.dumps(state_to_dict(state), indent=2) + "\n"
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            raise ConfigUnwritable(
                f"cannot write registry at {self.path}: {exc.strerror or exc}"
            ) from exc
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

        logger.debug("Saved %d daemon(s) to %s", len(state.daemons), self.path)
