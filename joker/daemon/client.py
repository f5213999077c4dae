"""Client that ships container artifacts to a daemon over TCP.

One connection is opened for the whole batch. Artifacts are read and
written strictly in order; a failure stops the batch without undoing the
artifacts that were already written. Nothing is read back from the daemon,
so a successful ship means "sent", not "accepted".

Usage:
    shipper = ArtifactShipper(record.address, connect_timeout=5.0)
    names = shipper.ship(["build/a.bin", "build/b.bin"])
"""

import logging
import math
import socket
from enum import Enum
from typing import List, Optional, Sequence

from joker.core.registry import DaemonAddress
from joker.daemon.protocol import encode_frame, load_artifact
from joker.errors import ConnectionFailed, JokerError, TransferInterrupted

logger = logging.getLogger(__name__)


class ShipperState(Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    SENDING = "sending"
    SENT = "sent"
    CONNECT_FAILED = "connect_failed"
    FAILED = "failed"


class ArtifactShipper:
    """
    Sends a batch of artifacts over a single connection.

    Timeouts default to None, which blocks indefinitely on a hung peer.
    """

    def __init__(
        self,
        address: DaemonAddress,
        connect_timeout: Optional[float] = None,
        write_timeout: Optional[float] = None,
    ):
        """
        Initialize shipper.

        Args:
            address: Daemon endpoint
            connect_timeout: Seconds to wait for the TCP connection
            write_timeout: Seconds a single blocking send may take
        """
        for label, value in (("connect_timeout", connect_timeout), ("write_timeout", write_timeout)):
            if value is not None and (not math.isfinite(value) or value <= 0):
                raise ValueError(f"{label} must be a positive finite number or None (got {value})")

        self.address = address
        self.connect_timeout = connect_timeout
        self.write_timeout = write_timeout
        self.state = ShipperState.IDLE
        self.sent: List[str] = []

    def _connect(self) -> socket.socket:
        self.state = ShipperState.CONNECTING
        logger.info("Connecting to daemon at %s", self.address)
        try:
            sock = socket.create_connection(
                self.address.as_tuple(), timeout=self.connect_timeout
            )
        except OSError as exc:
            self.state = ShipperState.CONNECT_FAILED
            raise ConnectionFailed(
                f"cannot connect to daemon at {self.address}: {exc.strerror or exc}"
            ) from exc

        try:
            sock.settimeout(self.write_timeout)
        except (OSError, ValueError):
            sock.close()
            raise
        self.state = ShipperState.CONNECTED
        return sock

    def _send_frame(self, sock: socket.socket, data: bytes, what: str) -> None:
        try:
            sock.sendall(encode_frame(data))
        except OSError as exc:
            raise TransferInterrupted(
                f"transfer to {self.address} interrupted while sending {what}: "
                f"{exc.strerror or exc}"
            ) from exc
        logger.debug("Sent %s (%d bytes)", what, len(data))

    def ship(self, paths: Sequence[str]) -> List[str]:
        """
        Ship artifacts in order.

        Returns:
            Display names of the artifacts sent.

        Raises:
            ConnectionFailed: Connection could not be established; nothing sent.
            MalformedPath, ArtifactUnreadable, ManifestUnreadable: Raised for
                the first bad artifact. Earlier artifacts stay sent.
            TransferInterrupted: A write failed mid-batch.
        """
        self.sent = []
        with self._connect() as sock:
            try:
                for path in paths:
                    self.state = ShipperState.SENDING
                    artifact = load_artifact(path)
                    self._send_frame(sock, artifact.name.encode("utf-8"), f"name of {artifact.name}")
                    self._send_frame(sock, artifact.payload, f"payload of {artifact.name}")
                    self._send_frame(sock, artifact.manifest, f"manifest of {artifact.name}")
                    self.sent.append(artifact.name)
            except JokerError as exc:
                self.state = ShipperState.FAILED
                logger.error(
                    "Batch to %s stopped after %d artifact(s): %s",
                    self.address,
                    len(self.sent),
                    exc,
                )
                raise

        self.state = ShipperState.SENT
        return list(self.sent)
