"""Error taxonomy for the joker client.

Every failure a command can hit maps to one ErrorKind. Call sites can either
catch a concrete subclass or catch JokerError and branch on ``.kind``.
"""

from enum import Enum


class ErrorKind(Enum):
    """Closed set of failure kinds."""

    # Registry storage
    CONFIG_UNAVAILABLE = "config_unavailable"
    CONFIG_CORRUPT = "config_corrupt"
    CONFIG_UNWRITABLE = "config_unwritable"

    # Registry logic
    INVALID_ADDRESS = "invalid_address"
    UNKNOWN_DAEMON = "unknown_daemon"
    NO_ACTIVE_DAEMON = "no_active_daemon"

    # Shipper
    CONNECTION_FAILED = "connection_failed"
    MALFORMED_PATH = "malformed_path"
    ARTIFACT_UNREADABLE = "artifact_unreadable"
    MANIFEST_UNREADABLE = "manifest_unreadable"
    TRANSFER_INTERRUPTED = "transfer_interrupted"

    # Command surface
    NOT_IMPLEMENTED = "not_implemented"


class JokerError(Exception):
    """Base class for all recoverable joker errors."""

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigUnavailable(JokerError):
    kind = ErrorKind.CONFIG_UNAVAILABLE


class ConfigCorrupt(JokerError):
    kind = ErrorKind.CONFIG_CORRUPT


class ConfigUnwritable(JokerError):
    kind = ErrorKind.CONFIG_UNWRITABLE


class InvalidAddress(JokerError):
    kind = ErrorKind.INVALID_ADDRESS


class UnknownDaemon(JokerError):
    kind = ErrorKind.UNKNOWN_DAEMON


class NoActiveDaemon(JokerError):
    kind = ErrorKind.NO_ACTIVE_DAEMON


class ConnectionFailed(JokerError):
    kind = ErrorKind.CONNECTION_FAILED


class MalformedPath(JokerError):
    kind = ErrorKind.MALFORMED_PATH


class ArtifactUnreadable(JokerError):
    kind = ErrorKind.ARTIFACT_UNREADABLE


class ManifestUnreadable(JokerError):
    kind = ErrorKind.MANIFEST_UNREADABLE


class TransferInterrupted(JokerError):
    kind = ErrorKind.TRANSFER_INTERRUPTED


class NotImplementedCommand(JokerError):
    kind = ErrorKind.NOT_IMPLEMENTED
