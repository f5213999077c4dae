"""Daemon-facing side of the joker client.

- protocol: length-prefixed frame codec and artifact loading
- client: ArtifactShipper, one TCP connection per batch

The daemon itself runs elsewhere; this package only talks to it.
"""

from joker.daemon.client import ArtifactShipper, ShipperState
from joker.daemon.protocol import (
    MANIFEST_SUFFIX,
    ArtifactFrame,
    encode_frame,
    load_artifact,
    read_artifact,
    read_frame,
)

__all__ = [
    "ArtifactShipper",
    "ShipperState",
    "MANIFEST_SUFFIX",
    "ArtifactFrame",
    "encode_frame",
    "load_artifact",
    "read_artifact",
    "read_frame",
]
