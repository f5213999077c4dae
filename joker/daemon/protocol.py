"""Length-prefixed frame protocol for shipping artifacts to a daemon.

Each artifact is sent as three frames, in order:

    u64 little-endian length | artifact display name (UTF-8)
    u64 little-endian length | artifact payload
    u64 little-endian length | manifest payload (read from "<path>.joker")

There is no preamble, trailer, checksum or acknowledgement. The client
closing the connection marks the end of the batch.
"""

import logging
import os
import struct
from dataclasses import dataclass
from typing import BinaryIO, Iterator, List, Optional

from joker.errors import ArtifactUnreadable, MalformedPath, ManifestUnreadable

logger = logging.getLogger(__name__)

MANIFEST_SUFFIX = ".joker"

LENGTH_PREFIX = struct.Struct("<Q")


@dataclass
class ArtifactFrame:
    """One artifact in memory, ready to be written."""
    name: str
    payload: bytes
    manifest: bytes

    def encode(self) -> bytes:
        """Serialize to the three-frame wire form."""
        return b"".join(
            encode_frame(part)
            for part in (self.name.encode("utf-8"), self.payload, self.manifest)
        )


def encode_frame(data: bytes) -> bytes:
    """Prefix ``data`` with its length as an unsigned 64-bit little-endian int."""
    return LENGTH_PREFIX.pack(len(data)) + data


def manifest_path(path: str) -> str:
    return f"{path}{MANIFEST_SUFFIX}"


def artifact_name(path: str) -> str:
    """
    Display name of an artifact: the text after the last path separator.

    Raises:
        MalformedPath: If the path is empty or ends with a separator.
    """
    separators = {"/", os.sep}
    if os.altsep:
        separators.add(os.altsep)

    name = path
    for sep in separators:
        name = name.rsplit(sep, 1)[-1]

    if not name:
        raise MalformedPath(f"bad file path '{path}'")
    return name


def _read_file(path: str) -> bytes:
    with open(path, "rb") as handle:
        return handle.read()


def load_artifact(path: str) -> ArtifactFrame:
    """
    Build an ArtifactFrame from an artifact path and its companion manifest.

    Raises:
        MalformedPath: If no display name can be derived.
        ArtifactUnreadable: If the artifact cannot be read.
        ManifestUnreadable: If "<path>.joker" cannot be read.
    """
    name = artifact_name(path)

    try:
        payload = _read_file(path)
    except OSError as exc:
        raise ArtifactUnreadable(
            f"cannot read artifact {path}: {exc.strerror or exc}"
        ) from exc

    manifest_file = manifest_path(path)
    try:
        manifest = _read_file(manifest_file)
    except OSError as exc:
        raise ManifestUnreadable(
            f"cannot read manifest {manifest_file}: {exc.strerror or exc}"
        ) from exc

    logger.debug(
        "Loaded artifact %s (%d bytes, manifest %d bytes)",
        name,
        len(payload),
        len(manifest),
    )
    return ArtifactFrame(name=name, payload=payload, manifest=manifest)


# ---------------------------------------------------------------------------
# Receiving side
# ---------------------------------------------------------------------------

def _read_exact(stream: BinaryIO, size: int) -> Optional[bytes]:
    """Read exactly ``size`` bytes; None on clean EOF before the first byte."""
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            if remaining == size:
                return None
            raise EOFError(f"stream ended {remaining} bytes short of a {size}-byte field")
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def read_frame(stream: BinaryIO) -> Optional[bytes]:
    """
    Read one frame from a binary stream.

    Returns:
        The frame body, or None if the stream is at a clean end of batch.

    Raises:
        EOFError: If the stream ends inside a frame.
    """
    prefix = _read_exact(stream, LENGTH_PREFIX.size)
    if prefix is None:
        return None
    (length,) = LENGTH_PREFIX.unpack(prefix)
    if length == 0:
        return b""
    body = _read_exact(stream, length)
    if body is None:
        raise EOFError(f"stream ended before a {length}-byte frame body")
    return body


def read_artifact(stream: BinaryIO) -> Optional[ArtifactFrame]:
    """Read the three frames of one artifact, or None at end of batch."""
    name = read_frame(stream)
    if name is None:
        return None

    payload = read_frame(stream)
    manifest = read_frame(stream) if payload is not None else None
    if payload is None or manifest is None:
        raise EOFError(f"batch ended in the middle of artifact '{name!r}'")

    return ArtifactFrame(name=name.decode("utf-8"), payload=payload, manifest=manifest)


def iter_artifacts(stream: BinaryIO) -> Iterator[ArtifactFrame]:
    """Yield artifacts until the sender closes the stream."""
    while True:
        artifact = read_artifact(stream)
        if artifact is None:
            return
        yield artifact


def read_batch(stream: BinaryIO) -> List[ArtifactFrame]:
    return list(iter_artifacts(stream))
