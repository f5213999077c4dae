"""
Tests for daemon/protocol.py - frame encoding and artifact loading.
"""

import io
import shutil
import struct
import tempfile
import unittest
from pathlib import Path

from joker.daemon.protocol import (
    ArtifactFrame,
    artifact_name,
    encode_frame,
    load_artifact,
    manifest_path,
    read_artifact,
    read_batch,
    read_frame,
)
from joker.errors import ArtifactUnreadable, ErrorKind, MalformedPath, ManifestUnreadable


class TestFrameEncoding(unittest.TestCase):

    def test_encode_frame_prefixes_little_endian_length(self):
        self.assertEqual(encode_frame(b"abc"), b"\x03\x00\x00\x00\x00\x00\x00\x00abc")

    def test_encode_empty_frame(self):
        self.assertEqual(encode_frame(b""), b"\x00" * 8)

    def test_artifact_wire_layout(self):
        artifact = ArtifactFrame(name="a.bin", payload=b"\x01" * 1000, manifest=b"m" * 20)
        data = artifact.encode()

        self.assertEqual(len(data), 8 + 5 + 8 + 1000 + 8 + 20)
        self.assertEqual(len(data), 1049)
        self.assertEqual(struct.unpack_from("<Q", data, 0)[0], 5)
        self.assertEqual(data[8:13], b"a.bin")
        self.assertEqual(struct.unpack_from("<Q", data, 13)[0], 1000)
        self.assertEqual(data[21:1021], b"\x01" * 1000)
        self.assertEqual(struct.unpack_from("<Q", data, 1021)[0], 20)
        self.assertEqual(data[1029:], b"m" * 20)

    def test_read_batch_decodes_consecutive_artifacts(self):
        first = ArtifactFrame("a.bin", b"payload-a", b"manifest-a")
        second = ArtifactFrame("b.bin", b"", b"manifest-b")
        stream = io.BytesIO(first.encode() + second.encode())

        self.assertEqual(read_batch(stream), [first, second])

    def test_read_frame_at_end_of_stream(self):
        self.assertIsNone(read_frame(io.BytesIO(b"")))

    def test_truncated_frame_raises(self):
        truncated = encode_frame(b"abcdef")[:-2]
        with self.assertRaises(EOFError):
            read_frame(io.BytesIO(truncated))

    def test_artifact_cut_after_name_raises(self):
        with self.assertRaises(EOFError):
            read_artifact(io.BytesIO(encode_frame(b"a.bin")))


class TestArtifactName(unittest.TestCase):

    def test_name_is_last_segment(self):
        self.assertEqual(artifact_name("build/out/a.bin"), "a.bin")
        self.assertEqual(artifact_name("/abs/path/b"), "b")
        self.assertEqual(artifact_name("plain.bin"), "plain.bin")

    def test_empty_path_is_malformed(self):
        with self.assertRaises(MalformedPath) as context:
            artifact_name("")
        self.assertEqual(context.exception.kind, ErrorKind.MALFORMED_PATH)

    def test_trailing_separator_is_malformed(self):
        with self.assertRaises(MalformedPath):
            artifact_name("build/")

    def test_manifest_path_appends_suffix(self):
        self.assertEqual(manifest_path("build/a.bin"), "build/a.bin.joker")


class TestLoadArtifact(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.artifact = Path(self.temp_dir) / "a.bin"

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_load_artifact_reads_both_files(self):
        self.artifact.write_bytes(b"\x7fELF-binary")
        Path(f"{self.artifact}.joker").write_bytes(b"entry=main\n")

        frame = load_artifact(str(self.artifact))

        self.assertEqual(frame.name, "a.bin")
        self.assertEqual(frame.payload, b"\x7fELF-binary")
        self.assertEqual(frame.manifest, b"entry=main\n")

    def test_missing_artifact(self):
        with self.assertRaises(ArtifactUnreadable):
            load_artifact(str(self.artifact))

    def test_missing_manifest(self):
        self.artifact.write_bytes(b"binary")
        with self.assertRaises(ManifestUnreadable) as context:
            load_artifact(str(self.artifact))
        self.assertIn("a.bin.joker", str(context.exception))


if __name__ == "__main__":
    unittest.main()
