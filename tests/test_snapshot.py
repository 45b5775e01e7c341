"""Tests for the versioned binary snapshot."""

import pickle
import struct

import pytest

from wordnet_index import FormatError, SnapshotVersionError, WordNet, build, snapshot
from wordnet_index.backends import MemoryBackend


@pytest.fixture
def index(sample_resource):
    return build(sample_resource)


class TestRoundTrip:
    def test_header_layout(self, index, tmp_path):
        path = tmp_path / "wn.snapshot"
        snapshot.save(index, path)
        raw = path.read_bytes()
        assert struct.unpack("<I", raw[:4]) == (snapshot.SNAPSHOT_VERSION,)
        assert snapshot.read_version(path) == snapshot.SNAPSHOT_VERSION

    def test_queries_identical_after_reload(self, index, tmp_path):
        path = tmp_path / "wn.snapshot"
        snapshot.save(index, path)
        before = WordNet(MemoryBackend(index))
        after = WordNet(MemoryBackend(snapshot.load(path)))

        for form in ("cat", "run", "hot", "missing"):
            assert before.lookup_entries(form) == after.lookup_entries(form)
        for syn in ("syn1", "syn2", "syn3"):
            for kind in ("hypernym", "hyponym"):
                assert before.get_related_synsets(syn, kind) == (
                    after.get_related_synsets(syn, kind)
                )
        assert set(before.all_entries()) == set(after.all_entries())

    def test_save_creates_parent_dirs(self, index, tmp_path):
        path = tmp_path / "nested" / "dir" / "wn.snapshot"
        snapshot.save(index, path)
        assert path.exists()
        assert not list(path.parent.glob("*.tmp"))


class TestVersionGuard:
    @pytest.mark.parametrize("version", [0, snapshot.SNAPSHOT_VERSION + 1, 2**32 - 1])
    def test_mismatched_version_rejected(self, index, tmp_path, version):
        path = tmp_path / "wn.snapshot"
        path.write_bytes(struct.pack("<I", version) + pickle.dumps(index))
        with pytest.raises(SnapshotVersionError, match="Incompatible snapshot version"):
            snapshot.load(path)

    def test_payload_never_read_on_mismatch(self, index, tmp_path, monkeypatch):
        path = tmp_path / "wn.snapshot"
        path.write_bytes(struct.pack("<I", 99) + pickle.dumps(index))

        def fail(*args, **kwargs):
            raise AssertionError("payload was deserialized")

        monkeypatch.setattr(snapshot.pickle, "load", fail)
        with pytest.raises(SnapshotVersionError) as exc_info:
            snapshot.load(path)
        assert exc_info.value.found == 99
        assert exc_info.value.expected == snapshot.SNAPSHOT_VERSION

    def test_version_error_is_format_error(self):
        assert issubclass(SnapshotVersionError, FormatError)

    def test_truncated_header(self, tmp_path):
        path = tmp_path / "wn.snapshot"
        path.write_bytes(b"\x01\x00")
        with pytest.raises(FormatError, match="truncated"):
            snapshot.load(path)

    def test_corrupt_payload(self, tmp_path):
        path = tmp_path / "wn.snapshot"
        path.write_bytes(struct.pack("<I", snapshot.SNAPSHOT_VERSION) + b"garbage")
        with pytest.raises(FormatError, match="Failed to read snapshot"):
            snapshot.load(path)

    def test_wrong_payload_type(self, tmp_path):
        path = tmp_path / "wn.snapshot"
        path.write_bytes(
            struct.pack("<I", snapshot.SNAPSHOT_VERSION) + pickle.dumps({"a": 1})
        )
        with pytest.raises(FormatError, match="not an index"):
            snapshot.load(path)
