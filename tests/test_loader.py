"""Tests for loading, persistence reuse and forced rebuilds."""

import sqlite3
import struct

import pytest

import corpus
from wordnet_index import LoadOptions, StateError, clear_persisted, load_wordnet
from wordnet_index.backends import MemoryBackend, SqliteBackend


class CountingProvider:
    def __init__(self, factory=corpus.sample):
        self.factory = factory
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.factory()


@pytest.fixture
def provider():
    return CountingProvider()


@pytest.fixture(params=["memory", "sqlite"])
def options(request, tmp_path):
    return LoadOptions(data_dir=tmp_path / "data", backend=request.param)


def _load(provider, options):
    wn = load_wordnet(provider, options)
    try:
        return [e.id for e in wn.lookup_entries("cat")]
    finally:
        wn.close()


class TestReuse:
    def test_first_load_builds_and_persists(self, provider, options):
        assert _load(provider, options) == ["w-cat"]
        assert provider.calls == 1
        path = options.snapshot_path if options.backend == "memory" else options.db_path
        assert path.exists()

    def test_second_load_reuses(self, provider, options):
        _load(provider, options)
        assert _load(provider, options) == ["w-cat"]
        assert provider.calls == 1

    def test_reuse_without_provider(self, provider, options):
        _load(provider, options)
        assert _load(None, options) == ["w-cat"]

    def test_force_rebuild_calls_provider(self, provider, options):
        _load(provider, options)
        _load(provider, options.with_overrides(force_rebuild=True))
        assert provider.calls == 2

    def test_force_rebuild_picks_up_new_source(self, options):
        _load(CountingProvider(corpus.sample), options)
        fresh = CountingProvider(corpus.cat_dog)
        wn = load_wordnet(fresh, options.with_overrides(force_rebuild=True))
        try:
            assert wn.lookup_entries("kitty") == []
            assert [e.id for e in wn.lookup_entries("dog")] == ["w-dog"]
        finally:
            wn.close()
        assert fresh.calls == 1

    def test_nothing_persisted_and_no_provider(self, options):
        with pytest.raises(StateError, match="no source document"):
            load_wordnet(None, options)

    def test_backend_type(self, provider, options):
        wn = load_wordnet(provider, options)
        try:
            expected = MemoryBackend if options.backend == "memory" else SqliteBackend
            assert isinstance(wn.backend, expected)
        finally:
            wn.close()


class TestInvalidation:
    def test_snapshot_version_mismatch_rebuilds(self, provider, tmp_path):
        options = LoadOptions(data_dir=tmp_path, backend="memory")
        _load(provider, options)
        raw = options.snapshot_path.read_bytes()
        options.snapshot_path.write_bytes(struct.pack("<I", 999) + raw[4:])

        assert _load(provider, options) == ["w-cat"]
        assert provider.calls == 2
        assert struct.unpack("<I", options.snapshot_path.read_bytes()[:4]) != (999,)

    def test_corrupt_snapshot_rebuilds(self, provider, tmp_path):
        options = LoadOptions(data_dir=tmp_path, backend="memory")
        options.snapshot_path.write_bytes(b"\x00")
        assert _load(provider, options) == ["w-cat"]
        assert provider.calls == 1

    def test_schema_mismatch_rebuilds(self, provider, tmp_path):
        options = LoadOptions(data_dir=tmp_path, backend="sqlite")
        _load(provider, options)
        conn = sqlite3.connect(options.db_path)
        conn.execute("UPDATE metadata SET value = '0' WHERE key = 'schema_version'")
        conn.commit()
        conn.close()

        assert _load(provider, options) == ["w-cat"]
        assert provider.calls == 2

    def test_corrupt_database_rebuilds(self, provider, tmp_path):
        options = LoadOptions(data_dir=tmp_path, backend="sqlite")
        options.db_path.write_bytes(b"not a database " * 500)

        assert _load(provider, options) == ["w-cat"]
        assert provider.calls == 1
        assert _load(None, options) == ["w-cat"]

    def test_unpopulated_database_is_populated(self, provider, tmp_path):
        options = LoadOptions(data_dir=tmp_path, backend="sqlite")
        SqliteBackend.open(options.db_path).close()
        assert _load(provider, options) == ["w-cat"]
        assert provider.calls == 1

    def test_provider_failure_leaves_nothing_reusable(self, tmp_path):
        options = LoadOptions(data_dir=tmp_path, backend="sqlite")

        def broken():
            raise StateError("source unavailable")

        with pytest.raises(StateError):
            load_wordnet(broken, options)
        with pytest.raises(StateError, match="no source document"):
            load_wordnet(None, options)


class TestClearPersisted:
    def test_clear_removes_everything(self, provider, tmp_path):
        memory = LoadOptions(data_dir=tmp_path, backend="memory")
        sqlite = LoadOptions(data_dir=tmp_path, backend="sqlite")
        _load(provider, memory)
        _load(provider, sqlite)

        removed = clear_persisted(memory)
        assert memory.snapshot_path in removed
        assert memory.db_path in removed
        assert not memory.snapshot_path.exists()
        assert not memory.db_path.exists()

    def test_clear_when_empty(self, tmp_path):
        assert clear_persisted(LoadOptions(data_dir=tmp_path)) == []
