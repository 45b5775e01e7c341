"""Wire a document provider, the index builder and a backend together."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from wordnet_index import db as _db
from wordnet_index import snapshot as _snapshot
from wordnet_index.backends.base import Backend
from wordnet_index.backends.memory import MemoryBackend
from wordnet_index.backends.sqlite import SqliteBackend
from wordnet_index.builder import IndexedLexicon, build
from wordnet_index.config import LoadOptions
from wordnet_index.exceptions import DatabaseError, FormatError, StateError
from wordnet_index.wordnet import WordNet

logger = logging.getLogger(__name__)

Provider = Callable[[], Mapping[str, Any]]


def load_wordnet(
    provider: Provider | None,
    options: LoadOptions | None = None,
    *,
    rng: random.Random | None = None,
) -> WordNet:
    """Return a ready WordNet, reusing persisted state when it is valid.

    ``provider`` is only called when nothing usable is persisted (or
    ``options.force_rebuild`` is set); it may be None when the caller
    knows a snapshot or populated database exists.
    """
    options = options or LoadOptions()
    if options.backend == "sqlite":
        backend: Backend = _load_sqlite(provider, options)
    else:
        backend = _load_memory(provider, options)
    return WordNet(backend, rng=rng)


def clear_persisted(options: LoadOptions) -> list[Path]:
    """Delete the snapshot and the database (with WAL/SHM files)."""
    removed = []
    if options.snapshot_path.exists():
        options.snapshot_path.unlink()
        removed.append(options.snapshot_path)
    if _db.remove_database(options.db_path):
        removed.append(options.db_path)
    return removed


def _build_from(provider: Provider | None) -> IndexedLexicon:
    if provider is None:
        raise StateError(
            "No persisted data found and no source document was given"
        )
    return build(provider())


def _load_memory(provider: Provider | None, options: LoadOptions) -> MemoryBackend:
    path = options.snapshot_path
    if options.force_rebuild:
        if path.exists():
            logger.info("Force rebuild: discarding snapshot %s", path)
            path.unlink()
    elif path.exists():
        try:
            return MemoryBackend(_snapshot.load(path))
        except FormatError as e:
            logger.warning("Discarding snapshot %s: %s", path, e)
            path.unlink()

    index = _build_from(provider)
    try:
        _snapshot.save(index, path)
    except OSError as e:
        logger.warning("Could not write snapshot %s: %s", path, e)
    return MemoryBackend(index)


def _load_sqlite(provider: Provider | None, options: LoadOptions) -> SqliteBackend:
    path = options.db_path
    if options.force_rebuild:
        logger.info("Force rebuild: discarding database %s", path)
        _db.remove_database(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        backend = SqliteBackend.open(path)
    except DatabaseError as e:
        logger.warning("Rebuilding database %s: %s", path, e)
        _db.remove_database(path)
        backend = SqliteBackend.open(path)

    if backend.is_populated:
        logger.debug("Using populated database %s", path)
        return backend
    try:
        backend.populate(_build_from(provider))
    except BaseException:
        backend.close()
        raise
    return backend
