"""Versioned binary snapshot of an IndexedLexicon.

Layout: a 4-byte little-endian format version, then the pickled index.
The header is checked before the payload is touched; a reader never
unpickles data written under another format version.
"""

from __future__ import annotations

import logging
import os
import pickle
import struct
import tempfile
from pathlib import Path

from wordnet_index.builder import IndexedLexicon
from wordnet_index.exceptions import FormatError, SnapshotVersionError

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1

_HEADER = struct.Struct("<I")


def save(index: IndexedLexicon, path: str | Path) -> None:
    """Write ``index`` to ``path``, replacing any previous snapshot atomically."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(_HEADER.pack(SNAPSHOT_VERSION))
            pickle.dump(index, f, protocol=pickle.HIGHEST_PROTOCOL)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
    logger.info("Saved snapshot (format %d) to %s", SNAPSHOT_VERSION, path)


def read_version(path: str | Path) -> int:
    """Return the format version stored in a snapshot header."""
    with open(path, "rb") as f:
        header = f.read(_HEADER.size)
    if len(header) != _HEADER.size:
        raise FormatError(f"Snapshot {path} is truncated")
    return _HEADER.unpack(header)[0]


def load(path: str | Path) -> IndexedLexicon:
    """Read a snapshot written by :func:`save`.

    Raises SnapshotVersionError on a version mismatch and FormatError on
    any other unreadable content.
    """
    with open(path, "rb") as f:
        header = f.read(_HEADER.size)
        if len(header) != _HEADER.size:
            raise FormatError(f"Snapshot {path} is truncated")
        (version,) = _HEADER.unpack(header)
        if version != SNAPSHOT_VERSION:
            raise SnapshotVersionError(version, SNAPSHOT_VERSION)
        try:
            index = pickle.load(f)
        except Exception as e:
            raise FormatError(f"Failed to read snapshot {path}: {e}") from e
    if not isinstance(index, IndexedLexicon):
        raise FormatError(
            f"Snapshot {path} holds {type(index).__name__}, not an index"
        )
    logger.debug("Loaded snapshot %s", path)
    return index
