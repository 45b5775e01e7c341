"""Database connection, DDL, and schema-version helpers for wordnet-index."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from wordnet_index.exceptions import DatabaseError

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1"

# ---------------------------------------------------------------------------
# DDL statements
# ---------------------------------------------------------------------------

_DDL = """
-- Metadata table
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT NOT NULL PRIMARY KEY,
    value TEXT
);

-- Lexicons
CREATE TABLE IF NOT EXISTS lexicons (
    id TEXT NOT NULL PRIMARY KEY,
    ordinal INTEGER NOT NULL,
    label TEXT NOT NULL,
    language TEXT NOT NULL,
    email TEXT NOT NULL,
    license TEXT NOT NULL,
    version TEXT NOT NULL,
    url TEXT,
    citation TEXT,
    logo TEXT,
    status TEXT,
    confidence_score REAL,
    publisher TEXT,
    contributor TEXT
);

-- Entries
CREATE TABLE IF NOT EXISTS entries (
    id TEXT NOT NULL PRIMARY KEY,
    ordinal INTEGER NOT NULL UNIQUE,
    lexicon_id TEXT NOT NULL REFERENCES lexicons (id),
    lemma TEXT NOT NULL,
    lemma_folded TEXT NOT NULL,
    pos TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS entry_lemma_index ON entries (lemma_folded);
CREATE INDEX IF NOT EXISTS entry_lemma_pos_index ON entries (lemma_folded, pos);

CREATE TABLE IF NOT EXISTS pronunciations (
    entry_id TEXT NOT NULL REFERENCES entries (id),
    ordinal INTEGER NOT NULL,
    value TEXT NOT NULL,
    variety TEXT,
    notation TEXT,
    phonemic INTEGER NOT NULL DEFAULT 1,
    audio TEXT,
    PRIMARY KEY (entry_id, ordinal)
);

-- Synsets
CREATE TABLE IF NOT EXISTS synsets (
    id TEXT NOT NULL PRIMARY KEY,
    ordinal INTEGER NOT NULL UNIQUE,
    lexicon_id TEXT NOT NULL REFERENCES lexicons (id),
    pos TEXT NOT NULL,
    ili TEXT
);

-- Raw members list (entry ids); membership is derived by joining senses
CREATE TABLE IF NOT EXISTS synset_members (
    synset_id TEXT NOT NULL REFERENCES synsets (id),
    entry_id TEXT NOT NULL,
    ordinal INTEGER NOT NULL,
    PRIMARY KEY (synset_id, entry_id)
);
CREATE INDEX IF NOT EXISTS synset_member_entry_index ON synset_members (entry_id);

-- Senses (synset_id may name an undefined synset)
CREATE TABLE IF NOT EXISTS senses (
    id TEXT NOT NULL PRIMARY KEY,
    entry_id TEXT NOT NULL REFERENCES entries (id),
    synset_id TEXT NOT NULL,
    entry_rank INTEGER NOT NULL
);
CREATE INDEX IF NOT EXISTS sense_entry_index ON senses (entry_id);
CREATE INDEX IF NOT EXISTS sense_synset_index ON senses (synset_id);

-- Synset content
CREATE TABLE IF NOT EXISTS definitions (
    synset_id TEXT NOT NULL REFERENCES synsets (id),
    ordinal INTEGER NOT NULL,
    text TEXT NOT NULL,
    language TEXT,
    source TEXT,
    PRIMARY KEY (synset_id, ordinal)
);

CREATE TABLE IF NOT EXISTS ili_definitions (
    synset_id TEXT NOT NULL PRIMARY KEY REFERENCES synsets (id),
    text TEXT NOT NULL,
    source TEXT
);

CREATE TABLE IF NOT EXISTS examples (
    synset_id TEXT NOT NULL REFERENCES synsets (id),
    ordinal INTEGER NOT NULL,
    text TEXT NOT NULL,
    language TEXT,
    source TEXT,
    PRIMARY KEY (synset_id, ordinal)
);

-- Relations (targets may be undefined)
CREATE TABLE IF NOT EXISTS sense_relations (
    source_id TEXT NOT NULL REFERENCES senses (id),
    target_id TEXT NOT NULL,
    rel_type TEXT NOT NULL,
    rel_kind TEXT NOT NULL,
    ordinal INTEGER NOT NULL,
    PRIMARY KEY (source_id, target_id, rel_type)
);
CREATE INDEX IF NOT EXISTS sense_relation_source_index
    ON sense_relations (source_id, rel_kind);

CREATE TABLE IF NOT EXISTS synset_relations (
    source_id TEXT NOT NULL REFERENCES synsets (id),
    target_id TEXT NOT NULL,
    rel_type TEXT NOT NULL,
    rel_kind TEXT NOT NULL,
    ordinal INTEGER NOT NULL,
    PRIMARY KEY (source_id, target_id, rel_type)
);
CREATE INDEX IF NOT EXISTS synset_relation_source_index
    ON synset_relations (source_id, rel_kind);
"""

# Dependency order for population; clearing runs it in reverse.
DATA_TABLES = (
    "lexicons",
    "entries",
    "synsets",
    "senses",
    "pronunciations",
    "synset_members",
    "definitions",
    "ili_definitions",
    "examples",
    "sense_relations",
    "synset_relations",
)


# ---------------------------------------------------------------------------
# Connection management
# ---------------------------------------------------------------------------

def connect(db_path: str | Path = ":memory:") -> sqlite3.Connection:
    """Open a database connection shareable across threads.

    Callers serialise access themselves (see ``SqliteBackend``).
    """
    db_path_str = str(db_path)
    try:
        conn = sqlite3.connect(db_path_str, check_same_thread=False)
    except sqlite3.Error as e:
        raise DatabaseError(f"Cannot open database {db_path_str}: {e}") from e
    # A file that is not a database only fails once a pragma reads it
    try:
        conn.execute("PRAGMA foreign_keys = ON")
        if db_path_str != ":memory:":
            conn.execute("PRAGMA journal_mode = WAL")
            conn.execute("PRAGMA synchronous = NORMAL")
        conn.execute("PRAGMA cache_size = -16000")
    except sqlite3.Error as e:
        conn.close()
        raise DatabaseError(f"Cannot open database {db_path_str}: {e}") from e
    conn.row_factory = sqlite3.Row
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    """Initialize all tables if they don't exist. Set schema version."""
    conn.executescript(_DDL)
    conn.execute(
        "INSERT OR IGNORE INTO metadata (key, value) VALUES ('schema_version', ?)",
        (SCHEMA_VERSION,),
    )
    conn.commit()


def get_schema_version(conn: sqlite3.Connection) -> str | None:
    """Return the stored schema version, or None for an uninitialized DB."""
    try:
        row = conn.execute(
            "SELECT value FROM metadata WHERE key = 'schema_version'"
        ).fetchone()
    except sqlite3.OperationalError:
        # metadata table doesn't exist - uninitialized DB
        return None
    return None if row is None else row[0]


def check_schema_version(conn: sqlite3.Connection) -> None:
    """Verify the database schema version is compatible."""
    version = get_schema_version(conn)
    if version is None:
        return
    if version != SCHEMA_VERSION:
        raise DatabaseError(
            f"Incompatible schema version: {version} "
            f"(expected {SCHEMA_VERSION})"
        )


def clear_data(conn: sqlite3.Connection) -> None:
    """Delete all rows from the data tables, children first.

    Runs inside the caller's transaction.
    """
    for table in reversed(DATA_TABLES):
        conn.execute(f"DELETE FROM {table}")


def is_populated(conn: sqlite3.Connection) -> bool:
    """True when a previous population committed successfully."""
    try:
        row = conn.execute(
            "SELECT value FROM metadata WHERE key = 'populated'"
        ).fetchone()
    except sqlite3.OperationalError:
        return False
    return row is not None and row[0] == "1"


def remove_database(db_path: str | Path) -> bool:
    """Delete a database file and its WAL/SHM companions.

    Returns True if anything was removed.
    """
    path = Path(db_path)
    removed = False
    for candidate in (path, path.with_name(path.name + "-wal"),
                      path.with_name(path.name + "-shm")):
        if candidate.exists():
            candidate.unlink()
            removed = True
            logger.info("Removed %s", candidate)
    return removed
