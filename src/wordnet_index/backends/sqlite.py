"""SQLite backend: the index set as normalized tables queried through joins."""

from __future__ import annotations

import logging
import random
import sqlite3
import threading
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from wordnet_index import db as _db
from wordnet_index.backends.base import Backend
from wordnet_index.builder import IndexedLexicon
from wordnet_index.exceptions import DatabaseError, StateError
from wordnet_index.models import (
    Definition,
    Example,
    ILIDefinition,
    Lemma,
    LexicalEntry,
    Lexicon,
    PartOfSpeech,
    Pronunciation,
    Sense,
    SenseRelation,
    SenseRelationType,
    Synset,
    SynsetRelation,
    SynsetRelationType,
)

logger = logging.getLogger(__name__)

# Keeps IN (...) lists below SQLite's host-parameter limit.
_CHUNK = 500
_SCAN_BATCH = 1000

_ENTRY_QUERY = """
SELECT e.id, e.lexicon_id, e.lemma, e.pos,
       p.ordinal AS p_ordinal, p.value AS p_value, p.variety AS p_variety,
       p.notation AS p_notation, p.phonemic AS p_phonemic, p.audio AS p_audio,
       s.id AS sense_id, s.synset_id,
       r.target_id, r.rel_type, r.rel_kind
  FROM entries e
  LEFT JOIN pronunciations p ON p.entry_id = e.id
  LEFT JOIN senses s ON s.entry_id = e.id
  LEFT JOIN sense_relations r ON r.source_id = s.id
 WHERE {where}
 ORDER BY e.ordinal, p.ordinal, s.entry_rank, r.ordinal
"""

_SENSE_QUERY = """
SELECT s.id AS sense_id, s.entry_id, s.synset_id,
       r.target_id, r.rel_type, r.rel_kind
  FROM senses s
  LEFT JOIN sense_relations r ON r.source_id = s.id
 WHERE s.id IN ({marks})
 ORDER BY s.id, r.ordinal
"""

_SYNSET_QUERY = """
SELECT ss.id, ss.lexicon_id, ss.pos, ss.ili,
       i.text AS ili_text, i.source AS ili_source
  FROM synsets ss
  LEFT JOIN ili_definitions i ON i.synset_id = ss.id
 WHERE {where}
 ORDER BY ss.ordinal
"""


class SqliteBackend(Backend):
    """Serves reads from a SQLite database through one shared connection.

    Every statement runs under a single lock, so the backend is safe to
    share between threads at the cost of serialising them.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn: sqlite3.Connection | None = conn
        self._lock = threading.Lock()
        _db.check_schema_version(conn)
        _db.init_db(conn)

    @classmethod
    def open(cls, db_path: str | Path) -> SqliteBackend:
        """Connect to ``db_path`` and wrap the connection."""
        conn = _db.connect(db_path)
        try:
            return cls(conn)
        except DatabaseError:
            conn.close()
            raise
        except sqlite3.Error as e:
            conn.close()
            raise DatabaseError(f"Cannot open database {db_path}: {e}") from e

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            if self._conn is None:
                raise StateError("Database connection is closed")
            yield self._conn

    # -- population ---------------------------------------------------------

    @property
    def is_populated(self) -> bool:
        with self._connection() as conn:
            return _db.is_populated(conn)

    def populate(self, index: IndexedLexicon) -> None:
        """Replace the stored data with ``index`` in one transaction."""
        with self._connection() as conn:
            try:
                with conn:
                    conn.execute(
                        "DELETE FROM metadata WHERE key = 'populated'"
                    )
                    _db.clear_data(conn)
                    _Populator(conn, index).populate_all()
                    conn.execute(
                        "INSERT OR REPLACE INTO metadata (key, value) "
                        "VALUES ('populated', '1')"
                    )
            except sqlite3.Error as e:
                raise DatabaseError(f"Failed to populate database: {e}") from e
        logger.info(
            "Populated database with %d entries and %d synsets",
            len(index.entries), len(index.synsets),
        )

    # -- reads --------------------------------------------------------------

    def lexicons(self) -> list[Lexicon]:
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT * FROM lexicons ORDER BY ordinal"
            ).fetchall()
        return [
            Lexicon(
                id=r["id"], label=r["label"], language=r["language"],
                email=r["email"], license=r["license"], version=r["version"],
                url=r["url"], citation=r["citation"], logo=r["logo"],
                status=r["status"], confidence_score=r["confidence_score"],
                publisher=r["publisher"], contributor=r["contributor"],
            )
            for r in rows
        ]

    def find_entries(
        self, folded_lemma: str, pos: PartOfSpeech | None = None
    ) -> list[LexicalEntry]:
        if pos is None:
            return self._fetch_entries("e.lemma_folded = ?", (folded_lemma,))
        return self._fetch_entries(
            "e.lemma_folded = ? AND e.pos = ?", (folded_lemma, pos.value)
        )

    def get_entry(self, entry_id: str) -> LexicalEntry | None:
        entries = self._fetch_entries("e.id = ?", (entry_id,))
        return entries[0] if entries else None

    def get_sense(self, sense_id: str) -> Sense | None:
        senses = self.get_senses([sense_id])
        return senses[0] if senses else None

    def get_senses(self, sense_ids: Iterable[str]) -> list[Sense]:
        ids = list(sense_ids)
        found: dict[str, Sense] = {}
        with self._connection() as conn:
            for chunk in _chunks(list(dict.fromkeys(ids))):
                rows = conn.execute(
                    _SENSE_QUERY.format(marks=_marks(chunk)), chunk
                ).fetchall()
                found.update(_aggregate_senses(rows))
        return [found[sid] for sid in ids if sid in found]

    def get_synset(self, synset_id: str) -> Synset | None:
        synsets = self.get_synsets([synset_id])
        return synsets[0] if synsets else None

    def get_synsets(self, synset_ids: Iterable[str]) -> list[Synset]:
        ids = list(synset_ids)
        found: dict[str, Synset] = {}
        with self._connection() as conn:
            for chunk in _chunks(list(dict.fromkeys(ids))):
                found.update(
                    (s.id, s) for s in self._fetch_synsets(
                        conn, f"ss.id IN ({_marks(chunk)})", chunk
                    )
                )
        return [found[sid] for sid in ids if sid in found]

    def entry_id_for_sense(self, sense_id: str) -> str | None:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT entry_id FROM senses WHERE id = ?", (sense_id,)
            ).fetchone()
        return None if row is None else row["entry_id"]

    def entry_sense_ids(self, entry_id: str) -> list[str] | None:
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT e.id, s.id AS sense_id FROM entries e "
                "LEFT JOIN senses s ON s.entry_id = e.id "
                "WHERE e.id = ? ORDER BY s.entry_rank",
                (entry_id,),
            ).fetchall()
        if not rows:
            return None
        return [r["sense_id"] for r in rows if r["sense_id"] is not None]

    def synset_member_ids(self, synset_id: str) -> list[str] | None:
        with self._connection() as conn:
            if conn.execute(
                "SELECT 1 FROM synsets WHERE id = ?", (synset_id,)
            ).fetchone() is None:
                return None
            rows = conn.execute(
                "SELECT s.id FROM synset_members m "
                "JOIN senses s ON s.entry_id = m.entry_id "
                "AND s.synset_id = m.synset_id "
                "WHERE m.synset_id = ? ORDER BY m.ordinal, s.entry_rank",
                (synset_id,),
            ).fetchall()
        return [r["id"] for r in rows]

    def related_sense_ids(
        self, sense_id: str, kind: SenseRelationType
    ) -> list[str]:
        return self._related("sense_relations", sense_id, kind.value)

    def related_synset_ids(
        self, synset_id: str, kind: SynsetRelationType
    ) -> list[str]:
        return self._related("synset_relations", synset_id, kind.value)

    def _related(self, table: str, source_id: str, kind: str) -> list[str]:
        with self._connection() as conn:
            rows = conn.execute(
                f"SELECT target_id FROM {table} "
                "WHERE source_id = ? AND rel_kind = ? ORDER BY ordinal",
                (source_id, kind),
            ).fetchall()
        return list(dict.fromkeys(r["target_id"] for r in rows))

    def entry_count(self) -> int:
        with self._connection() as conn:
            return conn.execute("SELECT COUNT(*) FROM entries").fetchone()[0]

    def random_entry_id(self, rng: random.Random) -> str | None:
        count = self.entry_count()
        if count == 0:
            return None
        with self._connection() as conn:
            row = conn.execute(
                "SELECT id FROM entries WHERE ordinal = ?",
                (rng.randrange(count),),
            ).fetchone()
        return None if row is None else row["id"]

    def iter_entries(self) -> Iterator[LexicalEntry]:
        """Scan all entries in batches; the lock is released between batches."""
        start = 0
        while True:
            batch = self._fetch_entries(
                "e.ordinal >= ? AND e.ordinal < ?", (start, start + _SCAN_BATCH)
            )
            if not batch:
                return
            yield from batch
            start += _SCAN_BATCH

    def iter_synsets(self) -> Iterator[Synset]:
        start = 0
        while True:
            with self._connection() as conn:
                batch = self._fetch_synsets(
                    conn, "ss.ordinal >= ? AND ss.ordinal < ?",
                    (start, start + _SCAN_BATCH),
                )
            if not batch:
                return
            yield from batch
            start += _SCAN_BATCH

    # -- aggregation --------------------------------------------------------

    def _fetch_entries(
        self, where: str, params: Sequence
    ) -> list[LexicalEntry]:
        with self._connection() as conn:
            rows = conn.execute(
                _ENTRY_QUERY.format(where=where), params
            ).fetchall()
        return _aggregate_entries(rows)

    def _fetch_synsets(
        self, conn: sqlite3.Connection, where: str, params: Sequence
    ) -> list[Synset]:
        heads = conn.execute(_SYNSET_QUERY.format(where=where), params).fetchall()
        if not heads:
            return []
        ids = [h["id"] for h in heads]
        marks = _marks(ids)
        members = _group(conn.execute(
            f"SELECT synset_id, entry_id FROM synset_members "
            f"WHERE synset_id IN ({marks}) ORDER BY synset_id, ordinal", ids
        ))
        definitions = _group(conn.execute(
            f"SELECT synset_id, text, language, source FROM definitions "
            f"WHERE synset_id IN ({marks}) ORDER BY synset_id, ordinal", ids
        ))
        examples = _group(conn.execute(
            f"SELECT synset_id, text, language, source FROM examples "
            f"WHERE synset_id IN ({marks}) ORDER BY synset_id, ordinal", ids
        ))
        relations = _group(conn.execute(
            f"SELECT source_id AS synset_id, target_id, rel_type, rel_kind "
            f"FROM synset_relations WHERE source_id IN ({marks}) "
            f"ORDER BY source_id, ordinal", ids
        ))

        synsets = []
        for h in heads:
            sid = h["id"]
            ili_definition = None
            if h["ili_text"] is not None:
                ili_definition = ILIDefinition(h["ili_text"], h["ili_source"])
            synsets.append(Synset(
                id=sid,
                lexicon_id=h["lexicon_id"],
                pos=PartOfSpeech(h["pos"]),
                ili=h["ili"],
                members=tuple(r["entry_id"] for r in members.get(sid, ())),
                definitions=tuple(
                    Definition(r["text"], r["language"], r["source"])
                    for r in definitions.get(sid, ())
                ),
                ili_definition=ili_definition,
                examples=tuple(
                    Example(r["text"], r["language"], r["source"])
                    for r in examples.get(sid, ())
                ),
                relations=tuple(
                    SynsetRelation(
                        r["target_id"], SynsetRelationType(r["rel_kind"]),
                        r["rel_type"],
                    )
                    for r in relations.get(sid, ())
                ),
            ))
        return synsets


# ---------------------------------------------------------------------------
# Row aggregation helpers
# ---------------------------------------------------------------------------

def _aggregate_entries(rows: Iterable[sqlite3.Row]) -> list[LexicalEntry]:
    """Fold entry x pronunciation x sense x relation rows into entries.

    Outer-join rows whose child columns are all NULL add no child record;
    repeated children produced by the cross product collapse by key.
    """
    heads: dict[str, sqlite3.Row] = {}
    prons: dict[str, dict[int, Pronunciation]] = {}
    senses: dict[str, dict[str, tuple[str, dict]]] = {}
    for row in rows:
        entry_id = row["id"]
        if entry_id not in heads:
            heads[entry_id] = row
            prons[entry_id] = {}
            senses[entry_id] = {}
        if row["p_ordinal"] is not None:
            prons[entry_id].setdefault(row["p_ordinal"], Pronunciation(
                text=row["p_value"],
                variety=row["p_variety"],
                notation=row["p_notation"],
                phonemic=bool(row["p_phonemic"]),
                audio=row["p_audio"],
            ))
        if row["sense_id"] is None:
            continue
        _, rels = senses[entry_id].setdefault(
            row["sense_id"], (row["synset_id"], {})
        )
        if row["target_id"] is not None:
            rels.setdefault((row["target_id"], row["rel_type"]), row["rel_kind"])

    entries = []
    for entry_id, head in heads.items():
        entries.append(LexicalEntry(
            id=entry_id,
            lexicon_id=head["lexicon_id"],
            lemma=Lemma(head["lemma"], PartOfSpeech(head["pos"])),
            pronunciations=tuple(prons[entry_id].values()),
            senses=tuple(
                Sense(
                    id=sense_id,
                    entry_id=entry_id,
                    synset=synset_id,
                    relations=_sense_relations(rels),
                )
                for sense_id, (synset_id, rels) in senses[entry_id].items()
            ),
        ))
    return entries


def _aggregate_senses(rows: Iterable[sqlite3.Row]) -> dict[str, Sense]:
    parts: dict[str, tuple[str, str, dict]] = {}
    for row in rows:
        _, _, rels = parts.setdefault(
            row["sense_id"], (row["entry_id"], row["synset_id"], {})
        )
        if row["target_id"] is not None:
            rels.setdefault((row["target_id"], row["rel_type"]), row["rel_kind"])
    return {
        sense_id: Sense(sense_id, entry_id, synset_id, _sense_relations(rels))
        for sense_id, (entry_id, synset_id, rels) in parts.items()
    }


def _sense_relations(rels: dict) -> tuple[SenseRelation, ...]:
    return tuple(
        SenseRelation(target, SenseRelationType(kind), rel_type)
        for (target, rel_type), kind in rels.items()
    )


def _group(rows: Iterable[sqlite3.Row]) -> dict[str, list[sqlite3.Row]]:
    grouped: dict[str, list[sqlite3.Row]] = {}
    for row in rows:
        grouped.setdefault(row["synset_id"], []).append(row)
    return grouped


def _marks(items: Sequence) -> str:
    return ",".join("?" for _ in items)


def _chunks(items: list[str]) -> Iterator[list[str]]:
    for i in range(0, len(items), _CHUNK):
        yield items[i:i + _CHUNK]


# ---------------------------------------------------------------------------
# Population
# ---------------------------------------------------------------------------

class _Populator:
    """Writes an IndexedLexicon into the tables in dependency order."""

    def __init__(self, conn: sqlite3.Connection, index: IndexedLexicon) -> None:
        self.conn = conn
        self.index = index

    def _insert_lexicons(self) -> None:
        self.conn.executemany(
            "INSERT INTO lexicons (id, ordinal, label, language, email, "
            "license, version, url, citation, logo, status, confidence_score, "
            "publisher, contributor) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            [
                (lex.id, n, lex.label, lex.language, lex.email, lex.license,
                 lex.version, lex.url, lex.citation, lex.logo, lex.status,
                 lex.confidence_score, lex.publisher, lex.contributor)
                for n, lex in enumerate(self.index.lexicons)
            ],
        )

    def _insert_entries_and_synsets(self) -> None:
        self.conn.executemany(
            "INSERT INTO entries (id, ordinal, lexicon_id, lemma, lemma_folded, pos) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            [
                (e.id, n, e.lexicon_id, e.lemma.written_form,
                 e.lemma.written_form.casefold(), e.lemma.pos.value)
                for n, e in enumerate(self.index.entries.values())
            ],
        )
        self.conn.executemany(
            "INSERT INTO synsets (id, ordinal, lexicon_id, pos, ili) "
            "VALUES (?, ?, ?, ?, ?)",
            [
                (s.id, n, s.lexicon_id, s.pos.value, s.ili)
                for n, s in enumerate(self.index.synsets.values())
            ],
        )

    def _insert_children(self) -> None:
        entries = self.index.entries.values()
        synsets = self.index.synsets.values()
        self.conn.executemany(
            "INSERT INTO senses (id, entry_id, synset_id, entry_rank) "
            "VALUES (?, ?, ?, ?)",
            [
                (s.id, e.id, s.synset, rank)
                for e in entries for rank, s in enumerate(e.senses)
            ],
        )
        self.conn.executemany(
            "INSERT INTO pronunciations (entry_id, ordinal, value, variety, "
            "notation, phonemic, audio) VALUES (?, ?, ?, ?, ?, ?, ?)",
            [
                (e.id, n, p.text, p.variety, p.notation, int(p.phonemic), p.audio)
                for e in entries for n, p in enumerate(e.pronunciations)
            ],
        )
        self.conn.executemany(
            "INSERT INTO synset_members (synset_id, entry_id, ordinal) "
            "VALUES (?, ?, ?)",
            [
                (s.id, entry_id, n)
                for s in synsets for n, entry_id in enumerate(s.members)
            ],
        )
        self.conn.executemany(
            "INSERT INTO definitions (synset_id, ordinal, text, language, source) "
            "VALUES (?, ?, ?, ?, ?)",
            [
                (s.id, n, d.text, d.language, d.source)
                for s in synsets for n, d in enumerate(s.definitions)
            ],
        )
        self.conn.executemany(
            "INSERT INTO ili_definitions (synset_id, text, source) VALUES (?, ?, ?)",
            [
                (s.id, s.ili_definition.text, s.ili_definition.source)
                for s in synsets if s.ili_definition is not None
            ],
        )
        self.conn.executemany(
            "INSERT INTO examples (synset_id, ordinal, text, language, source) "
            "VALUES (?, ?, ?, ?, ?)",
            [
                (s.id, n, x.text, x.language, x.source)
                for s in synsets for n, x in enumerate(s.examples)
            ],
        )

    def _insert_relations(self) -> None:
        self.conn.executemany(
            "INSERT OR IGNORE INTO sense_relations "
            "(source_id, target_id, rel_type, rel_kind, ordinal) "
            "VALUES (?, ?, ?, ?, ?)",
            [
                (s.id, r.target, r.rel_type, r.kind.value, n)
                for s in self.index.senses.values()
                for n, r in enumerate(s.relations)
            ],
        )
        self.conn.executemany(
            "INSERT OR IGNORE INTO synset_relations "
            "(source_id, target_id, rel_type, rel_kind, ordinal) "
            "VALUES (?, ?, ?, ?, ?)",
            [
                (s.id, r.target, r.rel_type, r.kind.value, n)
                for s in self.index.synsets.values()
                for n, r in enumerate(s.relations)
            ],
        )

    def populate_all(self) -> None:
        """Insert every table, parents before children."""
        self._insert_lexicons()
        self._insert_entries_and_synsets()
        self._insert_children()
        self._insert_relations()
