"""Index builder: turns a parsed WN-LMF resource into cross-reference indices."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from wordnet_index.exceptions import FormatError
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


# ---------------------------------------------------------------------------
# Build output
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class IndexedLexicon:
    """The complete, read-only index set for one loaded resource.

    Mapping values are never mutated after :func:`build` returns; the
    structure is shared by reference between readers.
    """

    lexicons: tuple[Lexicon, ...]
    entries: dict[str, LexicalEntry]
    senses: dict[str, Sense]
    synsets: dict[str, Synset]
    lemma_index: dict[str, tuple[str, ...]]
    lemma_pos_index: dict[tuple[str, PartOfSpeech], tuple[str, ...]]
    entry_senses: dict[str, tuple[str, ...]]
    sense_entry: dict[str, str]
    sense_synset: dict[str, str]
    synset_members: dict[str, tuple[str, ...]]
    sense_relations: dict[str, dict[SenseRelationType, tuple[str, ...]]]
    synset_relations: dict[str, dict[SynsetRelationType, tuple[str, ...]]]
    entry_ids: tuple[str, ...]


@dataclass(slots=True)
class BuildReport:
    """Counts of anomalies recovered while building the indices."""

    dropped_members: int = 0
    duplicate_ids: int = 0
    dangling_sense_synsets: int = 0
    dangling_sense_relations: int = 0
    dangling_synset_relations: int = 0
    unknown_relation_kinds: int = 0
    unknown_pos: int = 0
    inferred_memberships: int = 0
    unknown_relation_types: set[str] = field(default_factory=set)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build(resource: Mapping[str, Any]) -> IndexedLexicon:
    """Build the index set for a parsed lexical resource."""
    index, _ = build_with_report(resource)
    return index


def build_with_report(
    resource: Mapping[str, Any],
) -> tuple[IndexedLexicon, BuildReport]:
    """Build the index set and return it with the anomaly report."""
    if not isinstance(resource, Mapping):
        raise FormatError(
            f"Resource must be a mapping, got {type(resource).__name__}"
        )
    lexicons = resource.get("lexicons")
    if not isinstance(lexicons, list):
        raise FormatError("Resource has no 'lexicons' list")

    builder = _IndexBuilder()
    for lex in lexicons:
        builder.add_lexicon(lex)
    index = builder.finish()
    _log_report(builder.report)
    logger.info(
        "Indexed %d entries, %d senses, %d synsets from %d lexicon(s)",
        len(index.entries), len(index.senses), len(index.synsets),
        len(index.lexicons),
    )
    return index, builder.report


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def _opt(value: Any) -> str | None:
    """Normalize absent or empty attribute values to None."""
    if value is None or value == "":
        return None
    return str(value)


def _require_id(record: Any, what: str) -> str:
    if not isinstance(record, Mapping):
        raise FormatError(f"{what} record must be a mapping")
    record_id = record.get("id")
    if not record_id:
        raise FormatError(f"{what} record without an id")
    return str(record_id)


def _meta_value(meta: Any, key: str) -> Any:
    """Read a Dublin Core style attribute from a ``meta`` mapping."""
    if not isinstance(meta, Mapping):
        return None
    for candidate in (key, f"dc:{key}"):
        value = meta.get(candidate)
        if value not in (None, ""):
            return value
    return None


def _split_members(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return value.split()
    return [str(v) for v in value if v]


def _unique(items) -> tuple:
    """Drop repeated items, keeping first-occurrence order."""
    return tuple(dict.fromkeys(items))


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

class _IndexBuilder:
    """Accumulates records lexicon by lexicon, then freezes the indices."""

    def __init__(self) -> None:
        self.report = BuildReport()
        self.lexicons: list[Lexicon] = []
        self.entries: dict[str, LexicalEntry] = {}
        self.senses: dict[str, Sense] = {}
        self.synsets: dict[str, Synset] = {}
        self.lemma_index: dict[str, list[str]] = {}
        self.lemma_pos_index: dict[tuple[str, PartOfSpeech], list[str]] = {}
        self.sense_relations: dict[str, dict[SenseRelationType, list[str]]] = {}
        self.synset_relations: dict[str, dict[SynsetRelationType, list[str]]] = {}
        self.synset_members: dict[str, tuple[str, ...]] = {}
        self._pending_synsets: list[tuple[Synset, bool]] = []

    def add_lexicon(self, lex: Mapping[str, Any]) -> None:
        lex_id = _require_id(lex, "Lexicon")
        if any(known.id == lex_id for known in self.lexicons):
            # Records are still indexed, under the first lexicon's metadata
            self.report.duplicate_ids += 1
            logger.warning("Duplicate lexicon id %s ignored", lex_id)
        else:
            self._index_lexicon(lex_id, lex)
        for entry in lex.get("entries") or []:
            self._index_entry(lex_id, entry)
        for syn in lex.get("synsets") or []:
            self._collect_synset(lex_id, syn)

    def finish(self) -> IndexedLexicon:
        # Membership needs every lexicon's senses, so it runs last. Synsets
        # without a members list (WN-LMF 1.0) take it from sense links.
        owners: dict[str, list[str]] = {}
        if not all(listed for _, listed in self._pending_synsets):
            for sense in self.senses.values():
                owners.setdefault(sense.synset, []).append(sense.entry_id)
        for synset, listed in self._pending_synsets:
            if not listed and owners.get(synset.id):
                self.report.inferred_memberships += 1
                synset = replace(synset, members=_unique(owners[synset.id]))
                self.synsets[synset.id] = synset
            self._index_synset(synset)
        self._check_references()

        entry_senses = {
            entry_id: tuple(s.id for s in entry.senses)
            for entry_id, entry in self.entries.items()
        }
        return IndexedLexicon(
            lexicons=tuple(self.lexicons),
            entries=self.entries,
            senses=self.senses,
            synsets=self.synsets,
            lemma_index={k: tuple(v) for k, v in self.lemma_index.items()},
            lemma_pos_index={
                k: tuple(v) for k, v in self.lemma_pos_index.items()
            },
            entry_senses=entry_senses,
            sense_entry={s.id: s.entry_id for s in self.senses.values()},
            sense_synset={s.id: s.synset for s in self.senses.values()},
            synset_members=self.synset_members,
            sense_relations=_freeze_relations(self.sense_relations),
            synset_relations=_freeze_relations(self.synset_relations),
            entry_ids=tuple(self.entries),
        )

    # -- lexicons -----------------------------------------------------------

    def _index_lexicon(self, lex_id: str, lex: Mapping[str, Any]) -> None:
        meta = lex.get("meta")
        score = _meta_value(meta, "confidenceScore")
        if score is not None:
            try:
                score = float(score)
            except (TypeError, ValueError):
                logger.warning(
                    "Lexicon %s: ignoring non-numeric confidenceScore %r",
                    lex_id, score,
                )
                score = None
        self.lexicons.append(Lexicon(
            id=lex_id,
            label=lex.get("label") or "",
            language=lex.get("language") or "",
            email=lex.get("email") or "",
            license=lex.get("license") or "",
            version=lex.get("version") or "",
            url=_opt(lex.get("url")),
            citation=_opt(lex.get("citation")),
            logo=_opt(lex.get("logo")),
            status=_opt(_meta_value(meta, "status")),
            confidence_score=score,
            publisher=_opt(_meta_value(meta, "publisher")),
            contributor=_opt(_meta_value(meta, "contributor")),
        ))

    # -- entries and senses -------------------------------------------------

    def _index_entry(self, lex_id: str, entry: Mapping[str, Any]) -> None:
        entry_id = _require_id(entry, "LexicalEntry")
        if entry_id in self.entries:
            self.report.duplicate_ids += 1
            logger.warning("Duplicate entry id %s ignored", entry_id)
            return

        lemma_data = entry.get("lemma")
        if not isinstance(lemma_data, Mapping) or not lemma_data.get("writtenForm"):
            raise FormatError(f"Entry {entry_id} has no lemma written form")
        written_form = str(lemma_data["writtenForm"])
        pos = self._decode_pos(lemma_data.get("partOfSpeech"), entry_id)

        senses: list[Sense] = []
        for sense_data in entry.get("senses") or []:
            sense = self._index_sense(entry_id, sense_data)
            if sense is not None:
                senses.append(sense)

        self.entries[entry_id] = LexicalEntry(
            id=entry_id,
            lexicon_id=lex_id,
            lemma=Lemma(written_form, pos),
            pronunciations=_unique(
                _pronunciation(p)
                for p in lemma_data.get("pronunciations") or []
            ),
            senses=tuple(senses),
        )
        key = written_form.casefold()
        self.lemma_index.setdefault(key, []).append(entry_id)
        self.lemma_pos_index.setdefault((key, pos), []).append(entry_id)

    def _index_sense(
        self, entry_id: str, sense_data: Mapping[str, Any]
    ) -> Sense | None:
        sense_id = _require_id(sense_data, "Sense")
        if sense_id in self.senses:
            self.report.duplicate_ids += 1
            logger.warning(
                "Duplicate sense id %s in entry %s ignored", sense_id, entry_id
            )
            return None

        relations = _unique(
            self._sense_relation(sense_id, rel)
            for rel in sense_data.get("relations") or []
        )
        by_kind = self.sense_relations.setdefault(sense_id, {})
        for rel in relations:
            targets = by_kind.setdefault(rel.kind, [])
            if rel.target not in targets:
                targets.append(rel.target)

        sense = Sense(
            id=sense_id,
            entry_id=entry_id,
            synset=str(sense_data.get("synset") or ""),
            relations=relations,
        )
        self.senses[sense_id] = sense
        return sense

    def _sense_relation(self, source: str, rel: Mapping[str, Any]) -> SenseRelation:
        rel_type = str(rel.get("relType") or "")
        kind = SenseRelationType.parse(rel_type)
        if kind is SenseRelationType.UNKNOWN:
            self._note_unknown_kind(source, rel_type)
        return SenseRelation(str(rel.get("target") or ""), kind, rel_type)

    # -- synsets ------------------------------------------------------------

    def _collect_synset(self, lex_id: str, syn: Mapping[str, Any]) -> None:
        syn_id = _require_id(syn, "Synset")
        if syn_id in self.synsets:
            self.report.duplicate_ids += 1
            logger.warning("Duplicate synset id %s ignored", syn_id)
            return

        relations = _unique(
            self._synset_relation(syn_id, rel)
            for rel in syn.get("relations") or []
        )
        ili = _opt(syn.get("ili"))
        ili_def = syn.get("ili_definition")
        ili_definition = None
        if isinstance(ili_def, Mapping) and ili_def.get("text"):
            ili_definition = ILIDefinition(
                str(ili_def["text"]), _opt(_meta_value(ili_def.get("meta"), "source"))
            )
        if ili == "in":
            ili = None

        members = _unique(_split_members(syn.get("members")))
        synset = Synset(
            id=syn_id,
            lexicon_id=lex_id,
            pos=self._decode_pos(syn.get("partOfSpeech"), syn_id),
            ili=ili,
            members=members,
            definitions=tuple(
                Definition(
                    str(d.get("text") or ""),
                    _opt(d.get("language")),
                    _opt(_meta_value(d.get("meta"), "source")),
                )
                for d in syn.get("definitions") or []
            ),
            ili_definition=ili_definition,
            examples=tuple(
                Example(
                    str(e.get("text") or ""),
                    _opt(e.get("language")),
                    _opt(_meta_value(e.get("meta"), "source")),
                )
                for e in syn.get("examples") or []
            ),
            relations=relations,
        )
        self.synsets[syn_id] = synset
        self._pending_synsets.append((synset, bool(members)))

        by_kind = self.synset_relations.setdefault(syn_id, {})
        for rel in relations:
            targets = by_kind.setdefault(rel.kind, [])
            if rel.target not in targets:
                targets.append(rel.target)

    def _synset_relation(self, source: str, rel: Mapping[str, Any]) -> SynsetRelation:
        rel_type = str(rel.get("relType") or "")
        kind = SynsetRelationType.parse(rel_type)
        if kind is SynsetRelationType.UNKNOWN:
            self._note_unknown_kind(source, rel_type)
        return SynsetRelation(str(rel.get("target") or ""), kind, rel_type)

    def _index_synset(self, synset: Synset) -> None:
        """Derive the member senses of a synset from its entry-id list.

        Each listed entry contributes the senses it owns that target this
        synset. An entry contributing nothing is a dropped reference.
        """
        members: list[str] = []
        for entry_id in synset.members:
            entry = self.entries.get(entry_id)
            found = [] if entry is None else [
                s.id for s in entry.senses if s.synset == synset.id
            ]
            if not found:
                self.report.dropped_members += 1
                logger.debug(
                    "Synset %s: member %s has no sense in this synset",
                    synset.id, entry_id,
                )
            members.extend(found)
        self.synset_members[synset.id] = tuple(members)

    # -- validation ---------------------------------------------------------

    def _check_references(self) -> None:
        for sense in self.senses.values():
            if sense.synset not in self.synsets:
                self.report.dangling_sense_synsets += 1
                logger.debug(
                    "Sense %s targets undefined synset %r", sense.id, sense.synset
                )
            for rel in sense.relations:
                if rel.target not in self.senses and rel.target not in self.synsets:
                    self.report.dangling_sense_relations += 1
                    logger.debug(
                        "Sense %s: %s target %r is undefined",
                        sense.id, rel.rel_type, rel.target,
                    )
        for synset in self.synsets.values():
            for rel in synset.relations:
                if rel.target not in self.synsets:
                    self.report.dangling_synset_relations += 1
                    logger.debug(
                        "Synset %s: %s target %r is undefined",
                        synset.id, rel.rel_type, rel.target,
                    )

    def _decode_pos(self, value: Any, owner: str) -> PartOfSpeech:
        if not value:
            return PartOfSpeech.UNKNOWN
        try:
            return PartOfSpeech.parse(str(value))
        except FormatError:
            self.report.unknown_pos += 1
            logger.warning("%s: unrecognised part of speech %r", owner, value)
            return PartOfSpeech.UNKNOWN

    def _note_unknown_kind(self, source: str, rel_type: str) -> None:
        self.report.unknown_relation_kinds += 1
        if rel_type not in self.report.unknown_relation_types:
            self.report.unknown_relation_types.add(rel_type)
            logger.warning(
                "Unrecognised relation type %r (first seen on %s)",
                rel_type, source,
            )


def _pronunciation(data: Mapping[str, Any]) -> Pronunciation:
    phonemic = data.get("phonemic", True)
    if isinstance(phonemic, str):
        phonemic = phonemic.lower() != "false"
    return Pronunciation(
        text=str(data.get("text") or ""),
        variety=_opt(data.get("variety")),
        notation=_opt(data.get("notation")),
        phonemic=bool(phonemic),
        audio=_opt(data.get("audio")),
    )



def _freeze_relations(index: dict) -> dict:
    return {
        source: {kind: tuple(targets) for kind, targets in by_kind.items()}
        for source, by_kind in index.items()
        if by_kind
    }


def _log_report(report: BuildReport) -> None:
    if report.dropped_members:
        logger.warning(
            "Dropped %d synset member reference(s) with no sense in the synset",
            report.dropped_members,
        )
    if report.dangling_sense_synsets:
        logger.warning(
            "%d sense(s) target undefined synsets", report.dangling_sense_synsets
        )
    dangling = report.dangling_sense_relations + report.dangling_synset_relations
    if dangling:
        logger.warning("%d relation(s) point at undefined targets", dangling)
    if report.inferred_memberships:
        logger.info(
            "Inferred membership for %d synset(s) without a members list",
            report.inferred_memberships,
        )
