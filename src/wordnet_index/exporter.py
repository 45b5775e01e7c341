"""Export pipeline: write a loaded WordNet back to WN-LMF XML."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from wordnet_index.exceptions import ExportError
from wordnet_index.models import (
    LexicalEntry,
    Lexicon,
    Pronunciation,
    Sense,
    Synset,
)
from wordnet_index.wordnet import WordNet

logger = logging.getLogger(__name__)


def export_to_lmf(
    wordnet: WordNet,
    destination: str | Path,
    *,
    lexicon_ids: list[str] | None = None,
    lmf_version: str = "1.3",
) -> None:
    """Export every (or the selected) lexicon to a WN-LMF XML file."""
    import wn.lmf

    resource = build_resource(
        wordnet, lexicon_ids=lexicon_ids, lmf_version=lmf_version
    )
    try:
        wn.lmf.dump(resource, str(destination))  # type: ignore[arg-type]
    except Exception as e:
        raise ExportError(f"Failed to write {destination}: {e}") from e
    logger.info("Exported %d lexicon(s) to %s", len(resource["lexicons"]), destination)


def build_resource(
    wordnet: WordNet,
    *,
    lexicon_ids: list[str] | None = None,
    lmf_version: str = "1.3",
) -> dict:
    """Build a LexicalResource mapping from the indexed data.

    Scans all entries and synsets, so this is as expensive as
    :meth:`WordNet.all_entries`.
    """
    lexicons: dict[str, dict[str, Any]] = {}
    for lex in wordnet.get_lexicons():
        if lexicon_ids is None or lex.id in lexicon_ids:
            lexicons[lex.id] = _build_lexicon(lex)
    if lexicon_ids is not None:
        missing = set(lexicon_ids) - set(lexicons)
        if missing:
            raise ExportError(f"Unknown lexicon(s): {sorted(missing)}")

    for entry in wordnet.all_entries():
        if entry.lexicon_id in lexicons:
            lexicons[entry.lexicon_id]["entries"].append(_build_entry(entry))
    for synset in wordnet.all_synsets():
        if synset.lexicon_id in lexicons:
            lexicons[synset.lexicon_id]["synsets"].append(_build_synset(synset))

    return {"lmf_version": lmf_version, "lexicons": list(lexicons.values())}


def _build_lexicon(lex: Lexicon) -> dict:
    """Build a single Lexicon TypedDict (entries and synsets added later)."""
    meta: dict[str, Any] = {}
    if lex.publisher:
        meta["publisher"] = lex.publisher
    if lex.contributor:
        meta["contributor"] = lex.contributor
    if lex.status:
        meta["status"] = lex.status
    if lex.confidence_score is not None:
        meta["confidenceScore"] = str(lex.confidence_score)

    return {
        "id": lex.id,
        "label": lex.label,
        "language": lex.language,
        "email": lex.email,
        "license": lex.license,
        "version": lex.version,
        "url": lex.url or "",
        "citation": lex.citation or "",
        "logo": lex.logo or "",
        "meta": meta or None,
        "entries": [],
        "synsets": [],
        "requires": [],
        "frames": [],
    }


def _build_entry(entry: LexicalEntry) -> dict:
    """Build a LexicalEntry TypedDict."""
    return {
        "id": entry.id,
        "lemma": {
            "writtenForm": entry.lemma.written_form,
            "partOfSpeech": entry.lemma.pos.value,
            "script": "",
            "pronunciations": [
                _build_pronunciation(p) for p in entry.pronunciations
            ],
            "tags": [],
        },
        "forms": [],
        "senses": [
            _build_sense(sense, rank) for rank, sense in enumerate(entry.senses)
        ],
        "meta": None,
    }


def _build_pronunciation(p: Pronunciation) -> dict:
    return {
        "text": p.text,
        "variety": p.variety or "",
        "notation": p.notation or "",
        "phonemic": p.phonemic,
        "audio": p.audio or "",
    }


def _build_sense(sense: Sense, rank: int) -> dict:
    """Build a Sense TypedDict."""
    return {
        "id": sense.id,
        "synset": sense.synset,
        "n": rank,
        "lexicalized": True,
        "adjposition": "",
        "meta": None,
        "relations": [
            {"target": r.target, "relType": r.rel_type, "meta": None}
            for r in sense.relations
        ],
        "examples": [],
        "counts": [],
        "subcat": [],
    }


def _build_synset(synset: Synset) -> dict:
    """Build a Synset TypedDict."""
    ili = synset.ili or ""
    if not ili and synset.ili_definition is not None:
        ili = "in"

    definitions = []
    for d in synset.definitions:
        defn: dict[str, Any] = {"text": d.text}
        if d.language:
            defn["language"] = d.language
        defn["meta"] = {"source": d.source} if d.source else None
        definitions.append(defn)

    examples = []
    for x in synset.examples:
        ex: dict[str, Any] = {"text": x.text}
        if x.language:
            ex["language"] = x.language
        ex["meta"] = {"source": x.source} if x.source else None
        examples.append(ex)

    result: dict[str, Any] = {
        "id": synset.id,
        "partOfSpeech": synset.pos.value,
        "ili": ili,
        "lexicalized": True,
        "lexfile": "",
        "meta": None,
        "definitions": definitions,
        "relations": [
            {"target": r.target, "relType": r.rel_type, "meta": None}
            for r in synset.relations
        ],
        "examples": examples,
        "members": list(synset.members),
    }
    if synset.ili_definition is not None:
        result["ili_definition"] = {
            "text": synset.ili_definition.text,
            "meta": (
                {"source": synset.ili_definition.source}
                if synset.ili_definition.source else None
            ),
        }
    return result
