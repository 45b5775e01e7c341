"""In-memory backend over an immutable IndexedLexicon."""

from __future__ import annotations

import random
from collections.abc import Iterator

from wordnet_index.backends.base import Backend
from wordnet_index.builder import IndexedLexicon
from wordnet_index.models import (
    LexicalEntry,
    Lexicon,
    PartOfSpeech,
    Sense,
    SenseRelationType,
    Synset,
    SynsetRelationType,
)


class MemoryBackend(Backend):
    """Serves reads straight from the built indices.

    The index set is never mutated, so any number of threads may read
    through one instance without locking.
    """

    def __init__(self, index: IndexedLexicon) -> None:
        self.index = index

    def lexicons(self) -> list[Lexicon]:
        return list(self.index.lexicons)

    def find_entries(
        self, folded_lemma: str, pos: PartOfSpeech | None = None
    ) -> list[LexicalEntry]:
        if pos is None:
            ids = self.index.lemma_index.get(folded_lemma, ())
        else:
            ids = self.index.lemma_pos_index.get((folded_lemma, pos), ())
        return [self.index.entries[eid] for eid in ids]

    def get_entry(self, entry_id: str) -> LexicalEntry | None:
        return self.index.entries.get(entry_id)

    def get_sense(self, sense_id: str) -> Sense | None:
        return self.index.senses.get(sense_id)

    def get_synset(self, synset_id: str) -> Synset | None:
        return self.index.synsets.get(synset_id)

    def entry_id_for_sense(self, sense_id: str) -> str | None:
        return self.index.sense_entry.get(sense_id)

    def entry_sense_ids(self, entry_id: str) -> list[str] | None:
        ids = self.index.entry_senses.get(entry_id)
        return None if ids is None else list(ids)

    def synset_member_ids(self, synset_id: str) -> list[str] | None:
        ids = self.index.synset_members.get(synset_id)
        return None if ids is None else list(ids)

    def related_sense_ids(
        self, sense_id: str, kind: SenseRelationType
    ) -> list[str]:
        return list(self.index.sense_relations.get(sense_id, {}).get(kind, ()))

    def related_synset_ids(
        self, synset_id: str, kind: SynsetRelationType
    ) -> list[str]:
        return list(self.index.synset_relations.get(synset_id, {}).get(kind, ()))

    def entry_count(self) -> int:
        return len(self.index.entry_ids)

    def random_entry_id(self, rng: random.Random) -> str | None:
        if not self.index.entry_ids:
            return None
        return self.index.entry_ids[rng.randrange(len(self.index.entry_ids))]

    def iter_entries(self) -> Iterator[LexicalEntry]:
        for entry_id in self.index.entry_ids:
            yield self.index.entries[entry_id]

    def iter_synsets(self) -> Iterator[Synset]:
        yield from self.index.synsets.values()
