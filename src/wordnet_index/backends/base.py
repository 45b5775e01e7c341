"""Storage interface shared by the in-memory and SQLite backends."""

from __future__ import annotations

import abc
import random
from collections.abc import Iterable, Iterator

from wordnet_index.models import (
    LexicalEntry,
    Lexicon,
    PartOfSpeech,
    Sense,
    SenseRelationType,
    Synset,
    SynsetRelationType,
)


class Backend(abc.ABC):
    """Primitive, index-level reads over one loaded resource.

    Implementations return records in source order and ``None`` (or an
    empty list) for absent ids; turning absence into errors is left to
    :class:`wordnet_index.wordnet.WordNet`.
    """

    @abc.abstractmethod
    def lexicons(self) -> list[Lexicon]:
        """All lexicons, in load order."""

    @abc.abstractmethod
    def find_entries(
        self, folded_lemma: str, pos: PartOfSpeech | None = None
    ) -> list[LexicalEntry]:
        """Entries whose case-folded written form equals ``folded_lemma``."""

    @abc.abstractmethod
    def get_entry(self, entry_id: str) -> LexicalEntry | None: ...

    @abc.abstractmethod
    def get_sense(self, sense_id: str) -> Sense | None: ...

    @abc.abstractmethod
    def get_synset(self, synset_id: str) -> Synset | None: ...

    def get_senses(self, sense_ids: Iterable[str]) -> list[Sense]:
        """Senses for ``sense_ids`` in the given order, skipping unknown ids."""
        senses = (self.get_sense(sid) for sid in sense_ids)
        return [s for s in senses if s is not None]

    def get_synsets(self, synset_ids: Iterable[str]) -> list[Synset]:
        """Synsets for ``synset_ids`` in the given order, skipping unknown ids."""
        synsets = (self.get_synset(sid) for sid in synset_ids)
        return [s for s in synsets if s is not None]

    @abc.abstractmethod
    def entry_id_for_sense(self, sense_id: str) -> str | None: ...

    @abc.abstractmethod
    def entry_sense_ids(self, entry_id: str) -> list[str] | None:
        """Sense ids owned by an entry; None if the entry is unknown."""

    @abc.abstractmethod
    def synset_member_ids(self, synset_id: str) -> list[str] | None:
        """Derived member sense ids of a synset; None if it is unknown."""

    @abc.abstractmethod
    def related_sense_ids(
        self, sense_id: str, kind: SenseRelationType
    ) -> list[str]: ...

    @abc.abstractmethod
    def related_synset_ids(
        self, synset_id: str, kind: SynsetRelationType
    ) -> list[str]: ...

    @abc.abstractmethod
    def entry_count(self) -> int: ...

    @abc.abstractmethod
    def random_entry_id(self, rng: random.Random) -> str | None:
        """Uniformly chosen entry id, or None for an empty dataset."""

    @abc.abstractmethod
    def iter_entries(self) -> Iterator[LexicalEntry]: ...

    @abc.abstractmethod
    def iter_synsets(self) -> Iterator[Synset]: ...

    def close(self) -> None:
        """Release any held resources."""

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
