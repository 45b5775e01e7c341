"""Read-only query API over an injected storage backend."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from wordnet_index.backends.base import Backend
from wordnet_index.exceptions import (
    EntityNotFoundError,
    InconsistentDataError,
    StateError,
)
from wordnet_index.models import (
    LexicalEntry,
    Lexicon,
    PartOfSpeech,
    Sense,
    SenseRelationType,
    Synset,
    SynsetRelationType,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SynsetView:
    """What a display layer needs to render one synset for a lemma."""

    synset: Synset
    synonyms: tuple[str, ...]
    antonyms: tuple[str, ...]
    hypernyms: tuple[str, ...]
    hyponyms: tuple[str, ...]


class WordNet:
    """Query engine for one loaded lexical resource.

    All operations are reads; the same calls give the same answers over
    the memory and SQLite backends.
    """

    def __init__(
        self, backend: Backend, *, rng: random.Random | None = None
    ) -> None:
        self._backend = backend
        self._rng = rng or random.Random()

    @property
    def backend(self) -> Backend:
        return self._backend

    def close(self) -> None:
        self._backend.close()

    def __enter__(self) -> WordNet:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Lexicons and entries
    # ------------------------------------------------------------------

    def get_lexicons(self) -> list[Lexicon]:
        return self._backend.lexicons()

    def lookup_entries(
        self, lemma: str, pos: PartOfSpeech | str | None = None
    ) -> list[LexicalEntry]:
        """Find entries by written form, ignoring case.

        Returns an empty list when nothing matches. ``pos`` accepts a
        :class:`PartOfSpeech` or any text :meth:`PartOfSpeech.parse` accepts.
        """
        if pos is not None:
            pos = PartOfSpeech.parse(pos)
        return self._backend.find_entries(lemma.casefold(), pos)

    def get_entry_by_id(self, entry_id: str) -> LexicalEntry | None:
        return self._backend.get_entry(entry_id)

    def get_entry(self, entry_id: str) -> LexicalEntry:
        """Like :meth:`get_entry_by_id` but raises EntityNotFoundError."""
        entry = self._backend.get_entry(entry_id)
        if entry is None:
            raise EntityNotFoundError(f"Entry not found: {entry_id!r}")
        return entry

    def get_entry_id_for_sense(self, sense_id: str) -> str | None:
        return self._backend.entry_id_for_sense(sense_id)

    def get_random_entry(self) -> LexicalEntry:
        """Return an entry chosen uniformly at random."""
        entry_id = self._backend.random_entry_id(self._rng)
        if entry_id is None:
            raise StateError("Cannot pick a random entry: the dataset is empty")
        entry = self._backend.get_entry(entry_id)
        if entry is None:
            raise InconsistentDataError(
                f"Entry index lists {entry_id!r} but no such entry is stored"
            )
        return entry

    def all_entries(self) -> Iterator[LexicalEntry]:
        """Lazily yield every entry in load order.

        This is a full scan intended for export and batch jobs; use
        :meth:`lookup_entries` for interactive lookups.
        """
        yield from self._backend.iter_entries()

    def all_synsets(self) -> Iterator[Synset]:
        """Lazily yield every synset in load order (full scan)."""
        yield from self._backend.iter_synsets()

    # ------------------------------------------------------------------
    # Senses and synsets
    # ------------------------------------------------------------------

    def get_sense(self, sense_id: str) -> Sense:
        sense = self._backend.get_sense(sense_id)
        if sense is None:
            raise EntityNotFoundError(f"Sense not found: {sense_id!r}")
        return sense

    def get_synset(self, synset_id: str) -> Synset:
        synset = self._backend.get_synset(synset_id)
        if synset is None:
            raise EntityNotFoundError(f"Synset not found: {synset_id!r}")
        return synset

    def get_senses_for_entry(self, entry_id: str) -> list[Sense]:
        """Senses owned by an entry, in entry order."""
        sense_ids = self._backend.entry_sense_ids(entry_id)
        if sense_ids is None:
            raise EntityNotFoundError(f"Entry not found: {entry_id!r}")
        return self._resolve_senses(sense_ids, entry_id)

    def get_senses_for_synset(self, synset_id: str) -> list[Sense]:
        """The derived member senses of a synset."""
        sense_ids = self._backend.synset_member_ids(synset_id)
        if sense_ids is None:
            raise EntityNotFoundError(f"Synset not found: {synset_id!r}")
        return self._resolve_senses(sense_ids, synset_id)

    def _resolve_senses(self, sense_ids: list[str], owner: str) -> list[Sense]:
        senses = self._backend.get_senses(sense_ids)
        if len(senses) != len(sense_ids):
            found = {s.id for s in senses}
            missing = [sid for sid in sense_ids if sid not in found]
            raise InconsistentDataError(
                f"{owner}: indexed senses missing from storage: {missing}"
            )
        return senses

    # ------------------------------------------------------------------
    # Relations
    # ------------------------------------------------------------------

    def get_related_senses(
        self, sense_id: str, kind: SenseRelationType | str
    ) -> list[Sense]:
        """Targets of ``sense_id``'s outgoing relations of one kind.

        An unknown source gives an empty list. Targets that do not resolve
        to a sense are logged and left out.
        """
        kind = SenseRelationType.parse(kind)
        target_ids = self._backend.related_sense_ids(sense_id, kind)
        senses = self._backend.get_senses(target_ids)
        _warn_unresolved(sense_id, kind, target_ids, senses)
        return senses

    def get_related_synsets(
        self, synset_id: str, kind: SynsetRelationType | str
    ) -> list[Synset]:
        """Targets of ``synset_id``'s outgoing relations of one kind."""
        kind = SynsetRelationType.parse(kind)
        target_ids = self._backend.related_synset_ids(synset_id, kind)
        synsets = self._backend.get_synsets(target_ids)
        _warn_unresolved(synset_id, kind, target_ids, synsets)
        return synsets

    # ------------------------------------------------------------------
    # Lemma resolution
    # ------------------------------------------------------------------

    def get_synonyms(
        self, synset_id: str, exclude: str | None = None
    ) -> list[str]:
        """Sorted, distinct written forms of a synset's members.

        ``exclude`` (compared case-insensitively) drops the form being
        displayed.
        """
        sense_ids = self._backend.synset_member_ids(synset_id)
        if sense_ids is None:
            raise EntityNotFoundError(f"Synset not found: {synset_id!r}")
        return self._lemmas(sense_ids, exclude)

    def get_antonyms(
        self, synset_id: str, exclude: str | None = None
    ) -> list[str]:
        """Antonym lemmas for a synset, across all of its member senses.

        Every member sense contributes its antonym targets; targets that
        fall in the same synset are ignored.
        """
        member_ids = self._backend.synset_member_ids(synset_id)
        if member_ids is None:
            raise EntityNotFoundError(f"Synset not found: {synset_id!r}")
        targets: list[str] = []
        for sense_id in member_ids:
            for sense in self.get_related_senses(
                sense_id, SenseRelationType.ANTONYM
            ):
                if sense.synset != synset_id:
                    targets.append(sense.id)
        return self._lemmas(targets, exclude)

    def get_related_lemmas(
        self, synset_id: str, kind: SynsetRelationType | str
    ) -> list[str]:
        """Sorted, distinct member lemmas of the synsets related by ``kind``."""
        sense_ids: list[str] = []
        for synset in self.get_related_synsets(synset_id, kind):
            sense_ids.extend(self._backend.synset_member_ids(synset.id) or ())
        return self._lemmas(sense_ids)

    def describe_synset(
        self, synset_id: str, lemma: str | None = None
    ) -> SynsetView:
        """Bundle a synset with its synonym, antonym and taxonomy lemmas."""
        synset = self.get_synset(synset_id)
        return SynsetView(
            synset=synset,
            synonyms=tuple(self.get_synonyms(synset_id, exclude=lemma)),
            antonyms=tuple(self.get_antonyms(synset_id, exclude=lemma)),
            hypernyms=tuple(
                self.get_related_lemmas(synset_id, SynsetRelationType.HYPERNYM)
            ),
            hyponyms=tuple(
                self.get_related_lemmas(synset_id, SynsetRelationType.HYPONYM)
            ),
        )

    def _lemmas(
        self, sense_ids: Iterable[str], exclude: str | None = None
    ) -> list[str]:
        skip = exclude.casefold() if exclude is not None else None
        forms: set[str] = set()
        for sense_id in dict.fromkeys(sense_ids):
            entry_id = self._backend.entry_id_for_sense(sense_id)
            entry = self._backend.get_entry(entry_id) if entry_id else None
            if entry is None:
                logger.warning("Sense %s has no owning entry", sense_id)
                continue
            form = entry.lemma.written_form
            if skip is None or form.casefold() != skip:
                forms.add(form)
        return sorted(forms)


def _warn_unresolved(source: str, kind, target_ids: list[str], found) -> None:
    if len(found) == len(target_ids):
        return
    resolved = {record.id for record in found}
    for target in target_ids:
        if target not in resolved:
            logger.warning(
                "%s: %s target %r does not exist; skipped",
                source, kind.value, target,
            )
