"""Record model dataclasses and enums for wordnet-index."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from wordnet_index.exceptions import FormatError

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class PartOfSpeech(str, Enum):
    """Part-of-speech tags for lexical entries and synsets."""

    NOUN = "n"
    VERB = "v"
    ADJECTIVE = "a"
    ADVERB = "r"
    ADJECTIVE_SATELLITE = "s"
    PHRASE = "t"
    CONJUNCTION = "c"
    ADPOSITION = "p"
    OTHER = "x"
    UNKNOWN = "u"

    @classmethod
    def parse(cls, text: str | PartOfSpeech) -> PartOfSpeech:
        """Decode a POS code or long name (``"n"``, ``"noun"``, ``"adj_sat"``...).

        Raises FormatError for anything unrecognised.
        """
        if isinstance(text, PartOfSpeech):
            return text
        key = text.strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return _POS_ALIASES[key]
        except KeyError:
            raise FormatError(f"Invalid part of speech: {text!r}") from None

    @property
    def label(self) -> str:
        """Human-readable name, e.g. ``"adjective satellite"``."""
        return self.name.lower().replace("_", " ")


_POS_ALIASES: dict[str, PartOfSpeech] = {
    **{p.value: p for p in PartOfSpeech},
    **{p.name.lower(): p for p in PartOfSpeech},
    "adj": PartOfSpeech.ADJECTIVE,
    "adv": PartOfSpeech.ADVERB,
    "adj_sat": PartOfSpeech.ADJECTIVE_SATELLITE,
    "satellite": PartOfSpeech.ADJECTIVE_SATELLITE,
    "conj": PartOfSpeech.CONJUNCTION,
    "adp": PartOfSpeech.ADPOSITION,
}


class _RelationKind(str, Enum):
    """Relation kinds: any unrecognised text decodes to ``UNKNOWN``."""

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            key = value.strip().lower().replace("-", "_")
            for member in cls:
                if member.value == key:
                    return member
        return cls("unknown")

    @classmethod
    def parse(cls, text):
        """Decode a relation kind; never fails."""
        if isinstance(text, cls):
            return text
        return cls(text)


class SynsetRelationType(_RelationKind):
    """Relation kinds between synsets."""

    AGENT = "agent"
    ALSO = "also"
    ANTONYM = "antonym"
    ANTO_CONVERSE = "anto_converse"
    ANTO_GRADABLE = "anto_gradable"
    ANTO_SIMPLE = "anto_simple"
    ATTRIBUTE = "attribute"
    AUGMENTATIVE = "augmentative"
    BE_IN_STATE = "be_in_state"
    CAUSES = "causes"
    CLASSIFIED_BY = "classified_by"
    CLASSIFIES = "classifies"
    CO_AGENT_INSTRUMENT = "co_agent_instrument"
    CO_AGENT_PATIENT = "co_agent_patient"
    CO_AGENT_RESULT = "co_agent_result"
    CO_INSTRUMENT_AGENT = "co_instrument_agent"
    CO_INSTRUMENT_PATIENT = "co_instrument_patient"
    CO_INSTRUMENT_RESULT = "co_instrument_result"
    CO_PATIENT_AGENT = "co_patient_agent"
    CO_PATIENT_INSTRUMENT = "co_patient_instrument"
    CO_RESULT_AGENT = "co_result_agent"
    CO_RESULT_INSTRUMENT = "co_result_instrument"
    CO_ROLE = "co_role"
    DIMINUTIVE = "diminutive"
    DIRECTION = "direction"
    DOMAIN_REGION = "domain_region"
    DOMAIN_TOPIC = "domain_topic"
    ENTAILS = "entails"
    EQ_SYNONYM = "eq_synonym"
    EXEMPLIFIES = "exemplifies"
    FEMININE = "feminine"
    HAS_AUGMENTATIVE = "has_augmentative"
    HAS_DIMINUTIVE = "has_diminutive"
    HAS_DOMAIN_REGION = "has_domain_region"
    HAS_DOMAIN_TOPIC = "has_domain_topic"
    HAS_FEMININE = "has_feminine"
    HAS_MASCULINE = "has_masculine"
    HAS_YOUNG = "has_young"
    HOLO_LOCATION = "holo_location"
    HOLO_MEMBER = "holo_member"
    HOLO_PART = "holo_part"
    HOLO_PORTION = "holo_portion"
    HOLO_SUBSTANCE = "holo_substance"
    HOLONYM = "holonym"
    HYPERNYM = "hypernym"
    HYPONYM = "hyponym"
    IN_MANNER = "in_manner"
    INSTANCE_HYPERNYM = "instance_hypernym"
    INSTANCE_HYPONYM = "instance_hyponym"
    INSTRUMENT = "instrument"
    INVOLVED = "involved"
    INVOLVED_AGENT = "involved_agent"
    INVOLVED_DIRECTION = "involved_direction"
    INVOLVED_INSTRUMENT = "involved_instrument"
    INVOLVED_LOCATION = "involved_location"
    INVOLVED_PATIENT = "involved_patient"
    INVOLVED_RESULT = "involved_result"
    INVOLVED_SOURCE_DIRECTION = "involved_source_direction"
    INVOLVED_TARGET_DIRECTION = "involved_target_direction"
    IR_SYNONYM = "ir_synonym"
    IS_CAUSED_BY = "is_caused_by"
    IS_ENTAILED_BY = "is_entailed_by"
    IS_EXEMPLIFIED_BY = "is_exemplified_by"
    IS_SUBEVENT_OF = "is_subevent_of"
    LOCATION = "location"
    MANNER_OF = "manner_of"
    MASCULINE = "masculine"
    MERO_LOCATION = "mero_location"
    MERO_MEMBER = "mero_member"
    MERO_PART = "mero_part"
    MERO_PORTION = "mero_portion"
    MERO_SUBSTANCE = "mero_substance"
    MERONYM = "meronym"
    OTHER = "other"
    PATIENT = "patient"
    RESTRICTED_BY = "restricted_by"
    RESTRICTS = "restricts"
    RESULT = "result"
    ROLE = "role"
    SIMILAR = "similar"
    SOURCE_DIRECTION = "source_direction"
    STATE_OF = "state_of"
    SUBEVENT = "subevent"
    TARGET_DIRECTION = "target_direction"
    YOUNG = "young"
    UNKNOWN = "unknown"


class SenseRelationType(_RelationKind):
    """Relation kinds between senses (and from a sense to a synset)."""

    AGENT = "agent"
    ALSO = "also"
    ANTONYM = "antonym"
    ANTO_CONVERSE = "anto_converse"
    ANTO_GRADABLE = "anto_gradable"
    ANTO_SIMPLE = "anto_simple"
    AUGMENTATIVE = "augmentative"
    BODY_PART = "body_part"
    BY_MEANS_OF = "by_means_of"
    DERIVATION = "derivation"
    DESTINATION = "destination"
    DIMINUTIVE = "diminutive"
    DOMAIN_REGION = "domain_region"
    DOMAIN_TOPIC = "domain_topic"
    EVENT = "event"
    EXEMPLIFIES = "exemplifies"
    FEMININE = "feminine"
    HAS_AUGMENTATIVE = "has_augmentative"
    HAS_DIMINUTIVE = "has_diminutive"
    HAS_DOMAIN_REGION = "has_domain_region"
    HAS_DOMAIN_TOPIC = "has_domain_topic"
    HAS_FEMININE = "has_feminine"
    HAS_MASCULINE = "has_masculine"
    HAS_METAPHOR = "has_metaphor"
    HAS_METONYM = "has_metonym"
    HAS_YOUNG = "has_young"
    INSTRUMENT = "instrument"
    IS_EXEMPLIFIED_BY = "is_exemplified_by"
    LOCATION = "location"
    MASCULINE = "masculine"
    MATERIAL = "material"
    METAPHOR = "metaphor"
    METONYM = "metonym"
    OTHER = "other"
    PARTICIPLE = "participle"
    PERTAINYM = "pertainym"
    PROPERTY = "property"
    RESULT = "result"
    SECONDARY_ASPECT_IP = "secondary_aspect_ip"
    SECONDARY_ASPECT_PI = "secondary_aspect_pi"
    SIMILAR = "similar"
    SIMPLE_ASPECT_IP = "simple_aspect_ip"
    SIMPLE_ASPECT_PI = "simple_aspect_pi"
    STATE = "state"
    UNDERGOER = "undergoer"
    USES = "uses"
    VEHICLE = "vehicle"
    YOUNG = "young"
    UNKNOWN = "unknown"


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Lexicon:
    """A WordNet lexicon (language-specific resource container)."""

    id: str
    label: str
    language: str
    email: str
    license: str
    version: str
    url: str | None = None
    citation: str | None = None
    logo: str | None = None
    status: str | None = None
    confidence_score: float | None = None
    publisher: str | None = None
    contributor: str | None = None


@dataclass(frozen=True, slots=True)
class Lemma:
    """A word's written form paired with its part of speech."""

    written_form: str
    pos: PartOfSpeech


@dataclass(frozen=True, slots=True)
class Pronunciation:
    """A pronunciation of a lemma."""

    text: str
    variety: str | None = None
    notation: str | None = None
    phonemic: bool = True
    audio: str | None = None


@dataclass(frozen=True, slots=True)
class SenseRelation:
    """A typed, directed edge from a sense to another sense."""

    target: str
    kind: SenseRelationType
    rel_type: str


@dataclass(frozen=True, slots=True)
class Sense:
    """A sense linking a lexical entry to exactly one synset."""

    id: str
    entry_id: str
    synset: str
    relations: tuple[SenseRelation, ...] = ()


@dataclass(frozen=True, slots=True)
class LexicalEntry:
    """A lexical entry (lemma + pronunciations + senses)."""

    id: str
    lexicon_id: str
    lemma: Lemma
    pronunciations: tuple[Pronunciation, ...] = ()
    senses: tuple[Sense, ...] = ()


@dataclass(frozen=True, slots=True)
class Definition:
    """A definition of a synset, optionally language-tagged."""

    text: str
    language: str | None = None
    source: str | None = None


@dataclass(frozen=True, slots=True)
class ILIDefinition:
    """Definition proposed for a new Interlingual Index entry."""

    text: str
    source: str | None = None


@dataclass(frozen=True, slots=True)
class Example:
    """A usage example for a synset."""

    text: str
    language: str | None = None
    source: str | None = None


@dataclass(frozen=True, slots=True)
class SynsetRelation:
    """A typed, directed edge from a synset to another synset."""

    target: str
    kind: SynsetRelationType
    rel_type: str


@dataclass(frozen=True, slots=True)
class Synset:
    """A synset (set of synonymous senses sharing a concept).

    ``members`` holds *entry* ids as listed in the source document; the
    senses that actually belong to the synset are derived at build time.
    """

    id: str
    lexicon_id: str
    pos: PartOfSpeech
    ili: str | None = None
    members: tuple[str, ...] = ()
    definitions: tuple[Definition, ...] = ()
    ili_definition: ILIDefinition | None = None
    examples: tuple[Example, ...] = ()
    relations: tuple[SynsetRelation, ...] = ()
