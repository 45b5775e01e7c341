"""
wordnet-index: indexing and query engine for WN-LMF lexical resources.

Quick start:
    from wordnet_index import LMFProvider, LoadOptions, load_wordnet

    wordnet = load_wordnet(LMFProvider("english-wordnet.xml"), LoadOptions())
    for entry in wordnet.lookup_entries("cat", "n"):
        for sense in entry.senses:
            print(wordnet.get_synset(sense.synset).definitions[0].text)
"""

__version__ = "0.1.0"

from wordnet_index.backends import Backend, MemoryBackend, SqliteBackend
from wordnet_index.builder import BuildReport, IndexedLexicon, build, build_with_report
from wordnet_index.config import LoadOptions, load_config
from wordnet_index.exceptions import (
    ConfigError,
    DataImportError,
    DatabaseError,
    EntityNotFoundError,
    ExportError,
    FormatError,
    InconsistentDataError,
    SnapshotVersionError,
    StateError,
    WordnetIndexError,
)
from wordnet_index.lmf import LMFProvider, load_lmf
from wordnet_index.loader import clear_persisted, load_wordnet
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
from wordnet_index.wordnet import SynsetView, WordNet

__all__ = [
    "__version__",
    # Query engine
    "WordNet",
    "SynsetView",
    "load_wordnet",
    "clear_persisted",
    "LoadOptions",
    "load_config",
    # Building
    "build",
    "build_with_report",
    "BuildReport",
    "IndexedLexicon",
    "LMFProvider",
    "load_lmf",
    # Backends
    "Backend",
    "MemoryBackend",
    "SqliteBackend",
    # Models
    "Lexicon",
    "LexicalEntry",
    "Lemma",
    "Pronunciation",
    "Sense",
    "SenseRelation",
    "Synset",
    "SynsetRelation",
    "Definition",
    "ILIDefinition",
    "Example",
    "PartOfSpeech",
    "SenseRelationType",
    "SynsetRelationType",
    # Exceptions
    "WordnetIndexError",
    "EntityNotFoundError",
    "InconsistentDataError",
    "FormatError",
    "SnapshotVersionError",
    "DataImportError",
    "StateError",
    "DatabaseError",
    "ConfigError",
    "ExportError",
]
