"""Storage backends: one interface, in-memory and SQLite strategies."""

from wordnet_index.backends.base import Backend
from wordnet_index.backends.memory import MemoryBackend
from wordnet_index.backends.sqlite import SqliteBackend

__all__ = ["Backend", "MemoryBackend", "SqliteBackend"]
