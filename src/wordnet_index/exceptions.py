"""Custom exception hierarchy for wordnet-index."""


class WordnetIndexError(Exception):
    """Base exception for all wordnet-index errors."""


class EntityNotFoundError(WordnetIndexError):
    """A dereferenced id (entry, sense, synset) has no matching record."""


class InconsistentDataError(WordnetIndexError):
    """An index points at a primary record that does not exist."""


class FormatError(WordnetIndexError):
    """Undecodable field, malformed resource, or unreadable snapshot."""


class SnapshotVersionError(FormatError):
    """Snapshot header carries a format version this reader cannot interpret."""

    def __init__(self, found: int, expected: int):
        self.found = found
        self.expected = expected
        super().__init__(
            f"Incompatible snapshot version: {found} (expected {expected})"
        )


class DataImportError(FormatError):
    """Failed to parse the source document (malformed XML, etc.)."""


class StateError(WordnetIndexError):
    """Query surface used in a state that cannot answer it."""


class DatabaseError(WordnetIndexError):
    """Schema version mismatch, connection failure."""


class ConfigError(WordnetIndexError):
    """Invalid configuration file or option value."""


class ExportError(WordnetIndexError):
    """Failed to write the WN-LMF export."""
