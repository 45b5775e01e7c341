"""WN-LMF document provider backed by the ``wn`` library's parser."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from wordnet_index.exceptions import DataImportError

logger = logging.getLogger(__name__)


def load_lmf(source: str | Path) -> dict[str, Any]:
    """Parse a WN-LMF XML file into a LexicalResource mapping."""
    import wn.lmf

    source = Path(source)
    if not source.exists():
        raise FileNotFoundError(f"File not found: {source}")

    logger.info("Parsing %s", source)
    try:
        resource = wn.lmf.load(str(source), progress_handler=None)
    except Exception as e:
        raise DataImportError(f"Failed to parse XML: {e}") from e
    return resource  # type: ignore[return-value]


class LMFProvider:
    """Zero-argument callable producing the parsed resource for one file.

    The loader calls it only when no usable persisted state exists.
    """

    def __init__(self, source: str | Path) -> None:
        self.source = Path(source)

    def __call__(self) -> dict[str, Any]:
        return load_lmf(self.source)

    def __repr__(self) -> str:
        return f"LMFProvider({str(self.source)!r})"
