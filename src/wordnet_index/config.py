"""Load options and YAML configuration for wordnet-index."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import yaml

from wordnet_index.exceptions import ConfigError

BACKENDS = ("memory", "sqlite")

DEFAULT_SNAPSHOT_NAME = "wordnet.snapshot"
DEFAULT_DB_NAME = "wordnet.db"
HOME_ENV = "WORDNET_INDEX_HOME"


def default_data_dir() -> Path:
    """``$WORDNET_INDEX_HOME`` if set, else ``~/.wordnet_index``."""
    env = os.environ.get(HOME_ENV)
    if env:
        return Path(env).expanduser()
    return Path.home() / ".wordnet_index"


@dataclass(frozen=True, slots=True)
class LoadOptions:
    """Where persisted state lives and how the loader treats it."""

    data_dir: Path = field(default_factory=default_data_dir)
    backend: str = "memory"
    force_rebuild: bool = False
    source: Path | None = None
    snapshot_name: str = DEFAULT_SNAPSHOT_NAME
    db_name: str = DEFAULT_DB_NAME

    def __post_init__(self) -> None:
        if self.backend not in BACKENDS:
            raise ConfigError(
                f"Unknown backend {self.backend!r} "
                f"(expected one of: {', '.join(BACKENDS)})"
            )

    @property
    def snapshot_path(self) -> Path:
        return Path(self.data_dir) / self.snapshot_name

    @property
    def db_path(self) -> Path:
        return Path(self.data_dir) / self.db_name

    def with_overrides(self, **changes: Any) -> LoadOptions:
        """Copy with the given non-None fields replaced."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def load_config(source: str | Path) -> LoadOptions:
    """Read LoadOptions from a YAML file.

    Recognised keys: ``data_dir``, ``backend``, ``force_rebuild``,
    ``source``, ``snapshot_name``, ``db_name``.

    Raises:
        ConfigError: If the file is not valid YAML or has bad values
        FileNotFoundError: If the file does not exist
    """
    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return LoadOptions()
    if not isinstance(data, dict):
        raise ConfigError("YAML root must be a mapping (dictionary)")
    return options_from_dict(data, base_dir=path.parent)


def options_from_dict(
    data: dict[str, Any], *, base_dir: Path | None = None
) -> LoadOptions:
    """Build LoadOptions from a parsed mapping; relative paths use ``base_dir``."""
    known = {"data_dir", "backend", "force_rebuild", "source",
             "snapshot_name", "db_name"}
    unknown = set(data) - known
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {sorted(unknown)}")

    kwargs: dict[str, Any] = {}
    for key in ("data_dir", "source"):
        if data.get(key) is not None:
            path = Path(str(data[key])).expanduser()
            if base_dir is not None and not path.is_absolute():
                path = base_dir / path
            kwargs[key] = path
    if "backend" in data:
        kwargs["backend"] = str(data["backend"])
    if "force_rebuild" in data:
        if not isinstance(data["force_rebuild"], bool):
            raise ConfigError("Field 'force_rebuild' must be a boolean")
        kwargs["force_rebuild"] = data["force_rebuild"]
    for key in ("snapshot_name", "db_name"):
        if data.get(key):
            kwargs[key] = str(data[key])
    return LoadOptions(**kwargs)
