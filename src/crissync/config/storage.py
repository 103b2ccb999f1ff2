"""Local state directory; crissync keeps nothing there but the HTTP cache."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

HTTP_CACHE_FILENAME: Final = "http_cache.db"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path

    def http_cache_path(self, *, create: bool = True) -> Path:
        """SQLite file backing the ORCID response cache; ``create`` makes its directory."""

        directory = self.data_dir.expanduser().resolve()
        if create:
            directory.mkdir(parents=True, exist_ok=True)
        return directory / HTTP_CACHE_FILENAME


def get_storage_config() -> StorageConfig:
    explicit = os.getenv("CRISSYNC_DATA_DIR")
    if explicit:
        return StorageConfig(data_dir=Path(explicit))
    # XDG layout; LOCALAPPDATA on Windows
    base = os.getenv("XDG_DATA_HOME") or os.getenv("LOCALAPPDATA")
    base_dir = Path(base) if base else Path.home() / ".local" / "share"
    return StorageConfig(data_dir=base_dir / "crissync")
