"""Per-run access to the JSON artifacts in the cache directory.

An :class:`ArtifactCache` is created at the start of a pipeline run and
discarded at the end. It memoizes decoded artifacts so the unchanged-file
reuse step, the manifest builder, and the sitemap generator read each file
at most once per run.
"""

from __future__ import annotations

import logging
import typing as typ

from ._constants import RESERVED_ARTIFACTS
from .jsonio import ArtifactDecodeError, read_json, write_json

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class ArtifactCache:
    """Read-through memo of artifacts stored under ``cache_dir``."""

    def __init__(self, cache_dir: Path) -> None:
        self.cache_dir = cache_dir
        self._payloads: dict[str, typ.Any] = {}

    def path_for(self, name: str) -> Path:
        return self.cache_dir / name

    def write(self, name: str, payload: typ.Any) -> int:
        """Persist ``payload`` as artifact ``name`` and remember it."""
        size = write_json(self.path_for(name), payload)
        self._payloads[name] = payload
        return size

    def remember(self, name: str, payload: typ.Any) -> None:
        """Record a payload another thread already wrote to disk."""
        self._payloads[name] = payload

    def load(self, name: str) -> typ.Any | None:
        """Return the decoded artifact, or None when it is missing or corrupt."""
        if name in self._payloads:
            return self._payloads[name]
        path = self.path_for(name)
        if not path.is_file():
            return None
        try:
            payload = read_json(path)
        except (OSError, ArtifactDecodeError) as exc:
            logger.warning("Skipping unreadable artifact %s: %s", name, exc)
            return None
        self._payloads[name] = payload
        return payload

    def artifact_names(self) -> list[str]:
        """Return the data artifact filenames on disk, sorted."""
        if not self.cache_dir.is_dir():
            return []
        return sorted(
            entry.name
            for entry in self.cache_dir.iterdir()
            if entry.is_file()
            and entry.suffix == ".json"
            and not entry.name.startswith(".")
            and entry.name not in RESERVED_ARTIFACTS
        )

    def clear(self) -> None:
        self._payloads.clear()


__all__ = ["ArtifactCache"]
