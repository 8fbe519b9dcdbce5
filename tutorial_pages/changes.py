"""Detect which source spreadsheets changed since the previous run.

A :class:`FileHashLedger` maps source filenames to the SHA-256 digest of
their bytes and is persisted as ``file-hashes.json`` in the cache directory.
:class:`ChangeDetector` hashes every current source file, compares against
the ledger, and partitions the files into changed, unchanged, and failed
sets, updating the ledger for each file it hashed.
"""

from __future__ import annotations

import dataclasses as dc
import hashlib
import logging
import typing as typ

from .jsonio import ArtifactDecodeError, read_json, write_json

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .content.sources import SourceFile

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1 << 16


class SourceDirectoryError(RuntimeError):
    """Raised when the source directory is missing or unreadable."""


def hash_file(path: Path) -> str:
    """Return the hex SHA-256 digest of the bytes stored at ``path``."""
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


class FileHashLedger:
    """Mapping of source filename to content hash with load/save helpers."""

    def __init__(self, entries: cabc.Mapping[str, str] | None = None) -> None:
        self._entries: dict[str, str] = dict(entries or {})

    def __contains__(self, filename: object) -> bool:
        return filename in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, filename: str) -> str | None:
        return self._entries.get(filename)

    def record(self, filename: str, digest: str) -> None:
        self._entries[filename] = digest

    def forget(self, filename: str) -> None:
        self._entries.pop(filename, None)

    def prune(self, keep: cabc.Iterable[str]) -> list[str]:
        """Drop entries not named in ``keep`` and return the removed names."""
        wanted = set(keep)
        removed = sorted(name for name in self._entries if name not in wanted)
        for name in removed:
            del self._entries[name]
        return removed

    def as_dict(self) -> dict[str, str]:
        return dict(sorted(self._entries.items()))

    @classmethod
    def load(cls, path: Path) -> FileHashLedger:
        """Load a ledger from ``path``; a missing or corrupt file yields an empty one."""
        if not path.exists():
            return cls()
        try:
            payload = read_json(path)
        except (OSError, ArtifactDecodeError) as exc:
            logger.warning("Ignoring unreadable hash ledger %s: %s", path, exc)
            return cls()
        if not isinstance(payload, dict):
            logger.warning("Ignoring malformed hash ledger %s", path)
            return cls()
        return cls(
            {str(name): str(digest) for name, digest in payload.items() if digest}
        )

    def save(self, path: Path) -> None:
        write_json(path, self.as_dict())


@dc.dataclass(slots=True)
class ChangeSet:
    """Partition of source files produced by :class:`ChangeDetector`."""

    changed: list[SourceFile] = dc.field(default_factory=list)
    unchanged: list[SourceFile] = dc.field(default_factory=list)
    failed: dict[str, str] = dc.field(default_factory=dict)


class ChangeDetector:
    """Classify source files as changed or unchanged against a hash ledger."""

    def __init__(self, ledger: FileHashLedger) -> None:
        self.ledger = ledger

    def detect(self, sources: cabc.Iterable[SourceFile]) -> ChangeSet:
        """Hash each source and compare it with the ledger.

        Parameters
        ----------
        sources : Iterable[SourceFile]
            Source spreadsheets discovered for this run.

        Returns
        -------
        ChangeSet
            ``changed`` holds files whose hash differs or is unknown,
            ``unchanged`` holds files whose hash matches, and ``failed`` maps
            filenames that could not be read to the error message.

        Notes
        -----
        The ledger entry is updated for every file that was hashed. Files
        that fail to hash keep no entry so they are retried next run.
        """
        result = ChangeSet()
        for source in sources:
            try:
                digest = hash_file(source.path)
            except OSError as exc:
                logger.error("Unable to hash %s: %s", source.filename, exc)
                result.failed[source.filename] = str(exc)
                self.ledger.forget(source.filename)
                continue
            previous = self.ledger.get(source.filename)
            self.ledger.record(source.filename, digest)
            if previous == digest:
                result.unchanged.append(source)
            else:
                result.changed.append(source)
        return result


def ensure_source_dir(source_dir: Path) -> None:
    """Validate that ``source_dir`` exists and can be listed.

    Raises
    ------
    SourceDirectoryError
        If the directory is missing, not a directory, or unreadable.
    """
    if not source_dir.is_dir():
        msg = f"Data directory not found: {source_dir}"
        raise SourceDirectoryError(msg)
    try:
        next(source_dir.iterdir(), None)
    except OSError as exc:
        msg = f"Data directory is not readable: {source_dir}: {exc}"
        raise SourceDirectoryError(msg) from exc


__all__ = [
    "ChangeDetector",
    "ChangeSet",
    "FileHashLedger",
    "SourceDirectoryError",
    "ensure_source_dir",
    "hash_file",
]
