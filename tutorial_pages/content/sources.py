"""Classify spreadsheet filenames into subject and homepage sources."""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import enum
from pathlib import Path

from tutorial_pages._constants import (
    HOMEPAGE_ARTIFACT_TEMPLATE,
    SPREADSHEET_SUFFIXES,
    SUBJECT_ARTIFACT_TEMPLATE,
)

from .text import display_name, slugify


class SourceKind(enum.StrEnum):
    """Kind of document a spreadsheet produces."""

    SUBJECT = "subject"
    HOMEPAGE = "homepage"


@dc.dataclass(frozen=True, slots=True)
class SourceFile:
    """A spreadsheet in the source directory and the artifact it maps to.

    Attributes
    ----------
    path : Path
        Location of the spreadsheet on disk.
    kind : SourceKind
        Whether the file describes a subject or a curated homepage.
    slug : str
        Subject identity derived from the filename stem (homepage suffix
        removed).
    name : str
        Human-readable subject name derived from the same stem.
    """

    path: Path
    kind: SourceKind
    slug: str
    name: str

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def artifact_name(self) -> str:
        """Return the cache filename this source is written to."""
        template = (
            HOMEPAGE_ARTIFACT_TEMPLATE
            if self.kind is SourceKind.HOMEPAGE
            else SUBJECT_ARTIFACT_TEMPLATE
        )
        return template.format(slug=self.slug)

    @classmethod
    def from_path(cls, path: Path, *, homepage_suffix: str = "_home") -> SourceFile:
        """Classify ``path`` by its filename convention.

        Examples
        --------
        >>> from pathlib import Path
        >>> SourceFile.from_path(Path("Jetpack_Compose.xlsx")).artifact_name
        'jetpack-compose.json'
        >>> SourceFile.from_path(Path("kotlin_home.xlsx")).artifact_name
        'kotlin_home.json'
        """
        stem = path.stem
        suffix = homepage_suffix.lower()
        if suffix and stem.lower().endswith(suffix) and len(stem) > len(suffix):
            base = stem[: -len(suffix)]
            return cls(
                path=path,
                kind=SourceKind.HOMEPAGE,
                slug=slugify(base),
                name=display_name(base),
            )
        return cls(
            path=path,
            kind=SourceKind.SUBJECT,
            slug=slugify(stem),
            name=display_name(stem),
        )


def discover_sources(source_dir: Path, *, homepage_suffix: str = "_home") -> list[SourceFile]:
    """Return every spreadsheet in ``source_dir`` sorted by filename."""
    files = sorted(
        (
            entry
            for entry in source_dir.iterdir()
            if entry.suffix.lower() in SPREADSHEET_SUFFIXES
            and not entry.name.startswith("~$")
        ),
        key=lambda entry: entry.name,
    )
    return [SourceFile.from_path(entry, homepage_suffix=homepage_suffix) for entry in files]


def split_collisions(
    sources: cabc.Iterable[SourceFile],
) -> tuple[list[SourceFile], dict[str, str]]:
    """Separate sources whose artifact name is already claimed.

    Distinct filenames can slugify to the same artifact, for example
    ``Jetpack_Compose.xlsx`` and ``jetpack compose.xlsx`` or ``kotlin.xlsx``
    and ``kotlin.xls``. The first source in the given order keeps the
    artifact; each later one is returned in the second mapping as
    ``{filename: error message}``.

    Examples
    --------
    >>> from pathlib import Path
    >>> kept, rejected = split_collisions(
    ...     [SourceFile.from_path(Path("Kotlin.xlsx")),
    ...      SourceFile.from_path(Path("kotlin.xls"))]
    ... )
    >>> [source.filename for source in kept]
    ['Kotlin.xlsx']
    >>> list(rejected)
    ['kotlin.xls']
    """
    owners: dict[str, SourceFile] = {}
    kept: list[SourceFile] = []
    rejected: dict[str, str] = {}
    for source in sources:
        owner = owners.get(source.artifact_name)
        if owner is not None:
            rejected[source.filename] = (
                f"{source.filename} maps to {source.artifact_name}, "
                f"which is already produced by {owner.filename}"
            )
            continue
        owners[source.artifact_name] = source
        kept.append(source)
    return kept, rejected


__all__ = ["SourceFile", "SourceKind", "discover_sources", "split_collisions"]
