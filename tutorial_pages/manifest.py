"""Assemble the manifest that indexes every emitted artifact.

The :class:`ManifestBuilder` scans the cache directory after all per-file
artifacts are written, classifies each JSON document by its ``type`` field
(documents without one are subjects), and writes ``manifest.json``. The page
rendering layer uses the manifest to enumerate valid routes, so it must only
be written once every artifact it references exists on disk.

Example
-------
>>> from pathlib import Path
>>> from tutorial_pages.cache import ArtifactCache
>>> builder = ManifestBuilder(ArtifactCache(Path(".next-cache")))  # doctest: +SKIP
>>> manifest = builder.run()  # doctest: +SKIP
>>> manifest.total_pages  # doctest: +SKIP
42
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import logging
import secrets
import typing as typ

from ._constants import HOMEPAGE_TYPE, MANIFEST_FILENAME, SUBJECT_TYPE
from .content.models import HomepageDocument, Subject

if typ.TYPE_CHECKING:
    from .cache import ArtifactCache

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class ArtifactCatalog:
    """Subjects and homepages decoded from the cache directory."""

    subjects: list[Subject] = dc.field(default_factory=list)
    homepages: list[HomepageDocument] = dc.field(default_factory=list)
    skipped: list[str] = dc.field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return sum(subject.total_pages for subject in self.subjects)

    @property
    def total_tutorials(self) -> int:
        return sum(homepage.total_tutorials for homepage in self.homepages)


@dc.dataclass(slots=True)
class Manifest:
    """Process-wide index of subjects and homepages for one build."""

    build_id: str
    generated_at: str
    subjects: list[dict[str, typ.Any]]
    homepages: list[dict[str, typ.Any]]
    total_pages: int
    total_tutorials: int

    def to_dict(self) -> dict[str, typ.Any]:
        return {
            "buildId": self.build_id,
            "generatedAt": self.generated_at,
            "totalFiles": len(self.subjects) + len(self.homepages),
            "totalSubjects": len(self.subjects),
            "totalHomepages": len(self.homepages),
            "totalPages": self.total_pages,
            "totalTutorials": self.total_tutorials,
            "subjects": self.subjects,
            "homepages": self.homepages,
        }


def artifact_type(payload: typ.Mapping[str, typ.Any]) -> str:
    """Return the document discriminator, defaulting to a subject."""
    value = payload.get("type")
    return str(value) if value else SUBJECT_TYPE


def collect_artifacts(cache: ArtifactCache) -> ArtifactCatalog:
    """Decode and classify every data artifact in the cache directory."""
    catalog = ArtifactCatalog()
    for name in cache.artifact_names():
        payload = cache.load(name)
        if not isinstance(payload, dict):
            logger.warning("Skipping artifact %s: not a JSON object", name)
            catalog.skipped.append(name)
            continue
        if artifact_type(payload) == HOMEPAGE_TYPE:
            catalog.homepages.append(HomepageDocument.from_dict(payload))
        else:
            catalog.subjects.append(Subject.from_dict(payload))
    return catalog


def generate_build_id(now: dt.datetime | None = None) -> str:
    """Return an identifier such as ``build_20260101T000000Z_1a2b3c4d``."""
    stamp = (now or dt.datetime.now(dt.UTC)).strftime("%Y%m%dT%H%M%SZ")
    return f"build_{stamp}_{secrets.token_hex(4)}"


class ManifestBuilder:
    """Build and persist ``manifest.json`` from the artifacts on disk."""

    def __init__(
        self,
        cache: ArtifactCache,
        *,
        build_id: str | None = None,
        generated_at: dt.datetime | None = None,
    ) -> None:
        self.cache = cache
        self.generated_at = generated_at or dt.datetime.now(dt.UTC)
        self.build_id = build_id or generate_build_id(self.generated_at)

    def build(self, catalog: ArtifactCatalog | None = None) -> Manifest:
        """Return the manifest for ``catalog`` (collected from disk when omitted)."""
        if catalog is None:
            catalog = collect_artifacts(self.cache)
        return Manifest(
            build_id=self.build_id,
            generated_at=self.generated_at.isoformat(),
            subjects=[_subject_summary(subject) for subject in catalog.subjects],
            homepages=[_homepage_summary(homepage) for homepage in catalog.homepages],
            total_pages=catalog.total_pages,
            total_tutorials=catalog.total_tutorials,
        )

    def run(self, catalog: ArtifactCatalog | None = None) -> Manifest:
        """Build the manifest and write it to the cache directory."""
        manifest = self.build(catalog)
        self.cache.write(MANIFEST_FILENAME, manifest.to_dict())
        logger.info(
            "Manifest lists %d subjects, %d homepages, %d pages",
            len(manifest.subjects),
            len(manifest.homepages),
            manifest.total_pages,
        )
        return manifest


def _subject_summary(subject: Subject) -> dict[str, typ.Any]:
    return {
        "id": subject.id,
        "name": subject.name,
        "base_url": subject.base_url,
        "titleTag": subject.title_tag,
        "descriptionTag": subject.description_tag,
        "totalPages": subject.total_pages,
    }


def _homepage_summary(homepage: HomepageDocument) -> dict[str, typ.Any]:
    return {
        "id": homepage.id,
        "title": homepage.title,
        "shortDesc": homepage.short_desc,
        "totalSections": len(homepage.sections),
        "totalTutorials": homepage.total_tutorials,
    }


__all__ = [
    "ArtifactCatalog",
    "Manifest",
    "ManifestBuilder",
    "artifact_type",
    "collect_artifacts",
    "generate_build_id",
]
