"""Read-only access to the pipeline artifacts for page rendering code.

:class:`ContentRepository` is the consumer side of the cache directory. It
loads the manifest and individual subject/homepage artifacts on demand and
memoizes them per instance; call :meth:`ContentRepository.clear` to drop the
memo during development. A missing or unreadable artifact is reported as "not
found" (``None`` or an empty manifest), never as an exception.

Content items are located through indexes built once per subject, so route
lookups do not rescan subject content lists.

Example
-------
>>> from pathlib import Path
>>> repo = ContentRepository(Path(".next-cache"))  # doctest: +SKIP
>>> repo.get_item("kotlin", "variables").title  # doctest: +SKIP
'Kotlin Variables'
"""

from __future__ import annotations

import typing as typ

from ._constants import (
    HOMEPAGE_ARTIFACT_TEMPLATE,
    HOMEPAGE_TYPE,
    MANIFEST_FILENAME,
    SUBJECT_ARTIFACT_TEMPLATE,
)
from .cache import ArtifactCache
from .content.models import ContentItem, HomepageDocument, Subject
from .content.text import slugify
from .manifest import artifact_type

if typ.TYPE_CHECKING:
    from pathlib import Path

EMPTY_MANIFEST: dict[str, typ.Any] = {
    "subjects": [],
    "homepages": [],
    "totalFiles": 0,
    "totalPages": 0,
}


class ContentRepository:
    """Look up subjects, content items, and homepages by slug."""

    def __init__(self, cache_dir: Path) -> None:
        self.cache = ArtifactCache(cache_dir)
        self._subjects: dict[str, Subject | None] = {}
        self._items: dict[str, dict[str, ContentItem]] = {}
        self._homepages: dict[str, HomepageDocument | None] = {}

    def manifest(self) -> dict[str, typ.Any]:
        payload = self.cache.load(MANIFEST_FILENAME)
        if not isinstance(payload, dict):
            return dict(EMPTY_MANIFEST)
        return payload

    def subject_ids(self) -> list[str]:
        """Return the subject slugs listed in the manifest, in manifest order."""
        return [
            str(entry["id"])
            for entry in self.manifest().get("subjects") or []
            if isinstance(entry, dict) and entry.get("id")
        ]

    def subjects(self) -> list[Subject]:
        """Return every manifest subject whose artifact can be loaded."""
        loaded = (self.get_subject(subject_id) for subject_id in self.subject_ids())
        return [subject for subject in loaded if subject is not None]

    def get_subject(self, subject_id: str) -> Subject | None:
        slug = slugify(subject_id)
        if slug not in self._subjects:
            payload = self.cache.load(SUBJECT_ARTIFACT_TEMPLATE.format(slug=slug))
            subject = None
            if isinstance(payload, dict) and artifact_type(payload) != HOMEPAGE_TYPE:
                subject = Subject.from_dict(payload)
                # Later rows win when a url repeats within a subject.
                self._items[slug] = {item.url: item for item in subject.content}
            self._subjects[slug] = subject
        return self._subjects[slug]

    def get_item(self, subject_id: str, url: str) -> ContentItem | None:
        """Return the content item at ``/<subject>/<url>``, or None."""
        if self.get_subject(subject_id) is None:
            return None
        return self._items.get(slugify(subject_id), {}).get(url)

    def get_homepage(self, subject_id: str) -> HomepageDocument | None:
        slug = slugify(subject_id)
        if slug not in self._homepages:
            payload = self.cache.load(HOMEPAGE_ARTIFACT_TEMPLATE.format(slug=slug))
            self._homepages[slug] = (
                HomepageDocument.from_dict(payload)
                if isinstance(payload, dict)
                else None
            )
        return self._homepages[slug]

    def clear(self) -> None:
        self.cache.clear()
        self._subjects.clear()
        self._items.clear()
        self._homepages.clear()


__all__ = ["EMPTY_MANIFEST", "ContentRepository"]
