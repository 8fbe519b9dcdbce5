"""Dataclasses for the normalized JSON content model.

Field names on the dataclasses are snake_case; :meth:`to_dict` emits the
camelCase keys the front end reads (``titleTag``, ``shortDesc``,
``totalPages``, ...). ``base_url`` keeps its snake_case spelling on the wire.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from tutorial_pages._constants import DEFAULT_SECTION, HOMEPAGE_TYPE


@dc.dataclass(slots=True)
class ContentItem:
    """A single tutorial page or blog post."""

    id: int | str
    title: str
    url: str
    content: str
    keywords: str
    title_tag: str
    description_tag: str
    short_desc: str
    word_count: int
    reading_time: int
    last_modified: str
    section: str | None = None
    type: int | str | None = None

    def to_dict(self) -> dict[str, typ.Any]:
        """Return the artifact payload, omitting grouping fields when unset."""
        payload: dict[str, typ.Any] = {
            "id": self.id,
            "title": self.title,
            "url": self.url,
        }
        if self.type is not None:
            payload["type"] = self.type
        payload.update(
            {
                "content": self.content,
                "keywords": self.keywords,
                "titleTag": self.title_tag,
                "descriptionTag": self.description_tag,
                "shortDesc": self.short_desc,
                "wordCount": self.word_count,
                "readingTime": self.reading_time,
                "lastModified": self.last_modified,
            }
        )
        if self.section is not None:
            payload["section"] = self.section
        return payload

    @classmethod
    def from_dict(cls, payload: typ.Mapping[str, typ.Any]) -> ContentItem:
        """Rebuild an item from a previously emitted artifact payload."""
        return cls(
            id=payload.get("id", ""),
            title=str(payload.get("title", "")),
            url=str(payload.get("url", "")),
            content=str(payload.get("content", "")),
            keywords=str(payload.get("keywords", "")),
            title_tag=str(payload.get("titleTag", "")),
            description_tag=str(payload.get("descriptionTag", "")),
            short_desc=str(payload.get("shortDesc", "")),
            word_count=int(payload.get("wordCount", 0) or 0),
            reading_time=int(payload.get("readingTime", 0) or 0),
            last_modified=str(payload.get("lastModified", "")),
            section=payload.get("section"),
            type=payload.get("type"),
        )


@dc.dataclass(slots=True)
class Subject:
    """A tutorial category grouping content items under one base URL."""

    id: str
    name: str
    base_url: str
    content: list[ContentItem]
    keywords: str
    title_tag: str
    description_tag: str
    last_updated: str
    sections: list[str] | None = None

    @property
    def total_pages(self) -> int:
        return len(self.content)

    def to_dict(self) -> dict[str, typ.Any]:
        payload: dict[str, typ.Any] = {
            "id": self.id,
            "name": self.name,
            "base_url": self.base_url,
            "content": [item.to_dict() for item in self.content],
        }
        if self.sections is not None:
            payload["sections"] = list(self.sections)
        payload.update(
            {
                "keywords": self.keywords,
                "titleTag": self.title_tag,
                "descriptionTag": self.description_tag,
                "totalPages": self.total_pages,
                "lastUpdated": self.last_updated,
            }
        )
        return payload

    @classmethod
    def from_dict(cls, payload: typ.Mapping[str, typ.Any]) -> Subject:
        content = [
            ContentItem.from_dict(entry)
            for entry in payload.get("content") or []
            if isinstance(entry, dict)
        ]
        sections = payload.get("sections")
        return cls(
            id=str(payload.get("id", "")),
            name=str(payload.get("name", "")),
            base_url=str(payload.get("base_url", "")),
            content=content,
            keywords=str(payload.get("keywords", "")),
            title_tag=str(payload.get("titleTag", "")),
            description_tag=str(payload.get("descriptionTag", "")),
            last_updated=str(payload.get("lastUpdated", "")),
            sections=list(sections) if isinstance(sections, list) else None,
        )


@dc.dataclass(slots=True)
class HomepageTutorial:
    """A curated link rendered inside a homepage section."""

    title: str
    url: str


@dc.dataclass(slots=True)
class HomepageSection:
    """A named block of curated tutorials on a subject landing page."""

    name: str
    description: str = ""
    tutorials: list[HomepageTutorial] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class HomepageDocument:
    """Curated landing-page layout for a subject."""

    id: str
    title: str
    short_desc: str
    sections: list[HomepageSection]

    @property
    def total_tutorials(self) -> int:
        return sum(len(section.tutorials) for section in self.sections)

    def to_dict(self) -> dict[str, typ.Any]:
        return {
            "id": self.id,
            "type": HOMEPAGE_TYPE,
            "title": self.title,
            "shortDesc": self.short_desc,
            "sections": [
                {
                    "name": section.name,
                    "description": section.description,
                    "tutorials": [
                        {"title": tutorial.title, "url": tutorial.url}
                        for tutorial in section.tutorials
                    ],
                }
                for section in self.sections
            ],
        }

    @classmethod
    def from_dict(cls, payload: typ.Mapping[str, typ.Any]) -> HomepageDocument:
        sections: list[HomepageSection] = []
        for entry in payload.get("sections") or []:
            if not isinstance(entry, dict):
                continue
            tutorials = [
                HomepageTutorial(title=str(link["title"]), url=str(link["url"]))
                for link in entry.get("tutorials") or []
                if isinstance(link, dict) and link.get("title") and link.get("url")
            ]
            sections.append(
                HomepageSection(
                    name=str(entry.get("name") or DEFAULT_SECTION),
                    description=str(entry.get("description", "")),
                    tutorials=tutorials,
                )
            )
        return cls(
            id=str(payload.get("id", "")),
            title=str(payload.get("title", "")),
            short_desc=str(payload.get("shortDesc", "")),
            sections=sections,
        )


__all__ = [
    "ContentItem",
    "HomepageDocument",
    "HomepageSection",
    "HomepageTutorial",
    "Subject",
]
