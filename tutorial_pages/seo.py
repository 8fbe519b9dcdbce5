"""Sitemap and robots.txt generation.

This module turns the subjects decoded from the cache directory into the
static ``public/sitemap.xml`` and ``public/robots.txt`` artefacts. The
sitemap lists the site root plus one entry per content item; blog subjects
are published under ``/blogs/<url>``, every other subject under
``/<subject>/<url>``. Homepage documents are curated layouts rather than
leaf pages and are not listed.

Typical usage mirrors the build pipeline:

>>> from tutorial_pages.config import load_pipeline_config
>>> from tutorial_pages.seo import SeoArtifactGenerator
>>> generator = SeoArtifactGenerator(load_pipeline_config())  # doctest: +SKIP
>>> generator.run(catalog.subjects)  # doctest: +SKIP
[PosixPath('public/sitemap.xml'), PosixPath('public/robots.txt')]

Both files are rendered from Jinja templates under
``tutorial_pages/templates``; the sitemap template has XML autoescaping
enabled.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import datetime as dt
import logging
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ._constants import ROBOTS_FILENAME, SITEMAP_FILENAME

if typ.TYPE_CHECKING:
    from .config import PipelineConfig
    from .content.models import Subject

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class SitemapEntry:
    """A single ``<url>`` element in the sitemap."""

    loc: str
    lastmod: str
    changefreq: str
    priority: str


class SeoArtifactGenerator:
    """Render the sitemap and robots file for the published content."""

    def __init__(
        self,
        config: PipelineConfig,
        *,
        templates_dir: Path | None = None,
        generated_at: dt.datetime | None = None,
    ) -> None:
        """Initialize the generator and its Jinja environment.

        Parameters
        ----------
        config : PipelineConfig
            Resolved pipeline configuration; supplies the site URL, the public
            output directory, blog subjects, and the ``seo`` settings.
        templates_dir : Path, optional
            Directory containing the Jinja templates. Defaults to the
            ``tutorial_pages/templates`` directory when ``None``.
        generated_at : datetime, optional
            Timestamp used for the site root entry; defaults to now (UTC).
        """
        self.config = config
        self.generated_at = generated_at or dt.datetime.now(dt.UTC)
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["xml.jinja"], default_for_string=False),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def build_entries(self, subjects: cabc.Iterable[Subject]) -> list[SitemapEntry]:
        """Return the site root entry followed by one entry per content item."""
        seo = self.config.seo
        base_url = self.config.site_url.rstrip("/")
        entries = [
            SitemapEntry(
                loc=base_url,
                lastmod=self.generated_at.isoformat(),
                changefreq=seo.home_changefreq,
                priority=seo.home_priority,
            )
        ]
        for subject in subjects:
            prefix = "blogs" if self.config.is_blog(subject.id) else subject.id
            entries.extend(
                SitemapEntry(
                    loc=f"{base_url}/{prefix}/{item.url}",
                    lastmod=item.last_modified or self.generated_at.isoformat(),
                    changefreq=seo.page_changefreq,
                    priority=seo.page_priority,
                )
                for item in subject.content
            )
        return entries

    def render_sitemap(self, subjects: cabc.Iterable[Subject]) -> str:
        template = self.env.get_template("sitemap.xml.jinja")
        return template.render(entries=self.build_entries(subjects))

    def render_robots(self) -> str:
        template = self.env.get_template("robots.txt.jinja")
        return template.render(sitemap_url=self.config.sitemap_url, seo=self.config.seo)

    def run(self, subjects: cabc.Iterable[Subject]) -> list[Path]:
        """Write ``sitemap.xml`` and ``robots.txt`` and return their paths."""
        public_dir = self.config.public_dir
        public_dir.mkdir(parents=True, exist_ok=True)
        subject_list = list(subjects)

        sitemap_path = public_dir / SITEMAP_FILENAME
        sitemap_path.write_text(self.render_sitemap(subject_list), encoding="utf-8")
        logger.info(
            "Generated sitemap with %d URLs",
            1 + sum(subject.total_pages for subject in subject_list),
        )

        robots_path = public_dir / ROBOTS_FILENAME
        robots_path.write_text(self.render_robots(), encoding="utf-8")
        return [sitemap_path, robots_path]


__all__ = ["SeoArtifactGenerator", "SitemapEntry"]
