"""Typed dataclasses describing the content pipeline configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path


class PipelineConfigError(ValueError):
    """Raised when the pipeline configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class SeoConfig:
    """Sitemap and robots.txt settings."""

    home_changefreq: str = "daily"
    home_priority: str = "1.0"
    page_changefreq: str = "weekly"
    page_priority: str = "0.8"
    crawl_delay: int = 1
    disallow: list[str] = dc.field(
        default_factory=lambda: ["/admin/", "/api/", "/.next/"]
    )


@dc.dataclass(slots=True)
class DeployConfig:
    """Metadata recorded when preparing the static API payloads."""

    version: str = "1.0.0"
    environment: str = "production"


@dc.dataclass(slots=True)
class PipelineConfig:
    """A fully resolved pipeline definition sourced from YAML config."""

    source_dir: Path = Path("data/excel")
    cache_dir: Path = Path(".next-cache")
    public_dir: Path = Path("public")
    site_url: str = "https://www.droidbiz.in"
    workers: int = 1
    homepage_suffix: str = "_home"
    blog_subjects: list[str] = dc.field(default_factory=lambda: ["blogs"])
    log_level: str = "INFO"
    seo: SeoConfig = dc.field(default_factory=SeoConfig)
    deploy: DeployConfig = dc.field(default_factory=DeployConfig)

    @property
    def sitemap_url(self) -> str:
        """Return the absolute URL of the generated sitemap."""
        return f"{self.site_url.rstrip('/')}/sitemap.xml"

    def is_blog(self, subject_id: str) -> bool:
        """Return whether ``subject_id`` is rendered under ``/blogs``."""
        return subject_id in self.blog_subjects


__all__ = [
    "DeployConfig",
    "PipelineConfig",
    "PipelineConfigError",
    "SeoConfig",
]
