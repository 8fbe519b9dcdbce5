"""Load pipeline configuration YAML into typed dataclasses."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from tutorial_pages.content.text import slugify

from .helpers import (
    _build_deploy_config,
    _build_seo_config,
    _coerce_workers,
    _default_workers,
    _string_list,
)
from .models import PipelineConfig, PipelineConfigError


def load_pipeline_config(path: Path | None = None) -> PipelineConfig:
    """Load the YAML configuration describing the content pipeline.

    Parameters
    ----------
    path : Path or None, optional
        Filesystem path to the YAML configuration file (for example,
        ``config/tutorials.yaml``). When ``None`` the built-in defaults are
        returned.

    Returns
    -------
    PipelineConfig
        Parsed configuration with defaults applied for every absent key.

    Raises
    ------
    FileNotFoundError
        If ``path`` is given but does not exist.
    TypeError
        If the top-level YAML structure is not a mapping.
    PipelineConfigError
        If a value is present but invalid (for example, a non-numeric
        ``workers`` entry).

    Examples
    --------
    >>> from tutorial_pages.config import load_pipeline_config
    >>> config = load_pipeline_config()
    >>> str(config.cache_dir)
    '.next-cache'
    """
    if path is None:
        return PipelineConfig(workers=_default_workers())
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    base = PipelineConfig()

    site_url = str(raw.get("site_url") or base.site_url).rstrip("/")
    if not site_url.startswith(("http://", "https://")):
        msg = f"'site_url' must be an absolute http(s) URL, got {site_url!r}."
        raise PipelineConfigError(msg)

    homepage_suffix = str(raw.get("homepage_suffix") or base.homepage_suffix)
    blog_subjects = _string_list(raw.get("blog_subjects"), key="blog_subjects")
    if blog_subjects is not None:
        # Compared against filename slugs, so normalize the same way.
        blog_subjects = [slug for slug in map(slugify, blog_subjects) if slug]

    return PipelineConfig(
        source_dir=Path(raw.get("source_dir", base.source_dir)),
        cache_dir=Path(raw.get("cache_dir", base.cache_dir)),
        public_dir=Path(raw.get("public_dir", base.public_dir)),
        site_url=site_url,
        workers=_coerce_workers(raw.get("workers")),
        homepage_suffix=homepage_suffix.lower(),
        blog_subjects=base.blog_subjects if blog_subjects is None else blog_subjects,
        log_level=str(raw.get("log_level", base.log_level)).upper(),
        seo=_build_seo_config(raw.get("seo")),
        deploy=_build_deploy_config(raw.get("deploy")),
    )


def apply_overrides(
    config: PipelineConfig,
    *,
    source_dir: Path | None = None,
    cache_dir: Path | None = None,
    public_dir: Path | None = None,
    workers: int | None = None,
) -> PipelineConfig:
    """Return ``config`` with the given non-``None`` values substituted.

    ``workers`` goes through the same validation and clamping as the YAML
    value.

    Raises
    ------
    PipelineConfigError
        If ``workers`` is not a positive integer.

    Examples
    --------
    >>> from tutorial_pages.config import PipelineConfig, apply_overrides
    >>> apply_overrides(PipelineConfig(), workers=64).workers
    8
    """
    overrides: dict[str, typ.Any] = {}
    if source_dir is not None:
        overrides["source_dir"] = source_dir
    if cache_dir is not None:
        overrides["cache_dir"] = cache_dir
    if public_dir is not None:
        overrides["public_dir"] = public_dir
    if workers is not None:
        overrides["workers"] = _coerce_workers(workers)
    return dc.replace(config, **overrides)


__all__ = ["apply_overrides", "load_pipeline_config"]
