"""Utility helpers shared by the pipeline configuration loader."""

from __future__ import annotations

import os
import typing as typ

from tutorial_pages._constants import MAX_WORKERS

from .models import DeployConfig, PipelineConfigError, SeoConfig


def _default_workers() -> int:
    """Return a worker count sized to the available CPUs, capped."""
    return max(1, min(os.cpu_count() or 1, MAX_WORKERS))


def _coerce_workers(value: object | None) -> int:
    """Validate a configured worker count and clamp it to ``MAX_WORKERS``."""
    if value is None:
        return _default_workers()
    if isinstance(value, bool):
        msg = "'workers' must be an integer."
        raise PipelineConfigError(msg)
    try:
        workers = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        msg = f"'workers' must be an integer, got {value!r}."
        raise PipelineConfigError(msg) from exc
    if workers < 1:
        msg = "'workers' must be at least 1."
        raise PipelineConfigError(msg)
    return min(workers, MAX_WORKERS)


def _string_list(value: object | None, *, key: str) -> list[str] | None:
    """Normalize a YAML string or sequence into a list of non-empty strings."""
    match value:
        case None:
            return None
        case str() as text:
            return [segment for segment in text.split() if segment]
        case list() as items:
            return [str(item).strip() for item in items if str(item).strip()]
        case _:
            msg = f"'{key}' must be a string or a list of strings."
            raise PipelineConfigError(msg)


def _build_seo_config(payload: typ.Mapping[str, typ.Any] | None) -> SeoConfig:
    """Build a SeoConfig instance from the provided mapping payload."""
    base = SeoConfig()
    if not payload:
        return base
    if not isinstance(payload, dict):
        msg = "'seo' configuration must be a mapping."
        raise PipelineConfigError(msg)
    try:
        crawl_delay = int(payload.get("crawl_delay", base.crawl_delay))
    except (TypeError, ValueError) as exc:
        msg = "'seo.crawl_delay' must be numeric."
        raise PipelineConfigError(msg) from exc
    disallow = _string_list(payload.get("disallow"), key="seo.disallow")
    return SeoConfig(
        home_changefreq=str(payload.get("home_changefreq", base.home_changefreq)),
        home_priority=str(payload.get("home_priority", base.home_priority)),
        page_changefreq=str(payload.get("page_changefreq", base.page_changefreq)),
        page_priority=str(payload.get("page_priority", base.page_priority)),
        crawl_delay=crawl_delay,
        disallow=base.disallow if disallow is None else disallow,
    )


def _build_deploy_config(payload: typ.Mapping[str, typ.Any] | None) -> DeployConfig:
    """Build a DeployConfig instance from the provided mapping payload."""
    base = DeployConfig()
    if not payload:
        return base
    if not isinstance(payload, dict):
        msg = "'deploy' configuration must be a mapping."
        raise PipelineConfigError(msg)
    return DeployConfig(
        version=str(payload.get("version", base.version)),
        environment=str(payload.get("environment", base.environment)),
    )


__all__ = [
    "_build_deploy_config",
    "_build_seo_config",
    "_coerce_workers",
    "_default_workers",
    "_string_list",
]
