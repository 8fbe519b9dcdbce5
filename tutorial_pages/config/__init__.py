"""Load and validate the content pipeline configuration YAML.

This subpackage parses the project's ``tutorials.yaml`` file, applies
defaults for every absent key, and produces typed dataclasses
(:class:`PipelineConfig`, :class:`SeoConfig`, :class:`DeployConfig`) that the
pipeline, SEO generator, and deployment step consume. The primary entry point
is :func:`load_pipeline_config`.

Examples
--------
>>> from pathlib import Path
>>> from tutorial_pages.config import load_pipeline_config
>>> config = load_pipeline_config(Path("config/tutorials.yaml"))  # doctest: +SKIP
>>> config.sitemap_url  # doctest: +SKIP
'https://www.droidbiz.in/sitemap.xml'
"""

from .loader import apply_overrides, load_pipeline_config
from .models import DeployConfig, PipelineConfig, PipelineConfigError, SeoConfig

__all__ = [
    "DeployConfig",
    "PipelineConfig",
    "PipelineConfigError",
    "SeoConfig",
    "apply_overrides",
    "load_pipeline_config",
]
