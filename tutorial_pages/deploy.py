"""Prepare the static API payloads for deployment.

This module powers the ``tutorials prepare`` sub-command, which runs after
``tutorials optimize`` and:

* Verifies the cache directory exists and holds processed data artifacts.
* Copies ``manifest.json`` to ``public/api/manifest.json`` and every data
  artifact to ``public/api/data/``.
* Writes ``public/deployment-info.json`` describing the build.
* Validates that every file the front end needs is present.
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import logging
import platform
import secrets
import shutil
import typing as typ

from ._constants import (
    DEPLOYMENT_INFO_FILENAME,
    MANIFEST_FILENAME,
    ROBOTS_FILENAME,
    SITEMAP_FILENAME,
)
from .cache import ArtifactCache
from .jsonio import write_json

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .config import PipelineConfig

logger = logging.getLogger(__name__)


class DeploymentError(RuntimeError):
    """Raised when the cache or public directory is not ready for deployment."""


@dc.dataclass(slots=True)
class DeploymentReport:
    """Summary of a deployment preparation run."""

    copied: list[Path] = dc.field(default_factory=list)
    info_path: Path | None = None
    deployment_id: str = ""


def generate_deployment_id(now: dt.datetime | None = None) -> str:
    """Return an identifier such as ``deploy_1767225600000_k3j9x0a1b``."""
    moment = now or dt.datetime.now(dt.UTC)
    return f"deploy_{int(moment.timestamp() * 1000)}_{secrets.token_hex(5)[:9]}"


class DeploymentPreparer:
    """Copy cached artifacts into ``public/api`` and record build metadata."""

    def __init__(
        self, config: PipelineConfig, *, now: dt.datetime | None = None
    ) -> None:
        self.config = config
        self.now = now or dt.datetime.now(dt.UTC)
        self.cache = ArtifactCache(config.cache_dir)
        self.api_dir = config.public_dir / "api"
        self.data_dir = self.api_dir / "data"

    def run(self) -> DeploymentReport:
        """Run every preparation step and return what was written.

        Raises
        ------
        DeploymentError
            If the cache is missing or empty, or a required file is absent
            after copying.
        """
        data_files = self.verify_cache()
        report = DeploymentReport()
        report.copied = self.copy_artifacts(data_files)
        report.deployment_id = generate_deployment_id(self.now)
        report.info_path = self.write_deployment_info(report.deployment_id)
        self.validate()
        return report

    def verify_cache(self) -> list[str]:
        """Return the data artifact names, failing when there are none."""
        if not self.config.cache_dir.is_dir():
            msg = (
                f"{self.config.cache_dir} directory not found. "
                "Run 'tutorials optimize' first."
            )
            raise DeploymentError(msg)
        data_files = self.cache.artifact_names()
        if not data_files:
            msg = "No processed data found in cache. Run 'tutorials optimize' first."
            raise DeploymentError(msg)
        logger.info("Found %d processed data files", len(data_files))
        return data_files

    def copy_artifacts(self, data_files: list[str]) -> list[Path]:
        """Copy the manifest and data artifacts into the public API tree."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        copied: list[Path] = []
        manifest_src = self.cache.path_for(MANIFEST_FILENAME)
        if manifest_src.is_file():
            copied.append(
                shutil.copyfile(manifest_src, self.api_dir / MANIFEST_FILENAME)
            )
        else:
            logger.warning("No %s in cache; skipping", MANIFEST_FILENAME)
        for name in data_files:
            copied.append(shutil.copyfile(self.cache.path_for(name), self.data_dir / name))
        logger.info("Copied %d data files to API routes", len(data_files))
        return copied

    def write_deployment_info(self, deployment_id: str) -> Path:
        """Write ``deployment-info.json`` into the public directory."""
        cache_files = len(
            [entry for entry in self.config.cache_dir.glob("*.json") if entry.is_file()]
        )
        info = {
            "buildTime": self.now.isoformat(),
            "version": self.config.deploy.version,
            "pythonVersion": platform.python_version(),
            "cacheFiles": cache_files,
            "deploymentId": deployment_id,
            "environment": self.config.deploy.environment,
        }
        path = self.config.public_dir / DEPLOYMENT_INFO_FILENAME
        write_json(path, info)
        return path

    def validate(self) -> None:
        """Ensure every file the front end depends on is present."""
        public_dir = self.config.public_dir
        required = [
            public_dir / SITEMAP_FILENAME,
            public_dir / ROBOTS_FILENAME,
            self.api_dir / MANIFEST_FILENAME,
            public_dir / DEPLOYMENT_INFO_FILENAME,
        ]
        for path in required:
            if not path.is_file():
                msg = f"Required file missing: {path}"
                raise DeploymentError(msg)
        if not self.data_dir.is_dir() or not any(self.data_dir.iterdir()):
            msg = f"No data files found in {self.data_dir}"
            raise DeploymentError(msg)


__all__ = [
    "DeploymentError",
    "DeploymentPreparer",
    "DeploymentReport",
    "generate_deployment_id",
]
