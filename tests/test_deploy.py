from __future__ import annotations

import datetime as dt
import re
import typing as typ

import pytest

from tutorial_pages.deploy import (
    DeploymentError,
    DeploymentPreparer,
    generate_deployment_id,
)
from tutorial_pages.jsonio import read_json
from tutorial_pages.pipeline import ContentPipeline

if typ.TYPE_CHECKING:
    from tests.conftest import SheetWriter
    from tutorial_pages.config import PipelineConfig

NOW = dt.datetime(2026, 10, 18, tzinfo=dt.UTC)


@pytest.fixture
def optimized(pipeline_config: PipelineConfig, write_sheet: SheetWriter) -> PipelineConfig:
    """Run the pipeline once so the cache holds real artifacts."""
    write_sheet("kotlin.xlsx", [{"title": "Intro", "url": "intro", "content": "Hi"}])
    write_sheet(
        "kotlin_home.xlsx",
        [
            {
                "title": "Home",
                "sectionName": "Basics",
                "tutorialTitles": "Intro",
                "tutorialUrls": "intro",
            }
        ],
    )
    ContentPipeline(pipeline_config, now=NOW).run()
    return pipeline_config


def test_prepare_copies_artifacts_and_writes_info(optimized: PipelineConfig) -> None:
    report = DeploymentPreparer(optimized, now=NOW).run()

    api_dir = optimized.public_dir / "api"
    assert (api_dir / "manifest.json").is_file()
    assert sorted(path.name for path in (api_dir / "data").iterdir()) == [
        "kotlin.json",
        "kotlin_home.json",
    ]
    assert not (api_dir / "data" / "file-hashes.json").exists()
    assert len(report.copied) == 3

    info = read_json(optimized.public_dir / "deployment-info.json")
    assert info["buildTime"] == NOW.isoformat()
    assert info["version"] == "1.0.0"
    assert info["environment"] == "production"
    assert info["deploymentId"] == report.deployment_id
    assert info["cacheFiles"] == 4


def test_prepare_requires_cache_dir(pipeline_config: PipelineConfig) -> None:
    with pytest.raises(DeploymentError, match="Run 'tutorials optimize' first"):
        DeploymentPreparer(pipeline_config).run()


def test_prepare_requires_data_artifacts(pipeline_config: PipelineConfig) -> None:
    pipeline_config.cache_dir.mkdir()
    (pipeline_config.cache_dir / "manifest.json").write_text("{}", encoding="utf-8")
    with pytest.raises(DeploymentError, match="No processed data found"):
        DeploymentPreparer(pipeline_config).run()


def test_prepare_requires_seo_files(optimized: PipelineConfig) -> None:
    (optimized.public_dir / "robots.txt").unlink()
    with pytest.raises(DeploymentError, match="robots.txt"):
        DeploymentPreparer(optimized).run()


def test_deployment_id_format() -> None:
    deployment_id = generate_deployment_id(NOW)
    assert re.fullmatch(r"deploy_\d+_[0-9a-f]{9}", deployment_id), deployment_id
    assert deployment_id.startswith(f"deploy_{int(NOW.timestamp() * 1000)}_")
