"""Cyclopts CLI entrypoint for the tutorial content pipeline.

The ``tutorials`` console script defined here runs the two build steps that
precede a site deployment: ``tutorials optimize`` turns the spreadsheets in
the source directory into cached JSON artifacts, a manifest, ``sitemap.xml``
and ``robots.txt``; ``tutorials prepare`` copies those artifacts into
``public/api`` and records deployment metadata. Every option can also be set
through an ``INPUT_``-prefixed environment variable.

Examples
--------
Run the pipeline with the default configuration:

>>> from tutorial_pages.cli import main
>>> main()  # doctest: +SKIP

Process a custom source directory with two workers:

>>> from tutorial_pages.cli import app
>>> app(
...     ["optimize", "--source-dir", "sheets", "--workers", "2"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .changes import SourceDirectoryError
from .config import (
    PipelineConfig,
    PipelineConfigError,
    apply_overrides,
    load_pipeline_config,
)
from .deploy import DeploymentError, DeploymentPreparer
from .pipeline import ContentPipeline

DEFAULT_CONFIG = Path("config/tutorials.yaml")

app = App(name="tutorials", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _fail(message: str) -> typ.NoReturn:
    print(f"error: {message}", file=sys.stderr)
    raise SystemExit(1)


def _resolve_config(
    config: Path | None,
    *,
    source_dir: Path | None = None,
    cache_dir: Path | None = None,
    public_dir: Path | None = None,
    workers: int | None = None,
) -> PipelineConfig:
    """Load the config file (or defaults) and apply command-line overrides."""
    if config is None and DEFAULT_CONFIG.exists():
        config = DEFAULT_CONFIG
    try:
        resolved = apply_overrides(
            load_pipeline_config(config),
            source_dir=source_dir,
            cache_dir=cache_dir,
            public_dir=public_dir,
            workers=workers,
        )
    except (FileNotFoundError, TypeError, PipelineConfigError) as exc:
        _fail(str(exc))
    _configure_logging(resolved.log_level)
    return resolved


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command(help="Convert spreadsheets into cached JSON, manifest, and SEO files.")
def optimize(
    *,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to pipeline config", env_var="INPUT_CONFIG")
    ] = None,
    source_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the spreadsheet folder", env_var="INPUT_SOURCE_DIR"),
    ] = None,
    cache_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the artifact cache folder", env_var="INPUT_CACHE_DIR"),
    ] = None,
    public_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the public output folder", env_var="INPUT_PUBLIC_DIR"),
    ] = None,
    workers: typ.Annotated[
        int | None,
        Parameter(help="Worker threads (capped at 8)", env_var="INPUT_WORKERS"),
    ] = None,
) -> None:
    """Run the content pipeline once.

    Parameters
    ----------
    config : Path or None, optional
        Path to the ``tutorials.yaml`` configuration file. When omitted,
        ``config/tutorials.yaml`` is used if present, otherwise defaults.
    source_dir : Path or None, optional
        Directory holding the ``.xlsx``/``.xls`` source files.
    cache_dir : Path or None, optional
        Directory receiving the JSON artifacts, manifest, and hash ledger.
    public_dir : Path or None, optional
        Directory receiving ``sitemap.xml`` and ``robots.txt``.
    workers : int or None, optional
        Size of the worker pool used for changed files.

    Returns
    -------
    None
        Writes artifacts and prints their paths plus run statistics.

    Raises
    ------
    SystemExit
        With status 1 when the configuration is invalid or the source
        directory is missing. Per-file errors only show up in the statistics.
    """
    pipeline_config = _resolve_config(
        config,
        source_dir=source_dir,
        cache_dir=cache_dir,
        public_dir=public_dir,
        workers=workers,
    )
    try:
        stats = ContentPipeline(pipeline_config).run()
    except SourceDirectoryError as exc:
        _fail(str(exc))
    for path in stats.written:
        print(f"wrote {_format_path(path)}")
    for line in stats.summary_lines():
        print(line)
    if stats.failed_files:
        print(f"Failed files: {', '.join(stats.failed_files)}")


@app.command(help="Copy cached artifacts into public/api for deployment.")
def prepare(
    *,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to pipeline config", env_var="INPUT_CONFIG")
    ] = None,
    cache_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the artifact cache folder", env_var="INPUT_CACHE_DIR"),
    ] = None,
    public_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the public output folder", env_var="INPUT_PUBLIC_DIR"),
    ] = None,
) -> None:
    """Prepare the public directory after ``tutorials optimize`` has run."""
    pipeline_config = _resolve_config(
        config, cache_dir=cache_dir, public_dir=public_dir
    )
    try:
        report = DeploymentPreparer(pipeline_config).run()
    except DeploymentError as exc:
        _fail(str(exc))
    for path in report.copied:
        print(f"wrote {_format_path(path)}")
    if report.info_path:
        print(f"wrote {_format_path(report.info_path)}")
    print(f"deployment id: {report.deployment_id}")


def main() -> None:
    """Invoke the Cyclopts application that powers the `tutorials` console command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
