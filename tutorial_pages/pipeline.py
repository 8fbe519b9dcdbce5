"""Build-time content pipeline: spreadsheets in, JSON and SEO artifacts out.

:class:`ContentPipeline` drives one run end to end:

1. validate the source directory (a missing directory aborts the run);
2. reject spreadsheets whose artifact name is already claimed by an earlier
   file, then load the hash ledger and partition the rest into changed and
   unchanged files;
3. parse and transform changed files on a bounded thread pool, each worker
   writing its own artifact and returning an outcome that the main thread
   merges once every worker has finished;
4. fold the cached artifacts of unchanged files into the statistics;
5. persist the ledger, then the manifest, then ``sitemap.xml`` and
   ``robots.txt``.

Per-file failures are logged and counted but never stop the run. The
manifest is written only after every artifact it lists is on disk.

Example
-------
>>> from tutorial_pages.config import load_pipeline_config
>>> from tutorial_pages.pipeline import ContentPipeline
>>> stats = ContentPipeline(load_pipeline_config()).run()  # doctest: +SKIP
>>> stats.errors  # doctest: +SKIP
0
"""

from __future__ import annotations

import collections.abc as cabc
import concurrent.futures as cf
import dataclasses as dc
import datetime as dt
import logging
import typing as typ
from pathlib import Path

from ._constants import HASHES_FILENAME, MANIFEST_FILENAME
from .cache import ArtifactCache
from .changes import ChangeDetector, FileHashLedger, ensure_source_dir
from .content.sources import (
    SourceFile,
    SourceKind,
    discover_sources,
    split_collisions,
)
from .content.transformer import ContentTransformer, TransformError
from .jsonio import write_json
from .manifest import ManifestBuilder, collect_artifacts
from .seo import SeoArtifactGenerator
from .spreadsheet import SpreadsheetError, read_rows

if typ.TYPE_CHECKING:
    from .config import PipelineConfig

logger = logging.getLogger(__name__)

RowReader = cabc.Callable[[Path], list[dict[str, typ.Any]]]


@dc.dataclass(slots=True)
class FileOutcome:
    """Result of processing one changed source file on a worker thread."""

    source: SourceFile
    payload: dict[str, typ.Any] | None = None
    pages: int = 0
    tutorials: int = 0
    size: int = 0
    warnings: list[str] = dc.field(default_factory=list)
    error: str | None = None


@dc.dataclass(slots=True)
class RunStats:
    """Counters reported at the end of a pipeline run."""

    files_found: int = 0
    files_processed: int = 0
    files_skipped: int = 0
    errors: int = 0
    warnings: int = 0
    total_pages: int = 0
    total_tutorials: int = 0
    total_size: int = 0
    failed_files: list[str] = dc.field(default_factory=list)
    written: list[Path] = dc.field(default_factory=list)

    @property
    def average_pages(self) -> int:
        counted = self.files_processed + self.files_skipped
        return round(self.total_pages / counted) if counted else 0

    def summary_lines(self) -> list[str]:
        """Return human-readable statistics lines for console output."""
        size_mb = self.total_size / 1024 / 1024
        return [
            f"Files found: {self.files_found}",
            f"Files processed: {self.files_processed}",
            f"Files unchanged: {self.files_skipped}",
            f"Total pages: {self.total_pages}",
            f"Total homepage tutorials: {self.total_tutorials}",
            f"Total size: {size_mb:.2f} MB",
            f"Warnings: {self.warnings}",
            f"Errors: {self.errors}",
            f"Average pages per file: {self.average_pages}",
        ]


class ContentPipeline:
    """Turn a directory of spreadsheets into the cached JSON content model."""

    def __init__(
        self,
        config: PipelineConfig,
        *,
        reader: RowReader = read_rows,
        now: dt.datetime | None = None,
    ) -> None:
        """Initialize the pipeline.

        Parameters
        ----------
        config : PipelineConfig
            Resolved configuration naming the source, cache, and public
            directories and the worker count.
        reader : Callable[[Path], list[dict]], optional
            Spreadsheet row reader; defaults to :func:`read_rows`.
        now : datetime, optional
            Run timestamp; defaults to the current UTC time.
        """
        self.config = config
        self.reader = reader
        self.now = now or dt.datetime.now(dt.UTC)
        self.transformer = ContentTransformer(
            blog_subjects=config.blog_subjects, generated_at=self.now.isoformat()
        )

    @property
    def ledger_path(self) -> Path:
        return self.config.cache_dir / HASHES_FILENAME

    def run(self) -> RunStats:
        """Execute one pipeline run and return its statistics.

        Raises
        ------
        SourceDirectoryError
            If the source directory is missing or unreadable.
        """
        ensure_source_dir(self.config.source_dir)
        self.config.cache_dir.mkdir(parents=True, exist_ok=True)
        cache = ArtifactCache(self.config.cache_dir)
        try:
            return self._run(cache)
        finally:
            cache.clear()

    def _run(self, cache: ArtifactCache) -> RunStats:
        stats = RunStats()
        ledger = FileHashLedger.load(self.ledger_path)
        sources = discover_sources(
            self.config.source_dir, homepage_suffix=self.config.homepage_suffix
        )
        stats.files_found = len(sources)
        logger.info("Found %d spreadsheet files to process", len(sources))
        sources, collisions = split_collisions(sources)
        for filename, message in collisions.items():
            logger.error("Skipping %s", message)
            stats.errors += 1
            stats.failed_files.append(filename)
        for removed in ledger.prune(source.filename for source in sources):
            logger.info("Dropping hash for removed source %s", removed)

        changes = ChangeDetector(ledger).detect(sources)
        for filename in changes.failed:
            stats.errors += 1
            stats.failed_files.append(filename)

        for outcome in self._process_changed(cache, changes.changed):
            stats.warnings += len(outcome.warnings)
            if outcome.error is not None:
                stats.errors += 1
                stats.failed_files.append(outcome.source.filename)
                ledger.forget(outcome.source.filename)
                continue
            cache.remember(outcome.source.artifact_name, outcome.payload)
            stats.files_processed += 1
            stats.total_pages += outcome.pages
            stats.total_tutorials += outcome.tutorials
            stats.total_size += outcome.size
            stats.written.append(cache.path_for(outcome.source.artifact_name))

        for source in changes.unchanged:
            self._reuse_unchanged(cache, source, stats)

        ledger.save(self.ledger_path)

        catalog = collect_artifacts(cache)
        ManifestBuilder(cache, generated_at=self.now).run(catalog)
        stats.written.append(cache.path_for(MANIFEST_FILENAME))
        stats.written.extend(
            SeoArtifactGenerator(self.config, generated_at=self.now).run(
                catalog.subjects
            )
        )
        return stats

    def _process_changed(
        self, cache: ArtifactCache, sources: list[SourceFile]
    ) -> list[FileOutcome]:
        """Process ``sources`` on a bounded pool and return outcomes in order."""
        if not sources:
            return []
        workers = max(1, min(self.config.workers, len(sources)))
        with cf.ThreadPoolExecutor(max_workers=workers) as executor:
            return list(
                executor.map(
                    lambda source: self._process_file(
                        source, cache.path_for(source.artifact_name)
                    ),
                    sources,
                )
            )

    def _process_file(self, source: SourceFile, output_path: Path) -> FileOutcome:
        """Parse, transform, and write a single source file."""
        logger.info("Processing %s", source.filename)
        outcome = FileOutcome(source=source)
        try:
            rows = self.reader(source.path)
            result = self.transformer.transform(source, rows)
            payload = result.document.to_dict()
            outcome.size = write_json(output_path, payload)
        except (SpreadsheetError, TransformError, OSError) as exc:
            logger.error("Error processing %s: %s", source.filename, exc)
            outcome.error = str(exc)
            return outcome

        outcome.payload = payload
        outcome.warnings = result.warnings
        outcome.pages, outcome.tutorials = _artifact_counts(source, payload)
        if source.kind is SourceKind.HOMEPAGE:
            logger.info(
                "Processed %s: %d tutorials", source.filename, outcome.tutorials
            )
        else:
            logger.info("Processed %s: %d pages", source.filename, outcome.pages)
        return outcome

    def _reuse_unchanged(
        self, cache: ArtifactCache, source: SourceFile, stats: RunStats
    ) -> None:
        """Fold the cached artifact of an unchanged file into ``stats``."""
        payload = cache.load(source.artifact_name)
        stats.files_skipped += 1
        if not isinstance(payload, dict):
            # The ledger says unchanged but the artifact is gone; counts stay
            # partial until the source file changes again.
            logger.warning(
                "Cached artifact %s missing for unchanged %s; omitting its counts",
                source.artifact_name,
                source.filename,
            )
            stats.warnings += 1
            return
        pages, tutorials = _artifact_counts(source, payload)
        stats.total_pages += pages
        stats.total_tutorials += tutorials
        logger.info("Unchanged %s, reusing %s", source.filename, source.artifact_name)


def _artifact_counts(
    source: SourceFile, payload: cabc.Mapping[str, typ.Any]
) -> tuple[int, int]:
    """Return ``(pages, tutorials)`` contributed by an artifact payload."""
    if source.kind is SourceKind.HOMEPAGE:
        tutorials = sum(
            len(section.get("tutorials") or [])
            for section in payload.get("sections") or []
            if isinstance(section, dict)
        )
        return 0, tutorials
    return len(payload.get("content") or []), 0


__all__ = ["ContentPipeline", "FileOutcome", "RunStats"]
