"""Build-time content pipeline for the tutorial and blog website.

This package exposes the CLI entry points used by ``uv run tutorials`` and
the npm build scripts to turn spreadsheet content into cached JSON
artifacts, a manifest, SEO files, and static API payloads.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from tutorial_pages import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
