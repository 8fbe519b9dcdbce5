"""Content model, filename conventions, and row transformation."""

from .models import (
    ContentItem,
    HomepageDocument,
    HomepageSection,
    HomepageTutorial,
    Subject,
)
from .sources import SourceFile, SourceKind, discover_sources, split_collisions
from .text import extract_short_desc, slugify
from .transformer import (
    ContentTransformer,
    EmptySourceError,
    TransformError,
    TransformResult,
)

__all__ = [
    "ContentItem",
    "ContentTransformer",
    "EmptySourceError",
    "HomepageDocument",
    "HomepageSection",
    "HomepageTutorial",
    "SourceFile",
    "SourceKind",
    "Subject",
    "TransformError",
    "TransformResult",
    "discover_sources",
    "extract_short_desc",
    "slugify",
    "split_collisions",
]
