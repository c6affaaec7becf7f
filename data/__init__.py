"""Card content loading for the Wingsim engine."""

from .loader import (
    CardLoader,
    CardRegistry,
    ContentLoadError,
    get_content_stats,
    load_content,
    load_default_content,
    resource_path,
)

__all__ = [
    "CardLoader",
    "CardRegistry",
    "ContentLoadError",
    "get_content_stats",
    "load_content",
    "load_default_content",
    "resource_path",
]
