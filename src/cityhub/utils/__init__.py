from .slugify import (
    slugify, ensure_unique_slug, generate_unique_slug,
    is_valid_slug, extract_slug_from_url
)

__all__ = [
    "slugify", "ensure_unique_slug", "generate_unique_slug",
    "is_valid_slug", "extract_slug_from_url"
]
