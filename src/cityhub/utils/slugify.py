"""
Slug Utilities

Converts titles into URL-safe slugs for events, projects, posts and cities.

Examples:
    slugify("Hello World")                 -> "hello-world"
    slugify("FaithTech Adelaide!")         -> "faithtech-adelaide"
    slugify("Event: Web Dev Meetup 2024")  -> "event-web-dev-meetup-2024"
"""

import re
import time
import unicodedata
from typing import Awaitable, Callable, Iterable, Optional

MAX_UNIQUE_ATTEMPTS = 1000

_VALID_SLUG = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def slugify(
    text: str,
    lowercase: bool = True,
    separator: str = "-",
    max_length: int = 100
) -> str:
    """
    Convert a string to a URL-safe slug.

    Accents are stripped, apostrophes dropped and every other run of
    non-alphanumeric characters collapsed into one separator. Slugs longer
    than max_length are cut, preferably at a separator in the last fifth.
    """
    slug = text.strip()

    if lowercase:
        slug = slug.lower()

    slug = unicodedata.normalize("NFD", slug)
    slug = "".join(ch for ch in slug if not unicodedata.combining(ch))

    # don't -> dont, it's -> its
    slug = slug.replace("'", "")

    sep = re.escape(separator)
    slug = re.sub(r"[^a-zA-Z0-9-]+", separator, slug)
    slug = re.sub(f"(?:{sep}){{2,}}", separator, slug)
    slug = re.sub(f"^(?:{sep})+|(?:{sep})+$", "", slug)

    if len(slug) > max_length:
        slug = slug[:max_length]
        last_separator = slug.rfind(separator)
        if last_separator > max_length * 0.8:
            slug = slug[:last_separator]

    return slug


def ensure_unique_slug(base_slug: str, existing_slugs: Iterable[str]) -> str:
    """Return base_slug, or base_slug-2, base_slug-3, ... if already taken"""
    existing = set(existing_slugs)
    if base_slug not in existing:
        return base_slug

    counter = 2
    candidate = f"{base_slug}-{counter}"
    while candidate in existing:
        counter += 1
        candidate = f"{base_slug}-{counter}"

    return candidate


async def generate_unique_slug(
    base_slug: str,
    check_existence: Callable[[str], Awaitable[bool]]
) -> str:
    """
    Find a free slug by asking the store whether candidates exist.

    Falls back to a millisecond timestamp suffix after MAX_UNIQUE_ATTEMPTS
    numbered candidates.
    """
    if not await check_existence(base_slug):
        return base_slug

    counter = 2
    candidate = f"{base_slug}-{counter}"

    while await check_existence(candidate):
        counter += 1
        candidate = f"{base_slug}-{counter}"

        if counter > MAX_UNIQUE_ATTEMPTS:
            candidate = f"{base_slug}-{int(time.time() * 1000)}"
            break

    return candidate


def is_valid_slug(slug: str) -> bool:
    """Lowercase alphanumerics separated by single hyphens"""
    return bool(_VALID_SLUG.fullmatch(slug))


def extract_slug_from_url(url: str) -> Optional[str]:
    """Last path segment of a URL or path, e.g. /adelaide/events/meetup -> meetup"""
    parts = [part for part in url.split("/") if part]
    return parts[-1] if parts else None


__all__ = [
    "slugify", "ensure_unique_slug", "generate_unique_slug",
    "is_valid_slug", "extract_slug_from_url"
]
