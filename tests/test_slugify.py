"""Slug utility tests"""

import pytest

from cityhub.utils.slugify import (
    ensure_unique_slug, extract_slug_from_url, generate_unique_slug,
    is_valid_slug, slugify
)


class TestSlugify:

    @pytest.mark.parametrize("text, expected", [
        ("Hello World", "hello-world"),
        ("FaithTech Adelaide!", "faithtech-adelaide"),
        ("Event: Web Dev Meetup 2024", "event-web-dev-meetup-2024"),
        ("Event #1 - Testing & QA", "event-1-testing-qa"),
        ("  padded  ", "padded"),
        ("Café Crème", "cafe-creme"),
        ("Don't Stop", "dont-stop"),
        ("a---b", "a-b"),
        ("!!!", ""),
    ])
    def test_basic(self, text, expected):
        assert slugify(text) == expected

    def test_keeps_case_when_asked(self):
        assert slugify("Hello World", lowercase=False) == "Hello-World"

    def test_custom_separator(self):
        assert slugify("Hello Big World", separator="_") == "hello_big_world"

    def test_truncates_at_separator_near_limit(self):
        slug = slugify("word " * 30, max_length=22)
        assert slug == "word-word-word-word"

    def test_hard_cut_when_no_separator_near_limit(self):
        assert slugify("a" * 50, max_length=10) == "a" * 10


class TestUniqueness:

    def test_base_slug_when_free(self):
        assert ensure_unique_slug("hello-world", ["other"]) == "hello-world"

    def test_next_free_number(self):
        existing = ["hello-world", "hello-world-2"]
        assert ensure_unique_slug("hello-world", existing) == "hello-world-3"

    @pytest.mark.asyncio
    async def test_generate_unique_slug(self):
        taken = {"meetup", "meetup-2"}

        async def exists(slug):
            return slug in taken

        assert await generate_unique_slug("meetup", exists) == "meetup-3"
        assert await generate_unique_slug("hackathon", exists) == "hackathon"

    @pytest.mark.asyncio
    async def test_generate_falls_back_to_timestamp(self):
        async def always_taken(slug):
            return True

        slug = await generate_unique_slug("meetup", always_taken)

        suffix = slug.rsplit("-", 1)[1]
        assert slug.startswith("meetup-")
        assert suffix.isdigit() and len(suffix) >= 13


class TestValidation:

    @pytest.mark.parametrize("slug", ["hello-world", "event-2024", "a"])
    def test_valid(self, slug):
        assert is_valid_slug(slug)

    @pytest.mark.parametrize("slug", ["hello world", "hello-world!", "-hello", "hello--world", "Hello", "", "hello\n"])
    def test_invalid(self, slug):
        assert not is_valid_slug(slug)

    @pytest.mark.parametrize("url, expected", [
        ("/adelaide/events/web-dev-meetup", "web-dev-meetup"),
        ("https://example.org/blog/hello-world/", "hello-world"),
        ("/", None),
    ])
    def test_extract_slug_from_url(self, url, expected):
        assert extract_slug_from_url(url) == expected
