"""Text helpers: slugs and e-mail shape checks."""

from __future__ import annotations

import re

_NON_WORD_RE = re.compile(r"[^\w\s-]")
_SEPARATOR_RE = re.compile(r"[\s_-]+")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def slugify(text: str) -> str:
    """Lower-case, strip punctuation, hyphenate whitespace and underscores."""
    slug = _NON_WORD_RE.sub("", text.lower().strip())
    slug = _SEPARATOR_RE.sub("-", slug)
    return slug.strip("-")


def is_valid_email(value: str) -> bool:
    return bool(value) and bool(_EMAIL_RE.match(value))
