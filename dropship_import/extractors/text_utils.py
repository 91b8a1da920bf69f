# dropship_import/extractors/text_utils.py

"""Text helpers shared by every extractor."""

import html
import re
from typing import Any

_WHITESPACE_RE = re.compile(r"\s+")
_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")
# Query strings and fragments don't change which image is served
_STRIP_PARAMS_RE = re.compile(r"[?#].*$")
_NON_WORD_RE = re.compile(r"[^a-z0-9\s]")


def clean_text(text: str | None) -> str:
    """Decode HTML entities and collapse runs of whitespace."""
    if not text:
        return ""
    decoded = html.unescape(str(text)).replace(" ", " ")
    return _WHITESPACE_RE.sub(" ", decoded).strip()


def parse_float(value: Any) -> float | None:
    """Coerce ``19.99``, ``"$1,299.00"`` or ``"US $4"`` to a float.

    Returns ``None`` when no number can be read. Booleans are rejected.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    cleaned = str(value).replace(",", "")
    match = _NUMBER_RE.search(cleaned)
    if not match:
        return None
    return float(match.group(0))


def parse_int(value: Any) -> int | None:
    """Coerce a count such as ``"1,204"`` or ``"87 reviews"`` to an int."""
    number = parse_float(value)
    if number is None:
        return None
    return int(number)


def normalise_image_url(url: str) -> str:
    """Return the comparison key for an image URL (query string dropped)."""
    return _STRIP_PARAMS_RE.sub("", url.strip())


def dedupe_images(urls: list[str], limit: int) -> list[str]:
    """Drop duplicate image URLs, keeping first-seen order and spelling."""
    seen: set[str] = set()
    kept: list[str] = []
    for url in urls:
        if not url:
            continue
        key = normalise_image_url(url)
        if key in seen:
            continue
        seen.add(key)
        kept.append(url)
        if len(kept) >= limit:
            break
    return kept


def unique_lower(words: list[str]) -> list[str]:
    """Lowercase and de-duplicate keywords, preserving order."""
    seen: set[str] = set()
    kept: list[str] = []
    for word in words:
        lowered = word.strip().lower()
        if lowered and lowered not in seen:
            seen.add(lowered)
            kept.append(lowered)
    return kept


def tags_from_title(title: str, limit: int) -> list[str]:
    """Derive keyword tags from a product title.

    Lowercases, strips non-alphanumeric characters and keeps words
    longer than two characters.
    """
    words = _NON_WORD_RE.sub("", title.lower()).split()
    return unique_lower([w for w in words if len(w) > 2])[:limit]
