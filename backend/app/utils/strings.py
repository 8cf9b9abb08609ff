"""
String helpers shared by schemas, services and log lines.
"""

import re
from typing import Any

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def sanitize_text(value: str) -> str:
    """Trim, collapse runs of whitespace and drop anything that isn't a word character."""
    collapsed = re.sub(r"\s+", " ", value.strip())
    return re.sub(r"[^\w\s]", "", collapsed)


def truncate(value: str, length: int, suffix: str = "...") -> str:
    return value[:length] + suffix if len(value) > length else value


def to_slug(value: str) -> str:
    """
    Convert a string into a URL-friendly slug.

    >>> to_slug("Hello World! Slug Test")
    'hello-world-slug-test'
    """
    slug = value.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value))


def mask_string(value: str, visible_start: int = 3, visible_end: int = 2) -> str:
    """
    Mask the middle of a string, keeping the first and last few characters.

    Strings too short to hide anything are returned unchanged.
    """
    if len(value) <= visible_start + visible_end:
        return value

    start = value[:visible_start]
    end = value[len(value) - visible_end:] if visible_end else ""
    masked = "*" * (len(value) - visible_start - visible_end)
    return f"{start}{masked}{end}"


def similarity_score(first: str, second: str) -> float:
    """
    Similarity between two strings in [0, 1] based on Levenshtein distance.
    """
    len_first, len_second = len(first), len(second)
    max_length = max(len_first, len_second)
    if max_length == 0:
        return 1.0

    previous = list(range(len_second + 1))
    for i in range(1, len_first + 1):
        current = [i] + [0] * len_second
        for j in range(1, len_second + 1):
            if first[i - 1] == second[j - 1]:
                current[j] = previous[j - 1]
            else:
                current[j] = min(previous[j - 1], current[j - 1], previous[j]) + 1
        previous = current

    return 1 - previous[len_second] / max_length


def capitalize(value: str) -> str:
    return value[:1].upper() + value[1:].lower()


def to_title_case(value: str) -> str:
    return " ".join(word[:1].upper() + word[1:] for word in value.lower().split(" "))


def sanitize_input(data: Any) -> Any:
    """
    Recursively trim strings inside dicts and lists.

    ``None`` values are dropped from dicts so optional fields fall back to their defaults.
    """
    if isinstance(data, list):
        return [sanitize_input(item) for item in data]

    if isinstance(data, dict):
        return {
            key: sanitize_input(value)
            for key, value in data.items()
            if value is not None
        }

    if isinstance(data, str):
        return data.strip()

    return data
