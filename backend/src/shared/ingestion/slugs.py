"""
Slug Builder

Public slugs are the sanitized title plus the base-36 row id:

    "My Cool Tool!", id 100  ->  "my-cool-tool-2s"

The id is unique and only known after the insert, so a slug built this way
can never collide and needs no uniqueness probe.
"""

import re


_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")
_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(number: int) -> str:
    """Lowercase base-36 encoding of a non-negative integer."""
    if number < 0:
        raise ValueError("base-36 encoding needs a non-negative integer")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def slugify(title: str, max_length: int = 50) -> str:
    """Lowercase, collapse non-alphanumeric runs to '-', trim and bound the length."""
    base = _NON_ALPHANUMERIC.sub("-", (title or "").lower()).strip("-")
    return base[:max_length].strip("-")


def build_slug(title: str, record_id: int, max_length: int = 50) -> str:
    """Slug for a freshly inserted row."""
    suffix = to_base36(record_id)
    base = slugify(title, max_length)
    return f"{base}-{suffix}" if base else suffix
