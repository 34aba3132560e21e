"""Deterministic names for packs and entries.

    normalize_pack_name("summer-vibes")                      -> "Summer.vibes"
    normalize_image_name("Summer.vibes", "blue hour", "jdoe") -> "Summer.vibes--jdoe--BlueHour"
"""

from __future__ import annotations

import re

from unidecode import unidecode

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Lowercase ASCII slug: text is transliterated, non-alphanumeric runs become a single `-`."""
    return _NON_ALNUM_RE.sub("-", unidecode(text).lower()).strip("-")


def uppercase_first_letter(text: str) -> str:
    if not text:
        return ""
    return text[0].upper() + text[1:]


def normalize_pack_name(name: str) -> str:
    return uppercase_first_letter(slugify(name)).replace("-", ".")


def normalize_image_name(pack_name: str, title: str, username: str) -> str:
    converted = "".join(uppercase_first_letter(segment) for segment in slugify(title).split("-"))
    return f"{pack_name}--{username}--{converted}"
