"""Selection manifest parsing and per-artist grouping.

A manifest is UTF-8 text with one `artist:index` selection per line. Blank
lines and lines starting with `#` are ignored. Only the first `:` separates the
fields, so artist identifiers cannot contain `:`.
"""

from __future__ import annotations

import io
import logging
from typing import BinaryIO, Iterable

from .errors import ManifestError

_LOGGER = logging.getLogger(__name__)

Selection = tuple[str, int]


def parse_manifest(stream: BinaryIO, *, logger: logging.Logger | None = None) -> list[Selection]:
    """
    Parse a manifest byte stream into (artist_id, image_index) pairs in file order.

    Malformed lines are logged as warnings and skipped. Duplicates are kept.

    Raises:
        ManifestError: if the stream cannot be read or is not valid UTF-8.
    """
    log = logger or _LOGGER
    reader = io.TextIOWrapper(stream, encoding="utf-8", newline=None)
    selections: list[Selection] = []
    try:
        for lineno, raw_line in enumerate(reader, start=1):
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            name, sep, value = line.partition(":")
            if not sep or not name:
                log.warning("Invalid manifest line %d: `%s`", lineno, line)
                continue
            digits = value[1:] if value.startswith("+") else value
            if not (digits.isascii() and digits.isdigit()):
                log.warning("Cannot parse `%s` as number on manifest line %d", value, lineno)
                continue
            selections.append((name, int(digits)))
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestError(f"Failed to read manifest: {exc}") from exc
    finally:
        reader.detach()
    return selections


def read_manifest_file(path: str, *, logger: logging.Logger | None = None) -> list[Selection]:
    try:
        with open(path, "rb") as handle:
            return parse_manifest(handle, logger=logger)
    except OSError as exc:
        raise ManifestError(f"Failed to open manifest {path}: {exc}") from exc


def group_by_artist(
    selections: Iterable[Selection],
    *,
    logger: logging.Logger | None = None,
) -> list[tuple[str, set[int]]]:
    """
    Group consecutive selections of the same artist into (artist_id, indices).

    Input must already be sorted by artist. Only contiguous runs are merged: an
    artist that shows up again after another artist starts a second group.
    """
    log = logger or _LOGGER
    groups: list[tuple[str, set[int]]] = []
    seen: set[str] = set()
    for artist, index in selections:
        if groups and groups[-1][0] == artist:
            groups[-1][1].add(index)
            continue
        if artist in seen:
            log.warning("Artist `%s` appears in non-contiguous manifest runs; it will be grouped twice", artist)
        seen.add(artist)
        groups.append((artist, {index}))
    return groups


def sorted_selections(selections: Iterable[Selection]) -> list[Selection]:
    # stable lexicographic sort by artist id keeps each artist's lines contiguous
    return sorted(selections, key=lambda item: item[0])
