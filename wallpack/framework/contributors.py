from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from . import paths
from .errors import ContributorError, NamingCollisionError
from .naming import normalize_image_name

_LOGGER = logging.getLogger(__name__)

RECORD_FILENAME = "me.json"


@dataclass(frozen=True)
class OfferedImage:
    index: int
    format: str
    title: str
    license: str
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class ContributorRecord:
    name: str
    username: str
    email: str
    uri: str | None
    src: str | None
    wallpapers: tuple[OfferedImage, ...]


@dataclass(frozen=True)
class ResolvedEntry:
    """One selected wallpaper with everything needed to lay it out."""

    index: int
    format: str
    title: str
    license: str
    tags: tuple[str, ...]
    artist_name: str
    artist_username: str
    artist_email: str
    source_directory: str
    canonical_dest_path: str
    stable_entry_name: str

    @property
    def source_path(self) -> str:
        return os.path.join(self.source_directory, f"{self.index}.{self.format}")

    @property
    def dest_format(self) -> str:
        """Extension of the canonical image (differs from `format` for derived packs)."""
        return self.canonical_dest_path.rsplit(".", 1)[-1]


def _require_str(payload: Mapping[str, Any], key: str, where: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str):
        raise ContributorError(f"{where}: field `{key}` must be a string")
    return value


def _optional_str(payload: Mapping[str, Any], key: str, where: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ContributorError(f"{where}: field `{key}` must be a string")
    return value


def _require_username(payload: Mapping[str, Any], where: str) -> str:
    # the username becomes part of every output path of the artist's entries
    username = _require_str(payload, "uname", where)
    if not username or username in {".", ".."} or "/" in username or "\\" in username:
        raise ContributorError(f"{where}: field `uname` must be a single path component, got {username!r}")
    return username


def _parse_offered_image(payload: Any, where: str) -> OfferedImage:
    if not isinstance(payload, Mapping):
        raise ContributorError(f"{where}: wallpaper entry must be an object")
    index = payload.get("i")
    if isinstance(index, bool) or not isinstance(index, int) or index < 0:
        raise ContributorError(f"{where}: field `i` must be a non-negative integer")
    tags = payload.get("tags", [])
    if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
        raise ContributorError(f"{where}: field `tags` must be a list of strings")
    return OfferedImage(
        index=index,
        format=_require_str(payload, "f", where),
        title=_require_str(payload, "t", where),
        license=_require_str(payload, "l", where),
        tags=tuple(tags),
    )


def parse_contributor_record(payload: Any, where: str) -> ContributorRecord:
    if not isinstance(payload, Mapping):
        raise ContributorError(f"{where}: contributor record must be a JSON object")
    wallpapers = payload.get("wallpapers")
    if not isinstance(wallpapers, list):
        raise ContributorError(f"{where}: field `wallpapers` must be a list")
    return ContributorRecord(
        name=_require_str(payload, "name", where),
        username=_require_username(payload, where),
        email=_require_str(payload, "email", where),
        uri=_optional_str(payload, "uri", where),
        src=_optional_str(payload, "src", where),
        wallpapers=tuple(
            _parse_offered_image(item, f"{where} wallpapers[{pos}]") for pos, item in enumerate(wallpapers)
        ),
    )


def load_contributor_record(artist_dir: str) -> ContributorRecord:
    record_path = os.path.join(artist_dir, RECORD_FILENAME)
    try:
        with open(record_path, "r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except FileNotFoundError as exc:
        raise ContributorError(f"Missing contributor record: {record_path}") from exc
    except (OSError, ValueError) as exc:
        raise ContributorError(f"Unreadable contributor record {record_path}: {exc}") from exc
    return parse_contributor_record(payload, record_path)


def resolve_artist(
    pack_display_name: str,
    artist_dir: str,
    selections: set[int],
    *,
    retro: bool = False,
) -> list[ResolvedEntry]:
    """
    Resolve one artist's selected indices against their contributor record.

    Indices the record does not offer are dropped without error.
    """
    record = load_contributor_record(artist_dir)
    results: list[ResolvedEntry] = []
    for offered in record.wallpapers:
        if offered.index not in selections:
            continue
        entry_name = normalize_image_name(pack_display_name, offered.title, record.username)
        results.append(
            ResolvedEntry(
                index=offered.index,
                format=offered.format,
                title=offered.title,
                license=offered.license,
                tags=offered.tags,
                artist_name=record.name,
                artist_username=record.username,
                artist_email=record.email,
                source_directory=artist_dir,
                canonical_dest_path=paths.canonical_image_path(entry_name, offered.format, retro=retro),
                stable_entry_name=entry_name,
            )
        )
    return results


def resolve_all_artists(
    groups: Iterable[tuple[str, set[int]]],
    contributors_dir: str,
    pack_display_name: str,
    *,
    retro: bool = False,
    logger: logging.Logger | None = None,
) -> list[ResolvedEntry]:
    log = logger or _LOGGER
    entries: list[ResolvedEntry] = []
    for artist, selections in groups:
        artist_dir = os.path.join(contributors_dir, artist)
        log.info("Processing %s ...", artist_dir)
        resolved = resolve_artist(pack_display_name, artist_dir, selections, retro=retro)
        dropped = len(selections) - len({entry.index for entry in resolved})
        if dropped:
            log.debug("%s: %d selected index(es) not offered by the record", artist, dropped)
        entries.extend(resolved)
    return entries


def check_unique_names(entries: Iterable[ResolvedEntry]) -> None:
    """Raise NamingCollisionError if two entries share a stable entry name."""
    owners: dict[str, ResolvedEntry] = {}
    collisions: list[str] = []
    for entry in entries:
        previous = owners.get(entry.stable_entry_name)
        if previous is None:
            owners[entry.stable_entry_name] = entry
            continue
        collisions.append(
            f"{entry.stable_entry_name}: {previous.source_path} and {entry.source_path}"
        )
    if collisions:
        raise NamingCollisionError("Entry name collision(s):\n  " + "\n  ".join(collisions))
