"""Pack assembly pipeline: manifest → contributors → layout → derivation → finalizer."""

from .config import BuildConfig
from .contributors import ResolvedEntry, check_unique_names, resolve_all_artists
from .errors import (
    BuildFailedError,
    ContributorError,
    LayoutError,
    ManifestError,
    NamingCollisionError,
    PackError,
    ToolNotFoundError,
    TransformError,
)
from .manifest import group_by_artist, parse_manifest, read_manifest_file, sorted_selections
from .naming import normalize_image_name, normalize_pack_name, slugify

__all__ = [
    "BuildConfig",
    "BuildFailedError",
    "ContributorError",
    "LayoutError",
    "ManifestError",
    "NamingCollisionError",
    "PackError",
    "ResolvedEntry",
    "ToolNotFoundError",
    "TransformError",
    "check_unique_names",
    "group_by_artist",
    "normalize_image_name",
    "normalize_pack_name",
    "parse_manifest",
    "read_manifest_file",
    "resolve_all_artists",
    "slugify",
    "sorted_selections",
]
