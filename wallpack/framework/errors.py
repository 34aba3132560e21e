"""Error types raised while assembling a wallpaper pack.

Configuration problems stay plain `ValueError` (see `framework.config`); everything
that goes wrong while reading inputs or writing the pack derives from `PackError`.
"""

from __future__ import annotations


class PackError(RuntimeError):
    """Base class for unrecoverable pack build failures."""


class ManifestError(PackError):
    """Raised when the selection manifest stream cannot be read or decoded."""


class ContributorError(PackError):
    """Raised when an artist's contributor record is missing or malformed."""


class NamingCollisionError(PackError):
    """Raised when two selected entries derive the same stable entry name."""


class TransformError(PackError):
    """Raised when the resize or re-compression step fails for an image."""


class ToolNotFoundError(PackError, FileNotFoundError):
    """Raised when a required external tool cannot be located."""


class LayoutError(PackError):
    """Raised when a filesystem operation fails for one entry."""

    def __init__(self, entry_name: str, path: str, message: str):
        super().__init__(f"{entry_name}: {message} ({path})")
        self.entry_name = entry_name
        self.path = path


class BuildFailedError(PackError):
    """Raised after a parallel region finishes with one or more failed tasks."""

    def __init__(self, failures: list[tuple[str, BaseException]]):
        self.failures = list(failures)
        lines = [f"{len(self.failures)} task(s) failed:"]
        for name, exc in self.failures:
            lines.append(f"  - {name}: {exc}")
        super().__init__("\n".join(lines))
