from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from . import paths
from .contributors import ResolvedEntry
from .transforms import Recompressor, Resizer
from .tree import PackTree

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class DerivationPipeline:
    """Writes one re-encoded PNG per retro resolution for an entry."""

    resizer: Resizer
    recompressor: Recompressor
    resolutions: tuple[str, ...] = paths.RETRO_RESOLUTIONS
    reference_resolution: str = paths.RETRO_REFERENCE_RESOLUTION
    workers: int = len(paths.RETRO_RESOLUTIONS)

    def derive_one(self, tree: PackTree, entry: ResolvedEntry, resolution: str, log: logging.Logger) -> str:
        entry_name = entry.stable_entry_name
        log.info("Processing %s at %s", entry_name, resolution)
        raw = self.resizer.resize(entry.source_path, resolution)
        optimized = self.recompressor.recompress(raw)
        rel_path = paths.resolution_path(entry_name, resolution, paths.RETRO_FORMAT)
        tree.write_bytes(entry_name, rel_path, optimized)
        log.debug("Wrote %s (%d bytes, %d before re-compression)", rel_path, len(optimized), len(raw))
        return rel_path

    def derive(self, tree: PackTree, entry: ResolvedEntry, *, logger: logging.Logger | None = None) -> list[str]:
        """
        Derive every resolution for `entry`, then alias the screenshot to the reference output.

        Resolutions run in parallel; each writes its own file. The first failure
        is re-raised once all started resolutions have finished.
        """
        log = logger or _LOGGER
        if self.reference_resolution not in self.resolutions:
            raise ValueError(f"Reference resolution {self.reference_resolution} is not derived")

        workers = max(1, min(self.workers, len(self.resolutions)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [
                executor.submit(self.derive_one, tree, entry, resolution, log) for resolution in self.resolutions
            ]
        written: list[str] = []
        errors: list[BaseException] = []
        for future in futures:
            exc = future.exception()
            if exc is None:
                written.append(future.result())
            else:
                errors.append(exc)
        if errors:
            for extra in errors[1:]:
                log.error("%s: additional derivation failure: %s", entry.stable_entry_name, extra)
            raise errors[0]

        entry_name = entry.stable_entry_name
        tree.symlink(
            entry_name,
            paths.screenshot_path(entry_name, paths.RETRO_FORMAT),
            paths.resolution_path(entry_name, self.reference_resolution, paths.RETRO_FORMAT),
        )
        return written
