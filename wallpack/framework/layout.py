"""Per-entry destination layout.

For an entry named N the builder writes:

    usr/share/wallpapers/N/metadata.desktop            descriptor
    usr/share/backgrounds/N/N.<fmt>                    canonical copy (normal)
    usr/share/wallpapers/N/screenshot.<fmt>            -> canonical image
    usr/share/backgrounds/xfce/N-<ratio>.<fmt>         -> canonical image
    usr/share/wallpapers/N/contents/images/<res>.<fmt> -> canonical image (normal)
                                                       real PNG per resolution (retro)

Entries never share a path, so entries can be laid out concurrently.
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass
from typing import Callable

from . import paths
from .contributors import ResolvedEntry
from .derivation import DerivationPipeline
from .templates import render_entry_desktop
from .tree import PackTree

_LOGGER = logging.getLogger(__name__)


def make_dest_dirs(tree: PackTree) -> None:
    for rel_dir in paths.DEST_DIRS:
        tree.make_dirs("<pack>", rel_dir)


@dataclass(frozen=True)
class LayoutBuilder:
    tree: PackTree
    derivation: DerivationPipeline | None = None
    render_desktop: Callable[[ResolvedEntry], str] = render_entry_desktop

    @property
    def retro(self) -> bool:
        return self.derivation is not None

    def process_entry(self, entry: ResolvedEntry, *, logger: logging.Logger | None = None) -> None:
        log = logger or _LOGGER
        tree = self.tree
        entry_name = entry.stable_entry_name
        canonical = entry.canonical_dest_path
        dest_format = entry.dest_format

        desktop_file = self.render_desktop(entry)
        tree.make_dirs(entry_name, posixpath.dirname(canonical))
        tree.make_dirs(entry_name, paths.entry_images_dir(entry_name))
        tree.write_text(entry_name, paths.desktop_file_path(entry_name), desktop_file)

        if not self.retro:
            log.info("Copying: %s -> %s", entry.source_path, tree.path(canonical))
            tree.copy_in(entry_name, entry.source_path, canonical)
            log.info("Creating symlinks for %s ...", entry_name)
            tree.symlink(entry_name, paths.screenshot_path(entry_name, dest_format), canonical)

        for ratio in paths.XFCE_RATIOS:
            tree.symlink(entry_name, paths.ratio_path(entry_name, ratio, dest_format), canonical)

        if self.derivation is not None:
            self.derivation.derive(tree, entry, logger=log)
        else:
            self.process_mainline(entry)

    def process_mainline(self, entry: ResolvedEntry) -> None:
        entry_name = entry.stable_entry_name
        for resolution in paths.MAINLINE_RESOLUTIONS:
            self.tree.symlink(
                entry_name,
                paths.resolution_path(entry_name, resolution, entry.dest_format),
                entry.canonical_dest_path,
            )
