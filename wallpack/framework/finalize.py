from __future__ import annotations

import logging
from typing import Callable, Sequence

from . import paths
from .contributors import ResolvedEntry
from .templates import render_pack_xml
from .tree import PackTree

_LOGGER = logging.getLogger(__name__)


def write_pack_descriptor(
    tree: PackTree,
    pack_display_name: str,
    entries: Sequence[ResolvedEntry],
    *,
    render: Callable[[Sequence[ResolvedEntry]], str] = render_pack_xml,
    logger: logging.Logger | None = None,
) -> str:
    """
    Write the aggregate GNOME/MATE wallpaper list and alias it from each property directory.

    Must only run after every entry has been laid out. Returns the descriptor's relative path.
    """
    log = logger or _LOGGER
    log.info("Writing GTK manifests ...")
    owner = pack_display_name
    descriptor = paths.pack_descriptor_path(pack_display_name)
    tree.write_text(owner, descriptor, render(entries))

    name = paths.pack_descriptor_name(pack_display_name)
    for rel_dir in paths.PROPERTY_ALIAS_DIRS:
        tree.symlink(owner, f"{rel_dir}/{name}", descriptor)
    return descriptor
