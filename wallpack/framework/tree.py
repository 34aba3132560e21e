"""Filesystem writes under the pack destination root.

Every operation takes the entry name it works for so failures surface as a
`LayoutError` naming both the entry and the path involved.
"""

from __future__ import annotations

import os
import posixpath
import shutil
from dataclasses import dataclass

from . import paths
from .errors import LayoutError


@dataclass(frozen=True)
class PackTree:
    root: str
    absolute_symlinks: bool = False

    def path(self, rel_path: str) -> str:
        return os.path.join(self.root, *rel_path.split("/"))

    def link_target(self, link_rel: str, target_rel: str) -> str:
        """
        Text stored in a symlink at `link_rel` that points at `target_rel`.

        Relative targets resolve inside the staging root and after installation;
        absolute targets only resolve once installed.
        """
        if self.absolute_symlinks:
            return paths.install_path(target_rel)
        return posixpath.relpath(target_rel, posixpath.dirname(link_rel))

    def make_dirs(self, owner: str, rel_path: str) -> None:
        target = self.path(rel_path)
        try:
            os.makedirs(target, exist_ok=True)
        except OSError as exc:
            raise LayoutError(owner, target, f"cannot create directory: {exc.strerror or exc}") from exc

    def write_text(self, owner: str, rel_path: str, text: str) -> None:
        target = self.path(rel_path)
        try:
            with open(target, "w", encoding="utf-8") as handle:
                handle.write(text)
        except OSError as exc:
            raise LayoutError(owner, target, f"cannot write file: {exc.strerror or exc}") from exc

    def write_bytes(self, owner: str, rel_path: str, data: bytes) -> None:
        target = self.path(rel_path)
        try:
            with open(target, "wb") as handle:
                handle.write(data)
        except OSError as exc:
            raise LayoutError(owner, target, f"cannot write file: {exc.strerror or exc}") from exc

    def copy_in(self, owner: str, source: str, rel_path: str) -> None:
        target = self.path(rel_path)
        try:
            shutil.copyfile(source, target)
        except OSError as exc:
            raise LayoutError(owner, target, f"cannot copy {source}: {exc.strerror or exc}") from exc

    def symlink(self, owner: str, link_rel: str, target_rel: str) -> None:
        link = self.path(link_rel)
        try:
            os.symlink(self.link_target(link_rel, target_rel), link)
        except FileExistsError as exc:
            raise LayoutError(owner, link, "symlink already exists (destination not clean?)") from exc
        except OSError as exc:
            raise LayoutError(owner, link, f"cannot create symlink: {exc.strerror or exc}") from exc
