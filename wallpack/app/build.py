from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping

from wallpack.foundation.logging_utils import setup_run_logger
from wallpack.framework import paths
from wallpack.framework.config import BuildConfig
from wallpack.framework.contributors import ResolvedEntry, check_unique_names, resolve_all_artists
from wallpack.framework.derivation import DerivationPipeline
from wallpack.framework.finalize import write_pack_descriptor
from wallpack.framework.layout import LayoutBuilder, make_dest_dirs
from wallpack.framework.manifest import group_by_artist, read_manifest_file, sorted_selections
from wallpack.framework.naming import normalize_pack_name
from wallpack.framework.tasks import run_supervised
from wallpack.framework.transforms import PillowPngRecompressor, build_resizer
from wallpack.framework.tree import PackTree


@dataclass(frozen=True)
class BuildResult:
    run_id: str
    pack_display_name: str
    entries: tuple[ResolvedEntry, ...]
    descriptor_path: str | None
    log_file: str | None


def generate_run_id() -> str:
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def resolve_entries(cfg: BuildConfig, logger: logging.Logger) -> tuple[str, list[ResolvedEntry]]:
    """Parse, group, resolve and name-check the selection. Touches nothing under `dest`."""
    pack_display_name = normalize_pack_name(cfg.pack_name)
    selections = sorted_selections(read_manifest_file(cfg.manifest_path, logger=logger))
    groups = group_by_artist(selections, logger=logger)
    logger.info("Manifest selects %d image(s) from %d artist(s)", len(selections), len(groups))

    entries = resolve_all_artists(
        groups,
        cfg.contributors_dir,
        pack_display_name,
        retro=cfg.retro,
        logger=logger,
    )
    check_unique_names(entries)
    return pack_display_name, entries


def build_derivation(cfg: BuildConfig) -> DerivationPipeline | None:
    if not cfg.retro:
        return None
    resizer = build_resizer(cfg.resize_backend, binary=cfg.imagemagick_binary, timeout_s=cfg.timeout_s)
    return DerivationPipeline(
        resizer=resizer,
        recompressor=PillowPngRecompressor(preset=cfg.png_preset),
        workers=min(cfg.workers, len(paths.RETRO_RESOLUTIONS)),
    )


def run_build(
    cfg_dict: Mapping[str, Any],
    *,
    run_id: str | None = None,
    config_meta: Mapping[str, Any] | None = None,
) -> BuildResult:
    cfg, cfg_warnings = BuildConfig.from_dict(cfg_dict)

    run_id = run_id or generate_run_id()
    logger, log_file = setup_run_logger(run_id, cfg.log_dir)
    if config_meta and config_meta.get("paths"):
        logger.info("Loaded config (%s) from %s", config_meta.get("mode"), ", ".join(config_meta["paths"]))
    for warning in cfg_warnings:
        logger.warning("%s", warning)

    logger.info(
        "Building %s variant wallpaper pack from '%s' to '%s'",
        cfg.variant,
        cfg.manifest_path,
        cfg.dest,
    )

    # Everything that can fail early does so before the destination is touched.
    derivation = build_derivation(cfg)
    pack_display_name, entries = resolve_entries(cfg, logger)

    if cfg.clean and os.path.exists(cfg.dest):
        logger.info("Purging destination directory %s ...", cfg.dest)
        shutil.rmtree(cfg.dest)

    tree = PackTree(root=cfg.dest, absolute_symlinks=cfg.absolute_symlinks)
    logger.info("Creating directories ...")
    make_dest_dirs(tree)

    logger.info("Organizing %d entries with %d worker(s) ...", len(entries), cfg.workers)
    builder = LayoutBuilder(tree=tree, derivation=derivation)
    run_supervised(
        (
            (entry.stable_entry_name, lambda entry=entry: builder.process_entry(entry, logger=logger))
            for entry in entries
        ),
        workers=cfg.workers,
        logger=logger,
    )

    descriptor = write_pack_descriptor(tree, pack_display_name, entries, logger=logger)
    logger.info("Generation complete!")
    return BuildResult(
        run_id=run_id,
        pack_display_name=pack_display_name,
        entries=tuple(entries),
        descriptor_path=descriptor,
        log_file=log_file,
    )


def check_selection(cfg_dict: Mapping[str, Any], *, run_id: str | None = None) -> BuildResult:
    """Dry run: resolve the selection and report entry names without writing the pack."""
    cfg, cfg_warnings = BuildConfig.from_dict(cfg_dict, require_dest=False)
    run_id = run_id or generate_run_id()
    logger, log_file = setup_run_logger(run_id, cfg.log_dir)
    for warning in cfg_warnings:
        logger.warning("%s", warning)

    pack_display_name, entries = resolve_entries(cfg, logger)
    logger.info("Selection resolves to %d entries; no naming collisions", len(entries))
    return BuildResult(
        run_id=run_id,
        pack_display_name=pack_display_name,
        entries=tuple(entries),
        descriptor_path=None,
        log_file=log_file,
    )


__all__ = ["BuildResult", "check_selection", "resolve_entries", "run_build"]
