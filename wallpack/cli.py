from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from typing import Any

from wallpack.foundation.config_io import deep_merge, load_config


def _add_source_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--path", help="Selection manifest of the pack (its file name is the pack name)")
    parser.add_argument("--contributors", help="Directory holding one sub-directory per artist")
    parser.add_argument("--config", help="YAML config file (default: $WALLPACK_CONFIG or config/config.yaml)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wallpack", description="A general purpose wallpaper collection generator")
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Assemble a wallpaper pack")
    _add_source_args(build)
    build.add_argument("--dest", help="Output directory")
    build.add_argument("--variant", help='Pack variant: "normal" or "retro"')
    build.add_argument("--clean", action="store_true", default=None, help="Remove the destination directory first")
    build.add_argument("--workers", type=int, help="Parallel workers (default: CPU count)")
    build.add_argument("--log-dir", help="Also write a DEBUG log file into this directory")

    check = sub.add_parser("check", help="Resolve the selection and report entry names without writing anything")
    _add_source_args(check)

    return parser


def config_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Map CLI flags onto the config layout; unset flags leave the config untouched."""
    pack = {
        "manifest_path": getattr(args, "path", None),
        "contributors_dir": getattr(args, "contributors", None),
        "dest": getattr(args, "dest", None),
        "variant": getattr(args, "variant", None),
        "clean": getattr(args, "clean", None),
    }
    build = {
        "workers": getattr(args, "workers", None),
        "log_dir": getattr(args, "log_dir", None),
    }
    overrides: dict[str, Any] = {}
    for section, values in (("pack", pack), ("build", build)):
        present = {key: value for key, value in values.items() if value is not None}
        if present:
            overrides[section] = present
    return overrides


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)

    from wallpack.app.build import check_selection, run_build
    from wallpack.framework.errors import PackError

    try:
        cfg_dict, cfg_meta = load_config(args.config)
        cfg_dict = deep_merge(cfg_dict, config_overrides(args))

        if args.command == "build":
            run_build(cfg_dict, config_meta=cfg_meta)
            return 0

        if args.command == "check":
            result = check_selection(cfg_dict)
            for entry in result.entries:
                print(f"{entry.stable_entry_name}\t{entry.source_path}")
            return 0
    except (PackError, ValueError, FileNotFoundError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    raise AssertionError(f"Unhandled command: {args.command}")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))
