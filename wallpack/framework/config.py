from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Literal, Mapping

Variant = Literal["normal", "retro"]
ResizeBackend = Literal["imagemagick", "pillow"]

VARIANTS: tuple[str, ...] = ("normal", "retro")
RESIZE_BACKENDS: tuple[str, ...] = ("imagemagick", "pillow")


def parse_bool(value: Any, path: str) -> bool:
    """
    Strict boolean parsing to avoid bool('false') footguns.

    Accepts True/False, 0/1 and the strings true/false/1/0/yes/no
    (case-insensitive, surrounding whitespace ignored).
    """

    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value in (0, 1):
            return bool(value)
        raise ValueError(f"Invalid boolean for {path}: {value!r}")
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"true", "1", "yes"}:
            return True
        if normalized in {"false", "0", "no"}:
            return False
    raise ValueError(f"Invalid boolean for {path}: {value!r}")


def parse_int(value: Any, path: str) -> int:
    if value is None:
        raise ValueError(f"Invalid config value for {path}: None")
    if isinstance(value, bool):
        raise ValueError(f"Invalid config type for {path}: expected int, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        if not value.strip():
            raise ValueError(f"Invalid config value for {path}: must be an int")
        try:
            return int(value.strip())
        except Exception as exc:  # noqa: BLE001
            raise ValueError(f"Invalid config value for {path}: must be an int") from exc
    raise ValueError(f"Invalid config type for {path}: expected int")


def parse_optional_str(value: Any, path: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"Invalid config type for {path}: expected string")
    return value.strip() or None


def parse_variant(value: Any, path: str = "pack.variant") -> Variant:
    if not isinstance(value, str) or value.strip().lower() not in VARIANTS:
        raise ValueError(f"Unknown variant for {path}: {value!r} (expected one of {', '.join(VARIANTS)})")
    return value.strip().lower()  # type: ignore[return-value]


_SCHEMA: Mapping[str, Mapping[str, None]] = {
    "pack": {
        "manifest_path": None,
        "contributors_dir": None,
        "dest": None,
        "variant": None,
        "clean": None,
    },
    "build": {
        "workers": None,
        "log_dir": None,
        "absolute_symlinks": None,
    },
    "derive": {
        "resize_backend": None,
        "imagemagick_binary": None,
        "png_preset": None,
        "timeout_s": None,
    },
}


@dataclass(frozen=True)
class BuildConfig:
    manifest_path: str
    contributors_dir: str
    dest: str
    variant: Variant
    clean: bool

    workers: int
    log_dir: str | None
    absolute_symlinks: bool

    resize_backend: ResizeBackend
    imagemagick_binary: str | None
    png_preset: int
    timeout_s: int

    @property
    def retro(self) -> bool:
        return self.variant == "retro"

    @property
    def pack_name(self) -> str:
        return os.path.basename(os.path.normpath(self.manifest_path))

    @staticmethod
    def from_dict(cfg: Mapping[str, Any], *, require_dest: bool = True) -> tuple["BuildConfig", list[str]]:
        """
        Parse and validate configuration, returning (BuildConfig, warnings).

        `require_dest=False` is for read-only commands; `dest` is then "" when unset.

        Raises:
            ValueError: if required keys are missing or invalid.
        """

        if not isinstance(cfg, Mapping):
            raise ValueError("Config must be a mapping")

        warnings: list[str] = []
        strict_unknown_keys = parse_bool(cfg.get("strict", False), "strict")

        unknown: list[str] = []
        for key, value in cfg.items():
            if key == "strict":
                continue
            if key not in _SCHEMA:
                unknown.append(str(key))
                continue
            if value is None:
                continue
            if not isinstance(value, Mapping):
                raise ValueError(f"Invalid config type for {key}: expected mapping")
            unknown.extend(f"{key}.{sub}" for sub in value if sub not in _SCHEMA[key])
        if unknown:
            message = f"Unknown config keys: {', '.join(sorted(unknown))}"
            if strict_unknown_keys:
                raise ValueError(message)
            warnings.append(message)

        pack_cfg: Mapping[str, Any] = cfg.get("pack") or {}
        build_cfg: Mapping[str, Any] = cfg.get("build") or {}
        derive_cfg: Mapping[str, Any] = cfg.get("derive") or {}

        manifest_path = parse_optional_str(pack_cfg.get("manifest_path"), "pack.manifest_path")
        if not manifest_path:
            raise ValueError("Missing required config value: pack.manifest_path")
        dest = parse_optional_str(pack_cfg.get("dest"), "pack.dest") or ""
        if not dest and require_dest:
            raise ValueError("Missing required config value: pack.dest")

        contributors_dir = parse_optional_str(pack_cfg.get("contributors_dir"), "pack.contributors_dir")
        if contributors_dir is None:
            manifest_dir = os.path.dirname(os.path.abspath(manifest_path))
            contributors_dir = os.path.join(os.path.dirname(manifest_dir), "contributors")

        variant = parse_variant(pack_cfg.get("variant", "normal"))
        clean = parse_bool(pack_cfg.get("clean", False), "pack.clean")

        raw_workers = build_cfg.get("workers")
        if raw_workers is None:
            workers = os.cpu_count() or 1
        else:
            workers = parse_int(raw_workers, "build.workers")
            if workers < 1:
                raise ValueError("Invalid config value for build.workers: must be >= 1")

        log_dir = parse_optional_str(build_cfg.get("log_dir"), "build.log_dir")
        absolute_symlinks = parse_bool(build_cfg.get("absolute_symlinks", False), "build.absolute_symlinks")

        resize_backend = str(derive_cfg.get("resize_backend", "imagemagick")).strip().lower()
        if resize_backend not in RESIZE_BACKENDS:
            raise ValueError(
                f"Unknown resize backend for derive.resize_backend: {resize_backend!r} "
                f"(expected one of {', '.join(RESIZE_BACKENDS)})"
            )
        imagemagick_binary = parse_optional_str(derive_cfg.get("imagemagick_binary"), "derive.imagemagick_binary")

        png_preset = parse_int(derive_cfg.get("png_preset", 1), "derive.png_preset")
        if not 0 <= png_preset <= 6:
            raise ValueError("Invalid config value for derive.png_preset: must be within 0..6")
        timeout_s = parse_int(derive_cfg.get("timeout_s", 600), "derive.timeout_s")
        if timeout_s <= 0:
            raise ValueError("Invalid config value for derive.timeout_s: must be > 0")

        return (
            BuildConfig(
                manifest_path=manifest_path,
                contributors_dir=contributors_dir,
                dest=dest,
                variant=variant,
                clean=clean,
                workers=workers,
                log_dir=log_dir,
                absolute_symlinks=absolute_symlinks,
                resize_backend=resize_backend,  # type: ignore[arg-type]
                imagemagick_binary=imagemagick_binary,
                png_preset=png_preset,
                timeout_s=timeout_s,
            ),
            warnings,
        )
