from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

CONFIG_ENV_VAR = "WALLPACK_CONFIG"


def find_repo_root(start: str | os.PathLike[str] | None = None) -> str:
    start_path = Path(start or os.getcwd()).resolve()
    if start_path.is_file():
        start_path = start_path.parent

    markers = ("pyproject.toml", ".git")
    for candidate in (start_path, *start_path.parents):
        if (candidate / "pyproject.toml").is_file():
            return str(candidate)
        if (candidate / ".git").exists():
            return str(candidate)

    raise FileNotFoundError(
        "Cannot locate repo root: searched from "
        f"{start_path} for {', '.join(markers)}"
    )


def load_yaml_mapping(path: str) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except FileNotFoundError:
        raise
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ValueError(f"Config file must contain a YAML mapping: {path}")
    return dict(payload)


def deep_merge(base: Any, overlay: Any, *, path: str = "") -> Any:
    """Merge `overlay` over `base`; mappings merge per key, everything else is replaced."""
    if overlay is None:
        return base

    if base is None:
        return overlay

    if isinstance(base, Mapping):
        if not isinstance(overlay, Mapping):
            raise ValueError(
                f"Invalid config overlay merge at {path}: base is mapping but overlay is {type(overlay).__name__}"
            )
        merged: dict[str, Any] = dict(base)
        for key, overlay_value in overlay.items():
            next_path = f"{path}.{key}" if path else str(key)
            if key in base:
                merged[key] = deep_merge(base[key], overlay_value, path=next_path)
            else:
                merged[key] = overlay_value
        return merged

    if isinstance(overlay, Mapping):
        raise ValueError(
            f"Invalid config overlay merge at {path}: base is {type(base).__name__} but overlay is mapping"
        )

    return overlay


def load_config(
    config_path: str | None = None,
    *,
    env_var: str = CONFIG_ENV_VAR,
    start_dir: str | None = None,
) -> tuple[dict[str, Any], dict[str, Any]]:
    """
    Load the build configuration, returning (config mapping, load metadata).

    An explicit path (or the env var) loads exactly one file. Otherwise
    `config/config.yaml` under the repo root is loaded and `config/config.local.yaml`
    is merged over it when present. A missing default config yields an empty
    mapping so the CLI can run on flags alone.
    """

    explicit_path = None
    if config_path is not None:
        explicit_path = str(config_path).strip() or None
    elif env_var:
        explicit_path = os.environ.get(env_var, "").strip() or None

    if explicit_path:
        expanded = os.path.abspath(os.path.expandvars(os.path.expanduser(explicit_path)))
        cfg = load_yaml_mapping(expanded)
        meta = {
            "mode": "env" if config_path is None else "explicit",
            "paths": [expanded],
            "env_var": env_var,
        }
        return cfg, meta

    try:
        repo_root = find_repo_root(start_dir)
    except FileNotFoundError:
        return {}, {"mode": "none", "paths": [], "env_var": env_var}

    config_directory = os.path.join(repo_root, "config")
    base_config_path = os.path.join(config_directory, "config.yaml")
    local_overlay_path = os.path.join(config_directory, "config.local.yaml")

    if not os.path.exists(base_config_path):
        return {}, {"mode": "none", "paths": [], "env_var": env_var}

    cfg = load_yaml_mapping(base_config_path)
    loaded_paths = [os.path.abspath(base_config_path)]
    mode = "base"

    if os.path.exists(local_overlay_path):
        cfg = deep_merge(cfg, load_yaml_mapping(local_overlay_path))
        loaded_paths.append(os.path.abspath(local_overlay_path))
        mode = "base+local"

    return cfg, {"mode": mode, "paths": loaded_paths, "env_var": env_var}
