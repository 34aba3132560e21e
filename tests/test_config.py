import os
from pathlib import Path

import pytest

from wallpack.foundation.config_io import deep_merge, load_config
from wallpack.framework.config import BuildConfig, parse_bool


def _minimal(**pack):
    return {"pack": {"manifest_path": "/src/packs/summer-vibes", "dest": "/out", **pack}}


def test_defaults():
    cfg, warnings = BuildConfig.from_dict(_minimal())

    assert warnings == []
    assert cfg.variant == "normal"
    assert cfg.retro is False
    assert cfg.clean is False
    assert cfg.pack_name == "summer-vibes"
    assert cfg.contributors_dir == os.path.join(os.path.abspath("/src"), "contributors")
    assert cfg.workers == (os.cpu_count() or 1)
    assert cfg.absolute_symlinks is False
    assert cfg.resize_backend == "imagemagick"
    assert cfg.png_preset == 1
    assert cfg.timeout_s == 600


def test_variant_is_case_insensitive():
    cfg, _ = BuildConfig.from_dict(_minimal(variant="ReTrO"))
    assert cfg.retro is True


def test_unknown_variant_is_rejected():
    with pytest.raises(ValueError, match="Unknown variant"):
        BuildConfig.from_dict(_minimal(variant="deluxe"))


@pytest.mark.parametrize("missing", ["manifest_path", "dest"])
def test_required_keys(missing):
    cfg = _minimal()
    del cfg["pack"][missing]
    with pytest.raises(ValueError, match=f"pack.{missing}"):
        BuildConfig.from_dict(cfg)


def test_dest_optional_for_read_only_commands():
    cfg = _minimal()
    del cfg["pack"]["dest"]
    parsed, _ = BuildConfig.from_dict(cfg, require_dest=False)
    assert parsed.dest == ""


def test_unknown_keys_warn_or_fail_when_strict():
    raw = {**_minimal(), "build": {"wrokers": 2}, "extra": 1}
    _, warnings = BuildConfig.from_dict(raw)
    assert warnings == ["Unknown config keys: build.wrokers, extra"]

    with pytest.raises(ValueError, match="Unknown config keys"):
        BuildConfig.from_dict({**raw, "strict": True})


@pytest.mark.parametrize(
    ("section", "key", "value"),
    [
        ("build", "workers", 0),
        ("build", "workers", "many"),
        ("build", "absolute_symlinks", "sometimes"),
        ("derive", "png_preset", 7),
        ("derive", "timeout_s", 0),
        ("derive", "resize_backend", "gimp"),
        ("pack", "clean", 2),
    ],
)
def test_invalid_values(section, key, value):
    raw = _minimal()
    raw.setdefault(section, {})[key] = value
    with pytest.raises(ValueError):
        BuildConfig.from_dict(raw)


def test_parse_bool_strings():
    assert parse_bool(" Yes ", "x") is True
    assert parse_bool("false", "x") is False
    with pytest.raises(ValueError):
        parse_bool("nope", "x")


def test_load_config_explicit_path(tmp_path: Path):
    path = tmp_path / "cfg.yaml"
    path.write_text("pack:\n  variant: retro\n", encoding="utf-8")

    cfg, meta = load_config(str(path))
    assert cfg == {"pack": {"variant": "retro"}}
    assert meta["mode"] == "explicit"


def test_load_config_env_var(tmp_path: Path, monkeypatch):
    path = tmp_path / "cfg.yaml"
    path.write_text("build:\n  workers: 3\n", encoding="utf-8")
    monkeypatch.setenv("WALLPACK_CONFIG", str(path))

    cfg, meta = load_config()
    assert cfg["build"]["workers"] == 3
    assert meta["mode"] == "env"


def test_load_config_repo_default_with_local_overlay(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("WALLPACK_CONFIG", raising=False)
    (tmp_path / "pyproject.toml").write_text("", encoding="utf-8")
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "config.yaml").write_text("pack:\n  variant: normal\n  clean: false\n", encoding="utf-8")
    (config_dir / "config.local.yaml").write_text("pack:\n  clean: true\n", encoding="utf-8")

    cfg, meta = load_config(start_dir=str(tmp_path))
    assert cfg == {"pack": {"variant": "normal", "clean": True}}
    assert meta["mode"] == "base+local"


def test_load_config_rejects_non_mapping(tmp_path: Path):
    path = tmp_path / "cfg.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError, match="YAML mapping"):
        load_config(str(path))


def test_deep_merge_replaces_scalars_and_merges_mappings():
    merged = deep_merge({"pack": {"a": 1, "b": 2}, "x": 1}, {"pack": {"b": 3}})
    assert merged == {"pack": {"a": 1, "b": 3}, "x": 1}
