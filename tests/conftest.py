import json
from pathlib import Path

import pytest
from PIL import Image


def write_gradient(path: Path, size: tuple[int, int]) -> None:
    width, height = size
    im = Image.new("RGB", size)
    im.putdata([((x * 255) // width, (y * 255) // height, 128) for y in range(height) for x in range(width)])
    fmt = "JPEG" if path.suffix.lower() in {".jpg", ".jpeg"} else "PNG"
    im.save(path, format=fmt)


def write_contributor(
    contributors_dir: Path,
    artist_id: str,
    *,
    name: str,
    username: str,
    wallpapers: list[dict],
    image_size: tuple[int, int] = (160, 100),
    with_images: bool = True,
) -> Path:
    artist_dir = contributors_dir / artist_id
    artist_dir.mkdir(parents=True, exist_ok=True)
    record = {
        "name": name,
        "uname": username,
        "email": f"{username}@example.org",
        "uri": f"https://example.org/{username}",
        "wallpapers": wallpapers,
    }
    (artist_dir / "me.json").write_text(json.dumps(record), encoding="utf-8")
    if with_images:
        for wallpaper in wallpapers:
            write_gradient(artist_dir / f"{wallpaper['i']}.{wallpaper['f']}", image_size)
    return artist_dir


@pytest.fixture
def pack_repo(tmp_path: Path) -> dict[str, Path]:
    """A source tree with two artists and a manifest at packs/summer-vibes."""
    contributors = tmp_path / "contributors"
    write_contributor(
        contributors,
        "alice",
        name="Alice Example",
        username="alice",
        wallpapers=[
            {"i": 0, "f": "jpg", "t": "Blue Hour", "l": "CC BY-SA 4.0", "tags": ["dusk", "city"]},
            {"i": 1, "f": "png", "t": "Red Dawn", "l": "CC0", "tags": []},
            {"i": 2, "f": "png", "t": "Unselected", "l": "CC0", "tags": []},
        ],
    )
    write_contributor(
        contributors,
        "bob",
        name="Bob Example",
        username="bobby",
        wallpapers=[{"i": 3, "f": "png", "t": "Green Field", "l": "GPL-3.0", "tags": ["nature"]}],
    )

    packs = tmp_path / "packs"
    packs.mkdir()
    manifest = packs / "summer-vibes"
    manifest.write_text("# summer pack\nbob:3\nalice:1\nalice:0\nalice:9\n", encoding="utf-8")

    return {
        "root": tmp_path,
        "contributors": contributors,
        "manifest": manifest,
        "dest": tmp_path / "out",
    }


@pytest.fixture
def base_config(pack_repo):
    return {
        "pack": {
            "manifest_path": str(pack_repo["manifest"]),
            "dest": str(pack_repo["dest"]),
            "variant": "normal",
        },
        "build": {"workers": 4},
    }
