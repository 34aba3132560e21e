"""Destination layout constants and path builders.

All paths are install paths relative to the destination root, written in POSIX
form without a leading slash (`usr/share/...`). `install_path` turns one into
the absolute path it will have once the pack is installed.
"""

from __future__ import annotations

import posixpath

WALLPAPERS_DIR = "usr/share/wallpapers"
BACKGROUNDS_DIR = "usr/share/backgrounds"
XFCE_DIR = "usr/share/backgrounds/xfce"
PROPERTIES_DIR = "usr/share/background-properties"

DEST_DIRS: tuple[str, ...] = (
    WALLPAPERS_DIR,
    XFCE_DIR,
    PROPERTIES_DIR,
    "usr/share/gnome-background-properties",
    "usr/share/mate-background-properties",
)
# Property directories that alias the aggregate descriptor instead of holding it.
PROPERTY_ALIAS_DIRS: tuple[str, ...] = DEST_DIRS[3:]

MAINLINE_RESOLUTIONS: tuple[str, ...] = (
    "1024x768",
    "1152x768",
    "1280x1024",
    "1280x800",
    "1280x854",
    "1280x960",
    "1366x768",
    "1440x900",
    "1440x960",
    "1600x1200",
    "1600x900",
    "1680x1050",
    "1920x1080",
    "1920x1200",
    "2048x1536",
    "2048x2048",
    "2160x1440",
    "2520x1080",
    "3360x1440",
    "2560x2048",
    "2560x1600",
    "2880x1800",
    "3000x2000",
    "3840x2160",
    "4096x4096",
    "4500x3000",
    "5120x4096",
    "800x600",
)
RETRO_RESOLUTIONS: tuple[str, ...] = ("800x600", "1280x960", "1600x1200", "1920x1200")
RETRO_REFERENCE_RESOLUTION = "1280x960"
RETRO_FORMAT = "png"
XFCE_RATIOS: tuple[str, ...] = ("1-1", "16-10", "16-9", "21-9", "3-2", "4-3", "5-4")


def install_path(rel_path: str) -> str:
    return "/" + rel_path.lstrip("/")


def entry_dir(entry_name: str) -> str:
    return posixpath.join(WALLPAPERS_DIR, entry_name)


def entry_images_dir(entry_name: str) -> str:
    return posixpath.join(WALLPAPERS_DIR, entry_name, "contents", "images")


def desktop_file_path(entry_name: str) -> str:
    return posixpath.join(WALLPAPERS_DIR, entry_name, "metadata.desktop")


def screenshot_path(entry_name: str, fmt: str) -> str:
    return posixpath.join(WALLPAPERS_DIR, entry_name, f"screenshot.{fmt}")


def resolution_path(entry_name: str, resolution: str, fmt: str) -> str:
    return posixpath.join(entry_images_dir(entry_name), f"{resolution}.{fmt}")


def ratio_path(entry_name: str, ratio: str, fmt: str) -> str:
    return posixpath.join(XFCE_DIR, f"{entry_name}-{ratio}.{fmt}")


def canonical_image_path(entry_name: str, fmt: str, *, retro: bool = False) -> str:
    """Path of the one real image every alias of an entry points at."""
    if retro:
        return resolution_path(entry_name, RETRO_REFERENCE_RESOLUTION, RETRO_FORMAT)
    return posixpath.join(BACKGROUNDS_DIR, entry_name, f"{entry_name}.{fmt}")


def pack_descriptor_name(pack_display_name: str) -> str:
    return f"{pack_display_name}.xml"


def pack_descriptor_path(pack_display_name: str) -> str:
    return posixpath.join(PROPERTIES_DIR, pack_descriptor_name(pack_display_name))
