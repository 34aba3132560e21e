"""Descriptor text for desktop environments.

`render_entry_desktop` produces the KDE Plasma `metadata.desktop` written next to
each wallpaper package; `render_pack_xml` produces the GNOME/MATE wallpaper list
shared by the whole pack.
"""

from __future__ import annotations

from typing import Sequence
from xml.sax.saxutils import escape

from . import paths
from .contributors import ResolvedEntry


def _desktop_value(value: str) -> str:
    # Desktop Entry values are single-line; backslash escapes are the only quoting available.
    return value.replace("\\", "\\\\").replace("\n", "\\n").replace("\r", "\\r").replace("\t", "\\t")


def render_entry_desktop(entry: ResolvedEntry) -> str:
    lines = [
        "[Desktop Entry]",
        f"Name={_desktop_value(entry.title)}",
        f"X-KDE-PluginInfo-Name={_desktop_value(entry.stable_entry_name)}",
        f"X-KDE-PluginInfo-Author={_desktop_value(entry.artist_name)}",
        f"X-KDE-PluginInfo-Email={_desktop_value(entry.artist_email)}",
        f"X-KDE-PluginInfo-License={_desktop_value(entry.license)}",
    ]
    if entry.tags:
        lines.append("Keywords=" + "".join(f"{_desktop_value(tag)};" for tag in entry.tags))
    return "\n".join(lines) + "\n"


def render_pack_xml(entries: Sequence[ResolvedEntry]) -> str:
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<!DOCTYPE wallpapers SYSTEM "gnome-wp-list.dtd">',
        "<wallpapers>",
    ]
    for entry in entries:
        lines.extend(
            [
                '  <wallpaper deleted="false">',
                f"    <name>{escape(entry.title)}</name>",
                f"    <filename>{escape(paths.install_path(entry.canonical_dest_path))}</filename>",
                "    <options>zoom</options>",
                "    <pcolor>#000000</pcolor>",
                "    <scolor>#000000</scolor>",
                "    <shade_type>solid</shade_type>",
                "  </wallpaper>",
            ]
        )
    lines.append("</wallpapers>")
    return "\n".join(lines) + "\n"
