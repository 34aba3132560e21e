"""Image transforms used to derive per-resolution wallpapers.

Two capabilities, each behind a small protocol so the derivation pipeline does
not care how they are implemented:

  - Resizer: (source image path, "WIDTHxHEIGHT") -> raw PNG bytes.
  - Recompressor: PNG bytes -> smaller PNG bytes with identical pixels.

Primary resize backend: ImageMagick invoked via CLI. A Pillow backend does the
same work in-process and is selected explicitly (`derive.resize_backend`).
"""

from __future__ import annotations

import io
import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from PIL import Image

from .errors import ToolNotFoundError, TransformError

CONVERT_ENV_VAR = "WALLPACK_CONVERT_PATH"
PALETTE_COLORS = 256


class Resizer(Protocol):
    def resize(self, source: str, resolution: str) -> bytes: ...


class Recompressor(Protocol):
    def recompress(self, data: bytes) -> bytes: ...


def parse_resolution(resolution: str) -> tuple[int, int]:
    width, sep, height = resolution.partition("x")
    if not sep or not width.isdigit() or not height.isdigit():
        raise ValueError(f"Invalid resolution: {resolution!r}")
    parsed = int(width), int(height)
    if parsed[0] <= 0 or parsed[1] <= 0:
        raise ValueError(f"Invalid resolution: {resolution!r}")
    return parsed


def _fit_within(width: int, height: int, box_w: int, box_h: int) -> tuple[int, int]:
    """Largest (w, h) with the source aspect ratio that fits inside the box."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Invalid image size: {width}x{height}")
    scale = min(box_w / float(width), box_h / float(height))
    return max(1, int(round(width * scale))), max(1, int(round(height * scale)))


def find_imagemagick_binary(explicit_path: str | None = None) -> str | None:
    """
    Locate the ImageMagick executable.

    Search order:
      1) explicit_path
      2) env var WALLPACK_CONVERT_PATH
      3) PATH lookup for `convert`, then `magick`
    """
    candidates: list[str] = []

    if explicit_path:
        candidates.append(explicit_path)

    env_path = os.environ.get(CONVERT_ENV_VAR)
    if env_path:
        candidates.append(env_path)

    for name in ("convert", "magick"):
        found = shutil.which(name)
        if found:
            candidates.append(found)

    for candidate in candidates:
        p = Path(candidate)
        if p.exists() and p.is_file():
            return str(p)
    return None


@dataclass(frozen=True)
class ImageMagickResize:
    binary: str
    timeout_s: int = 10 * 60

    def command(self, source: str, resolution: str) -> list[str]:
        return [
            self.binary,
            source,
            "-gravity",
            "center",
            "-quality",
            "80",
            "-resize",
            resolution,
            "-colors",
            str(PALETTE_COLORS),
            "PNG8:-",
        ]

    def resize(self, source: str, resolution: str) -> bytes:
        cmd = self.command(source, resolution)
        try:
            proc = subprocess.run(
                cmd,
                check=False,
                capture_output=True,
                stdin=subprocess.DEVNULL,
                timeout=self.timeout_s,
            )
        except subprocess.TimeoutExpired as exc:
            raise TransformError(f"ImageMagick timed out after {self.timeout_s}s resizing {source} to {resolution}") from exc
        except OSError as exc:
            raise TransformError(f"Could not execute ImageMagick ({self.binary}): {exc}") from exc

        if proc.returncode != 0:
            stderr = (proc.stderr or b"").decode("utf-8", "replace").strip()
            raise TransformError(
                f"ImageMagick failed resizing {source} to {resolution}. "
                f"returncode={proc.returncode}. stderr={stderr[-2000:]!r}"
            )
        if not proc.stdout:
            raise TransformError(f"ImageMagick produced no output resizing {source} to {resolution}")
        return proc.stdout


@dataclass(frozen=True)
class PillowResize:
    """In-process resize: Lanczos fit within the box, then a 256-colour palette PNG."""

    def resize(self, source: str, resolution: str) -> bytes:
        box_w, box_h = parse_resolution(resolution)
        try:
            with Image.open(source) as im:
                rgb = im.convert("RGB")
        except OSError as exc:
            raise TransformError(f"Cannot read image {source}: {exc}") from exc

        width, height = _fit_within(rgb.width, rgb.height, box_w, box_h)
        resized = rgb.resize((width, height), resample=Image.Resampling.LANCZOS)
        paletted = resized.quantize(colors=PALETTE_COLORS)

        buffer = io.BytesIO()
        paletted.save(buffer, format="PNG")
        return buffer.getvalue()


@dataclass(frozen=True)
class PillowPngRecompressor:
    """
    Lossless PNG re-compression.

    preset:
        Effort from 0 (fastest) to 6 (smallest output), mapped onto zlib levels
        6..9 with Pillow's optimizer always on. Pixel data is never altered and
        the input is returned unchanged when re-encoding does not shrink it.
    """

    preset: int = 1

    def save_options(self) -> dict[str, object]:
        if not 0 <= self.preset <= 6:
            raise ValueError(f"PNG preset must be within 0..6, got {self.preset}")
        return {
            "compress_level": min(9, 6 + (self.preset + 1) // 2),
            "optimize": True,
        }

    def recompress(self, data: bytes) -> bytes:
        options = self.save_options()
        try:
            with Image.open(io.BytesIO(data)) as im:
                im.load()
                if im.format != "PNG":
                    raise TransformError(f"Expected PNG input for re-compression, got {im.format}")
                transparency = im.info.get("transparency")
                if transparency is not None:
                    options["transparency"] = transparency
                buffer = io.BytesIO()
                im.save(buffer, format="PNG", **options)
        except OSError as exc:
            raise TransformError(f"PNG re-compression failed: {exc}") from exc
        optimized = buffer.getvalue()
        if len(optimized) >= len(data):
            return data
        return optimized


def build_resizer(backend: str, *, binary: str | None = None, timeout_s: int = 10 * 60) -> Resizer:
    """
    Construct the configured resize backend.

    Raises:
        ToolNotFoundError: if ImageMagick is requested but cannot be found.
        ValueError: for an unknown backend name.
    """
    if backend == "pillow":
        return PillowResize()
    if backend != "imagemagick":
        raise ValueError(f"Unsupported resize backend: {backend}")

    found = find_imagemagick_binary(binary)
    if not found:
        raise ToolNotFoundError(
            "ImageMagick is required for the retro variant but was not found. "
            "Install it and either (a) put `convert` on PATH, (b) set "
            f"{CONVERT_ENV_VAR}, or (c) set derive.imagemagick_binary."
        )
    return ImageMagickResize(binary=found, timeout_s=timeout_s)
