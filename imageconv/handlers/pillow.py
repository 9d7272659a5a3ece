"""Image handler backed by Pillow."""

from __future__ import annotations

import contextlib
from typing import Any

import numpy as np
from PIL import Image

from ..colorspace import GREY, MONOCHROME, MONOCHROME_THRESHOLD, RGB, SEPIA, SEPIA_MATRIX
from ..geometry import Canvas, CropBox
from ..logger import get_logger
from ..mime import MimeCapability
from ..options import SaveOptions
from .base import ImageHandler

_logger = get_logger("pillow")

_FORMATS = {
    "image/jpeg": "JPEG",
    "image/png": "PNG",
    "image/gif": "GIF",
    "image/webp": "WEBP",
    "image/tiff": "TIFF",
    "image/bmp": "BMP",
}
_FORMAT_MIMES = {fmt: mime for mime, fmt in _FORMATS.items()}
# Multi-picture JPEGs from cameras are still JPEGs.
_FORMAT_MIMES["MPO"] = "image/jpeg"

# Formats that cannot store an alpha channel
_OPAQUE_FORMATS = {"JPEG", "BMP"}

_WIDE_GREY_MODES = ("I;16", "I;16B", "I;16L", "I")

_SEPIA = tuple(v for row in SEPIA_MATRIX for v in (*row, 0))


def _has_alpha(image: Image.Image) -> bool:
    return "A" in image.getbands() or "transparency" in image.info


def _normalized(image: Image.Image) -> Image.Image:
    """Bring decoded images into L, LA, RGB or RGBA mode.

    16-bit grey keeps its high byte, the way libvips reduces it. A PNG
    transparency key becomes a real alpha band.
    """
    if image.mode in _WIDE_GREY_MODES:
        return image.convert("I").point(lambda v: v * (1 / 256)).convert("L")
    if image.mode in ("LA", "RGBA"):
        return image
    if image.mode in ("L", "RGB"):
        if "transparency" not in image.info:
            return image
        return image.convert("LA" if image.mode == "L" else "RGBA")
    return image.convert("RGBA" if _has_alpha(image) else "RGB")


class PillowHandler(ImageHandler):
    """Handler for the Pillow imaging library."""

    capability = MimeCapability.of(_FORMATS, _FORMATS)

    def _load_image(self, file: str) -> tuple[Any, str | None]:
        image = Image.open(file)
        try:
            image.load()
        except Exception:
            image.close()
            raise
        mime = _FORMAT_MIMES.get(image.format or "")
        normalized = _normalized(image)
        if normalized is not image:
            image.close()
        return normalized, mime

    def _save_image(self, image: Image.Image, file: str, mime: str, options: SaveOptions) -> None:
        fmt = _FORMATS[mime]
        if fmt in _OPAQUE_FORMATS and _has_alpha(image):
            image = self._flatten(image, options.transparency_replacement_color or self.settings.background)

        params: dict[str, Any] = {}
        if options.quality is not None and fmt in ("JPEG", "WEBP"):
            params["quality"] = options.quality
        if options.compression is not None and fmt == "PNG":
            params["compress_level"] = options.compression
        image.save(file, format=fmt, **params)

    def _size(self, image: Image.Image) -> tuple[int, int]:
        return image.size

    def _resize(self, image: Image.Image, width: int, height: int) -> Image.Image:
        return image.resize((width, height), Image.Resampling.LANCZOS)

    def _crop(self, image: Image.Image, box: CropBox) -> Image.Image:
        cropped = image.crop((box.left, box.top, box.left + box.width, box.top + box.height))
        cropped.load()
        return cropped

    def _paste_on_canvas(self, image: Image.Image, canvas: Canvas) -> Image.Image:
        mode = "RGBA" if _has_alpha(image) else "RGB"
        image = image.convert(mode)
        fill = canvas.color + (255,) if mode == "RGBA" else canvas.color
        result = Image.new(mode, (canvas.width, canvas.height), fill)
        result.paste(image, (canvas.left, canvas.top))
        return result

    def _flatten(self, image: Image.Image, background: RGB) -> Image.Image:
        if not _has_alpha(image):
            return image.convert("RGB")
        rgba = image.convert("RGBA")
        result = Image.new("RGB", rgba.size, background)
        result.paste(rgba, mask=rgba.getchannel("A"))
        return result

    def _colorspace(self, image: Image.Image, space: str) -> Image.Image:
        alpha = image.getchannel("A") if "A" in image.getbands() else None
        rgb = image.convert("RGB")
        if space == SEPIA:
            result = rgb.convert("RGB", _SEPIA)
        else:
            grey = rgb.convert("L")
            if space == MONOCHROME:
                grey = grey.point(lambda v: 255 if v >= MONOCHROME_THRESHOLD else 0)
            elif space != GREY:
                raise ValueError(f"unknown colorspace {space!r}")
            result = grey.convert("RGB")
        if alpha is not None:
            result.putalpha(alpha)
        return result

    def _to_array(self, image: Image.Image) -> np.ndarray:
        mode = "RGBA" if "A" in image.getbands() else "RGB"
        return np.asarray(image.convert(mode), dtype=np.uint8).copy()

    def _release(self, image: Image.Image) -> None:
        with contextlib.suppress(Exception):
            image.close()
