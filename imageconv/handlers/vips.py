"""Image handler backed by libvips through pyvips.

pyvips is imported on first use, so building a handler (or importing this
module) works without libvips installed; loading an image then fails with a
clear ImportError.
"""

from __future__ import annotations

import contextlib
from pathlib import Path
from typing import Any

import numpy as np

from ..colorspace import GREY, LUMA, MONOCHROME, MONOCHROME_THRESHOLD, RGB, SEPIA, SEPIA_MATRIX
from ..geometry import Canvas, CropBox
from ..logger import get_logger
from ..mime import MimeCapability, extension_for
from ..options import SaveOptions
from .base import ImageHandler

_logger = get_logger("vips")

RGB_CHANNELS = 3

_LOADER_MIMES = {
    "jpegload": "image/jpeg",
    "pngload": "image/png",
    "gifload": "image/gif",
    "webpload": "image/webp",
    "tiffload": "image/tiff",
}
_MIMES = tuple(_LOADER_MIMES.values())
_OPAQUE_MIMES = {"image/jpeg"}

_pyvips: Any | None = None
_cache_max: int | None = None


def _get_pyvips_module(cache_max: int = 0) -> Any:
    """Import pyvips once and apply the operation cache size.

    The libvips cache is shared by the whole process, so the handler that
    touched pyvips last decides its size.
    """
    global _pyvips, _cache_max
    if _pyvips is None:
        import pyvips  # type: ignore

        # Keep the operation cache small; handlers hold decoded images themselves.
        pyvips.cache_set_max_mem(0)
        pyvips.cache_set_max_files(0)
        _pyvips = pyvips
    if cache_max != _cache_max:
        _logger.debug("libvips operation cache: %d operations", cache_max)
        _pyvips.cache_set_max(cache_max)
        _cache_max = cache_max
    return _pyvips


def _srgb(image: Any) -> Any:
    """Grey images get three colour bands (plus alpha, if present)."""
    if image.bands - int(image.hasalpha()) < RGB_CHANNELS:
        image = image.colourspace("srgb")
    return image


def _uchar(image: Any) -> Any:
    if image.format != "uchar":
        image = image.rint().cast("uchar")
    return image


class VipsHandler(ImageHandler):
    """Handler for libvips."""

    capability = MimeCapability.of(_MIMES, _MIMES)

    @property
    def _vips(self) -> Any:
        return _get_pyvips_module(int(self.settings.option("vips_cache_max", 0)))

    def _load_image(self, file: str) -> tuple[Any, str | None]:
        image = self._vips.Image.new_from_file(file, access="random")
        loader = ""
        with contextlib.suppress(Exception):
            loader = image.get("vips-loader")
        # Decode now so broken files fail here and the file is not held open.
        image = image.copy_memory()
        if image.interpretation not in ("srgb", "b-w"):
            with contextlib.suppress(Exception):
                image = image.colourspace("srgb")
        image = _uchar(image)
        return image, _LOADER_MIMES.get(loader.split("_")[0])

    def _save_image(self, image: Any, file: str, mime: str, options: SaveOptions) -> None:
        if mime in _OPAQUE_MIMES and image.hasalpha():
            image = self._flatten(image, options.transparency_replacement_color or self.settings.background)

        params: dict[str, Any] = {}
        if options.quality is not None and mime in ("image/jpeg", "image/webp"):
            params["Q"] = options.quality
        if options.compression is not None and mime == "image/png":
            params["compression"] = options.compression
        data = image.write_to_buffer(extension_for(mime), **params)
        Path(file).write_bytes(data)

    def _size(self, image: Any) -> tuple[int, int]:
        return image.width, image.height

    def _resize(self, image: Any, width: int, height: int) -> Any:
        hscale = width / image.width
        vscale = height / image.height
        if image.hasalpha():
            resized = image.premultiply().resize(hscale, vscale=vscale).unpremultiply()
        else:
            resized = image.resize(hscale, vscale=vscale)
        return _uchar(resized).copy_memory()

    def _crop(self, image: Any, box: CropBox) -> Any:
        return image.crop(box.left, box.top, box.width, box.height).copy_memory()

    def _paste_on_canvas(self, image: Any, canvas: Canvas) -> Any:
        image = _srgb(image)
        background = list(canvas.color) + [255] * (image.bands - RGB_CHANNELS)
        return image.embed(
            canvas.left,
            canvas.top,
            canvas.width,
            canvas.height,
            extend="background",
            background=background,
        ).copy_memory()

    def _flatten(self, image: Any, background: RGB) -> Any:
        image = _srgb(image)
        if image.hasalpha():
            image = image.flatten(background=list(background))
        return _uchar(image).copy_memory()

    def _colorspace(self, image: Any, space: str) -> Any:
        image = _srgb(image)
        alpha = None
        if image.hasalpha():
            alpha = image[image.bands - 1]
            image = image.extract_band(0, n=image.bands - 1)

        if space == SEPIA:
            result = _uchar(image.recomb([list(row) for row in SEPIA_MATRIX]))
        else:
            grey = _uchar(image.recomb([list(LUMA)]))
            if space == MONOCHROME:
                grey = (grey >= MONOCHROME_THRESHOLD).ifthenelse(255, 0).cast("uchar")
            elif space != GREY:
                raise ValueError(f"unknown colorspace {space!r}")
            result = grey.bandjoin([grey, grey])
        result = result.copy(interpretation="srgb")

        if alpha is not None:
            result = result.bandjoin(alpha)
        return result.copy_memory()

    def _to_array(self, image: Any) -> np.ndarray:
        image = _uchar(_srgb(image))
        mem = image.write_to_memory()
        array = np.frombuffer(mem, dtype=np.uint8).reshape(image.height, image.width, image.bands)
        return array.copy()
