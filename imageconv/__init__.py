"""Backend-agnostic image loading, filtering and conversion.

Usage:
    from imageconv import HandlerSettings, PillowHandler, Scale

    with PillowHandler(HandlerSettings("pillow")) as handler:
        with handler.opened("photo.png") as ref:
            handler.apply_filter(ref, Scale(400, 400))
            handler.save(ref, "photo.jpg", mime="image/jpeg")
"""

from .colorspace import Colorspace
from .exceptions import (
    FileNameInvalidError,
    FileNotProcessableError,
    FilterFailedError,
    FilterNotAvailableError,
    ImageError,
    InvalidReferenceError,
    MimeTypeUnsupportedError,
    MissingFilterParameterError,
    PropertyNotFoundError,
    PropertyReadOnlyError,
    ValueOutOfRangeError,
)
from .filters import Filter
from .geometry import (
    Crop,
    CroppedThumbnail,
    Direction,
    FilledThumbnail,
    Scale,
    ScaleExact,
    ScaleHeight,
    ScalePercent,
    ScaleWidth,
)
from .handlers import ImageHandler, PillowHandler, VipsHandler
from .mime import MimeCapability, needs_transparency_conversion
from .options import HandlerSettings, SaveOptions
from .reference import ImageReference

__all__ = [
    "Colorspace",
    "Crop",
    "CroppedThumbnail",
    "Direction",
    "FileNameInvalidError",
    "FileNotProcessableError",
    "FilledThumbnail",
    "Filter",
    "FilterFailedError",
    "FilterNotAvailableError",
    "HandlerSettings",
    "ImageError",
    "ImageHandler",
    "ImageReference",
    "InvalidReferenceError",
    "MimeCapability",
    "MimeTypeUnsupportedError",
    "MissingFilterParameterError",
    "PillowHandler",
    "PropertyNotFoundError",
    "PropertyReadOnlyError",
    "SaveOptions",
    "Scale",
    "ScaleExact",
    "ScaleHeight",
    "ScalePercent",
    "ScaleWidth",
    "ValueOutOfRangeError",
    "VipsHandler",
    "needs_transparency_conversion",
]
