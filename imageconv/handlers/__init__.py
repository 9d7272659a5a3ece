"""Image handlers, one per backend engine.

Usage:
    from imageconv.handlers import PillowHandler
    from imageconv.options import HandlerSettings

    handler = PillowHandler(HandlerSettings("pillow"))
"""

from .base import ImageHandler
from .pillow import PillowHandler
from .vips import VipsHandler

HANDLER_CLASSES: dict[str, type[ImageHandler]] = {
    "pillow": PillowHandler,
    "vips": VipsHandler,
}

__all__ = ["HANDLER_CLASSES", "ImageHandler", "PillowHandler", "VipsHandler"]
