"""Colour helpers and the colorspace filter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from .exceptions import MissingFilterParameterError, ValueOutOfRangeError

RGB = tuple[int, int, int]

GREY = "grey"
MONOCHROME = "monochrome"
SEPIA = "sepia"
COLORSPACES = (GREY, MONOCHROME, SEPIA)

# Rec. 601 luma weights
LUMA = (0.299, 0.587, 0.114)

SEPIA_MATRIX = (
    (0.393, 0.769, 0.189),
    (0.349, 0.686, 0.168),
    (0.272, 0.534, 0.131),
)

MONOCHROME_THRESHOLD = 128


def parse_color(value: Any, parameter: str = "color") -> RGB:
    """Normalise ``#rrggbb``/``#rgb`` strings and RGB sequences to an int triple."""
    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if len(text) == 3:
            text = "".join(c * 2 for c in text)
        if len(text) == 6:
            try:
                return (int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))
            except ValueError:
                pass
        raise ValueOutOfRangeError(parameter, value, "a '#rrggbb' colour")
    try:
        r, g, b = value
    except (TypeError, ValueError):
        raise ValueOutOfRangeError(parameter, value, "an (r, g, b) triple") from None
    rgb = (r, g, b)
    if not all(isinstance(c, int) and not isinstance(c, bool) and 0 <= c <= 255 for c in rgb):
        raise ValueOutOfRangeError(parameter, value, "channel values between 0 and 255")
    return rgb


@dataclass(frozen=True)
class Colorspace:
    """Convert the image to grey, monochrome (black/white) or sepia tones."""

    name: ClassVar[str] = "colorspace"

    space: str

    def __post_init__(self) -> None:
        if self.space is None:
            raise MissingFilterParameterError(self.name, "space")
        if self.space not in COLORSPACES:
            raise ValueOutOfRangeError("space", self.space, f"one of {', '.join(COLORSPACES)}", self.name)
