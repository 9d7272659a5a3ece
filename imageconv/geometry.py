"""Geometry filters: scaling and cropping.

Each operation is a frozen dataclass that validates its parameters when it is
built. ``plan(width, height)`` turns it into a :class:`GeometryPlan` for an
image of the given size (or ``None`` when nothing has to change). Plans are
pure arithmetic, so every backend ends up with the same target dimensions;
the backend only supplies the pixel work.

Rounding is half-up on all backends, e.g. 0.5 px becomes 1 px.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, ClassVar, NamedTuple

from .colorspace import RGB, parse_color
from .exceptions import MissingFilterParameterError, ValueOutOfRangeError


class Direction(IntEnum):
    """Which way a scale may go."""

    BOTH = 1  # enlarge or shrink to fit the box
    DOWN = 2  # only shrink images larger than the box
    UP = 3  # only enlarge images smaller than the box; result may exceed the box


class CropBox(NamedTuple):
    """Crop rectangle, top-left origin."""

    left: int
    top: int
    width: int
    height: int


class Canvas(NamedTuple):
    """Background the resized image is pasted onto at (left, top)."""

    width: int
    height: int
    left: int
    top: int
    color: RGB


@dataclass(frozen=True)
class GeometryPlan:
    """Resize to (width, height), then crop and/or paste onto a canvas."""

    width: int
    height: int
    crop: CropBox | None = None
    canvas: Canvas | None = None

    @property
    def size(self) -> tuple[int, int]:
        """Final dimensions after all steps."""
        if self.canvas is not None:
            return self.canvas.width, self.canvas.height
        if self.crop is not None:
            return self.crop.width, self.crop.height
        return self.width, self.height


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _positive_int(filter_name: str, parameter: str, value: Any) -> None:
    if value is None:
        raise MissingFilterParameterError(filter_name, parameter)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueOutOfRangeError(parameter, value, "a positive integer", filter_name)


def _non_negative_int(filter_name: str, parameter: str, value: Any) -> None:
    if value is None:
        raise MissingFilterParameterError(filter_name, parameter)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueOutOfRangeError(parameter, value, "an integer >= 0", filter_name)


def _positive_number(filter_name: str, parameter: str, value: Any) -> None:
    if value is None:
        raise MissingFilterParameterError(filter_name, parameter)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not value > 0:
        raise ValueOutOfRangeError(parameter, value, "a number > 0", filter_name)


def _direction(filter_name: str, value: Any) -> Direction:
    if value is None:
        raise MissingFilterParameterError(filter_name, "direction")
    try:
        return Direction(value)
    except ValueError:
        raise ValueOutOfRangeError(
            "direction", value, "Direction.BOTH, Direction.DOWN or Direction.UP", filter_name
        ) from None


def _scaled(filter_name: str, width: int, height: int, factor: float) -> tuple[int, int]:
    new_width = round_half_up(width * factor)
    new_height = round_half_up(height * factor)
    _check_result(filter_name, new_width, new_height)
    return new_width, new_height


def _check_result(filter_name: str, width: int, height: int) -> None:
    # A resize that rounds to zero pixels would produce a degenerate image.
    if width < 1:
        raise ValueOutOfRangeError("width", width, "a result of at least 1 pixel", filter_name)
    if height < 1:
        raise ValueOutOfRangeError("height", height, "a result of at least 1 pixel", filter_name)


def _directed(filter_name: str, width: int, height: int, factor: float, direction: Direction) -> GeometryPlan | None:
    if direction is Direction.DOWN and factor >= 1:
        return None
    if direction is Direction.UP and factor <= 1:
        return None
    new_size = _scaled(filter_name, width, height, factor)
    if new_size == (width, height):
        return None
    return GeometryPlan(*new_size)


@dataclass(frozen=True)
class Scale:
    """Fit the image into a width x height box, keeping its aspect ratio."""

    name: ClassVar[str] = "scale"

    width: int
    height: int
    direction: Direction = Direction.BOTH

    def __post_init__(self) -> None:
        _positive_int(self.name, "width", self.width)
        _positive_int(self.name, "height", self.height)
        object.__setattr__(self, "direction", _direction(self.name, self.direction))

    def plan(self, width: int, height: int) -> GeometryPlan | None:
        factor = min(self.width / width, self.height / height)
        return _directed(self.name, width, height, factor, self.direction)


@dataclass(frozen=True)
class ScaleWidth:
    """Scale to the given width; height follows the aspect ratio."""

    name: ClassVar[str] = "scaleWidth"

    width: int
    direction: Direction = Direction.BOTH

    def __post_init__(self) -> None:
        _positive_int(self.name, "width", self.width)
        object.__setattr__(self, "direction", _direction(self.name, self.direction))

    def plan(self, width: int, height: int) -> GeometryPlan | None:
        return _directed(self.name, width, height, self.width / width, self.direction)


@dataclass(frozen=True)
class ScaleHeight:
    """Scale to the given height; width follows the aspect ratio."""

    name: ClassVar[str] = "scaleHeight"

    height: int
    direction: Direction = Direction.BOTH

    def __post_init__(self) -> None:
        _positive_int(self.name, "height", self.height)
        object.__setattr__(self, "direction", _direction(self.name, self.direction))

    def plan(self, width: int, height: int) -> GeometryPlan | None:
        return _directed(self.name, width, height, self.height / height, self.direction)


@dataclass(frozen=True)
class ScalePercent:
    """Scale each axis by its own percentage; the ratio is not kept."""

    name: ClassVar[str] = "scalePercent"

    width: float
    height: float

    def __post_init__(self) -> None:
        _positive_number(self.name, "width", self.width)
        _positive_number(self.name, "height", self.height)

    def plan(self, width: int, height: int) -> GeometryPlan | None:
        new_width = round_half_up(width * self.width / 100)
        new_height = round_half_up(height * self.height / 100)
        _check_result(self.name, new_width, new_height)
        if (new_width, new_height) == (width, height):
            return None
        return GeometryPlan(new_width, new_height)


@dataclass(frozen=True)
class ScaleExact:
    """Scale to exactly width x height, whatever the original size."""

    name: ClassVar[str] = "scaleExact"

    width: int
    height: int

    def __post_init__(self) -> None:
        _positive_int(self.name, "width", self.width)
        _positive_int(self.name, "height", self.height)

    def plan(self, width: int, height: int) -> GeometryPlan | None:
        if (self.width, self.height) == (width, height):
            return None
        return GeometryPlan(self.width, self.height)


@dataclass(frozen=True)
class Crop:
    """Keep the rectangle [x, x+width) x [y, y+height)."""

    name: ClassVar[str] = "crop"

    x: int
    y: int
    width: int
    height: int

    def __post_init__(self) -> None:
        _non_negative_int(self.name, "x", self.x)
        _non_negative_int(self.name, "y", self.y)
        _positive_int(self.name, "width", self.width)
        _positive_int(self.name, "height", self.height)

    def plan(self, width: int, height: int) -> GeometryPlan | None:
        if self.x + self.width > width:
            raise ValueOutOfRangeError(
                "width", self.width, f"x + width <= image width {width} (x={self.x})", self.name
            )
        if self.y + self.height > height:
            raise ValueOutOfRangeError(
                "height", self.height, f"y + height <= image height {height} (y={self.y})", self.name
            )
        if (self.x, self.y, self.width, self.height) == (0, 0, width, height):
            return None
        return GeometryPlan(width, height, crop=CropBox(self.x, self.y, self.width, self.height))


@dataclass(frozen=True)
class CroppedThumbnail:
    """Fill the whole box, cutting off what sticks out (centred)."""

    name: ClassVar[str] = "croppedThumbnail"

    width: int
    height: int

    def __post_init__(self) -> None:
        _positive_int(self.name, "width", self.width)
        _positive_int(self.name, "height", self.height)

    def plan(self, width: int, height: int) -> GeometryPlan | None:
        factor = max(self.width / width, self.height / height)
        scaled_width, scaled_height = _scaled(self.name, width, height, factor)
        scaled_width = max(scaled_width, self.width)
        scaled_height = max(scaled_height, self.height)
        crop = CropBox(
            (scaled_width - self.width) // 2,
            (scaled_height - self.height) // 2,
            self.width,
            self.height,
        )
        return GeometryPlan(scaled_width, scaled_height, crop=crop)


@dataclass(frozen=True)
class FilledThumbnail:
    """Fit the image into the box and fill the margins with a colour."""

    name: ClassVar[str] = "filledThumbnail"

    width: int
    height: int
    color: RGB = (255, 255, 255)

    def __post_init__(self) -> None:
        _positive_int(self.name, "width", self.width)
        _positive_int(self.name, "height", self.height)
        if self.color is None:
            raise MissingFilterParameterError(self.name, "color")
        object.__setattr__(self, "color", parse_color(self.color))

    def plan(self, width: int, height: int) -> GeometryPlan | None:
        factor = min(self.width / width, self.height / height)
        scaled_width, scaled_height = _scaled(self.name, width, height, factor)
        scaled_width = min(scaled_width, self.width)
        scaled_height = min(scaled_height, self.height)
        canvas = Canvas(
            self.width,
            self.height,
            (self.width - scaled_width) // 2,
            (self.height - scaled_height) // 2,
            self.color,
        )
        return GeometryPlan(scaled_width, scaled_height, canvas=canvas)


GeometryOperation = (
    Scale | ScaleWidth | ScaleHeight | ScalePercent | ScaleExact | Crop | CroppedThumbnail | FilledThumbnail
)

GEOMETRY_OPERATIONS: tuple[type, ...] = (
    Scale,
    ScaleWidth,
    ScaleHeight,
    ScalePercent,
    ScaleExact,
    Crop,
    CroppedThumbnail,
    FilledThumbnail,
)
