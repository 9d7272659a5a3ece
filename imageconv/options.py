"""Handler settings and per-save options."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any

from .colorspace import RGB, parse_color
from .exceptions import ValueOutOfRangeError
from .logger import get_logger

_logger = get_logger("options")

DEFAULT_BACKGROUND = "#ffffff"


@dataclass(frozen=True)
class HandlerSettings:
    """Settings a handler is built from.

    ``reference_name`` becomes the handler's ``name``. ``options`` holds
    backend specific values, e.g. ``background`` (colour used when
    transparency has to be flattened) or ``vips_cache_max``.
    """

    reference_name: str
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.reference_name, str) or not self.reference_name:
            raise ValueOutOfRangeError("reference_name", self.reference_name, "a non-empty string")
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    def option(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)

    @property
    def background(self) -> RGB:
        return parse_color(self.options.get("background", DEFAULT_BACKGROUND), "background")


@dataclass(frozen=True)
class SaveOptions:
    """How an image is written. Unset values leave the backend default."""

    quality: int | None = None  # 0-100, lossy formats
    compression: int | None = None  # 0-9, PNG
    transparency_replacement_color: RGB | None = None

    def __post_init__(self) -> None:
        if self.quality is not None:
            _check_range("quality", self.quality, 0, 100)
        if self.compression is not None:
            _check_range("compression", self.compression, 0, 9)
        if self.transparency_replacement_color is not None:
            color = parse_color(self.transparency_replacement_color, "transparency_replacement_color")
            object.__setattr__(self, "transparency_replacement_color", color)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> SaveOptions:
        """Build options from a plain mapping, ignoring keys we do not know."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        for key in data:
            if key not in known:
                _logger.warning("ignoring unknown save option %r", key)
        return cls(**{k: v for k, v in data.items() if k in known})


def _check_range(name: str, value: Any, low: int, high: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
        raise ValueOutOfRangeError(name, value, f"an integer between {low} and {high}")
