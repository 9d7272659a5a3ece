"""Filter routing for handlers.

Callers either build typed operations (``Scale(400, 300)``) or pass the loose
``Filter(name, options)`` form. :class:`FilterDispatcher` turns both into a
validated operation, checks that the handler offers it and runs it against
the handler's backend hooks.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import MISSING, dataclass, field, fields
from typing import TYPE_CHECKING, Any

from .colorspace import Colorspace
from .exceptions import FilterFailedError, FilterNotAvailableError, ImageError, MissingFilterParameterError
from .geometry import GEOMETRY_OPERATIONS, GeometryOperation
from .logger import get_logger
from .metrics import metrics

if TYPE_CHECKING:
    from .handlers.base import ImageHandler
    from .reference import ImageReference

_logger = get_logger("filters")

Operation = GeometryOperation | Colorspace

OPERATION_TYPES: dict[str, type] = {cls.name: cls for cls in (*GEOMETRY_OPERATIONS, Colorspace)}


@dataclass(frozen=True)
class Filter:
    """A filter by name with its parameters, e.g. ``Filter("scale", {"width": 100, "height": 100})``."""

    name: str
    options: Mapping[str, Any] = field(default_factory=dict)


def build_operation(filter: Filter) -> Operation:
    """Create the typed operation for a loose filter description."""
    cls = OPERATION_TYPES.get(filter.name)
    if cls is None:
        raise FilterNotAvailableError(filter.name)
    kwargs: dict[str, Any] = {}
    for f in fields(cls):
        if f.name in filter.options:
            kwargs[f.name] = filter.options[f.name]
        elif f.default is MISSING and f.default_factory is MISSING:
            raise MissingFilterParameterError(filter.name, f.name)
    unknown = set(filter.options) - {f.name for f in fields(cls)}
    if unknown:
        _logger.debug("filter %s: ignoring unknown parameters %s", filter.name, sorted(unknown))
    return cls(**kwargs)


class FilterDispatcher:
    """Validates and routes operations to one handler's backend hooks."""

    def __init__(self, handler: ImageHandler) -> None:
        self.handler = handler

    def resolve(self, operation: Operation | Filter) -> Operation:
        if isinstance(operation, Filter):
            if not self.handler.has_filter(operation.name):
                raise FilterNotAvailableError(operation.name, self.handler.name)
            return build_operation(operation)
        name = getattr(operation, "name", None)
        if type(operation) not in OPERATION_TYPES.values() or not self.handler.has_filter(name):
            raise FilterNotAvailableError(str(name or type(operation).__name__), self.handler.name)
        return operation

    def dispatch(self, ref: ImageReference, image: Any, operation: Operation) -> Any | None:
        """Run ``operation`` on ``image`` and return the new native image.

        Returns None when the operation leaves the image as it is. Range
        errors are raised before the backend is called; anything the backend
        raises is reported as FilterFailedError.
        """
        plan = None
        if not isinstance(operation, Colorspace):
            plan = operation.plan(ref.width, ref.height)
            if plan is None:
                _logger.debug("%s on %s is a no-op", operation.name, ref.id)
                return None

        with metrics.track(f"{self.handler.name}.{operation.name}"):
            try:
                if isinstance(operation, Colorspace):
                    return self.handler._colorspace(image, operation.space)
                return self.handler._execute_plan(image, plan)
            except ImageError:
                raise
            except Exception as e:
                _logger.error("filter %s failed on %s: %s", operation.name, ref.id, e, exc_info=True)
                raise FilterFailedError(operation.name, str(e), ref.id) from e
