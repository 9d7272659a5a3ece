"""Exceptions raised by image handlers.

Every exception derives from :class:`ImageError`, so callers can catch the
whole family in one place. Each one keeps the offending values as attributes
so a failing call can be reconstructed from the exception alone.
"""

from __future__ import annotations

from typing import Any


class ImageError(Exception):
    """Base class for all imageconv errors."""

    reference: Any = None

    def with_reference(self, reference: Any) -> ImageError:
        """Record the image reference the error happened on, once."""
        if self.reference is None and reference is not None:
            self.reference = reference
            if self.args:
                self.args = (f"{self.args[0]} (reference {reference!r})", *self.args[1:])
        return self


class InvalidReferenceError(ImageError):
    """Image reference is unknown, already closed or owned by another handler."""

    def __init__(self, reference: Any, reason: str = "no valid image for reference") -> None:
        self.reference = reference
        self.reason = reason
        super().__init__(f"Invalid image reference {reference!r}: {reason}.")


class FileNameInvalidError(ImageError, ValueError):
    def __init__(self, file: str) -> None:
        self.file = file
        super().__init__(f"The file name {file!r} contains an illegal character (', \" or $).")


class FilterNotAvailableError(ImageError):
    def __init__(self, filter_name: str, handler_name: str | None = None) -> None:
        self.filter_name = filter_name
        self.handler_name = handler_name
        where = f" in handler {handler_name!r}" if handler_name else ""
        super().__init__(f"Filter {filter_name!r} is not available{where}.")


class MissingFilterParameterError(ImageError):
    def __init__(self, filter_name: str, parameter: str) -> None:
        self.filter_name = filter_name
        self.parameter = parameter
        super().__init__(f"Filter {filter_name!r} requires parameter {parameter!r}.")


class ValueOutOfRangeError(ImageError, ValueError):
    """A numeric parameter violates its domain (non-positive size, crop outside image...)."""

    def __init__(self, parameter: str, value: Any, expected: str, filter_name: str | None = None) -> None:
        self.parameter = parameter
        self.value = value
        self.expected = expected
        self.filter_name = filter_name
        prefix = f"Filter {filter_name!r}: " if filter_name else ""
        super().__init__(f"{prefix}parameter {parameter!r} is {value!r}, expected {expected}.")


class FilterFailedError(ImageError):
    def __init__(self, filter_name: str, reason: str, reference: Any = None) -> None:
        self.filter_name = filter_name
        self.reason = reason
        self.reference = reference
        ref = f" on reference {reference!r}" if reference is not None else ""
        super().__init__(f"Filter {filter_name!r} failed{ref}: {reason}")


class MimeTypeUnsupportedError(ImageError):
    def __init__(self, mime: str | None, direction: str, handler_name: str | None = None) -> None:
        self.mime = mime
        self.direction = direction
        self.handler_name = handler_name
        where = f" by handler {handler_name!r}" if handler_name else ""
        super().__init__(f"MIME type {mime!r} is not supported as {direction}{where}.")


class PropertyNotFoundError(ImageError, AttributeError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No such property name {name!r}.")


class PropertyReadOnlyError(ImageError, AttributeError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"The property {name!r} is read-only.")


class FileNotProcessableError(ImageError):
    """The backend could not write the image to the given file."""

    def __init__(self, file: str, reason: str) -> None:
        self.file = file
        self.reason = reason
        super().__init__(f"File {file!r} could not be processed: {reason}")
