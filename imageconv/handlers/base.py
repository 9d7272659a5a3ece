"""Abstract image handler.

A handler wraps one image engine. Callers only talk to this interface:

    with PillowHandler(HandlerSettings("pillow")) as handler:
        with handler.opened("in.png") as ref:
            handler.apply_filter(ref, Scale(400, 400))
            handler.save(ref, "out.jpg", mime="image/jpeg")

Subclasses implement the ``_``-prefixed backend hooks. Everything that can be
checked without touching pixels (file names, MIME capabilities, filter
parameters, crop bounds) is checked here, before a hook runs. Hooks return new
native images instead of changing the old ones, so a failing filter leaves
the reference as it was.
"""

from __future__ import annotations

import contextlib
from abc import ABC, abstractmethod
from collections.abc import Iterator
from pathlib import Path
from typing import Any, ClassVar

import numpy as np

from ..colorspace import RGB
from ..exceptions import (
    FileNotProcessableError,
    FilterFailedError,
    ImageError,
    InvalidReferenceError,
    MimeTypeUnsupportedError,
    PropertyNotFoundError,
    PropertyReadOnlyError,
)
from ..filters import OPERATION_TYPES, Filter, FilterDispatcher, Operation
from ..geometry import Canvas, CropBox, GeometryPlan
from ..logger import get_logger
from ..mime import MimeCapability, mime_for_extension, needs_transparency_conversion
from ..options import HandlerSettings, SaveOptions
from ..path_utils import check_file_name
from ..reference import ImageReference

_logger = get_logger("handlers")


class ImageHandler(ABC):
    """Load, filter, convert and save images with one backend engine."""

    capability: ClassVar[MimeCapability]
    filter_names: ClassVar[tuple[str, ...]] = tuple(OPERATION_TYPES)

    def __init__(self, settings: HandlerSettings) -> None:
        self._settings = settings
        self._name = settings.reference_name
        self._images: dict[str, Any] = {}
        self._references: dict[str, ImageReference] = {}
        self._dispatcher = FilterDispatcher(self)

    # --- properties -----------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def settings(self) -> HandlerSettings:
        return self._settings

    def __setattr__(self, key: str, value: Any) -> None:
        if key.startswith("_"):
            super().__setattr__(key, value)
        elif key in ("name", "settings"):
            raise PropertyReadOnlyError(key)
        else:
            raise PropertyNotFoundError(key)

    def __getattr__(self, key: str) -> Any:
        # Only reached for attributes that do not exist.
        if key.startswith("_"):
            raise AttributeError(key)
        raise PropertyNotFoundError(key)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._name!r} ({len(self._references)} open)>"

    # --- capabilities ---------------------------------------------------

    def allows_input(self, mime: str | None) -> bool:
        return self.capability.allows_input(mime)

    def allows_output(self, mime: str | None) -> bool:
        return self.capability.allows_output(mime)

    def has_filter(self, name: str | None) -> bool:
        return name in self.filter_names

    def get_filter_names(self) -> list[str]:
        return list(self.filter_names)

    check_file_name = staticmethod(check_file_name)
    needs_transparency_conversion = staticmethod(needs_transparency_conversion)

    # --- lifecycle ------------------------------------------------------

    def load(self, file: str | Path, mime: str | None = None) -> ImageReference:
        """Decode ``file`` and return a reference to it.

        ``mime`` overrides the type the engine reports for the file.
        """
        file = self.check_file_name(file)
        if mime is not None and not self.allows_input(mime):
            raise MimeTypeUnsupportedError(mime, "input", self.name)
        if not Path(file).is_file():
            raise InvalidReferenceError(file, "file does not exist")

        try:
            image, detected = self._load_image(file)
        except Exception as e:
            _logger.debug("decode failed for %s: %s", file, e)
            raise InvalidReferenceError(file, f"cannot be decoded by {self.name}: {e}") from e

        mime = mime or detected or mime_for_extension(file)
        if not self.allows_input(mime):
            self._release(image)
            raise MimeTypeUnsupportedError(mime, "input", self.name)

        width, height = self._size(image)
        ref = ImageReference(self.name, file, mime, width, height)  # type: ignore[arg-type]
        self._images[ref.id] = image
        self._references[ref.id] = ref
        _logger.debug("loaded %s as %s (%dx%d %s)", file, ref.id, width, height, mime)
        return ref

    def save(
        self,
        ref: ImageReference,
        new_file: str | Path | None = None,
        mime: str | None = None,
        options: SaveOptions | None = None,
    ) -> str:
        """Write the image to ``new_file`` (default: where it was loaded from).

        A ``mime`` different from the current one converts the reference
        first. The reference stays open; call :meth:`close` when done.
        Returns the path written.
        """
        self._image_for(ref)
        target = self.check_file_name(new_file) if new_file is not None else ref.path
        options = options or SaveOptions()

        if mime is not None and mime != ref.mime:
            self._convert(ref, mime, options.transparency_replacement_color)
        if not self.allows_output(ref.mime):
            raise MimeTypeUnsupportedError(ref.mime, "output", self.name).with_reference(ref.id)

        try:
            self._save_image(self._images[ref.id], target, ref.mime, options)
        except ImageError:
            raise
        except Exception as e:
            _logger.error("saving %s to %s failed: %s", ref.id, target, e, exc_info=True)
            raise FileNotProcessableError(target, str(e)).with_reference(ref.id) from e
        _logger.debug("saved %s to %s (%s)", ref.id, target, ref.mime)
        return target

    def close(self, ref: ImageReference) -> None:
        """Release the image behind ``ref``. Closing twice is an error."""
        image = self._image_for(ref)
        del self._images[ref.id]
        del self._references[ref.id]
        ref.closed = True
        self._release(image)
        _logger.debug("closed %s", ref.id)

    def close_all(self) -> None:
        for ref in list(self._references.values()):
            self.close(ref)

    @contextlib.contextmanager
    def opened(self, file: str | Path, mime: str | None = None) -> Iterator[ImageReference]:
        """Load ``file`` for the duration of a ``with`` block."""
        ref = self.load(file, mime)
        try:
            yield ref
        finally:
            if not ref.closed:
                self.close(ref)

    def __enter__(self) -> ImageHandler:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close_all()

    # --- filters and conversion -----------------------------------------

    def apply_filter(self, ref: ImageReference, operation: Operation | Filter) -> None:
        image = self._image_for(ref)
        try:
            operation = self._dispatcher.resolve(operation)
            new_image = self._dispatcher.dispatch(ref, image, operation)
        except ImageError as e:
            e.with_reference(ref.id)
            raise
        if new_image is None:
            return
        self._commit(ref, image, new_image)
        _logger.debug("%s applied to %s -> %dx%d", operation.name, ref.id, ref.width, ref.height)

    def convert(self, ref: ImageReference, mime: str) -> None:
        """Change the output MIME type of ``ref``.

        Converting away from a format with transparency (image/png,
        image/gif) to one without flattens transparent pixels onto the
        ``background`` colour from the handler settings.
        """
        self._convert(ref, mime, None)

    def pixels(self, ref: ImageReference) -> np.ndarray:
        """Current pixels as a (height, width, 3 or 4) uint8 array."""
        return self._to_array(self._image_for(ref))

    def _convert(self, ref: ImageReference, mime: str, background: RGB | None) -> None:
        image = self._image_for(ref)
        if not self.allows_output(mime):
            raise MimeTypeUnsupportedError(mime, "output", self.name).with_reference(ref.id)
        if self.needs_transparency_conversion(ref.mime, mime):
            color = background or self._settings.background
            try:
                flattened = self._flatten(image, color)
            except Exception as e:
                _logger.error("flattening %s failed: %s", ref.id, e, exc_info=True)
                raise FilterFailedError("convert", str(e), ref.id) from e
            self._commit(ref, image, flattened)
        _logger.debug("converted %s: %s -> %s", ref.id, ref.mime, mime)
        ref.mime = mime

    def _image_for(self, ref: ImageReference) -> Any:
        if not isinstance(ref, ImageReference):
            raise InvalidReferenceError(ref, "not an image reference")
        if self._references.get(ref.id) is not ref:
            if ref.closed:
                raise InvalidReferenceError(ref.id, "reference is closed")
            raise InvalidReferenceError(ref.id, f"reference belongs to handler {ref.handler_name!r}, not {self.name!r}")
        return self._images[ref.id]

    def _commit(self, ref: ImageReference, old: Any, new: Any) -> None:
        width, height = self._size(new)
        self._images[ref.id] = new
        ref.width, ref.height = width, height
        if new is not old:
            self._release(old)

    def _execute_plan(self, image: Any, plan: GeometryPlan) -> Any:
        if self._size(image) != (plan.width, plan.height):
            image = self._resize(image, plan.width, plan.height)
        if plan.crop is not None:
            image = self._crop(image, plan.crop)
        if plan.canvas is not None:
            image = self._paste_on_canvas(image, plan.canvas)
        return image

    # --- backend hooks --------------------------------------------------

    @abstractmethod
    def _load_image(self, file: str) -> tuple[Any, str | None]:
        """Decode ``file``; return the native image and the MIME type the engine saw."""

    @abstractmethod
    def _save_image(self, image: Any, file: str, mime: str, options: SaveOptions) -> None:
        pass

    @abstractmethod
    def _size(self, image: Any) -> tuple[int, int]:
        pass

    @abstractmethod
    def _resize(self, image: Any, width: int, height: int) -> Any:
        pass

    @abstractmethod
    def _crop(self, image: Any, box: CropBox) -> Any:
        pass

    @abstractmethod
    def _paste_on_canvas(self, image: Any, canvas: Canvas) -> Any:
        pass

    @abstractmethod
    def _flatten(self, image: Any, background: RGB) -> Any:
        """Compose transparent pixels onto ``background``; result has no alpha."""

    @abstractmethod
    def _colorspace(self, image: Any, space: str) -> Any:
        pass

    @abstractmethod
    def _to_array(self, image: Any) -> np.ndarray:
        pass

    def _release(self, image: Any) -> None:
        """Free engine resources held by ``image``."""
