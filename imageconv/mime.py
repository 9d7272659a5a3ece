"""MIME capabilities and transparency negotiation.

Handlers describe what they read and write with a :class:`MimeCapability`.
:func:`needs_transparency_conversion` decides whether a conversion has to
flatten transparent pixels first; it is pure and touches no image.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

# The two raster formats that carry transparency (indexed and alpha channel).
TRANSPARENCY_MIMES = frozenset({"image/gif", "image/png"})

MIME_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/tiff": ".tif",
    "image/bmp": ".bmp",
}

_EXTENSION_MIMES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".jpe": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".tif": "image/tiff",
    ".tiff": "image/tiff",
    ".bmp": "image/bmp",
}


def needs_transparency_conversion(in_mime: str | None, out_mime: str | None) -> bool:
    """Return True if converting ``in_mime`` to ``out_mime`` loses transparency.

    That is the case when the source format supports transparency and the
    target format does not, e.g. image/png -> image/jpeg.
    """
    return (
        out_mime is not None
        and in_mime != out_mime
        and in_mime in TRANSPARENCY_MIMES
        and out_mime not in TRANSPARENCY_MIMES
    )


def extension_for(mime: str) -> str | None:
    return MIME_EXTENSIONS.get(mime)


def mime_for_extension(path: str) -> str | None:
    """Guess a MIME type from the file extension only (no content sniffing)."""
    dot = path.rfind(".")
    if dot < 0:
        return None
    return _EXTENSION_MIMES.get(path[dot:].lower())


@dataclass(frozen=True)
class MimeCapability:
    """Input and output MIME types a handler supports."""

    input: frozenset[str]
    output: frozenset[str]

    @classmethod
    def of(cls, input: Iterable[str], output: Iterable[str]) -> MimeCapability:
        return cls(frozenset(input), frozenset(output))

    def allows_input(self, mime: str | None) -> bool:
        return mime in self.input

    def allows_output(self, mime: str | None) -> bool:
        return mime in self.output
