"""Pytest configuration.

Handler tests run once per backend. The libvips run is skipped when pyvips
(or the libvips shared library behind it) is not installed.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest
from PIL import Image

from imageconv.handlers import HANDLER_CLASSES
from imageconv.options import HandlerSettings


def _vips_available() -> bool:
    try:
        import pyvips  # type: ignore

        pyvips.Image.black(1, 1)
    except Exception:
        return False
    return True


VIPS_AVAILABLE = _vips_available()

requires_vips = pytest.mark.skipif(not VIPS_AVAILABLE, reason="libvips not available")

BACKENDS = [
    pytest.param("pillow", id="pillow"),
    pytest.param("vips", id="vips", marks=requires_vips),
]


@pytest.fixture(params=BACKENDS)
def handler(request):
    handler = HANDLER_CLASSES[request.param](HandlerSettings(request.param))
    yield handler
    handler.close_all()


@pytest.fixture
def make_image(tmp_path) -> Callable[..., str]:
    """Write a solid colour image and return its path."""

    def _make(
        name: str = "image.png",
        size: tuple[int, int] = (800, 600),
        color: tuple[int, ...] = (200, 30, 30),
        mode: str = "RGB",
    ) -> str:
        path = tmp_path / name
        Image.new(mode, size, color).save(path)
        return str(path)

    return _make


@pytest.fixture
def vips_handler():
    if not VIPS_AVAILABLE:
        pytest.skip("libvips not available")
    handler = HANDLER_CLASSES["vips"](HandlerSettings("vips"))
    yield handler
    handler.close_all()
