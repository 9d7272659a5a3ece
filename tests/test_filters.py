import pytest

from imageconv.colorspace import Colorspace
from imageconv.exceptions import FilterNotAvailableError, MissingFilterParameterError, ValueOutOfRangeError
from imageconv.filters import OPERATION_TYPES, Filter, build_operation
from imageconv.geometry import Crop, Direction, FilledThumbnail, Scale, ScaleWidth


def test_canonical_filter_names():
    assert list(OPERATION_TYPES) == [
        "scale",
        "scaleWidth",
        "scaleHeight",
        "scalePercent",
        "scaleExact",
        "crop",
        "croppedThumbnail",
        "filledThumbnail",
        "colorspace",
    ]


def test_build_operation_from_loose_filter():
    assert build_operation(Filter("scale", {"width": 100, "height": 50})) == Scale(100, 50, Direction.BOTH)
    assert build_operation(Filter("scaleWidth", {"width": 10, "direction": 2})) == ScaleWidth(10, Direction.DOWN)
    assert build_operation(Filter("crop", {"x": 0, "y": 0, "width": 5, "height": 5})) == Crop(0, 0, 5, 5)
    assert build_operation(Filter("colorspace", {"space": "sepia"})) == Colorspace("sepia")
    assert build_operation(Filter("filledThumbnail", {"width": 5, "height": 5})).color == (255, 255, 255)


def test_build_operation_missing_parameter():
    with pytest.raises(MissingFilterParameterError) as exc_info:
        build_operation(Filter("crop", {"x": 0, "y": 0, "width": 5}))
    assert exc_info.value.parameter == "height"


def test_build_operation_unknown_filter():
    with pytest.raises(FilterNotAvailableError):
        build_operation(Filter("swirl", {}))


def test_build_operation_out_of_range():
    with pytest.raises(ValueOutOfRangeError):
        build_operation(Filter("scaleExact", {"width": 0, "height": 5}))
    with pytest.raises(ValueOutOfRangeError):
        build_operation(Filter("colorspace", {"space": "cmyk"}))


def test_filled_thumbnail_colour_parsing():
    assert FilledThumbnail(5, 5, "#abc").color == (0xAA, 0xBB, 0xCC)
    with pytest.raises(ValueOutOfRangeError):
        FilledThumbnail(5, 5, "not-a-colour")
