import pytest

from imageconv.exceptions import MissingFilterParameterError, ValueOutOfRangeError
from imageconv.geometry import (
    Canvas,
    Crop,
    CropBox,
    CroppedThumbnail,
    Direction,
    FilledThumbnail,
    GeometryPlan,
    Scale,
    ScaleExact,
    ScaleHeight,
    ScalePercent,
    ScaleWidth,
    round_half_up,
)


def test_scale_both_fits_box_and_keeps_ratio():
    plan = Scale(400, 400, Direction.BOTH).plan(800, 600)
    assert plan == GeometryPlan(400, 300)


def test_scale_both_enlarges_small_images():
    assert Scale(400, 400).plan(100, 50) == GeometryPlan(400, 200)


@pytest.mark.parametrize(
    "box, size",
    [
        ((400, 400), (800, 600)),
        ((123, 77), (1000, 333)),
        ((50, 500), (640, 480)),
        ((999, 2), (3, 7)),
    ],
)
def test_scale_both_result_inside_box(box, size):
    plan = Scale(*box).plan(*size)
    assert plan is not None
    assert plan.width <= box[0]
    assert plan.height <= box[1]
    # ratio within one pixel of rounding
    assert abs(plan.width * size[1] - plan.height * size[0]) <= max(size)


def test_scale_down_is_noop_when_image_fits():
    assert Scale(1000, 1000, Direction.DOWN).plan(800, 600) is None
    assert Scale(800, 600, Direction.DOWN).plan(800, 600) is None


def test_scale_down_shrinks_large_images():
    assert Scale(400, 400, Direction.DOWN).plan(800, 600) == GeometryPlan(400, 300)


def test_scale_up_is_noop_when_image_is_larger():
    assert Scale(400, 400, Direction.UP).plan(800, 600) is None
    # factor is min(2000/800, 500/600) < 1
    assert Scale(2000, 500, Direction.UP).plan(800, 600) is None


def test_scale_up_enlarges_and_may_leave_box():
    assert Scale(400, 400, Direction.UP).plan(100, 50) == GeometryPlan(400, 200)


def test_scale_width_and_height_keep_ratio():
    assert ScaleWidth(400, Direction.BOTH).plan(800, 600) == GeometryPlan(400, 300)
    assert ScaleHeight(300, Direction.BOTH).plan(800, 600) == GeometryPlan(400, 300)
    assert ScaleWidth(1600, Direction.DOWN).plan(800, 600) is None
    assert ScaleHeight(100, Direction.UP).plan(800, 600) is None


def test_scale_percent_axes_are_independent():
    assert ScalePercent(50, 200).plan(400, 300) == GeometryPlan(200, 600)


def test_scale_exact_ignores_ratio():
    assert ScaleExact(10, 999).plan(800, 600) == GeometryPlan(10, 999)
    assert ScaleExact(800, 600).plan(800, 600) is None


def test_rounding_is_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.4999) == 2
    # 3 * 50% = 1.5 -> 2 on every backend
    assert ScalePercent(50, 50).plan(3, 3) == GeometryPlan(2, 2)


def test_results_below_one_pixel_are_rejected():
    with pytest.raises(ValueOutOfRangeError) as exc_info:
        ScalePercent(1, 100).plan(40, 40)
    assert exc_info.value.parameter == "width"
    with pytest.raises(ValueOutOfRangeError):
        Scale(1000, 1).plan(10, 5000)


def test_crop_plan_and_bounds():
    plan = Crop(10, 10, 100, 50).plan(200, 600)
    assert plan is not None
    assert plan.crop == CropBox(10, 10, 100, 50)
    assert plan.size == (100, 50)

    with pytest.raises(ValueOutOfRangeError):
        Crop(150, 0, 100, 50).plan(200, 600)
    with pytest.raises(ValueOutOfRangeError):
        Crop(0, 590, 100, 50).plan(200, 600)
    assert Crop(0, 0, 200, 600).plan(200, 600) is None


@pytest.mark.parametrize(
    "make",
    [
        lambda: Crop(0, 0, 0, 10),
        lambda: Crop(0, 0, 10, -1),
        lambda: Crop(-1, 0, 10, 10),
        lambda: Scale(0, 10),
        lambda: ScaleExact(10, -5),
        lambda: ScalePercent(0, 10),
        lambda: Scale(10, 10, 7),
        lambda: ScaleWidth(10.5, Direction.BOTH),
    ],
)
def test_invalid_parameters_rejected_on_construction(make):
    with pytest.raises(ValueOutOfRangeError):
        make()


def test_missing_parameter():
    with pytest.raises(MissingFilterParameterError) as exc_info:
        Scale(None, 10)
    assert exc_info.value.parameter == "width"
    assert exc_info.value.filter_name == "scale"


def test_direction_accepts_plain_ints():
    assert Scale(10, 10, 2).direction is Direction.DOWN


def test_cropped_thumbnail_covers_then_centres():
    plan = CroppedThumbnail(50, 50).plan(200, 100)
    assert plan == GeometryPlan(100, 50, crop=CropBox(25, 0, 50, 50))
    assert plan.size == (50, 50)


def test_filled_thumbnail_fits_then_pads():
    plan = FilledThumbnail(100, 100, "#0000ff").plan(200, 100)
    assert plan == GeometryPlan(100, 50, canvas=Canvas(100, 100, 0, 25, (0, 0, 255)))
    assert plan.size == (100, 100)
