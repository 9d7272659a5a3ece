import argparse
import json

import pytest
from PIL import Image

from imageconv.filters import Filter
from imageconv.geometry import Direction
from imageconv.main import parse_filter, run


def test_parse_filter():
    f = parse_filter("scale:width=400, height=300,direction=down")
    assert f == Filter("scale", {"width": 400, "height": 300, "direction": Direction.DOWN})
    assert parse_filter("scalePercent:width=12.5,height=50").options["width"] == 12.5
    assert parse_filter("colorspace:space=sepia").options == {"space": "sepia"}
    assert parse_filter("crop") == Filter("crop", {})


def test_parse_filter_rejects_bare_values():
    with pytest.raises(argparse.ArgumentTypeError):
        parse_filter("scale:400")


def test_run_scales_and_converts(make_image, tmp_path):
    src = make_image(size=(800, 600))
    out = tmp_path / "out.jpg"
    rc = run([src, str(out), "--filter", "scale:width=400,height=400", "--quality", "80"])
    assert rc == 0
    with Image.open(out) as saved:
        assert saved.format == "JPEG"
        assert saved.size == (400, 300)


def test_run_uses_settings_handler(make_image, tmp_path):
    settings = tmp_path / "settings.json"
    settings.write_text(
        json.dumps({"handlers": [{"name": "thumbs", "class": "pillow", "options": {"background": "#000000"}}]}),
        encoding="utf-8",
    )
    src = make_image(size=(40, 40), color=(255, 255, 255, 0), mode="RGBA")
    out = tmp_path / "out.bmp"
    rc = run([src, str(out), "--handler", "thumbs", "--settings", str(settings), "--mime", "image/bmp"])
    assert rc == 0
    with Image.open(out) as saved:
        assert saved.getpixel((0, 0)) == (0, 0, 0)


def test_run_reports_errors(make_image, tmp_path, capsys):
    assert run([str(tmp_path / "missing.png"), str(tmp_path / "out.png")]) == 1
    assert "missing.png" in capsys.readouterr().err

    src = make_image()
    assert run([src, str(tmp_path / "out.png"), "--filter", "crop:x=0,y=0,width=5000,height=10"]) == 1
    assert "crop" in capsys.readouterr().err

    assert run([src, str(tmp_path / "out.png"), "--handler", "nope"]) == 1
