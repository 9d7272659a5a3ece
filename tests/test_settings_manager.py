from __future__ import annotations

import json
from pathlib import Path

import pytest

from imageconv.exceptions import ImageError
from imageconv.options import SaveOptions
from imageconv.settings_manager import SettingsManager


def test_defaults_without_file() -> None:
    sm = SettingsManager()
    assert sm.handler_names() == ["pillow", "vips"]
    settings = sm.handler_settings("vips")
    assert settings.reference_name == "vips"
    assert settings.background == (255, 255, 255)
    assert sm.save_options() == SaveOptions()


def test_handler_options_from_file(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps(
            {
                "handlers": [{"name": "thumbs", "class": "vips", "options": {"background": "#000000"}}],
                "defaults": {"quality": 60},
                "background": "#ff0000",
            }
        ),
        encoding="utf-8",
    )
    sm = SettingsManager(str(path))

    assert sm.handler_class_name("thumbs") == "vips"
    assert sm.handler_settings("thumbs").background == (0, 0, 0)
    assert sm.save_options() == SaveOptions(quality=60)
    with pytest.raises(ImageError):
        sm.handler_settings("pillow")


def test_broken_file_falls_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    sm = SettingsManager(str(path))
    assert sm.data == {}
    assert sm.handler_names() == ["pillow", "vips"]


def test_set_persists(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "settings.json"
    sm = SettingsManager(str(path))
    sm.set("background", "#00ff00")

    assert json.loads(path.read_text(encoding="utf-8")) == {"background": "#00ff00"}
    assert SettingsManager(str(path)).handler_settings("pillow").background == (0, 255, 0)
