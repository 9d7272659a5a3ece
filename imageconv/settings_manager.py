from __future__ import annotations

import json
import os
from typing import Any

from .exceptions import ImageError
from .logger import get_logger
from .options import HandlerSettings, SaveOptions

_logger = get_logger("settings")


class SettingsManager:
    """JSON settings file with handler definitions and save defaults.

    Layout::

        {
          "handlers": [{"name": "thumbs", "class": "vips", "options": {"background": "#000000"}}],
          "defaults": {"quality": 85}
        }
    """

    DEFAULTS: dict[str, Any] = {
        "handlers": [
            {"name": "pillow", "class": "pillow", "options": {}},
            {"name": "vips", "class": "vips", "options": {}},
        ],
        "defaults": {},
        "background": "#ffffff",
    }

    def __init__(self, settings_path: str | None = None):
        self.settings_path = settings_path
        self._settings: dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        if not self.settings_path:
            self._settings = {}
            return
        try:
            if os.path.exists(self.settings_path):
                with open(self.settings_path, encoding="utf-8") as f:
                    data = json.load(f)
                    if isinstance(data, dict):
                        self._settings = data
                        _logger.debug("settings loaded: %s", self.settings_path)
                        return
                    _logger.warning("settings file %s is not a JSON object", self.settings_path)
        except (OSError, ValueError) as e:
            _logger.warning("settings load failed: %s", e)
        self._settings = {}

    def save(self) -> None:
        if not self.settings_path:
            return
        try:
            os.makedirs(os.path.dirname(self.settings_path) or ".", exist_ok=True)
            with open(self.settings_path, "w", encoding="utf-8") as f:
                json.dump(self._settings, f, ensure_ascii=False, indent=2)
            _logger.debug("settings saved: %s", self.settings_path)
        except OSError as e:
            _logger.error("settings save failed: %s", e)

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._settings:
            return self._settings[key]
        if default is not None:
            return default
        return self.DEFAULTS.get(key)

    def has(self, key: str) -> bool:
        return key in self._settings

    def set(self, key: str, value: Any) -> None:
        self._settings[key] = value
        self.save()

    @property
    def data(self) -> dict[str, Any]:
        return self._settings

    def _handler_entry(self, name: str) -> dict[str, Any]:
        for entry in self.get("handlers") or []:
            if isinstance(entry, dict) and entry.get("name") == name:
                return entry
        raise ImageError(f"No handler named {name!r} in settings.")

    def handler_names(self) -> list[str]:
        return [e["name"] for e in self.get("handlers") or [] if isinstance(e, dict) and "name" in e]

    def handler_class_name(self, name: str) -> str:
        return str(self._handler_entry(name).get("class", name))

    def handler_settings(self, name: str) -> HandlerSettings:
        """Settings for the handler called ``name``.

        The top-level ``background`` applies unless the handler sets its own.
        """
        entry = self._handler_entry(name)
        options = {"background": self.get("background")}
        options.update(entry.get("options") or {})
        return HandlerSettings(name, options)

    def save_options(self) -> SaveOptions:
        return SaveOptions.from_mapping(self.get("defaults"))
