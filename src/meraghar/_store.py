"""Persistent device settings.

The controller never reads configuration itself; it is handed host and
port on every call.  :class:`SettingsStore` is the collaborator that
owns where those values live between runs: a small JSON document
holding a :class:`~meraghar._settings.DeviceSettings`.

Precedence when loading: values in the file override the *defaults*
passed in (normally ``Settings().device``, i.e. model defaults plus
``MERAGHAR_DEVICE__*`` environment variables).  Keys the file does not
mention keep their default.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from meraghar._errors import SettingsStoreError
from meraghar._settings import DeviceSettings

logger = logging.getLogger(__name__)

DEFAULT_STORE_PATH = "~/.config/meraghar/settings.json"


@dataclass
class SettingsStore:
    """Load/save lifecycle for :class:`DeviceSettings`.

    Args:
        path: JSON file location.  ``~`` is expanded.
    """

    path: Path

    def __post_init__(self) -> None:
        self.path = Path(self.path).expanduser()

    def exists(self) -> bool:
        """Whether a settings file has been saved."""
        return self.path.is_file()

    def load(self, defaults: DeviceSettings | None = None) -> DeviceSettings:
        """Return the stored settings layered over *defaults*.

        Raises:
            SettingsStoreError: If the file is unreadable, not a JSON
                object, or holds invalid values.
        """
        base = defaults if defaults is not None else DeviceSettings()
        if not self.exists():
            logger.debug("No settings file at %s, using defaults", self.path)
            return base

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            msg = f"Cannot read settings from {self.path}: {exc}"
            raise SettingsStoreError(msg) from exc
        if not isinstance(data, dict):
            msg = f"Settings file {self.path} must contain a JSON object"
            raise SettingsStoreError(msg)

        return self._merge(base, data)

    def save(self, settings: DeviceSettings) -> None:
        """Write *settings* to the file, creating parent directories.

        The document is written to a sibling temporary file first and
        then moved into place, so readers never see a partial file.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(f"{self.path.name}.tmp")
        tmp.write_text(
            json.dumps(settings.model_dump(mode="json"), indent=2) + "\n",
            encoding="utf-8",
        )
        tmp.replace(self.path)
        logger.info("Saved settings to %s", self.path)

    def update(
        self,
        defaults: DeviceSettings | None = None,
        **changes: Any,
    ) -> DeviceSettings:
        """Apply *changes* to the stored settings, save and return them.

        ``None`` values in *changes* are ignored so callers can pass
        optional CLI options straight through.
        """
        current = self.load(defaults)
        applied = {key: value for key, value in changes.items() if value is not None}
        updated = self._merge(current, applied)
        self.save(updated)
        return updated

    def _merge(self, base: DeviceSettings, data: dict[str, Any]) -> DeviceSettings:
        try:
            return DeviceSettings.model_validate({**base.model_dump(), **data})
        except ValidationError as exc:
            msg = f"Invalid settings in {self.path}: {exc}"
            raise SettingsStoreError(msg) from exc
