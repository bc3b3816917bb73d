from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol

from PySide6.QtCore import QSettings


SETTINGS_ORGANIZATION = "ExternalControl"
SETTINGS_APPLICATION = "ExternalControl"
SETTINGS_GROUP = "program_node"


class DataModel(Protocol):
    def get(self, key: str, default: Any) -> Any: ...

    def set(self, key: str, value: Any) -> None: ...

    def contains(self, key: str) -> bool: ...

    def remove(self, key: str) -> None: ...


class QSettingsDataModel:
    """Flat key/value node model persisted through QSettings."""

    def __init__(self, settings: QSettings | None = None, group: str = SETTINGS_GROUP) -> None:
        self.settings = settings or QSettings(SETTINGS_ORGANIZATION, SETTINGS_APPLICATION)
        self.group = group.strip("/")

    @classmethod
    def from_file(cls, path: Path, group: str = SETTINGS_GROUP) -> "QSettingsDataModel":
        path.parent.mkdir(parents=True, exist_ok=True)
        return cls(QSettings(str(path), QSettings.Format.IniFormat), group=group)

    def _qualified(self, key: str) -> str:
        if not self.group:
            return key
        return f"{self.group}/{key}"

    @staticmethod
    def _number_from_text(raw: str) -> int | float | None:
        try:
            whole = int(raw)
        except ValueError:
            whole = None
        if whole is not None and str(whole) == raw:
            return whole
        try:
            fraction = float(raw)
        except ValueError:
            return None
        if repr(fraction) == raw:
            return fraction
        return None

    @classmethod
    def _coerce(cls, raw: object, default: Any) -> Any:
        """Restore the type of ``default`` only when the stored text maps back exactly.

        The INI backend hands scalars back as text; anything that does not
        round-trip is returned as stored, never replaced by ``default``.
        """
        if raw is None:
            return "" if isinstance(default, str) else raw
        if not isinstance(raw, str):
            return raw
        if isinstance(default, bool):
            if raw == "true":
                return True
            if raw == "false":
                return False
            return raw
        if isinstance(default, (int, float)):
            number = cls._number_from_text(raw)
            return raw if number is None else number
        return raw

    def contains(self, key: str) -> bool:
        return self.settings.contains(self._qualified(key))

    def get(self, key: str, default: Any) -> Any:
        qualified = self._qualified(key)
        if not self.settings.contains(qualified):
            return default
        return self._coerce(self.settings.value(qualified), default)

    def set(self, key: str, value: Any) -> None:
        self.settings.setValue(self._qualified(key), value)
        self.settings.sync()

    def remove(self, key: str) -> None:
        self.settings.remove(self._qualified(key))
        self.settings.sync()

    def keys(self) -> list[str]:
        if not self.group:
            return sorted(self.settings.allKeys())
        self.settings.beginGroup(self.group)
        try:
            return sorted(self.settings.allKeys())
        finally:
            self.settings.endGroup()
