# cloudlocker/gui/qsettings_storage.py
from __future__ import annotations

from typing import Optional

from PyQt5.QtCore import QSettings

from ..core.storage import KeyValueStorage
from .. import config


class QSettingsStorage(KeyValueStorage):
	"""Client-side persistence backed by the platform's Qt settings store."""

	def __init__(self, settings: QSettings | None = None):
		self._s = settings or QSettings(config.SETTINGS_ORG, config.SETTINGS_APP)

	def get(self, key: str) -> Optional[str]:
		if not self._s.contains(key):
			return None
		return self._s.value(key, "", type=str)

	def set(self, key: str, value: str) -> None:
		self._s.setValue(key, value)
		self._s.sync()

	def remove(self, key: str) -> None:
		self._s.remove(key)
		self._s.sync()
