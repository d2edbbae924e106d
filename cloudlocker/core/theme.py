# cloudlocker/core/theme.py
from __future__ import annotations

from typing import Callable, List

from .storage import KeyValueStorage
from ..logutil import get_logger

log = get_logger("theme")

THEME_KEY = "theme"
LIGHT = "light"
DARK = "dark"
THEMES = (LIGHT, DARK)


class ThemeState:
	"""Light/dark preference, persisted independently of the session."""

	def __init__(self, storage: KeyValueStorage, system_prefers_dark: Callable[[], bool] | None = None):
		self.storage = storage
		self._listeners: List[Callable[[str], None]] = []
		saved = storage.get(THEME_KEY)
		if saved in THEMES:
			self._theme = saved
		else:
			self._theme = DARK if (system_prefers_dark and system_prefers_dark()) else LIGHT

	@property
	def theme(self) -> str:
		return self._theme

	@property
	def is_dark(self) -> bool:
		return self._theme == DARK

	def subscribe(self, cb: Callable[[str], None]) -> None:
		self._listeners.append(cb)

	def _emit(self) -> None:
		for cb in list(self._listeners):
			try:
				cb(self._theme)
			except Exception:
				log.exception("theme listener failed")

	def set(self, theme: str) -> None:
		if theme not in THEMES:
			raise ValueError(f"unknown theme {theme!r}")
		self._theme = theme
		self.storage.set(THEME_KEY, theme)
		log.debug("theme set", extra={"theme": theme})
		self._emit()

	def toggle(self) -> str:
		self.set(LIGHT if self._theme == DARK else DARK)
		return self._theme
