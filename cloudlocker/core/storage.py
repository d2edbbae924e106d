# cloudlocker/core/storage.py
from __future__ import annotations

import json, os, threading
from abc import ABC, abstractmethod
from typing import Dict, Optional

from ..logutil import get_logger


log = get_logger("storage")


def _ensure_dir(path: str) -> None:
	os.makedirs(path, exist_ok=True)


class KeyValueStorage(ABC):
	"""String key -> string value persistence, the client's local storage."""

	@abstractmethod
	def get(self, key: str) -> Optional[str]: ...

	@abstractmethod
	def set(self, key: str, value: str) -> None: ...

	@abstractmethod
	def remove(self, key: str) -> None: ...


class MemoryStorage(KeyValueStorage):
	def __init__(self, initial: Dict[str, str] | None = None):
		self._data: Dict[str, str] = dict(initial or {})

	def get(self, key: str) -> Optional[str]:
		return self._data.get(key)

	def set(self, key: str, value: str) -> None:
		self._data[key] = value

	def remove(self, key: str) -> None:
		self._data.pop(key, None)


class JsonFileStorage(KeyValueStorage):
	"""
	Thread-safe, crash-safe key/value document on disk.
	Every write rewrites the whole document through a .tmp file and os.replace.
	"""
	def __init__(self, path: str):
		self.path = path
		_ensure_dir(os.path.dirname(path) or ".")
		self._lock = threading.RLock()

	def _read(self) -> Dict[str, str]:
		try:
			with open(self.path, "r", encoding="utf-8") as f:
				d = json.load(f)
		except FileNotFoundError:
			return {}
		except (OSError, ValueError):
			log.warning("unreadable storage document, starting empty", extra={"path": self.path})
			return {}
		if not isinstance(d, dict):
			return {}
		return {str(k): str(v) for k, v in d.items()}

	def _write(self, d: Dict[str, str]) -> None:
		tmp = self.path + ".tmp"
		with open(tmp, "w", encoding="utf-8") as f:
			json.dump(d, f, indent=2, sort_keys=True)
		os.replace(tmp, self.path)

	def get(self, key: str) -> Optional[str]:
		with self._lock:
			return self._read().get(key)

	def set(self, key: str, value: str) -> None:
		with self._lock:
			d = self._read()
			d[key] = value
			self._write(d)

	def remove(self, key: str) -> None:
		with self._lock:
			d = self._read()
			if key in d:
				del d[key]
				self._write(d)
