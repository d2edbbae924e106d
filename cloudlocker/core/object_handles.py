# cloudlocker/core/object_handles.py
"""
Local handles onto downloaded bytes. A handle is a temp file that Qt media
widgets can load by path/URL; it must be released when the preview goes away.
"""
from __future__ import annotations

import os
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Set

from .models import FileInfo
from ..logutil import get_logger

log = get_logger("handles")


class ObjectHandle:
	def __init__(self, registry: "ObjectHandleRegistry", path: str):
		self._registry = registry
		self.path = path
		self.released = False

	@property
	def url(self) -> str:
		return Path(self.path).as_uri()

	def release(self) -> None:
		if self.released:
			return
		self.released = True
		self._registry._forget(self)
		try:
			os.remove(self.path)
		except FileNotFoundError:
			pass
		except OSError:
			log.warning("could not remove handle file", extra={"path": self.path})

	def __enter__(self):
		return self

	def __exit__(self, *exc):
		self.release()
		return False

	def __repr__(self):
		return f"<ObjectHandle {self.path} released={self.released}>"


class ObjectHandleRegistry:
	def __init__(self, directory: str | None = None):
		self.directory = directory
		if directory:
			os.makedirs(directory, exist_ok=True)
		self._live: Set[ObjectHandle] = set()
		self._lock = threading.Lock()

	def create(self, data: bytes, suffix: str = "") -> ObjectHandle:
		if suffix and not suffix.startswith("."):
			suffix = "." + suffix
		fd, path = tempfile.mkstemp(prefix="preview-", suffix=suffix, dir=self.directory)
		with os.fdopen(fd, "wb") as f:
			f.write(data)
		h = ObjectHandle(self, path)
		with self._lock:
			self._live.add(h)
		log.debug("handle created", extra={"path": path, "bytes": len(data)})
		return h

	def _forget(self, h: ObjectHandle) -> None:
		with self._lock:
			self._live.discard(h)

	def live_count(self) -> int:
		with self._lock:
			return len(self._live)

	def release_all(self) -> None:
		with self._lock:
			live = list(self._live)
		for h in live:
			h.release()


@dataclass
class PreviewSession:
	file: FileInfo
	handle: Optional[ObjectHandle] = None

	@property
	def is_fallback(self) -> bool:
		return self.handle is None


class PreviewSlot:
	"""
	Holds at most one preview. Replacing or closing it releases the previous
	handle before anything new is created.
	"""

	def __init__(self, registry: ObjectHandleRegistry):
		self.registry = registry
		self.session: Optional[PreviewSession] = None

	def show(self, file: FileInfo, data: bytes) -> PreviewSession:
		self.close()
		_, ext = os.path.splitext(file.file_name)
		self.session = PreviewSession(file, self.registry.create(data, ext))
		return self.session

	def show_fallback(self, file: FileInfo) -> PreviewSession:
		self.close()
		self.session = PreviewSession(file, None)
		return self.session

	def close(self) -> None:
		s, self.session = self.session, None
		if s and s.handle:
			s.handle.release()

	def __enter__(self):
		return self

	def __exit__(self, *exc):
		self.close()
		return False
