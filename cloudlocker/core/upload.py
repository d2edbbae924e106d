# cloudlocker/core/upload.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .api_client import APIClient
from .errors import CloudLockerError, ValidationFailure
from .file_kinds import format_size
from .models import FileInfo
from .notify import ERROR, SUCCESS, Notifier, null_notify
from .. import config
from ..logutil import get_logger, span

log = get_logger("upload")


@dataclass(frozen=True)
class LocalFile:
	path: str
	name: str
	size: int

	@classmethod
	def from_path(cls, path: str) -> "LocalFile":
		st = os.stat(path)
		return cls(path=path, name=os.path.basename(path), size=st.st_size)

	@property
	def size_label(self) -> str:
		return f"{self.size / 1024 / 1024:.2f} MB"


def check_size(f: LocalFile, max_bytes: int = config.MAX_UPLOAD_BYTES) -> None:
	if f.size > max_bytes:
		raise ValidationFailure(f"File size exceeds {format_size(max_bytes)} limit")


class UploadController:
	"""At most one pending file; validated on selection, kept on failure."""

	def __init__(self, api: APIClient, notify: Notifier = null_notify,
				 max_bytes: int = config.MAX_UPLOAD_BYTES):
		self.api = api
		self.notify = notify
		self.max_bytes = max_bytes
		self.candidate: Optional[LocalFile] = None
		self.uploading = False

	def select(self, path: str) -> bool:
		try:
			if not os.path.isfile(path):
				raise ValidationFailure("Only regular files can be uploaded")
			f = LocalFile.from_path(path)
			check_size(f, self.max_bytes)
		except ValidationFailure as e:
			self.notify(ERROR, str(e))
			return False
		except OSError as e:
			self.notify(ERROR, f"Cannot read file: {e}")
			return False
		self.candidate = f
		log.debug("upload candidate", extra={"file_name": f.name, "bytes": f.size})
		return True

	def select_first(self, paths) -> bool:
		"""Drag-and-drop hands over a list; only the first file is kept."""
		for p in paths or []:
			return self.select(p)
		return False

	def clear(self) -> None:
		if not self.uploading:
			self.candidate = None

	@property
	def can_submit(self) -> bool:
		return self.candidate is not None and not self.uploading

	def submit(self) -> Optional[FileInfo]:
		f = self.candidate
		if f is None:
			self.notify(ERROR, "Please select a file first")
			return None
		if self.uploading:
			return None
		self.uploading = True
		try:
			with span(log, "files.upload", file_name=f.name, bytes=f.size):
				info = self.api.upload_file(f.path)
		except (CloudLockerError, OSError) as e:
			self.notify(ERROR, f"Failed to upload file: {e}")
			return None
		finally:
			self.uploading = False
		self.candidate = None
		self.notify(SUCCESS, "File uploaded successfully")
		return info
