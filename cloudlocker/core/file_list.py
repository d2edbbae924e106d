# cloudlocker/core/file_list.py
from __future__ import annotations

############################################################################
# File list view state: per-row action state, selection set, batch        #
# operations and the single preview slot. Every backend change is          #
# followed by a full reload; rows are never patched locally.               #
############################################################################

import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Set

from .api_client import APIClient
from .errors import CloudLockerError
from .file_kinds import FileKind, classify, is_previewable, join_name, split_name
from .models import FileInfo
from .notify import ERROR, SUCCESS, WARNING, Notifier, null_notify
from .object_handles import ObjectHandleRegistry, PreviewSession, PreviewSlot
from ..logutil import bind, get_logger, span

log = get_logger("file_list")


class RowState(str, Enum):
	NORMAL = "normal"
	EDITING = "editing"
	SAVING = "saving"
	DELETING = "deleting"


class BatchPhase(str, Enum):
	IDLE = "idle"
	DOWNLOADING = "downloading"
	DELETING = "deleting"


@dataclass
class FileRow:
	file: FileInfo
	kind: FileKind
	state: RowState = RowState.NORMAL
	edit_text: str = ""

	@property
	def busy(self) -> bool:
		return self.state in (RowState.SAVING, RowState.DELETING)

	@property
	def extension(self) -> str:
		return split_name(self.file.file_name)[1]


@dataclass
class BatchDeleteResult:
	total: int
	succeeded: List[int] = field(default_factory=list)
	failed: Dict[int, str] = field(default_factory=dict)

	@property
	def summary(self) -> str:
		return f"{len(self.succeeded)}/{self.total}"

	@property
	def ok(self) -> bool:
		return not self.failed


def _write_bytes(dest: str, data: bytes) -> None:
	d = os.path.dirname(dest)
	if d:
		os.makedirs(d, exist_ok=True)
	tmp = dest + ".part"
	with open(tmp, "wb") as f:
		f.write(data)
	os.replace(tmp, dest)


class FileListController:
	"""
	View state behind the dashboard's file table.

	Thread-safe: state transitions happen under a lock, network calls happen
	outside it, so an action on one row never blocks another row.
	"""

	def __init__(self, api: APIClient, notify: Notifier = null_notify,
				 handles: ObjectHandleRegistry | None = None):
		self.api = api
		self.notify = notify
		self.handles = handles or ObjectHandleRegistry()
		self.preview = PreviewSlot(self.handles)
		self._rows: Dict[int, FileRow] = {}
		self._order: List[int] = []
		self._selection: Set[int] = set()
		self._lock = threading.RLock()
		self._preview_seq = 0
		self.loading = False
		self.batch_phase = BatchPhase.IDLE
		self.batch_progress = (0, 0)

	# ---------- snapshot ----------
	@property
	def files(self) -> List[FileInfo]:
		with self._lock:
			return [self._rows[i].file for i in self._order]

	@property
	def rows(self) -> List[FileRow]:
		with self._lock:
			return [self._rows[i] for i in self._order]

	def row(self, file_id: int) -> Optional[FileRow]:
		with self._lock:
			return self._rows.get(file_id)

	def set_files(self, files: List[FileInfo]) -> None:
		"""Install a fresh snapshot; surviving rows keep their action state."""
		with self._lock:
			old = self._rows
			self._rows = {}
			self._order = []
			for f in files:
				prev = old.get(f.id)
				if prev:
					prev.file = f
					prev.kind = classify(f.file_type)
					self._rows[f.id] = prev
				else:
					self._rows[f.id] = FileRow(f, classify(f.file_type))
				self._order.append(f.id)
			self._selection &= set(self._rows)

	def reload(self) -> bool:
		self.loading = True
		try:
			with span(log, "files.reload"):
				files = self.api.list_files()
		except CloudLockerError as e:
			self.notify(ERROR, f"Failed to load files: {e}")
			return False
		finally:
			self.loading = False
		self.set_files(files)
		return True

	# ---------- selection ----------
	def selected_ids(self) -> List[int]:
		with self._lock:
			return [i for i in self._order if i in self._selection]

	def is_selected(self, file_id: int) -> bool:
		with self._lock:
			return file_id in self._selection

	@property
	def all_selected(self) -> bool:
		with self._lock:
			return bool(self._order) and len(self._selection) == len(self._order)

	def toggle_select(self, file_id: int) -> bool:
		with self._lock:
			if file_id not in self._rows:
				return False
			if file_id in self._selection:
				self._selection.discard(file_id)
				return False
			self._selection.add(file_id)
			return True

	def toggle_select_all(self) -> None:
		with self._lock:
			if not self._order:
				return
			if len(self._selection) == len(self._order):
				self._selection.clear()
			else:
				self._selection = set(self._order)

	def clear_selection(self) -> None:
		with self._lock:
			self._selection.clear()

	# ---------- rename ----------
	def begin_rename(self, file_id: int) -> bool:
		with self._lock:
			r = self._rows.get(file_id)
			if not r or r.state is not RowState.NORMAL:
				return False
			r.state = RowState.EDITING
			r.edit_text = split_name(r.file.file_name)[0]
			return True

	def set_edit_text(self, file_id: int, text: str) -> None:
		with self._lock:
			r = self._rows.get(file_id)
			if r and r.state is RowState.EDITING:
				r.edit_text = text

	def cancel_rename(self, file_id: int) -> bool:
		with self._lock:
			r = self._rows.get(file_id)
			if not r or r.state is not RowState.EDITING:
				return False
			r.state = RowState.NORMAL
			r.edit_text = ""
			return True

	def save_rename(self, file_id: int) -> bool:
		with self._lock:
			r = self._rows.get(file_id)
			if not r or r.state is not RowState.EDITING:
				return False
			base = r.edit_text.strip()
			if not base:
				self.notify(ERROR, "File name cannot be empty")
				return False
			new_name = join_name(base, r.extension)
			if new_name == r.file.file_name:
				r.state = RowState.NORMAL
				r.edit_text = ""
				return True
			r.state = RowState.SAVING

		flog = bind(log, file_id=file_id)
		try:
			with span(flog, "files.rename", new_name=new_name):
				self.api.rename_file(file_id, new_name)
		except CloudLockerError as e:
			with self._lock:
				r = self._rows.get(file_id)
				if r and r.state is RowState.SAVING:
					r.state = RowState.EDITING
			self.notify(ERROR, f"Failed to rename file: {e}")
			return False

		with self._lock:
			r = self._rows.get(file_id)
			if r:
				r.state = RowState.NORMAL
				r.edit_text = ""
		self.notify(SUCCESS, "File renamed successfully")
		self.reload()
		return True

	# ---------- delete ----------
	def delete_file(self, file_id: int) -> bool:
		"""Caller confirms with the user first."""
		with self._lock:
			r = self._rows.get(file_id)
			if not r or r.state is not RowState.NORMAL:
				return False
			r.state = RowState.DELETING

		try:
			with span(bind(log, file_id=file_id), "files.delete"):
				self.api.delete_file(file_id)
		except CloudLockerError as e:
			with self._lock:
				r = self._rows.get(file_id)
				if r and r.state is RowState.DELETING:
					r.state = RowState.NORMAL
			self.notify(ERROR, f"Failed to delete file: {e}")
			return False

		self.notify(SUCCESS, "File deleted successfully")
		self.reload()
		with self._lock:
			r = self._rows.get(file_id)
			if r and r.state is RowState.DELETING:
				# reload failed or the server still lists it
				r.state = RowState.NORMAL
		return True

	# ---------- download ----------
	def download_file(self, file_id: int, dest: str) -> bool:
		r = self.row(file_id)
		if not r:
			return False
		try:
			with span(bind(log, file_id=file_id), "files.download", dest=dest):
				data = self.api.download_file(file_id)
				_write_bytes(dest, data)
		except (CloudLockerError, OSError) as e:
			self.notify(ERROR, f"Failed to download file: {e}")
			return False
		self.notify(SUCCESS, f"Downloaded {r.file.file_name}")
		return True

	# ---------- batch ----------
	def batch_download(self, dest: str) -> bool:
		ids = self.selected_ids()
		if not ids:
			self.notify(ERROR, "No files selected")
			return False
		with self._lock:
			if self.batch_phase is not BatchPhase.IDLE:
				return False
			self.batch_phase = BatchPhase.DOWNLOADING
		try:
			with span(log, "files.batch_download", count=len(ids)):
				data = self.api.batch_download(ids)
				_write_bytes(dest, data)
		except (CloudLockerError, OSError) as e:
			self.notify(ERROR, f"Failed to download files: {e}")
			return False
		finally:
			self.batch_phase = BatchPhase.IDLE
		self.notify(SUCCESS, f"Downloaded {len(ids)} files")
		return True

	def batch_delete(self, on_progress: Callable[[int, int], None] | None = None) -> Optional[BatchDeleteResult]:
		"""
		One delete per selected id, all in flight at once. Failures do not stop
		the others; the aggregate is reported once every request has settled.
		"""
		ids = self.selected_ids()
		if not ids:
			self.notify(ERROR, "No files selected")
			return None
		with self._lock:
			if self.batch_phase is not BatchPhase.IDLE:
				return None
			self.batch_phase = BatchPhase.DELETING
			self.batch_progress = (0, len(ids))

		result = BatchDeleteResult(total=len(ids))
		try:
			with ThreadPoolExecutor(max_workers=len(ids), thread_name_prefix="batch-delete") as pool:
				futures = {pool.submit(self.api.delete_file, i): i for i in ids}
				done = 0
				for fut in as_completed(futures):
					fid = futures[fut]
					try:
						fut.result()
						result.succeeded.append(fid)
					except Exception as e:
						log.warning("batch delete item failed", extra={"file_id": fid, "error": str(e)})
						result.failed[fid] = str(e)
					done += 1
					self.batch_progress = (done, len(ids))
					if on_progress:
						on_progress(done, len(ids))
		finally:
			self.batch_phase = BatchPhase.IDLE

		log.info("batch delete settled", extra={"summary": result.summary, "failed": sorted(result.failed)})
		if result.ok:
			self.notify(SUCCESS, f"Deleted {result.summary} files")
		elif result.succeeded:
			self.notify(WARNING, f"Deleted {result.summary} files")
		else:
			self.notify(ERROR, f"Failed to delete files ({result.summary})")
		self.reload()
		self.clear_selection()
		return result

	# ---------- preview ----------
	def open_preview(self, file_id: int) -> Optional[PreviewSession]:
		r = self.row(file_id)
		if not r:
			return None
		with self._lock:
			self._preview_seq += 1
			seq = self._preview_seq
			self.preview.close()
			if not is_previewable(r.file.file_type):
				return self.preview.show_fallback(r.file)

		try:
			with span(bind(log, file_id=file_id), "files.view"):
				data = self.api.view_file(file_id)
		except CloudLockerError as e:
			self.notify(ERROR, f"Failed to load preview: {e}")
			return None

		with self._lock:
			if seq != self._preview_seq:
				# superseded by a later open/close
				return None
			return self.preview.show(r.file, data)

	def close_preview(self) -> None:
		with self._lock:
			self._preview_seq += 1
			self.preview.close()

	@property
	def current_preview(self) -> Optional[PreviewSession]:
		return self.preview.session

	def dispose(self) -> None:
		self.close_preview()
		self.handles.release_all()
