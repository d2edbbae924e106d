# cloudlocker/gui/dashboard.py
from __future__ import annotations

import os

from PyQt5.QtCore import Qt, QTimer
from PyQt5.QtWidgets import (
	QWidget, QTableWidget, QTableWidgetItem, QPushButton, QLineEdit, QLabel,
	QHBoxLayout, QVBoxLayout, QFileDialog, QMessageBox, QHeaderView,
	QProgressBar, QCheckBox, QAbstractItemView, QStyle,
)

from ..core.file_kinds import badge_label, format_date, format_size, is_previewable
from ..core.file_list import BatchPhase, FileListController, FileRow, RowState
from ..core.upload import UploadController
from ..logutil import get_logger
from .. import config
from .preview_dialog import PreviewDialog
from .theme_center import ThemeManager, badge_qss
from .upload_panel import UploadPanel
from .widgets import BusyOverlay
from .workers import run_async

log = get_logger("gui.dashboard")

COL_SELECT, COL_NAME, COL_TYPE, COL_SIZE, COL_DATE, COL_ACTIONS = range(6)


class SizeItem(QTableWidgetItem):
	def __init__(self, size_display: str, raw_size: int | None):
		super().__init__(size_display); self.raw_size = int(raw_size or 0)
		self.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
	def __lt__(self, other):
		if isinstance(other, SizeItem): return self.raw_size < other.raw_size
		return super().__lt__(other)


############################################################################
# Dashboard                                                                #
############################################################################

class Dashboard(QWidget):
	"""File table with inline rename, preview, and batch actions."""

	def __init__(self, files: FileListController, upload: UploadController,
				 themes: ThemeManager, notify, parent=None):
		super().__init__(parent)
		self.files = files
		self.upload = upload
		self.themes = themes
		self.notify = notify
		self._preview_pending: int | None = None
		self._edit_boxes: dict[int, QLineEdit] = {}

		title = QLabel("My Files"); title.setObjectName("title")
		subtitle = QLabel("Upload, download, and manage your files securely"); subtitle.setObjectName("subtitle")

		self.upload_panel = UploadPanel(upload, self)
		self.upload_panel.uploaded.connect(lambda _info: self.reload())

		# batch bar
		self.chk_all = QCheckBox("Select all")
		self.lbl_selected = QLabel("")
		self.btn_batch_dl = QPushButton("Download selected")
		self.btn_batch_del = QPushButton("Delete selected"); self.btn_batch_del.setObjectName("danger")
		self.progress = QProgressBar(); self.progress.setVisible(False); self.progress.setFixedWidth(180)
		self.btn_refresh = QPushButton("Refresh")
		bar = QHBoxLayout()
		bar.addWidget(self.chk_all); bar.addWidget(self.lbl_selected); bar.addStretch(1)
		bar.addWidget(self.progress); bar.addWidget(self.btn_batch_dl); bar.addWidget(self.btn_batch_del)
		bar.addWidget(self.btn_refresh)

		self.table = QTableWidget(0, 6, self)
		self.table.setHorizontalHeaderLabels(["", "Name", "Type", "Size", "Upload Date", "Actions"])
		self.table.verticalHeader().setVisible(False)
		self.table.setSelectionMode(QAbstractItemView.NoSelection)
		self.table.setEditTriggers(QAbstractItemView.NoEditTriggers)
		self.table.setAlternatingRowColors(True)
		hdr = self.table.horizontalHeader()
		hdr.setSectionResizeMode(COL_SELECT, QHeaderView.ResizeToContents)
		hdr.setSectionResizeMode(COL_NAME, QHeaderView.Stretch)
		for c in (COL_TYPE, COL_SIZE, COL_DATE, COL_ACTIONS):
			hdr.setSectionResizeMode(c, QHeaderView.ResizeToContents)
		self.table.cellDoubleClicked.connect(self._cell_dbl)

		self.empty = QLabel("No files yet. Upload your first file above.")
		self.empty.setObjectName("muted"); self.empty.setAlignment(Qt.AlignCenter)

		root = QVBoxLayout(self); root.setContentsMargins(24, 18, 24, 18); root.setSpacing(12)
		root.addWidget(title); root.addWidget(subtitle)
		root.addWidget(self.upload_panel)
		root.addLayout(bar)
		root.addWidget(self.table, 1)
		root.addWidget(self.empty)

		self.overlay = BusyOverlay(self.table, message="Loading files…")
		self.preview = PreviewDialog(self)
		self.preview.closed.connect(self._on_preview_closed)
		self.preview.downloadRequested.connect(self._download)

		self.chk_all.clicked.connect(self._toggle_all)
		self.btn_batch_dl.clicked.connect(self._batch_download)
		self.btn_batch_del.clicked.connect(self._batch_delete)
		self.btn_refresh.clicked.connect(self.reload)
		self.themes.themeChanged.connect(lambda _n: self.render())

		self.render()

	# ---------- loading ----------
	def reload(self):
		self.overlay.showCentered()
		run_async(self.files.reload, on_done=self._after_action, on_error=self._after_action)

	def _after_action(self, _=None):
		self.overlay.setVisible(False)
		self.render()

	def teardown(self):
		"""Leaving the page (logout): drop previews and the stale listing."""
		if self.preview.isVisible():
			self.preview.reject()
		self.files.dispose()
		self.files.set_files([])
		self.upload.clear()
		self.render()

	# ---------- rendering ----------
	def render(self):
		rows = self.files.rows
		self._edit_boxes.clear()
		self.table.setSortingEnabled(False)
		self.table.setRowCount(len(rows))
		for i, r in enumerate(rows):
			self._render_row(i, r)
		self.table.resizeRowsToContents()
		self.empty.setVisible(not rows and not self.files.loading)
		self.table.setVisible(bool(rows) or self.files.loading)
		self._render_batch_bar()
		self.upload_panel.refresh()

	def _render_row(self, i: int, r: FileRow):
		fid = r.file.id
		chk = QCheckBox(); chk.setChecked(self.files.is_selected(fid))
		chk.clicked.connect(lambda _=False, fid=fid: self._toggle(fid))
		self.table.setCellWidget(i, COL_SELECT, self._centered(chk))

		if r.state in (RowState.EDITING, RowState.SAVING):
			self.table.setCellWidget(i, COL_NAME, self._rename_editor(r))
		else:
			self.table.removeCellWidget(i, COL_NAME)
			item = QTableWidgetItem(r.file.file_name)
			item.setIcon(self._icon_for(r))
			item.setToolTip(r.file.file_name)
			self.table.setItem(i, COL_NAME, item)

		badge = QLabel(badge_label(r.file.file_name, r.kind))
		badge.setStyleSheet(badge_qss(r.kind, self.themes.is_dark)); badge.setToolTip(r.file.file_type)
		self.table.setCellWidget(i, COL_TYPE, self._centered(badge))
		self.table.setItem(i, COL_SIZE, SizeItem(format_size(r.file.file_size), r.file.file_size))
		self.table.setItem(i, COL_DATE, QTableWidgetItem(format_date(r.file.upload_date)))
		self.table.setCellWidget(i, COL_ACTIONS, self._actions(r))

	def _icon_for(self, r: FileRow):
		st = self.style()
		return {
			"image": st.standardIcon(QStyle.SP_FileDialogContentsView),
			"pdf": st.standardIcon(QStyle.SP_FileDialogDetailedView),
			"video": st.standardIcon(QStyle.SP_MediaPlay),
			"audio": st.standardIcon(QStyle.SP_MediaVolume),
			"text": st.standardIcon(QStyle.SP_FileIcon),
		}.get(r.kind.value, st.standardIcon(QStyle.SP_FileIcon))

	def _centered(self, w: QWidget) -> QWidget:
		box = QWidget(); lay = QHBoxLayout(box); lay.setContentsMargins(6, 0, 6, 0)
		lay.addWidget(w, alignment=Qt.AlignCenter)
		return box

	def _rename_editor(self, r: FileRow) -> QWidget:
		fid = r.file.id
		box = QWidget(); lay = QHBoxLayout(box); lay.setContentsMargins(4, 2, 4, 2); lay.setSpacing(4)
		edit = QLineEdit(r.edit_text)
		edit.textEdited.connect(lambda t, fid=fid: self.files.set_edit_text(fid, t))
		edit.returnPressed.connect(lambda fid=fid: self._save_rename(fid))
		lay.addWidget(edit, 1)
		if r.extension:
			lay.addWidget(QLabel(f".{r.extension}"))
		saving = r.state is RowState.SAVING
		edit.setEnabled(not saving)
		self._edit_boxes[fid] = edit
		if not saving:
			QTimer.singleShot(0, edit.setFocus)
		return box

	def _actions(self, r: FileRow) -> QWidget:
		fid = r.file.id
		box = QWidget(); lay = QHBoxLayout(box); lay.setContentsMargins(4, 2, 4, 2); lay.setSpacing(4)

		def _btn(text, slot, name=""):
			b = QPushButton(text); b.setCursor(Qt.PointingHandCursor)
			if name: b.setObjectName(name)
			b.clicked.connect(slot); lay.addWidget(b)
			return b

		if r.state is RowState.EDITING:
			_btn("Save", lambda: self._save_rename(fid), "primary")
			_btn("Cancel", lambda: self._cancel_rename(fid))
		elif r.state is RowState.SAVING:
			b = _btn("Saving…", lambda: None); b.setEnabled(False)
		elif r.state is RowState.DELETING:
			b = _btn("Deleting…", lambda: None); b.setEnabled(False)
		else:
			_btn("View" if is_previewable(r.file.file_type) else "Details", lambda: self._open_preview(fid))
			_btn("Download", lambda: self._download(fid))
			_btn("Rename", lambda: self._begin_rename(fid))
			_btn("Delete", lambda: self._delete(fid), "danger")
		return box

	def _render_batch_bar(self):
		n = len(self.files.selected_ids())
		total = len(self.files.rows)
		phase = self.files.batch_phase
		self.chk_all.setEnabled(total > 0)
		self.chk_all.setChecked(self.files.all_selected)
		self.lbl_selected.setText(f"{n} selected" if n else "")
		idle = phase is BatchPhase.IDLE
		self.btn_batch_dl.setEnabled(idle and n > 0)
		self.btn_batch_del.setEnabled(idle and n > 0)
		self.progress.setVisible(not idle)
		if phase is BatchPhase.DOWNLOADING:
			self.progress.setRange(0, 0)
		elif phase is BatchPhase.DELETING:
			done, tot = self.files.batch_progress
			self.progress.setRange(0, max(1, tot)); self.progress.setValue(done)
			self.progress.setFormat(f"{done}/{tot}")

	# ---------- selection ----------
	def _toggle(self, fid: int):
		self.files.toggle_select(fid); self._render_batch_bar()

	def _toggle_all(self):
		self.files.toggle_select_all(); self.render()

	def _cell_dbl(self, row: int, col: int):
		rows = self.files.rows
		if 0 <= row < len(rows) and col == COL_NAME and rows[row].state is RowState.NORMAL:
			self._open_preview(rows[row].file.id)

	# ---------- rename ----------
	def _begin_rename(self, fid: int):
		if self.files.begin_rename(fid):
			self.render()

	def _cancel_rename(self, fid: int):
		if self.files.cancel_rename(fid):
			self.render()

	def _save_rename(self, fid: int):
		edit = self._edit_boxes.get(fid)
		if edit is not None:
			self.files.set_edit_text(fid, edit.text())
		r = self.files.row(fid)
		if not r or r.state is not RowState.EDITING:
			return
		if not r.edit_text.strip():
			# rejected locally, no request
			self.files.save_rename(fid)
			return
		run_async(self.files.save_rename, fid, on_done=self._after_action, on_error=self._after_action)
		QTimer.singleShot(0, self.render)

	# ---------- delete ----------
	def _delete(self, fid: int):
		r = self.files.row(fid)
		if not r:
			return
		if QMessageBox.question(self, "Delete", f"Are you sure you want to delete “{r.file.file_name}”?",
								QMessageBox.Yes | QMessageBox.No, QMessageBox.No) != QMessageBox.Yes:
			return
		log.info("delete confirmed", extra={"file_id": fid})
		run_async(self.files.delete_file, fid, on_done=self._after_action, on_error=self._after_action)
		QTimer.singleShot(0, self.render)

	# ---------- download ----------
	def _download(self, fid: int):
		r = self.files.row(fid)
		if not r:
			return
		dest, _ = QFileDialog.getSaveFileName(self, "Save file", os.path.join(os.path.expanduser("~"), r.file.file_name))
		if not dest:
			return
		run_async(self.files.download_file, fid, dest)

	def _batch_download(self):
		n = len(self.files.selected_ids())
		if not n:
			return
		default = os.path.join(os.path.expanduser("~"), config.BATCH_ARCHIVE_NAME)
		dest, _ = QFileDialog.getSaveFileName(self, f"Save {n} files as", default, "ZIP archive (*.zip)")
		if not dest:
			return
		run_async(self.files.batch_download, dest, on_done=self._after_action, on_error=self._after_action)
		QTimer.singleShot(0, self._render_batch_bar)

	def _batch_delete(self):
		n = len(self.files.selected_ids())
		if not n:
			return
		if QMessageBox.question(self, "Delete", f"Delete {n} selected file(s)?",
								QMessageBox.Yes | QMessageBox.No, QMessageBox.No) != QMessageBox.Yes:
			return
		log.info("batch delete confirmed", extra={"count": n})
		run_async(self.files.batch_delete, on_done=self._after_action, on_error=self._after_action,
				  on_progress=lambda done, tot: self._render_batch_bar())
		QTimer.singleShot(0, self._render_batch_bar)

	# ---------- preview ----------
	def _open_preview(self, fid: int):
		r = self.files.row(fid)
		if not r:
			return
		self._preview_pending = fid
		self.preview.show_loading(r.file.file_name)
		run_async(self.files.open_preview, fid,
				  on_done=lambda s, fid=fid: self._on_preview_ready(fid, s),
				  on_error=lambda _e, fid=fid: self._on_preview_ready(fid, None))

	def _on_preview_ready(self, fid: int, session):
		if fid != self._preview_pending:
			return
		self._preview_pending = None
		if session is None:
			if self.preview.isVisible():
				self.preview.reject()
			return
		self.preview.show_session(session)

	def _on_preview_closed(self):
		self._preview_pending = None
		self.files.close_preview()

	def resizeEvent(self, e):
		if self.overlay.isVisible(): self.overlay.showCentered()
		super().resizeEvent(e)
