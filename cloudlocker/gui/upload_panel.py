# cloudlocker/gui/upload_panel.py
from __future__ import annotations

from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtWidgets import QFrame, QLabel, QPushButton, QHBoxLayout, QVBoxLayout, QFileDialog

from ..core.file_kinds import format_size
from ..core.upload import UploadController
from .workers import run_async


############################################################################
# Upload panel: single pending file, picked or dropped                     #
############################################################################

class UploadPanel(QFrame):
	# emitted on the UI thread once the server has accepted the file
	uploaded = pyqtSignal(object)

	def __init__(self, upload: UploadController, parent=None):
		super().__init__(parent)
		self.upload = upload
		self.setObjectName("DropZone")
		self.setAcceptDrops(True)

		self.hint = QLabel(f"Drag and drop a file here, or browse (max {format_size(upload.max_bytes)})")
		self.hint.setObjectName("muted"); self.hint.setAlignment(Qt.AlignCenter)
		self.picked = QLabel(""); self.picked.setAlignment(Qt.AlignCenter)
		self.btn_browse = QPushButton("Browse…")
		self.btn_clear = QPushButton("Clear")
		self.btn_upload = QPushButton("Upload"); self.btn_upload.setObjectName("primary")

		btns = QHBoxLayout(); btns.addStretch(1)
		for b in (self.btn_browse, self.btn_clear, self.btn_upload):
			btns.addWidget(b)
		btns.addStretch(1)
		lay = QVBoxLayout(self); lay.setContentsMargins(18, 18, 18, 18)
		lay.addWidget(self.hint); lay.addWidget(self.picked); lay.addLayout(btns)

		self.btn_browse.clicked.connect(self._browse)
		self.btn_clear.clicked.connect(self._clear)
		self.btn_upload.clicked.connect(self._submit)
		self.refresh()

	def refresh(self):
		c = self.upload.candidate
		self.picked.setText(f"Selected file: {c.name} ({c.size_label})" if c else "")
		busy = self.upload.uploading
		self.btn_upload.setEnabled(self.upload.can_submit)
		self.btn_upload.setText("Uploading…" if busy else "Upload")
		self.btn_browse.setEnabled(not busy)
		self.btn_clear.setEnabled(c is not None and not busy)

	def _browse(self):
		path, _ = QFileDialog.getOpenFileName(self, "Choose a file to upload")
		if path:
			self.upload.select(path)
			self.refresh()

	def _clear(self):
		self.upload.clear(); self.refresh()

	def _submit(self):
		if not self.upload.can_submit:
			return
		run_async(self.upload.submit, on_done=self._on_done, on_error=lambda _: self.refresh())
		self.refresh()

	def _on_done(self, info):
		self.refresh()
		if info is not None:
			self.uploaded.emit(info)

	def _set_dragging(self, on: bool):
		self.setProperty("dragging", "true" if on else "false")
		self.style().unpolish(self); self.style().polish(self)

	def dragEnterEvent(self, e):
		if e.mimeData().hasUrls() and not self.upload.uploading:
			e.acceptProposedAction(); self._set_dragging(True)
		else:
			e.ignore()

	def dragLeaveEvent(self, e):
		self._set_dragging(False)

	def dropEvent(self, e):
		self._set_dragging(False)
		paths = [u.toLocalFile() for u in e.mimeData().urls() if u.isLocalFile()]
		self.upload.select_first(paths)
		self.refresh()
		e.acceptProposedAction()
