# cloudlocker/gui/preview_dialog.py
from __future__ import annotations

from PyQt5.QtCore import Qt, QUrl, pyqtSignal
from PyQt5.QtGui import QDesktopServices, QPixmap
from PyQt5.QtWidgets import (
	QDialog, QHBoxLayout, QLabel, QPushButton, QScrollArea, QVBoxLayout, QWidget,
)
from PyQt5.QtMultimedia import QMediaContent, QMediaPlayer
from PyQt5.QtMultimediaWidgets import QVideoWidget

from ..core.file_kinds import FileKind, classify, format_size
from ..core.object_handles import PreviewSession


class PreviewDialog(QDialog):
	"""
	Shows one PreviewSession. The dialog never owns the handle: closing it
	emits ``closed`` and the dashboard releases the handle through the
	controller.
	"""
	closed = pyqtSignal()
	downloadRequested = pyqtSignal(int)

	def __init__(self, parent: QWidget | None = None):
		super().__init__(parent)
		self.setModal(True)
		self.resize(820, 620)
		self._player: QMediaPlayer | None = None
		self._file_id: int | None = None

		self.title = QLabel(""); self.title.setObjectName("title")
		self.meta = QLabel(""); self.meta.setObjectName("muted")
		self.body = QVBoxLayout()
		self.btn_download = QPushButton("Download")
		self.btn_close = QPushButton("Close")

		head = QVBoxLayout(); head.addWidget(self.title); head.addWidget(self.meta)
		btns = QHBoxLayout(); btns.addStretch(1); btns.addWidget(self.btn_download); btns.addWidget(self.btn_close)
		root = QVBoxLayout(self); root.addLayout(head); root.addLayout(self.body, 1); root.addLayout(btns)

		self.btn_close.clicked.connect(self.reject)
		self.finished.connect(self._on_finished)
		self.btn_download.clicked.connect(lambda: self._file_id is not None and self.downloadRequested.emit(self._file_id))

	def _clear_body(self):
		if self._player:
			self._player.stop()
			self._player.setMedia(QMediaContent())
			self._player = None
		while self.body.count():
			it = self.body.takeAt(0)
			w = it.widget()
			if w:
				w.deleteLater()

	def show_loading(self, name: str):
		self._clear_body()
		self.title.setText(name); self.meta.setText("")
		lbl = QLabel("Loading preview…"); lbl.setAlignment(Qt.AlignCenter)
		self.body.addWidget(lbl)
		if not self.isVisible():
			self.show()

	def show_session(self, s: PreviewSession):
		self._clear_body()
		f = s.file
		self._file_id = f.id
		self.setWindowTitle(f"Preview: {f.file_name}")
		self.title.setText(f.file_name)
		self.meta.setText(f"{f.file_type} · {format_size(f.file_size)}")

		if s.is_fallback:
			self.body.addWidget(self._fallback())
		else:
			kind = classify(f.file_type)
			if kind is FileKind.IMAGE:
				self.body.addWidget(self._image(s.handle.path))
			elif kind in (FileKind.VIDEO, FileKind.AUDIO):
				self.body.addWidget(self._media(s.handle.path, video=kind is FileKind.VIDEO))
			else:
				self.body.addWidget(self._external(s.handle.path))
		if not self.isVisible():
			self.show()

	def _image(self, path: str) -> QWidget:
		area = QScrollArea(); area.setWidgetResizable(True); area.setAlignment(Qt.AlignCenter)
		lbl = QLabel(); lbl.setAlignment(Qt.AlignCenter)
		pm = QPixmap(path)
		if pm.isNull():
			lbl.setText("This image could not be displayed.")
		else:
			lbl.setPixmap(pm.scaled(760, 480, Qt.KeepAspectRatio, Qt.SmoothTransformation)
						  if pm.width() > 760 or pm.height() > 480 else pm)
		area.setWidget(lbl)
		return area

	def _media(self, path: str, video: bool) -> QWidget:
		wrap = QWidget(); lay = QVBoxLayout(wrap)
		self._player = QMediaPlayer(self)
		if video:
			vw = QVideoWidget(); vw.setMinimumHeight(360)
			self._player.setVideoOutput(vw)
			lay.addWidget(vw, 1)
		else:
			note = QLabel("Audio"); note.setAlignment(Qt.AlignCenter); lay.addWidget(note, 1)
		self._player.setMedia(QMediaContent(QUrl.fromLocalFile(path)))
		ctl = QHBoxLayout()
		b_play = QPushButton("Play"); b_pause = QPushButton("Pause")
		b_play.clicked.connect(self._player.play); b_pause.clicked.connect(self._player.pause)
		ctl.addStretch(1); ctl.addWidget(b_play); ctl.addWidget(b_pause); ctl.addStretch(1)
		lay.addLayout(ctl)
		self._player.play()
		return wrap

	def _external(self, path: str) -> QWidget:
		wrap = QWidget(); lay = QVBoxLayout(wrap)
		lbl = QLabel("This document opens in your system viewer."); lbl.setAlignment(Qt.AlignCenter)
		btn = QPushButton("Open"); btn.setObjectName("primary")
		btn.clicked.connect(lambda: QDesktopServices.openUrl(QUrl.fromLocalFile(path)))
		lay.addStretch(1); lay.addWidget(lbl); lay.addWidget(btn, alignment=Qt.AlignHCenter); lay.addStretch(1)
		return wrap

	def _fallback(self) -> QWidget:
		wrap = QWidget(); lay = QVBoxLayout(wrap)
		lbl = QLabel("Preview is not available for this file type.\nDownload it to open it locally.")
		lbl.setAlignment(Qt.AlignCenter)
		btn = QPushButton("Download"); btn.setObjectName("primary")
		btn.clicked.connect(self.btn_download.click)
		lay.addStretch(1); lay.addWidget(lbl); lay.addWidget(btn, alignment=Qt.AlignHCenter); lay.addStretch(1)
		return wrap

	def _on_finished(self, _result):
		# Esc, the Close button and the window frame all end up here
		self._clear_body()
		self._file_id = None
		self.closed.emit()
