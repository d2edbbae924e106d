# cloudlocker/gui/widgets.py
from __future__ import annotations

from PyQt5.QtCore import Qt, QTimer, QObject, pyqtSignal
from PyQt5.QtGui import QColor
from PyQt5.QtWidgets import (
	QFrame, QGraphicsDropShadowEffect, QLabel, QProgressBar, QVBoxLayout, QWidget,
)

from ..core import notify as levels


def add_drop_shadow(w, blur=24, dx=0, dy=8, alpha=120):
	eff = QGraphicsDropShadowEffect(w)
	eff.setBlurRadius(blur)
	eff.setOffset(dx, dy)
	eff.setColor(QColor(0, 0, 0, alpha))
	w.setGraphicsEffect(eff)


class BusyOverlay(QFrame):
	"""Translucent indeterminate progress panel centered over its parent."""
	def __init__(self, parent: QWidget, *, message: str = "Loading…"):
		super().__init__(parent)
		self.setStyleSheet(
			"QFrame { background: rgba(0,0,0,120); border-radius: 8px; }"
			"QLabel { color: #e9eaec; font-size: 13px; background: transparent; }"
		)
		self.setVisible(False)
		self.setFocusPolicy(Qt.NoFocus)
		self.setAttribute(Qt.WA_ShowWithoutActivating, True)
		self.setFrameStyle(QFrame.NoFrame)
		lay = QVBoxLayout(self); lay.setContentsMargins(18,18,18,18); lay.setSpacing(10)
		self.lbl = QLabel(message, self)
		self.bar = QProgressBar(self); self.bar.setRange(0, 0); self.bar.setTextVisible(False)
		lay.addWidget(self.lbl, 0, Qt.AlignHCenter); lay.addWidget(self.bar)

	def setMessage(self, msg: str): self.lbl.setText(msg)

	def showCentered(self):
		p = self.parent() if isinstance(self.parent(), QWidget) else None
		if p: self.setGeometry(p.rect().adjusted(p.width()//4, p.height()//3, -p.width()//4, -p.height()//3))
		self.setVisible(True); self.raise_()


_TOAST_COLORS = {
	levels.SUCCESS: ("#16c784", "#04140d"),
	levels.INFO: ("#66b0ff", "#0b0f14"),
	levels.WARNING: ("#ffd75f", "#1a1400"),
	levels.ERROR: ("#ff5c5c", "#1a0505"),
}


class Toast(QLabel):
	"""Transient notification pinned to the top-right corner of its parent."""
	def __init__(self, parent: QWidget, duration_ms: int = 3000):
		super().__init__(parent)
		self.setVisible(False)
		self.setWordWrap(True)
		self.setMaximumWidth(360)
		self.setAttribute(Qt.WA_TransparentForMouseEvents, True)
		self._timer = QTimer(self); self._timer.setSingleShot(True)
		self._timer.timeout.connect(self.hide)
		self._duration = duration_ms
		add_drop_shadow(self, blur=20, dy=4, alpha=110)

	def show_message(self, level: str, message: str):
		bg, fg = _TOAST_COLORS.get(level, _TOAST_COLORS[levels.INFO])
		self.setStyleSheet(
			f"QLabel {{ background: {bg}; color: {fg}; border-radius: 8px;"
			f" padding: 10px 14px; font-weight: 600; }}"
		)
		self.setText(message)
		self.adjustSize()
		p = self.parentWidget()
		if p:
			self.move(p.width() - self.width() - 18, 18)
		self.setVisible(True); self.raise_()
		self._timer.start(self._duration)


class NotificationBus(QObject):
	"""
	Thread-safe notify(level, message) sink. Controllers call it from worker
	threads; the signal delivers on the UI thread.
	"""
	message = pyqtSignal(str, str)

	def __call__(self, level: str, message: str) -> None:
		self.message.emit(level, message)
