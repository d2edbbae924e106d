# cloudlocker/gui/login_page.py
from PyQt5.QtCore import Qt, QTimer, QSize, QSettings, pyqtSignal
from PyQt5.QtWidgets import (
	QWidget, QLabel, QLineEdit, QPushButton, QHBoxLayout, QVBoxLayout,
	QFrame, QCheckBox, QToolButton
)

from ..core.auth import AuthSession, validate_login_form
from ..core.errors import CloudLockerError
from ..core import notify as levels
from .. import config
from .widgets import add_drop_shadow
from .workers import run_async


def password_field(placeholder: str) -> QLineEdit:
	"""Password line edit with an eye button that toggles echo mode."""
	le = QLineEdit(); le.setPlaceholderText(placeholder); le.setEchoMode(QLineEdit.Password)
	eye = QToolButton(le); eye.setCursor(Qt.PointingHandCursor); eye.setCheckable(True)
	eye.setIcon(le.style().standardIcon(le.style().SP_DialogYesButton))
	eye.setIconSize(QSize(16, 16)); eye.setStyleSheet("QToolButton { border: 0; padding: 0 6px; background: transparent; }")
	eye.setFixedSize(18, 18); eye.setToolTip("Show password")
	eye.toggled.connect(lambda on: le.setEchoMode(QLineEdit.Normal if on else QLineEdit.Password))
	le.setStyleSheet("QLineEdit { padding-right: 28px; }")

	def _place():
		m = 6; r = le.rect()
		eye.move(r.right() - eye.width() - m, r.center().y() - eye.height() // 2)

	orig_resize = le.resizeEvent
	def _resize(e):
		orig_resize(e); _place()
	le.resizeEvent = _resize
	QTimer.singleShot(0, _place)
	return le


class LoginPage(QWidget):
	navigate = pyqtSignal(str)

	def __init__(self, auth: AuthSession, notify, parent=None):
		super().__init__(parent)
		self.auth = auth
		self.notify = notify
		self._busy = False

		card = QFrame(self); card.setObjectName("Card"); card.setFrameShape(QFrame.NoFrame)
		card.setMinimumWidth(420)

		title = QLabel("Welcome back"); subtitle = QLabel("Sign in to access your files")
		title.setObjectName("title"); subtitle.setObjectName("subtitle")
		title.setAlignment(Qt.AlignCenter); subtitle.setAlignment(Qt.AlignCenter)

		self.user_edit = QLineEdit(); self.user_edit.setPlaceholderText("Username")
		self.pass_edit = password_field("Password")

		self.remember = QCheckBox("Remember username")
		self.error = QLabel(""); self.error.setObjectName("error"); self.error.setWordWrap(True)

		self.btn_login = QPushButton("Login"); self.btn_login.setDefault(True)
		self.btn_login.setObjectName("primary")
		self.btn_register = QPushButton("Don't have an account? Register here")
		self.btn_register.setObjectName("link"); self.btn_register.setCursor(Qt.PointingHandCursor)

		form = QVBoxLayout(card); form.setContentsMargins(28, 28, 28, 28); form.setSpacing(12)
		form.addWidget(title); form.addWidget(subtitle); form.addSpacing(8)
		form.addWidget(QLabel("Username")); form.addWidget(self.user_edit)
		form.addWidget(QLabel("Password")); form.addWidget(self.pass_edit)
		opts = QHBoxLayout(); opts.addWidget(self.remember); opts.addStretch(1); form.addLayout(opts)
		form.addWidget(self.error)
		form.addWidget(self.btn_login)
		form.addWidget(self.btn_register, alignment=Qt.AlignHCenter)

		root = QVBoxLayout(self); root.setContentsMargins(18, 18, 18, 18)
		root.addStretch(1); root.addWidget(card, alignment=Qt.AlignHCenter); root.addStretch(1)

		self.btn_login.clicked.connect(self._login)
		self.pass_edit.returnPressed.connect(self._login)
		self.user_edit.returnPressed.connect(self._login)
		self.btn_register.clicked.connect(lambda: self.navigate.emit("/register"))

		add_drop_shadow(card, blur=32, dy=10, alpha=60)
		self._load_settings()

	def reset(self):
		self.pass_edit.clear(); self.error.setText("")
		self._set_busy(False)

	def _set_busy(self, busy: bool):
		self._busy = busy
		for w in (self.btn_login, self.btn_register, self.user_edit, self.pass_edit):
			w.setEnabled(not busy)
		self.btn_login.setText("Signing in…" if busy else "Login")

	def _login(self):
		if self._busy:
			return
		self.error.setText("")
		user = self.user_edit.text().strip()
		pwd = self.pass_edit.text()
		try:
			validate_login_form(user, pwd)
		except CloudLockerError as e:
			self.error.setText(str(e)); self.notify(levels.ERROR, str(e))
			return
		self._set_busy(True)
		run_async(self.auth.login, user, pwd, on_done=self._on_ok, on_error=self._on_fail)

	def _on_ok(self, user):
		self._set_busy(False)
		if self.remember.isChecked():
			self._save_settings()
		else:
			self._clear_saved_user()
		self.pass_edit.clear()
		self.notify(levels.SUCCESS, "Login successful!")
		# navigation follows from the auth change

	def _on_fail(self, err):
		self._set_busy(False)
		self.error.setText(str(err))
		self.notify(levels.ERROR, str(err))

	# -------------------- Settings --------------------
	def _settings(self) -> QSettings:
		return QSettings(config.SETTINGS_ORG, config.SETTINGS_APP)

	def _load_settings(self):
		user = self._settings().value("login/username", "", type=str)
		if user:
			self.user_edit.setText(user)
			self.remember.setChecked(True)

	def _save_settings(self):
		self._settings().setValue("login/username", self.user_edit.text().strip())

	def _clear_saved_user(self):
		self._settings().remove("login/username")
