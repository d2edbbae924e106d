# cloudlocker/gui/register_page.py
from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtWidgets import QWidget, QLabel, QLineEdit, QPushButton, QVBoxLayout, QFrame

from ..core.auth import AuthSession, validate_registration_form
from ..core.errors import CloudLockerError
from ..core import notify as levels
from .login_page import password_field
from .widgets import add_drop_shadow
from .workers import run_async


class RegisterPage(QWidget):
	navigate = pyqtSignal(str)

	def __init__(self, auth: AuthSession, notify, parent=None):
		super().__init__(parent)
		self.auth = auth
		self.notify = notify
		self._busy = False

		card = QFrame(self); card.setObjectName("Card"); card.setMinimumWidth(420)
		title = QLabel("Create an account"); title.setObjectName("title"); title.setAlignment(Qt.AlignCenter)
		subtitle = QLabel("Store and manage your files in one place")
		subtitle.setObjectName("subtitle"); subtitle.setAlignment(Qt.AlignCenter)

		self.user_edit = QLineEdit(); self.user_edit.setPlaceholderText("Choose a username")
		self.email_edit = QLineEdit(); self.email_edit.setPlaceholderText("Enter your email")
		self.pass_edit = password_field("Create a password")
		self.confirm_edit = password_field("Confirm your password")
		self.mismatch = QLabel(""); self.mismatch.setObjectName("error")
		self.error = QLabel(""); self.error.setObjectName("error"); self.error.setWordWrap(True)

		self.btn_submit = QPushButton("Create Account"); self.btn_submit.setObjectName("primary")
		self.btn_submit.setDefault(True)
		self.btn_login = QPushButton("Already have an account? Login here")
		self.btn_login.setObjectName("link"); self.btn_login.setCursor(Qt.PointingHandCursor)

		form = QVBoxLayout(card); form.setContentsMargins(28, 28, 28, 28); form.setSpacing(10)
		form.addWidget(title); form.addWidget(subtitle); form.addSpacing(6)
		for label, w in (("Username", self.user_edit), ("Email", self.email_edit),
						 ("Password", self.pass_edit), ("Confirm Password", self.confirm_edit)):
			form.addWidget(QLabel(label)); form.addWidget(w)
		form.addWidget(self.mismatch)
		form.addWidget(self.error)
		form.addWidget(self.btn_submit)
		form.addWidget(self.btn_login, alignment=Qt.AlignHCenter)

		root = QVBoxLayout(self); root.setContentsMargins(18, 18, 18, 18)
		root.addStretch(1); root.addWidget(card, alignment=Qt.AlignHCenter); root.addStretch(1)

		self.btn_submit.clicked.connect(self._submit)
		self.confirm_edit.returnPressed.connect(self._submit)
		self.confirm_edit.textChanged.connect(self._check_match)
		self.pass_edit.textChanged.connect(self._check_match)
		self.btn_login.clicked.connect(lambda: self.navigate.emit("/login"))

		add_drop_shadow(card, blur=32, dy=10, alpha=60)

	def reset(self):
		for w in (self.pass_edit, self.confirm_edit):
			w.clear()
		self.error.setText(""); self.mismatch.setText("")
		self._set_busy(False)

	def _check_match(self, _=None):
		c = self.confirm_edit.text()
		self.mismatch.setText("Passwords do not match" if c and c != self.pass_edit.text() else "")

	def _set_busy(self, busy: bool):
		self._busy = busy
		for w in (self.btn_submit, self.btn_login, self.user_edit, self.email_edit, self.pass_edit, self.confirm_edit):
			w.setEnabled(not busy)
		self.btn_submit.setText("Creating Account…" if busy else "Create Account")

	def _submit(self):
		if self._busy:
			return
		self.error.setText("")
		u, e = self.user_edit.text().strip(), self.email_edit.text().strip()
		p, c = self.pass_edit.text(), self.confirm_edit.text()
		try:
			validate_registration_form(u, e, p, c)
		except CloudLockerError as err:
			self.error.setText(str(err)); self.notify(levels.ERROR, str(err))
			return
		self._set_busy(True)
		run_async(self.auth.register, u, e, p, on_done=self._on_ok, on_error=self._on_fail)

	def _on_ok(self, _):
		self.reset()
		self.user_edit.clear(); self.email_edit.clear()
		self.notify(levels.SUCCESS, "Registration successful! Please log in.")
		self.navigate.emit("/login")

	def _on_fail(self, err):
		self._set_busy(False)
		self.error.setText(str(err))
		self.notify(levels.ERROR, str(err))
