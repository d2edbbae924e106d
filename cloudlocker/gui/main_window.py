# cloudlocker/gui/main_window.py
from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtWidgets import (
	QMainWindow, QWidget, QHBoxLayout, QVBoxLayout, QLabel, QPushButton,
	QStackedWidget, QProgressBar, QFrame,
)

from ..core import guards
from ..core import notify as levels
from ..core.auth import AuthSession
from ..core.file_list import FileListController
from ..core.upload import UploadController
from ..logutil import get_logger
from .dashboard import Dashboard
from .login_page import LoginPage
from .register_page import RegisterPage
from .theme_center import ThemeManager
from .widgets import NotificationBus, Toast

log = get_logger("gui.window")


class NavBar(QFrame):
	def __init__(self, themes: ThemeManager, parent=None):
		super().__init__(parent)
		self.themes = themes
		brand = QLabel("CloudLocker"); brand.setObjectName("title")
		self.lbl_user = QLabel(""); self.lbl_user.setObjectName("muted")
		self.btn_theme = QPushButton(""); self.btn_theme.setCursor(Qt.PointingHandCursor)
		self.btn_logout = QPushButton("Logout"); self.btn_logout.setCursor(Qt.PointingHandCursor)
		lay = QHBoxLayout(self); lay.setContentsMargins(18, 10, 18, 10)
		lay.addWidget(brand); lay.addStretch(1)
		lay.addWidget(self.lbl_user); lay.addWidget(self.btn_theme); lay.addWidget(self.btn_logout)
		self.btn_theme.clicked.connect(themes.toggle)
		themes.themeChanged.connect(lambda _n: self._sync_theme())
		self._sync_theme()

	def _sync_theme(self):
		self.btn_theme.setText("Light mode" if self.themes.is_dark else "Dark mode")

	def set_user(self, name: str):
		self.lbl_user.setText(f"Welcome, {name}" if name else "")


def _placeholder_page() -> QWidget:
	page = QWidget()
	lbl = QLabel("Loading your account…"); lbl.setObjectName("muted"); lbl.setAlignment(Qt.AlignCenter)
	bar = QProgressBar(); bar.setRange(0, 0); bar.setTextVisible(False); bar.setFixedWidth(220)
	lay = QVBoxLayout(page)
	lay.addStretch(1); lay.addWidget(lbl); lay.addWidget(bar, alignment=Qt.AlignHCenter); lay.addStretch(1)
	return page


class MainWindow(QMainWindow):
	"""
	Single window with one page per route. Every navigation passes through
	the route guards, and an auth change re-runs the guard for the current
	route.
	"""
	authChanged = pyqtSignal(object)

	def __init__(self, auth: AuthSession, files: FileListController, upload: UploadController,
				 themes: ThemeManager, bus: NotificationBus):
		super().__init__()
		self.auth = auth
		self.files = files
		self.themes = themes
		self.bus = bus
		self.route = guards.DASHBOARD
		self.setWindowTitle("CloudLocker")
		self.resize(1180, 760)

		self.navbar = NavBar(themes, self)
		self.stack = QStackedWidget(self)
		self.page_loading = _placeholder_page()
		self.page_login = LoginPage(auth, bus)
		self.page_register = RegisterPage(auth, bus)
		self.page_dashboard = Dashboard(files, upload, themes, bus)
		for p in (self.page_loading, self.page_login, self.page_register, self.page_dashboard):
			self.stack.addWidget(p)
		self._pages = {
			guards.LOGIN: self.page_login,
			guards.REGISTER: self.page_register,
			guards.DASHBOARD: self.page_dashboard,
		}

		central = QWidget(); lay = QVBoxLayout(central); lay.setContentsMargins(0, 0, 0, 0); lay.setSpacing(0)
		lay.addWidget(self.navbar); lay.addWidget(self.stack, 1)
		self.setCentralWidget(central)

		self.toast = Toast(central)
		bus.message.connect(self.toast.show_message)

		self.page_login.navigate.connect(self.navigate)
		self.page_register.navigate.connect(self.navigate)
		self.navbar.btn_logout.clicked.connect(self.logout)

		# listeners may fire on worker threads; hop to the UI thread via the signal
		self.authChanged.connect(self._on_auth_changed)
		self._auth_listener = self.authChanged.emit
		auth.subscribe(self._auth_listener)

		self.navigate(self.route)

	def navigate(self, route: str):
		decision = guards.resolve(self.auth, route)
		was = self.stack.currentWidget()
		self.route = decision.route
		self.navbar.setVisible(self.auth.is_authenticated)
		self.navbar.set_user(self.auth.user.username if self.auth.user else "")

		if decision.gate is guards.Gate.PLACEHOLDER:
			self.stack.setCurrentWidget(self.page_loading)
			return

		page = self._pages[decision.route]
		if page is was:
			return
		log.info("navigate", extra={"requested": route, "route": decision.route})
		if page is self.page_login:
			self.page_login.reset()
		elif page is self.page_register:
			self.page_register.reset()
		self.stack.setCurrentWidget(page)
		if page is self.page_dashboard:
			self.page_dashboard.reload()

	def _on_auth_changed(self, _auth=None):
		if not self.auth.is_authenticated and self.stack.currentWidget() is self.page_dashboard:
			self.page_dashboard.teardown()
		self.navigate(self.route)

	def logout(self):
		self.auth.logout()
		self.bus(levels.SUCCESS, "Logged out successfully!")

	def closeEvent(self, e):
		self.auth.unsubscribe(self._auth_listener)
		super().closeEvent(e)
