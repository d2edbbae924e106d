# cloudlocker/gui/main.py

#Normal Imports
import sys

#PyQt5 Imports
from PyQt5.QtWidgets import QApplication
from PyQt5.QtCore import Qt, QTimer

from .. import config
from ..core.api_client import APIClient
from ..core.auth import AuthSession
from ..core.file_list import FileListController
from ..core.object_handles import ObjectHandleRegistry
from ..core.session_store import SessionStore
from ..core.storage import JsonFileStorage
from ..core.theme import ThemeState
from ..core.upload import UploadController
from ..logutil import get_logger, setup_logging
from .main_window import MainWindow
from .qsettings_storage import QSettingsStorage
from .theme_center import ThemeManager, system_prefers_dark
from .widgets import NotificationBus


def main(argv=None) -> int:
	setup_logging()
	log = get_logger("gui")

	# Hi-DPI before QApplication
	QApplication.setAttribute(Qt.AA_UseHighDpiPixmaps, True)
	QApplication.setAttribute(Qt.AA_EnableHighDpiScaling, True)

	app = QApplication(sys.argv if argv is None else argv)
	app.setApplicationName(config.SETTINGS_APP)
	app.setOrganizationName(config.SETTINGS_ORG)

	if config.STORAGE_BACKEND == "file":
		storage = JsonFileStorage(config.STORAGE_FILE)
	else:
		storage = QSettingsStorage()
	themes = ThemeManager(app, ThemeState(storage, system_prefers_dark=lambda: system_prefers_dark(app)))
	themes.install()

	store = SessionStore(storage)
	api = APIClient(token_provider=store.token)
	auth = AuthSession(api, store)
	bus = NotificationBus()
	handles = ObjectHandleRegistry(config.PREVIEW_DIR)
	files = FileListController(api, notify=bus, handles=handles)
	upload = UploadController(api, notify=bus)

	mw = MainWindow(auth, files, upload, themes, bus)
	mw.show()
	log.info("client started", extra={"api_url": api.base_url, "storage": config.STORAGE_BACKEND})

	# placeholder is on screen until the persisted session has been read
	QTimer.singleShot(0, auth.rehydrate)
	app.aboutToQuit.connect(files.dispose)
	app.aboutToQuit.connect(handles.release_all)
	return app.exec_()


if __name__ == "__main__":
	sys.exit(main())
