import os

API_URL = os.getenv("CLOUDLOCKER_API_URL", "http://localhost:8080/api")
HTTP_TIMEOUT = float(os.getenv("CLOUDLOCKER_HTTP_TIMEOUT", "30"))

# 10 MiB; files of exactly this size are accepted
MAX_UPLOAD_BYTES = int(os.getenv("CLOUDLOCKER_MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

STATE_DIR = os.path.expanduser(os.getenv("CLOUDLOCKER_STATE_DIR", "~/.cloudlocker"))
PREVIEW_DIR = os.path.join(STATE_DIR, "preview")

# "qsettings" (platform settings store) or "file" (JSON document under STATE_DIR)
STORAGE_BACKEND = os.getenv("CLOUDLOCKER_STORAGE", "qsettings").strip().lower()
STORAGE_FILE = os.path.join(STATE_DIR, "storage.json")

# QSettings scope
SETTINGS_ORG = os.getenv("CLOUDLOCKER_ORG", "CloudLocker")
SETTINGS_APP = os.getenv("CLOUDLOCKER_APP", "Client")

BATCH_ARCHIVE_NAME = "files.zip"
