"""Shared fixtures for client tests."""

import threading

import pytest

from cloudlocker.core.errors import NetworkOrServerFailure
from cloudlocker.core.models import FileInfo
from cloudlocker.core.object_handles import ObjectHandleRegistry
from cloudlocker.core.session_store import LEGACY_TOKEN_KEY, LEGACY_USER_KEY, SESSION_KEY
from cloudlocker.core.storage import MemoryStorage
from cloudlocker.core.theme import THEME_KEY

KNOWN_KEYS = (SESSION_KEY, LEGACY_TOKEN_KEY, LEGACY_USER_KEY, THEME_KEY)


def stored_keys(storage):
    """Sorted client keys that currently hold a value."""
    return sorted(k for k in KNOWN_KEYS if storage.get(k) is not None)


def make_file(id, name, ftype="application/octet-stream", size=1024):
    return FileInfo(id=id, file_name=name, file_type=ftype, file_size=size,
                    upload_date="2024-05-01T10:30:00")


class FakeApi:
    """
    Records every call. ``fail`` maps a method name to an exception, or to a
    set of ids for which the id-taking methods fail.
    """

    def __init__(self, files=None):
        self.files = list(files or [])
        self.calls = []
        self.fail = {}
        self.login_response = {"id": 7, "username": "alice", "email": "alice@example.com", "token": "tok-123"}
        self.view_data = {}
        self._lock = threading.Lock()

    def _record(self, name, *args):
        with self._lock:
            self.calls.append((name,) + args)

    def _maybe_fail(self, name, file_id=None):
        f = self.fail.get(name)
        if f is None:
            return
        if isinstance(f, set):
            if file_id in f:
                raise NetworkOrServerFailure(f"cannot {name} {file_id}", status_code=500)
            return
        raise f

    def calls_to(self, name):
        return [c for c in self.calls if c[0] == name]

    def login(self, username, password):
        self._record("login", username, password)
        self._maybe_fail("login")
        return dict(self.login_response)

    def register(self, username, email, password):
        self._record("register", username, email, password)
        self._maybe_fail("register")
        return {"message": "ok"}

    def list_files(self):
        self._record("list_files")
        self._maybe_fail("list_files")
        return list(self.files)

    def upload_file(self, local_path):
        self._record("upload_file", local_path)
        self._maybe_fail("upload_file")
        info = make_file(100 + len(self.files), local_path.rsplit("/", 1)[-1])
        self.files.append(info)
        return info

    def download_file(self, file_id):
        self._record("download_file", file_id)
        self._maybe_fail("download_file", file_id)
        return b"payload-%d" % file_id

    def view_file(self, file_id):
        self._record("view_file", file_id)
        self._maybe_fail("view_file", file_id)
        return self.view_data.get(file_id, b"\x89PNG fake")

    def delete_file(self, file_id):
        self._record("delete_file", file_id)
        self._maybe_fail("delete_file", file_id)
        with self._lock:
            self.files = [f for f in self.files if f.id != file_id]
        return {"message": "deleted"}

    def rename_file(self, file_id, new_name):
        self._record("rename_file", file_id, new_name)
        self._maybe_fail("rename_file", file_id)
        for i, f in enumerate(self.files):
            if f.id == file_id:
                self.files[i] = make_file(f.id, new_name, f.file_type, f.file_size)
                return self.files[i]
        raise NetworkOrServerFailure("not found", status_code=404)

    def batch_download(self, file_ids):
        self._record("batch_download", list(file_ids))
        self._maybe_fail("batch_download")
        return b"PK\x03\x04zip"


@pytest.fixture
def storage():
    """Empty in-memory key/value storage."""
    return MemoryStorage()


@pytest.fixture
def sample_files():
    return [
        make_file(1, "report.pdf", "application/pdf", 2048),
        make_file(2, "photo.png", "image/png", 4096),
        make_file(3, "notes.docx", "application/vnd.openxmlformats-officedocument.wordprocessingml.document", 512),
    ]


@pytest.fixture
def fake_api(sample_files):
    return FakeApi(sample_files)


@pytest.fixture
def notifications():
    """List that collects (level, message) pairs sent during a test."""
    return []


@pytest.fixture
def notify(notifications):
    def _notify(level, message):
        notifications.append((level, message))
    return _notify


@pytest.fixture
def handles(tmp_path):
    reg = ObjectHandleRegistry(str(tmp_path / "preview"))
    yield reg
    reg.release_all()
