"""Tests for the upload widget state: size limit, candidate lifecycle, submit."""

import pytest

from cloudlocker.core.errors import NetworkOrServerFailure, ValidationFailure
from cloudlocker.core.notify import ERROR, SUCCESS
from cloudlocker.core.upload import LocalFile, UploadController, check_size

LIMIT = 10 * 1024 * 1024


def sized_file(tmp_path, name, size):
    p = tmp_path / name
    with open(p, "wb") as f:
        f.truncate(size)
    return str(p)


@pytest.fixture
def upload(fake_api, notify):
    return UploadController(fake_api, notify=notify, max_bytes=LIMIT)


class TestSizeLimit:
    def test_exactly_at_limit_is_accepted(self, upload, tmp_path):
        assert upload.select(sized_file(tmp_path, "edge.bin", LIMIT)) is True
        assert upload.candidate.size == LIMIT

    def test_one_byte_over_is_rejected(self, upload, fake_api, notifications, tmp_path):
        upload.select(sized_file(tmp_path, "ok.bin", 10))
        assert upload.select(sized_file(tmp_path, "big.bin", LIMIT + 1)) is False
        assert notifications == [(ERROR, "File size exceeds 10 MB limit")]
        assert upload.candidate.name == "ok.bin"
        assert fake_api.calls == []

    def test_check_size(self):
        check_size(LocalFile("/x", "x", LIMIT), LIMIT)
        with pytest.raises(ValidationFailure):
            check_size(LocalFile("/x", "x", LIMIT + 1), LIMIT)


class TestSelection:
    def test_directory_rejected(self, upload, notifications, tmp_path):
        assert upload.select(str(tmp_path)) is False
        assert upload.candidate is None
        assert notifications[-1] == (ERROR, "Only regular files can be uploaded")

    def test_drop_keeps_first_only(self, upload, tmp_path):
        a = sized_file(tmp_path, "a.txt", 3)
        b = sized_file(tmp_path, "b.txt", 3)
        assert upload.select_first([a, b]) is True
        assert upload.candidate.name == "a.txt"

    def test_empty_drop(self, upload):
        assert upload.select_first([]) is False

    def test_size_label(self):
        assert LocalFile("/x", "x", 1024 * 1024).size_label == "1.00 MB"

    def test_clear(self, upload, tmp_path):
        upload.select(sized_file(tmp_path, "a.txt", 3))
        upload.clear()
        assert upload.candidate is None
        assert not upload.can_submit


class TestSubmit:
    def test_requires_candidate(self, upload, fake_api, notifications):
        assert upload.submit() is None
        assert notifications == [(ERROR, "Please select a file first")]
        assert fake_api.calls == []

    def test_success_clears_and_notifies(self, upload, fake_api, notifications, tmp_path):
        path = sized_file(tmp_path, "hello.txt", 5)
        upload.select(path)
        info = upload.submit()
        assert fake_api.calls_to("upload_file") == [("upload_file", path)]
        assert upload.candidate is None
        assert upload.uploading is False
        assert notifications == [(SUCCESS, "File uploaded successfully")]
        assert info == fake_api.files[-1]

    def test_failure_keeps_candidate(self, upload, fake_api, notifications, tmp_path):
        fake_api.fail["upload_file"] = NetworkOrServerFailure("quota exceeded", status_code=413)
        upload.select(sized_file(tmp_path, "hello.txt", 5))
        assert upload.submit() is None
        assert upload.candidate.name == "hello.txt"
        assert upload.uploading is False
        assert len(fake_api.files) == 3
        assert notifications == [(ERROR, "Failed to upload file: quota exceeded")]
