"""Tests for log formatting helpers."""

import json
import logging

import pytest

from cloudlocker.logutil import JSONLFormatter, bind, get_logger, redacts, span


def make_record(msg="hello", **extra):
    rec = logging.LogRecord("cloudlocker.test", logging.INFO, __file__, 1, msg, None, None)
    for k, v in extra.items():
        setattr(rec, k, v)
    return rec


class TestJSONLFormatter:
    def test_one_object_per_line_with_extras(self):
        line = JSONLFormatter().format(make_record(file_id=3, path="/files/3"))
        data = json.loads(line)
        assert data["msg"] == "hello"
        assert data["lvl"] == "INFO"
        assert data["file_id"] == 3
        assert "\n" not in line

    def test_unserializable_extra_is_repr(self):
        data = json.loads(JSONLFormatter().format(make_record(obj={1, 2})))
        assert data["obj"].startswith("{")


class TestHelpers:
    def test_child_logger_names(self):
        assert get_logger("auth").name == "cloudlocker.auth"
        assert get_logger("cloudlocker.api").name == "cloudlocker.api"
        assert get_logger().name == "cloudlocker"

    def test_redacts(self):
        assert redacts("abcdefgh") == "abcd…***"
        assert redacts("abc") == "***"
        assert redacts(None) == ""

    def test_span_logs_and_reraises(self, caplog):
        log = get_logger("test.span")
        caplog.set_level(logging.DEBUG, logger="cloudlocker.test.span")
        with pytest.raises(RuntimeError):
            with span(bind(log, file_id=1), "files.delete"):
                raise RuntimeError("boom")
        events = [r.getMessage() for r in caplog.records]
        assert events == ["files.delete.begin", "files.delete.error"]
        assert caplog.records[-1].file_id == 1
