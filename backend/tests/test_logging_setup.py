"""Tests for geoapi.core.logging_setup formatters and middleware."""

from __future__ import annotations

import json
import logging

import pytest
from fastapi import testclient

from geoapi.core import logging_setup


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="geoapi.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="hello %s",
        args=("world",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_fields() -> None:
    line = logging_setup.JsonFormatter().format(
        _record(request_id="abc", status=200)
    )
    payload = json.loads(line)
    assert payload["msg"] == "hello world"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "geoapi.test"
    assert payload["request_id"] == "abc"
    assert payload["status"] == 200
    assert "path" not in payload


def test_plain_formatter() -> None:
    line = logging_setup.PlainFormatter().format(_record(path="/"))
    assert "geoapi.test: hello world" in line
    assert line.endswith("path=/")


def test_middleware_logs_request(
    client: testclient.TestClient, caplog: pytest.LogCaptureFixture
) -> None:
    """Every request is logged on entry and exit with its status."""
    with caplog.at_level(logging.INFO, logger="geoapi.request"):
        client.get("/listaDeMunicipios")
    records = [r for r in caplog.records if r.name == "geoapi.request"]
    assert [r.getMessage() for r in records] == [
        "request.start",
        "request.end",
    ]
    end = records[-1]
    assert end.status == 200  # type: ignore[attr-defined]
    assert end.path == "/listaDeMunicipios"  # type: ignore[attr-defined]
    assert records[0].request_id == end.request_id  # type: ignore[attr-defined]
