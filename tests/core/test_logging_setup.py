"""Tests for structured logging setup."""

import json

import pytest

from markchunk.core.logging import log, setup_logging

pytestmark = pytest.mark.unit


def test_json_format_writes_events_to_stderr(capsys):
    setup_logging(format_type="json", level="info")

    log.info("chunk.test.event", chunks=3)

    captured = capsys.readouterr()
    assert captured.out == ""
    record = json.loads(captured.err.strip().splitlines()[-1])
    assert record["event"] == "chunk.test.event"
    assert record["chunks"] == 3
    assert record["level"] == "info"
    assert "timestamp" in record


def test_level_filters_lower_events(capsys):
    setup_logging(format_type="json", level="warning")

    log.info("chunk.hidden")
    log.warning("chunk.shown")

    err = capsys.readouterr().err
    assert "chunk.hidden" not in err
    assert "chunk.shown" in err


def test_plain_format_is_not_json(capsys):
    setup_logging(format_type="plain", level="debug")

    log.debug("chunk.plain.event", value=1)

    line = capsys.readouterr().err.strip()
    assert "chunk.plain.event" in line
    assert "value=1" in line
    with pytest.raises(json.JSONDecodeError):
        json.loads(line)
