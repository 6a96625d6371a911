import io
import json
import logging

from leaderboard_etl.logging_utils import JsonFormatter, log_json


def _logger(stream: io.StringIO) -> logging.Logger:
    logger = logging.getLogger("leaderboard_etl.tests.json")
    logger.handlers.clear()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger


def test_log_json_merges_extra_fields():
    stream = io.StringIO()
    log_json(_logger(stream), "fetch_success", candidate=1, bytes=42)
    payload = json.loads(stream.getvalue())
    assert payload["event"] == "fetch_success"
    assert payload["level"] == "INFO"
    assert payload["candidate"] == 1
    assert payload["bytes"] == 42
    assert "ts" in payload


def test_log_json_level():
    stream = io.StringIO()
    log_json(_logger(stream), "refresh_failed", logging.WARNING, error="boom")
    assert json.loads(stream.getvalue())["level"] == "WARNING"
