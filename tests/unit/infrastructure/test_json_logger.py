# tests/unit/infrastructure/test_json_logger.py
from __future__ import annotations

import json
import logging

import pytest

from pokedex_api.infrastructure.logging.logger import (
    _JsonFormatter,
    configure_root_logging,
    get_json_logger,
    get_request_id,
    set_request_context,
)


def _render(msg: str, level: int = logging.INFO, exc_info=None, **extra) -> dict:
    logger = logging.getLogger("test.json")
    record = logger.makeRecord(logger.name, level, "test", 1, msg, (), exc_info)
    for k, v in extra.items():
        setattr(record, k, v)
    return json.loads(_JsonFormatter().format(record))


def test_stable_keys() -> None:
    payload = _render("cache.hit")
    assert payload["message"] == "cache.hit"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.json"
    assert "ts" in payload


def test_flat_extras_become_top_level_keys() -> None:
    payload = _render("cache.store", kind="item", key="catalog:item:25", ttl_s=1800)
    assert payload["kind"] == "item"
    assert payload["key"] == "catalog:item:25"
    assert payload["ttl_s"] == 1800


def test_nested_extra_mapping_is_flattened() -> None:
    payload = _render("access", extra={"method": "GET", "status": 200})
    assert payload["method"] == "GET"
    assert payload["status"] == 200


def test_exception_details_are_reported() -> None:
    try:
        raise ValueError("bad payload")
    except ValueError:
        import sys

        payload = _render("failed", logging.ERROR, exc_info=sys.exc_info())
    assert payload["exc_type"] == "ValueError"
    assert payload["exc_message"] == "bad payload"


def test_request_id_from_context() -> None:
    set_request_context(request_id="rid-123")
    assert get_request_id() == "rid-123"
    assert _render("x")["request_id"] == "rid-123"


def test_configure_root_logging_is_idempotent(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "debug")
    root = logging.getLogger()
    saved = list(root.handlers)
    root.handlers.clear()
    try:
        configure_root_logging()
        configure_root_logging()
        json_handlers = [h for h in root.handlers if isinstance(h.formatter, _JsonFormatter)]
        assert len(json_handlers) == 1
        assert root.level == logging.DEBUG
    finally:
        root.handlers[:] = saved
        root.setLevel(logging.INFO)


def test_get_json_logger_propagates() -> None:
    assert get_json_logger("pokedex_api.test").propagate is True
