from __future__ import annotations

import json
import logging

from portfolio_deck.logger import ContextFilter, JsonFormatter, get_logger, log_info


def _record(msg: str, **context) -> logging.LogRecord:
    record = logging.LogRecord("portfolio_deck.test", logging.INFO, __file__, 1, msg, None, None)
    if context:
        record.context = context
    return record


def test_json_formatter_includes_context() -> None:
    record = _record("Live stream seeded", positions=2)
    ContextFilter().filter(record)
    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["module"] == "portfolio_deck.test"
    assert payload["msg"] == "Live stream seeded"
    assert payload["context"] == {"positions": 2}


def test_context_filter_fills_missing_context() -> None:
    record = _record("plain")
    assert ContextFilter().filter(record)
    payload = json.loads(JsonFormatter().format(record))
    assert "context" not in payload


def test_get_logger_is_cached_and_has_one_handler() -> None:
    a = get_logger("portfolio_deck.cache_check")
    b = get_logger("portfolio_deck.cache_check")
    assert a is b
    assert len(a.handlers) == 1


def test_log_info_passes_context(caplog) -> None:
    logger = get_logger("portfolio_deck.caplog_check")
    with caplog.at_level(logging.INFO, logger="portfolio_deck.caplog_check"):
        log_info(logger, "Portfolio fetched", positions=3)
    assert caplog.records[-1].context == {"positions": 3}
