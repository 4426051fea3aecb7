import logging
import json
from logging import Logger
from functools import lru_cache
from datetime import datetime, timezone

from portfolio_deck.config import settings


def _global_level() -> int:
    return getattr(logging, str(settings()["LOG_LEVEL"]).upper(), logging.INFO)


class ContextFilter(logging.Filter):
    """Guarantees record.context always exists (prevents type warnings)."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "context"):
            record.context = None
        return True


class JsonFormatter(logging.Formatter):
    """Structured JSON formatter for deterministic, parseable logs."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }

        if record.context:  # type: ignore
            payload["context"] = record.context  # pyright: ignore[reportAttributeAccessIssue]

        return json.dumps(payload, ensure_ascii=False, default=str)


@lru_cache(None)
def get_logger(name: str = "portfolio_deck") -> Logger:
    logger = logging.getLogger(name)
    logger.setLevel(_global_level())

    if logger.handlers:
        return logger

    handler = logging.StreamHandler()
    handler.addFilter(ContextFilter())
    handler.setFormatter(JsonFormatter())

    logger.addHandler(handler)
    return logger


def log_debug(logger: Logger, msg: str, **context):
    logger.debug(msg, extra={"context": context})


def log_info(logger: Logger, msg: str, **context):
    logger.info(msg, extra={"context": context})


def log_warn(logger: Logger, msg: str, **context):
    logger.warning(msg, extra={"context": context})


def log_error(logger: Logger, msg: str, **context):
    logger.error(msg, extra={"context": context})
