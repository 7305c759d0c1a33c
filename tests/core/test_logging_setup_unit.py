import json
import logging
from unittest.mock import patch

import pytest
from pythonjsonlogger.json import JsonFormatter

from core.error_handler import setup_logging


def _configure(environment: str, times: int = 1) -> list[logging.Handler]:
    """Run setup_logging against a bare root logger and return what it installed."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers.clear()
    try:
        with patch("core.error_handler.get_settings") as mocked:
            mocked.return_value.ENVIRONMENT = environment
            for _ in range(times):
                setup_logging()
        return root.handlers[:]
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


@pytest.mark.parametrize(
    "environment,formatter_type",
    [("production", JsonFormatter), ("development", logging.Formatter)],
)
def test_setup_logging_formatter(environment, formatter_type):
    handlers = _configure(environment)

    assert len(handlers) == 1
    assert type(handlers[0].formatter) is formatter_type


def test_setup_logging_is_idempotent():
    assert len(_configure("development", times=2)) == 1


def test_production_records_render_as_json():
    (handler,) = _configure("production")
    record = logging.LogRecord(
        "services.generation.executor",
        logging.WARNING,
        __file__,
        1,
        "Provider failed for part=%s",
        ("int",),
        None,
    )

    payload = json.loads(handler.formatter.format(record))

    assert payload["level"] == "WARNING"
    assert payload["name"] == "services.generation.executor"
    assert payload["message"] == "Provider failed for part=int"
    assert "timestamp" in payload
