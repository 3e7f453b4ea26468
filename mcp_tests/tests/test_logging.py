import json
import logging

import structlog

from core import logging as log_mod


def test_configure_logging_emits_json_to_stderr(capsys):
    try:
        log_mod.configure_logging("debug")
        log_mod.get_logger("cache.test").info("cache_cleared", cache="l1", removed=3)

        err = capsys.readouterr().err.strip().splitlines()
        payload = json.loads(err[-1])
        assert payload["event"] == "cache_cleared"
        assert payload["cache"] == "l1"
        assert payload["removed"] == 3
        assert payload["level"] == "info"
        assert payload["logger"] == "cache.test"
    finally:
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()


def test_configure_logging_unknown_level_defaults_to_info():
    try:
        log_mod.configure_logging("chatty")
        assert logging.getLogger().level == logging.INFO
    finally:
        structlog.reset_defaults()
        logging.getLogger().handlers.clear()
