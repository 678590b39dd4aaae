"""
Tests for configuration and structured logging
"""

import json
import logging

import pytest

from greeter_ledger import config as config_module
from greeter_ledger.config import GreeterConfig, get_config, reload_config
from greeter_ledger.logging_config import JSONFormatter, setup_logging, log_action


class TestConfig:

    def test_defaults(self):
        config = GreeterConfig()
        assert config.initial_greeting == "Building Unstoppable Apps!!!"
        assert config.strict_withdrawals is False
        assert config.storage_backend == "memory"
        assert config.contract_address == "0x" + "00" * 19 + "aa"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("GREETER_STRICT_WITHDRAWALS", "true")
        monkeypatch.setenv("GREETER_API_PORT", "9100")
        original = config_module.config
        try:
            reloaded = reload_config()
            assert reloaded.strict_withdrawals is True
            assert reloaded.api_port == 9100
            assert get_config() is reloaded
        finally:
            config_module.config = original


class TestLogging:

    def test_json_formatter_drops_empty_fields(self):
        record = logging.LogRecord("greeter.test", logging.INFO, __file__, 1, "hello", (), None)
        record.caller = "0x" + "11" * 20
        entry = json.loads(JSONFormatter().format(record))

        assert entry["message"] == "hello"
        assert entry["level"] == "INFO"
        assert entry["caller"] == "0x" + "11" * 20
        assert "action" not in entry

    def test_log_action_carries_structured_fields(self):
        logger = setup_logging("DEBUG", logger_name="greeter.test_config")
        captured = []

        class Capture(logging.Handler):
            def emit(self, record):
                captured.append(record)

        logger.addHandler(Capture())
        log_action(logger, "info", "Greeting changed", caller="0xabc",
                   action="set_greeting", extra={"premium": True})

        assert len(captured) == 1
        assert captured[0].action == "set_greeting"
        assert captured[0].extra == {"premium": True}

    def test_log_action_respects_level(self):
        logger = setup_logging("WARNING", logger_name="greeter.test_quiet")
        captured = []

        class Capture(logging.Handler):
            def emit(self, record):
                captured.append(record)

        logger.addHandler(Capture())
        log_action(logger, "debug", "ignored")
        assert captured == []
