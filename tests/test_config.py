# Tests for settings loading and logging setup

import io
import json
import logging
import os

import pytest
import structlog

from threat_intel_api import config
from threat_intel_api.config import Settings, get_settings, set_settings
from threat_intel_api.core import logging_setup
from threat_intel_api.core.logging_setup import build_formatter, configure_logging, get_logger

_ENV_VARS = ("HOST", "PORT", "DATABASE_PATH", "LOG_LEVEL", "LOG_JSON", "DASHBOARD_CACHE_TTL")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    # Run from an empty directory so no stray .env file is picked up
    monkeypatch.chdir(tmp_path)
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    set_settings(None)
    yield
    set_settings(None)


class TestSettings:
    def test_defaults(self, tmp_path):
        s = Settings.from_env()
        assert s.host == "0.0.0.0"
        assert s.port == 3000
        assert s.log_level == "INFO"
        assert s.log_json is True
        assert s.dashboard_cache_ttl == 300.0
        assert s.database_path.endswith("threat_intel.db")

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("HOST", "127.0.0.1")
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("DATABASE_PATH", "/data/intel.db")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LOG_JSON", "false")
        monkeypatch.setenv("DASHBOARD_CACHE_TTL", "60")

        s = Settings.from_env()
        assert s.host == "127.0.0.1"
        assert s.port == 8080
        assert s.database_path == "/data/intel.db"
        assert s.log_level == "DEBUG"
        assert s.log_json is False
        assert s.dashboard_cache_ttl == 60.0

    @pytest.mark.parametrize("raw,expected", [
        ("1", True), ("yes", True), ("ON", True), ("0", False), ("off", False),
    ])
    def test_boolean_parsing(self, monkeypatch, raw, expected):
        monkeypatch.setenv("LOG_JSON", raw)
        assert Settings.from_env().log_json is expected

    def test_dotenv_file_is_loaded(self, tmp_path):
        (tmp_path / ".env").write_text("PORT=4567\n")
        try:
            assert Settings.from_env().port == 4567
        finally:
            # load_dotenv writes straight into os.environ
            os.environ.pop("PORT", None)

    def test_environment_beats_dotenv(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("PORT=4567\n")
        monkeypatch.setenv("PORT", "5000")
        assert Settings.from_env().port == 5000

    def test_env_file_can_be_disabled(self, tmp_path):
        (tmp_path / ".env").write_text("PORT=4567\n")
        assert Settings.from_env(env_file=None).port == 3000

    def test_invalid_port_raises(self, monkeypatch):
        monkeypatch.setenv("PORT", "not-a-number")
        with pytest.raises(ValueError):
            Settings.from_env()

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_set_settings_replaces_global(self):
        custom = Settings(port=9999)
        set_settings(custom)
        assert get_settings() is custom
        set_settings(None)
        assert config._settings is None


class TestLogging:
    def test_configure_and_emit(self):
        configure_logging("DEBUG", json_logs=False)
        assert logging.getLogger().level == logging.DEBUG
        get_logger("threat_intel_api.test").info("hello", answer=42)

    def test_get_logger_returns_structlog_proxy(self):
        configure_logging("INFO", json_logs=True)
        log = get_logger("threat_intel_api.test")
        assert hasattr(log, "info")
        assert structlog.is_configured()

    def test_stdlib_record_renders_as_json(self):
        record = logging.LogRecord(
            "threat_intel_api.db.store", logging.INFO, __file__, 1,
            "Opened threat-intel store at %s", ("intel.db",), None,
        )
        line = build_formatter(json_logs=True).format(record)
        payload = json.loads(line)
        assert payload["event"] == "Opened threat-intel store at intel.db"
        assert payload["level"] == "info"
        assert payload["logger"] == "threat_intel_api.db.store"
        assert "timestamp" in payload

    def test_both_logger_kinds_share_one_renderer(self):
        configure_logging("INFO", json_logs=True)
        handler = logging_setup._handler
        buf = io.StringIO()
        old_stream = handler.setStream(buf)
        try:
            logging.getLogger("threat_intel_api.db.schema").info("schema ready v%d", 1)
            get_logger("threat_intel_api.api.main").info("request", status=200)
        finally:
            handler.setStream(old_stream)

        lines = [json.loads(line) for line in buf.getvalue().splitlines()]
        assert [p["event"] for p in lines] == ["schema ready v1", "request"]
        assert lines[1]["status"] == 200
        assert {p["logger"] for p in lines} == {
            "threat_intel_api.db.schema",
            "threat_intel_api.api.main",
        }

    def test_reconfigure_keeps_single_handler(self):
        configure_logging("INFO", json_logs=True)
        configure_logging("INFO", json_logs=False)
        root = logging.getLogger()
        assert root.handlers.count(logging_setup._handler) == 1
        assert isinstance(logging_setup._handler.formatter, structlog.stdlib.ProcessorFormatter)
