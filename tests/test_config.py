"""
Unit tests for config module
"""
import importlib

import pytest

import config


class TestDefaults:
    """Defaults reproduce the fixed bookstore configuration"""

    def test_mongodb_defaults(self, monkeypatch):
        for key in ("MONGODB_URI", "MONGODB_DB_NAME", "MONGODB_COLLECTION", "LOG_LEVEL"):
            monkeypatch.delenv(key, raising=False)

        reloaded = importlib.reload(config)

        assert reloaded.MONGODB_URI == "mongodb://localhost:27017"
        assert reloaded.MONGODB_DB_NAME == "plp_bookstore"
        assert reloaded.MONGODB_COLLECTION == "books"
        assert reloaded.LOG_LEVEL == "INFO"

    def test_import_time_values_are_valid(self):
        config.validate_config()


class TestEnvHelpers:
    """get_bool_env / get_int_env"""

    @pytest.mark.parametrize("raw,expected", [
        ("true", True), ("1", True), ("YES", True), ("false", False), ("0", False), ("nope", False),
    ])
    def test_bool(self, monkeypatch, raw, expected):
        monkeypatch.setenv("QUERIES_TEST_FLAG", raw)
        assert config.get_bool_env("QUERIES_TEST_FLAG") is expected

    def test_bool_default(self, monkeypatch):
        monkeypatch.delenv("QUERIES_TEST_FLAG", raising=False)
        assert config.get_bool_env("QUERIES_TEST_FLAG", True) is True

    def test_int(self, monkeypatch):
        monkeypatch.setenv("QUERIES_TEST_INT", "2500")
        assert config.get_int_env("QUERIES_TEST_INT", 5) == 2500

    def test_int_falls_back_on_garbage(self, monkeypatch):
        monkeypatch.setenv("QUERIES_TEST_INT", "soon")
        assert config.get_int_env("QUERIES_TEST_INT", 5) == 5


class TestValidation:
    """validate_config"""

    @pytest.mark.parametrize("uri", ["mongodb://localhost:27017", "mongodb+srv://cluster.example.net"])
    def test_accepts_mongodb_schemes(self, monkeypatch, uri):
        monkeypatch.setattr(config, "MONGODB_URI", uri)
        config.validate_config()

    @pytest.mark.parametrize("uri", ["", "http://localhost:27017", "localhost:27017"])
    def test_rejects_malformed_uri(self, monkeypatch, uri):
        monkeypatch.setattr(config, "MONGODB_URI", uri)
        with pytest.raises(ValueError, match="MONGODB_URI"):
            config.validate_config()

    def test_reports_every_problem(self, monkeypatch):
        monkeypatch.setattr(config, "MONGODB_DB_NAME", "")
        monkeypatch.setattr(config, "MONGODB_CONNECT_TIMEOUT_MS", 0)
        monkeypatch.setattr(config, "LOG_LEVEL", "CHATTY")

        with pytest.raises(ValueError) as exc_info:
            config.validate_config()

        message = str(exc_info.value)
        assert "MONGODB_DB_NAME" in message
        assert "MONGODB_CONNECT_TIMEOUT_MS" in message
        assert "LOG_LEVEL" in message
