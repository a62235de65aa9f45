"""
Tests for environment-driven settings.
"""

from npm_mcp.config import env_int


class TestEnvInt:
    def test_unset_uses_default(self, monkeypatch):
        monkeypatch.delenv("NPM_TOKEN_TTL", raising=False)
        assert env_int("NPM_TOKEN_TTL", 3600) == 3600

    def test_numeric_value(self, monkeypatch):
        monkeypatch.setenv("NPM_TOKEN_TTL", " 600 ")
        assert env_int("NPM_TOKEN_TTL", 3600) == 600

    def test_non_numeric_value_falls_back(self, monkeypatch):
        monkeypatch.setenv("NPM_TOKEN_TTL", "1h")
        assert env_int("NPM_TOKEN_TTL", 3600) == 3600

    def test_non_positive_value_falls_back(self, monkeypatch):
        monkeypatch.setenv("NPM_TOKEN_TTL", "0")
        assert env_int("NPM_TOKEN_TTL", 3600) == 3600
