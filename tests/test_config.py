"""Tests for environment-driven configuration."""
from krishi_ai.config import DEFAULT_RETRY_SETTINGS, RetrySettings, Settings, get_api_key, get_settings, reset_settings

KEY_VARS = ("GOOGLE_GENAI_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY")


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("CHAT_MAX_ATTEMPTS", "CHAT_BASE_DELAY", "GEMINI_MODEL", "GEMINI_TIMEOUT_SECONDS"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env()

        assert settings.retry_for("chat") == RetrySettings(max_attempts=3, base_delay=2.0)
        assert settings.retry_for("recommendations") == RetrySettings(max_attempts=3, base_delay=1.5)
        assert settings.model_override is None
        assert settings.timeout_seconds == 60.0

    def test_default_table_matches_flows(self):
        assert set(DEFAULT_RETRY_SETTINGS) == {"chat", "diagnosis", "recommendations"}
        assert DEFAULT_RETRY_SETTINGS["diagnosis"].max_attempts == 1

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("CHAT_MAX_ATTEMPTS", "5")
        monkeypatch.setenv("CHAT_BASE_DELAY", "0.25")
        monkeypatch.setenv("GEMINI_MODEL", "gemini-2.5-flash")
        monkeypatch.setenv("LOG_FORMAT", "JSON")

        settings = Settings.from_env()

        assert settings.retry_for("chat") == RetrySettings(max_attempts=5, base_delay=0.25)
        assert settings.model_override == "gemini-2.5-flash"
        assert settings.log_format == "json"

    def test_invalid_values_fall_back(self, monkeypatch):
        monkeypatch.setenv("RECOMMENDATIONS_MAX_ATTEMPTS", "three")
        monkeypatch.setenv("RECOMMENDATIONS_BASE_DELAY", "-4")
        monkeypatch.setenv("CHAT_MAX_ATTEMPTS", "0")

        settings = Settings.from_env()

        assert settings.retry_for("recommendations") == DEFAULT_RETRY_SETTINGS["recommendations"]
        assert settings.retry_for("chat").max_attempts == 3

    def test_singleton_and_reset(self, monkeypatch):
        monkeypatch.setenv("CHAT_MAX_ATTEMPTS", "2")
        first = get_settings()
        assert get_settings() is first

        monkeypatch.setenv("CHAT_MAX_ATTEMPTS", "4")
        reset_settings()
        assert get_settings().retry_for("chat").max_attempts == 4


class TestApiKey:

    def test_first_set_wins(self, monkeypatch):
        for name in KEY_VARS:
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("GEMINI_API_KEY", "gemini-key")
        monkeypatch.setenv("GOOGLE_API_KEY", "google-key")
        assert get_api_key() == "gemini-key"

        monkeypatch.setenv("GOOGLE_GENAI_API_KEY", "genai-key")
        assert get_api_key() == "genai-key"

    def test_missing(self, monkeypatch):
        for name in KEY_VARS:
            monkeypatch.delenv(name, raising=False)
        assert get_api_key() is None
