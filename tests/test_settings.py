from __future__ import annotations

from careerchat.core.settings import Settings


def test_settings_read_environment(monkeypatch):
    monkeypatch.delenv("OPENROUTER_CLIENT_API_KEY", raising=False)
    monkeypatch.setenv("OPENROUTER_API_KEY", "sk-env")
    monkeypatch.setenv("OPENROUTER_MODEL", "openai/gpt-4o")
    monkeypatch.setenv("VERCEL_URL", "career-guide.vercel.app")
    monkeypatch.setenv("VITE_OPENROUTER_API_KEY", "sk-vite")
    monkeypatch.setenv("CHAT_ALLOW_DIRECT_FALLBACK", "false")

    settings = Settings(_env_file=None)

    assert settings.openrouter_api_key == "sk-env"
    assert settings.openrouter_model == "openai/gpt-4o"
    assert settings.deployment_host == "career-guide.vercel.app"
    assert settings.client_api_key == "sk-vite"
    assert settings.allow_direct_fallback is False


def test_settings_have_no_embedded_credentials(monkeypatch):
    for name in (
        "OPENROUTER_API_KEY",
        "OPENROUTER_CLIENT_API_KEY",
        "VITE_OPENROUTER_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.openrouter_api_key is None
    assert settings.client_api_key is None
    assert settings.openrouter_temperature == 0.2
    assert settings.openrouter_max_tokens == 500
    assert settings.upstream_retry_delay_seconds == 0.6


def test_database_url_override():
    settings = Settings(_env_file=None, database_url_override="sqlite://")
    assert settings.database_url == "sqlite://"


def test_settings_ignore_unknown_environment_keys(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "prod")

    settings = Settings(_env_file=None)

    assert not hasattr(settings, "environment")
