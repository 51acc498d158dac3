"""Tests for settings and CORS headers."""

from nutrition_parser.config import Settings, cors_headers


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")
    monkeypatch.setenv("ALLOW_ORIGINS", "https://app.example.com")
    monkeypatch.setenv("OPENAI_MAX_OUTPUT_TOKENS", "500")

    settings = Settings()

    assert settings.openai_api_key == "env-key"
    assert settings.allow_origins == "https://app.example.com"
    assert settings.openai_max_output_tokens == 500
    assert settings.openai_model == "gpt-4o-mini"


def test_cors_headers_default_to_any_origin() -> None:
    headers = cors_headers(Settings(openai_api_key="key", allow_origins=" "))

    assert headers == {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type, Authorization",
    }
