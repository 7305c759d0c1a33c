import pytest
from pydantic import ValidationError

from core.config import Settings, get_settings


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)  # type: ignore[call-arg]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("LLM_PROVIDER", "CORS_ORIGINS", "ALLOW_CREDENTIALS", "LLM_BASE_URL"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_provider_defaults_to_fireworks(clean_env):
    settings = _settings()

    assert settings.LLM_PROVIDER == "fireworks"
    assert settings.LLM_BASE_URL is None


def test_provider_is_read_from_environment(clean_env):
    clean_env.setenv("LLM_PROVIDER", "groq")
    clean_env.setenv("GROQ_API_KEY", "gsk-test")

    settings = _settings()

    assert settings.LLM_PROVIDER == "groq"
    assert settings.GROQ_API_KEY == "gsk-test"


def test_unknown_provider_is_rejected(clean_env):
    with pytest.raises(ValidationError):
        _settings(LLM_PROVIDER="openrouter")


def test_wildcard_origin_with_credentials_is_rejected(clean_env):
    with pytest.raises(ValueError, match="CORS configuration error"):
        _settings(CORS_ORIGINS=["*"], ALLOW_CREDENTIALS=True)


def test_wildcard_origin_without_credentials_is_allowed(clean_env):
    settings = _settings(CORS_ORIGINS=["*"], ALLOW_CREDENTIALS=False)

    assert settings.CORS_ORIGINS == ["*"]


@pytest.mark.parametrize(
    "raw",
    [
        "http://localhost:5173, https://app.example",
        '["http://localhost:5173", "https://app.example"]',
    ],
)
def test_cors_origins_from_string(clean_env, raw):
    settings = _settings(CORS_ORIGINS=raw)

    assert settings.CORS_ORIGINS == ["http://localhost:5173", "https://app.example"]


def test_malformed_cors_json_is_rejected(clean_env):
    with pytest.raises(ValidationError, match="CSV list or JSON array"):
        _settings(CORS_ORIGINS='["http://a.example"')


def test_get_settings_rejects_unknown_environment(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "staging")
    get_settings.cache_clear()
    try:
        with pytest.raises(ValueError, match="ENVIRONMENT must be"):
            get_settings()
    finally:
        get_settings.cache_clear()
