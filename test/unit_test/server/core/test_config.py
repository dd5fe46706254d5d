"""
Unit tests for the server settings and their grouped views.
"""

import pytest
from pydantic import SecretStr

from vira.server.core.config import Settings


def make_settings(**values) -> Settings:
    return Settings(_env_file=None, **values)


def test_defaults(monkeypatch):
    for name in ("DATABASE_URL", "VIRA_MATCH_PROVIDER", "VIRA_MATCH_TOP_CANDIDATES", "CRON_SECRET"):
        monkeypatch.delenv(name, raising=False)
    config = make_settings()
    assert config.database.url == "sqlite+aiosqlite:///./vira.db"
    assert config.matching.provider == "anthropic"
    assert config.matching.top_candidates == 5
    assert config.cron.secret is None
    assert config.cors.origins == ["*"]


def test_environment_binding(monkeypatch):
    monkeypatch.setenv("VIRA_MATCH_TOP_CANDIDATES", "8")
    monkeypatch.setenv("MAILGUN_DOMAIN", "mg.vira.test")
    monkeypatch.setenv("CORS_ORIGINS", '["https://app.vira.test"]')
    monkeypatch.setenv("VIRA_LOG_LEVEL", "DEBUG")

    config = make_settings()
    assert config.matching.top_candidates == 8
    assert config.mailgun.domain == "mg.vira.test"
    assert config.cors.origins == ["https://app.vira.test"]
    assert config.log_level == "DEBUG"


def test_grouped_views_follow_field_changes():
    config = make_settings(AUTH_JWT_SECRET=SecretStr("s3cret"), AUTH_JWT_AUDIENCE="vira")
    assert config.identity.jwt_secret.get_secret_value() == "s3cret"
    assert config.identity.jwt_audience == "vira"

    config.VIRA_APP_URL = "https://vira.example"
    assert config.app.url == "https://vira.example"


@pytest.mark.parametrize(
    "field,group,attribute",
    [
        ("OPENAI_API_KEY", "openai", "api_key"),
        ("ANTHROPIC_API_KEY", "anthropic", "api_key"),
        ("MAILGUN_API_KEY", "mailgun", "api_key"),
        ("AUTH_PROVIDER_SECRET_KEY", "identity", "secret_key"),
        ("CRON_SECRET", "cron", "secret"),
    ],
)
def test_secrets_stay_masked(field, group, attribute):
    config = make_settings(**{field: SecretStr("top-secret")})
    secret = getattr(getattr(config, group), attribute)
    assert isinstance(secret, SecretStr)
    assert "top-secret" not in repr(secret)
    assert secret.get_secret_value() == "top-secret"
