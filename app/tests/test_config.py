"""
Tests for configuration validation
"""
import pytest
from pydantic import ValidationError
from app.core.config import Settings


def prod_settings(**overrides):
    values = dict(
        DATABASE_URL="postgresql://test",
        JWT_SECRET_KEY="a" * 32,
        APP_ENV="prod",
        ALLOWED_ORIGINS="https://example.com",
        ALLOW_DEV_USER_HEADER=False,
    )
    values.update(overrides)
    return Settings(**values)


def test_prod_settings_rejects_wildcard_origins():
    settings = prod_settings(ALLOWED_ORIGINS="*")

    with pytest.raises(ValueError, match="ALLOWED_ORIGINS"):
        settings.validate_production()


def test_prod_settings_rejects_short_jwt_secret():
    settings = prod_settings(JWT_SECRET_KEY="short")

    with pytest.raises(ValueError, match="JWT_SECRET_KEY"):
        settings.validate_production()


def test_prod_settings_rejects_dev_user_header():
    """The x-user-id shortcut must be off in production"""
    settings = prod_settings(ALLOW_DEV_USER_HEADER=True)

    with pytest.raises(ValueError, match="ALLOW_DEV_USER_HEADER"):
        settings.validate_production()


def test_valid_prod_settings_pass():
    prod_settings().validate_production()


def test_local_settings_allows_wildcard_origins():
    settings = Settings(
        DATABASE_URL="postgresql://test",
        JWT_SECRET_KEY="test-key",
        APP_ENV="local",
        ALLOWED_ORIGINS="*"
    )

    settings.validate_production()
    assert settings.get_allowed_origins_list() == ["*"]


def test_get_allowed_origins_list():
    """Test parsing of ALLOWED_ORIGINS"""
    settings = Settings(
        DATABASE_URL="postgresql://test",
        JWT_SECRET_KEY="test-key",
        ALLOWED_ORIGINS="https://example.com, https://app.example.com,"
    )
    origins = settings.get_allowed_origins_list()
    assert origins == ["https://example.com", "https://app.example.com"]


def test_invalid_app_env_rejected():
    with pytest.raises(ValidationError):
        Settings(APP_ENV="production")


def test_email_provider_normalized_and_validated():
    assert Settings(EMAIL_PROVIDER="SMTP").EMAIL_PROVIDER == "smtp"
    with pytest.raises(ValidationError):
        Settings(EMAIL_PROVIDER="carrier-pigeon")


def test_open_rate_bounds():
    with pytest.raises(ValidationError):
        Settings(EMAIL_OPEN_RATE=1.5)
