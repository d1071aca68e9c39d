"""
Configuration management for Wish Desk CRM Backend
"""
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator
from typing import Optional, List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    DATABASE_URL: str = Field(default="sqlite:///./wishdesk.db", description="SQLAlchemy database URL")
    JWT_SECRET_KEY: str = Field(default="dev-secret-change-me", description="JWT secret key for token signing")

    JWT_ALGORITHM: str = Field(default="HS256", description="JWT algorithm")
    JWT_EXPIRE_MINUTES: int = Field(default=120, description="JWT token expiration in minutes")

    APP_ENV: str = Field(default="local", description="Application environment: local, staging, prod")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level: DEBUG, INFO, WARNING, ERROR")

    # CORS settings
    ALLOWED_ORIGINS: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins. Use '*' for local only."
    )

    # Development authentication: trust the x-user-id header
    ALLOW_DEV_USER_HEADER: bool = Field(
        default=True,
        description="Resolve the acting user from the x-user-id header (development only)",
    )

    VERSION: Optional[str] = Field(default=None, description="Application version (git SHA or semver)")

    # Initial admin bootstrap settings
    INITIAL_ADMIN_USERNAME: str = Field(
        default="admin",
        description="Username for the initial admin user (used when no admin exists)"
    )
    INITIAL_ADMIN_PASSWORD: str = Field(
        default="Admin@12345",
        description="Password for the initial admin user (used when no admin exists)"
    )

    # File stores for generated artifacts
    REPORTS_DIR: str = Field(default="./storage/reports", description="Directory for generated report files")
    DOCS_DIR: str = Field(default="./storage/docs", description="Directory for documentation markdown files")

    # GitHub integration
    GITHUB_TOKEN: Optional[str] = Field(default=None, description="Personal access token used for repository sync")
    GITHUB_API_URL: str = Field(default="https://api.github.com", description="GitHub REST API base URL")
    GITHUB_TIMEOUT_SECONDS: float = Field(default=15.0, description="Timeout for outbound GitHub calls")

    # Email delivery
    EMAIL_PROVIDER: str = Field(default="simulated", description="Email transport: simulated, smtp")
    EMAIL_FROM: str = Field(default="noreply@wishdesk.local", description="Sender address")
    EMAIL_SEND_DELAY_SECONDS: float = Field(default=1.0, description="Simulated delivery delay")
    EMAIL_OPEN_DELAY_SECONDS: float = Field(default=5.0, description="Upper bound of the simulated open delay")
    EMAIL_OPEN_RATE: float = Field(default=0.7, ge=0.0, le=1.0, description="Simulated open probability")
    SMTP_HOST: Optional[str] = Field(default=None)
    SMTP_PORT: int = Field(default=587)
    SMTP_USERNAME: Optional[str] = Field(default=None)
    SMTP_PASSWORD: Optional[str] = Field(default=None)
    SMTP_USE_TLS: bool = Field(default=True)

    AUDIT_LOG_PAGE_SIZE: int = Field(default=100, ge=1, description="Fixed page size of the audit log listing")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True

    @field_validator("APP_ENV")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate APP_ENV"""
        allowed = ["local", "staging", "prod"]
        if v not in allowed:
            raise ValueError(f"APP_ENV must be one of {allowed}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate LOG_LEVEL"""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"LOG_LEVEL must be one of {allowed}")
        return v.upper()

    @field_validator("EMAIL_PROVIDER")
    @classmethod
    def validate_email_provider(cls, v: str) -> str:
        allowed = ["simulated", "smtp"]
        if v.lower() not in allowed:
            raise ValueError(f"EMAIL_PROVIDER must be one of {allowed}")
        return v.lower()

    def validate_production(self) -> None:
        """
        Validate settings for production environment

        Raises:
            ValueError: If production settings are invalid
        """
        if self.APP_ENV == "prod":
            if len(self.JWT_SECRET_KEY) < 32:
                raise ValueError(
                    "JWT_SECRET_KEY must be at least 32 characters in production environment"
                )

            if self.ALLOWED_ORIGINS == "*" or not self.ALLOWED_ORIGINS:
                raise ValueError(
                    "ALLOWED_ORIGINS must be explicitly set (not '*') in production environment"
                )

            if self.ALLOW_DEV_USER_HEADER:
                raise ValueError(
                    "ALLOW_DEV_USER_HEADER must be disabled in production environment"
                )

    def get_allowed_origins_list(self) -> List[str]:
        """
        Get list of allowed CORS origins

        Returns:
            List of allowed origins (or ['*'] for local)
        """
        if self.ALLOWED_ORIGINS == "*":
            return ["*"]
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]


# Create settings instance
settings = Settings()

# Validate production settings if in prod
if settings.APP_ENV == "prod":
    settings.validate_production()
