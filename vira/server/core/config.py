"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
Every value is bound from environment variables and the .env file. Provider
settings are declared once on ``Settings`` under their environment names and
exposed as grouped, typed configs through properties.
"""

from typing import Optional

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class DatabaseConfig(BaseModel):
    """Application database configuration."""

    url: str = Field(
        default="sqlite+aiosqlite:///./vira.db",
        alias="DATABASE_URL",
        description="Database URL; PostgreSQL URLs are rewritten to the asyncpg driver",
    )
    auto_create: bool = Field(
        default=False, alias="DATABASE_AUTO_CREATE", description="Create tables on startup (local development only)"
    )

    model_config = {"populate_by_name": True}


class OpenAIConfig(BaseModel):
    """OpenAI API configuration (chat fallback and embeddings)."""

    api_key: Optional[SecretStr] = Field(
        default=None, alias="OPENAI_API_KEY", description="OpenAI API key for authentication"
    )
    model: str = Field(default="gpt-4o-mini", alias="OPENAI_MODEL", description="OpenAI model for ViRA Match")
    base_url: Optional[str] = Field(
        default=None, alias="OPENAI_BASE_URL", description="Custom OpenAI API base URL (optional)"
    )
    embedding_model: str = Field(
        default="text-embedding-3-small", alias="OPENAI_EMBEDDING_MODEL", description="Embedding model"
    )
    embedding_dimensions: int = Field(
        default=1536, alias="OPENAI_EMBEDDING_DIMENSIONS", description="Embedding vector size"
    )

    model_config = {"populate_by_name": True}


class AnthropicConfig(BaseModel):
    """Anthropic API configuration."""

    api_key: Optional[SecretStr] = Field(
        default=None, alias="ANTHROPIC_API_KEY", description="Anthropic API key for authentication"
    )
    model: str = Field(
        default="claude-3-5-sonnet-latest", alias="ANTHROPIC_MODEL", description="Anthropic model for ViRA Match"
    )

    model_config = {"populate_by_name": True}


class MatchingConfig(BaseModel):
    """ViRA Match configuration."""

    provider: str = Field(
        default="anthropic", alias="VIRA_MATCH_PROVIDER", description="LLM provider for matching (anthropic or openai)"
    )
    top_candidates: int = Field(
        default=5, alias="VIRA_MATCH_TOP_CANDIDATES", description="Pre-scored candidates sent to the LLM"
    )

    model_config = {"populate_by_name": True}


class MailgunConfig(BaseModel):
    """Mailgun transactional email configuration."""

    api_key: Optional[SecretStr] = Field(default=None, alias="MAILGUN_API_KEY", description="Mailgun API key")
    domain: Optional[str] = Field(default=None, alias="MAILGUN_DOMAIN", description="Sending domain")
    base_url: str = Field(
        default="https://api.mailgun.net", alias="MAILGUN_BASE_URL", description="Mailgun API base URL (EU or US)"
    )
    from_email: str = Field(
        default="ViRA <noreply@vira.local>", alias="MAILGUN_FROM_EMAIL", description="Sender address"
    )

    model_config = {"populate_by_name": True}


class IdentityConfig(BaseModel):
    """Identity provider and bearer token configuration."""

    api_url: str = Field(
        default="https://api.clerk.com/v1", alias="AUTH_PROVIDER_API_URL", description="Identity provider backend API"
    )
    secret_key: Optional[SecretStr] = Field(
        default=None, alias="AUTH_PROVIDER_SECRET_KEY", description="Identity provider backend secret key"
    )
    jwt_secret: Optional[SecretStr] = Field(
        default=None, alias="AUTH_JWT_SECRET", description="Key used to verify bearer tokens"
    )
    jwt_algorithm: str = Field(default="HS256", alias="AUTH_JWT_ALGORITHM", description="Bearer token algorithm")
    jwt_audience: Optional[str] = Field(default=None, alias="AUTH_JWT_AUDIENCE", description="Expected audience")

    model_config = {"populate_by_name": True}


class CronConfig(BaseModel):
    """Scheduled job configuration."""

    secret: Optional[SecretStr] = Field(default=None, alias="CRON_SECRET", description="Bearer secret for cron calls")

    model_config = {"populate_by_name": True}


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS", description="Allowed CORS origins (use * for all)")
    allow_credentials: bool = Field(
        default=True, alias="CORS_ALLOW_CREDENTIALS", description="Allow credentials in CORS requests"
    )
    allow_methods: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_METHODS", description="Allowed HTTP methods (use * for all)"
    )
    allow_headers: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_HEADERS", description="Allowed HTTP headers (use * for all)"
    )

    model_config = {"populate_by_name": True}


class AppConfig(BaseModel):
    """Public application settings used in outgoing links."""

    url: str = Field(default="http://localhost:3000", alias="VIRA_APP_URL", description="Public web app URL")

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # ViRA Server Configuration
    # =====================================================================
    server_host: str = Field(default="0.0.0.0", description="Server host address to bind to", alias="VIRA_SERVER_HOST")
    server_port: int = Field(default=8000, description="Server port number", alias="VIRA_SERVER_PORT")
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="VIRA_LOG_LEVEL",
    )
    log_format: str = Field(default="detailed", description="simple, detailed or json", alias="VIRA_LOG_FORMAT")
    log_file_dir: str = Field(default="logs", description="Directory for log files", alias="VIRA_LOG_FILE_DIR")
    enable_file_logging: bool = Field(
        default=False, description="Write logs to a file as well", alias="VIRA_ENABLE_FILE_LOGGING"
    )

    # =====================================================================
    # Database
    # =====================================================================
    DATABASE_URL: str = Field(default="sqlite+aiosqlite:///./vira.db")
    DATABASE_AUTO_CREATE: bool = Field(default=False)

    # =====================================================================
    # LLM and Embedding Providers
    # =====================================================================
    OPENAI_API_KEY: Optional[SecretStr] = Field(default=None)
    OPENAI_MODEL: str = Field(default="gpt-4o-mini")
    OPENAI_BASE_URL: Optional[str] = Field(default=None)
    OPENAI_EMBEDDING_MODEL: str = Field(default="text-embedding-3-small")
    OPENAI_EMBEDDING_DIMENSIONS: int = Field(default=1536)
    ANTHROPIC_API_KEY: Optional[SecretStr] = Field(default=None)
    ANTHROPIC_MODEL: str = Field(default="claude-3-5-sonnet-latest")
    VIRA_MATCH_PROVIDER: str = Field(default="anthropic")
    VIRA_MATCH_TOP_CANDIDATES: int = Field(default=5)

    # =====================================================================
    # Email, Identity and Scheduling
    # =====================================================================
    MAILGUN_API_KEY: Optional[SecretStr] = Field(default=None)
    MAILGUN_DOMAIN: Optional[str] = Field(default=None)
    MAILGUN_BASE_URL: str = Field(default="https://api.mailgun.net")
    MAILGUN_FROM_EMAIL: str = Field(default="ViRA <noreply@vira.local>")
    AUTH_PROVIDER_API_URL: str = Field(default="https://api.clerk.com/v1")
    AUTH_PROVIDER_SECRET_KEY: Optional[SecretStr] = Field(default=None)
    AUTH_JWT_SECRET: Optional[SecretStr] = Field(default=None)
    AUTH_JWT_ALGORITHM: str = Field(default="HS256")
    AUTH_JWT_AUDIENCE: Optional[str] = Field(default=None)
    CRON_SECRET: Optional[SecretStr] = Field(default=None)

    # =====================================================================
    # Web
    # =====================================================================
    CORS_ORIGINS: list[str] = Field(default=["*"])
    CORS_ALLOW_CREDENTIALS: bool = Field(default=True)
    CORS_ALLOW_METHODS: list[str] = Field(default=["*"])
    CORS_ALLOW_HEADERS: list[str] = Field(default=["*"])
    VIRA_APP_URL: str = Field(default="http://localhost:3000")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def database(self) -> DatabaseConfig:
        """Get database configuration from environment variables."""
        return DatabaseConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def openai(self) -> OpenAIConfig:
        """Get OpenAI configuration from environment variables."""
        return OpenAIConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def anthropic(self) -> AnthropicConfig:
        """Get Anthropic configuration from environment variables."""
        return AnthropicConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def matching(self) -> MatchingConfig:
        """Get ViRA Match configuration from environment variables."""
        return MatchingConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def mailgun(self) -> MailgunConfig:
        """Get Mailgun configuration from environment variables."""
        return MailgunConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def identity(self) -> IdentityConfig:
        """Get identity provider configuration from environment variables."""
        return IdentityConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cron(self) -> CronConfig:
        """Get cron configuration from environment variables."""
        return CronConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration from environment variables."""
        return CORSConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def app(self) -> AppConfig:
        """Get public app configuration from environment variables."""
        return AppConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()
