"""Runtime settings for the catalog API.

Values come from the process environment or a local .env file. Secrets
(session key, database and SMTP passwords) have no usable production
default and must be set per deployment.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, computed_field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Anyone can read this value, so it may only sign dev sessions.
DEV_SESSION_SECRET = "dev-only-session-secret-change-me"


class Settings(BaseSettings):
    """All tunables for the API, scripts and tests."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Application ---
    environment: Literal["prod", "staging", "dev"] = Field(
        default="dev",
        description="Environment name",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    cors_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        description="Comma-separated origins allowed to call the API with credentials",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        """CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # --- Database (PostgreSQL in deployments, any SQLAlchemy async URL locally) ---
    database_url_override: str = Field(
        default="",
        validation_alias="DATABASE_URL",
        description="Full async SQLAlchemy URL; wins over the db_* parts when set",
    )
    db_user: str = Field(
        default="showroom",
        description="Database user",
    )
    db_password: str = Field(
        default="",
        description="Database password",
    )
    db_name: str = Field(
        default="showroom",
        description="Database name",
    )
    db_connection_name: str = Field(
        default="",
        description="Cloud SQL connection name (project:region:instance)",
    )
    db_host: str = Field(
        default="localhost",
        description="Database host (for local development)",
    )
    db_port: int = Field(
        default=5432,
        description="Database port (for local development)",
    )
    db_pool_size: int = Field(
        default=5,
        description="Database connection pool size",
    )
    db_pool_max_overflow: int = Field(
        default=10,
        description="Max overflow connections beyond pool size",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def database_url(self) -> str:
        """Async SQLAlchemy URL for the catalog database.

        DATABASE_URL is used verbatim when present. Otherwise the URL is
        assembled for asyncpg, over the Cloud SQL socket when a connection
        name is configured and over TCP when it is not.
        """
        if self.database_url_override:
            return self.database_url_override
        if self.db_connection_name:
            socket_path = f"/cloudsql/{self.db_connection_name}"
            return (
                f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
                f"@/{self.db_name}?host={socket_path}"
            )
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    # --- Admin sessions & credentials ---
    session_secret: str = Field(
        default=DEV_SESSION_SECRET,
        description="HMAC key for signing admin session cookies; required outside dev",
    )
    session_cookie_name: str = Field(
        default="admin_session",
        description="Name of the admin session cookie",
    )
    session_max_age_seconds: int = Field(
        default=86400,
        gt=0,
        description="Admin session lifetime (24 hours)",
    )
    password_min_length: int = Field(
        default=6,
        ge=1,
        description="Minimum length for a new admin password",
    )
    bcrypt_rounds: int = Field(
        default=12,
        ge=4,
        le=31,
        description="bcrypt work factor for new password hashes",
    )

    # --- Cloud Storage (product images) ---
    gcs_bucket: str = Field(
        default="showroom-product-images",
        description="Cloud Storage bucket for product images",
    )
    use_local_storage: bool = Field(
        default=False,
        description="Use local filesystem instead of GCS (for development)",
    )
    local_storage_root: str = Field(
        default="./local_storage",
        description="Root directory for local storage when use_local_storage=True",
    )
    image_base_url: str = Field(
        default="https://storage.googleapis.com",
        description="Public URL prefix for stored images",
    )
    placeholder_image_url: str = Field(
        default="/images/placeholder.jpg",
        description="Image shown when a product has no images",
    )

    # --- Outbound mail (contact inquiries) ---
    mail_backend: Literal["console", "smtp"] = Field(
        default="console",
        description="console logs messages instead of sending them",
    )
    smtp_host: str = Field(default="smtp.gmail.com", description="SMTP server host")
    smtp_port: int = Field(default=465, description="SMTP server port")
    smtp_username: str = Field(default="", description="SMTP login")
    smtp_password: str = Field(default="", description="SMTP password or app token")
    smtp_use_tls: bool = Field(
        default=True,
        description="Use implicit TLS (SMTP_SSL) when connecting",
    )
    smtp_timeout: float = Field(default=30.0, description="SMTP timeout in seconds")
    mail_sender: str = Field(
        default="noreply@vidofurniture.com",
        description="From address for outgoing mail",
    )
    sales_inbox: str = Field(
        default="sales@vidofurniture.com",
        description="Inbox receiving new inquiry notifications",
    )

    # --- Logging ---
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_json: bool = Field(
        default=True,
        description="Output logs as JSON (for Cloud Logging)",
    )

    @model_validator(mode="after")
    def require_session_secret(self) -> "Settings":
        """Refuse to sign sessions with a public key outside dev."""
        if self.environment != "dev" and self.session_secret.strip() in ("", DEV_SESSION_SECRET):
            raise ValueError(
                f"SESSION_SECRET must be set to a private value in {self.environment}"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings()


settings = get_settings()
