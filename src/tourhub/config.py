"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with TOURHUB_ prefix.
No YAML files, no file-based config — just env vars (12-factor app style).

Learn: pydantic-settings auto-loads from environment, validates types,
provides defaults. List values (admin_emails, cors_origins) are given
as JSON arrays, e.g. TOURHUB_ADMIN_EMAILS='["ops@example.com"]'.
"""

from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All app configuration. Set via TOURHUB_* env vars."""

    # Document store
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_database: str = "tourhub"

    # Redis (rate limiting)
    redis_url: str = "redis://localhost:6379/0"

    # Auth
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    admin_emails: list[str] = []  # registered with role "admin"

    # Payments
    stripe_secret_key: str = ""
    payment_currency: str = "usd"

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 5000

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # "console" or "json"

    # CORS
    cors_origins: list[str] = ["*"]

    # Rate limiting
    rate_limit_rpm: int = 100  # requests per minute per IP
    rate_limit_auth_rpm: int = 20  # token minting + registration

    # Package image uploads
    max_upload_images: int = 10
    max_image_bytes: int = 5 * 1024 * 1024

    model_config = {"env_prefix": "TOURHUB_"}

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure sensitive defaults are changed in non-development environments."""
        if (
            self.environment != "development"
            and self.jwt_secret == "change-me-in-production"
        ):
            raise ValueError(
                "TOURHUB_JWT_SECRET must be set to a secure value in "
                "non-development environments. Generate one with: "
                'python -c "import secrets; print(secrets.token_urlsafe(32))"'
            )
        return self


# Singleton, import this everywhere
settings = Settings()
