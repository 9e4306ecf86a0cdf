import secrets

from pydantic_settings import BaseSettings


def _generate_dev_secret() -> str:
    """Generate a random secret for local development only."""
    return secrets.token_hex(32)


class Settings(BaseSettings):
    # App
    app_name: str = "StudyGeni"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = "development"  # development, production
    log_level: str = ""  # DEBUG, INFO, WARNING, ERROR, CRITICAL (empty = auto based on environment)
    log_to_file: bool = True
    log_dir: str = "logs"

    # Database (SQLite for local dev, PostgreSQL for production)
    database_url: str = "sqlite:///./studygeni.db"

    # JWT: no default, SECRET_KEY must be set in production.
    # In development, a random key is generated per-process if not set.
    secret_key: str = ""
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24

    # CORS (comma-separated origins, empty = allow local dev origins)
    allowed_origins: str = ""
    frontend_url: str = "http://localhost:5173"

    # Rate limiting on auth endpoints
    rate_limit_enabled: bool = True

    # Anthropic Claude
    anthropic_api_key: str = ""
    claude_model: str = "claude-sonnet-4-5-20250929"
    ai_max_tokens: int = 2000
    ai_temperature: float = 0.7

    # Upload staging
    upload_dir: str = "uploads"
    max_upload_size_mb: int = 10

    # Object storage (S3 or any S3-compatible service such as Cloudflare R2)
    storage_folder: str = "studygeni"
    s3_bucket: str = ""
    s3_endpoint_url: str = ""
    s3_region: str = "us-east-1"
    s3_access_key_id: str = ""
    s3_secret_access_key: str = ""
    s3_public_base_url: str = ""  # e.g. https://files.example.com (empty = S3 virtual-hosted URL)

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()

# Validate secret key
_KNOWN_WEAK_KEYS = {"your-secret-key-change-in-production", "changeme", "secret", ""}

if settings.secret_key in _KNOWN_WEAK_KEYS:
    if settings.environment == "production":
        raise RuntimeError(
            "SECRET_KEY is not set or uses a known weak default. "
            "Set a strong SECRET_KEY env var (e.g. `openssl rand -hex 32`)."
        )
    # Development: generate a random key so the app can start
    settings.secret_key = _generate_dev_secret()
