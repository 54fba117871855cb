"""
Site settings (environment variables and an optional .env file)
"""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BACKEND_DIR = Path(__file__).resolve().parents[2]
PROJECT_ROOT = BACKEND_DIR.parent


def _find_env_file() -> Optional[Path]:
    """Project-root .env first, backend/.env as a fallback"""
    for candidate in (PROJECT_ROOT / ".env", BACKEND_DIR / ".env"):
        if candidate.exists():
            return candidate
    return None


ENV_FILE = _find_env_file()
# Real environment variables take precedence over the file
if ENV_FILE is not None:
    load_dotenv(ENV_FILE, override=False)


class Settings(BaseSettings):
    """Every tunable of the site; env var names are the upper-cased field names"""

    # Site
    app_name: str = Field(default="Elite Dog Training", description="Site name shown in pages and logs")
    app_env: str = Field(default="development", description="development | staging | production")
    api_host: str = Field(default="0.0.0.0", description="Interface uvicorn binds to")
    api_port: int = Field(default=8000, ge=1, le=65535, description="Port uvicorn listens on")
    allowed_origins: str = Field(
        default="http://localhost:8000",
        description="Comma-separated origins allowed by CORS"
    )
    templates_dir: Optional[str] = Field(
        default=None,
        description="Jinja2 templates directory (defaults to frontend/templates)"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Level for the root and app loggers")
    log_format: str = Field(default="json", description="'json' (one object per line) or 'text'")
    log_sqlalchemy: bool = Field(default=False, description="Echo SQL statements")
    log_uvicorn_access: bool = Field(default=False, description="Keep uvicorn's own access log")
    log_module_levels: Optional[str] = Field(
        default=None,
        description='JSON object of logger name -> level, e.g. {"app.services": "DEBUG"}'
    )
    log_file_enabled: bool = Field(default=True, description="Also write logs to a rotating file")
    log_file_path: str = Field(default="logs/site.log", description="Log file, relative to the project root")
    log_file_retention: int = Field(default=30, ge=1, description="Rotated log files kept (one per day)")
    log_sensitive_data: bool = Field(
        default=False,
        description="Disable masking of passwords, tokens and secrets in logs (debugging only)"
    )

    # Database
    database_url_override: Optional[str] = Field(
        default=None,
        validation_alias="DATABASE_URL",
        description="Full SQLAlchemy URL; takes precedence over POSTGRES_* settings"
    )
    postgres_host: str = Field(default="localhost")
    postgres_port: int = Field(default=5432, ge=1, le=65535)
    postgres_db: str = Field(default="dogtraining")
    postgres_user: str = Field(default="postgres")
    postgres_password: str = Field(default="")
    database_pool_size: int = Field(default=5, ge=1, description="Persistent connections per process")
    database_max_overflow: int = Field(default=10, ge=0, description="Extra connections under load")
    database_timeout_seconds: int = Field(
        default=5,
        ge=1,
        le=120,
        description="Database connect timeout (seconds)"
    )
    database_auto_create: bool = Field(
        default=False,
        description="Create missing tables at startup (development without alembic)"
    )

    # Identity provider
    session_cookie_name: str = Field(default="session_token")
    session_cookie_secure: bool = Field(default=False, description="Send the session cookie over HTTPS only")
    session_duration_hours: int = Field(default=24, ge=1)
    sign_in_path: str = Field(default="/sign-in", description="Where the guard sends anonymous visitors")
    admin_user_id: Optional[str] = Field(
        default=None,
        description="The only user id allowed to read /api/users"
    )
    identity_directory_url: Optional[str] = Field(
        default=None,
        description="Hosted directory base URL; unset means the local users table"
    )
    identity_secret_key: Optional[str] = Field(default=None, description="Bearer secret for the hosted directory")
    identity_timeout_seconds: float = Field(default=10.0, gt=0)

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def allowed_origins_list(self) -> List[str]:
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """Settings are read once per process"""
    return Settings()
