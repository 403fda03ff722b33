"""
Venturelink settings, read from the environment and an optional .env file
"""
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_BACKEND_DIR = Path(__file__).resolve().parents[2]

# The project root .env wins over backend/.env
ENV_FILE = next(
    (candidate for candidate in (_BACKEND_DIR.parent / ".env", _BACKEND_DIR / ".env") if candidate.exists()),
    _BACKEND_DIR.parent / ".env",
)
if ENV_FILE.exists():
    load_dotenv(ENV_FILE, override=False)


class Settings(BaseSettings):
    """Runtime configuration for the API, scheduler and scripts"""

    # Application
    app_name: str = "Venturelink"
    app_env: str = Field(default="development", description="Application environment")
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=3000, ge=1, le=65535, description="API port")
    allowed_origins: str = Field(
        default="*",
        description="Allowed CORS origins (comma-separated)"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_sqlalchemy: bool = Field(default=False, description="Enable SQLAlchemy query logging")
    log_uvicorn_access: bool = Field(default=False, description="Enable Uvicorn access logging")
    log_module_levels: Optional[str] = Field(
        default=None,
        description='Module-specific log levels (JSON string, e.g., {"app.services": "DEBUG"})'
    )
    log_format: str = Field(
        default="json",
        description="Log format: 'json' for structured logging, 'text' for plain text"
    )
    log_file_enabled: bool = Field(default=True, description="Enable file logging")
    log_file_path: str = Field(
        default="logs/venturelink.log",
        description="Path to log file (relative to project root)"
    )
    log_file_rotation: str = Field(
        default="midnight",
        description="Log file rotation: 'midnight' or 'W0'..'W6' (weekly)"
    )
    log_file_retention: int = Field(default=30, ge=1, description="Number of rotated log files to keep")
    log_sensitive_data: bool = Field(
        default=False,
        description="Enable logging of sensitive data (passwords, tokens, OTP codes) - NOT RECOMMENDED"
    )

    # Database
    sqlalchemy_database_uri: Optional[str] = Field(
        default=None,
        description="Full database URL; overrides the POSTGRES_* settings when set"
    )
    postgres_host: str = Field(default="localhost", description="PostgreSQL host")
    postgres_db: str = Field(default="venturelink", description="PostgreSQL database name")
    postgres_user: str = Field(default="postgres", description="PostgreSQL user")
    postgres_password: str = Field(default="postgres", description="PostgreSQL password")
    postgres_port: int = Field(default=5432, ge=1, le=65535, description="PostgreSQL port")
    database_pool_size: int = Field(default=20, ge=1, description="Database pool size")
    database_max_overflow: int = Field(default=10, ge=0, description="Database max overflow")

    # JWT
    jwt_secret: str = Field(default="change-me", description="Secret used to sign access and refresh tokens")
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    access_token_expire_hours: int = Field(default=24, ge=1, description="Access token lifetime (hours)")
    refresh_token_expire_days: int = Field(default=7, ge=1, description="Refresh token lifetime (days)")

    # Passwords and OTP
    bcrypt_rounds: int = Field(default=10, ge=4, le=16, description="bcrypt cost factor")
    otp_length: int = Field(default=4, ge=4, le=8, description="Number of digits in OTP codes")
    otp_expire_minutes: int = Field(default=10, ge=1, description="OTP lifetime (minutes)")

    # Mail
    email_host: Optional[str] = Field(default=None, description="SMTP host; mails are only logged when unset")
    email_port: int = Field(default=587, ge=1, le=65535, description="SMTP port")
    email_user: Optional[str] = Field(default=None, description="SMTP user")
    email_password: Optional[str] = Field(default=None, description="SMTP password")
    email_from: str = Field(default="no-reply@venturelink.local", description="Sender address")

    # Uploads
    upload_directory: str = Field(default="uploads", description="Root directory for uploaded files")
    project_files_dir: str = Field(default="uploads/ProjectFiles", description="Directory for project files")
    project_files_max_size: int = Field(default=10485760, ge=1, description="Max project file size (bytes)")
    post_media_image_max_size: int = Field(default=5 * 1024 * 1024, ge=1, description="Max post image size (bytes)")
    post_media_video_max_size: int = Field(default=10 * 1024 * 1024, ge=1, description="Max post video size (bytes)")
    profile_image_max_size: int = Field(default=2 * 1024 * 1024, ge=1, description="Max profile image size (bytes)")

    # Token blacklist cleanup
    token_cleanup_enabled: bool = Field(default=True, description="Run scheduled blacklist sweeps")
    token_blacklist_grace_days: int = Field(
        default=30,
        ge=0,
        description="Expired blacklist entries are kept this many days for auditing"
    )
    token_cleanup_interval_hours: int = Field(default=6, ge=1, le=24, description="Periodic sweep interval (hours)")
    token_cleanup_daily_hour: int = Field(default=0, ge=0, le=23, description="Hour of the daily sweep (UTC)")
    token_cleanup_check_seconds: int = Field(default=60, ge=1, description="Scheduler loop tick (seconds)")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower-case level names"""
        return v.upper()

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL, explicit URI first"""
        if self.sqlalchemy_database_uri:
            return self.sqlalchemy_database_uri
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def allowed_origins_list(self) -> List[str]:
        """CORS origins as a list"""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True
    )


@lru_cache()
def get_settings() -> Settings:
    """Process-wide settings; tests call get_settings.cache_clear()"""
    return Settings()
