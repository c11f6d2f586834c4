"""Environment-backed application settings."""

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

from domain.model.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_UPLOAD_MAX_BYTES = 25 * 1024 * 1024


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _list_env(name: str) -> tuple[str, ...]:
    raw = os.getenv(name, '')
    return tuple(item.strip().lower() for item in raw.split(',') if item.strip())


@dataclass(frozen=True)
class Settings:
    jwt_secret_key: str
    jwt_algorithm: str = 'HS256'
    jwt_expiration_days: int = 30

    database_url: str | None = None
    db_host: str = 'localhost'
    db_user: str = 'root'
    db_password: str = ''
    db_name: str = 'clouddb'
    db_port: int = 3306
    db_pool_size: int = 10
    db_pool_timeout: int = 30

    aws_region: str | None = None
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    aws_s3_bucket: str | None = None
    upload_public_url: str | None = None
    upload_prefix: str = 'medilocker'
    upload_max_bytes: int = DEFAULT_UPLOAD_MAX_BYTES
    upload_allowed_types: tuple[str, ...] = field(default_factory=tuple)

    cors_origins: str = '*'
    port: int = 5001

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return (
            f"mysql+pymysql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )


def load_settings() -> Settings:
    """Read settings from the environment (and .env if present).

    Raises:
        ConfigurationError: JWT_SECRET_KEY is unset, or a numeric value is malformed
    """
    load_dotenv()

    secret = os.getenv('JWT_SECRET_KEY', '').strip()
    if not secret:
        raise ConfigurationError(
            "JWT_SECRET_KEY environment variable is required. "
            "Generate a secure key with: openssl rand -hex 32"
        )

    settings = Settings(
        jwt_secret_key=secret,
        jwt_expiration_days=_int_env('JWT_EXPIRATION_DAYS', 30),
        database_url=os.getenv('DATABASE_URL') or None,
        db_host=os.getenv('DB_HOST', 'localhost'),
        db_user=os.getenv('DB_USER', 'root'),
        db_password=os.getenv('DB_PASSWORD', ''),
        db_name=os.getenv('DB_NAME', 'clouddb'),
        db_port=_int_env('DB_PORT', 3306),
        db_pool_size=_int_env('DB_POOL_SIZE', 10),
        db_pool_timeout=_int_env('DB_POOL_TIMEOUT', 30),
        aws_region=os.getenv('AWS_REGION') or None,
        aws_access_key_id=os.getenv('AWS_ACCESS_KEY_ID') or None,
        aws_secret_access_key=os.getenv('AWS_SECRET_ACCESS_KEY') or None,
        aws_s3_bucket=os.getenv('AWS_S3_BUCKET') or None,
        upload_public_url=os.getenv('UPLOAD_PUBLIC_URL') or None,
        upload_prefix=os.getenv('UPLOAD_PREFIX', 'medilocker').strip('/') or 'medilocker',
        upload_max_bytes=_int_env('UPLOAD_MAX_BYTES', DEFAULT_UPLOAD_MAX_BYTES),
        upload_allowed_types=_list_env('UPLOAD_ALLOWED_TYPES'),
        cors_origins=os.getenv('CORS_ORIGINS', '*'),
        port=_int_env('PORT', 5001),
    )

    if not settings.database_url and not settings.db_password:
        logger.warning("DB_PASSWORD is empty. Set it before running in production.")

    return settings


@lru_cache
def get_settings() -> Settings:
    return load_settings()
