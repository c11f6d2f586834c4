import logging

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from adapter.sql import metadata
from domain.model.errors import RepositoryError

logger = logging.getLogger(__name__)


def create_db_engine(url: str, pool_size: int = 10, pool_timeout: int = 30) -> Engine:
    """Create the shared engine.

    The pool is bounded at pool_size with no overflow; callers beyond that wait
    up to pool_timeout seconds for a free connection.
    """
    if url.startswith('sqlite'):
        # In-memory SQLite must share one connection across threadpool workers
        return create_engine(
            url,
            connect_args={'check_same_thread': False},
            poolclass=StaticPool,
        )
    return create_engine(
        url,
        pool_size=pool_size,
        max_overflow=0,
        pool_timeout=pool_timeout,
        pool_pre_ping=True,
        pool_recycle=1800,
    )


def ensure_schema(engine: Engine) -> None:
    """Verify connectivity and create the users table if absent.

    Raises:
        RepositoryError: store unreachable or DDL failed
    """
    try:
        with engine.begin() as conn:
            conn.execute(text('SELECT 1'))
            metadata.create_all(conn)
    except SQLAlchemyError as e:
        raise RepositoryError(f"Database initialization failed: {str(e)[:200]}") from e
    logger.info("[DB] Connected, users table ready")


def ping(engine: Engine) -> bool:
    try:
        with engine.connect() as conn:
            conn.execute(text('SELECT 1'))
        return True
    except SQLAlchemyError as e:
        logger.warning("[DB] Ping failed", extra={"error": str(e)[:200]})
        return False
