"""SQLAlchemy implementation of UserRepository."""

from logging import getLogger

from sqlalchemy import select
from sqlalchemy.engine import Engine, Row
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from adapter.sql import users_table
from adapter.sql.connection import ping
from domain.model.errors import DuplicateEmailError, RepositoryError
from domain.model.user import User

logger = getLogger(__name__)

MYSQL_DUPLICATE_ENTRY = 1062
POSTGRES_UNIQUE_VIOLATION = '23505'


def is_unique_violation(error: IntegrityError) -> bool:
    """True only for unique-key conflicts, not NOT NULL or foreign key failures."""
    orig = error.orig
    args = getattr(orig, 'args', ())
    if args and args[0] == MYSQL_DUPLICATE_ENTRY:
        return True
    if getattr(orig, 'pgcode', None) == POSTGRES_UNIQUE_VIOLATION:
        return True
    return 'UNIQUE constraint failed' in str(orig)


class SqlUserRepository:
    def __init__(self, engine: Engine):
        self.engine = engine

    def _to_domain(self, row: Row) -> User:
        """Convert a users row to User domain model."""
        return User(
            id=row.id,
            name=row.name,
            email=row.email,
            created_at=row.created_at,
            password_hash=row.password,
        )

    def create(self, name: str, email: str, password_hash: str) -> User:
        """Insert a new user and return the stored row."""
        try:
            with self.engine.begin() as conn:
                result = conn.execute(
                    users_table.insert().values(name=name, email=email, password=password_hash)
                )
                user_id = result.inserted_primary_key[0]
                row = conn.execute(
                    select(users_table).where(users_table.c.id == user_id)
                ).one()
        except IntegrityError as e:
            if is_unique_violation(e):
                logger.warning("User creation failed: email already exists", extra={"email": email})
                raise DuplicateEmailError() from e
            logger.error("Failed to create user", extra={"email": email, "error": str(e.orig)})
            raise RepositoryError("Failed to create user") from e
        except SQLAlchemyError as e:
            logger.error("Failed to create user", extra={"email": email, "error": str(e)})
            raise RepositoryError("Failed to create user") from e

        logger.info("User created", extra={"userId": row.id, "email": email})
        return self._to_domain(row)

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(
                    select(users_table).where(users_table.c.email == email).limit(1)
                ).first()
        except SQLAlchemyError as e:
            logger.error("Failed to get user by email", extra={"email": email, "error": str(e)})
            raise RepositoryError("Failed to get user by email") from e
        return self._to_domain(row) if row else None

    def get_by_id(self, user_id: int) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        try:
            with self.engine.connect() as conn:
                row = conn.execute(
                    select(users_table).where(users_table.c.id == user_id)
                ).first()
        except SQLAlchemyError as e:
            logger.error("Failed to get user by ID", extra={"userId": user_id, "error": str(e)})
            raise RepositoryError("Failed to get user by ID") from e
        return self._to_domain(row) if row else None

    def ping(self) -> bool:
        return ping(self.engine)
