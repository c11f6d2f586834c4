from typing import Protocol
from domain.model.user import User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access.

    Implementations raise DuplicateEmailError when the email is already taken
    and RepositoryError for any other storage fault.
    """
    def create(self, name: str, email: str, password_hash: str) -> User:
        """Insert a new user row and return it."""
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by normalized email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: int) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def ping(self) -> bool:
        """Return True if the store is reachable."""
        ...
