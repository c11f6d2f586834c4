from dataclasses import dataclass
from datetime import datetime

DEFAULT_USER_NAME = 'User'


@dataclass
class User:
    """Domain model representing a registered account."""
    id: int
    name: str
    email: str
    created_at: datetime | None = None
    password_hash: str | None = None

    @property
    def display_name(self) -> str:
        """Stored name trimmed, falling back to the default for blank rows."""
        return sanitize_name(self.name)


def sanitize_name(name: str | None) -> str:
    return (name or '').strip() or DEFAULT_USER_NAME


def normalize_email(email: str | None) -> str:
    return (email or '').strip().lower()
