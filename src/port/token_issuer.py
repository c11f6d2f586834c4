"""Port definition for bearer token signing."""

from datetime import datetime
from typing import Protocol


class TokenIssuer(Protocol):
    def issue(self, claims: dict, now: datetime | None = None) -> str: ...
    def verify(self, token: str) -> dict | None: ...
