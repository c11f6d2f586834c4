"""JWT implementation of TokenIssuer (python-jose, HS256)."""

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
JWT_EXPIRATION_DAYS = 30


class JoseTokenIssuer:
    def __init__(self, secret_key: str, expiration_days: int = JWT_EXPIRATION_DAYS,
                 algorithm: str = JWT_ALGORITHM):
        if not secret_key:
            raise ValueError("secret_key is required")
        self.secret_key = secret_key
        self.expiration = timedelta(days=expiration_days)
        self.algorithm = algorithm

    def issue(self, claims: dict, now: datetime | None = None) -> str:
        """Sign claims with iat/exp set from now (defaults to current UTC time)."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            **claims,
            "iat": issued_at,
            "exp": issued_at + self.expiration,
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> dict | None:
        """Decode a token. Return its claims, or None if invalid or expired."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError as e:
            logger.debug(f"JWT verification failed: {e}")
            return None
        if payload.get("id") is None:
            return None
        return payload
