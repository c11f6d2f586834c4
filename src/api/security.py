"""Bearer token authentication dependencies."""

import logging
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from api.dependencies import get_token_issuer
from api.models import UserClaims
from port.token_issuer import TokenIssuer

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Optional[UserClaims]:
    """Claims of the authenticated caller, or None if no valid token was sent."""
    if not credentials:
        return None

    claims = issuer.verify(credentials.credentials)
    if not claims:
        return None

    try:
        return UserClaims(id=claims["id"], name=claims.get("name", ""), email=claims.get("email", ""))
    except (KeyError, ValueError) as e:
        logger.debug(f"Token claims rejected: {e}")
        return None
