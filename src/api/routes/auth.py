"""Account routes (register, login, current user)."""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from api.dependencies import get_token_issuer, get_user_repo
from api.models import (
    LoginRequest,
    LoginResponse,
    MeResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    UserClaims,
)
from api.security import get_current_user
from domain.model.errors import (
    DuplicateEmailError,
    InternalError,
    InvalidCredentialsError,
    ValidationError,
)
from port.token_issuer import TokenIssuer
from port.user_repository import UserRepository
from services import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])

# Bodies returned when a request fails schema validation (no body, bad JSON, non-string field)
INVALID_REQUEST_BODIES = {
    "/api/register": {"message": "All fields required"},
    "/api/login": {"message": "Email and password required"},
}

_ERROR_RESPONSES = {
    400: {"model": MessageResponse},
    401: {"model": MessageResponse},
    500: {"model": MessageResponse},
}


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


@router.post("/register", response_model=RegisterResponse, responses=_ERROR_RESPONSES)
def register(request: RegisterRequest, repo: UserRepository = Depends(get_user_repo)):
    """Create an account. No token is issued; the client logs in separately."""
    try:
        auth_service.register(repo, request.name, request.email, request.password)
    except (ValidationError, DuplicateEmailError) as e:
        return _message(status.HTTP_400_BAD_REQUEST, str(e))
    except InternalError as e:
        return _message(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))

    return RegisterResponse(success=True, message="Account created!")


@router.post("/login", response_model=LoginResponse, responses=_ERROR_RESPONSES)
def login(
    request: LoginRequest,
    repo: UserRepository = Depends(get_user_repo),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    """Exchange email and password for a bearer token."""
    try:
        token = auth_service.login(repo, issuer, request.email, request.password)
    except ValidationError as e:
        return _message(status.HTTP_400_BAD_REQUEST, str(e))
    except InvalidCredentialsError as e:
        return _message(status.HTTP_401_UNAUTHORIZED, str(e))
    except InternalError as e:
        return _message(status.HTTP_500_INTERNAL_SERVER_ERROR, str(e))

    return LoginResponse(success=True, token=token)


@router.get("/me", response_model=MeResponse, responses={401: {"model": MessageResponse}})
def get_me(current_user: UserClaims | None = Depends(get_current_user)):
    """Claims of the bearer token's holder."""
    if current_user is None:
        response = _message(status.HTTP_401_UNAUTHORIZED, "Not authenticated")
        response.headers["WWW-Authenticate"] = "Bearer"
        return response
    return MeResponse(success=True, user=current_user)
