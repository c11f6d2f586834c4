from fastapi import Depends, HTTPException, Request

from adapter.jwt.token_issuer import JoseTokenIssuer
from adapter.sql.user_repository import SqlUserRepository
from port.blob_store import BlobStorePort
from port.token_issuer import TokenIssuer
from port.user_repository import UserRepository
from services.upload_service import UploadPolicy
from utils.config import Settings, get_settings


def _get_engine(request: Request):
    """Get the SQLAlchemy engine, raising 503 if unavailable."""
    engine = getattr(request.app.state, 'engine', None)
    if engine is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return engine


def get_user_repo(request: Request) -> UserRepository:
    return SqlUserRepository(_get_engine(request))


def get_token_issuer(settings: Settings = Depends(get_settings)) -> TokenIssuer:
    return JoseTokenIssuer(
        secret_key=settings.jwt_secret_key,
        expiration_days=settings.jwt_expiration_days,
        algorithm=settings.jwt_algorithm,
    )


def get_blob_store(request: Request) -> BlobStorePort:
    store = getattr(request.app.state, 'blob_store', None)
    if store is None:
        raise HTTPException(status_code=503, detail="Storage unavailable")
    return store


def get_upload_policy(settings: Settings = Depends(get_settings)) -> UploadPolicy:
    return UploadPolicy(
        prefix=settings.upload_prefix,
        max_bytes=settings.upload_max_bytes,
        allowed_types=settings.upload_allowed_types,
    )
