"""FastAPI application entry point."""

import sys
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from dotenv import load_dotenv

# Must run before modules that read env vars
load_dotenv()

# main.py is at <root>/src/api/main.py
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from api.routes import auth, health, upload
from adapter.s3.blob_store import S3BlobStore, create_s3_client
from adapter.sql.connection import create_db_engine, ensure_schema
from utils.config import get_settings
from utils.logging import setup_structured_logging

setup_structured_logging()

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = _src_path.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

PUBLIC_DIR = _project_root / "public"
SERVICE_NAME = "MediLocker API"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: requests under /api are refused until startup completes.

    A missing JWT secret or an unreachable database raises here, which aborts
    the server instead of serving degraded traffic.
    """
    app.state.ready = False
    settings = get_settings()

    engine = create_db_engine(
        settings.sqlalchemy_url,
        pool_size=settings.db_pool_size,
        pool_timeout=settings.db_pool_timeout,
    )
    try:
        ensure_schema(engine)
    except Exception:
        logger.error("Database initialization failed, shutting down")
        engine.dispose()
        raise

    app.state.engine = engine
    app.state.blob_store = S3BlobStore(
        create_s3_client(settings.aws_region, settings.aws_access_key_id, settings.aws_secret_access_key),
        bucket=settings.aws_s3_bucket,
        region=settings.aws_region,
        public_url=settings.upload_public_url,
    )
    if not settings.aws_s3_bucket:
        logger.warning("AWS_S3_BUCKET not configured, uploads will fail")

    app.state.ready = True
    logger.info(f"{SERVICE_NAME} {VERSION} ready")

    yield  # App runs here

    app.state.ready = False
    engine.dispose()


app = FastAPI(
    title=SERVICE_NAME,
    description="Account registration, login and file upload API",
    version=VERSION,
    lifespan=lifespan,
)


@app.middleware("http")
async def require_ready(request: Request, call_next):
    if request.url.path.startswith("/api") and not getattr(request.app.state, "ready", False):
        return JSONResponse(status_code=503, content={"message": "Service not ready"})
    return await call_next(request)


_INVALID_REQUEST_BODIES = {**auth.INVALID_REQUEST_BODIES, **upload.INVALID_REQUEST_BODIES}


@app.exception_handler(RequestValidationError)
async def invalid_request(request: Request, exc: RequestValidationError):
    """Account and upload routes answer malformed requests with their own 400 body."""
    content = _INVALID_REQUEST_BODIES.get(request.url.path)
    if content is None:
        return await request_validation_exception_handler(request, exc)
    logger.info("Rejected malformed request", extra={"path": request.url.path, "errors": [(e["type"], e["loc"]) for e in exc.errors()]})
    return JSONResponse(status_code=400, content=content)


# - CORS_ORIGINS="*": allow_credentials must be False (browsers reject credentials with wildcard)
# - explicit comma-separated list: credentials allowed
cors_origins_env = get_settings().cors_origins

if cors_origins_env == "*":
    cors_origins = ["*"]
    allow_credentials = False
    logger.warning(
        "CORS configured with wildcard origin ('*'). "
        "For production, set CORS_ORIGINS to specific domains (e.g., 'https://app.example.com')"
    )
else:
    cors_origins = [origin.strip() for origin in cors_origins_env.split(",")]
    allow_credentials = True
    logger.info(f"CORS configured with specific origins: {cors_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routes
app.include_router(auth.router)
app.include_router(upload.router)
app.include_router(health.router)

# Landing page and static assets; mounted last so API routes win
app.mount("/", StaticFiles(directory=PUBLIC_DIR, html=True), name="public")


if __name__ == "__main__":
    import uvicorn
    port = get_settings().port
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        access_log=False
    )
