import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.deps import get_rules, get_settings
from src.api.schemas import ErrorResponse, FieldErrorResponse, ValidationErrorResponse
from src.app_shell.config import validate_ops_rules
from src.app_shell.context import ServiceContext
from src.domain.errors import AuthorizationDenied, NotFound, PublishError, ValidationError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Load rules and validate on startup (fail-fast)
    rules = get_rules(settings)
    validate_ops_rules(rules)
    logger.info("Rules loaded from %s", settings.rules_path)

    worker = None
    if settings.run_worker:
        worker = ServiceContext.create(settings.db_path, rules).create_worker()
        worker.start()

    yield

    if worker is not None:
        worker.stop()


app = FastAPI(
    title="Blog Lab API",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# --- Error mapping ---
def _error(exc: Exception) -> dict[str, Any]:
    return ErrorResponse(error=str(exc)).model_dump()


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ValidationErrorResponse(
            errors=[
                FieldErrorResponse(code=e.code, message=e.message, field=e.field)
                for e in exc.errors
            ]
        ).model_dump(),
    )


@app.exception_handler(PublishError)
async def publish_error_handler(request: Request, exc: PublishError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=_error(exc))


@app.exception_handler(AuthorizationDenied)
async def authorization_denied_handler(request: Request, exc: AuthorizationDenied) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content=_error(exc))


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=_error(exc))


# --- Routers ---
from src.api.routes import auth, blogs, comments  # noqa: E402

app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(blogs.router, prefix="/api/blogs", tags=["Blogs"])
app.include_router(comments.router, prefix="/api/blogs/{post_id}/comments", tags=["Comments"])


# CORS (Allow Frontend)
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    return {"status": "ok", "service": "api"}
