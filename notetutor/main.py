"""
NoteTutor FastAPI Application Entry Point.

Run with: uvicorn notetutor.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from notetutor.api.routes import auth, chat, notes, quizzes, subjects
from notetutor.config import get_settings, sanitize_error
from notetutor.db.session import build_engine, build_sessionmaker
from notetutor.errors import NoteTutorError, Unauthenticated
from notetutor.services import build_completion_client, build_identity_verifier

settings = get_settings()

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the process-wide clients once and dispose of them on shutdown."""
    # Startup
    engine = build_engine(settings)
    app.state.engine = engine
    app.state.session_factory = build_sessionmaker(engine)
    app.state.identity_verifier = build_identity_verifier(settings)
    app.state.completion_client = build_completion_client(settings)
    logger.info("%s started (%s, auth=%s)", settings.app_name, settings.environment, settings.auth_provider)
    yield
    # Shutdown
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Study notes, an AI tutor grounded in them, and generated quizzes",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# ERROR HANDLERS
# =============================================================================


@app.exception_handler(NoteTutorError)
async def handle_notetutor_error(request: Request, exc: NoteTutorError) -> JSONResponse:
    if exc.detail:
        level = logging.INFO if exc.status_code < 500 else logging.ERROR
        logger.log(level, "%s %s -> %d: %s", request.method, request.url.path, exc.status_code, exc.detail)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.public_message()},
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid request: {field} {first.get('msg', '')}".strip() if field else "Invalid request body"
    else:
        message = "Invalid request body"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": sanitize_error(exc, generic_message="Internal server error")},
    )


# Include routers
app.include_router(auth.router)
app.include_router(subjects.router)
app.include_router(notes.router)
app.include_router(chat.router)
app.include_router(quizzes.router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
