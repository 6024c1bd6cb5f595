"""FastAPI application factory and main entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
import logging_config
from api import router as api_router
from db import close_db, init_db
from errors import HashingError, RepositoryError, SignupError, ValidationError, field_errors

# Setup logging
logging_config.setup_logging(config.settings.LOG_LEVEL)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    await init_db()
    yield
    # Shutdown
    await close_db()


# Create FastAPI app
app = FastAPI(
    title="Event Signup Backend",
    description="Event self-signup with admin approval",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SignupError)
async def handle_signup_error(request: Request, exc: SignupError):
    if isinstance(exc, (RepositoryError, HashingError)):
        logger.error("%s at %s: %s", type(exc).__name__, request.url.path, exc.message, exc_info=exc)
    content = {"detail": exc.detail}
    if isinstance(exc, ValidationError) and exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError):
    """Report malformed requests in the same shape as ValidationError."""
    error = ValidationError("Invalid request", errors=field_errors(exc.errors()))
    return await handle_signup_error(request, error)


@app.exception_handler(Exception)
async def handle_unhandled(request: Request, exc: Exception):
    logger.error("Unhandled error at %s", request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# Include API router
app.include_router(api_router.api_router, prefix=config.settings.API_PREFIX)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Event Signup Backend API",
        "version": "0.1.0",
    }
