"""Main FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from student_registry.api.router import api_router
from student_registry.core.config import settings
from student_registry.core.database import Base, engine
from student_registry.core.exceptions import AppException
from student_registry.middleware.logging import RequestLoggingMiddleware
from student_registry.services.rendering import (
    REGISTER_PAGE,
    SEARCH_PAGE,
    render_error,
)

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

# Suppress noisy SQLAlchemy and other library logs
logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
logging.getLogger("python_multipart").setLevel(logging.WARNING)
logging.getLogger("python_multipart.multipart").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


def back_link(request: Request) -> tuple[str, str]:
    """Where an error page sends the user: search for GETs, registration otherwise."""
    if request.method == "GET":
        return SEARCH_PAGE, "Back to Search"
    return REGISTER_PAGE, "Back"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    if settings.is_sqlite:
        # Local development database; PostgreSQL is set up by setup-db
        logger.info("Using SQLite, creating tables directly")
        Base.metadata.create_all(bind=engine)
    yield
    logger.info("Shutting down application")
    engine.dispose()


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="""
Student Registry - register students and search their records.

## Endpoints

- `POST /api/students` accepts a form-encoded, multipart or JSON registration
  and answers with an HTML confirmation page.
- `GET /api/students` searches by `id` (roll number), `name`, `father_name`
  or `roll_number`. Records matching **any** criterion are returned, newest
  first, as an HTML page.

Errors are rendered as HTML pages: 400 for missing or invalid fields,
500 when the database fails.
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)

    # Exception handlers
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        detail = exc.details.get("hint") or exc.details.get("reason")
        return HTMLResponse(
            render_error(exc.message, exc.message, detail, *back_link(request)),
            status_code=exc.status_code,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Framework errors such as a multipart body without a boundary
        message = str(exc.detail)
        return HTMLResponse(
            render_error(message, message, None, *back_link(request)),
            status_code=exc.status_code,
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        detail = "\n".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        return HTMLResponse(
            render_error(
                "Request validation failed",
                "Request validation failed",
                detail,
                *back_link(request),
            ),
            status_code=400,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return HTMLResponse(
            render_error("Internal Server Error", "An internal server error occurred"),
            status_code=500,
        )

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for load balancers and monitoring."""
        return {
            "status": "healthy",
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    @app.get("/", include_in_schema=False)
    async def root():
        return RedirectResponse(url=REGISTER_PAGE)

    # Include API router
    app.include_router(api_router, prefix=settings.API_PREFIX)

    # Registration and search pages; mounted last so API routes win
    app.mount(
        "/",
        StaticFiles(directory=settings.STATIC_DIR, html=True),
        name="static",
    )

    return app


# Create app instance
app = create_application()


def run() -> None:
    """Run the development server."""
    import uvicorn

    uvicorn.run(
        "student_registry.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
