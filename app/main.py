# File: app/main.py
import time
import logging
from typing import Callable, Optional
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.api.v1.api import api_router
from app.core.config import settings, DEFAULT_SECRET_KEY
from app.db.database import Base, engine
from app.services.image_storage import ImageStore, create_image_store
from app import models  # noqa: F401  (registers tables on Base.metadata)

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}


def _validation_message(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form"))
        message = error.get("msg", "Invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages) or "Invalid request"


def create_app(image_store: Optional[ImageStore] = None) -> FastAPI:
    if settings.is_production and settings.SECRET_KEY == DEFAULT_SECRET_KEY:
        raise RuntimeError("SECRET_KEY environment variable is required in production")

    application = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    application.state.image_store = image_store or create_image_store(settings)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,  # Must stay False with allow_origins=["*"]
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=["X-Process-Time"],
        max_age=3600,
    )

    # Request logging middleware (outermost, AFTER CORS registration)
    @application.middleware("http")
    async def log_requests(request: Request, call_next: Callable) -> Response:
        """Log every request with timing; turn unhandled errors into a generic 500."""
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)

        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception:
            process_time = time.time() - start_time
            logger.exception(
                f"{request.method} {request.url.path} - unhandled error after {process_time:.4f}s"
            )
            # This response skips CORSMiddleware, so the headers are set here
            return JSONResponse(
                status_code=500,
                content={"error": "Internal server error"},
                headers=CORS_HEADERS,
            )

        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.4f}s"
        )
        response.headers["X-Process-Time"] = str(process_time)
        return response

    @application.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @application.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    @application.on_event("startup")
    async def startup_event():
        """Check the database and, outside production, create missing tables."""
        logger.info(f"Starting {settings.PROJECT_NAME}")
        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(f"API prefix: {settings.API_PREFIX}")

        if not settings.is_production:
            # Production schema is managed by alembic
            Base.metadata.create_all(bind=engine)

        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connected")

    # Include API router
    application.include_router(api_router, prefix=settings.API_PREFIX)

    @application.get("/health")
    def health_check():
        """Health check endpoint"""
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            database = "connected"
        except Exception as e:
            logger.error(f"Health check database error: {e}")
            database = "error"

        return {
            "status": "healthy" if database == "connected" else "unhealthy",
            "environment": settings.ENVIRONMENT,
            "database": database,
            "timestamp": time.time(),
        }

    return application


app = create_app()


# For local development
if __name__ == "__main__":
    import os
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    host = "0.0.0.0" if settings.is_production else "127.0.0.1"

    logger.info(f"Starting server on {host}:{port}")
    uvicorn.run(
        "app.main:app",
        host=host,
        port=port,
        log_level=settings.LOG_LEVEL.lower(),
        reload=settings.is_development,
    )
