"""
aadhaar_auth/main.py

Purpose: Application entry point

- Builds the FastAPI app from settings
- Configures logging and exception handlers
- Registers API routes (signup, login, profile)
- Manages application lifecycle (database connect/close)
- No business logic should be written here
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Optional
import time

from aadhaar_auth.api import auth
from aadhaar_auth.core.config import Settings, load_settings, validate_settings
from aadhaar_auth.core.context import AppContext, build_context
from aadhaar_auth.core.errors import add_exception_handlers
from aadhaar_auth.core.logging import setup_logging, get_logger
from aadhaar_auth.db.indexes import create_indexes
from aadhaar_auth.db.mongo import MongoDatabase

logger = get_logger(__name__)

VERSION = "1.0.0"
SLOW_REQUEST_SECONDS = 5.0


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Connects the database and wires the context unless one was supplied.
    """
    settings: Settings = app.state.settings
    database: Optional[MongoDatabase] = None

    logger.info("Starting auth service...")

    try:
        logger.info("Validating configuration...")
        validate_settings(settings)

        if app.state.context is None:
            database = MongoDatabase.from_settings(settings)
            await database.connect()
            await create_indexes(database)
            app.state.context = build_context(settings, database)

        logger.info(f"Auth service started (environment={settings.ENVIRONMENT})")

    except Exception as e:
        logger.critical(f"Failed to start application: {str(e)}", exc_info=True)
        if database is not None:
            await database.close()
        raise

    yield

    logger.info("Shutting down auth service...")

    try:
        if database is not None:
            await database.close()
        logger.info("Auth service shut down")

    except Exception as e:
        logger.error(f"Error during shutdown: {str(e)}", exc_info=True)


def create_app(settings: Optional[Settings] = None, context: Optional[AppContext] = None) -> FastAPI:
    """
    Builds the application.

    Args:
        settings: Configuration; loaded from the environment when omitted
        context: Pre-built collaborators; when omitted the lifespan connects
            to MongoDB and builds them on startup
    """
    if settings is None:
        settings = context.settings if context is not None else load_settings()

    setup_logging(settings)

    app = FastAPI(
        title="Aadhaar Auth",
        description="User sign-up, login and token-protected profile lookup",
        version=VERSION,
        lifespan=lifespan,
        debug=settings.DEBUG,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )
    app.state.settings = settings
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """Add processing time header to all responses."""
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(process_time)

        if process_time > SLOW_REQUEST_SECONDS:
            logger.warning(
                f"Slow request detected: {request.method} {request.url.path}",
                extra={"process_time": process_time}
            )

        return response

    add_exception_handlers(app)

    app.include_router(auth.router, tags=["Auth"])

    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint - basic info."""
        return {
            "name": "Aadhaar Auth API",
            "version": VERSION,
            "status": "running",
            "environment": settings.ENVIRONMENT
        }

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        """
        Health check endpoint.
        Checks database connectivity.
        """
        health_status = {
            "status": "healthy",
            "timestamp": time.time(),
            "environment": settings.ENVIRONMENT,
            "version": VERSION,
            "checks": {}
        }

        db_healthy = await _database_healthy(request.app)
        health_status["checks"]["database"] = "healthy" if db_healthy else "unhealthy"
        if not db_healthy:
            health_status["status"] = "degraded"

        status_code = 200 if health_status["status"] == "healthy" else 503
        return JSONResponse(content=health_status, status_code=status_code)

    @app.get("/ready", tags=["Health"])
    async def readiness_check(request: Request):
        """
        Readiness probe - indicates if app is ready to receive traffic.
        """
        if await _database_healthy(request.app):
            return {"status": "ready"}
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "reason": "database_unavailable"}
        )

    @app.get("/live", tags=["Health"])
    async def liveness_check():
        """
        Liveness probe - indicates if app is alive.
        """
        return {"status": "alive"}

    return app


async def _database_healthy(app: FastAPI) -> bool:
    ctx: Optional[AppContext] = app.state.context
    if ctx is None or ctx.database is None:
        return False
    return await ctx.database.check_health()


def run():
    """Serve the app with uvicorn on HOST:PORT."""
    import uvicorn

    settings = load_settings()

    uvicorn.run(
        "aadhaar_auth.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    run()
