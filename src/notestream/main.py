# Main application entry point
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import (
    auth_router,
    graphql_router,
    health_router,
    notes_router,
    realtime_router,
    register_exception_handlers,
)
from .config import get_settings
from .core.logging import LoggingMiddleware, get_logger, setup_logging
from .core.redis_client import get_redis_client
from .database import create_tables

# Setup logging first
setup_logging()
logger = get_logger("main")

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info(
        "Starting NoteStream application",
        extra={"version": __version__, "environment": settings.environment, "debug": settings.debug},
    )

    # Redis only backs token revocation; the app runs without it
    redis_client = get_redis_client()
    try:
        await redis_client.connect()
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Continuing without Redis...")

    if settings.skip_lifespan_db:
        logger.info("Skipping DB table creation (skip_lifespan_db is set)")
    else:
        try:
            await create_tables()
            logger.info("Database tables created/verified")
        except Exception as e:
            logger.error("Failed to create database tables", exc_info=e)
            raise

    yield

    # Shutdown
    logger.info("Shutting down NoteStream application")
    try:
        await redis_client.disconnect()
    except Exception as e:
        logger.warning(f"Redis disconnect failed: {e}")


app = FastAPI(
    title=settings.app_name,
    description="Notes with REST, GraphQL and realtime push",
    version=__version__,
    lifespan=lifespan,
)

register_exception_handlers(app)

# Add logging middleware
app.add_middleware(LoggingMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router, prefix="/api")
app.include_router(notes_router, prefix="/api")
app.include_router(health_router, prefix="/api")
app.include_router(graphql_router, prefix="/graphql")
app.include_router(realtime_router)


# Root endpoint
@app.get("/")
async def root():
    return {"message": "NoteStream API"}


# API root endpoint for better navigation
@app.get("/api/")
async def api_root():
    return {
        "message": "NoteStream API",
        "version": __version__,
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
            "openapi_json": "/openapi.json"
        },
        "endpoints": {
            "register": "/api/register",
            "login": "/api/login",
            "notes": "/api/notes",
            "health": "/api/health/",
            "graphql": "/graphql",
            "realtime": "/ws",
        }
    }


# Liveness probe, no dependencies
@app.get("/health")
async def basic_health():
    return {"status": "ok"}


def run() -> None:
    """Console entry point."""
    import uvicorn

    uvicorn.run("notestream.main:app", host=settings.host, port=settings.port, reload=settings.reload)


if __name__ == "__main__":
    run()
