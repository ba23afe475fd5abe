"""
InkKey Flow - Main FastAPI Application
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Add parent directory to path
sys.path.append(str(Path(__file__).parent))

from api.exceptions import register_exception_handlers  # noqa: E402

# Import routers  # noqa: E402
from api.routers import ink, system  # noqa: E402

# Import configuration  # noqa: E402
from config import get_settings  # noqa: E402
from services.ink_service import create_ink_service  # noqa: E402

# Get configuration
settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.system.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Suppress watchfiles debug messages
logging.getLogger("watchfiles").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle"""
    # Startup
    logger.info("Starting InkKey Flow server...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.system.debug}")
    logger.info(
        f"Press defaults: {settings.press.default_num_keys} keys, "
        f"plate {settings.press.plate_width_mm} mm, "
        f"processing width {settings.processing.process_width} px"
    )

    # The service is stateless; one instance serves all requests
    app.state.settings = settings
    app.state.ink_service = create_ink_service(settings)
    app.state.config = settings.to_dict()
    app.state.debug = settings.system.debug

    yield

    # Shutdown
    logger.info("InkKey Flow server shutdown complete")


# Create FastAPI app
app = FastAPI(
    title="InkKey Flow",
    description="Offset press ink key zone estimation from print layout images",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS for browser front ends
if settings.api.cors_enabled:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Register exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(ink.router, prefix="/api/ink", tags=["Ink"])
app.include_router(system.router, prefix="/api/system", tags=["System"])


# Root endpoint
@app.get("/")
async def root():
    return {
        "name": "InkKey Flow",
        "status": "running",
        "version": "1.0.0",
        "endpoints": {
            "ink": "/api/ink",
            "system": "/api/system",
            "docs": "/docs",
        },
    }


# Health check endpoint
@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "services": {
            "ink_service": getattr(app.state, "ink_service", None) is not None,
        },
    }


# Error handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": f"Internal server error: {str(exc)}"})


if __name__ == "__main__":
    reload_excludes = (
        ["*.log", "*.pyc", "__pycache__", ".git", ".venv", "venv"]
        if settings.system.debug
        else None
    )

    server_config = uvicorn.Config(
        "main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.system.debug,
        reload_excludes=reload_excludes,
        log_level=settings.system.log_level.lower(),
        loop="asyncio",
    )

    server = uvicorn.Server(server_config)

    try:
        server.run()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
    finally:
        logger.info("Server exiting...")
