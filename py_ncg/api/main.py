"""FastAPI main application."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import sys
import structlog

from ..config import settings
from .graphs import router as graphs_router
from .store import store


def configure_logging():
    """Configure structlog on top of the standard library logger."""
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

    renderer = (
        structlog.dev.ConsoleRenderer()
        if settings.log_format == "console"
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Configure logging
configure_logging()

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Natural Construction Graph API",
    description="Incremental construction of planar triangulated graphs",
    version="0.1.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(graphs_router)


# Event handlers
@app.on_event("startup")
async def startup_event():
    """Prepare graph storage on startup."""
    logger.info("Starting Natural Construction Graph API")
    store.initialize()
    logger.info("API startup complete")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    logger.info("Shutting down Natural Construction Graph API", sessions=len(store.list()))


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Natural Construction Graph API",
        "version": "0.1.0",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "graphs": len(store.list()),
        "data_dir": str(store.data_dir) if store.data_dir else None,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
