"""CORS configuration for the planner frontend."""
from fastapi.middleware.cors import CORSMiddleware

from planner import config
from planner.utils.logger import get_logger

logger = get_logger(__name__)


def allowed_origins():
    """Local dev origins plus the configured frontend URL."""
    origins = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    if config.FRONTEND_URL and config.FRONTEND_URL not in origins:
        origins.append(config.FRONTEND_URL)
    return origins


def add_cors_middleware(app):
    """Add CORS middleware to the FastAPI application."""
    origins = allowed_origins()
    if config.ENVIRONMENT == "production":
        # Only the deployed frontend may call the API in production
        origins = [config.FRONTEND_URL]
    logger.info("Configuring CORS", environment=config.ENVIRONMENT, origins=origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
