"""
PrepKit Interviews - AI mock interview session engine

Main application entry point.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config.settings import get_settings
from src.api.router import api_router
from src.api.dependencies import build_lifecycle_manager
from src.core.text_generation import GeminiClient
from src.core.voice_session import VapiClient
from src.core.webhooks import VoiceWebhookHandler
from src.storage import InMemoryInterviewRepository

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info(f"Starting {settings.app_name}...")
    logger.info(f"Running in {'debug' if settings.debug else 'production'} mode")

    text_provider = GeminiClient(settings)
    voice_provider = VapiClient(settings)

    app.state.lifecycle = build_lifecycle_manager(
        settings,
        text_provider=text_provider,
        voice_provider=voice_provider,
        repository=InMemoryInterviewRepository(),
    )
    app.state.webhook_handler = VoiceWebhookHandler(
        app.state.lifecycle,
        secret=settings.vapi_webhook_secret or None,
    )

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}...")
    await text_provider.close()
    await voice_provider.close()


# Create FastAPI application
settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="AI mock interview session engine",
    version=settings.app_version,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount API routes
app.include_router(api_router, prefix="/api")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.app_version,
    }


# ============================================================================
# RUN SERVER
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
