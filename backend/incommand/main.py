from contextlib import asynccontextmanager
from fastapi import FastAPI
from incommand.api.routes import router
from incommand.core.config import settings
from incommand.core.cors import setup_cors
from incommand.core.logging import setup_logging, get_logger
from incommand.services.priority import PriorityClassifier, DEFAULT_LEXICONS, load_lexicons

# Setup logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown."""
    # Startup
    logger.info("Starting InCommand triage API...")
    if settings.has_custom_lexicons:
        lexicons = load_lexicons(settings.lexicon_path)
        logger.info(f"Loaded priority lexicons from {settings.lexicon_path}: {lexicons!r}")
    else:
        lexicons = DEFAULT_LEXICONS
        logger.info("Using built-in priority lexicons")
    app.state.classifier = PriorityClassifier(lexicons)

    yield

    # Shutdown
    logger.info("Shutting down InCommand triage API...")


# Create FastAPI app
app = FastAPI(
    title="InCommand Triage API",
    description="Incident priority classification, incident search and radio traffic analysis",
    version="1.0.0",
    lifespan=lifespan
)

# Setup CORS
setup_cors(app)

# Include API routes
app.include_router(router)


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "InCommand Triage API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/api/health"
    }
