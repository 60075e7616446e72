"""FastAPI application entry point."""

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables before importing runtime config/services.
load_dotenv()

from .config import settings
from .logging_config import setup_logging

setup_logging(settings.logs_dir, settings.log_level)

import logging

from .paths import ensure_dir, resolve_repo_path
from .routers import conduct, constants, feedback, motions, rooms, speeches
from .services.debate_store import DebateStore

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Debate Practice API",
    description="Live Asian Parliamentary debate rooms with speaker-turn management",
    version="1.0.0",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(rooms.router)
app.include_router(motions.router)
app.include_router(speeches.router)
app.include_router(conduct.router)
app.include_router(feedback.router)
app.include_router(constants.router)

logger.info("=" * 80)
logger.info("FastAPI Application Started")
logger.info("CORS Origins: %s", settings.cors_origins)
logger.info("Debate state: %s", settings.debate_state_path)
logger.info("=" * 80)


@app.on_event("startup")
async def startup_event():
    """Create the debate store owned by this process."""
    logger.info("=== Application startup initialization ===")

    state_path = resolve_repo_path(settings.debate_state_path)
    ensure_dir(state_path.parent)
    app.state.debate_store = DebateStore(state_path)
    logger.info("Debate store ready: %s", state_path)

    if settings.has_llm_provider:
        logger.info("Motion generation model: %s", settings.llm_model)
    else:
        logger.info("No LLM API key configured; preset motions will be used")


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": "Debate Practice API",
        "docs": "/docs",
        "health": "/api/health",
    }
