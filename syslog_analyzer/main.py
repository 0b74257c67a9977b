"""
FastAPI application entry point.
Syslog Analyzer - real-time log classification with AI enrichment
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from syslog_analyzer import __version__
from syslog_analyzer.config import get_settings, configure_logging
from syslog_analyzer.database.db import init_database
from syslog_analyzer.database.repositories import RuleRepository
from syslog_analyzer.api.dependencies import get_analyzer, get_pipeline
from syslog_analyzer.api.routes import router


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    configure_logging(level=settings.log_level)

    # Startup: initialize database and load the rule snapshot
    await init_database()
    pipeline = get_pipeline()
    pipeline.set_rules(await RuleRepository.snapshot())
    logger.info("%s started with %d rules", settings.app_name, len(pipeline.rules))

    yield

    # Shutdown: stop enrichment workers and close HTTP connections
    await pipeline.close()
    await get_analyzer().client.aclose()


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Real-time classification of OPNsense, Linux and Unifi logs. "
                "Pattern rules and a local Ollama model flag and explain security "
                "and system-failure events.",
    version=__version__,
    lifespan=lifespan,
)

# Include API routes
app.include_router(router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "syslog_analyzer.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
