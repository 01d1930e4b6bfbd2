"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from decision_log.api.responses import register_exception_handlers
from decision_log.api.router import api_router
from decision_log.config import settings
from decision_log.db.client import DatabaseClient
from decision_log.repositories.decision_repo import DecisionRepository
from decision_log.search.filters import SearchLimits
from decision_log.search.metadata import MetadataAggregator
from decision_log.services.decision_service import DecisionService

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def initialize_services(app: FastAPI, db: DatabaseClient) -> None:
    """Create the schema and wire repository, aggregator and service.

    Args:
        app: Application whose state receives the services
        db: Connected database client
    """
    repository = DecisionRepository(db)
    await repository.initialize()
    app.state.decision_repo = repository

    aggregator = MetadataAggregator(repository)
    app.state.decision_service = DecisionService(
        repository=repository,
        aggregator=aggregator,
        limits=SearchLimits.from_settings(),
    )
    logger.info("Decision service initialized")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan management.

    Startup:
    - Initialize database connection
    - Create decisions table, FTS5 index and triggers
    - Build the decision service

    Shutdown:
    - Close database connection
    """
    logger.info(f"Starting {settings.app_name}...")

    db = DatabaseClient()
    await db.connect()
    app.state.db = db

    await initialize_services(app, db)

    yield

    logger.info(f"Shutting down {settings.app_name}...")
    await db.close()


app = FastAPI(
    title=settings.app_name,
    description="Searchable log of engineering and product decisions",
    version=settings.app_version,
    lifespan=lifespan,
)

register_exception_handlers(app)
app.include_router(api_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "decision_log.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
