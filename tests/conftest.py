"""Pytest configuration and fixtures."""

from collections.abc import AsyncIterator, Callable
from pathlib import Path
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from decision_log.db.client import DatabaseClient
from decision_log.main import app
from decision_log.repositories.decision_repo import DecisionRepository
from decision_log.search.filters import SearchLimits
from decision_log.search.metadata import MetadataAggregator
from decision_log.services.decision_service import DecisionService


@pytest.fixture
def decision_payload() -> Callable[..., dict[str, Any]]:
    """Factory for a valid create-decision body with overrides."""

    def _make(**overrides: Any) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "title": "Use SQLite for local storage",
            "category": "data-storage",
            "project_name": "Decision Log",
            "chosen_option": "SQLite with FTS5",
            "reasoning": "Single-file database with built-in full-text search.",
            "options_considered": [
                {
                    "name": "SQLite",
                    "description": "Embedded database",
                    "pros": ["zero ops"],
                    "cons": ["single writer"],
                },
                {
                    "name": "Postgres",
                    "description": "Client/server database",
                    "pros": ["rich types"],
                    "cons": ["needs a server"],
                },
            ],
            "tradeoffs_accepted": ["single writer"],
            "tags": ["database", "storage"],
            "confidence_level": 7,
        }
        payload.update(overrides)
        return payload

    return _make


@pytest.fixture
async def db_client(tmp_path: Path) -> AsyncIterator[DatabaseClient]:
    """Create a temp file database client for testing."""
    db_path = tmp_path / "test_decisions.db"
    client = DatabaseClient(url=f"file:{db_path}")
    await client.connect()
    yield client
    await client.close()


@pytest.fixture
async def repo(db_client: DatabaseClient) -> DecisionRepository:
    """Create an initialized decision repository."""
    repository = DecisionRepository(db_client)
    await repository.initialize()
    return repository


@pytest.fixture
def service(repo: DecisionRepository) -> DecisionService:
    """Create a decision service over the test repository."""
    return DecisionService(
        repository=repo,
        aggregator=MetadataAggregator(repo),
        limits=SearchLimits(),
    )


@pytest.fixture
async def client(
    db_client: DatabaseClient,
    service: DecisionService,
) -> AsyncIterator[AsyncClient]:
    """Create async test client for FastAPI app with database."""
    # ASGITransport does not run the lifespan, so wire state by hand
    app.state.db = db_client
    app.state.decision_service = service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    del app.state.db
    del app.state.decision_service
