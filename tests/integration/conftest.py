"""Integration test fixtures for HTTP client operations.

Each test gets its own application around a fresh in-memory store, so no
cleanup is needed between tests. The app lifespan is not run.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.director.main import create_app
from src.director.repositories import AutomationStore
from tests.helpers import create_automation


@pytest.fixture
def app(store: AutomationStore) -> FastAPI:
    return create_app(store)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client bound to the test application."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def automation(client: AsyncClient) -> dict[str, Any]:
    """An automation created through the API."""
    return await create_automation(client)
