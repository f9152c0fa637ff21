"""Integration-test fixtures.

Requires a PostgreSQL database migrated with `alembic upgrade head` and a Redis
server, reachable through DATABASE_URL / REDIS_URL.

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool and Redis pool (both created at import time)
remain valid across the entire test session.
"""

import uuid

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from config.settings import settings
from src.main import app


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client — keeps the engine pool alive."""
    settings.RATE_LIMIT_ENABLED = False
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(loop_scope="session")
async def auction(client: AsyncClient) -> dict:
    """A fresh active auction with one collection and one item (10 units @ 100.00)."""
    resp = await client.post("/api/v1/auctions", json={
        "name": f"Integration {uuid.uuid4().hex[:8]}",
        "max_budget_per_bidder_cents": 500_000,
    })
    auction = resp.json()["data"]
    resp = await client.post(
        f"/api/v1/auctions/{auction['id']}/collections", json={"name": "Fruit"}
    )
    collection = resp.json()["data"]
    resp = await client.post(f"/api/v1/collections/{collection['id']}/items", json={
        "name": "Mangoes",
        "starting_bid_cents": 10_000,
        "inventory": 10,
    })
    item = resp.json()["data"]
    await client.post(f"/api/v1/auctions/{auction['id']}/start")
    return {"auction": auction, "collection": collection, "item": item}
