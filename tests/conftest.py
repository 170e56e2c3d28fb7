"""Shared pytest fixtures for API tests."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from typing import Any
from uuid import uuid4

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from public_services_api.app.core.kv_store import InMemoryKVStore, reset_kv_store, set_kv_store
from public_services_api.app.main import create_app


API = "/api/v1"


@pytest.fixture(autouse=True)
def kv_store() -> Iterator[InMemoryKVStore]:
    """Give every test a fresh in-memory store as the process-wide store."""

    store = InMemoryKVStore()
    set_kv_store(store)
    yield store
    reset_kv_store()


@pytest.fixture(scope="session")
def app() -> FastAPI:
    """Return an application instance for integration-style tests."""

    return create_app()


@pytest_asyncio.fixture()
async def async_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Provide an HTTPX async client bound to the FastAPI app."""

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture()
def register(async_client: AsyncClient) -> Callable[..., Awaitable[dict[str, Any]]]:
    """Sign up and log in a fresh account.

    Returns a dict with ``token``, ``headers`` and ``profile``.
    """

    async def _register(account_type: str = "client", name: str = "Maria Silva") -> dict[str, Any]:
        email = f"{account_type}-{uuid4().hex[:8]}@example.test"
        password = "secret-password"
        response = await async_client.post(
            f"{API}/signup",
            json={"email": email, "password": password, "name": name, "accountType": account_type},
        )
        assert response.status_code == 200, response.text
        response = await async_client.post(f"{API}/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        payload = response.json()
        token = payload["accessToken"]
        return {
            "email": email,
            "password": password,
            "token": token,
            "headers": {"Authorization": f"Bearer {token}"},
            "profile": payload["profile"],
        }

    return _register


@pytest.fixture()
def create_service(async_client: AsyncClient) -> Callable[..., Awaitable[dict[str, Any]]]:
    """Create a service as the given account and return its record."""

    async def _create(account: dict[str, Any], **fields: Any) -> dict[str, Any]:
        body = {"name": "Consulta", "category": "Outros", "location": "Centro", **fields}
        response = await async_client.post(f"{API}/services", json=body, headers=account["headers"])
        assert response.status_code == 200, response.text
        return response.json()["service"]

    return _create
