"""Tests for signup, login, profile and error payloads."""

from __future__ import annotations

import base64
import json

import pytest
from httpx import AsyncClient

from public_services_api.app.core.exceptions import StoreError
from public_services_api.app.core.kv_store import InMemoryKVStore, set_kv_store
from public_services_api.app.core.security import create_access_token, decode_access_token
from public_services_api.app.services.catalog_service import CatalogService


API = "/api/v1"


@pytest.mark.asyncio
async def test_signup_creates_profile(async_client: AsyncClient) -> None:
    response = await async_client.post(
        f"{API}/signup",
        json={"email": "Ana@Example.test", "password": "secret1", "name": "Ana", "accountType": "client"},
    )

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["email"] == "ana@example.test"
    assert user["accountType"] == "client"
    assert user["favorites"] == []
    assert "institutionId" not in user
    assert user["createdAt"].endswith("Z")


@pytest.mark.asyncio
async def test_institution_signup_accepts_type_alias(async_client: AsyncClient) -> None:
    response = await async_client.post(
        f"{API}/signup",
        json={"email": "clinic@example.test", "password": "secret1", "name": "Clinic", "type": "institution"},
    )

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["accountType"] == "institution"
    assert user["institutionId"] == user["id"]


@pytest.mark.asyncio
async def test_duplicate_signup_is_rejected(async_client: AsyncClient, register) -> None:
    account = await register()

    response = await async_client.post(
        f"{API}/signup",
        json={"email": account["email"], "password": "another1", "name": "Other"},
    )

    assert response.status_code == 400
    assert "already been registered" in response.json()["error"]


@pytest.mark.asyncio
async def test_signup_validation_error_uses_error_payload(async_client: AsyncClient) -> None:
    response = await async_client.post(f"{API}/signup", json={"email": "nobody", "password": "x"})

    assert response.status_code == 400
    assert set(response.json()) == {"error"}


@pytest.mark.asyncio
async def test_login_with_wrong_password_is_unauthorized(async_client: AsyncClient, register) -> None:
    account = await register()

    response = await async_client.post(
        f"{API}/login", json={"email": account["email"], "password": "wrong-password"}
    )

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid login credentials"}


@pytest.mark.asyncio
async def test_profile_requires_token(async_client: AsyncClient) -> None:
    response = await async_client.get(f"{API}/profile")

    assert response.status_code == 401
    assert response.json() == {"error": "Unauthorized"}


@pytest.mark.asyncio
async def test_profile_rejects_forged_token(async_client: AsyncClient) -> None:
    response = await async_client.get(
        f"{API}/profile", headers={"Authorization": "Bearer not.a.token"}
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_profile_returns_caller(async_client: AsyncClient, register) -> None:
    account = await register(name="Joana")

    response = await async_client.get(f"{API}/profile", headers=account["headers"])

    assert response.status_code == 200
    profile = response.json()["profile"]
    assert profile["id"] == account["profile"]["id"]
    assert profile["name"] == "Joana"


@pytest.mark.asyncio
async def test_protected_routes_require_token(async_client: AsyncClient) -> None:
    for method, path in (
        ("post", f"{API}/services"),
        ("post", f"{API}/appointments"),
        ("get", f"{API}/appointments"),
        ("post", f"{API}/reviews"),
        ("get", f"{API}/favorites"),
        ("get", f"{API}/analytics"),
        ("get", f"{API}/notifications"),
    ):
        response = await getattr(async_client, method)(path, **({"json": {}} if method == "post" else {}))
        assert response.status_code == 401, path


@pytest.mark.asyncio
async def test_unknown_service_is_not_found(async_client: AsyncClient) -> None:
    response = await async_client.get(f"{API}/services/missing")

    assert response.status_code == 404
    assert response.json() == {"error": "Service not found"}


@pytest.mark.asyncio
async def test_health_reports_store(async_client: AsyncClient) -> None:
    response = await async_client.get(f"{API}/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["store"] == "InMemoryKVStore"


class FailingWriteStore(InMemoryKVStore):
    """In-memory store whose writes under one prefix fail."""

    def __init__(self, source: InMemoryKVStore, prefix: str) -> None:
        super().__init__()
        for key in source.keys():
            super().set(key, source.get(key))
        self.prefix = prefix

    def set(self, key, value):
        if key.startswith(self.prefix):
            raise StoreError(f"Failed to write {key}: disk I/O error")
        super().set(key, value)


@pytest.mark.asyncio
async def test_store_error_is_reported_as_bad_request(
    async_client: AsyncClient, register, kv_store
) -> None:
    clinic = await register("institution")
    set_kv_store(FailingWriteStore(kv_store, "service:"))

    response = await async_client.post(
        f"{API}/services", json={"name": "Consulta"}, headers=clinic["headers"]
    )

    assert response.status_code == 400
    body = response.json()
    assert set(body) == {"error"}
    assert body["error"].startswith("Failed to write service:")
    assert (await async_client.get(f"{API}/services")).json()["services"] == []


@pytest.mark.asyncio
async def test_unexpected_error_is_reported_as_bad_request(
    async_client: AsyncClient, monkeypatch
) -> None:
    async def broken(**filters):
        raise RuntimeError("scan exploded")

    monkeypatch.setattr(CatalogService, "list_services", broken)

    response = await async_client.get(f"{API}/services")

    assert response.status_code == 400
    assert response.json() == {"error": "scan exploded"}


def test_token_header_names_hs256() -> None:
    token = create_access_token({"sub": "u1", "email": "u1@example.test"})

    encoded = token.split(".")[0]
    header = json.loads(base64.urlsafe_b64decode(encoded + "=" * (-len(encoded) % 4)))

    assert header == {"alg": "HS256", "typ": "JWT"}
    assert decode_access_token(token)["sub"] == "u1"
