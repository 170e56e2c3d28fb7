"""Tests for the favorites toggle."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from public_services_api.app.services.favorites_service import toggle_membership


API = "/api/v1"


def test_toggle_membership() -> None:
    assert toggle_membership([], "a") == ["a"]
    assert toggle_membership(["a", "b"], "a") == ["b"]
    assert toggle_membership(toggle_membership(["x"], "y"), "y") == ["x"]


@pytest.mark.asyncio
async def test_toggle_twice_restores_favorites(async_client: AsyncClient, register, create_service) -> None:
    clinic = await register("institution")
    client = await register()
    service = await create_service(clinic, name="Fisioterapia")

    response = await async_client.post(
        f"{API}/favorites", json={"serviceId": service["id"]}, headers=client["headers"]
    )
    assert response.status_code == 200
    assert response.json()["favorites"] == [service["id"]]

    favorites = (await async_client.get(f"{API}/favorites", headers=client["headers"])).json()["favorites"]
    assert [s["name"] for s in favorites] == ["Fisioterapia"]

    response = await async_client.post(
        f"{API}/favorites", json={"serviceId": service["id"]}, headers=client["headers"]
    )
    assert response.json()["favorites"] == []

    profile = (await async_client.get(f"{API}/profile", headers=client["headers"])).json()["profile"]
    assert profile["favorites"] == []


@pytest.mark.asyncio
async def test_deleted_service_is_skipped_in_favorites(
    async_client: AsyncClient, register, create_service
) -> None:
    clinic = await register("institution")
    client = await register()
    service = await create_service(clinic, name="Nutrição")
    await async_client.post(f"{API}/favorites", json={"serviceId": service["id"]}, headers=client["headers"])

    await async_client.delete(f"{API}/services/{service['id']}", headers=clinic["headers"])

    favorites = (await async_client.get(f"{API}/favorites", headers=client["headers"])).json()["favorites"]
    assert favorites == []
    profile = (await async_client.get(f"{API}/profile", headers=client["headers"])).json()["profile"]
    assert profile["favorites"] == [service["id"]]


@pytest.mark.asyncio
async def test_toggle_without_profile_is_not_found(async_client: AsyncClient, register, kv_store) -> None:
    client = await register()
    kv_store.delete(f"user:{client['profile']['id']}")

    response = await async_client.post(
        f"{API}/favorites", json={"serviceId": "svc"}, headers=client["headers"]
    )

    assert response.status_code == 404
    assert response.json() == {"error": "User profile not found"}


def test_toggle_membership_removes_a_single_duplicate() -> None:
    assert toggle_membership(["a", "b", "a"], "a") == ["b", "a"]
    assert toggle_membership(toggle_membership(["a", "a"], "a"), "a") == []
