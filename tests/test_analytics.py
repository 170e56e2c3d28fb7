"""Tests for the analytics rollup and its month series."""

from __future__ import annotations

from datetime import date

import pytest
from httpx import AsyncClient

from public_services_api.app.schemas.appointment import Appointment
from public_services_api.app.services.aggregation_service import (
    month_label,
    month_window,
    monthly_buckets,
    parse_appointment_date,
)


API = "/api/v1"


def _appointment(day: str, status: str = "pending") -> Appointment:
    return Appointment(
        id=f"apt-{day}-{status}",
        user_id="u1",
        service_id="s1",
        date=day,
        status=status,
        created_at="2025-01-01T00:00:00.000Z",
    )


def test_month_window_crosses_year_boundary() -> None:
    assert month_window(date(2025, 2, 15)) == [
        (2024, 9),
        (2024, 10),
        (2024, 11),
        (2024, 12),
        (2025, 1),
        (2025, 2),
    ]


def test_month_labels_follow_locale() -> None:
    assert month_label(2, "pt-BR") == "fev."
    assert month_label(2, "en") == "Feb"
    assert month_label(12, "es-ES") == "dic"
    assert month_label(5, "xx") == "May"


def test_parse_appointment_date() -> None:
    assert parse_appointment_date("2025-03-04") == date(2025, 3, 4)
    assert parse_appointment_date("2025-03-04T10:00:00.000Z") == date(2025, 3, 4)
    assert parse_appointment_date("amanhã") is None
    assert parse_appointment_date("") is None


def test_monthly_buckets_count_only_the_window() -> None:
    appointments = [
        _appointment("2024-08-31"),
        _appointment("2024-09-01"),
        _appointment("2024-12-24"),
        _appointment("2024-12-25", "confirmed"),
        _appointment("2025-02-01"),
        _appointment("2025-03-01"),
        _appointment("sem data"),
    ]

    buckets = monthly_buckets(appointments, date(2025, 2, 15), "pt-BR")

    assert [b.month for b in buckets] == ["set.", "out.", "nov.", "dez.", "jan.", "fev."]
    assert [b.year for b in buckets] == [2024, 2024, 2024, 2024, 2025, 2025]
    assert [b.count for b in buckets] == [1, 0, 0, 2, 0, 1]


@pytest.mark.asyncio
async def test_analytics_rollup(async_client: AsyncClient, register, create_service) -> None:
    clinic = await register("institution")
    client = await register()
    dental = await create_service(clinic, name="Limpeza", category="Odontologia")
    await create_service(clinic, name="Canal", category="Odontologia")
    await create_service(clinic, name="ECG", category="Cardiologia")
    today = date.today().isoformat()
    for _ in range(3):
        response = await async_client.post(
            f"{API}/appointments",
            json={"serviceId": dental["id"], "date": today, "time": "10:00"},
            headers=client["headers"],
        )
        appointment = response.json()["appointment"]
    await async_client.put(
        f"{API}/appointments/{appointment['id']}", json={"status": "completed"}, headers=client["headers"]
    )
    await async_client.post(
        f"{API}/reviews", json={"serviceId": dental["id"], "rating": 5}, headers=client["headers"]
    )

    response = await async_client.get(f"{API}/analytics", params={"locale": "en"}, headers=client["headers"])

    assert response.status_code == 200
    analytics = response.json()
    assert analytics["totalServices"] == 3
    assert analytics["totalAppointments"] == 3
    assert analytics["totalReviews"] == 1
    assert analytics["totalUsers"] == 2
    assert analytics["servicesByCategory"] == {"Odontologia": 2, "Cardiologia": 1}
    assert analytics["appointmentsByStatus"] == {"pending": 2, "completed": 1}
    assert sum(analytics["servicesByCategory"].values()) == analytics["totalServices"]
    assert sum(analytics["appointmentsByStatus"].values()) == analytics["totalAppointments"]

    monthly = analytics["monthlyAppointments"]
    assert len(monthly) == 6
    assert monthly[-1] == {
        "month": month_label(date.today().month, "en"),
        "year": date.today().year,
        "count": 3,
    }
    assert sum(bucket["count"] for bucket in monthly) <= analytics["totalAppointments"]


@pytest.mark.asyncio
async def test_analytics_on_empty_store(async_client: AsyncClient, register) -> None:
    client = await register()

    analytics = (await async_client.get(f"{API}/analytics", headers=client["headers"])).json()

    assert analytics["totalServices"] == 0
    assert analytics["servicesByCategory"] == {}
    assert [bucket["count"] for bucket in analytics["monthlyAppointments"]] == [0] * 6
