"""
Derived state and reporting.

Two kinds of aggregates are computed here:

* The rating of a service, recomputed in full from every stored review
  of that service whenever a review is created.  No running average is
  kept; each recompute scans all reviews.
* The analytics rollup: totals per entity, services per category,
  appointments per status and a six month appointment time series.
  It is computed on demand and never cached.

Both read through prefix scans, so concurrent writes may or may not be
reflected; each record is always read whole.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from . import repositories
from ..core.config import settings
from ..schemas.analytics import AnalyticsRead, MonthlyCount
from ..schemas.appointment import Appointment
from ..schemas.service import Service


logger = logging.getLogger(__name__)

MONTHS_IN_SERIES = 6

MONTH_LABELS: Dict[str, Tuple[str, ...]] = {
    "pt": ("jan.", "fev.", "mar.", "abr.", "mai.", "jun.", "jul.", "ago.", "set.", "out.", "nov.", "dez."),
    "en": ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"),
    "es": ("ene", "feb", "mar", "abr", "may", "jun", "jul", "ago", "sept", "oct", "nov", "dic"),
}


def month_label(month: int, locale: Optional[str] = None) -> str:
    """Short month name for ``month`` (1-12) in ``locale``.

    Only the language part of the locale is used (``pt-BR`` -> ``pt``);
    unknown languages fall back to English.
    """
    language = (locale or settings.analytics_locale).replace("_", "-").split("-")[0].lower()
    labels = MONTH_LABELS.get(language, MONTH_LABELS["en"])
    return labels[month - 1]


def month_window(today: date, months: int = MONTHS_IN_SERIES) -> List[Tuple[int, int]]:
    """``(year, month)`` pairs for the last ``months`` months, oldest first."""
    window = []
    for offset in range(months - 1, -1, -1):
        index = today.year * 12 + (today.month - 1) - offset
        window.append((index // 12, index % 12 + 1))
    return window


def parse_appointment_date(value: Any) -> Optional[date]:
    """Calendar date of an appointment, or ``None`` if it cannot be read.

    Accepts ``YYYY-MM-DD`` as well as full ISO datetimes.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def count_by(records: Iterable[Any], key: Callable[[Any], Any]) -> Dict[str, int]:
    """Histogram of ``key(record)`` over ``records``."""
    return dict(Counter(str(key(record)) for record in records))


def monthly_buckets(
    appointments: Iterable[Appointment],
    today: date,
    locale: Optional[str] = None,
) -> List[MonthlyCount]:
    """Appointment counts per calendar month for the last six months.

    Always returns ``MONTHS_IN_SERIES`` buckets, oldest first and ending
    with the month of ``today``; empty months count 0.  Appointments
    outside the window or with an unreadable date are ignored.
    """
    window = month_window(today)
    counts = Counter()
    for appointment in appointments:
        when = parse_appointment_date(appointment.date)
        if when is not None:
            counts[(when.year, when.month)] += 1
    return [
        MonthlyCount(month=month_label(month, locale), year=year, count=counts[(year, month)])
        for year, month in window
    ]


class AggregationService:
    """Rating recomputation and analytics rollup."""

    @classmethod
    async def recompute_service_rating(cls, service_id: str) -> Optional[Service]:
        """Set a service's rating to the mean of all its stored reviews.

        Returns the updated service, or ``None`` when the service does
        not exist (the reviews are left untouched).
        """
        services = repositories.services()
        service = services.find(service_id)
        if service is None:
            logger.debug("Skipping rating recompute for missing service %s", service_id)
            return None
        ratings = [r.rating for r in repositories.reviews().list(lambda r: r.service_id == service_id)]
        service.review_count = len(ratings)
        service.rating = sum(ratings) / len(ratings) if ratings else 0.0
        services.save(service)
        logger.info(
            "Service %s rating is now %.2f over %d reviews",
            service_id,
            service.rating,
            service.review_count,
        )
        return service

    @classmethod
    async def analytics(cls, today: Optional[date] = None, locale: Optional[str] = None) -> AnalyticsRead:
        """Compute the global analytics rollup from the raw records."""
        today = today or date.today()
        services = repositories.services().list()
        appointments = repositories.appointments().list()
        reviews = repositories.reviews().list()
        users = repositories.users().list()
        return AnalyticsRead(
            total_services=len(services),
            total_appointments=len(appointments),
            total_reviews=len(reviews),
            total_users=len(users),
            services_by_category=count_by(services, lambda s: s.category),
            appointments_by_status=count_by(appointments, lambda a: a.status),
            monthly_appointments=monthly_buckets(appointments, today, locale),
        )
