"""Response models for the analytics rollup."""

from typing import Dict, List

from .base import CamelModel


class MonthlyCount(CamelModel):
    month: str
    year: int
    count: int


class AnalyticsRead(CamelModel):
    total_services: int
    total_appointments: int
    total_reviews: int
    total_users: int
    services_by_category: Dict[str, int]
    appointments_by_status: Dict[str, int]
    # Always six entries, oldest first, ending with the current month.
    monthly_appointments: List[MonthlyCount]
