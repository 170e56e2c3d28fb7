"""
Health endpoint for API v1.

Reports the API version and checks that the key-value store answers
a read.  Public; intended for load balancers and uptime checks.
"""

from typing import Any, Dict

from fastapi import APIRouter

from public_services_api.app.core.config import settings
from public_services_api.app.core.kv_store import get_kv_store


router = APIRouter()


@router.get("", summary="Service health")
async def health() -> Dict[str, Any]:
    store = get_kv_store()
    store.get("health:probe")
    return {
        "status": "ok",
        "version": settings.api_version,
        "store": type(store).__name__,
    }
