"""
Analytics endpoint for API v1.

Returns global totals, category and status histograms and the six
month appointment series.  Any authenticated user may read it.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from public_services_api.app.core.security import Identity, get_current_identity
from public_services_api.app.services.aggregation_service import AggregationService


router = APIRouter()


@router.get("", summary="Platform analytics")
async def get_analytics(
    locale: Optional[str] = Query(None, description="Locale of the month labels, e.g. 'pt-BR' or 'en'"),
    identity: Identity = Depends(get_current_identity),
) -> Dict[str, Any]:
    analytics = await AggregationService.analytics(locale=locale)
    return analytics.model_dump(by_alias=True)
