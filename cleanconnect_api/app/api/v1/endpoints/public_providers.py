"""
Public catalog endpoints for API v1.

Browsing is open to everyone; posting a review needs a client token.
A client has one review per provider: the first submission answers 201,
later submissions overwrite it and answer 200.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status

from cleanconnect_api.app.core.responses import envelope
from cleanconnect_api.app.core.security import require_roles
from cleanconnect_api.app.schemas.common import MAX_ID
from cleanconnect_api.app.schemas.review import ReviewCreate
from cleanconnect_api.app.services.catalog_service import CatalogService
from cleanconnect_api.app.services.review_service import ReviewService


router = APIRouter()


@router.get("", summary="Search the provider catalog")
async def search_providers(
    service_type: Optional[str] = Query(None, alias="serviceType"),
    service_area: Optional[str] = Query(None, alias="serviceArea"),
    min_rating: Optional[float] = Query(None, alias="minRating", ge=0, le=5),
) -> dict:
    """Search providers.

    Parameters
    ----------
    service_type : Optional[str]
        Matched against ``serviceTypes`` and ``serviceDetails[].type``.
        Legacy French names (``maison``, ``bureau``...) are accepted.
    service_area : Optional[str]
        A city the provider must list in ``serviceAreas``.
    min_rating : Optional[float]
        Inclusive lower bound on the average review rating.
    """
    providers = await CatalogService.search_providers(service_type, service_area, min_rating)
    return envelope(data=providers, count=len(providers))


@router.get("/{provider_id}", summary="Get provider details")
async def get_provider(
    provider_id: int = Path(..., ge=1, le=MAX_ID, description="ID of the provider"),
) -> dict:
    provider = await CatalogService.get_provider_details(provider_id)
    return envelope(data=provider)


@router.post("/{provider_id}/reviews", status_code=status.HTTP_201_CREATED, summary="Submit a review")
async def submit_review(
    data: ReviewCreate,
    response: Response,
    provider_id: int = Path(..., ge=1, le=MAX_ID, description="ID of the reviewed provider"),
    current: dict = Depends(require_roles("client")),
) -> dict:
    """Create or update the caller's review of a provider."""
    review, created = await ReviewService.submit_review(provider_id, current["id"], data)
    if not created:
        response.status_code = status.HTTP_200_OK
        return envelope(data=review, message="Review updated")
    return envelope(data=review, message="Review submitted")
