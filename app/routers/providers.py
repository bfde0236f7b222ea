from fastapi import APIRouter, Depends, Query, status

from app.core.auth import get_bearer_token, require_auth
from app.models.session import AuthSession
from app.routers.deps import get_provider_service, get_review_service
from app.schemas.provider import ProviderContact, ProviderRead, SortOption
from app.schemas.review import ReviewCreate, ReviewSummary
from app.services.provider_service import ProviderService
from app.services.review_service import ReviewService

router = APIRouter(prefix="/api/providers", tags=["Providers"])


@router.get("", response_model=list[ProviderRead])
def list_providers(
    sort: SortOption = "rating",
    state_id: str | None = None,
    service: str | None = None,
    user_state: str | None = None,
    user_lga: str | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    provider_service: ProviderService = Depends(get_provider_service),
):
    """
    Marketplace listing (public).

    `sort=distance` ranks by proximity to `user_state` / `user_lga`.
    """
    return provider_service.list_providers(
        sort_by=sort,
        state_id=state_id,
        service_type=service,
        user_state=user_state,
        user_lga=user_lga,
        limit=limit,
    )


@router.get("/{provider_id}/contact", response_model=ProviderContact)
def get_contact(
    provider_id: str,
    token: str = Depends(get_bearer_token),
    service: ProviderService = Depends(get_provider_service),
):
    """
    Phone / e-mail of a provider.

    Auth:
      - Requires `Authorization: Bearer <Supabase access token>`.
    """
    return service.get_contact(provider_id, token)


@router.get("/{provider_id}/reviews", response_model=ReviewSummary)
def list_reviews(
    provider_id: str,
    service: ReviewService = Depends(get_review_service),
):
    """Reviews of a provider, newest first, with count and average."""
    return service.get_summary(provider_id)


@router.post("/{provider_id}/reviews", status_code=status.HTTP_201_CREATED)
def create_review(
    provider_id: str,
    payload: ReviewCreate,
    user: AuthSession = Depends(require_auth),
    service: ReviewService = Depends(get_review_service),
):
    """
    Submit a review.

    Auth:
      - Requires valid Supabase JWT; only customers may review.
    """
    service.submit(provider_id, user, payload)
    return {"success": True}
