import logging
import re
from datetime import datetime, timezone

from fastapi import HTTPException, status

from app.core.auth import AuthClient
from app.repositories.provider_repo import ProviderRepository
from app.schemas.provider import ProviderContact, ProviderRead, SortOption

logger = logging.getLogger(__name__)

# Providers without a parsable response time sort last
UNKNOWN_RESPONSE_MINUTES = 999


def _response_minutes(response_time: str | None) -> int:
    if not response_time:
        return UNKNOWN_RESPONSE_MINUTES
    match = re.search(r"\d+", response_time)
    return int(match.group(0)) if match else UNKNOWN_RESPONSE_MINUTES


def _created_key(p: ProviderRead) -> datetime:
    created = p.created_at
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created


def sort_providers(
    providers: list[ProviderRead],
    sort_by: SortOption,
    user_state: str | None,
    user_lga: str | None,
) -> list[ProviderRead]:
    """
    Return a sorted copy of `providers`.

      distance  same LGA, then same state, then state name; with no
                known user location, state name only
      rating    highest first
      newest    most recently created first
      bookings  most bookings first
      response  fastest response time first
    """
    items = list(providers)

    if sort_by == "distance":
        if not user_state or not user_lga:
            return sorted(items, key=lambda p: p.state_name or "")

        def distance_key(p: ProviderRead):
            same_state = p.state_name == user_state
            same_lga = same_state and p.lga_name == user_lga
            return (not same_lga, not same_state, p.state_name or "")

        return sorted(items, key=distance_key)

    if sort_by == "rating":
        return sorted(items, key=lambda p: p.rating or 0, reverse=True)

    if sort_by == "newest":
        return sorted(items, key=_created_key, reverse=True)

    if sort_by == "bookings":
        return sorted(items, key=lambda p: p.total_bookings or 0, reverse=True)

    if sort_by == "response":
        return sorted(items, key=lambda p: _response_minutes(p.response_time))

    return items


class ProviderService:
    """
    Business logic for provider listing and contact details.

    Responsibilities:
      - marketplace listing + sorting
      - gate contact details behind a valid Supabase user
      - map lookup failures to HTTP errors
    """

    def __init__(self, repo: ProviderRepository, auth: AuthClient):
        self.repo = repo
        self.auth = auth

    def list_providers(
        self,
        sort_by: SortOption,
        state_id: str | None = None,
        service_type: str | None = None,
        user_state: str | None = None,
        user_lga: str | None = None,
        limit: int = 100,
    ) -> list[ProviderRead]:
        providers = self.repo.list(
            state_id=state_id, service_type=service_type, limit=limit
        )
        return sort_providers(providers, sort_by, user_state, user_lga)

    def get_contact(self, provider_id: str, access_token: str) -> ProviderContact:
        """
        Contact info for signed-in users.

        Raises:
            HTTPException(401): token rejected by Supabase.
            HTTPException(404): provider not found.
            HTTPException(500): anything else.
        """
        try:
            user = self.auth.get_user(access_token)
        except Exception as e:
            logger.info("Contact lookup: token rejected: %s", e)
            user = None
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Unauthorized",
            )

        try:
            contact = self.repo.get_contact(provider_id)
        except Exception as e:
            logger.error("Error fetching contact info: %s", e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error",
            )

        if contact is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Provider not found",
            )
        return contact
