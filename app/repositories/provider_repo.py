from typing import Any

from supabase import Client

from app.schemas.provider import ProviderContact, ProviderRead


class ProviderRepository:
    """
    Data access layer for the `providers` table.

    Responsibilities:
      - Pure Supabase queries
      - No FastAPI, no HTTP, no business logic
    """

    TABLE = "providers"

    LISTING_COLUMNS = (
        "id, business_name, service_type, rating, total_reviews, "
        "profile_picture_url, state_id, lga_id, states(name), lgas(name), "
        "years_experience, is_verified, created_at, bio, total_bookings, "
        "response_time, city"
    )

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_id_for_user(self, user_id: str) -> str | None:
        """Return providers.id owned by an auth user, or None."""
        res = (
            self.supabase.table(self.TABLE)
            .select("id")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        if not rows or not rows[0].get("id"):
            return None
        return str(rows[0]["id"])

    def get_contact(self, provider_id: str) -> ProviderContact | None:
        res = (
            self.supabase.table(self.TABLE)
            .select("phone, email, business_name")
            .eq("id", provider_id)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return ProviderContact(**rows[0]) if rows else None

    def get(self, provider_id: str) -> ProviderRead | None:
        """Public listing view of one provider, or None."""
        res = (
            self.supabase.table(self.TABLE)
            .select(self.LISTING_COLUMNS)
            .eq("id", provider_id)
            .limit(1)
            .execute()
        )
        rows = _rows(res)
        return ProviderRead(**rows[0]) if rows else None

    def list(
        self,
        state_id: str | None = None,
        service_type: str | None = None,
        limit: int = 100,
    ) -> list[ProviderRead]:
        """
        Marketplace listing.

        Args:
            state_id: only providers in this state
            service_type: case-insensitive service filter
            limit: max number of rows returned
        """
        query = self.supabase.table(self.TABLE).select(self.LISTING_COLUMNS)
        if state_id:
            query = query.eq("state_id", state_id)
        if service_type:
            query = query.ilike("service_type", service_type)
        res = query.limit(limit).execute()
        return [ProviderRead(**row) for row in _rows(res)]


def _rows(res: Any) -> list[dict[str, Any]]:
    return list(getattr(res, "data", None) or [])
