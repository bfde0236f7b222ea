from supabase import Client

from app.schemas.review import ReviewRead


class ReviewRepository:
    """Data access layer for the `reviews` table."""

    TABLE = "reviews"

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_for_provider(self, provider_id: str) -> list[ReviewRead]:
        """Reviews of one provider, newest first."""
        res = (
            self.supabase.table(self.TABLE)
            .select("*")
            .eq("provider_id", provider_id)
            .order("created_at", desc=True)
            .execute()
        )
        return [ReviewRead(**row) for row in res.data or []]

    def create(self, row: dict) -> None:
        """
        Insert a review.

        Raises:
            postgrest.exceptions.APIError on RLS (42501) or
            unique (23505) violations.
        """
        self.supabase.table(self.TABLE).insert(row).execute()
