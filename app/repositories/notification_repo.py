from supabase import Client


class NotificationRepository:
    """Data access layer for `notifications` (plus sender lookups in `profiles`)."""

    TABLE = "notifications"

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def insert(self, row: dict) -> None:
        self.supabase.table(self.TABLE).insert(row).execute()

    def get_profile(self, user_id: str) -> dict | None:
        """Display fields of a user's profile row, or None."""
        res = (
            self.supabase.table("profiles")
            .select("display_name, user_metadata")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None
