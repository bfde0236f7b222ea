from datetime import datetime

from supabase import Client

from app.schemas.otp import OtpRecord


class OtpRepository:
    """
    Data access layer for `otp_storage`.

    One live code per email: writes upsert on the `email` column.
    """

    TABLE = "otp_storage"

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def upsert(self, record: OtpRecord) -> None:
        self.supabase.table(self.TABLE).upsert(
            record.model_dump(mode="json"),
            on_conflict="email",
        ).execute()

    def find_valid(self, email: str, otp: str, now: datetime) -> OtpRecord | None:
        """Matching code that has not expired at `now`, or None."""
        res = (
            self.supabase.table(self.TABLE)
            .select("*")
            .eq("email", email)
            .eq("otp", otp)
            .gt("expires_at", now.isoformat())
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return OtpRecord(**rows[0]) if rows else None

    def delete_for_email(self, email: str) -> None:
        self.supabase.table(self.TABLE).delete().eq("email", email).execute()
