"""Supabase-backed user repository."""

from dataclasses import dataclass

from supabase import Client

from farm_assistant.adapters.supabase_rows import parse_timestamp, utc_now_iso
from farm_assistant.domain.models import UserRecord
from farm_assistant.services.users import UserRepository


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def get_user(self, user_id: str) -> UserRecord | None:
        """Return the user for an auth uid, if present."""
        response = (
            self.client.table("users")
            .select("*")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        if response.data:
            return parse_user_row(response.data[0])
        return None

    def create_user(self, user_id: str, payload: dict[str, object]) -> UserRecord:
        """Create a new user row and return it."""
        now = utc_now_iso()
        response = (
            self.client.table("users")
            .insert({"id": user_id, **payload, "created_at": now, "updated_at": now})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create user in Supabase")
        return parse_user_row(response.data[0])

    def update_user(self, user_id: str, payload: dict[str, object]) -> UserRecord:
        """Update a user row and return it."""
        response = (
            self.client.table("users")
            .update({**payload, "updated_at": utc_now_iso()})
            .eq("id", user_id)
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update user in Supabase")
        return parse_user_row(response.data[0])


def parse_user_row(row: dict[str, object]) -> UserRecord:
    """Parse a users row into a domain model."""
    return UserRecord(
        id=str(row["id"]),
        email=str(row.get("email") or ""),
        display_name=row.get("display_name"),
        photo_url=row.get("photo_url"),
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )
