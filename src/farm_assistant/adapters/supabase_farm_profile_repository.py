"""Supabase implementation for farm profiles."""

from dataclasses import dataclass

from supabase import Client

from farm_assistant.adapters.supabase_rows import parse_timestamp, utc_now_iso
from farm_assistant.domain.farms import (
    FarmingExperience,
    FarmLocation,
    FarmProfile,
    FarmSize,
)
from farm_assistant.services.farms import FarmProfileRepository


@dataclass
class SupabaseFarmProfileRepository(FarmProfileRepository):
    """Supabase-backed repository for farm profiles."""

    client: Client

    def create_profile(self, user_id: str, payload: dict[str, object]) -> FarmProfile:
        """Create a farm profile and return it."""
        now = utc_now_iso()
        response = (
            self.client.table("farm_profiles")
            .insert(
                {"user_id": user_id, **payload, "created_at": now, "updated_at": now}
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create farm profile")
        return parse_farm_profile_row(response.data[0])

    def get_profile(self, farm_id: str) -> FarmProfile | None:
        """Return a farm profile by id, if present."""
        response = (
            self.client.table("farm_profiles")
            .select("*")
            .eq("id", farm_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_farm_profile_row(response.data[0])

    def list_profiles(self, user_id: str) -> list[FarmProfile]:
        """Return every farm profile owned by a user."""
        response = (
            self.client.table("farm_profiles")
            .select("*")
            .eq("user_id", user_id)
            .execute()
        )
        return [parse_farm_profile_row(row) for row in response.data or []]

    def update_profile(self, farm_id: str, payload: dict[str, object]) -> FarmProfile:
        """Update a farm profile and return it."""
        response = (
            self.client.table("farm_profiles")
            .update({**payload, "updated_at": utc_now_iso()})
            .eq("id", farm_id)
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update farm profile")
        return parse_farm_profile_row(response.data[0])

    def delete_profile(self, farm_id: str) -> None:
        """Delete a farm profile row."""
        self.client.table("farm_profiles").delete().eq("id", farm_id).execute()


def parse_farm_profile_row(row: dict[str, object]) -> FarmProfile:
    """Parse a farm_profiles row into a domain model."""
    location = row.get("location") or {}
    farm_size = row.get("farm_size") or {}
    experience = row.get("experience") or {}
    return FarmProfile(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        farm_name=str(row.get("farm_name", "")),
        location=FarmLocation(
            country=str(location.get("country", "")),
            region=str(location.get("region", "")),
            city=location.get("city"),
            latitude=location.get("latitude"),
            longitude=location.get("longitude"),
        ),
        farm_size=FarmSize(
            value=float(farm_size.get("value", 0.0)),
            unit=str(farm_size.get("unit", "")),
            category=str(farm_size.get("category", "")),
        ),
        farming_types=list(row.get("farming_types") or []),
        experience=FarmingExperience(
            years=float(experience.get("years", 0.0)),
            level=str(experience.get("level", "")),
        ),
        crops=list(row.get("crops") or []),
        livestock=list(row.get("livestock") or []),
        challenges=list(row.get("challenges") or []),
        goals=list(row.get("goals") or []),
        certifications=list(row.get("certifications") or []),
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )
