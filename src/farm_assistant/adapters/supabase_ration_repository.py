"""Supabase implementation for stored feed rations."""

from dataclasses import asdict, dataclass

from supabase import Client

from farm_assistant.adapters.supabase_rows import (
    parse_nutrients,
    parse_timestamp,
    utc_now_iso,
)
from farm_assistant.domain.nutrition import FeedRationRecord, Ration, RationComponent
from farm_assistant.services.nutrition import RationRepository


@dataclass
class SupabaseRationRepository(RationRepository):
    """Supabase-backed repository for optimized rations."""

    client: Client

    def create_ration(self, user_id: str, ration: Ration) -> FeedRationRecord:
        """Persist a ration and return the stored record."""
        now = utc_now_iso()
        response = (
            self.client.table("feed_rations")
            .insert(
                {
                    "user_id": user_id,
                    **ration_to_row(ration),
                    "created_at": now,
                    "updated_at": now,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to store feed ration")
        return parse_ration_row(response.data[0])

    def get_ration(self, ration_id: str) -> FeedRationRecord | None:
        """Return a ration by id, if present."""
        response = (
            self.client.table("feed_rations")
            .select("*")
            .eq("id", ration_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_ration_row(response.data[0])

    def list_rations(self, user_id: str) -> list[FeedRationRecord]:
        """Return a user's rations, newest first."""
        response = (
            self.client.table("feed_rations")
            .select("*")
            .eq("user_id", user_id)
            .order("optimized_at", desc=True)
            .execute()
        )
        return [parse_ration_row(row) for row in response.data or []]


def ration_to_row(ration: Ration) -> dict[str, object]:
    """Serialize a ration into column values."""
    return {
        "target_animal": ration.target_animal,
        "total_amount": ration.total_amount,
        "unit": ration.unit,
        "components": [asdict(component) for component in ration.components],
        "total_cost": ration.total_cost,
        "nutrients": dict(ration.nutrients),
        "optimized_at": ration.optimized_at.isoformat(),
    }


def parse_ration_row(row: dict[str, object]) -> FeedRationRecord:
    """Parse a feed_rations row into a domain model."""
    components = [
        RationComponent(
            ingredient_id=str(item["ingredient_id"]),
            ingredient_name=str(item.get("ingredient_name", "")),
            percentage=float(item.get("percentage", 0.0)),
            amount=float(item.get("amount", 0.0)),
            cost=float(item.get("cost", 0.0)),
        )
        for item in row.get("components") or []
    ]
    ration = Ration(
        target_animal=str(row.get("target_animal", "")),
        total_amount=float(row.get("total_amount", 0.0)),
        unit=str(row.get("unit") or "kg"),
        components=components,
        total_cost=float(row.get("total_cost", 0.0)),
        nutrients=parse_nutrients(row.get("nutrients")),
        optimized_at=parse_timestamp(row.get("optimized_at")),
    )
    return FeedRationRecord(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        ration=ration,
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )
