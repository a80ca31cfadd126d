"""Supabase implementation for feed ingredients."""

from dataclasses import dataclass

from supabase import Client

from farm_assistant.adapters.supabase_rows import (
    parse_constraint,
    parse_nutrients,
    parse_timestamp,
    utc_now_iso,
)
from farm_assistant.domain.nutrition import IngredientRecord
from farm_assistant.services.nutrition import IngredientRepository


@dataclass
class SupabaseIngredientRepository(IngredientRepository):
    """Supabase-backed repository for user ingredient lists."""

    client: Client

    def create_ingredient(
        self, user_id: str, payload: dict[str, object]
    ) -> IngredientRecord:
        """Create an ingredient and return it."""
        now = utc_now_iso()
        response = (
            self.client.table("ingredients")
            .insert(
                {"user_id": user_id, **payload, "created_at": now, "updated_at": now}
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create ingredient")
        return parse_ingredient_row(response.data[0])

    def get_ingredient(self, ingredient_id: str) -> IngredientRecord | None:
        """Return an ingredient by id, if present."""
        response = (
            self.client.table("ingredients")
            .select("*")
            .eq("id", ingredient_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_ingredient_row(response.data[0])

    def list_ingredients(self, user_id: str) -> list[IngredientRecord]:
        """Return every ingredient owned by a user."""
        response = (
            self.client.table("ingredients")
            .select("*")
            .eq("user_id", user_id)
            .order("name")
            .execute()
        )
        return [parse_ingredient_row(row) for row in response.data or []]

    def list_owned_ingredients(
        self, user_id: str, ingredient_ids: list[str]
    ) -> list[IngredientRecord]:
        """Return the ingredients among ``ingredient_ids`` owned by the user."""
        response = (
            self.client.table("ingredients")
            .select("*")
            .eq("user_id", user_id)
            .in_("id", ingredient_ids)
            .execute()
        )
        return [parse_ingredient_row(row) for row in response.data or []]

    def update_ingredient(
        self, ingredient_id: str, payload: dict[str, object]
    ) -> IngredientRecord:
        """Update an ingredient and return it."""
        response = (
            self.client.table("ingredients")
            .update({**payload, "updated_at": utc_now_iso()})
            .eq("id", ingredient_id)
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to update ingredient")
        return parse_ingredient_row(response.data[0])

    def delete_ingredient(self, ingredient_id: str) -> None:
        """Delete an ingredient row."""
        self.client.table("ingredients").delete().eq("id", ingredient_id).execute()


def parse_ingredient_row(row: dict[str, object]) -> IngredientRecord:
    """Parse an ingredients row into a domain model."""
    return IngredientRecord(
        id=str(row["id"]),
        user_id=str(row["user_id"]),
        name=str(row.get("name", "")),
        description=row.get("description"),
        unit_price=float(row.get("unit_price", 0.0)),
        unit=str(row.get("unit") or "kg"),
        nutrients=parse_nutrients(row.get("nutrients")),
        constraint=parse_constraint(row.get("constraints")),
        available=row.get("available") is not False,
        created_at=parse_timestamp(row.get("created_at")),
        updated_at=parse_timestamp(row.get("updated_at")),
    )
