"""Conversions between Supabase rows and domain values."""

from datetime import UTC, datetime

from farm_assistant.domain.nutrition import (
    NUTRIENT_KEYS,
    IngredientConstraint,
    NutrientProfile,
)


def utc_now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(tz=UTC).isoformat()


def parse_timestamp(raw: object) -> datetime:
    """Parse a timestamp column, defaulting to now when it is missing."""
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return datetime.now(tz=UTC)


def parse_nutrients(raw: object) -> NutrientProfile:
    """Parse a nutrients JSON column, keeping only known, present keys."""
    if not isinstance(raw, dict):
        return {}
    return {
        key: float(raw[key])
        for key in NUTRIENT_KEYS
        if raw.get(key) is not None
    }


def parse_constraint(raw: object) -> IngredientConstraint | None:
    """Parse an ingredient constraints JSON column."""
    if not isinstance(raw, dict):
        return None
    return IngredientConstraint(
        min_percentage=_optional_float(raw.get("min_percentage")),
        max_percentage=_optional_float(raw.get("max_percentage")),
        min_amount=_optional_float(raw.get("min_amount")),
        max_amount=_optional_float(raw.get("max_amount")),
    )


def _optional_float(value: object) -> float | None:
    return None if value is None else float(value)
