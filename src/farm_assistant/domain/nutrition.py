"""Feed formulation domain models."""

from dataclasses import dataclass, field
from datetime import datetime

NUTRIENT_KEYS = (
    "protein",
    "energy",
    "fiber",
    "fat",
    "calcium",
    "phosphorus",
    "dry_matter",
    "ash",
)

TARGET_ANIMALS = (
    "Dairy Cattle",
    "Beef Cattle",
    "Calf",
    "Pig",
    "Chicken",
    "Sheep",
    "Goat",
)

FEED_UNITS = ("kg", "ton", "lb", "pound")

# Keys present in the mapping carry data; a missing key means "not measured".
NutrientProfile = dict[str, float]


@dataclass(frozen=True)
class IngredientConstraint:
    """Optional usage limits for an ingredient within a ration."""

    min_percentage: float | None = None
    max_percentage: float | None = None
    min_amount: float | None = None
    max_amount: float | None = None


@dataclass(frozen=True)
class CandidateIngredient:
    """An ingredient offered to the solver for a single optimization."""

    id: str
    name: str
    unit_price: float
    nutrients: NutrientProfile = field(default_factory=dict)
    constraint: IngredientConstraint | None = None


@dataclass(frozen=True)
class OptimizationRequest:
    """Input to the least-cost feed formulation solver."""

    target_animal: str
    total_amount: float
    ingredients: list[CandidateIngredient]
    unit: str = "kg"
    target_nutrition: NutrientProfile | None = None
    max_ingredients: int | None = None


@dataclass(frozen=True)
class RationComponent:
    """A single ingredient line of an optimized ration."""

    ingredient_id: str
    ingredient_name: str
    percentage: float
    amount: float
    cost: float


@dataclass(frozen=True)
class Ration:
    """Optimized feed mixture with cost and blended nutrients."""

    target_animal: str
    total_amount: float
    unit: str
    components: list[RationComponent]
    total_cost: float
    nutrients: NutrientProfile
    optimized_at: datetime


@dataclass(frozen=True)
class IngredientRecord:
    """Ingredient stored in a user's ingredient list."""

    id: str
    user_id: str
    name: str
    description: str | None
    unit_price: float
    unit: str
    nutrients: NutrientProfile
    constraint: IngredientConstraint | None
    available: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class FeedRationRecord:
    """Persisted ration owned by a user."""

    id: str
    user_id: str
    ration: Ration
    created_at: datetime
    updated_at: datetime
