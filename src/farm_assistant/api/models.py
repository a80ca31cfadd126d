"""Pydantic models for API request payloads."""

from typing import Literal

from pydantic import BaseModel, Field

from farm_assistant.domain.nutrition import (
    CandidateIngredient,
    IngredientConstraint,
    NutrientProfile,
    OptimizationRequest,
)

TargetAnimal = Literal[
    "Dairy Cattle", "Beef Cattle", "Calf", "Pig", "Chicken", "Sheep", "Goat"
]
FeedUnit = Literal["kg", "ton", "lb", "pound"]
FarmingType = Literal[
    "crops", "livestock", "mixed", "aquaculture", "horticulture", "organic", "other"
]


class UserCreate(BaseModel):
    """User profile payload."""

    email: str = Field(min_length=3)
    display_name: str | None = None
    photo_url: str | None = None


class UserUpdate(BaseModel):
    """Partial user profile update."""

    display_name: str | None = None
    photo_url: str | None = None


class FarmLocationModel(BaseModel):
    """Farm location payload."""

    country: str = Field(min_length=1)
    region: str = Field(min_length=1)
    city: str | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)


class FarmSizeModel(BaseModel):
    """Farm size payload."""

    value: float = Field(gt=0)
    unit: Literal["acres", "hectares", "sqft", "sqm"]
    category: Literal["small", "medium", "large", "enterprise"]


class FarmingExperienceModel(BaseModel):
    """Farming experience payload."""

    years: float = Field(ge=0)
    level: Literal["beginner", "intermediate", "advanced", "expert"]


class FarmProfileCreate(BaseModel):
    """Farm profile payload."""

    farm_name: str = Field(min_length=1)
    location: FarmLocationModel
    farm_size: FarmSizeModel
    farming_types: list[FarmingType] = Field(min_length=1)
    experience: FarmingExperienceModel
    crops: list[str] = Field(default_factory=list)
    livestock: list[str] = Field(default_factory=list)
    challenges: list[str] = Field(default_factory=list)
    goals: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)


class FarmProfileUpdate(BaseModel):
    """Partial farm profile update."""

    farm_name: str | None = Field(default=None, min_length=1)
    location: FarmLocationModel | None = None
    farm_size: FarmSizeModel | None = None
    farming_types: list[FarmingType] | None = Field(default=None, min_length=1)
    experience: FarmingExperienceModel | None = None
    crops: list[str] | None = None
    livestock: list[str] | None = None
    challenges: list[str] | None = None
    goals: list[str] | None = None
    certifications: list[str] | None = None


class NutrientsModel(BaseModel):
    """Nutrient analysis; percentages except energy in Mcal/kg."""

    protein: float | None = Field(default=None, ge=0, le=100)
    energy: float | None = Field(default=None, ge=0)
    fiber: float | None = Field(default=None, ge=0, le=100)
    fat: float | None = Field(default=None, ge=0, le=100)
    calcium: float | None = Field(default=None, ge=0, le=100)
    phosphorus: float | None = Field(default=None, ge=0, le=100)
    dry_matter: float | None = Field(default=None, ge=0, le=100)
    ash: float | None = Field(default=None, ge=0, le=100)

    def to_domain(self) -> NutrientProfile:
        """Return only the nutrients that were supplied."""
        return self.model_dump(exclude_none=True)


class IngredientConstraintModel(BaseModel):
    """Usage limits for an ingredient."""

    min_percentage: float | None = Field(default=None, ge=0, le=100)
    max_percentage: float | None = Field(default=None, ge=0, le=100)
    min_amount: float | None = Field(default=None, ge=0)
    max_amount: float | None = Field(default=None, ge=0)

    def to_domain(self) -> IngredientConstraint:
        """Convert to the solver constraint type."""
        return IngredientConstraint(**self.model_dump())


class IngredientCreate(BaseModel):
    """Ingredient payload."""

    name: str = Field(min_length=1)
    description: str | None = None
    unit_price: float = Field(ge=0)
    unit: FeedUnit = "kg"
    nutrients: NutrientsModel = Field(default_factory=NutrientsModel)
    constraints: IngredientConstraintModel | None = None
    available: bool = True

    def to_payload(self) -> dict[str, object]:
        """Return column values for storage."""
        payload = self.model_dump(exclude={"nutrients"})
        payload["nutrients"] = self.nutrients.to_domain()
        return payload


class IngredientUpdate(BaseModel):
    """Partial ingredient update."""

    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    unit_price: float | None = Field(default=None, ge=0)
    unit: FeedUnit | None = None
    nutrients: NutrientsModel | None = None
    constraints: IngredientConstraintModel | None = None
    available: bool | None = None

    def to_payload(self) -> dict[str, object]:
        """Return only the columns the caller sent."""
        payload = self.model_dump(exclude_unset=True, exclude={"nutrients"})
        if self.nutrients is not None:
            payload["nutrients"] = self.nutrients.to_domain()
        return payload


class OptimizationIngredientModel(BaseModel):
    """Ingredient offered to a single optimization."""

    id: str = Field(min_length=1)
    name: str
    unit_price: float = Field(ge=0)
    nutrients: NutrientsModel = Field(default_factory=NutrientsModel)
    constraints: IngredientConstraintModel | None = None

    def to_domain(self) -> CandidateIngredient:
        """Convert to a solver candidate."""
        return CandidateIngredient(
            id=self.id,
            name=self.name,
            unit_price=self.unit_price,
            nutrients=self.nutrients.to_domain(),
            constraint=self.constraints.to_domain() if self.constraints else None,
        )


class OptimizationRequestModel(BaseModel):
    """Feed optimization payload."""

    target_animal: TargetAnimal
    total_amount: float = Field(gt=0)
    unit: FeedUnit = "kg"
    ingredients: list[OptimizationIngredientModel]
    target_nutrition: NutrientsModel | None = None
    max_ingredients: int | None = Field(default=None, ge=1)

    def to_domain(self) -> OptimizationRequest:
        """Convert to a solver request."""
        return OptimizationRequest(
            target_animal=self.target_animal,
            total_amount=self.total_amount,
            unit=self.unit,
            ingredients=[item.to_domain() for item in self.ingredients],
            target_nutrition=(
                self.target_nutrition.to_domain()
                if self.target_nutrition is not None
                else None
            ),
            max_ingredients=self.max_ingredients,
        )


class HealthQuestion(BaseModel):
    """Health question payload with optional base64 image."""

    text_query: str = Field(min_length=1)
    image_base64: str | None = None
