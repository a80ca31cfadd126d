"""Domain models for farm profiles."""

from dataclasses import dataclass, field
from datetime import datetime

FARMING_TYPES = (
    "crops",
    "livestock",
    "mixed",
    "aquaculture",
    "horticulture",
    "organic",
    "other",
)
FARM_SIZE_UNITS = ("acres", "hectares", "sqft", "sqm")
FARM_SIZE_CATEGORIES = ("small", "medium", "large", "enterprise")
EXPERIENCE_LEVELS = ("beginner", "intermediate", "advanced", "expert")


@dataclass(frozen=True)
class FarmLocation:
    """Where a farm is located."""

    country: str
    region: str
    city: str | None = None
    latitude: float | None = None
    longitude: float | None = None


@dataclass(frozen=True)
class FarmSize:
    """Farm area with its size bracket."""

    value: float
    unit: str
    category: str


@dataclass(frozen=True)
class FarmingExperience:
    """Operator experience summary."""

    years: float
    level: str


@dataclass(frozen=True)
class FarmProfile:
    """A farm owned by a user."""

    id: str
    user_id: str
    farm_name: str
    location: FarmLocation
    farm_size: FarmSize
    farming_types: list[str]
    experience: FarmingExperience
    created_at: datetime
    updated_at: datetime
    crops: list[str] = field(default_factory=list)
    livestock: list[str] = field(default_factory=list)
    challenges: list[str] = field(default_factory=list)
    goals: list[str] = field(default_factory=list)
    certifications: list[str] = field(default_factory=list)
