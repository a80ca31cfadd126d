"""Domain models for the farm assistant."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class UserRecord:
    """Represents a user profile keyed by the auth uid."""

    id: str
    email: str
    display_name: str | None
    photo_url: str | None
    created_at: datetime
    updated_at: datetime
