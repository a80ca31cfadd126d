"""Tests for farm profile service."""

import pytest

from farm_assistant.services.errors import ForbiddenError, NotFoundError
from farm_assistant.services.farms import FarmProfileService
from tests.conftest import InMemoryFarmProfileRepository

PROFILE_PAYLOAD: dict[str, object] = {
    "farm_name": "Green Valley",
    "location": {"country": "Kenya", "region": "Nakuru", "city": "Njoro"},
    "farm_size": {"value": 12.5, "unit": "acres", "category": "small"},
    "farming_types": ["livestock", "crops"],
    "experience": {"years": 6, "level": "intermediate"},
    "livestock": ["dairy cows"],
}


def _service() -> tuple[FarmProfileService, InMemoryFarmProfileRepository]:
    repository = InMemoryFarmProfileRepository()
    return FarmProfileService(repository), repository


def test_create_and_list_profiles_per_owner() -> None:
    service, _ = _service()

    created = service.create_profile("alice", PROFILE_PAYLOAD)
    service.create_profile("bob", PROFILE_PAYLOAD)

    profiles = service.list_profiles("alice")
    assert [profile.id for profile in profiles] == [created.id]
    assert created.location.city == "Njoro"
    assert created.farm_size.value == 12.5
    assert created.experience.level == "intermediate"
    assert created.livestock == ["dairy cows"]


def test_get_profile_returns_none_when_missing() -> None:
    service, _ = _service()

    assert service.get_profile("alice", "missing") is None


def test_get_profile_of_another_owner_is_forbidden() -> None:
    service, _ = _service()
    created = service.create_profile("alice", PROFILE_PAYLOAD)

    with pytest.raises(ForbiddenError):
        service.get_profile("bob", created.id)


def test_update_profile_is_partial() -> None:
    service, _ = _service()
    created = service.create_profile("alice", PROFILE_PAYLOAD)

    updated = service.update_profile("alice", created.id, {"farm_name": "Hilltop"})

    assert updated.farm_name == "Hilltop"
    assert updated.location.country == "Kenya"


def test_update_and_delete_check_ownership() -> None:
    service, repository = _service()
    created = service.create_profile("alice", PROFILE_PAYLOAD)

    with pytest.raises(ForbiddenError):
        service.update_profile("bob", created.id, {"farm_name": "Mine"})
    with pytest.raises(ForbiddenError):
        service.delete_profile("bob", created.id)
    with pytest.raises(NotFoundError):
        service.delete_profile("alice", "missing")

    service.delete_profile("alice", created.id)
    assert repository.rows == {}
