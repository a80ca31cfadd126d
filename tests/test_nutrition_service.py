"""Tests for ingredient management and ration optimization."""

import pytest

from farm_assistant.domain.nutrition import CandidateIngredient, OptimizationRequest
from farm_assistant.services.errors import (
    BadRequestError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
)
from farm_assistant.services.nutrition import NutritionService
from tests.conftest import FIXED_NOW, InMemoryRationRepository

CORN: dict[str, object] = {
    "name": "Corn",
    "unit_price": 0.3,
    "unit": "kg",
    "nutrients": {"protein": 9, "energy": 3.2, "fiber": 2},
}
SOYBEAN: dict[str, object] = {
    "name": "Soybean Meal",
    "unit_price": 0.5,
    "unit": "kg",
    "nutrients": {"protein": 44, "energy": 3.0, "fiber": 6},
    "constraints": {"max_percentage": 60},
}


def _candidates(*records) -> list[CandidateIngredient]:  # type: ignore[no-untyped-def]
    return [
        CandidateIngredient(
            id=record.id,
            name=record.name,
            unit_price=record.unit_price,
            nutrients=record.nutrients,
            constraint=record.constraint,
        )
        for record in records
    ]


def test_create_and_list_ingredients(nutrition_service: NutritionService) -> None:
    soybean = nutrition_service.create_ingredient("alice", SOYBEAN)
    nutrition_service.create_ingredient("alice", CORN)
    nutrition_service.create_ingredient("bob", CORN)

    names = [item.name for item in nutrition_service.list_ingredients("alice")]

    assert names == ["Corn", "Soybean Meal"]
    assert soybean.constraint is not None
    assert soybean.constraint.max_percentage == 60
    assert soybean.available is True


def test_ingredient_owner_rules(nutrition_service: NutritionService) -> None:
    corn = nutrition_service.create_ingredient("alice", CORN)

    assert nutrition_service.get_ingredient("alice", "missing") is None
    with pytest.raises(ForbiddenError):
        nutrition_service.get_ingredient("bob", corn.id)
    with pytest.raises(ForbiddenError):
        nutrition_service.update_ingredient("bob", corn.id, {"unit_price": 0.1})
    with pytest.raises(NotFoundError):
        nutrition_service.delete_ingredient("alice", "missing")

    updated = nutrition_service.update_ingredient(
        "alice", corn.id, {"unit_price": 0.25}
    )
    assert updated.unit_price == 0.25
    nutrition_service.delete_ingredient("alice", corn.id)
    assert nutrition_service.list_ingredients("alice") == []


def test_optimize_feed_persists_ration(
    nutrition_service: NutritionService,
    ration_repository: InMemoryRationRepository,
) -> None:
    corn = nutrition_service.create_ingredient("alice", CORN)
    soybean = nutrition_service.create_ingredient("alice", SOYBEAN)
    request = OptimizationRequest(
        target_animal="Dairy Cattle",
        total_amount=1000,
        ingredients=_candidates(soybean, corn),
    )

    record = nutrition_service.optimize_feed("alice", request)

    assert record.user_id == "alice"
    assert record.ration.optimized_at == FIXED_NOW
    assert record.ration.total_cost == pytest.approx(400)
    assert ration_repository.records[record.id] == record
    assert nutrition_service.list_rations("alice") == [record]
    assert nutrition_service.get_ration("alice", record.id) == record
    with pytest.raises(ForbiddenError):
        nutrition_service.get_ration("bob", record.id)


def test_optimize_feed_rejects_foreign_ingredients(
    nutrition_service: NutritionService,
    ration_repository: InMemoryRationRepository,
) -> None:
    theirs = nutrition_service.create_ingredient("bob", CORN)
    request = OptimizationRequest(
        target_animal="Pig", total_amount=100, ingredients=_candidates(theirs)
    )

    with pytest.raises(BadRequestError):
        nutrition_service.optimize_feed("alice", request)
    assert ration_repository.records == {}


def test_optimize_feed_rejects_duplicate_ids(
    nutrition_service: NutritionService,
) -> None:
    corn = nutrition_service.create_ingredient("alice", CORN)
    request = OptimizationRequest(
        target_animal="Pig", total_amount=100, ingredients=_candidates(corn, corn)
    )

    with pytest.raises(BadRequestError):
        nutrition_service.optimize_feed("alice", request)


def test_optimize_feed_without_ingredients_is_invalid(
    nutrition_service: NutritionService,
) -> None:
    request = OptimizationRequest(target_animal="Pig", total_amount=100, ingredients=[])

    with pytest.raises(InvalidInputError):
        nutrition_service.optimize_feed("alice", request)
