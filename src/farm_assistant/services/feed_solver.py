"""Least-cost feed formulation solver.

The solver blends candidate ingredients so that the ration meets nutrient
floors while pushing cost down. It is a deterministic local search rather than
an exact linear program:

1. resolve the nutrient floors (explicit targets or the species defaults),
2. keep the cheapest ``max_ingredients`` candidates as the pool,
3. start from equal shares clamped into each ingredient's percentage bounds,
4. refine for at most ``MAX_ITERATIONS`` passes, either bumping ingredients
   that are richer than the blend in a short nutrient, or shifting share from
   an ingredient to a cheaper one while every floor still holds,
5. drop noise-level components and price the final mix.

The function is pure: it never mutates the request and performs no I/O.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

from farm_assistant.domain.nutrition import (
    NUTRIENT_KEYS,
    CandidateIngredient,
    IngredientConstraint,
    NutrientProfile,
    OptimizationRequest,
    Ration,
    RationComponent,
)
from farm_assistant.services.errors import InvalidInputError

MAX_ITERATIONS = 100
PROTEIN_BUMP = 2.0
ENERGY_BUMP = 1.5
MAX_SUBSTITUTION_STEP = 5.0
SUBSTITUTION_FRACTION = 0.1
NOISE_PERCENTAGE = 0.01

# Floors per species: protein %, energy Mcal/kg, fiber %, calcium %, phosphorus %.
DEFAULT_REQUIREMENTS: dict[str, NutrientProfile] = {
    "Dairy Cattle": {
        "protein": 16,
        "energy": 2.7,
        "fiber": 18,
        "calcium": 0.6,
        "phosphorus": 0.4,
    },
    "Beef Cattle": {
        "protein": 12,
        "energy": 2.6,
        "fiber": 20,
        "calcium": 0.5,
        "phosphorus": 0.3,
    },
    "Calf": {
        "protein": 20,
        "energy": 3.0,
        "fiber": 15,
        "calcium": 0.8,
        "phosphorus": 0.6,
    },
    "Pig": {
        "protein": 18,
        "energy": 3.2,
        "fiber": 5,
        "calcium": 0.7,
        "phosphorus": 0.5,
    },
    "Chicken": {
        "protein": 20,
        "energy": 3.1,
        "fiber": 4,
        "calcium": 0.9,
        "phosphorus": 0.7,
    },
    "Sheep": {
        "protein": 14,
        "energy": 2.5,
        "fiber": 22,
        "calcium": 0.5,
        "phosphorus": 0.3,
    },
    "Goat": {
        "protein": 15,
        "energy": 2.6,
        "fiber": 20,
        "calcium": 0.6,
        "phosphorus": 0.4,
    },
}

_logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


def solve(
    request: OptimizationRequest, *, clock: Callable[[], datetime] = _utc_now
) -> Ration:
    """Return the least-cost ration the heuristic finds for the request."""
    if not request.ingredients:
        raise InvalidInputError("At least one ingredient is required")
    if request.max_ingredients is not None and request.max_ingredients < 1:
        raise InvalidInputError("max_ingredients must be at least 1")

    requirements = resolve_requirements(request)
    pool = select_pool(request.ingredients, request.max_ingredients)
    percentages = initial_allocation(pool)
    percentages, iterations, outcome = _refine(pool, percentages, requirements)
    _logger.debug(
        "Feed solver finished: animal=%s pool=%s iterations=%s outcome=%s",
        request.target_animal,
        len(pool),
        iterations,
        outcome,
    )
    return _finalize(request, pool, percentages, clock())


def resolve_requirements(request: OptimizationRequest) -> NutrientProfile:
    """Return the nutrient floors for a request.

    Explicit targets win; otherwise the species defaults apply. Unknown
    species have no floors.
    """
    if request.target_nutrition is not None:
        return dict(request.target_nutrition)
    return dict(DEFAULT_REQUIREMENTS.get(request.target_animal, {}))


def select_pool(
    ingredients: Sequence[CandidateIngredient], max_ingredients: int | None
) -> list[CandidateIngredient]:
    """Sort candidates by price and keep the cheapest ``max_ingredients``."""
    ordered = sorted(ingredients, key=lambda ingredient: ingredient.unit_price)
    if max_ingredients is not None:
        return ordered[:max_ingredients]
    return ordered


def clamp_percentage(value: float, constraint: IngredientConstraint | None) -> float:
    """Clamp a share into the constraint's percentage bounds, when present."""
    if constraint is None:
        return value
    if constraint.min_percentage is not None:
        value = max(value, constraint.min_percentage)
    if constraint.max_percentage is not None:
        value = min(value, constraint.max_percentage)
    return value


def initial_allocation(pool: Sequence[CandidateIngredient]) -> list[float]:
    """Equal shares, clamped per ingredient, then rescaled to sum to 100.

    Rescaling can move a share back outside its bounds; it is not re-clamped.
    """
    share = 100 / len(pool)
    clamped = [clamp_percentage(share, ingredient.constraint) for ingredient in pool]
    return normalize(clamped)


def normalize(percentages: Sequence[float]) -> list[float]:
    """Rescale percentages to sum to 100; all-zero input is returned as is."""
    total = sum(percentages)
    if total <= 0:
        return list(percentages)
    return [value / total * 100 for value in percentages]


def blend_nutrients(
    ingredients: Sequence[CandidateIngredient], percentages: Sequence[float]
) -> NutrientProfile:
    """Percentage-weighted nutrient sum over the ingredients that report each key."""
    blended: NutrientProfile = {}
    for ingredient, percentage in zip(ingredients, percentages, strict=True):
        factor = percentage / 100
        for key in NUTRIENT_KEYS:
            value = ingredient.nutrients.get(key)
            if value is None:
                continue
            blended[key] = blended.get(key, 0.0) + value * factor
    return blended


def meets_requirements(
    composition: NutrientProfile, requirements: NutrientProfile
) -> bool:
    """Return True when every floor is present in the blend and reached."""
    for key, floor in requirements.items():
        value = composition.get(key)
        if value is None or value < floor:
            return False
    return True


def _refine(
    pool: list[CandidateIngredient],
    percentages: list[float],
    requirements: NutrientProfile,
) -> tuple[list[float], int, str]:
    """Run the bounded refinement loop and report how it ended."""
    iteration = 0
    while iteration < MAX_ITERATIONS:
        composition = blend_nutrients(pool, percentages)
        if meets_requirements(composition, requirements):
            shifted = _cheaper_substitution(pool, percentages, requirements)
            if shifted is None:
                return percentages, iteration, "converged"
            percentages = shifted
        else:
            bumped = _bump_toward_floors(pool, percentages, composition, requirements)
            if bumped is None:
                return percentages, iteration, "floors_unreachable"
            percentages = bumped
        iteration += 1
    return percentages, iteration, "iteration_limit"


def _cheaper_substitution(
    pool: list[CandidateIngredient],
    percentages: list[float],
    requirements: NutrientProfile,
) -> list[float] | None:
    """Return the first feasible shift of share toward a cheaper ingredient."""
    for i, current in enumerate(pool):
        step = min(MAX_SUBSTITUTION_STEP, percentages[i] * SUBSTITUTION_FRACTION)
        if step <= 0:
            continue
        for j, cheaper in enumerate(pool):
            if cheaper.unit_price >= current.unit_price:
                continue
            candidate = list(percentages)
            candidate[i] -= step
            candidate[j] += step
            if not _within_bounds(candidate[i], current.constraint):
                continue
            if not _within_bounds(candidate[j], cheaper.constraint):
                continue
            if meets_requirements(blend_nutrients(pool, candidate), requirements):
                return candidate
    return None


def _within_bounds(value: float, constraint: IngredientConstraint | None) -> bool:
    if constraint is None:
        return True
    if constraint.min_percentage is not None and value < constraint.min_percentage:
        return False
    if constraint.max_percentage is not None and value > constraint.max_percentage:
        return False
    return True


def _bump_toward_floors(
    pool: list[CandidateIngredient],
    percentages: list[float],
    composition: NutrientProfile,
    requirements: NutrientProfile,
) -> list[float] | None:
    """Raise ingredients richer than the blend in a short protein or energy floor.

    Only protein and energy drive bumps; other floors are checked but never
    pursued. Returns None when no ingredient can help.
    """
    protein_short = _is_short(composition, requirements, "protein")
    energy_short = _is_short(composition, requirements, "energy")

    bumps: dict[int, float] = {}
    for index, ingredient in enumerate(pool):
        bump = 0.0
        if protein_short and _richer_than_blend(ingredient, composition, "protein"):
            bump += PROTEIN_BUMP
        if energy_short and _richer_than_blend(ingredient, composition, "energy"):
            bump += ENERGY_BUMP
        if bump:
            bumps[index] = bump
    if not bumps:
        return None

    others = len(pool) - len(bumps)
    reduction = sum(bumps.values()) / others if others else 0.0
    adjusted = [
        percentage + bumps[index]
        if index in bumps
        else max(0.0, percentage - reduction)
        for index, percentage in enumerate(percentages)
    ]
    return normalize(adjusted)


def _is_short(
    composition: NutrientProfile, requirements: NutrientProfile, key: str
) -> bool:
    floor = requirements.get(key)
    if not floor:
        return False
    return composition.get(key, 0.0) < floor


def _richer_than_blend(
    ingredient: CandidateIngredient, composition: NutrientProfile, key: str
) -> bool:
    value = ingredient.nutrients.get(key)
    return value is not None and value > composition.get(key, 0.0)


def _finalize(
    request: OptimizationRequest,
    pool: list[CandidateIngredient],
    percentages: list[float],
    optimized_at: datetime,
) -> Ration:
    """Drop noise-level shares, rescale, and price the final mix."""
    kept = [
        (ingredient, percentage)
        for ingredient, percentage in zip(pool, percentages, strict=True)
        if percentage > NOISE_PERCENTAGE
    ]
    ingredients = [ingredient for ingredient, _ in kept]
    shares = normalize([percentage for _, percentage in kept])

    components = []
    for ingredient, share in zip(ingredients, shares, strict=True):
        amount = share / 100 * request.total_amount
        components.append(
            RationComponent(
                ingredient_id=ingredient.id,
                ingredient_name=ingredient.name,
                percentage=share,
                amount=amount,
                cost=amount * ingredient.unit_price,
            )
        )

    return Ration(
        target_animal=request.target_animal,
        total_amount=request.total_amount,
        unit=request.unit or "kg",
        components=components,
        total_cost=sum(component.cost for component in components),
        nutrients=blend_nutrients(ingredients, shares),
        optimized_at=optimized_at,
    )
