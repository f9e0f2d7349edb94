"""
End-of-turn economy for a tribe.

Implements the closing steps of every processed turn:
- Passive income from technologies and assets
- Scrap produced by garrisons holding a Mine or Factory
- Food consumption for every troop, including those still travelling
- Ration morale effects and the starvation penalty
"""
from __future__ import annotations

import math
from typing import Dict, List, Mapping, Optional, Tuple, Union

from .config import EngineConfig
from .game_models import ActionType, HexData, POIType, RationLevel, Tribe
from .technology import TechEffects

RATION_MULTIPLIERS: Dict[RationLevel, float] = {
    RationLevel.HARD: 0.5,
    RationLevel.NORMAL: 1.0,
    RationLevel.GENEROUS: 1.5,
}

STARVATION_PENALTY_CAP = 20
RATION_MORALE_SHIFT = 2


def food_required(total_troops: int, ration_level: Union[RationLevel, str]) -> int:
    """
    Food eaten in one turn by ``total_troops`` at ``ration_level``.

    Args:
        total_troops: Troops in garrisons plus troops on journeys
        ration_level: Current ration setting; unknown values count as Normal

    Returns:
        ``ceil(total_troops * multiplier)``
    """
    try:
        multiplier = RATION_MULTIPLIERS[RationLevel(ration_level)]
    except ValueError:
        multiplier = 1.0
    return math.ceil(total_troops * multiplier)


def apply_passive_effects(
    tribe: Tribe,
    effects: TechEffects,
    hexes: Mapping[str, HexData],
    config: Optional[EngineConfig] = None,
) -> List[Tuple[ActionType, str]]:
    """
    Credit passive food/scrap and POI production to the tribe.

    Args:
        tribe: Tribe to credit
        effects: Aggregated tech and asset effects for the tribe
        hexes: Map index used to look up POIs under garrisons
        config: Supplies the Mine and Factory yields

    Returns:
        ``(result type, narrative)`` pairs, one per income source
    """
    config = config or EngineConfig()
    resources = tribe.global_resources
    notes: List[Tuple[ActionType, str]] = []

    passive_food = int(effects.passive_food)
    if passive_food > 0:
        resources.food += passive_food
        notes.append((ActionType.TECHNOLOGY, f"Generated +{passive_food} food from passive effects."))
    passive_scrap = int(effects.passive_scrap)
    if passive_scrap > 0:
        resources.scrap += passive_scrap
        notes.append((ActionType.TECHNOLOGY, f"Generated +{passive_scrap} scrap from passive effects."))

    yields = {POIType.MINE: config.mine_scrap_yield, POIType.FACTORY: config.factory_scrap_yield}
    for coords, garrison in tribe.garrisons.items():
        if garrison.troops <= 0:
            continue
        hx = hexes.get(coords)
        if hx is None or hx.poi is None or hx.poi.type not in yields:
            continue
        produced = yields[hx.poi.type]
        resources.scrap += produced
        notes.append(
            (
                ActionType.UPKEEP,
                f"Your garrison at {coords} controlling a {hx.poi.type.value} generated +{produced} scrap.",
            )
        )
    return notes


def apply_upkeep(tribe: Tribe, troops_in_transit: int = 0, config: Optional[EngineConfig] = None) -> Optional[str]:
    """
    Feed the tribe and apply ration/starvation morale changes.

    Args:
        tribe: Tribe paying upkeep
        troops_in_transit: Troops the tribe has on journeys
        config: Supplies the morale cap

    Returns:
        The upkeep narrative, or ``None`` when the tribe has no troops at all
    """
    config = config or EngineConfig()
    total = tribe.total_troops() + troops_in_transit
    if total == 0:
        return None

    resources = tribe.global_resources
    required = food_required(total, tribe.ration_level)
    resources.food -= required
    lines = [f"Consumed {required} food for {total} total troops."]

    if tribe.ration_level == RationLevel.HARD:
        resources.morale = max(0, resources.morale - RATION_MORALE_SHIFT)
        lines.append(f"Hard rations lowered morale by {RATION_MORALE_SHIFT}.")
    elif tribe.ration_level == RationLevel.GENEROUS and resources.food >= 0:
        resources.morale = min(config.max_morale, resources.morale + RATION_MORALE_SHIFT)
        lines.append(f"Generous rations boosted morale by {RATION_MORALE_SHIFT}.")

    if resources.food < 0:
        penalty = math.floor(min(STARVATION_PENALTY_CAP, abs(resources.food) / 2))
        resources.morale = max(0, resources.morale - penalty)
        resources.food = 0
        lines.append(f"Starvation! Morale dropped by an additional {penalty}.")
    return " ".join(lines)


__all__ = [
    "RATION_MULTIPLIERS",
    "apply_passive_effects",
    "apply_upkeep",
    "food_required",
]
