from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .catalogs import Catalog, Technology, TechnologyEffect
from .game_models import TechnologyEffectType, TerrainType, Tribe

logger = logging.getLogger(__name__)

SCAVENGE_RESOURCES = ("Food", "Scrap", "Weapons")


@dataclass
class TechEffects:
    """Sum of every effect granted by a tribe's completed techs and owned assets."""
    passive_food: float = 0
    passive_scrap: float = 0
    scavenge_bonuses: Dict[str, float] = field(
        default_factory=lambda: {resource: 0.0 for resource in SCAVENGE_RESOURCES}
    )
    attack_bonus: float = 0.0
    defense_bonus: float = 0.0
    movement_speed_bonus: float = 1.0
    visibility_bonus: int = 0
    terrain_attack_bonus: Dict[TerrainType, float] = field(default_factory=dict)
    terrain_defense_bonus: Dict[TerrainType, float] = field(default_factory=dict)

    def scavenge_multiplier(self, resource: Optional[str]) -> float:
        return 1.0 + self.scavenge_bonuses.get(resource or "", 0.0)

    def attack_bonus_on(self, terrain: Optional[TerrainType]) -> float:
        return self.attack_bonus + self.terrain_attack_bonus.get(terrain, 0.0)

    def defense_bonus_on(self, terrain: Optional[TerrainType]) -> float:
        return self.defense_bonus + self.terrain_defense_bonus.get(terrain, 0.0)

    def travel_turns(self, path_cost: int) -> int:
        """Turns needed to cover a path of ``path_cost`` at this tribe's speed."""
        speed = self.movement_speed_bonus if self.movement_speed_bonus > 0 else 1.0
        return _ceil(path_cost / speed)

    def add(self, effect: TechnologyEffect) -> None:
        kind = effect.type
        if kind == TechnologyEffectType.PASSIVE_FOOD_GENERATION:
            self.passive_food += effect.value
        elif kind == TechnologyEffectType.PASSIVE_SCRAP_GENERATION:
            self.passive_scrap += effect.value
        elif kind == TechnologyEffectType.SCAVENGE_YIELD_BONUS:
            if effect.resource:
                self.scavenge_bonuses[effect.resource] = self.scavenge_bonuses.get(effect.resource, 0.0) + effect.value
        elif kind == TechnologyEffectType.COMBAT_BONUS_ATTACK:
            if effect.terrain is not None:
                self.terrain_attack_bonus[effect.terrain] = self.terrain_attack_bonus.get(effect.terrain, 0.0) + effect.value
            else:
                self.attack_bonus += effect.value
        elif kind == TechnologyEffectType.COMBAT_BONUS_DEFENSE:
            if effect.terrain is not None:
                self.terrain_defense_bonus[effect.terrain] = self.terrain_defense_bonus.get(effect.terrain, 0.0) + effect.value
            else:
                self.defense_bonus += effect.value
        elif kind == TechnologyEffectType.MOVEMENT_SPEED_BONUS:
            self.movement_speed_bonus += effect.value
        elif kind == TechnologyEffectType.VISIBILITY_RANGE_BONUS:
            self.visibility_bonus += int(effect.value)


def _ceil(value: float) -> int:
    # float drift (1.0000000002) must not add a turn
    return math.ceil(round(value, 9))


def aggregate_effects(tribe: Tribe, catalog: Catalog) -> TechEffects:
    """Fold completed techs and owned assets into one :class:`TechEffects`.

    Unknown tech ids and asset names are skipped.
    """
    effects = TechEffects()
    for tech_id in sorted(tribe.completed_techs):
        tech = catalog.get_technology(tech_id)
        if tech is None:
            continue
        for effect in tech.effects:
            effects.add(effect)
    for asset_name in tribe.assets:
        asset = catalog.get_asset(asset_name)
        if asset is None:
            continue
        for effect in asset.effects:
            effects.add(effect)
    return effects


def describe_effect(effect: TechnologyEffect) -> str:
    kind = effect.type
    if kind == TechnologyEffectType.PASSIVE_FOOD_GENERATION:
        return f"+{effect.value:g} Food/turn"
    if kind == TechnologyEffectType.PASSIVE_SCRAP_GENERATION:
        return f"+{effect.value:g} Scrap/turn"
    if kind == TechnologyEffectType.SCAVENGE_YIELD_BONUS:
        return f"+{effect.value * 100:g}% {effect.resource} Scavenging"
    if kind in (TechnologyEffectType.COMBAT_BONUS_ATTACK, TechnologyEffectType.COMBAT_BONUS_DEFENSE):
        label = "Attack" if kind == TechnologyEffectType.COMBAT_BONUS_ATTACK else "Defense"
        where = f" in {effect.terrain.value}" if effect.terrain is not None else ""
        return f"{effect.value * 100:+g}% {label}{where}"
    if kind == TechnologyEffectType.MOVEMENT_SPEED_BONUS:
        return f"{effect.value * 100:+g}% Movement Speed"
    return f"+{effect.value:g} Visibility Range"


def advance_research(tribe: Tribe, catalog: Catalog) -> Optional[str]:
    """Add one turn of progress to the tribe's current project.

    Returns the narrative for the turn report, or ``None`` when nothing is
    being researched. A project whose tech is missing from the catalog, or
    whose garrison has been wiped out, is cancelled.
    """
    project = tribe.current_research
    if project is None:
        return None
    tech = catalog.get_technology(project.tech_id)
    if tech is None:
        logger.warning("tribe %s researching unknown tech %r; cancelling", tribe.id, project.tech_id)
        tribe.current_research = None
        return "Error: Tech data not found. Research cancelled."

    garrison = tribe.garrisons.get(project.location)
    if garrison is None or garrison.troops <= 0:
        logger.warning(
            "tribe %s lost its research team at %s; cancelling %s", tribe.id, project.location, project.tech_id
        )
        tribe.current_research = None
        return f"The research team at {project.location} was lost. Research on {tech.name} has been cancelled."
    # casualties shrink the team; the reservation never exceeds the garrison
    project.assigned_troops = min(project.assigned_troops, garrison.troops)

    project.progress += project.assigned_troops
    if project.progress >= tech.research_points:
        tribe.completed_techs.add(tech.id)
        tribe.current_research = None
        described = [describe_effect(effect) for effect in tech.effects]
        suffix = f" Effects: {', '.join(described)}." if described else ""
        return f"Breakthrough! Research on {tech.name} is complete.{suffix}"
    return f"Research on {tech.name} continues ({project.progress}/{tech.research_points} points)."


def unmet_prerequisites(tribe: Tribe, tech: Technology) -> List[str]:
    return [p for p in tech.prerequisites if p not in tribe.completed_techs]


__all__ = [
    "SCAVENGE_RESOURCES",
    "TechEffects",
    "advance_research",
    "aggregate_effects",
    "describe_effect",
    "unmet_prerequisites",
]
