"""Resolvers for actions that do not leave the garrison.

Each resolver validates its payload against the tribe, applies the effect and
returns the narrative for the turn report. Validation failures raise
:class:`~wasteland_engine.actions.ActionRejected` before anything is changed.
"""
from __future__ import annotations

import math
from random import Random
from typing import Optional

from .actions import (
    ActionData,
    ActionRejected,
    BuildWeaponsData,
    DefendData,
    RecruitData,
    RestData,
    SetRationsData,
    StartResearchData,
)
from .catalogs import Catalog
from .game_models import RationLevel, ResearchProject, Tribe
from .technology import unmet_prerequisites


def recruit(tribe: Tribe, data: RecruitData) -> str:
    if data.food_offered > tribe.global_resources.food:
        raise ActionRejected("Not enough food.")
    recruits = math.floor(data.food_offered * 0.3 * (1 + tribe.stats.charisma * 0.05))
    tribe.global_resources.food -= data.food_offered
    tribe.garrison_at(data.start_location, create=True).troops += recruits
    return f"Your recruitment drive at {data.start_location} attracted {recruits} new followers to your cause."


def rest(tribe: Tribe, data: RestData, rng: Random, max_morale: int = 100) -> str:
    gained = math.floor((15 + rng.random() * 10) * (1 + tribe.stats.leadership * 0.01))
    resources = tribe.global_resources
    resources.morale = min(max_morale, resources.morale + gained)
    return f"Troops resting at {data.start_location} feel rejuvenated, boosting tribe morale by {gained}."


def build_weapons(tribe: Tribe, data: BuildWeaponsData) -> str:
    if data.scrap > tribe.global_resources.scrap:
        raise ActionRejected("Not enough global scrap.")
    built = math.floor(data.scrap * 0.4 * (1 + tribe.stats.intelligence * 0.02))
    tribe.global_resources.scrap -= data.scrap
    tribe.garrison_at(data.start_location, create=True).weapons += built
    return (
        f"Your weapon smiths at {data.start_location} skillfully converted "
        f"{data.scrap} scrap into {built} new weapons."
    )


def set_rations(tribe: Tribe, data: SetRationsData) -> str:
    try:
        level = RationLevel(data.ration_level)
    except ValueError:
        raise ActionRejected("Invalid ration level specified.") from None
    tribe.ration_level = level
    return f"Food rations have been set to {level.value}."


def defend(tribe: Tribe, data: DefendData) -> str:
    # The bonus is applied by combat resolution; nothing changes here.
    return f"{data.troops} troops at {data.start_location} assumed a defensive stance."


def start_research(tribe: Tribe, data: StartResearchData, catalog: Catalog) -> str:
    tech = catalog.get_technology(data.tech_id)
    if tech is None:
        raise ActionRejected("Tech not found.")
    if tech.id in tribe.completed_techs:
        raise ActionRejected(f"{tech.name} has already been researched.")
    missing = unmet_prerequisites(tribe, tech)
    if missing:
        raise ActionRejected(f"{tech.name} requires {', '.join(missing)} first.")
    if tribe.current_research is not None:
        raise ActionRejected("Research already in progress.")
    if tribe.global_resources.scrap < tech.scrap_cost:
        raise ActionRejected(f"Not enough scrap. Need {tech.scrap_cost}.")
    garrison = tribe.garrisons.get(data.location)
    if garrison is None or garrison.troops < data.assigned_troops:
        raise ActionRejected("Not enough troops.")
    if data.assigned_troops < tech.required_troops:
        raise ActionRejected(f"Needs at least {tech.required_troops} troops.")

    tribe.global_resources.scrap -= tech.scrap_cost
    tribe.current_research = ResearchProject(
        tech_id=tech.id,
        progress=0,
        assigned_troops=data.assigned_troops,
        location=data.location,
    )
    return (
        f"At your direction, researchers at {data.location} assigned "
        f"{data.assigned_troops} troops to begin working on {tech.name}."
    )


def resolve_stationary(
    tribe: Tribe,
    data: ActionData,
    *,
    catalog: Catalog,
    rng: Random,
    max_morale: int = 100,
) -> Optional[str]:
    """Route ``data`` to its resolver; ``None`` if it is not a stationary action."""
    if isinstance(data, RecruitData):
        return recruit(tribe, data)
    if isinstance(data, RestData):
        return rest(tribe, data, rng, max_morale)
    if isinstance(data, BuildWeaponsData):
        return build_weapons(tribe, data)
    if isinstance(data, SetRationsData):
        return set_rations(tribe, data)
    if isinstance(data, DefendData):
        return defend(tribe, data)
    if isinstance(data, StartResearchData):
        return start_research(tribe, data, catalog)
    return None


__all__ = [
    "build_weapons",
    "defend",
    "recruit",
    "resolve_stationary",
    "rest",
    "set_rations",
    "start_research",
]
