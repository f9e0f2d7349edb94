"""Random events that can befall a force while it travels.

The table is declarative: each :class:`TravelEvent` pairs a weight with a
precondition on the travelling force and an effect that mutates it. Adding an
event means adding an entry, not another branch.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from random import Random
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar

from .game_models import Force

T = TypeVar("T")


@dataclass(frozen=True)
class TravelEvent:
    key: str
    weight: float
    applies: Callable[[Force], bool]
    apply: Callable[[Force, Random], str]


def _ambush(force: Force, rng: Random) -> str:
    losses = max(1, math.floor(force.troops * (rng.random() * 0.1 + 0.05)))
    force.troops = max(0, force.troops - losses)
    return f"The group was ambushed by bandits! They fought them off but lost {losses} troops."


def _rabid_dog(force: Force, rng: Random) -> str:
    force.troops -= 1
    return "A scout was bitten by a rabid dog and had to be dispatched to prevent disease."


def _supply_cart(force: Force, rng: Random) -> str:
    lost = max(1, math.floor(force.weapons * 0.2))
    force.weapons = max(0, force.weapons - lost)
    return f"A supply cart overturned, losing {lost} weapons in a ravine."


def _lone_survivor(force: Force, rng: Random) -> str:
    force.troops += 1
    return "The party found a lone survivor. Grateful for the rescue, they've joined your ranks."


DEFAULT_EVENTS: Tuple[TravelEvent, ...] = (
    TravelEvent("ambush", 5, lambda f: f.troops >= 5, _ambush),
    TravelEvent("rabid_dog", 3, lambda f: f.troops >= 2, _rabid_dog),
    TravelEvent("supply_cart", 4, lambda f: f.weapons >= 1, _supply_cart),
    TravelEvent("lone_survivor", 2, lambda f: True, _lone_survivor),
)


def weighted_choice(entries: Sequence[T], weights: Sequence[float], rng: Random) -> Optional[T]:
    """Pick one of ``entries`` with probability proportional to its weight."""
    total = sum(weights)
    if not entries or total <= 0:
        return None
    draw = rng.random() * total
    cumulative = 0.0
    for entry, weight in zip(entries, weights):
        cumulative += weight
        if draw < cumulative:
            return entry
    return entries[-1]


def roll_travel_event(
    force: Force,
    rng: Random,
    chance: float,
    events: Sequence[TravelEvent] = DEFAULT_EVENTS,
) -> Optional[str]:
    """Maybe apply one event to ``force`` in place; return its narrative.

    Empty forces never trigger events. Only events whose precondition holds
    take part in the weighted draw.
    """
    if force.troops <= 0 or rng.random() >= chance:
        return None
    eligible: List[TravelEvent] = [event for event in events if event.applies(force)]
    chosen = weighted_choice(eligible, [event.weight for event in eligible], rng)
    if chosen is None:
        return None
    return chosen.apply(force, rng)


__all__ = ["DEFAULT_EVENTS", "TravelEvent", "roll_travel_event", "weighted_choice"]
