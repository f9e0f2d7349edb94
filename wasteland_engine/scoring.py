"""Tribe score and per-turn history records."""
from __future__ import annotations

import math

from .game_models import GameState, Tribe, TribeHistoryRecord, TurnHistoryRecord


def military_score(tribe: Tribe) -> float:
    return tribe.total_troops() * 1 + tribe.total_weapons() * 2


def economic_score(tribe: Tribe) -> float:
    return tribe.global_resources.food * 0.2 + tribe.global_resources.scrap * 0.5


def chief_count(tribe: Tribe) -> int:
    return sum(len(g.chiefs) for g in tribe.garrisons.values())


def calculate_tribe_score(tribe: Tribe) -> int:
    total = (
        military_score(tribe)
        + economic_score(tribe)
        + len(tribe.garrisons) * 25
        + len(tribe.completed_techs) * 50
        + chief_count(tribe) * 40
        + tribe.global_resources.morale
    )
    # half-up, not banker's rounding
    return math.floor(total + 0.5)


def build_history_record(state: GameState) -> TurnHistoryRecord:
    return TurnHistoryRecord(
        turn=state.turn,
        tribe_records=[
            TribeHistoryRecord(
                tribe_id=tribe.id,
                score=calculate_tribe_score(tribe),
                troops=tribe.total_troops(),
                garrisons=len(tribe.garrisons),
            )
            for tribe in state.tribes.values()
        ],
    )


__all__ = ["build_history_record", "calculate_tribe_score"]
