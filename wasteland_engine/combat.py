"""Battle resolution for forces arriving at an enemy garrison.

A battle is a single deterministic exchange. Each side's strength is its
troops plus the weapons it can actually wield (one per troop), scaled by its
combat bonuses. The stronger side wins, ties favour the defender, and the
winner's casualties grow with how close the fight was. The loser is either
wiped out (a defending garrison) or loses half its troops and falls back
(an attacking force).
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from .game_models import Force, Garrison


@dataclass
class BattleReport:
    attacker_won: bool
    attacker_strength: float
    defender_strength: float
    attacker_losses: int = 0
    defender_losses: int = 0
    captured_weapons: int = 0


def side_strength(troops: int, weapons: int, bonus: float = 0.0) -> float:
    """Combat strength of ``troops`` carrying ``weapons`` with a fractional ``bonus``."""
    armed = min(weapons, troops)
    return (troops + armed) * max(0.0, 1.0 + bonus)


def _winner_losses(winner_troops: int, winner_strength: float, loser_strength: float) -> int:
    if winner_strength <= 0:
        return 0
    losses = math.ceil(round(winner_troops * loser_strength / winner_strength * 0.5, 9))
    return min(winner_troops, losses)


def resolve_battle(
    attacker: Force,
    defender: Garrison,
    attack_bonus: float = 0.0,
    defense_bonus: float = 0.0,
) -> BattleReport:
    """Resolve one battle without mutating either side."""
    atk = side_strength(attacker.troops, attacker.weapons, attack_bonus)
    dfn = side_strength(defender.troops, defender.weapons, defense_bonus)

    if atk > dfn:
        return BattleReport(
            attacker_won=True,
            attacker_strength=atk,
            defender_strength=dfn,
            attacker_losses=_winner_losses(attacker.troops, atk, dfn),
            defender_losses=defender.troops,
            captured_weapons=defender.weapons // 2,
        )
    return BattleReport(
        attacker_won=False,
        attacker_strength=atk,
        defender_strength=dfn,
        attacker_losses=math.ceil(attacker.troops / 2),
        defender_losses=_winner_losses(defender.troops, dfn, atk),
    )


__all__ = ["BattleReport", "resolve_battle", "side_strength"]
