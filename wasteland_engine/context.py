from __future__ import annotations

from dataclasses import dataclass, field
from random import Random
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple, Union

from .catalogs import Catalog
from .config import EngineConfig
from .game_models import ActionType, GameAction, GameState, HexData, Tribe
from .pathing import PathResult, find_path
from .technology import TechEffects, aggregate_effects


@dataclass
class TurnContext:
    """Everything one turn of resolution reads from or writes to."""

    state: GameState
    catalog: Catalog
    config: EngineConfig
    rng: Random
    # MAP (shares HexData objects with state.map_data)
    hexes: Dict[str, HexData] = field(default_factory=dict)
    # NARRATIVE, per tribe id, in the order it happened
    results: Dict[str, List[GameAction]] = field(default_factory=dict)
    # (tribe id, coords) pairs that submitted Defend this turn
    defended: Set[Tuple[str, str]] = field(default_factory=set)

    @classmethod
    def build(
        cls,
        state: GameState,
        catalog: Catalog,
        config: EngineConfig,
        rng: Random,
    ) -> "TurnContext":
        return cls(
            state=state,
            catalog=catalog,
            config=config,
            rng=rng,
            hexes=state.hex_index(),
            results={tribe_id: [] for tribe_id in state.tribes},
        )

    def tribe(self, tribe_id: str) -> Optional[Tribe]:
        return self.state.tribes.get(tribe_id)

    def tribe_at(self, coords: str, *, exclude: Optional[str] = None) -> Optional[Tribe]:
        """First tribe other than ``exclude`` holding a garrison at ``coords``."""
        for tribe in self.state.tribes.values():
            if tribe.id != exclude and coords in tribe.garrisons:
                return tribe
        return None

    def effects(self, tribe: Tribe) -> TechEffects:
        return aggregate_effects(tribe, self.catalog)

    def find_path(self, start: str, end: str) -> Optional[PathResult]:
        return find_path(start, end, self.hexes)

    def narrate(
        self,
        tribe_id: str,
        action_type: Union[ActionType, str],
        text: str,
        *,
        result_id: str,
        action_data: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Append an engine-generated entry to a tribe's turn report."""
        if tribe_id not in self.results:
            return
        self.results[tribe_id].append(
            GameAction(id=result_id, action_type=action_type, action_data=dict(action_data or {}), result=text)
        )

    def annotate(self, tribe_id: str, action: GameAction, text: str) -> None:
        """Record the outcome of a submitted action."""
        self.results.setdefault(tribe_id, []).append(
            GameAction(
                id=action.id,
                action_type=action.action_type,
                action_data=dict(action.action_data),
                result=text,
            )
        )


__all__ = ["TurnContext"]
