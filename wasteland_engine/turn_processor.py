"""Turn orchestration: advance the whole world by one turn.

Phase order is fixed and significant:

1. expire diplomatic proposals
2. settle trade caravans awaiting an answer
3. advance journeys and resolve arrivals
4. dispatch the actions of tribes that submitted their turn
5. research progress, passive income and upkeep for those tribes
6. record history, publish turn reports and increment the turn counter
"""
from __future__ import annotations

import copy
import logging
import random
from typing import Optional

from pydantic import ValidationError

from .actions import ActionRejected, DefendData, TravelData, parse_action_data
from .catalogs import Catalog, load_default_catalog
from .config import EngineConfig
from .context import TurnContext
from .diplomacy import expire_proposals
from .game_models import ActionType, GameAction, GameState, Tribe
from .journeys import advance_journeys, dispatch_travel_action, resolve_trade_responses
from .resolvers import resolve_stationary
from .scoring import build_history_record
from .technology import advance_research
from .upkeep import apply_passive_effects, apply_upkeep

logger = logging.getLogger(__name__)


def process_turn(
    state: GameState,
    *,
    catalog: Optional[Catalog] = None,
    config: Optional[EngineConfig] = None,
    rng: Optional[random.Random] = None,
) -> GameState:
    """Resolve one turn and return the resulting state.

    ``state`` itself is left untouched; all work happens on a deep copy.
    Action failures never raise: they end up as narratives in the owning
    tribe's ``last_turn_results``.
    """
    state = copy.deepcopy(state)
    ctx = TurnContext.build(
        state,
        catalog if catalog is not None else load_default_catalog(),
        config if config is not None else EngineConfig(),
        rng if rng is not None else random.Random(),
    )
    submitted = [tribe for tribe in state.tribes.values() if tribe.turn_submitted]
    logger.debug("turn %d: %d/%d tribes submitted", state.turn, len(submitted), len(state.tribes))

    _expire_diplomacy(ctx)
    ctx.defended = _defended_positions(submitted)
    resolve_trade_responses(ctx)
    advance_journeys(ctx)

    for tribe in submitted:
        for action in tribe.actions:
            _dispatch_action(ctx, tribe, action)

    for tribe in submitted:
        _end_of_turn(ctx, tribe)

    if state.history is not None:
        state.history.append(build_history_record(state))
    _finalize(ctx)
    return state


def _expire_diplomacy(ctx: TurnContext) -> None:
    for tribe_id, notices in expire_proposals(ctx.state).items():
        for proposal_id, text in notices:
            ctx.narrate(tribe_id, ActionType.TECHNOLOGY, text, result_id=f"diplomacy-expire-{proposal_id}")


def _defended_positions(tribes):
    positions = set()
    for tribe in tribes:
        for action in tribe.actions:
            if action.type_label != ActionType.DEFEND.value:
                continue
            try:
                data = parse_action_data(action.action_type, action.action_data)
            except ValidationError:
                continue  # reported when the action itself is dispatched
            if isinstance(data, DefendData):
                positions.add((tribe.id, data.start_location))
    return positions


def _dispatch_action(ctx: TurnContext, tribe: Tribe, action: GameAction) -> None:
    label = action.type_label
    try:
        data = parse_action_data(action.action_type, action.action_data)
    except ValidationError as exc:
        fields = sorted({".".join(str(p) for p in err["loc"][1:] or err["loc"]) for err in exc.errors()})
        ctx.annotate(tribe.id, action, f"Invalid parameters for {label}: {', '.join(fields)}.")
        return
    if data is None:
        ctx.annotate(tribe.id, action, f"Action '{label}' not yet implemented.")
        return

    try:
        if isinstance(data, TravelData):
            dispatch_travel_action(ctx, tribe, action, data)
            return
        text = resolve_stationary(
            tribe,
            data,
            catalog=ctx.catalog,
            rng=ctx.rng,
            max_morale=ctx.config.max_morale,
        )
    except ActionRejected as exc:
        logger.debug("%s: %s rejected: %s", tribe.id, label, exc)
        ctx.annotate(tribe.id, action, str(exc))
        return
    ctx.annotate(tribe.id, action, text or "")


def _end_of_turn(ctx: TurnContext, tribe: Tribe) -> None:
    turn = ctx.state.turn
    research = advance_research(tribe, ctx.catalog)
    if research:
        ctx.narrate(tribe.id, ActionType.TECHNOLOGY, research, result_id=f"tech-{turn}-{tribe.id}")

    for index, (kind, text) in enumerate(apply_passive_effects(tribe, ctx.effects(tribe), ctx.hexes, ctx.config)):
        ctx.narrate(tribe.id, kind, text, result_id=f"passive-{turn}-{tribe.id}-{index}")

    in_transit = sum(j.force.troops for j in ctx.state.journeys if j.owner_tribe_id == tribe.id)
    upkeep = apply_upkeep(tribe, in_transit, ctx.config)
    if upkeep:
        ctx.narrate(tribe.id, ActionType.UPKEEP, upkeep, result_id=f"upkeep-{turn}-{tribe.id}")


def _finalize(ctx: TurnContext) -> None:
    state = ctx.state
    for tribe in state.tribes.values():
        tribe.actions = []
        tribe.turn_submitted = False
        tribe.last_turn_results = ctx.results.get(tribe.id, [])
        tribe.journey_responses = []
    state.turn += 1
    logger.debug("turn advanced to %d", state.turn)


__all__ = ["process_turn"]
