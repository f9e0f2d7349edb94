"""Alliance and peace proposals, war declarations and truces."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from .config import EngineConfig
from .game_models import (
    DiplomaticProposal,
    DiplomaticRelation,
    DiplomaticStatus,
    GameState,
    ResourceBundle,
    Tribe,
)

logger = logging.getLogger(__name__)


class DiplomacyError(RuntimeError):
    """Raised when attempting to perform an illegal diplomatic action."""


def _pair(state: GameState, a_id: str, b_id: str) -> Tuple[Tribe, Tribe]:
    if a_id == b_id:
        raise DiplomacyError("A tribe cannot negotiate with itself")
    tribe_a = state.tribes.get(a_id)
    tribe_b = state.tribes.get(b_id)
    if tribe_a is None or tribe_b is None:
        raise DiplomacyError(f"Unknown tribe in pair ({a_id}, {b_id})")
    return tribe_a, tribe_b


def has_active_proposal(state: GameState, a_id: str, b_id: str) -> bool:
    """``True`` if either tribe already has a proposal out to the other."""
    return any(
        {p.from_tribe_id, p.to_tribe_id} == {a_id, b_id}
        for p in state.diplomatic_proposals
    )


def _new_proposal(
    state: GameState,
    sender: Tribe,
    receiver: Tribe,
    status: DiplomaticStatus,
    config: EngineConfig,
    reparations: Optional[ResourceBundle] = None,
) -> DiplomaticProposal:
    if has_active_proposal(state, sender.id, receiver.id):
        raise DiplomacyError(f"A proposal between {sender.id} and {receiver.id} is already pending")
    proposal = DiplomaticProposal(
        id=f"proposal-{state.turn}-{sender.id}-{receiver.id}",
        from_tribe_id=sender.id,
        to_tribe_id=receiver.id,
        status_change_to=status,
        expires_on_turn=state.turn + config.proposal_lifetime_turns,
        from_tribe_name=sender.display_name,
        reparations=reparations,
    )
    state.diplomatic_proposals.append(proposal)
    return proposal


def propose_alliance(
    state: GameState,
    from_id: str,
    to_id: str,
    config: Optional[EngineConfig] = None,
) -> DiplomaticProposal:
    sender, receiver = _pair(state, from_id, to_id)
    return _new_proposal(state, sender, receiver, DiplomaticStatus.ALLIANCE, config or EngineConfig())


def sue_for_peace(
    state: GameState,
    from_id: str,
    to_id: str,
    reparations: Optional[ResourceBundle] = None,
    config: Optional[EngineConfig] = None,
) -> DiplomaticProposal:
    """Offer peace, optionally paying ``reparations`` when accepted."""
    sender, receiver = _pair(state, from_id, to_id)
    reparations = reparations or ResourceBundle()
    if not sender.can_afford(reparations):
        raise DiplomacyError(f"{sender.display_name} cannot afford the offered reparations")
    return _new_proposal(state, sender, receiver, DiplomaticStatus.NEUTRAL, config or EngineConfig(), reparations)


def _pop_proposal(state: GameState, proposal_id: str) -> DiplomaticProposal:
    for index, proposal in enumerate(state.diplomatic_proposals):
        if proposal.id == proposal_id:
            return state.diplomatic_proposals.pop(index)
    raise DiplomacyError(f"Proposal {proposal_id} not found")


def accept_proposal(state: GameState, proposal_id: str, config: Optional[EngineConfig] = None) -> bool:
    """Apply the proposal's status change to both tribes.

    Peace with reparations re-checks that the sender can still pay. If not,
    the proposal is consumed without any exchange and ``False`` is returned.
    """
    config = config or EngineConfig()
    proposal = _pop_proposal(state, proposal_id)
    sender = state.tribes.get(proposal.from_tribe_id)
    receiver = state.tribes.get(proposal.to_tribe_id)
    if sender is None or receiver is None:
        logger.warning("proposal %s references a missing tribe", proposal_id)
        return False

    truce_until: Optional[int] = None
    reparations = proposal.reparations
    if proposal.status_change_to == DiplomaticStatus.NEUTRAL and reparations is not None:
        if not sender.can_afford(reparations):
            logger.info("proposal %s: reparations no longer affordable", proposal_id)
            return False
        sender.global_resources.food -= reparations.food
        receiver.global_resources.food += reparations.food
        sender.global_resources.scrap -= reparations.scrap
        receiver.global_resources.scrap += reparations.scrap
        moved = sender.take_weapons(reparations.weapons)
        receiver.home_garrison().weapons += moved
        truce_until = state.turn + config.truce_turns

    sender.diplomacy[receiver.id] = DiplomaticRelation(status=proposal.status_change_to, truce_until_turn=truce_until)
    receiver.diplomacy[sender.id] = DiplomaticRelation(status=proposal.status_change_to, truce_until_turn=truce_until)
    return True


def reject_proposal(state: GameState, proposal_id: str) -> None:
    _pop_proposal(state, proposal_id)


def declare_war(state: GameState, from_id: str, to_id: str) -> None:
    aggressor, target = _pair(state, from_id, to_id)
    relation = aggressor.diplomacy.get(target.id)
    if relation is not None and relation.truce_until_turn is not None and relation.truce_until_turn > state.turn:
        raise DiplomacyError(
            f"Truce with {target.display_name} holds until turn {relation.truce_until_turn}"
        )
    aggressor.diplomacy[target.id] = DiplomaticRelation(status=DiplomaticStatus.WAR)
    target.diplomacy[aggressor.id] = DiplomaticRelation(status=DiplomaticStatus.WAR)


def expire_proposals(state: GameState) -> Dict[str, List[Tuple[str, str]]]:
    """Drop proposals whose expiry turn has come.

    Returns {tribe id: [(proposal id, notice), ...]} for both parties.
    """
    notices: Dict[str, List[Tuple[str, str]]] = {}
    active: List[DiplomaticProposal] = []
    for proposal in state.diplomatic_proposals:
        if proposal.expires_on_turn > state.turn:
            active.append(proposal)
            continue
        kind = "alliance" if proposal.status_change_to == DiplomaticStatus.ALLIANCE else "peace"
        sender = state.tribes.get(proposal.from_tribe_id)
        receiver = state.tribes.get(proposal.to_tribe_id)
        if sender is not None:
            to_name = receiver.display_name if receiver else "an unknown tribe"
            notices.setdefault(sender.id, []).append((proposal.id, f"Your {kind} proposal to {to_name} has expired."))
        if receiver is not None:
            from_name = sender.display_name if sender else "an unknown tribe"
            notices.setdefault(receiver.id, []).append((proposal.id, f"The {kind} proposal from {from_name} has expired."))
    state.diplomatic_proposals = active
    return notices


__all__ = [
    "DiplomacyError",
    "accept_proposal",
    "declare_war",
    "expire_proposals",
    "has_active_proposal",
    "propose_alliance",
    "reject_proposal",
    "sue_for_peace",
]
