"""Forces in transit: dispatch, per-turn advancement and arrival resolution.

A journey is created when a travel action is dispatched and lives in
``GameState.journeys`` until it resolves. Arrival handlers may hand back a
follow-up journey (the trip home, or a trade caravan now waiting for an
answer); whoever called the handler decides whether to resolve that
follow-up immediately (fast-track) or queue it for later turns.
"""
from __future__ import annotations

import logging
import math
from typing import Callable, Dict, List, Optional

from .actions import ActionRejected, ScavengeData, TradeData, TravelData
from .combat import resolve_battle
from .context import TurnContext
from .game_models import (
    ActionType,
    Force,
    GameAction,
    Journey,
    JourneyStatus,
    JourneyType,
    POI,
    POIType,
    ResourceBundle,
    TerrainType,
    TradeOffer,
    Tribe,
)
from .events import roll_travel_event
from .map.coordinates import hex_neighbors, hexes_in_range
from .pathing import terrain_movement_cost

logger = logging.getLogger(__name__)

SCRAP_RICH_POIS = (POIType.SCRAPYARD, POIType.FACTORY, POIType.CRATER, POIType.RUINS)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def merge_force(tribe: Tribe, coords: str, force: Force) -> None:
    garrison = tribe.garrison_at(coords, create=True)
    garrison.troops += force.troops
    garrison.weapons += force.weapons
    garrison.chiefs.extend(force.chiefs)


def reveal(ctx: TurnContext, tribe: Tribe, center: str, radius: int) -> int:
    """Add on-map hexes around ``center`` to the tribe's explored set."""
    before = len(tribe.explored_hexes)
    tribe.explored_hexes.update(c for c in hexes_in_range(center, radius) if c in ctx.hexes)
    return len(tribe.explored_hexes) - before


def _describe_bundle(bundle: ResourceBundle) -> str:
    parts = [f"{amount} {name}" for name, amount in (
        ("food", bundle.food), ("scrap", bundle.scrap), ("weapons", bundle.weapons)
    ) if amount > 0]
    return ", ".join(parts)


def _camp_site(ctx: TurnContext, tribe: Tribe, coords: str) -> Optional[str]:
    """``coords``, or failing that the first passable neighbour no other tribe holds."""
    for candidate in [coords] + hex_neighbors(coords):
        hx = ctx.hexes.get(candidate)
        if hx is None or math.isinf(terrain_movement_cost(hx.terrain)):
            continue
        if ctx.tribe_at(candidate, exclude=tribe.id) is None:
            return candidate
    return None


def _strand(ctx: TurnContext, tribe: Tribe, journey: Journey, force: Force, payload: ResourceBundle) -> None:
    """No way home: the force digs in where it stands, next to it if the hex is taken."""
    coords = _camp_site(ctx, tribe, journey.destination)
    logger.warning("journey %s of %s stranded at %s (camp: %s)", journey.id, tribe.id, journey.destination, coords)
    if coords is None:
        ctx.narrate(
            tribe.id,
            journey.type,
            f"The party at {journey.destination} is stranded and cannot find a path home! "
            f"With nowhere to make camp, they scattered into the wastes.",
            result_id=f"return-err-{journey.id}",
        )
        return
    merge_force(tribe, coords, force)
    tribe.garrisons[coords].weapons += payload.weapons
    tribe.global_resources.food += payload.food
    tribe.global_resources.scrap += payload.scrap
    ctx.narrate(
        tribe.id,
        journey.type,
        f"The party at {journey.destination} is stranded and cannot find a path home! "
        f"They have dug in and now hold {coords}.",
        result_id=f"return-err-{journey.id}",
    )


def build_return_journey(
    ctx: TurnContext,
    journey: Journey,
    *,
    force: Force,
    payload: Optional[ResourceBundle] = None,
) -> Optional[Journey]:
    """Send ``force`` from the journey's destination back to its origin.

    Returns ``None`` when no path exists; the force is then stranded.
    """
    tribe = ctx.tribe(journey.owner_tribe_id)
    payload = payload or ResourceBundle()
    if tribe is None:
        return None
    route = ctx.find_path(journey.destination, journey.origin)
    if route is None:
        _strand(ctx, tribe, journey, force, payload)
        return None
    return Journey(
        id=f"return-{journey.id}",
        owner_tribe_id=journey.owner_tribe_id,
        type=JourneyType.RETURN,
        status=JourneyStatus.RETURNING,
        origin=journey.destination,
        destination=journey.origin,
        path=list(route.path),
        current_location=route.path[0],
        force=force,
        payload=payload,
        arrival_turn=ctx.effects(tribe).travel_turns(route.cost),
    )


def _enemy_at(ctx: TurnContext, tribe: Tribe, coords: str) -> Optional[Tribe]:
    for other in ctx.state.tribes.values():
        if other.id != tribe.id and coords in other.garrisons and tribe.is_at_war_with(other.id):
            return other
    return None


# ---------------------------------------------------------------------------
# Arrival handlers
# ---------------------------------------------------------------------------


def _occupy(ctx: TurnContext, tribe: Tribe, journey: Journey) -> None:
    merge_force(tribe, journey.destination, journey.force)
    ctx.narrate(
        tribe.id,
        JourneyType.MOVE,
        f"A force of {journey.force.troops} troops and {len(journey.force.chiefs)} chiefs has arrived at "
        f"garrison {journey.destination}, bolstering your presence in the area.",
        result_id=f"arrival-{journey.id}",
    )
    radius = ctx.config.visibility_range + ctx.effects(tribe).visibility_bonus
    reveal(ctx, tribe, journey.destination, radius)


def _battle(ctx: TurnContext, tribe: Tribe, enemy: Tribe, journey: Journey) -> Optional[Journey]:
    coords = journey.destination
    hx = ctx.hexes.get(coords)
    terrain = hx.terrain if hx is not None else None
    garrison = enemy.garrisons[coords]

    attack_bonus = ctx.effects(tribe).attack_bonus_on(terrain)
    defense_bonus = ctx.effects(enemy).defense_bonus_on(terrain)
    if (enemy.id, coords) in ctx.defended:
        defense_bonus += ctx.config.defend_bonus
    if hx is not None and hx.poi is not None and hx.poi.type == POIType.OUTPOST:
        defense_bonus += ctx.config.fortification_bonus

    report = resolve_battle(journey.force, garrison, attack_bonus, defense_bonus)
    logger.debug(
        "battle at %s: %s (%.2f) vs %s (%.2f) -> attacker_won=%s",
        coords, tribe.id, report.attacker_strength, enemy.id, report.defender_strength, report.attacker_won,
    )
    opening = f"Your force arrived at {coords} and engaged the enemy tribe, {enemy.display_name}!"

    if report.attacker_won:
        del enemy.garrisons[coords]
        survivors = Force(
            troops=journey.force.troops - report.attacker_losses,
            weapons=journey.force.weapons + report.captured_weapons,
            chiefs=list(journey.force.chiefs),
        )
        merge_force(tribe, coords, survivors)
        radius = ctx.config.visibility_range + ctx.effects(tribe).visibility_bonus
        reveal(ctx, tribe, coords, radius)
        ctx.narrate(
            tribe.id,
            JourneyType.ATTACK,
            f"{opening} Victory! The garrison was overrun at the cost of {report.attacker_losses} troops, "
            f"and {report.captured_weapons} weapons were captured.",
            result_id=f"combat-arrival-{journey.id}",
        )
        ctx.narrate(
            enemy.id,
            JourneyType.ATTACK,
            f"Your garrison at {coords} was overrun by {tribe.display_name}! "
            f"All {report.defender_losses} defenders were lost.",
            result_id=f"combat-defend-{journey.id}",
        )
        return None

    garrison.troops -= report.defender_losses
    survivors = Force(
        troops=journey.force.troops - report.attacker_losses,
        weapons=journey.force.weapons,
        chiefs=list(journey.force.chiefs),
    )
    ctx.narrate(
        tribe.id,
        JourneyType.ATTACK,
        f"{opening} The assault was repelled with {report.attacker_losses} troops lost; "
        f"the survivors are falling back.",
        result_id=f"combat-arrival-{journey.id}",
    )
    ctx.narrate(
        enemy.id,
        JourneyType.ATTACK,
        f"Your garrison at {coords} held against an attack by {tribe.display_name}, "
        f"losing {report.defender_losses} troops.",
        result_id=f"combat-defend-{journey.id}",
    )
    return build_return_journey(ctx, journey, force=survivors)


def _arrive_move(ctx: TurnContext, tribe: Tribe, journey: Journey) -> Optional[Journey]:
    enemy = _enemy_at(ctx, tribe, journey.destination)
    if enemy is not None:
        return _battle(ctx, tribe, enemy, journey)
    _occupy(ctx, tribe, journey)
    return None


def _arrive_attack(ctx: TurnContext, tribe: Tribe, journey: Journey) -> Optional[Journey]:
    enemy = _enemy_at(ctx, tribe, journey.destination)
    if enemy is not None:
        return _battle(ctx, tribe, enemy, journey)
    ctx.narrate(
        tribe.id,
        JourneyType.ATTACK,
        f"Attacking force arrived at {journey.destination} but found no enemy to engage.",
        result_id=f"arrival-attack-{journey.id}",
    )
    _occupy(ctx, tribe, journey)
    return None


def _arrive_scout(ctx: TurnContext, tribe: Tribe, journey: Journey) -> Optional[Journey]:
    revealed = reveal(ctx, tribe, journey.destination, ctx.config.scout_range)
    if revealed:
        text = f"Scouts surveyed {journey.destination}, revealing the surrounding area."
    else:
        text = f"Scouts surveyed {journey.destination}, but found no new territory."
    ctx.narrate(tribe.id, JourneyType.SCOUT, text, result_id=f"arrival-{journey.id}")
    return build_return_journey(ctx, journey, force=journey.force)


def _arrive_scavenge(ctx: TurnContext, tribe: Tribe, journey: Journey) -> Optional[Journey]:
    hx = ctx.hexes.get(journey.destination)
    if hx is None:
        ctx.narrate(
            tribe.id,
            JourneyType.SCAVENGE,
            f"Scavenge failed: Target location {journey.destination} invalid.",
            result_id=f"scavenge-err-{journey.id}",
        )
        return build_return_journey(ctx, journey, force=journey.force)

    scavengers = journey.force.troops
    poi_type = hx.poi.type if hx.poi is not None else None
    survivors = scavengers
    hazards = ""
    if hx.terrain == TerrainType.RADIATION:
        attrition = math.ceil(scavengers * 0.1)
        survivors -= attrition
        hazards += f"Hazardous environment caused {attrition} casualties. "
    if poi_type == POIType.BANDIT_CAMP:
        attrition = math.ceil(scavengers * 0.25)
        survivors -= attrition
        hazards += f"Encountered fierce resistance at the Bandit Camp! Lost {attrition} troops. "

    if survivors <= 0:
        ctx.narrate(
            tribe.id,
            JourneyType.SCAVENGE,
            hazards + "The scavenging party was wiped out.",
            result_id=f"scavenge-fail-{journey.id}",
        )
        return None

    resource = journey.scavenge_type
    bonus = ctx.effects(tribe).scavenge_multiplier(resource)
    gathered = ResourceBundle()
    narrative = ""

    if poi_type == POIType.VAULT:
        gathered.scrap = math.floor(100 + ctx.rng.random() * 100)
        gathered.weapons = math.floor(20 + ctx.rng.random() * 20)
        narrative = (
            f"The party breached the ancient Vault, uncovering a massive cache of "
            f"{gathered.scrap} scrap and {gathered.weapons} weapons! "
        )
        if ctx.rng.random() < 0.25:
            unlearned = [t for t in ctx.catalog.root_technologies() if t.id not in tribe.completed_techs]
            if unlearned:
                learned = ctx.rng.choice(unlearned)
                tribe.completed_techs.add(learned.id)
                narrative += f'Inside, they found data slates containing the secrets of "{learned.name}"!'
        hx.poi = POI(id=hx.poi.id, type=POIType.RUINS, difficulty=3, rarity="Common")
    elif resource == "Food":
        if poi_type == POIType.FOOD_SOURCE:
            multiplier = 3.0
        elif hx.terrain in (TerrainType.FOREST, TerrainType.SWAMP):
            multiplier = 1.5
        else:
            multiplier = 0.5
        gathered.food = math.floor(1.5 * survivors * multiplier * bonus)
    elif resource == "Scrap":
        multiplier = 3.5 if poi_type in SCRAP_RICH_POIS else 1.2
        gathered.scrap = math.floor(1.0 * survivors * multiplier * bonus)
    elif resource == "Weapons" and poi_type == POIType.WEAPONS_CACHE:
        gathered.weapons = math.floor((1 + ctx.rng.random() * (survivors / 4)) * bonus)
        if gathered.weapons > 0:
            hx.poi = None

    if not narrative:
        found = _describe_bundle(gathered)
        narrative = f"The party gathered {found}." if found else "Found nothing of value."
    ctx.narrate(tribe.id, JourneyType.SCAVENGE, hazards + narrative, result_id=f"scavenge-{journey.id}")

    party = Force(troops=survivors, weapons=journey.force.weapons, chiefs=list(journey.force.chiefs))
    return build_return_journey(ctx, journey, force=party, payload=gathered)


def _arrive_outpost(ctx: TurnContext, tribe: Tribe, journey: Journey) -> Optional[Journey]:
    cost = ctx.config.outpost_scrap_cost
    if tribe.global_resources.scrap < cost:
        merge_force(tribe, journey.origin, journey.force)
        ctx.narrate(
            tribe.id,
            JourneyType.BUILD_OUTPOST,
            f"Failed to build outpost at {journey.destination}: Not enough scrap. Builders returning home.",
            result_id=f"arrival-fail-{journey.id}",
        )
        return None

    tribe.global_resources.scrap -= cost
    merge_force(tribe, journey.destination, journey.force)
    hx = ctx.hexes.get(journey.destination)
    if hx is not None and hx.poi is None:
        hx.poi = POI(id=f"poi-outpost-{journey.destination}", type=POIType.OUTPOST, difficulty=1, rarity="Common")
    radius = ctx.config.visibility_range + ctx.effects(tribe).visibility_bonus
    reveal(ctx, tribe, journey.destination, radius)
    ctx.narrate(
        tribe.id,
        JourneyType.BUILD_OUTPOST,
        f"Successfully established a new outpost at {journey.destination}.",
        result_id=f"arrival-{journey.id}",
    )
    return None


def _arrive_trade(ctx: TurnContext, tribe: Tribe, journey: Journey) -> Optional[Journey]:
    journey.status = JourneyStatus.AWAITING_RESPONSE
    journey.response_deadline = ctx.state.turn + ctx.config.trade_response_turns
    target = ctx.tribe_at(journey.destination, exclude=tribe.id)
    if target is not None:
        ctx.narrate(
            tribe.id,
            JourneyType.TRADE,
            f"Your trade caravan has arrived at {target.display_name}'s garrison and is awaiting a response.",
            result_id=f"arrival-{journey.id}",
        )
        from_name = journey.trade_offer.from_tribe_name if journey.trade_offer else tribe.display_name
        ctx.narrate(
            target.id,
            ActionType.RESPOND_TO_TRADE,
            f"A trade caravan from {from_name} has arrived at {journey.destination} with an offer.",
            result_id=f"offer-{journey.id}",
        )
    return journey


def _arrive_return(ctx: TurnContext, tribe: Tribe, journey: Journey) -> Optional[Journey]:
    merge_force(tribe, journey.destination, journey.force)
    tribe.global_resources.food += journey.payload.food
    tribe.global_resources.scrap += journey.payload.scrap
    tribe.garrisons[journey.destination].weapons += journey.payload.weapons
    found = _describe_bundle(journey.payload)
    outcome = f"successfully brought back {found}" if found else "returned empty-handed"
    ctx.narrate(
        tribe.id,
        JourneyType.RETURN,
        f"A party has returned to {journey.destination} from their mission. They {outcome}.",
        result_id=f"arrival-{journey.id}",
    )
    return None


ArrivalHandler = Callable[[TurnContext, Tribe, Journey], Optional[Journey]]

ARRIVAL_HANDLERS: Dict[JourneyType, ArrivalHandler] = {
    JourneyType.MOVE: _arrive_move,
    JourneyType.ATTACK: _arrive_attack,
    JourneyType.SCOUT: _arrive_scout,
    JourneyType.SCAVENGE: _arrive_scavenge,
    JourneyType.BUILD_OUTPOST: _arrive_outpost,
    JourneyType.TRADE: _arrive_trade,
    JourneyType.RETURN: _arrive_return,
}


def resolve_arrival(ctx: TurnContext, journey: Journey) -> Optional[Journey]:
    """Apply the arrival rule for the journey's type; return any follow-up journey."""
    tribe = ctx.tribe(journey.owner_tribe_id)
    if tribe is None:
        logger.warning("dropping journey %s: owner %s no longer exists", journey.id, journey.owner_tribe_id)
        return None
    handler = ARRIVAL_HANDLERS.get(journey.type)
    if handler is None:
        logger.warning("journey %s has unknown type %r; returning force home", journey.id, journey.type)
        merge_force(tribe, journey.origin, journey.force)
        return None
    logger.debug("journey %s (%s) arrived at %s", journey.id, journey.type, journey.destination)
    return handler(ctx, tribe, journey)


# ---------------------------------------------------------------------------
# Phases
# ---------------------------------------------------------------------------


def resolve_trade_responses(ctx: TurnContext) -> None:
    """Settle every caravan that is waiting on an answer."""
    state = ctx.state
    waiting: List[Journey] = []
    returning: List[Journey] = []

    for journey in state.journeys:
        if journey.status != JourneyStatus.AWAITING_RESPONSE:
            waiting.append(journey)
            continue

        owner = ctx.tribe(journey.owner_tribe_id)
        target = ctx.tribe_at(journey.destination, exclude=journey.owner_tribe_id)
        if target is None:
            logger.warning("trade %s: no garrison left at %s", journey.id, journey.destination)
            if owner is not None:
                ctx.narrate(
                    owner.id,
                    JourneyType.TRADE,
                    f"The destination garrison at {journey.destination} no longer exists. Your caravan is returning.",
                    result_id=f"trade-fail-{journey.id}",
                )
            follow_up = build_return_journey(ctx, journey, force=journey.force, payload=journey.payload)
            if follow_up is not None:
                returning.append(follow_up)
            continue

        response = next(
            (r.response for r in target.journey_responses if r.journey_id == journey.id),
            None,
        )
        deadline = journey.response_deadline
        expired = response not in ("accept", "reject") and deadline is not None and state.turn >= deadline
        if response not in ("accept", "reject") and not expired:
            waiting.append(journey)
            continue
        if owner is None:
            logger.warning("trade %s: originating tribe %s is gone", journey.id, journey.owner_tribe_id)
            continue

        payload = journey.payload
        if expired:
            owner_text = f"Your trade offer to {target.display_name} expired. Your caravan is returning."
            target_text = f"The trade offer from {owner.display_name} has expired."
        elif response == "reject":
            owner_text = f"Your trade offer to {target.display_name} was rejected. Your caravan is returning."
            target_text = f"You rejected the trade offer from {owner.display_name}."
        else:
            request = journey.trade_offer.request if journey.trade_offer else ResourceBundle()
            if target.can_afford(request):
                target.global_resources.food -= request.food
                target.global_resources.scrap -= request.scrap
                target.take_weapons(request.weapons)
                target.global_resources.food += journey.payload.food
                target.global_resources.scrap += journey.payload.scrap
                target.garrisons[journey.destination].weapons += journey.payload.weapons
                payload = ResourceBundle(food=request.food, scrap=request.scrap, weapons=request.weapons)
                owner_text = (
                    f"Your trade with {target.display_name} was accepted. "
                    f"The caravan is returning with the requested goods."
                )
                target_text = f"You accepted the trade from {owner.display_name}."
            else:
                owner_text = (
                    f"Your trade with {target.display_name} was accepted, but they couldn't afford it. "
                    f"The caravan is returning with the original goods."
                )
                target_text = "You accepted the trade, but lacked the resources to fulfill it. The deal was cancelled."

        ctx.narrate(owner.id, JourneyType.TRADE, owner_text, result_id=f"trade-resp-{journey.id}")
        ctx.narrate(target.id, ActionType.RESPOND_TO_TRADE, target_text, result_id=f"trade-resp-{journey.id}")
        follow_up = build_return_journey(ctx, journey, force=journey.force, payload=payload)
        if follow_up is not None:
            returning.append(follow_up)

    state.journeys = waiting + returning


def advance_journeys(ctx: TurnContext) -> None:
    """Move every travelling journey one step and resolve the ones that arrive."""
    state = ctx.state
    staying: List[Journey] = []
    arrived: List[Journey] = []

    for journey in state.journeys:
        if journey.status == JourneyStatus.AWAITING_RESPONSE:
            staying.append(journey)
            continue
        if journey.arrival_turn > 0:
            event = roll_travel_event(journey.force, ctx.rng, ctx.config.event_chance)
            if event:
                ctx.narrate(
                    journey.owner_tribe_id,
                    journey.type,
                    f"While traveling to {journey.destination}: {event}",
                    result_id=f"event-{journey.id}-{state.turn}",
                    action_data={"location": journey.current_location},
                )
        journey.arrival_turn -= 1
        if len(journey.path) > 1:
            journey.path.pop(0)
            journey.current_location = journey.path[0]
        (arrived if journey.arrival_turn <= 0 else staying).append(journey)

    state.journeys = staying
    for journey in arrived:
        follow_up = resolve_arrival(ctx, journey)
        if follow_up is not None:
            state.journeys.append(follow_up)


def dispatch_travel_action(ctx: TurnContext, tribe: Tribe, action: GameAction, data: TravelData) -> None:
    """Reserve the force and either resolve the trip now or queue a journey.

    Raises :class:`ActionRejected` without touching the tribe when the action
    cannot be carried out.
    """
    start, destination = data.start_location, data.destination
    garrison = tribe.garrisons.get(start)
    if garrison is None or not destination:
        raise ActionRejected("Invalid start or destination for journey.")
    available = garrison.troops - tribe.reserved_troops(start)
    if data.troops > available:
        raise ActionRejected(f"Not enough troops at {start}: {max(available, 0)} available.")
    if data.weapons > garrison.weapons:
        raise ActionRejected(f"Not enough weapons at {start}: {garrison.weapons} available.")

    offer = data.offer() if isinstance(data, TradeData) else ResourceBundle()
    if (
        offer.food > tribe.global_resources.food
        or offer.scrap > tribe.global_resources.scrap
        or offer.weapons > garrison.weapons - data.weapons
    ):
        raise ActionRejected("Not enough goods to make this trade offer.")

    route = ctx.find_path(start, destination)
    if route is None:
        raise ActionRejected(f"Could not find a path to {destination}.")

    chiefs = [chief for chief in garrison.chiefs if chief.name in data.chiefs_to_move]
    garrison.troops -= data.troops
    garrison.weapons -= data.weapons + offer.weapons
    garrison.chiefs = [chief for chief in garrison.chiefs if chief.name not in data.chiefs_to_move]
    tribe.global_resources.food -= offer.food
    tribe.global_resources.scrap -= offer.scrap

    journey_type = JourneyType(action.type_label)
    arrival = ctx.effects(tribe).travel_turns(route.cost)
    journey = Journey(
        id=f"journey-{action.id}",
        owner_tribe_id=tribe.id,
        type=journey_type,
        status=JourneyStatus.EN_ROUTE,
        origin=start,
        destination=destination,
        path=list(route.path),
        current_location=route.path[0],
        force=Force(troops=data.troops, weapons=data.weapons, chiefs=chiefs),
        payload=offer,
        arrival_turn=arrival,
        scavenge_type=data.resource_type if isinstance(data, ScavengeData) else None,
        trade_offer=(
            TradeOffer(request=data.request(), from_tribe_name=tribe.display_name)
            if isinstance(data, TradeData)
            else None
        ),
    )

    threshold = ctx.config.fast_track_threshold
    if arrival <= threshold and journey_type not in (JourneyType.ATTACK, JourneyType.TRADE):
        logger.debug("fast-tracking %s for %s", journey.id, tribe.id)
        ctx.annotate(
            tribe.id,
            action,
            f"Your {action.type_label} party set out from {start} and reached {destination} within the turn.",
        )
        follow_up = resolve_arrival(ctx, journey)
        while (
            follow_up is not None
            and follow_up.status != JourneyStatus.AWAITING_RESPONSE
            and follow_up.arrival_turn <= threshold
        ):
            follow_up = resolve_arrival(ctx, follow_up)
        if follow_up is not None:
            ctx.state.journeys.append(follow_up)
        return

    if arrival > 1 and len(journey.path) > 1:
        journey.path.pop(0)
        journey.current_location = journey.path[0]
    ctx.state.journeys.append(journey)
    ctx.annotate(
        tribe.id,
        action,
        f"You dispatched a {action.type_label} party from {start} towards {destination}. "
        f"They are expected to arrive in {arrival} turn(s).",
    )


__all__ = [
    "ARRIVAL_HANDLERS",
    "advance_journeys",
    "build_return_journey",
    "dispatch_travel_action",
    "merge_force",
    "resolve_arrival",
    "resolve_trade_responses",
    "reveal",
]
