"""Journey dispatch, advancement and arrival rules."""
import random

import pytest

from wasteland_engine.actions import ActionRejected, parse_action_data
from wasteland_engine.catalogs import load_default_catalog
from wasteland_engine.config import EngineConfig
from wasteland_engine.context import TurnContext
from wasteland_engine.game_models import (
    ActionType,
    Chief,
    DiplomaticRelation,
    DiplomaticStatus,
    Force,
    GameAction,
    GameState,
    Garrison,
    GlobalResources,
    HexData,
    Journey,
    JourneyResponse,
    JourneyStatus,
    JourneyType,
    POI,
    POIType,
    ResearchProject,
    ResourceBundle,
    TerrainType,
    Tribe,
)
from wasteland_engine.journeys import (
    advance_journeys,
    dispatch_travel_action,
    resolve_trade_responses,
)
from wasteland_engine.map.coordinates import format_hex_coords

HOME = "050.050"
NEXT = "051.050"
FAR = "056.050"


class ScriptedRandom(random.Random):
    def __init__(self, *values: float):
        super().__init__(0)
        self.values = list(values)

    def random(self) -> float:
        return self.values.pop(0)


def _line_map(length: int = 8, **terrain):
    hexes = []
    for q in range(length):
        coords = format_hex_coords(q, 0)
        hexes.append(HexData(q=q, r=0, terrain=terrain.get(coords, TerrainType.PLAINS)))
    return hexes


def _tribe(tribe_id: str, location: str = HOME, troops: int = 10, weapons: int = 0, **resources) -> Tribe:
    return Tribe(
        id=tribe_id,
        tribe_name=f"Tribe {tribe_id.upper()}",
        global_resources=GlobalResources(**resources),
        garrisons={location: Garrison(troops=troops, weapons=weapons)},
        location=location,
    )


def _ctx(*tribes: Tribe, hexes=None, rng=None, **config) -> TurnContext:
    config.setdefault("event_chance", 0.0)
    state = GameState(map_data=hexes or _line_map(), tribes={t.id: t for t in tribes})
    return TurnContext.build(state, load_default_catalog(), EngineConfig(**config), rng or random.Random(0))


def _dispatch(ctx: TurnContext, tribe: Tribe, action_type: str, action_id: str = "act-1", **data):
    action = GameAction(id=action_id, action_type=action_type, action_data=data)
    dispatch_travel_action(ctx, tribe, action, parse_action_data(action.action_type, action.action_data))
    return action


def _texts(ctx: TurnContext, tribe_id: str):
    return [entry.result for entry in ctx.results[tribe_id]]


def _war(a: Tribe, b: Tribe) -> None:
    a.diplomacy[b.id] = DiplomaticRelation(status=DiplomaticStatus.WAR)
    b.diplomacy[a.id] = DiplomaticRelation(status=DiplomaticStatus.WAR)


class TestDispatch:
    def test_long_trip_is_queued_and_debited(self):
        a = _tribe("a", troops=10, weapons=5)
        ctx = _ctx(a)
        _dispatch(ctx, a, "Move", start_location=HOME, finish_location=FAR, troops=4, weapons=2)

        assert a.garrisons[HOME] == Garrison(troops=6, weapons=3)
        (journey,) = ctx.state.journeys
        assert journey.type == JourneyType.MOVE
        assert journey.status == JourneyStatus.EN_ROUTE
        assert journey.arrival_turn == 2
        assert journey.force == Force(troops=4, weapons=2)
        # already one hex along the route
        assert journey.path[0] == NEXT and journey.current_location == NEXT
        assert journey.path[-1] == FAR
        assert "expected to arrive in 2 turn(s)" in _texts(ctx, "a")[0]

    def test_named_chiefs_travel_with_the_force(self):
        a = _tribe("a")
        a.garrisons[HOME].chiefs = [Chief(name="Mad Max"), Chief(name="Furiosa")]
        ctx = _ctx(a)
        _dispatch(ctx, a, "Move", start_location=HOME, finish_location=FAR, troops=2, chiefsToMove=["Furiosa"])
        assert [c.name for c in a.garrisons[HOME].chiefs] == ["Mad Max"]
        assert [c.name for c in ctx.state.journeys[0].force.chiefs] == ["Furiosa"]

    def test_not_enough_troops(self):
        a = _tribe("a", troops=3)
        ctx = _ctx(a)
        with pytest.raises(ActionRejected, match="Not enough troops"):
            _dispatch(ctx, a, "Move", start_location=HOME, finish_location=FAR, troops=5)
        assert a.garrisons[HOME].troops == 3
        assert ctx.state.journeys == []

    def test_research_troops_are_reserved(self):
        a = _tribe("a", troops=10)
        a.current_research = ResearchProject(tech_id="basic-farming", assigned_troops=8, location=HOME)
        ctx = _ctx(a)
        with pytest.raises(ActionRejected, match="2 available"):
            _dispatch(ctx, a, "Move", start_location=HOME, finish_location=FAR, troops=3)

    def test_no_path(self):
        a = _tribe("a")
        ctx = _ctx(a)
        with pytest.raises(ActionRejected, match="Could not find a path"):
            _dispatch(ctx, a, "Move", start_location=HOME, finish_location="070.070", troops=3)
        assert a.garrisons[HOME].troops == 10

    def test_missing_origin_garrison(self):
        a = _tribe("a")
        ctx = _ctx(a)
        with pytest.raises(ActionRejected, match="Invalid start or destination"):
            _dispatch(ctx, a, "Move", start_location=NEXT, finish_location=FAR, troops=1)


class TestFastTrack:
    def test_forest_scavenge_example(self):
        hexes = _line_map(**{NEXT: TerrainType.FOREST})
        a = _tribe("a", troops=10, food=0)
        ctx = _ctx(a, hexes=hexes)
        _dispatch(ctx, a, "Scavenge", start_location=HOME, target_location=NEXT, troops=10, resource_type="Food")

        assert ctx.state.journeys == []
        assert a.garrisons[HOME].troops == 10
        assert a.global_resources.food == 22
        texts = _texts(ctx, "a")
        assert texts[0].endswith("within the turn.")
        assert "gathered 22 food" in texts[1]
        assert "successfully brought back 22 food" in texts[2]

    def test_equivalent_to_queued_journeys(self):
        hexes = _line_map(**{NEXT: TerrainType.FOREST})

        fast_tribe = _tribe("a", troops=10, food=5)
        fast = _ctx(fast_tribe, hexes=hexes)
        _dispatch(fast, fast_tribe, "Scavenge", start_location=HOME, target_location=NEXT, troops=6, resource_type="Food")

        slow_tribe = _tribe("a", troops=10, food=5)
        slow = _ctx(slow_tribe, hexes=_line_map(**{NEXT: TerrainType.FOREST}), fast_track_threshold=0)
        _dispatch(slow, slow_tribe, "Scavenge", start_location=HOME, target_location=NEXT, troops=6, resource_type="Food")
        assert len(slow.state.journeys) == 1
        advance_journeys(slow)
        assert slow.state.journeys[0].type == JourneyType.RETURN
        advance_journeys(slow)
        assert slow.state.journeys == []

        assert slow_tribe.garrisons == fast_tribe.garrisons
        assert slow_tribe.global_resources == fast_tribe.global_resources

    def test_attack_is_never_fast_tracked(self):
        a = _tribe("a")
        ctx = _ctx(a)
        _dispatch(ctx, a, "Attack", start_location=HOME, target_location=NEXT, troops=5)
        (journey,) = ctx.state.journeys
        assert journey.arrival_turn == 1
        assert journey.path == [HOME, NEXT]


class TestAdvance:
    def test_move_conserves_troops(self):
        a = _tribe("a", troops=10)
        ctx = _ctx(a)
        _dispatch(ctx, a, "Move", start_location=HOME, finish_location=FAR, troops=4)
        assert a.garrisons[HOME].troops == 6

        advance_journeys(ctx)
        assert ctx.state.journeys[0].arrival_turn == 1
        assert FAR not in a.garrisons
        advance_journeys(ctx)
        assert ctx.state.journeys == []
        assert a.garrisons[FAR].troops == 4
        assert a.total_troops() == 10
        # visibility range 2 around the new garrison, clipped to the map
        assert {"054.050", "055.050", "056.050", "057.050"} <= a.explored_hexes

    def test_awaiting_trade_is_not_advanced(self):
        a = _tribe("a")
        ctx = _ctx(a)
        journey = Journey(
            id="j1", owner_tribe_id="a", type=JourneyType.TRADE, origin=HOME, destination=NEXT,
            path=[NEXT], current_location=NEXT, arrival_turn=0, status=JourneyStatus.AWAITING_RESPONSE,
        )
        ctx.state.journeys.append(journey)
        advance_journeys(ctx)
        assert ctx.state.journeys == [journey]
        assert journey.arrival_turn == 0

    def test_travel_events_narrated(self):
        a = _tribe("a", troops=10)
        ctx = _ctx(a, event_chance=1.0, rng=ScriptedRandom(0.0, 0.0, 0.0))
        ctx.state.journeys.append(
            Journey(
                id="j1", owner_tribe_id="a", type=JourneyType.MOVE, origin=HOME, destination=FAR,
                path=[NEXT, "052.050"], current_location=NEXT, force=Force(troops=10), arrival_turn=2,
            )
        )
        advance_journeys(ctx)
        journey = ctx.state.journeys[0]
        assert journey.force.troops == 9
        assert journey.current_location == "052.050"
        assert _texts(ctx, "a") == [
            f"While traveling to {FAR}: The group was ambushed by bandits! They fought them off but lost 1 troops."
        ]


class TestArrivals:
    def test_scout_reveals_and_returns(self):
        a = _tribe("a", troops=5)
        ctx = _ctx(a)
        _dispatch(ctx, a, "Scout", start_location=HOME, target_location=NEXT, troops=2)
        assert {HOME, NEXT, "052.050"} <= a.explored_hexes
        assert a.garrisons[HOME].troops == 5
        assert NEXT not in a.garrisons

    def test_scavenge_radiation_attrition(self):
        hexes = _line_map(**{NEXT: TerrainType.RADIATION})
        a = _tribe("a", troops=10)
        ctx = _ctx(a, hexes=hexes)
        _dispatch(ctx, a, "Scavenge", start_location=HOME, target_location=NEXT, troops=10, resource_type="Scrap")
        assert a.garrisons[HOME].troops == 9
        # floor(9 * 1.2)
        assert a.global_resources.scrap == 10

    def test_scavenge_bandit_camp_wipes_out_small_party(self):
        hexes = _line_map()
        hexes[1].poi = POI(id="p1", type=POIType.BANDIT_CAMP)
        a = _tribe("a", troops=10)
        ctx = _ctx(a, hexes=hexes)
        _dispatch(ctx, a, "Scavenge", start_location=HOME, target_location=NEXT, troops=1, resource_type="Scrap")
        assert a.garrisons[HOME].troops == 9
        assert "wiped out" in _texts(ctx, "a")[1]

    def test_scavenge_weapons_cache_is_consumed(self):
        hexes = _line_map()
        hexes[1].poi = POI(id="p1", type=POIType.WEAPONS_CACHE)
        a = _tribe("a", troops=8)
        ctx = _ctx(a, hexes=hexes, rng=ScriptedRandom(0.5))
        _dispatch(ctx, a, "Scavenge", start_location=HOME, target_location=NEXT, troops=8, resource_type="Weapons")
        # floor(1 + 0.5 * 8/4)
        assert a.garrisons[HOME].weapons == 2
        assert hexes[1].poi is None

    def test_weapons_only_at_cache(self):
        a = _tribe("a", troops=8)
        ctx = _ctx(a)
        _dispatch(ctx, a, "Scavenge", start_location=HOME, target_location=NEXT, troops=8, resource_type="Weapons")
        assert a.garrisons[HOME].weapons == 0
        assert "Found nothing of value." in _texts(ctx, "a")[1]

    def test_scavenge_vault(self):
        hexes = _line_map()
        hexes[1].poi = POI(id="vault-1", type=POIType.VAULT)
        a = _tribe("a", troops=5)
        ctx = _ctx(a, hexes=hexes, rng=ScriptedRandom(0.5, 0.5, 0.9))
        _dispatch(ctx, a, "Scavenge", start_location=HOME, target_location=NEXT, troops=5, resource_type="Scrap")
        assert a.global_resources.scrap == 150
        assert a.garrisons[HOME].weapons == 30
        assert hexes[1].poi.type == POIType.RUINS
        assert a.completed_techs == set()

    def test_scavenge_uses_tech_bonus(self):
        hexes = _line_map()
        hexes[1].poi = POI(id="p1", type=POIType.SCRAPYARD)
        a = _tribe("a", troops=10)
        a.completed_techs = {"scavenging-basics"}
        ctx = _ctx(a, hexes=hexes)
        _dispatch(ctx, a, "Scavenge", start_location=HOME, target_location=NEXT, troops=10, resource_type="Scrap")
        # floor(10 * 3.5 * 1.1)
        assert a.global_resources.scrap == 38

    def test_build_outpost(self):
        hexes = _line_map()
        a = _tribe("a", troops=10, scrap=30)
        ctx = _ctx(a, hexes=hexes)
        _dispatch(ctx, a, "Build Outpost", start_location=HOME, target_location=NEXT, troops=3)
        assert a.global_resources.scrap == 5
        assert a.garrisons[NEXT].troops == 3
        assert hexes[1].poi.type == POIType.OUTPOST

    def test_build_outpost_merges_with_existing_garrison(self):
        a = _tribe("a", troops=10, scrap=30)
        a.garrisons[NEXT] = Garrison(troops=4, weapons=1)
        ctx = _ctx(a)
        _dispatch(ctx, a, "Build Outpost", start_location=HOME, target_location=NEXT, troops=3)
        assert a.garrisons[NEXT] == Garrison(troops=7, weapons=1)

    def test_build_outpost_without_scrap_returns_home(self):
        hexes = _line_map()
        a = _tribe("a", troops=10, scrap=10)
        ctx = _ctx(a, hexes=hexes)
        _dispatch(ctx, a, "Build Outpost", start_location=HOME, target_location=NEXT, troops=3)
        assert a.garrisons[HOME].troops == 10
        assert NEXT not in a.garrisons
        assert hexes[1].poi is None
        assert "Not enough scrap" in _texts(ctx, "a")[1]

    def test_stranded_party_digs_in(self):
        a = _tribe("a", troops=0)
        ctx = _ctx(a)
        ctx.state.journeys.append(
            Journey(
                id="j1", owner_tribe_id="a", type=JourneyType.SCOUT, origin="070.070", destination=NEXT,
                path=[NEXT], current_location=NEXT, force=Force(troops=3, weapons=1), arrival_turn=1,
            )
        )
        advance_journeys(ctx)
        assert ctx.state.journeys == []
        assert a.garrisons[NEXT] == Garrison(troops=3, weapons=1)
        assert "stranded" in _texts(ctx, "a")[-1]

    def test_stranded_party_camps_beside_a_held_hex(self):
        a = _tribe("a", troops=0)
        b = _tribe("b", location=NEXT, troops=4)
        ctx = _ctx(a, b)
        ctx.state.journeys.append(
            Journey(
                id="j1", owner_tribe_id="a", type=JourneyType.SCOUT, origin="070.070", destination=NEXT,
                path=[NEXT], current_location=NEXT, force=Force(troops=3, weapons=1), arrival_turn=1,
            )
        )
        advance_journeys(ctx)
        assert NEXT not in a.garrisons
        assert b.garrisons[NEXT] == Garrison(troops=4)
        assert a.garrisons["052.050"] == Garrison(troops=3, weapons=1)
        assert _texts(ctx, "a")[-1].endswith("They have dug in and now hold 052.050.")

    def test_stranded_party_with_nowhere_to_camp_scatters(self):
        a = _tribe("a", troops=0)
        b = _tribe("b", location=NEXT, troops=4)
        hexes = [HexData(q=1, r=0, terrain=TerrainType.PLAINS)]
        ctx = _ctx(a, b, hexes=hexes)
        ctx.state.journeys.append(
            Journey(
                id="j1", owner_tribe_id="a", type=JourneyType.SCOUT, origin=HOME, destination=NEXT,
                path=[NEXT], current_location=NEXT, force=Force(troops=3), arrival_turn=1,
            )
        )
        advance_journeys(ctx)
        assert set(a.garrisons) == {HOME}
        assert "scattered into the wastes" in _texts(ctx, "a")[-1]


class TestCombat:
    def _armies(self, attackers=20, attacker_weapons=20, defenders=10, defender_weapons=7):
        a = _tribe("a", troops=attackers, weapons=attacker_weapons)
        b = _tribe("b", location=NEXT, troops=defenders, weapons=defender_weapons)
        _war(a, b)
        return a, b

    def test_attacker_overruns_garrison(self):
        a, b = self._armies()
        ctx = _ctx(a, b)
        _dispatch(ctx, a, "Attack", start_location=HOME, target_location=NEXT, troops=20, weapons=20)
        advance_journeys(ctx)
        assert NEXT not in b.garrisons
        assert a.garrisons[NEXT] == Garrison(troops=15, weapons=23)
        assert "Victory!" in _texts(ctx, "a")[-1]
        assert "overrun" in _texts(ctx, "b")[-1]

    def test_defend_stance_repels_attack(self):
        a, b = self._armies(attackers=12, attacker_weapons=0, defenders=10, defender_weapons=0)
        ctx = _ctx(a, b)
        ctx.defended = {("b", NEXT)}
        _dispatch(ctx, a, "Attack", start_location=HOME, target_location=NEXT, troops=12)
        advance_journeys(ctx)
        assert b.garrisons[NEXT].troops == 5
        (retreat,) = ctx.state.journeys
        assert retreat.type == JourneyType.RETURN
        assert retreat.force.troops == 6
        assert retreat.destination == HOME

    def test_outpost_fortification(self):
        hexes = _line_map()
        hexes[1].poi = POI(id="o1", type=POIType.OUTPOST)
        a, b = self._armies(attackers=12, attacker_weapons=0, defenders=10, defender_weapons=0)
        ctx = _ctx(a, b, hexes=hexes)
        _dispatch(ctx, a, "Attack", start_location=HOME, target_location=NEXT, troops=12)
        advance_journeys(ctx)
        assert NEXT in b.garrisons

    def test_move_into_enemy_garrison_fights(self):
        a, b = self._armies()
        ctx = _ctx(a, b, fast_track_threshold=0)
        _dispatch(ctx, a, "Move", start_location=HOME, finish_location=NEXT, troops=20, weapons=20)
        advance_journeys(ctx)
        assert NEXT not in b.garrisons
        assert a.garrisons[NEXT] == Garrison(troops=15, weapons=23)
        assert _texts(ctx, "a")[-1] == (
            f"Your force arrived at {NEXT} and engaged the enemy tribe, Tribe B! "
            f"Victory! The garrison was overrun at the cost of 5 troops, and 3 weapons were captured."
        )
        assert _texts(ctx, "b")[-1] == f"Your garrison at {NEXT} was overrun by Tribe A! All 10 defenders were lost."

    def test_fast_tracked_move_is_repelled_and_retreats_home(self):
        a, b = self._armies(attackers=8, attacker_weapons=0, defenders=10, defender_weapons=0)
        ctx = _ctx(a, b)
        _dispatch(ctx, a, "Move", start_location=HOME, finish_location=NEXT, troops=8)

        assert ctx.state.journeys == []
        assert b.garrisons[NEXT].troops == 6
        assert a.garrisons[HOME].troops == 4
        texts = _texts(ctx, "a")
        assert texts[0].endswith("within the turn.")
        assert texts[1] == (
            f"Your force arrived at {NEXT} and engaged the enemy tribe, Tribe B! "
            f"The assault was repelled with 4 troops lost; the survivors are falling back."
        )
        assert texts[2] == f"A party has returned to {HOME} from their mission. They returned empty-handed."
        assert _texts(ctx, "b") == [f"Your garrison at {NEXT} held against an attack by Tribe A, losing 4 troops."]

    def test_attack_without_war_just_occupies(self):
        a = _tribe("a", troops=10)
        b = _tribe("b", location=NEXT, troops=10)
        ctx = _ctx(a, b)
        _dispatch(ctx, a, "Attack", start_location=HOME, target_location=FAR, troops=5)
        advance_journeys(ctx)
        advance_journeys(ctx)
        assert a.garrisons[FAR].troops == 5
        assert "found no enemy to engage" in " ".join(_texts(ctx, "a"))


class TestTrade:
    def _setup(self, b_scrap=50):
        a = _tribe("a", troops=5, food=100)
        b = _tribe("b", location=NEXT, troops=5, scrap=b_scrap)
        ctx = _ctx(a, b)
        _dispatch(
            ctx, a, "Trade", start_location=HOME, target_location=NEXT, troops=2,
            offer_food=30, request_scrap=10,
        )
        advance_journeys(ctx)
        return a, b, ctx

    def test_caravan_waits_for_answer(self):
        a, b, ctx = self._setup()
        (journey,) = ctx.state.journeys
        assert journey.status == JourneyStatus.AWAITING_RESPONSE
        assert journey.response_deadline == ctx.state.turn + 2
        assert a.global_resources.food == 70
        assert "awaiting a response" in _texts(ctx, "a")[-1]
        assert "with an offer" in _texts(ctx, "b")[-1]
        assert ctx.results["b"][-1].action_type == ActionType.RESPOND_TO_TRADE

    def test_accepted_trade_swaps_goods(self):
        a, b, ctx = self._setup()
        journey = ctx.state.journeys[0]
        b.journey_responses = [JourneyResponse(journey_id=journey.id, response="accept")]
        resolve_trade_responses(ctx)
        assert b.global_resources.scrap == 40
        assert b.global_resources.food == 30
        (home,) = ctx.state.journeys
        assert home.payload == ResourceBundle(scrap=10)
        advance_journeys(ctx)
        assert a.global_resources.scrap == 10
        assert a.global_resources.food == 70
        assert a.garrisons[HOME].troops == 5

    def test_rejected_trade_returns_offer(self):
        a, b, ctx = self._setup()
        b.journey_responses = [JourneyResponse(journey_id=ctx.state.journeys[0].id, response="reject")]
        resolve_trade_responses(ctx)
        advance_journeys(ctx)
        assert a.global_resources.food == 100
        assert b.global_resources.scrap == 50
        assert "rejected" in " ".join(_texts(ctx, "a"))
        assert ctx.results["b"][-1].action_type == ActionType.RESPOND_TO_TRADE

    def test_unaffordable_acceptance_is_cancelled(self):
        a, b, ctx = self._setup(b_scrap=5)
        b.journey_responses = [JourneyResponse(journey_id=ctx.state.journeys[0].id, response="accept")]
        resolve_trade_responses(ctx)
        assert b.global_resources.scrap == 5
        assert ctx.state.journeys[0].payload == ResourceBundle(food=30)
        assert "couldn't afford it" in _texts(ctx, "a")[-1]

    def test_unanswered_trade_expires(self):
        a, b, ctx = self._setup()
        resolve_trade_responses(ctx)
        assert ctx.state.journeys[0].status == JourneyStatus.AWAITING_RESPONSE
        ctx.state.turn += 2
        resolve_trade_responses(ctx)
        (home,) = ctx.state.journeys
        assert home.type == JourneyType.RETURN
        assert "expired" in _texts(ctx, "a")[-1]

    def test_vanished_partner(self):
        a, b, ctx = self._setup()
        del b.garrisons[NEXT]
        resolve_trade_responses(ctx)
        (home,) = ctx.state.journeys
        assert home.payload == ResourceBundle(food=30)
        assert "no longer exists" in _texts(ctx, "a")[-1]

    def test_offer_must_be_affordable(self):
        a = _tribe("a", troops=5, food=10)
        b = _tribe("b", location=NEXT)
        ctx = _ctx(a, b)
        with pytest.raises(ActionRejected, match="Not enough goods"):
            _dispatch(ctx, a, "Trade", start_location=HOME, target_location=NEXT, troops=1, offer_food=30)
        assert a.global_resources.food == 10
