from __future__ import annotations
import sys
from dataclasses import dataclass, field, is_dataclass, fields
from typing import Dict, List, Optional, Tuple, Any, Set, Union, get_args, get_origin, get_type_hints
from enum import Enum
import json

from .map.coordinates import format_hex_coords


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _unwrap_optional(ft: Any) -> Any:
    if get_origin(ft) is Union:
        args = [arg for arg in get_args(ft) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return ft


def _coerce_enum(ft: Any, value: Any) -> Any:
    try:
        return ft(value)
    except ValueError:
        # Unknown labels (e.g. display-only action types) are kept verbatim.
        return value


def _build_dataclass(cls, data: Dict[str, Any]):
    """Recursively coerce nested dicts/lists into a dataclass instance.

    Wire payloads use camelCase keys; snake_case keys are accepted as well so
    fixtures can be written either way.
    """
    if not is_dataclass(cls):
        return data
    type_hints = get_type_hints(cls, globalns=sys.modules[cls.__module__].__dict__)
    kwargs = {}
    for f in fields(cls):
        if f.name in data:
            v = data[f.name]
        elif _camel(f.name) in data:
            v = data[_camel(f.name)]
        else:
            continue  # keep default
        ft = _unwrap_optional(type_hints.get(f.name, f.type))
        origin = get_origin(ft)

        if v is None:
            # Nulls for dataclass/container fields mean "use the default".
            if is_dataclass(ft) or origin in (list, dict, set):
                continue
            kwargs[f.name] = None
            continue

        if is_dataclass(ft) and isinstance(v, dict):
            kwargs[f.name] = _build_dataclass(ft, v)
        elif isinstance(ft, type) and issubclass(ft, Enum):
            kwargs[f.name] = _coerce_enum(ft, v)
        elif origin in (list, set, tuple) and isinstance(v, (list, set, tuple)):
            (inner,) = get_args(ft)[:1] or (Any,)
            if inner and is_dataclass(inner):
                items = [_build_dataclass(inner, x) if isinstance(x, dict) else x for x in v]
            else:
                items = list(v)
            if origin is set:
                kwargs[f.name] = set(items)
            elif origin is tuple:
                kwargs[f.name] = tuple(items)
            else:
                kwargs[f.name] = items
        elif origin is dict and isinstance(v, dict):
            kt, vt = get_args(ft) or (Any, Any)
            if vt and is_dataclass(vt):
                kwargs[f.name] = {k: _build_dataclass(vt, x) if isinstance(x, dict) else x for k, x in v.items()}
            else:
                kwargs[f.name] = dict(v)
        else:
            kwargs[f.name] = v
    return cls(**kwargs)


def _to_wire(value: Any) -> Any:
    """Inverse of :func:`_build_dataclass`: camelCase field names, plain JSON values."""
    if is_dataclass(value) and not isinstance(value, type):
        return {_camel(f.name): _to_wire(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, set):
        return sorted(_to_wire(v) for v in value)
    if isinstance(value, dict):
        return {k: _to_wire(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_wire(v) for v in value]
    return value


class TerrainType(str, Enum):
    PLAINS = "Plains"
    DESERT = "Desert"
    MOUNTAINS = "Mountains"
    FOREST = "Forest"
    RUINS = "Ruins"
    WASTELAND = "Wasteland"
    WATER = "Water"
    RADIATION = "Radiation"
    CRATER = "Crater"
    SWAMP = "Swamp"


class POIType(str, Enum):
    SCRAPYARD = "Scrapyard"
    FOOD_SOURCE = "Food Source"
    WEAPONS_CACHE = "WeaponsCache"
    RESEARCH_LAB = "Research Lab"
    SETTLEMENT = "Settlement"
    OUTPOST = "Outpost"
    RUINS = "Ruins POI"
    BANDIT_CAMP = "Bandit Camp"
    MINE = "Mine"
    VAULT = "Vault"
    BATTLEFIELD = "Battlefield"
    FACTORY = "Factory"
    CRATER = "Crater POI"
    RADIATION = "Radiation Zone"


class ActionType(str, Enum):
    MOVE = "Move"
    SCOUT = "Scout"
    SCAVENGE = "Scavenge"
    RECRUIT = "Recruit"
    ATTACK = "Attack"
    REST = "Rest"
    EXPLORE = "Explore"
    START_RESEARCH = "Start Research"
    BUILD_WEAPONS = "Build Weapons"
    BUILD_OUTPOST = "Build Outpost"
    SUPPLY_OUTPOST = "Supply Outpost"
    TRADE = "Trade"
    DEFEND = "Defend"
    SET_RATIONS = "Set Rations"
    RETURN = "Return"
    UPKEEP = "Upkeep"  # results only
    TECHNOLOGY = "Technology"  # results only
    RESPOND_TO_TRADE = "Respond to Trade"


class JourneyType(str, Enum):
    MOVE = "Move"
    ATTACK = "Attack"
    SCAVENGE = "Scavenge"
    TRADE = "Trade"
    RETURN = "Return"
    SCOUT = "Scout"
    BUILD_OUTPOST = "Build Outpost"


class JourneyStatus(str, Enum):
    EN_ROUTE = "en_route"
    AWAITING_RESPONSE = "awaiting_response"
    RETURNING = "returning"


class RationLevel(str, Enum):
    HARD = "Hard"
    NORMAL = "Normal"
    GENEROUS = "Generous"


class DiplomaticStatus(str, Enum):
    WAR = "War"
    NEUTRAL = "Neutral"
    ALLIANCE = "Alliance"


class TechnologyEffectType(str, Enum):
    PASSIVE_FOOD_GENERATION = "PASSIVE_FOOD_GENERATION"
    PASSIVE_SCRAP_GENERATION = "PASSIVE_SCRAP_GENERATION"
    SCAVENGE_YIELD_BONUS = "SCAVENGE_YIELD_BONUS"
    COMBAT_BONUS_ATTACK = "COMBAT_BONUS_ATTACK"
    COMBAT_BONUS_DEFENSE = "COMBAT_BONUS_DEFENSE"
    MOVEMENT_SPEED_BONUS = "MOVEMENT_SPEED_BONUS"
    VISIBILITY_RANGE_BONUS = "VISIBILITY_RANGE_BONUS"


@dataclass
class TribeStats:
    charisma: int = 0
    intelligence: int = 0
    leadership: int = 0
    strength: int = 0


@dataclass
class GlobalResources:
    food: int = 0
    scrap: int = 0
    morale: int = 50


@dataclass
class ResourceBundle:
    """Food/scrap/weapons triple used for payloads, trade requests and reparations."""
    food: int = 0
    scrap: int = 0
    weapons: int = 0


@dataclass
class Chief:
    name: str
    description: str = ""
    key_image_url: str = ""
    stats: TribeStats = field(default_factory=TribeStats)


@dataclass
class Garrison:
    troops: int = 0
    weapons: int = 0
    chiefs: List[Chief] = field(default_factory=list)


@dataclass
class Force:
    troops: int = 0
    weapons: int = 0
    chiefs: List[Chief] = field(default_factory=list)


@dataclass
class TradeOffer:
    request: ResourceBundle = field(default_factory=ResourceBundle)
    from_tribe_name: str = ""


@dataclass
class Journey:
    id: str
    owner_tribe_id: str
    type: JourneyType
    origin: str
    destination: str
    path: List[str] = field(default_factory=list)
    current_location: str = ""
    force: Force = field(default_factory=Force)
    payload: ResourceBundle = field(default_factory=ResourceBundle)
    arrival_turn: int = 0  # turns remaining
    status: JourneyStatus = JourneyStatus.EN_ROUTE
    scavenge_type: Optional[str] = None
    trade_offer: Optional[TradeOffer] = None
    response_deadline: Optional[int] = None


@dataclass
class ResearchProject:
    tech_id: str
    progress: int = 0
    assigned_troops: int = 0
    location: str = ""


@dataclass
class DiplomaticRelation:
    status: DiplomaticStatus = DiplomaticStatus.NEUTRAL
    truce_until_turn: Optional[int] = None


@dataclass
class DiplomaticProposal:
    id: str
    from_tribe_id: str
    to_tribe_id: str
    status_change_to: DiplomaticStatus
    expires_on_turn: int
    from_tribe_name: str = ""
    reparations: Optional[ResourceBundle] = None


@dataclass
class JourneyResponse:
    journey_id: str
    response: str  # "accept" | "reject"


@dataclass
class GameAction:
    id: str
    action_type: Union[ActionType, str]
    action_data: Dict[str, Any] = field(default_factory=dict)
    result: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.action_type, ActionType):
            self.action_type = _coerce_enum(ActionType, self.action_type)

    @property
    def type_label(self) -> str:
        if isinstance(self.action_type, ActionType):
            return self.action_type.value
        return str(self.action_type)


@dataclass
class POI:
    id: str
    type: POIType
    difficulty: int = 1
    rarity: str = "Common"


@dataclass
class HexData:
    q: int
    r: int
    terrain: TerrainType = TerrainType.PLAINS
    poi: Optional[POI] = None

    @property
    def coords(self) -> str:
        return format_hex_coords(self.q, self.r)


@dataclass
class Tribe:
    id: str
    player_id: str = ""
    player_name: str = ""
    tribe_name: str = ""
    is_ai: bool = False
    ai_type: Optional[str] = None
    icon: str = ""
    color: str = ""
    stats: TribeStats = field(default_factory=TribeStats)
    global_resources: GlobalResources = field(default_factory=GlobalResources)
    garrisons: Dict[str, Garrison] = field(default_factory=dict)  # hex coords -> garrison
    location: str = ""  # home base
    turn_submitted: bool = False
    actions: List[GameAction] = field(default_factory=list)
    last_turn_results: List[GameAction] = field(default_factory=list)
    explored_hexes: Set[str] = field(default_factory=set)
    ration_level: RationLevel = RationLevel.NORMAL
    completed_techs: Set[str] = field(default_factory=set)
    assets: List[str] = field(default_factory=list)
    current_research: Optional[ResearchProject] = None
    journey_responses: List[JourneyResponse] = field(default_factory=list)
    diplomacy: Dict[str, DiplomaticRelation] = field(default_factory=dict)

    @property
    def display_name(self) -> str:
        return self.tribe_name or self.id

    def garrison_at(self, coords: str, *, create: bool = False) -> Optional[Garrison]:
        garrison = self.garrisons.get(coords)
        if garrison is None and create:
            garrison = self.garrisons[coords] = Garrison()
        return garrison

    def total_troops(self) -> int:
        return sum(g.troops for g in self.garrisons.values())

    def total_weapons(self) -> int:
        return sum(g.weapons for g in self.garrisons.values())

    def can_afford(self, bundle: ResourceBundle) -> bool:
        return (
            self.global_resources.food >= bundle.food
            and self.global_resources.scrap >= bundle.scrap
            and self.total_weapons() >= bundle.weapons
        )

    def take_weapons(self, amount: int) -> int:
        """Debit ``amount`` weapons garrison by garrison, in insertion order."""
        remaining = amount
        for garrison in self.garrisons.values():
            if remaining <= 0:
                break
            taken = min(remaining, garrison.weapons)
            garrison.weapons -= taken
            remaining -= taken
        return amount - remaining

    def home_garrison(self) -> Garrison:
        if self.location:
            return self.garrison_at(self.location, create=True)
        if self.garrisons:
            return next(iter(self.garrisons.values()))
        return Garrison()

    def reserved_troops(self, coords: str) -> int:
        project = self.current_research
        if project and project.location == coords:
            return project.assigned_troops
        return 0

    def is_at_war_with(self, other_id: str) -> bool:
        relation = self.diplomacy.get(other_id)
        return relation is not None and relation.status == DiplomaticStatus.WAR


@dataclass
class TribeHistoryRecord:
    tribe_id: str
    score: int
    troops: int
    garrisons: int


@dataclass
class TurnHistoryRecord:
    turn: int
    tribe_records: List[TribeHistoryRecord] = field(default_factory=list)


@dataclass
class GameState:
    map_data: List[HexData] = field(default_factory=list)
    tribes: Dict[str, Tribe] = field(default_factory=dict)
    turn: int = 1
    starting_locations: List[str] = field(default_factory=list)
    journeys: List[Journey] = field(default_factory=list)
    diplomatic_proposals: List[DiplomaticProposal] = field(default_factory=list)
    history: Optional[List[TurnHistoryRecord]] = None

    def hex_index(self) -> Dict[str, HexData]:
        return {hx.coords: hx for hx in self.map_data}

    def to_dict(self) -> Dict[str, Any]:
        return _to_wire(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameState":
        payload = dict(data)
        tribes = payload.get("tribes")
        if isinstance(tribes, list):
            # Older snapshots store tribes as an array.
            payload["tribes"] = {t["id"]: t for t in tribes}
        return _build_dataclass(cls, payload)


__all__ = [
    "ActionType",
    "Chief",
    "DiplomaticProposal",
    "DiplomaticRelation",
    "DiplomaticStatus",
    "Force",
    "GameAction",
    "GameState",
    "Garrison",
    "GlobalResources",
    "HexData",
    "Journey",
    "JourneyResponse",
    "JourneyStatus",
    "JourneyType",
    "POI",
    "POIType",
    "RationLevel",
    "ResearchProject",
    "ResourceBundle",
    "TechnologyEffectType",
    "TerrainType",
    "TradeOffer",
    "Tribe",
    "TribeHistoryRecord",
    "TribeStats",
    "TurnHistoryRecord",
]
