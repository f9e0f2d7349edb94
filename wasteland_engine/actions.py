"""Typed payloads for the ``actionData`` bag of each action type.

Actions arrive over the wire as ``{id, actionType, actionData}`` with an
untyped ``actionData`` mapping. :func:`parse_action_data` validates that
mapping into one model per action type so the resolvers read attributes
instead of guessing keys.
"""
from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter

from .game_models import ActionType, ResourceBundle


class ActionRejected(RuntimeError):
    """Raised by a resolver when an action fails validation.

    The message is the player-facing narrative for that action.
    """


class ActionData(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# --- stationary -------------------------------------------------------------

class RecruitData(ActionData):
    action_type: Literal["Recruit"] = "Recruit"
    start_location: str
    food_offered: int = Field(0, ge=0)


class RestData(ActionData):
    action_type: Literal["Rest"] = "Rest"
    start_location: str = ""
    troops: int = Field(0, ge=0)


class BuildWeaponsData(ActionData):
    action_type: Literal["Build Weapons"] = "Build Weapons"
    start_location: str
    scrap: int = Field(0, ge=0)


class SetRationsData(ActionData):
    action_type: Literal["Set Rations"] = "Set Rations"
    # checked by the resolver so a bad level gets its own narrative
    ration_level: Optional[str] = None


class DefendData(ActionData):
    action_type: Literal["Defend"] = "Defend"
    start_location: str
    troops: int = Field(0, ge=0)


class StartResearchData(ActionData):
    action_type: Literal["Start Research"] = "Start Research"
    tech_id: str = Field(validation_alias=AliasChoices("techId", "tech_id"))
    location: str
    assigned_troops: int = Field(0, ge=0, validation_alias=AliasChoices("assignedTroops", "assigned_troops"))


# --- travel -----------------------------------------------------------------

class TravelData(ActionData):
    start_location: str
    destination: str = Field(
        validation_alias=AliasChoices("finish_location", "target_location", "destination"),
    )
    troops: int = Field(0, ge=0)
    weapons: int = Field(0, ge=0)
    chiefs_to_move: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("chiefsToMove", "chiefs_to_move"),
    )


class MoveData(TravelData):
    action_type: Literal["Move"] = "Move"


class AttackData(TravelData):
    action_type: Literal["Attack"] = "Attack"


class ScoutData(TravelData):
    action_type: Literal["Scout"] = "Scout"


class BuildOutpostData(TravelData):
    action_type: Literal["Build Outpost"] = "Build Outpost"


class ScavengeData(TravelData):
    action_type: Literal["Scavenge"] = "Scavenge"
    resource_type: Literal["Food", "Scrap", "Weapons"]


class TradeData(TravelData):
    action_type: Literal["Trade"] = "Trade"
    offer_food: int = Field(0, ge=0)
    offer_scrap: int = Field(0, ge=0)
    offer_weapons: int = Field(0, ge=0)
    request_food: int = Field(0, ge=0)
    request_scrap: int = Field(0, ge=0)
    request_weapons: int = Field(0, ge=0)

    def offer(self) -> ResourceBundle:
        return ResourceBundle(food=self.offer_food, scrap=self.offer_scrap, weapons=self.offer_weapons)

    def request(self) -> ResourceBundle:
        return ResourceBundle(food=self.request_food, scrap=self.request_scrap, weapons=self.request_weapons)


AnyActionData = Annotated[
    Union[
        RecruitData,
        RestData,
        BuildWeaponsData,
        SetRationsData,
        DefendData,
        StartResearchData,
        MoveData,
        AttackData,
        ScoutData,
        BuildOutpostData,
        ScavengeData,
        TradeData,
    ],
    Field(discriminator="action_type"),
]

_ADAPTER: TypeAdapter = TypeAdapter(AnyActionData)

IMPLEMENTED_ACTIONS = frozenset(
    {
        ActionType.RECRUIT,
        ActionType.REST,
        ActionType.BUILD_WEAPONS,
        ActionType.SET_RATIONS,
        ActionType.DEFEND,
        ActionType.START_RESEARCH,
        ActionType.MOVE,
        ActionType.ATTACK,
        ActionType.SCOUT,
        ActionType.BUILD_OUTPOST,
        ActionType.SCAVENGE,
        ActionType.TRADE,
    }
)


def parse_action_data(
    action_type: Union[ActionType, str],
    data: Optional[Mapping[str, Any]],
) -> Optional[ActionData]:
    """Validate ``data`` into the payload model for ``action_type``.

    Returns ``None`` for action types the engine does not resolve (Explore,
    Supply Outpost, result-only types). Raises
    :class:`pydantic.ValidationError` when the payload is malformed.
    """
    try:
        kind = ActionType(action_type)
    except ValueError:
        return None
    if kind not in IMPLEMENTED_ACTIONS:
        return None
    payload: Dict[str, Any] = dict(data or {})
    payload["action_type"] = kind.value
    return _ADAPTER.validate_python(payload)


__all__ = [
    "ActionData",
    "ActionRejected",
    "AttackData",
    "BuildOutpostData",
    "BuildWeaponsData",
    "DefendData",
    "IMPLEMENTED_ACTIONS",
    "MoveData",
    "RecruitData",
    "RestData",
    "ScavengeData",
    "ScoutData",
    "SetRationsData",
    "StartResearchData",
    "TradeData",
    "TravelData",
    "parse_action_data",
]
