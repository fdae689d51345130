"""
Actions - Main and free player actions.

build_action() turns a wire request (type name plus camelCase or snake_case
params) into the matching action instance.
"""

from __future__ import annotations
from typing import Any

from .base import (
    ActionType,
    ActionValidator,
    BaseAction,
    MAIN_ACTIONS,
    ValidationError,
    ValidationResult,
)
from .free import (
    FREE_ACTION_CLASSES,
    AccomplishMissionAction,
    BuyCardAction,
    DiscardCardAction,
    MoveProbeAction,
    TradeResourcesAction,
    TransfereDataAction,
)
from .main import (
    MAIN_ACTION_CLASSES,
    AnalyzeDataAction,
    LandAction,
    LaunchProbeAction,
    OrbitAction,
    PassAction,
    PlayCardAction,
    ResearchTechAction,
    ScanSectorAction,
)

ACTION_CLASSES: dict[ActionType, type[BaseAction]] = {**MAIN_ACTION_CLASSES, **FREE_ACTION_CLASSES}

_PARAM_ALIASES = {
    "probeId": "probe_id",
    "satelliteId": "satellite_id",
    "cardId": "card_id",
    "techId": "tech_id",
    "keepCardIds": "keep_card_ids",
    "roundCardId": "round_card_id",
    "slotId": "slot_id",
    "cardIds": "card_ids",
    "missionId": "mission_id",
    "requirementId": "requirement_id",
}


def build_action(action_type: ActionType | str, player_id: str,
                 params: dict[str, Any] | None = None, sequence_id: str = "") -> BaseAction:
    """Factory for any action. Raises ValueError on an unknown type or parameter."""
    if not isinstance(action_type, ActionType):
        try:
            action_type = ActionType(str(action_type).upper())
        except ValueError:
            raise ValueError(f"Unknown action type: {action_type}") from None
    cls = ACTION_CLASSES[action_type]
    kwargs = {}
    for key, value in (params or {}).items():
        name = _PARAM_ALIASES.get(key, key)
        if name == "target" and value is not None:
            value = (str(value[0]), int(value[1]))
        kwargs[name] = value
    try:
        return cls(player_id=player_id, sequence_id=sequence_id, **kwargs)
    except TypeError as exc:
        raise ValueError(f"Invalid parameters for {action_type.value}: {exc}") from exc


__all__ = [
    "ActionType", "ActionValidator", "BaseAction", "MAIN_ACTIONS", "ValidationError", "ValidationResult",
    "ACTION_CLASSES", "build_action",
    "LaunchProbeAction", "OrbitAction", "LandAction", "ScanSectorAction", "AnalyzeDataAction",
    "PlayCardAction", "ResearchTechAction", "PassAction",
    "MoveProbeAction", "TransfereDataAction", "DiscardCardAction", "BuyCardAction",
    "TradeResourcesAction", "AccomplishMissionAction",
]
