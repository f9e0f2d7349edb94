"""Wasteland engine: authoritative turn resolution for the wasteland strategy game."""

from importlib import import_module
from typing import Any

__version__ = "0.1.0"
__all__ = [
    "process_turn",
    "GameState",
    "Tribe",
    "Garrison",
    "Journey",
    "GameAction",
    "ActionType",
    "EngineConfig",
    "Catalog",
    "load_default_catalog",
    "load_state",
    "save_state",
    "find_path",
    "calculate_tribe_score",
    "__version__",
]

_EXPORTS = {
    "process_turn": ("turn_processor", "process_turn"),
    "GameState": ("game_models", "GameState"),
    "Tribe": ("game_models", "Tribe"),
    "Garrison": ("game_models", "Garrison"),
    "Journey": ("game_models", "Journey"),
    "GameAction": ("game_models", "GameAction"),
    "ActionType": ("game_models", "ActionType"),
    "EngineConfig": ("config", "EngineConfig"),
    "Catalog": ("catalogs", "Catalog"),
    "load_default_catalog": ("catalogs", "load_default_catalog"),
    "load_state": ("state.loaders", "load_state"),
    "save_state": ("state.loaders", "save_state"),
    "find_path": ("pathing", "find_path"),
    "calculate_tribe_score": ("scoring", "calculate_tribe_score"),
}


def __getattr__(name: str) -> Any:
    if name in _EXPORTS:
        module_name, attr = _EXPORTS[name]
        module = import_module(f".{module_name}", __name__)
        value = getattr(module, attr)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    return sorted(set(globals()) | set(__all__))
