"""Utilities for loading and saving serialized `GameState` snapshots."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Union, Any

from ..game_models import GameState


PathLike = Union[str, Path]


def load_state(path: PathLike) -> GameState:
    """Load a :class:`GameState` from a JSON file.

    The payload uses the camelCase wire shape produced by
    :meth:`GameState.to_json`. ``tribes`` may be either a mapping keyed by
    tribe id or a list of tribe records.
    """

    candidate = Path(path)
    if not candidate.exists():
        raise FileNotFoundError(f"State snapshot not found: {path}")
    with candidate.open("r", encoding="utf-8") as handle:
        payload: Any = json.load(handle)
    return GameState.from_dict(payload)


def save_state(state: GameState, path: PathLike) -> Path:
    target = Path(path)
    if target.parent and not target.parent.exists():
        target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(state.to_json(), encoding="utf-8")
    return target


__all__ = ["load_state", "save_state"]
