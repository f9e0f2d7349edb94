from __future__ import annotations
from dataclasses import dataclass, fields
from typing import Any, Dict, Iterable, Mapping, Optional
import os, json

import yaml


class ConfigError(RuntimeError):
    """Raised when a configuration file cannot be parsed."""


@dataclass(frozen=True)
class EngineConfig:
    """Tunable rule constants consumed by the turn engine."""
    event_chance: float = 0.20
    fast_track_threshold: int = 1
    visibility_range: int = 2
    scout_range: int = 1
    outpost_scrap_cost: int = 25
    trade_response_turns: int = 2
    proposal_lifetime_turns: int = 3
    truce_turns: int = 5
    defend_bonus: float = 0.30
    fortification_bonus: float = 0.25
    mine_scrap_yield: int = 10
    factory_scrap_yield: int = 25
    max_morale: int = 100

    @classmethod
    def from_mapping(cls, cfg: Optional[Mapping[str, Any]]) -> "EngineConfig":
        section = dict((cfg or {}).get("engine") or {})
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in section.items() if k in known})


def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(a)
    for k, v in (b or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out

def _load_one(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    if path.endswith(".json"):
        try:
            d = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"{path}: {exc}") from exc
    else:
        # YAML is a superset of JSON, so extensionless files go through here too
        try:
            d = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"{path}: {exc}") from exc
    if d is None:
        return {}
    if not isinstance(d, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return d

def load_configs(paths: Iterable[str] | None) -> Dict[str, Any]:
    cfg: Dict[str, Any] = {}
    for p in (paths or []):
        cfg = _deep_merge(cfg, _load_one(p))
    return cfg

def env_overrides(prefix: str = "WASTELAND__") -> Dict[str, Any]:
    # Nested via double underscores: WASTELAND__ENGINE__EVENT_CHANCE=0.1
    out: Dict[str, Any] = {}
    for k, v in os.environ.items():
        if not k.startswith(prefix):
            continue
        parts = k[len(prefix):].split("__")
        cur = out
        for i, part in enumerate(parts):
            key = part.lower()
            if i == len(parts) - 1:
                cur[key] = _coerce(v)
            else:
                cur = cur.setdefault(key, {})
    return out

def _coerce(s: str) -> Any:
    t = s.strip().lower()
    if t in ("true", "false"):
        return t == "true"
    try:
        if "." in t:
            return float(t)
        return int(t)
    except ValueError:
        return s

def apply_cli_overrides(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    return _deep_merge(base, overrides or {})

def load_engine_config(
    paths: Iterable[str] | None = None,
    overrides: Dict[str, Any] | None = None,
) -> EngineConfig:
    """Files, then ``WASTELAND__`` environment variables, then explicit overrides."""
    cfg = load_configs(paths)
    cfg = _deep_merge(cfg, env_overrides())
    cfg = apply_cli_overrides(cfg, overrides or {})
    return EngineConfig.from_mapping(cfg)

__all__ = [
    "ConfigError",
    "EngineConfig",
    "load_configs",
    "env_overrides",
    "apply_cli_overrides",
    "load_engine_config",
    "_deep_merge",
]
