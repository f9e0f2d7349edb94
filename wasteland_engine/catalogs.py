"""Read-only technology and asset catalogs.

The engine never reaches for a module-level catalog itself: callers pass a
:class:`Catalog` into :func:`wasteland_engine.turn_processor.process_turn`
(``load_default_catalog`` supplies the packaged one).
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from .game_models import TechnologyEffectType, TerrainType


class CatalogError(RuntimeError):
    """Raised when catalog data is missing or malformed."""


@dataclass(frozen=True)
class TechnologyEffect:
    type: TechnologyEffectType
    value: float
    resource: Optional[str] = None  # Food / Scrap / Weapons for yield bonuses
    terrain: Optional[TerrainType] = None  # terrain-specific combat bonuses


@dataclass(frozen=True)
class Technology:
    id: str
    name: str
    category: str
    scrap_cost: int
    research_points: int
    required_troops: int
    description: str = ""
    icon: str = ""
    prerequisites: Tuple[str, ...] = ()
    effects: Tuple[TechnologyEffect, ...] = ()


@dataclass(frozen=True)
class Asset:
    name: str
    description: str = ""
    effects: Tuple[TechnologyEffect, ...] = ()


@dataclass
class Catalog:
    technologies: Dict[str, Technology] = field(default_factory=dict)
    assets: Dict[str, Asset] = field(default_factory=dict)

    def get_technology(self, tech_id: str) -> Optional[Technology]:
        return self.technologies.get(tech_id)

    def get_asset(self, name: str) -> Optional[Asset]:
        return self.assets.get(name)

    def root_technologies(self) -> List[Technology]:
        """Technologies without prerequisites, in catalog order."""
        return [tech for tech in self.technologies.values() if not tech.prerequisites]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Catalog":
        catalog = cls()
        for entry in data.get("technologies") or []:
            try:
                tech = Technology(
                    id=str(entry["id"]),
                    name=str(entry.get("name", entry["id"])),
                    category=str(entry.get("category", "")),
                    scrap_cost=int((entry.get("cost") or {}).get("scrap", 0)),
                    research_points=int(entry["research_points"]),
                    required_troops=int(entry.get("required_troops", 0)),
                    description=str(entry.get("description", "")),
                    icon=str(entry.get("icon", "")),
                    prerequisites=tuple(entry.get("prerequisites") or ()),
                    effects=_parse_effects(entry.get("effects")),
                )
            except (KeyError, TypeError, ValueError) as exc:
                raise CatalogError(f"invalid technology entry {entry!r}: {exc}") from exc
            catalog.technologies[tech.id] = tech
        for entry in data.get("assets") or []:
            try:
                asset = Asset(
                    name=str(entry["name"]),
                    description=str(entry.get("description", "")),
                    effects=_parse_effects(entry.get("effects")),
                )
            except (KeyError, TypeError, ValueError) as exc:
                raise CatalogError(f"invalid asset entry {entry!r}: {exc}") from exc
            catalog.assets[asset.name] = asset

        for tech in catalog.technologies.values():
            missing = [p for p in tech.prerequisites if p not in catalog.technologies]
            if missing:
                raise CatalogError(f"{tech.id}: unknown prerequisites {missing}")
        return catalog


def _parse_effects(raw: Any) -> Tuple[TechnologyEffect, ...]:
    effects = []
    for item in raw or []:
        terrain = item.get("terrain")
        effects.append(
            TechnologyEffect(
                type=TechnologyEffectType(item["type"]),
                value=float(item["value"]),
                resource=item.get("resource"),
                terrain=TerrainType(terrain) if terrain else None,
            )
        )
    return tuple(effects)


def _catalog_path() -> str:
    return os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "catalog.yaml")


def load_catalog(path: str) -> Catalog:
    if not os.path.exists(path):
        raise CatalogError(f"catalog file missing: {path}")
    with open(path, "r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise CatalogError(f"{path}: {exc}") from exc
    return Catalog.from_mapping(data)


@lru_cache()
def load_default_catalog() -> Catalog:
    """The packaged catalog (cached; treat as read-only)."""
    return load_catalog(_catalog_path())


__all__ = [
    "Asset",
    "Catalog",
    "CatalogError",
    "Technology",
    "TechnologyEffect",
    "load_catalog",
    "load_default_catalog",
]
