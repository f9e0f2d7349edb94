"""Terrain-weighted A* pathfinding over the hex map."""
from __future__ import annotations

import heapq
import itertools
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Union

from .game_models import HexData, TerrainType
from .map.coordinates import coord_distance, hex_neighbors

BASE_MOVEMENT_PER_TURN = 5

# Cost of entering one hex of the given terrain, in road-equivalent hexes.
TERRAIN_BASE_COSTS: Dict[TerrainType, float] = {
    TerrainType.PLAINS: 1.0,
    TerrainType.WASTELAND: 1.0,
    TerrainType.RADIATION: 1.0,
    TerrainType.RUINS: 1.2,
    TerrainType.FOREST: 1.5,
    TerrainType.DESERT: 1.5,
    TerrainType.CRATER: 1.8,
    TerrainType.SWAMP: 2.0,
    TerrainType.MOUNTAINS: 2.5,
    TerrainType.WATER: math.inf,
}


@dataclass
class PathResult:
    path: List[str] = field(default_factory=list)
    cost: int = 0  # whole turns, rounded up


def _base_cost(terrain: Union[TerrainType, str]) -> float:
    try:
        return TERRAIN_BASE_COSTS[TerrainType(terrain)]
    except ValueError:
        return 1.0


def terrain_movement_cost(terrain: Union[TerrainType, str]) -> float:
    """Fraction of a turn spent entering one hex of ``terrain``."""
    return _base_cost(terrain) / BASE_MOVEMENT_PER_TURN


def index_map(hexes: Union[Mapping[str, HexData], Iterable[HexData]]) -> Dict[str, HexData]:
    if isinstance(hexes, Mapping):
        return dict(hexes)
    return {hx.coords: hx for hx in hexes}


def find_path(
    start: str,
    end: str,
    hexes: Union[Mapping[str, HexData], Iterable[HexData]],
) -> Optional[PathResult]:
    """Return the cheapest path from ``start`` to ``end`` or ``None``.

    The path includes both endpoints. Costs are summed in road-equivalent
    hexes so that plain hex distance stays an admissible heuristic, and are
    converted to whole turns only once the goal is reached.
    """

    grid = index_map(hexes)
    if start not in grid or end not in grid:
        return None
    if start == end:
        return PathResult(path=[start], cost=0)
    if math.isinf(_base_cost(grid[end].terrain)):
        return None

    tie = itertools.count()
    frontier = [(coord_distance(start, end), next(tie), start)]
    came_from: Dict[str, Optional[str]] = {start: None}
    g_score: Dict[str, float] = {start: 0.0}
    closed = set()

    while frontier:
        _, _, current = heapq.heappop(frontier)
        if current == end:
            return PathResult(
                path=_reconstruct(came_from, end),
                cost=math.ceil(round(g_score[end] / BASE_MOVEMENT_PER_TURN, 9)),
            )
        if current in closed:
            continue
        closed.add(current)

        for neighbor in hex_neighbors(current):
            hx = grid.get(neighbor)
            if hx is None or neighbor in closed:
                continue
            step = _base_cost(hx.terrain)
            if math.isinf(step):
                continue
            tentative = g_score[current] + step
            if tentative < g_score.get(neighbor, math.inf):
                came_from[neighbor] = current
                g_score[neighbor] = tentative
                priority = tentative + coord_distance(neighbor, end)
                heapq.heappush(frontier, (priority, next(tie), neighbor))
    return None


def _reconstruct(came_from: Dict[str, Optional[str]], end: str) -> List[str]:
    path = [end]
    node = came_from[end]
    while node is not None:
        path.append(node)
        node = came_from[node]
    path.reverse()
    return path


__all__ = [
    "BASE_MOVEMENT_PER_TURN",
    "PathResult",
    "TERRAIN_BASE_COSTS",
    "find_path",
    "index_map",
    "terrain_movement_cost",
]
