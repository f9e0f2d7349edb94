"""Axial coordinate system for the wasteland hex map.

Coordinate System:
    - Axial coordinates (q, r); cube s = -q - r
    - Map keys are fixed-width strings "QQQ.RRR" with an offset of 50, so the
      origin (0, 0) is stored as "050.050"
    - Distance = (|dq| + |dr| + |ds|) / 2

Neighbor order (clockwise from East):
    0 = East     : (+1,  0)
    1 = Northeast: (+1, -1)
    2 = Northwest: ( 0, -1)
    3 = West     : (-1,  0)
    4 = Southwest: (-1, +1)
    5 = Southeast: ( 0, +1)
"""
from __future__ import annotations

from typing import List, Tuple

COORD_OFFSET = 50

AXIAL_DIRECTIONS: List[Tuple[int, int]] = [
    (+1,  0),
    (+1, -1),
    ( 0, -1),
    (-1,  0),
    (-1, +1),
    ( 0, +1),
]


class CoordinateError(ValueError):
    pass


def format_hex_coords(q: int, r: int) -> str:
    """Encode axial coordinates as a map key.

    >>> format_hex_coords(0, 0)
    '050.050'
    >>> format_hex_coords(-3, 12)
    '047.062'
    """
    return f"{q + COORD_OFFSET:03d}.{r + COORD_OFFSET:03d}"


def parse_hex_coords(coords: str) -> Tuple[int, int]:
    """Decode a "QQQ.RRR" map key back into axial (q, r)."""
    try:
        q_part, r_part = coords.split(".")
        return int(q_part) - COORD_OFFSET, int(r_part) - COORD_OFFSET
    except (AttributeError, ValueError) as exc:
        raise CoordinateError(f"Malformed hex coordinates: {coords!r}") from exc


def axial_add(coord: Tuple[int, int], direction: int) -> Tuple[int, int]:
    q, r = coord
    dq, dr = AXIAL_DIRECTIONS[direction % 6]
    return (q + dq, r + dr)


def hex_neighbors(coords: str) -> List[str]:
    """Return the six neighbor keys of ``coords`` in edge order."""
    origin = parse_hex_coords(coords)
    return [format_hex_coords(*axial_add(origin, edge)) for edge in range(6)]


def axial_distance(a: Tuple[int, int], b: Tuple[int, int]) -> int:
    """Hex distance between two axial coordinates."""
    dq = a[0] - b[0]
    dr = a[1] - b[1]
    return (abs(dq) + abs(dr) + abs(dq + dr)) // 2


def coord_distance(a: str, b: str) -> int:
    return axial_distance(parse_hex_coords(a), parse_hex_coords(b))


def hexes_in_range(center: str, radius: int) -> List[str]:
    """All coordinate keys within ``radius`` steps of ``center`` (center included).

    Used for field-of-view reveals. Keys are returned whether or not the hex
    exists on the map; callers filter against the map when that matters.
    """
    if radius < 0:
        return []
    cq, cr = parse_hex_coords(center)
    result: List[str] = []
    for dq in range(-radius, radius + 1):
        for dr in range(max(-radius, -dq - radius), min(radius, -dq + radius) + 1):
            result.append(format_hex_coords(cq + dq, cr + dr))
    return result


__all__ = [
    "AXIAL_DIRECTIONS",
    "COORD_OFFSET",
    "CoordinateError",
    "axial_add",
    "axial_distance",
    "coord_distance",
    "format_hex_coords",
    "hex_neighbors",
    "hexes_in_range",
    "parse_hex_coords",
]
