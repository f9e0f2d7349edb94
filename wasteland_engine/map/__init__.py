"""Hex coordinate helpers for the wasteland map."""

from .coordinates import (
    CoordinateError,
    axial_distance,
    coord_distance,
    format_hex_coords,
    hex_neighbors,
    hexes_in_range,
    parse_hex_coords,
)

__all__ = [
    "CoordinateError",
    "axial_distance",
    "coord_distance",
    "format_hex_coords",
    "hex_neighbors",
    "hexes_in_range",
    "parse_hex_coords",
]
