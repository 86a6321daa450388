from __future__ import annotations

import math

from kingmaker.sim.world import HexCoord

AXIAL_DIRECTIONS: tuple[HexCoord, ...] = (
    HexCoord(1, 0),
    HexCoord(1, -1),
    HexCoord(0, -1),
    HexCoord(-1, 0),
    HexCoord(-1, 1),
    HexCoord(0, 1),
)


def axial_add(a: HexCoord, b: HexCoord) -> HexCoord:
    return HexCoord(a.q + b.q, a.r + b.r)


def axial_neighbors(coord: HexCoord) -> tuple[HexCoord, ...]:
    """The six surrounding coordinates, in ``AXIAL_DIRECTIONS`` order."""
    return tuple(axial_add(coord, delta) for delta in AXIAL_DIRECTIONS)


def axial_equals(a: HexCoord, b: HexCoord) -> bool:
    return a.q == b.q and a.r == b.r


def axial_distance(a: HexCoord, b: HexCoord) -> int:
    dq = a.q - b.q
    dr = a.r - b.r
    ds = (-a.q - a.r) - (-b.q - b.r)
    return int((abs(dq) + abs(dr) + abs(ds)) / 2)


def is_adjacent(a: HexCoord, b: HexCoord) -> bool:
    return any(axial_equals(neighbor, b) for neighbor in axial_neighbors(a))


def axial_to_pixel(coord: HexCoord, size: float) -> tuple[float, float]:
    """Pointy-top axial to 2D coordinates."""
    x = size * math.sqrt(3.0) * (coord.q + coord.r / 2.0)
    y = size * 1.5 * coord.r
    return (x, y)


def hex_polygon_points(center: tuple[float, float], size: float) -> tuple[tuple[float, float], ...]:
    points: list[tuple[float, float]] = []
    for i in range(6):
        angle = math.radians(60 * i - 30)
        points.append((center[0] + size * math.cos(angle), center[1] + size * math.sin(angle)))
    return tuple(points)
