import math

from kingmaker.sim.movement import (
    AXIAL_DIRECTIONS,
    axial_add,
    axial_distance,
    axial_equals,
    axial_neighbors,
    axial_to_pixel,
    hex_polygon_points,
    is_adjacent,
)
from kingmaker.sim.world import HexCoord

SAMPLE_COORDS = [HexCoord(q, r) for q in range(-3, 4) for r in range(-3, 4)]


def test_axial_add_is_component_wise() -> None:
    assert axial_add(HexCoord(2, -1), HexCoord(-3, 4)) == HexCoord(-1, 3)


def test_neighbors_follow_fixed_direction_order() -> None:
    assert axial_neighbors(HexCoord(0, 0)) == AXIAL_DIRECTIONS
    assert axial_neighbors(HexCoord(1, 1)) == (
        HexCoord(2, 1),
        HexCoord(2, 0),
        HexCoord(1, 0),
        HexCoord(0, 1),
        HexCoord(0, 2),
        HexCoord(1, 2),
    )


def test_neighbors_are_six_distinct_cells_at_distance_one() -> None:
    for coord in SAMPLE_COORDS:
        neighbors = axial_neighbors(coord)
        assert len(neighbors) == 6
        assert len(set(neighbors)) == 6
        assert coord not in neighbors
        assert all(axial_distance(coord, neighbor) == 1 for neighbor in neighbors)


def test_neighbor_relation_is_symmetric() -> None:
    for coord in SAMPLE_COORDS:
        for neighbor in axial_neighbors(coord):
            assert coord in axial_neighbors(neighbor)
            assert is_adjacent(neighbor, coord)


def test_axial_equals_compares_both_components() -> None:
    assert axial_equals(HexCoord(1, -1), HexCoord(1, -1))
    assert not axial_equals(HexCoord(1, -1), HexCoord(-1, 1))
    assert not axial_equals(HexCoord(1, 0), HexCoord(1, 1))


def test_non_neighbors_are_not_adjacent() -> None:
    assert not is_adjacent(HexCoord(0, 0), HexCoord(0, 0))
    assert not is_adjacent(HexCoord(0, 0), HexCoord(1, 1))
    assert not is_adjacent(HexCoord(0, 0), HexCoord(2, -1))


def test_axial_to_pixel_pointy_top_projection() -> None:
    assert axial_to_pixel(HexCoord(0, 0), 60) == (0.0, 0.0)
    x, y = axial_to_pixel(HexCoord(1, 0), 60)
    assert math.isclose(x, 60 * math.sqrt(3.0))
    assert y == 0.0
    x, y = axial_to_pixel(HexCoord(0, 1), 10)
    assert math.isclose(x, 10 * math.sqrt(3.0) / 2.0)
    assert math.isclose(y, 15.0)


def test_polygon_vertices_sit_on_circumradius_at_expected_angles() -> None:
    center = (100.0, 50.0)
    points = hex_polygon_points(center, 20.0)

    assert len(points) == 6
    for index, (px, py) in enumerate(points):
        assert math.isclose(math.hypot(px - center[0], py - center[1]), 20.0)
        expected = math.radians(60 * index - 30)
        assert math.isclose(px, center[0] + 20.0 * math.cos(expected))
        assert math.isclose(py, center[1] + 20.0 * math.sin(expected))
    # pointy-top: the vertex at 90 degrees is straight below the center
    assert math.isclose(points[2][0], center[0], abs_tol=1e-9)
    assert math.isclose(points[2][1], center[1] + 20.0)
