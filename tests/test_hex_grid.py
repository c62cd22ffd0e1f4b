"""Tests for HexGrid and HexPosition."""

import math

import pytest

from cogsalvage.combat.hex_grid import (
    HEX_DIRECTIONS,
    HexGrid,
    HexPosition,
    cube_round,
    hex_distance,
)


@pytest.fixture
def grid():
    """Standard arena: radius 5, centered in a 900x700 viewport."""
    return HexGrid(hex_size=36, radius=5, origin_x=450, origin_y=350)


class TestHexPosition:
    """Tests for HexPosition class."""

    def test_create_position(self):
        """Create position."""
        pos = HexPosition(2, -1)
        assert pos.q == 2
        assert pos.r == -1
        assert pos.s == -1

    def test_cube_sums_to_zero(self):
        """Cube coordinates always sum to zero."""
        for q in range(-3, 4):
            for r in range(-3, 4):
                assert sum(HexPosition(q, r).to_cube()) == 0

    def test_position_hashable(self):
        """Position can be used as dict key."""
        d = {HexPosition(1, 2): "unit1"}
        assert d[HexPosition(1, 2)] == "unit1"

    def test_distance_same_position(self):
        """Distance to self is 0."""
        pos = HexPosition(3, -2)
        assert pos.distance_to(pos) == 0

    def test_distance_adjacent(self):
        """Distance to adjacent hex is 1."""
        pos = HexPosition(2, 2)
        for neighbor in pos.get_neighbors():
            assert pos.distance_to(neighbor) == 1

    def test_distance_examples(self):
        """Known distances."""
        origin = HexPosition(0, 0)
        assert hex_distance(origin, HexPosition(3, 0)) == 3
        assert hex_distance(origin, HexPosition(1, 1)) == 2
        assert hex_distance(origin, HexPosition(2, -1)) == 2
        assert hex_distance(HexPosition(-2, 3), HexPosition(2, -1)) == 4

    def test_neighbor_order(self):
        """Neighbors follow the fixed direction order."""
        neighbors = HexPosition(0, 0).get_neighbors()
        assert neighbors == [HexPosition(dq, dr) for dq, dr in HEX_DIRECTIONS]
        assert neighbors[0] == HexPosition(1, 0)
        assert neighbors[-1] == HexPosition(0, 1)


class TestCubeRound:
    """Tests for cube rounding."""

    def test_exact_values(self):
        """Integer inputs come back unchanged."""
        assert cube_round(2.0, -1.0, -1.0) == HexPosition(2, -1)

    def test_corrects_largest_error(self):
        """Component with largest rounding error is recomputed."""
        # Independent rounding gives (0, 0, -1), which is not a hex
        assert cube_round(0.4, 0.4, -0.8) == HexPosition(0, 1)

    def test_tied_halves_resolve_to_a_hex(self):
        """Two components rounding up together still yield a valid hex."""
        # Independent rounding gives (1, 1, -1); r is recomputed
        assert cube_round(0.5, 0.5, -1.0) == HexPosition(1, 0)

    def test_result_is_adjacent_to_nearby_fractions(self):
        """Small offsets around a hex round back to it."""
        for dq, dr in [(0.2, 0.1), (-0.3, 0.1), (0.1, -0.3), (-0.2, -0.2)]:
            assert cube_round(dq, dr, -dq - dr) == HexPosition(0, 0)

    def test_zero_sum_after_rounding(self):
        """Rounded results always satisfy q + r + s == 0."""
        steps = [i / 7 for i in range(-14, 15)]
        for fq in steps:
            for fr in steps:
                pos = cube_round(fq, fr, -fq - fr)
                assert pos.q + pos.r + pos.s == 0
                # Never more than one hex away from the fractional point
                assert abs(pos.q - fq) <= 1 and abs(pos.r - fr) <= 1
                assert abs(pos.s - (-fq - fr)) <= 1


class TestHexGrid:
    """Tests for HexGrid class."""

    def test_cell_count(self, grid):
        """Radius 5 hexagon has 91 cells."""
        assert len(grid) == 91
        assert len(grid.valid_coordinates()) == 91

    def test_valid_coordinates_bound(self, grid):
        """Every valid cell is within radius rings."""
        for pos in grid.valid_coordinates():
            assert max(abs(pos.q), abs(pos.r), abs(pos.s)) <= 5

    def test_is_valid(self, grid):
        """Validity checks."""
        assert grid.is_valid(HexPosition(0, 0))
        assert grid.is_valid(HexPosition(5, -5))
        assert grid.is_valid(HexPosition(-5, 0))
        assert not grid.is_valid(HexPosition(5, 1))
        assert not grid.is_valid(HexPosition(6, 0))
        assert HexPosition(0, -5) in grid

    @pytest.mark.parametrize("radius", [0, -1])
    def test_invalid_radius(self, radius):
        """Non-positive radius fails at construction."""
        with pytest.raises(ValueError):
            HexGrid(hex_size=36, radius=radius)

    def test_invalid_hex_size(self):
        """Non-positive hex size fails at construction."""
        with pytest.raises(ValueError):
            HexGrid(hex_size=0, radius=3)

    def test_valid_neighbors_center(self, grid):
        """Center has all 6 neighbors in direction order."""
        assert grid.get_valid_neighbors(HexPosition(0, 0)) == [
            HexPosition(1, 0),
            HexPosition(1, -1),
            HexPosition(0, -1),
            HexPosition(-1, 0),
            HexPosition(-1, 1),
            HexPosition(0, 1),
        ]

    def test_valid_neighbors_corner(self, grid):
        """Corner cell keeps only on-board neighbors, order preserved."""
        assert grid.get_valid_neighbors(HexPosition(5, 0)) == [
            HexPosition(5, -1),
            HexPosition(4, 0),
            HexPosition(4, 1),
        ]

    def test_distance_symmetric_and_adjacency(self):
        """distance == 1 exactly for neighbors; distance is symmetric."""
        small = HexGrid(hex_size=10, radius=2)
        for a in small.hexes:
            neighbors = set(small.get_valid_neighbors(a))
            for b in small.hexes:
                assert small.distance(a, b) == small.distance(b, a)
                assert (small.distance(a, b) == 1) == (b in neighbors)

    def test_hexes_in_range(self, grid):
        """Range queries."""
        origin = HexPosition(0, 0)
        assert grid.hexes_in_range(origin, 0) == [origin]
        assert len(grid.hexes_in_range(origin, 1)) == 7
        assert len(grid.hexes_in_range(origin, 2)) == 19
        assert len(grid.hexes_in_range(origin, 5)) == 91

    def test_hexes_in_range_clipped(self, grid):
        """Range around a corner is clipped to the board."""
        in_range = grid.hexes_in_range(HexPosition(5, 0), 1)
        assert set(in_range) == {
            HexPosition(5, 0),
            HexPosition(5, -1),
            HexPosition(4, 0),
            HexPosition(4, 1),
        }
        for pos in in_range:
            assert pos.distance_to(HexPosition(5, 0)) <= 1


class TestPixelConversion:
    """Tests for pixel <-> hex conversion."""

    def test_origin_center(self, grid):
        """Origin hex sits at the grid origin."""
        assert grid.hex_to_pixel(HexPosition(0, 0)) == (450, 350)

    def test_hex_to_pixel_pointy_top(self, grid):
        """Pointy-top layout spacing."""
        x, y = grid.hex_to_pixel(HexPosition(1, 0))
        assert x == pytest.approx(450 + 36 * math.sqrt(3))
        assert y == pytest.approx(350)

        x, y = grid.hex_to_pixel(HexPosition(0, 1))
        assert x == pytest.approx(450 + 36 * math.sqrt(3) / 2)
        assert y == pytest.approx(350 + 54)

    def test_round_trip(self, grid):
        """Every hex center converts back to the same hex."""
        for pos in grid.hexes:
            x, y = grid.hex_to_pixel(pos)
            assert grid.pixel_to_hex(x, y) == pos

    def test_offset_inside_hex(self, grid):
        """Points near the center stay in the hex."""
        for pos in [HexPosition(0, 0), HexPosition(-3, 2), HexPosition(4, -4)]:
            x, y = grid.hex_to_pixel(pos)
            for dx, dy in [(10, 0), (-10, 5), (0, -15), (12, 12)]:
                assert grid.pixel_to_hex(x + dx, y + dy) == pos

    def test_pixel_to_hex_zero_sum(self, grid):
        """Rounded pointer positions are always valid cube coordinates."""
        for px in range(0, 900, 37):
            for py in range(0, 700, 41):
                pos = grid.pixel_to_hex(px, py)
                assert pos.q + pos.r + pos.s == 0

    def test_pixel_to_valid_hex_off_board(self, grid):
        """Off-board pointers return None."""
        assert grid.pixel_to_valid_hex(0, 0) is None
        assert grid.pixel_to_valid_hex(450, 350) == HexPosition(0, 0)

    def test_hex_corners(self, grid):
        """Six corners, each hex_size away from the center."""
        pos = HexPosition(2, -1)
        cx, cy = grid.hex_to_pixel(pos)
        corners = grid.get_hex_corners(pos)
        assert len(corners) == 6
        for x, y in corners:
            assert math.hypot(x - cx, y - cy) == pytest.approx(36)
        # Pointy-top: first corner is at -30 degrees (upper right)
        assert corners[0][0] > cx
        assert corners[0][1] < cy
