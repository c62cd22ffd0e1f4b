"""Tests for obstacles."""

import random

import pytest

from cogsalvage.combat.combat_unit import CombatUnit, UnitTeam
from cogsalvage.combat.hex_grid import HexGrid, HexPosition
from cogsalvage.combat.obstacles import (
    DEFAULT_OBSTACLES,
    Obstacle,
    ObstacleKind,
    get_blocked_positions,
    get_terrain_positions,
    get_wall_positions,
    obstacle_at,
    place_random_obstacles,
)


def create_test_unit(unit_id: int, position: HexPosition, team: UnitTeam = UnitTeam.ENEMY) -> CombatUnit:
    return CombatUnit(
        id=unit_id,
        name=f"Unit{unit_id}",
        team=team,
        position=position,
        max_hit_points=5,
        attack_damage=1,
    )


class TestObstacleQueries:
    """Tests for obstacle lookups."""

    def test_only_walls_block_sight(self):
        assert Obstacle(HexPosition(0, 0), ObstacleKind.WALL).blocks_sight
        assert not Obstacle(HexPosition(0, 0), ObstacleKind.TRAP).blocks_sight
        assert not Obstacle(HexPosition(0, 0), ObstacleKind.UNIT_OCCUPIED).blocks_sight

    def test_wall_positions(self):
        assert get_wall_positions(DEFAULT_OBSTACLES) == {HexPosition(2, -1), HexPosition(-2, 2)}

    def test_terrain_positions(self):
        obstacles = list(DEFAULT_OBSTACLES) + [
            Obstacle(HexPosition(3, 0), ObstacleKind.UNIT_OCCUPIED)
        ]
        assert get_terrain_positions(obstacles) == {
            HexPosition(2, -1),
            HexPosition(-2, 2),
            HexPosition(1, 2),
            HexPosition(-1, -2),
            HexPosition(3, 0),
        }

    def test_obstacle_at(self):
        trap = obstacle_at(DEFAULT_OBSTACLES, HexPosition(1, 2))
        assert trap is not None
        assert trap.kind == ObstacleKind.TRAP
        assert obstacle_at(DEFAULT_OBSTACLES, HexPosition(0, 0)) is None


class TestBlockedPositions:
    """Tests for the movement obstacle set."""

    @pytest.fixture
    def units(self):
        return [
            create_test_unit(0, HexPosition(0, 0), UnitTeam.PLAYER),
            create_test_unit(1, HexPosition(3, 0)),
            create_test_unit(2, HexPosition(0, 3)),
        ]

    def test_includes_terrain_units_and_target(self, units):
        player, mover, other = units

        blocked = get_blocked_positions(DEFAULT_OBSTACLES, units, mover, player)

        assert get_terrain_positions(DEFAULT_OBSTACLES) <= blocked
        assert other.position in blocked
        assert player.position in blocked
        assert mover.position not in blocked

    def test_target_excluded_when_chasing(self, units):
        player, mover, other = units

        blocked = get_blocked_positions((), units, mover, player, include_target=False)

        assert blocked == {other.position}

    def test_dead_units_ignored(self, units):
        player, mover, other = units
        other.take_damage(100)

        blocked = get_blocked_positions((), units, mover, player)

        assert blocked == {player.position}


class TestRandomObstacles:
    """Tests for place_random_obstacles."""

    def test_counts_and_exclusions(self):
        grid = HexGrid(hex_size=36, radius=3)
        obstacles = place_random_obstacles(
            grid, walls=3, traps=2, rng=random.Random(7), exclude=[HexPosition(0, 0)]
        )

        positions = [o.position for o in obstacles]
        assert [o.kind for o in obstacles] == [ObstacleKind.WALL] * 3 + [ObstacleKind.TRAP] * 2
        assert len(set(positions)) == 5
        assert HexPosition(0, 0) not in positions
        assert all(grid.is_valid(p) for p in positions)

    def test_seeded_layout_repeats(self):
        grid = HexGrid(hex_size=36, radius=5)
        a = place_random_obstacles(grid, 4, 4, random.Random(1))
        b = place_random_obstacles(grid, 4, 4, random.Random(1))
        assert a == b

    def test_not_enough_room(self):
        grid = HexGrid(hex_size=36, radius=1)
        with pytest.raises(ValueError):
            place_random_obstacles(grid, walls=5, traps=3, rng=random.Random(0))
