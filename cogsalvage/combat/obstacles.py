"""Obstacles for Cog & Salvage combat.

Obstacles are supplied per query rather than owned by the grid. Callers
assemble the subset relevant to the query: walls and traps block movement,
only walls block line of sight.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Set, TYPE_CHECKING
import random

from .hex_grid import HexGrid, HexPosition

if TYPE_CHECKING:
    from .combat_unit import CombatUnit


class ObstacleKind(Enum):
    """Obstacle classification."""

    WALL = "wall"  # Blocks movement and sight
    TRAP = "trap"  # Blocks enemy pathing, hurts whoever steps on it
    UNIT_OCCUPIED = "unit"  # A live unit stands here


@dataclass(frozen=True)
class Obstacle:
    """A blocked hex."""

    position: HexPosition
    kind: ObstacleKind

    @property
    def blocks_sight(self) -> bool:
        return self.kind == ObstacleKind.WALL


# Fixed layout used by the prototype arena (radius 5)
DEFAULT_OBSTACLES: tuple = (
    Obstacle(HexPosition(2, -1), ObstacleKind.WALL),
    Obstacle(HexPosition(-2, 2), ObstacleKind.WALL),
    Obstacle(HexPosition(1, 2), ObstacleKind.TRAP),
    Obstacle(HexPosition(-1, -2), ObstacleKind.TRAP),
)


def obstacle_at(
    obstacles: Iterable[Obstacle], position: HexPosition
) -> Optional[Obstacle]:
    """
    Find the obstacle on a hex.

    Args:
        obstacles: Obstacles to search.
        position: Hex to check.

    Returns:
        The first obstacle on that hex, or None.
    """
    for obstacle in obstacles:
        if obstacle.position == position:
            return obstacle
    return None


def get_wall_positions(obstacles: Iterable[Obstacle]) -> Set[HexPosition]:
    """Positions that block line of sight."""
    return {o.position for o in obstacles if o.blocks_sight}


def get_terrain_positions(obstacles: Iterable[Obstacle]) -> Set[HexPosition]:
    """Positions that block movement (every obstacle kind does)."""
    return {o.position for o in obstacles}


def get_blocked_positions(
    obstacles: Iterable[Obstacle],
    units: Iterable["CombatUnit"],
    mover: "CombatUnit",
    target: Optional["CombatUnit"] = None,
    include_target: bool = True,
) -> Set[HexPosition]:
    """
    Assemble the movement obstacle set for one unit.

    Walls, traps and every other live unit are blocked. The target's hex is
    blocked unless include_target is False, which is the case when pathing
    toward the target so the path can end next to it.

    Args:
        obstacles: Terrain obstacles.
        units: All units in the battle (dead ones are ignored).
        mover: The unit that is moving (never blocks itself).
        target: The unit the mover is chasing or fleeing.
        include_target: Whether the target's hex is blocked.

    Returns:
        Set of blocked positions.
    """
    blocked = get_terrain_positions(obstacles)
    for unit in units:
        if unit.id == mover.id or not unit.alive:
            continue
        if target is not None and unit.id == target.id:
            continue
        blocked.add(unit.position)

    if target is not None and include_target and target.alive:
        blocked.add(target.position)

    return blocked


def place_random_obstacles(
    grid: HexGrid,
    walls: int,
    traps: int,
    rng: Optional[random.Random] = None,
    exclude: Optional[Iterable[HexPosition]] = None,
) -> List[Obstacle]:
    """
    Sample obstacle positions at random.

    Args:
        grid: The board.
        walls: Number of walls to place.
        traps: Number of traps to place.
        rng: Random number generator (seed it for deterministic layouts).
        exclude: Positions that must stay free (spawns, player start).

    Returns:
        List of obstacles, walls first.

    Raises:
        ValueError: If the board has too few free hexes.
    """
    rng = rng or random.Random()
    excluded = set(exclude or ())
    candidates = [h for h in grid.hexes if h not in excluded]

    if walls + traps > len(candidates):
        raise ValueError(
            f"Cannot place {walls + traps} obstacles on {len(candidates)} free hexes"
        )

    chosen = rng.sample(candidates, walls + traps)
    obstacles = [Obstacle(pos, ObstacleKind.WALL) for pos in chosen[:walls]]
    obstacles.extend(Obstacle(pos, ObstacleKind.TRAP) for pos in chosen[walls:])
    return obstacles
