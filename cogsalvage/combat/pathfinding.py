"""A* Pathfinding for Cog & Salvage combat.

Implements A* pathfinding on the hex grid for unit movement.
Frontier ties are broken by insertion order so path choice is deterministic.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Set
from heapq import heappush, heappop
from itertools import count

from .hex_grid import HexGrid, HexPosition


@dataclass(order=True)
class PathNode:
    """A* search node."""

    f_score: int  # g + h (total estimated cost)
    sequence: int  # Insertion order, breaks f-score ties
    position: HexPosition = field(compare=False)
    g_score: int = field(compare=False)  # Actual cost from start


class PathFinder:
    """
    A* pathfinding on hex grid.

    Usage:
        finder = PathFinder(grid)
        path = finder.find_path(start, goal, blocked_positions)
    """

    def __init__(self, grid: HexGrid):
        """
        Initialize pathfinder.

        Args:
            grid: The hex grid to pathfind on.
        """
        self.grid = grid

    def find_path(
        self,
        start: HexPosition,
        goal: HexPosition,
        blocked: Optional[Set[HexPosition]] = None,
    ) -> Optional[List[HexPosition]]:
        """
        Find shortest path from start to goal.

        The start is always treated as free. A goal that is itself blocked
        is still searched for, and therefore never reached.

        Args:
            start: Starting position.
            goal: Target position.
            blocked: Set of impassable positions (walls, traps, units).

        Returns:
            Path as list of positions (excluding start, including goal),
            or None if no path exists.
        """
        if not self.grid.is_valid(start) or not self.grid.is_valid(goal):
            return None

        if start == goal:
            return []

        if blocked is None:
            blocked = set()

        sequence = count()
        open_set: List[PathNode] = []
        closed_set: Set[HexPosition] = set()
        g_scores: Dict[HexPosition, int] = {start: 0}
        came_from: Dict[HexPosition, HexPosition] = {}

        heappush(
            open_set,
            PathNode(
                f_score=self._heuristic(start, goal),
                sequence=next(sequence),
                position=start,
                g_score=0,
            ),
        )

        while open_set:
            current = heappop(open_set)

            if current.position == goal:
                return self._reconstruct_path(came_from, goal)

            # Stale entry superseded by a cheaper one
            if current.position in closed_set:
                continue

            closed_set.add(current.position)

            for neighbor_pos in self.grid.get_valid_neighbors(current.position):
                if neighbor_pos in blocked or neighbor_pos in closed_set:
                    continue

                # All moves cost 1
                tentative_g = current.g_score + 1

                if neighbor_pos in g_scores and tentative_g >= g_scores[neighbor_pos]:
                    continue

                g_scores[neighbor_pos] = tentative_g
                came_from[neighbor_pos] = current.position
                heappush(
                    open_set,
                    PathNode(
                        f_score=tentative_g + self._heuristic(neighbor_pos, goal),
                        sequence=next(sequence),
                        position=neighbor_pos,
                        g_score=tentative_g,
                    ),
                )

        return None

    def get_next_step(
        self,
        start: HexPosition,
        goal: HexPosition,
        blocked: Optional[Set[HexPosition]] = None,
    ) -> Optional[HexPosition]:
        """
        Get just the first step of a path.

        Args:
            start: Starting position.
            goal: Target position.
            blocked: Set of blocked positions.

        Returns:
            Next position to move to, or None if no path or already there.
        """
        path = self.find_path(start, goal, blocked)
        if path:
            return path[0]
        return None

    def _heuristic(self, a: HexPosition, b: HexPosition) -> int:
        """Heuristic function: hex distance."""
        return a.distance_to(b)

    def _reconstruct_path(
        self, came_from: Dict[HexPosition, HexPosition], goal: HexPosition
    ) -> List[HexPosition]:
        """Reconstruct path to goal (excluding start)."""
        path = [goal]
        current = goal
        while current in came_from:
            current = came_from[current]
            path.append(current)
        path.pop()  # start
        path.reverse()
        return path


def find_path(
    grid: HexGrid,
    start: HexPosition,
    goal: HexPosition,
    blocked: Optional[Set[HexPosition]] = None,
) -> Optional[List[HexPosition]]:
    """Convenience wrapper around PathFinder.find_path."""
    return PathFinder(grid).find_path(start, goal, blocked)


def get_walkable_neighbors(
    grid: HexGrid,
    position: HexPosition,
    blocked: Optional[Set[HexPosition]] = None,
) -> List[HexPosition]:
    """
    Get all walkable neighbor positions.

    Args:
        grid: The hex grid.
        position: Center position.
        blocked: Set of blocked positions.

    Returns:
        List of walkable neighbor positions, in direction order.
    """
    if blocked is None:
        blocked = set()

    return [n for n in grid.get_valid_neighbors(position) if n not in blocked]
