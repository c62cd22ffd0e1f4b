"""Line of sight for Cog & Salvage combat.

Draws a straight line between two hexes by interpolating in cube space and
rounding each sample to the nearest hex. Only the interior samples are
checked against blockers, so a wall standing on either endpoint never
blocks sight.
"""

from typing import Iterable, List

from .hex_grid import HexPosition, cube_round


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def hex_line(start: HexPosition, end: HexPosition) -> List[HexPosition]:
    """
    Get all hexes along the straight line between two hexes.

    Args:
        start: First endpoint.
        end: Second endpoint.

    Returns:
        distance + 1 hexes, from start to end inclusive.
    """
    n = start.distance_to(end)
    if n == 0:
        return [start]

    results = []
    for i in range(n + 1):
        t = i / n
        results.append(
            cube_round(
                _lerp(start.q, end.q, t),
                _lerp(start.r, end.r, t),
                _lerp(start.s, end.s, t),
            )
        )
    return results


def has_line_of_sight(
    a: HexPosition, b: HexPosition, blockers: Iterable[HexPosition] = ()
) -> bool:
    """
    Check line of sight between two hexes.

    Args:
        a: Viewer position.
        b: Target position.
        blockers: Opaque positions (walls only in normal play).

    Returns:
        True if no interior hex of the line is a blocker.
    """
    if a == b:
        return True

    blocked = blockers if isinstance(blockers, (set, frozenset)) else set(blockers)
    if not blocked:
        return True

    line = hex_line(a, b)
    return not any(hex_ in blocked for hex_ in line[1:-1])
