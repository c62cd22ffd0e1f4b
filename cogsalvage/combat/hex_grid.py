"""Hex Grid System for Cog & Salvage combat.

Implements axial coordinates (q, r) on a pointy-top, hexagon-shaped board.
Supports pixel conversion, distance calculation, neighbor finding and
range queries.
"""

from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Tuple
import math


SQRT3 = math.sqrt(3)


def _round_half_up(value: float) -> int:
    """Round to nearest integer, halves toward +inf."""
    return int(math.floor(value + 0.5))


def cube_round(frac_q: float, frac_r: float, frac_s: float) -> "HexPosition":
    """
    Round fractional cube coordinates to the nearest hex.

    Each component is rounded independently, then the component with the
    largest rounding error is recomputed from the other two so that
    q + r + s == 0 holds exactly.

    Args:
        frac_q: Fractional q coordinate.
        frac_r: Fractional r coordinate.
        frac_s: Fractional s coordinate.

    Returns:
        Nearest HexPosition.
    """
    q = _round_half_up(frac_q)
    r = _round_half_up(frac_r)
    s = _round_half_up(frac_s)

    q_diff = abs(q - frac_q)
    r_diff = abs(r - frac_r)
    s_diff = abs(s - frac_s)

    if q_diff > r_diff and q_diff > s_diff:
        q = -r - s
    elif r_diff > s_diff:
        r = -q - s
    else:
        s = -q - r

    return HexPosition(q, r)


@dataclass(frozen=True)
class HexPosition:
    """
    Hex coordinate using axial coordinates.

    The third cube coordinate is implicit: s = -q - r.

    Attributes:
        q: Column axis.
        r: Row axis.
    """

    q: int
    r: int

    @property
    def s(self) -> int:
        """Implicit third cube coordinate."""
        return -self.q - self.r

    def to_cube(self) -> Tuple[int, int, int]:
        """
        Convert to cube coordinates.

        Returns:
            Tuple of (q, r, s) with q + r + s == 0.
        """
        return (self.q, self.r, self.s)

    def distance_to(self, other: "HexPosition") -> int:
        """
        Calculate hex distance to another position.

        Args:
            other: Target position.

        Returns:
            Distance in hex units.
        """
        dq = self.q - other.q
        dr = self.r - other.r
        return (abs(dq) + abs(dq + dr) + abs(dr)) // 2

    def get_neighbors(self) -> List["HexPosition"]:
        """
        Get all 6 adjacent hex positions (ignoring board bounds).

        The order follows HEX_DIRECTIONS and is relied upon by callers that
        resolve ties by first match.

        Returns:
            List of 6 neighboring HexPositions.
        """
        return [HexPosition(self.q + dq, self.r + dr) for dq, dr in HEX_DIRECTIONS]

    def __repr__(self) -> str:
        return f"Hex({self.q}, {self.r})"


# East, north-east, north-west, west, south-west, south-east
HEX_DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, 0),
    (-1, 1),
    (0, 1),
)


def hex_distance(a: HexPosition, b: HexPosition) -> int:
    """Hex distance between two positions."""
    return a.distance_to(b)


class HexGrid:
    """
    Hexagon-shaped combat board.

    The board holds every axial coordinate within `radius` rings of the
    origin hex. It is immutable once built and answers geometry queries by
    value; units and obstacles are tracked by the callers.
    """

    def __init__(
        self,
        hex_size: float,
        radius: int,
        origin_x: float = 0.0,
        origin_y: float = 0.0,
    ):
        """
        Build the grid.

        Args:
            hex_size: Distance from hex center to a corner, in pixels.
            radius: Number of rings around the origin hex.
            origin_x: Pixel x of the origin hex center.
            origin_y: Pixel y of the origin hex center.

        Raises:
            ValueError: If hex_size or radius is not positive.
        """
        if hex_size <= 0:
            raise ValueError(f"hex_size must be positive, got {hex_size}")
        if radius <= 0:
            raise ValueError(f"radius must be positive, got {radius}")

        self._hex_size = float(hex_size)
        self._radius = int(radius)
        self._origin_x = float(origin_x)
        self._origin_y = float(origin_y)

        # Pointy-top dimensions
        self.hex_width = SQRT3 * self._hex_size
        self.hex_height = 2 * self._hex_size

        self._hexes: Tuple[HexPosition, ...] = tuple(self._generate_hexes())
        self._valid: FrozenSet[HexPosition] = frozenset(self._hexes)

    def _generate_hexes(self) -> List[HexPosition]:
        hexes = []
        radius = self._radius
        for q in range(-radius, radius + 1):
            r1 = max(-radius, -q - radius)
            r2 = min(radius, -q + radius)
            for r in range(r1, r2 + 1):
                hexes.append(HexPosition(q, r))
        return hexes

    @property
    def hex_size(self) -> float:
        return self._hex_size

    @property
    def radius(self) -> int:
        return self._radius

    @property
    def origin(self) -> Tuple[float, float]:
        return (self._origin_x, self._origin_y)

    @property
    def hexes(self) -> Tuple[HexPosition, ...]:
        """All valid positions in generation order (q-major)."""
        return self._hexes

    def valid_coordinates(self) -> FrozenSet[HexPosition]:
        """
        Get the finite set of valid positions.

        Returns:
            Frozen set of every position on the board.
        """
        return self._valid

    def __len__(self) -> int:
        return len(self._hexes)

    def __contains__(self, position: object) -> bool:
        return position in self._valid

    def is_valid(self, position: HexPosition) -> bool:
        """
        Check if a position lies on the board.

        Args:
            position: Position to check.

        Returns:
            True if position is on the board.
        """
        return position in self._valid

    def hex_to_pixel(self, position: HexPosition) -> Tuple[float, float]:
        """
        Convert a hex position to the pixel coordinates of its center.

        Args:
            position: Hex position.

        Returns:
            (x, y) pixel coordinates.
        """
        x = self._hex_size * (SQRT3 * position.q + SQRT3 / 2 * position.r)
        y = self._hex_size * (3 / 2 * position.r)
        return (x + self._origin_x, y + self._origin_y)

    def pixel_to_hex(self, px: float, py: float) -> HexPosition:
        """
        Convert pixel coordinates to the hex containing them.

        The result may lie outside the board; use pixel_to_valid_hex when
        probing pointer positions.

        Args:
            px: Pixel x.
            py: Pixel y.

        Returns:
            Nearest HexPosition.
        """
        x = px - self._origin_x
        y = py - self._origin_y

        frac_q = (SQRT3 / 3 * x - 1 / 3 * y) / self._hex_size
        frac_r = (2 / 3 * y) / self._hex_size
        return cube_round(frac_q, frac_r, -frac_q - frac_r)

    def pixel_to_valid_hex(self, px: float, py: float) -> Optional[HexPosition]:
        """
        Convert pixel coordinates to a board position.

        Args:
            px: Pixel x.
            py: Pixel y.

        Returns:
            HexPosition, or None if the pixel is off the board.
        """
        position = self.pixel_to_hex(px, py)
        if not self.is_valid(position):
            return None
        return position

    def get_hex_corners(self, position: HexPosition) -> List[Tuple[float, float]]:
        """
        Get the 6 corner points of a hex (pointy-top).

        Args:
            position: Hex position.

        Returns:
            List of (x, y) pixel coordinates, clockwise from the upper right.
        """
        cx, cy = self.hex_to_pixel(position)
        corners = []
        for i in range(6):
            angle = math.radians(60 * i - 30)
            corners.append(
                (
                    cx + self._hex_size * math.cos(angle),
                    cy + self._hex_size * math.sin(angle),
                )
            )
        return corners

    def get_valid_neighbors(self, position: HexPosition) -> List[HexPosition]:
        """
        Get neighboring positions that are on the board.

        Args:
            position: Center position.

        Returns:
            List of valid neighboring positions in direction order.
        """
        return [n for n in position.get_neighbors() if n in self._valid]

    def distance(self, a: HexPosition, b: HexPosition) -> int:
        """Hex distance between two positions."""
        return a.distance_to(b)

    def hexes_in_range(self, origin: HexPosition, range_: int) -> List[HexPosition]:
        """
        Get all board positions within a certain range.

        Args:
            origin: Center position.
            range_: Maximum distance (inclusive).

        Returns:
            List of valid positions with distance <= range_.
        """
        results = []
        for dq in range(-range_, range_ + 1):
            for dr in range(max(-range_, -dq - range_), min(range_, -dq + range_) + 1):
                position = HexPosition(origin.q + dq, origin.r + dr)
                if position in self._valid:
                    results.append(position)
        return results

    def __repr__(self) -> str:
        return f"HexGrid(radius={self._radius}, hex_size={self._hex_size})"
