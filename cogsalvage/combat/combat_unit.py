"""Combat Unit for Cog & Salvage.

Player and enemy robots share this shape. Behavior differences (melee vs
ranged) are carried as a tag and dispatched by the enemy AI.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from .hex_grid import HexPosition

if TYPE_CHECKING:
    from cogsalvage.data.models.enemy_type import EnemyType


class UnitTeam(Enum):
    """Team identification."""

    PLAYER = "player"
    ENEMY = "enemy"


class UnitBehavior(Enum):
    """AI behavior tag."""

    MELEE = "melee"  # Chase and hit
    RANGED = "ranged"  # Close to range, shoot once, back off


@dataclass
class CombatUnit:
    """
    A unit participating in combat.

    `id` is the unit's stable key in the battle's unit arena.
    """

    id: int
    name: str
    team: UnitTeam
    position: HexPosition

    max_hit_points: int
    attack_damage: int
    attack_range: int = 1
    max_action_points: int = 3
    max_attacks_per_turn: int = 1

    behavior: UnitBehavior = UnitBehavior.MELEE
    preferred_distance: int = 1  # Only meaningful for RANGED

    type_id: str = ""

    # Mutable combat state (filled in __post_init__ when left at -1)
    hit_points: int = -1
    action_points: int = -1
    attacks_used_this_turn: int = 0
    alive: bool = True

    # Combat statistics
    total_damage_dealt: int = 0
    total_damage_taken: int = 0

    def __post_init__(self):
        if self.max_hit_points <= 0:
            raise ValueError(f"max_hit_points must be positive, got {self.max_hit_points}")
        if self.hit_points < 0:
            self.hit_points = self.max_hit_points
        if self.action_points < 0:
            self.action_points = self.max_action_points
        self.hit_points = min(self.hit_points, self.max_hit_points)
        self.action_points = min(self.action_points, self.max_action_points)
        if self.hit_points == 0:
            self.alive = False

    @classmethod
    def from_enemy_type(
        cls,
        unit_id: int,
        enemy_type: "EnemyType",
        position: HexPosition,
    ) -> "CombatUnit":
        """
        Create an enemy unit from its type table entry.

        Args:
            unit_id: Arena key for the new unit.
            enemy_type: Static type configuration.
            position: Spawn hex.

        Returns:
            New CombatUnit at full HP and AP.
        """
        return cls(
            id=unit_id,
            name=enemy_type.name,
            team=UnitTeam.ENEMY,
            position=position,
            max_hit_points=enemy_type.hp,
            attack_damage=enemy_type.damage,
            attack_range=enemy_type.range,
            max_action_points=enemy_type.ap,
            max_attacks_per_turn=enemy_type.max_attacks_per_turn,
            behavior=UnitBehavior(enemy_type.ai_type),
            preferred_distance=enemy_type.preferred_distance,
            type_id=enemy_type.id,
        )

    @property
    def is_ranged(self) -> bool:
        return self.behavior == UnitBehavior.RANGED

    @property
    def can_attack(self) -> bool:
        """Check if unit may spend an attack this turn."""
        return (
            self.alive
            and self.attacks_used_this_turn < self.max_attacks_per_turn
            and self.action_points >= 1
        )

    def distance_to(self, other: "CombatUnit") -> int:
        """Hex distance to another unit."""
        return self.position.distance_to(other.position)

    def reset_turn(self) -> None:
        """Refill action points and clear the attack counter."""
        self.action_points = self.max_action_points
        self.attacks_used_this_turn = 0

    def spend_action_points(self, amount: int = 1) -> bool:
        """
        Spend action points.

        Args:
            amount: Points to spend.

        Returns:
            True if the unit could afford it.
        """
        if amount < 0 or self.action_points < amount:
            return False
        self.action_points -= amount
        return True

    def record_attack(self) -> bool:
        """
        Spend 1 AP and one attack of this turn's allowance.

        Returns:
            True if the attack was permitted.
        """
        if not self.can_attack:
            return False
        self.action_points -= 1
        self.attacks_used_this_turn += 1
        return True

    def take_damage(self, amount: int) -> int:
        """
        Receive damage.

        Args:
            amount: Damage amount.

        Returns:
            Actual damage taken (capped at remaining HP).
        """
        if not self.alive or amount <= 0:
            return 0

        taken = min(amount, self.hit_points)
        self.hit_points -= taken
        self.total_damage_taken += taken

        if self.hit_points == 0:
            self.alive = False

        return taken

    def __repr__(self) -> str:
        return (
            f"{self.name}#{self.id} at {self.position} "
            f"({self.hit_points}/{self.max_hit_points} HP, {self.action_points} AP)"
        )
