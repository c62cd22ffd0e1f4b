"""Enemy AI for Cog & Salvage combat.

Each enemy turn is a small state machine (IDLE -> ACTING -> DONE) that
yields one action at a time. The AI spends the acting unit's action points
and attack allowance as it decides; the caller applies each yielded action
to the shared battle state (position change, damage) before asking for the
next one, so every decision sees the effects of the previous step.

Usage:
    turn = run_enemy_turn(grid, enemy, all_units, player, obstacles)
    for action in turn:
        apply_action(action, units_by_id)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import (
    Callable,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    Union,
)
import logging

from .combat_unit import CombatUnit, UnitBehavior
from .hex_grid import HexGrid, HexPosition
from .obstacles import Obstacle, get_blocked_positions, get_wall_positions
from .pathfinding import PathFinder, get_walkable_neighbors
from .visibility import has_line_of_sight

logger = logging.getLogger(__name__)


class AITurnState(Enum):
    """Enemy turn state."""

    IDLE = auto()  # Turn not started
    ACTING = auto()  # Producing actions
    DONE = auto()  # Turn over


class StepOutcome(Enum):
    """Result of a single movement attempt."""

    MOVED = auto()
    NO_PATH_FOUND = auto()  # Search space exhausted
    NO_VALID_MOVE = auto()  # No legal neighbor, or next hex is occupied


@dataclass(frozen=True)
class MoveTo:
    """Move a unit one hex."""

    unit_id: int
    position: HexPosition


@dataclass(frozen=True)
class Attack:
    """Deal damage to a target."""

    unit_id: int
    target_id: int
    damage: int


Action = Union[MoveTo, Attack]


class EnemyTurn:
    """
    One enemy's turn, produced lazily.

    The turn is a finite, non-restartable iterator of actions. Once it has
    been exhausted (state DONE), iterating it again yields nothing.
    """

    def __init__(
        self,
        grid: HexGrid,
        unit: CombatUnit,
        all_units: Sequence[CombatUnit],
        target: CombatUnit,
        obstacles: Sequence[Obstacle] = (),
        is_battle_over: Optional[Callable[[], bool]] = None,
        pathfinder: Optional[PathFinder] = None,
    ):
        self.grid = grid
        self.unit = unit
        self.all_units = all_units
        self.target = target
        self.obstacles = tuple(obstacles)
        self.pathfinder = pathfinder or PathFinder(grid)
        self._is_battle_over = is_battle_over

        self._walls = get_wall_positions(self.obstacles)
        self.state = AITurnState.IDLE
        self.actions_taken: List[Action] = []
        self._actions = self._run()

    def __iter__(self) -> "EnemyTurn":
        return self

    def __next__(self) -> Action:
        action = next(self._actions)
        self.actions_taken.append(action)
        return action

    # ------------------------------------------------------------------
    # Queries against the current shared state
    # ------------------------------------------------------------------

    def _battle_active(self) -> bool:
        if not self.unit.alive or not self.target.alive:
            return False
        if self._is_battle_over is not None and self._is_battle_over():
            return False
        return True

    def _distance(self) -> int:
        return self.unit.distance_to(self.target)

    def _has_line_of_sight(self) -> bool:
        return has_line_of_sight(self.unit.position, self.target.position, self._walls)

    def _occupied_by_other(self, position: HexPosition) -> bool:
        return any(
            u.alive and u.id != self.unit.id and u.position == position
            for u in self.all_units
        )

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def _run(self) -> Iterator[Action]:
        unit = self.unit

        if not self._battle_active() or unit.action_points < 1:
            logger.debug("%r skips turn", unit)
            self.state = AITurnState.DONE
            return

        self.state = AITurnState.ACTING
        try:
            if unit.behavior == UnitBehavior.MELEE:
                yield from self._melee_turn()
            else:
                yield from self._ranged_turn()
        finally:
            self.state = AITurnState.DONE
            logger.debug("%r ends turn", unit)

    def _melee_turn(self) -> Iterator[Action]:
        """Chase the target and hit it while adjacent."""
        unit = self.unit
        while unit.action_points > 0 and self._battle_active():
            if self._distance() == 1 and unit.can_attack:
                yield self._attack()
                continue

            outcome, step = self._step_toward_target()
            if step is None:
                logger.debug("%r cannot advance: %s", unit, outcome.name)
                break
            yield MoveTo(unit.id, step)

    def _ranged_turn(self) -> Iterator[Action]:
        """Close to range, fire once, then back off to preferred distance."""
        unit = self.unit

        # Approach
        distance = self._distance()
        in_sight = self._has_line_of_sight()
        while (
            (distance > unit.attack_range or not in_sight)
            and unit.action_points >= 1
            and self._battle_active()
        ):
            outcome, step = self._step_toward_target()
            if step is None:
                logger.debug("%r cannot approach: %s", unit, outcome.name)
                break
            yield MoveTo(unit.id, step)
            distance = self._distance()
            in_sight = self._has_line_of_sight()

        # Attack, at most once per turn
        if (
            unit.can_attack
            and distance <= unit.attack_range
            and in_sight
            and self._battle_active()
        ):
            yield self._attack()
            distance = self._distance()

        # Retreat
        while (
            distance < unit.preferred_distance
            and unit.action_points >= 1
            and self._battle_active()
        ):
            outcome, step = self._step_away_from_target()
            if step is None:
                logger.debug("%r cannot retreat: %s", unit, outcome.name)
                break
            yield MoveTo(unit.id, step)
            distance = self._distance()

    # ------------------------------------------------------------------
    # Single steps
    # ------------------------------------------------------------------

    def _attack(self) -> Attack:
        self.unit.record_attack()
        logger.debug("%r attacks %r for %d", self.unit, self.target, self.unit.attack_damage)
        return Attack(self.unit.id, self.target.id, self.unit.attack_damage)

    def _step_toward_target(self) -> Tuple[StepOutcome, Optional[HexPosition]]:
        """Pick the first hex of a path to the target and pay for it."""
        blocked = get_blocked_positions(
            self.obstacles, self.all_units, self.unit, self.target, include_target=False
        )
        path = self.pathfinder.find_path(self.unit.position, self.target.position, blocked)
        if not path:
            return StepOutcome.NO_PATH_FOUND, None

        step = path[0]
        if step == self.target.position or self._occupied_by_other(step):
            return StepOutcome.NO_VALID_MOVE, None

        self.unit.spend_action_points(1)
        return StepOutcome.MOVED, step

    def _step_away_from_target(self) -> Tuple[StepOutcome, Optional[HexPosition]]:
        """Pick the first neighbor that strictly increases distance to the target."""
        blocked = get_blocked_positions(
            self.obstacles, self.all_units, self.unit, self.target, include_target=True
        )
        target_pos = self.target.position
        best: Optional[HexPosition] = None
        best_distance = self._distance()

        for neighbor in get_walkable_neighbors(self.grid, self.unit.position, blocked):
            distance = neighbor.distance_to(target_pos)
            if distance > best_distance:
                best = neighbor
                best_distance = distance

        if best is None:
            return StepOutcome.NO_VALID_MOVE, None

        self.unit.spend_action_points(1)
        return StepOutcome.MOVED, best


def run_enemy_turn(
    grid: HexGrid,
    unit: CombatUnit,
    all_units: Sequence[CombatUnit],
    target: CombatUnit,
    obstacles: Sequence[Obstacle] = (),
    is_battle_over: Optional[Callable[[], bool]] = None,
) -> EnemyTurn:
    """
    Start an enemy's turn.

    The unit's turn budget must already be refilled (CombatUnit.reset_turn).

    Args:
        grid: The board.
        unit: The acting enemy (read/write).
        all_units: Every unit in the battle (read-only).
        target: The unit being attacked.
        obstacles: Terrain obstacles.
        is_battle_over: Optional check for a concluded battle.

    Returns:
        Iterator of actions the caller must apply in order.
    """
    return EnemyTurn(grid, unit, all_units, target, obstacles, is_battle_over)


def apply_action(action: Action, units: Mapping[int, CombatUnit]) -> int:
    """
    Apply an action to unit state.

    Args:
        action: Action yielded by an EnemyTurn.
        units: Unit arena keyed by id.

    Returns:
        Damage dealt (0 for moves).
    """
    if isinstance(action, MoveTo):
        units[action.unit_id].position = action.position
        return 0

    attacker = units[action.unit_id]
    dealt = units[action.target_id].take_damage(action.damage)
    attacker.total_damage_dealt += dealt
    return dealt


def execute_enemy_turn(
    grid: HexGrid,
    unit: CombatUnit,
    all_units: Sequence[CombatUnit],
    target: CombatUnit,
    obstacles: Sequence[Obstacle] = (),
) -> List[Action]:
    """
    Run a whole enemy turn synchronously, applying each action as it comes.

    Returns:
        Actions in the order they were applied.
    """
    units: Dict[int, CombatUnit] = {u.id: u for u in all_units}
    units[target.id] = target
    units[unit.id] = unit

    actions = []
    for action in run_enemy_turn(grid, unit, all_units, target, obstacles):
        apply_action(action, units)
        actions.append(action)
    return actions
