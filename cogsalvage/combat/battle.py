"""Battle orchestration for Cog & Salvage.

Owns the unit arena and sequences turns: the player acts through
move_player / player_attack, then every live enemy takes a full turn in id
order. Enemy actions are applied one at a time so each decision sees the
previous step.

Usage:
    configure_logging()
    battle = Battle.create(seed=7)
    battle.move_player(HexPosition(1, 0))
    actions = battle.run_enemy_phase()
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence
import logging
import random

from cogsalvage.config import Settings, settings as default_settings
from cogsalvage.data.loaders import generate_enemy_spawn_list, get_enemy_type

from .combat_unit import CombatUnit, UnitTeam
from .enemy_ai import Action, Attack, MoveTo, apply_action, run_enemy_turn
from .hex_grid import HexGrid, HexPosition
from .obstacles import (
    DEFAULT_OBSTACLES,
    Obstacle,
    ObstacleKind,
    get_wall_positions,
    obstacle_at,
    place_random_obstacles,
)
from .pathfinding import PathFinder
from .visibility import has_line_of_sight

logger = logging.getLogger(__name__)

PLAYER_ID = 0


class BattlePhase(Enum):
    """Battle phases."""

    PLAYER_TURN = auto()  # Waiting for player input
    ENEMY_TURN = auto()  # Enemies acting
    FINISHED = auto()  # One side defeated


@dataclass
class BattleState:
    """Current state of the battle."""

    phase: BattlePhase = BattlePhase.PLAYER_TURN
    turn: int = 1

    # Battle events log
    events: List[Dict[str, Any]] = field(default_factory=list)


class Battle:
    """
    One battle on a hex board: a player robot against a squad of enemies.
    """

    def __init__(
        self,
        grid: HexGrid,
        player: CombatUnit,
        enemies: Sequence[CombatUnit],
        obstacles: Iterable[Obstacle] = (),
        trap_damage: int = 1,
    ):
        """
        Initialize battle.

        Args:
            grid: The board.
            player: The player's unit.
            enemies: Enemy units.
            obstacles: Walls and traps.
            trap_damage: Damage dealt when the player ends a move on a trap.

        Raises:
            ValueError: On duplicate unit ids or units placed off the board.
        """
        self.grid = grid
        self.obstacles: List[Obstacle] = list(obstacles)
        self.trap_damage = trap_damage
        self.pathfinder = PathFinder(grid)

        self.units: Dict[int, CombatUnit] = {}
        for unit in (player, *enemies):
            if unit.id in self.units:
                raise ValueError(f"Duplicate unit id: {unit.id}")
            if not grid.is_valid(unit.position):
                raise ValueError(f"Unit {unit.id} placed off the board at {unit.position}")
            self.units[unit.id] = unit

        self.player_id = player.id
        self.state = BattleState()
        self._check_finished()

    @classmethod
    def create(
        cls,
        spawn_list: Optional[Sequence[str]] = None,
        obstacles: Optional[Iterable[Obstacle]] = None,
        random_walls: int = 0,
        random_traps: int = 0,
        seed: Optional[int] = None,
        config: Optional[Settings] = None,
    ) -> "Battle":
        """
        Build a battle from settings and the enemy type table.

        Args:
            spawn_list: Enemy type ids; generated at random when omitted.
            obstacles: Fixed obstacles; the default layout when omitted and
                no random obstacles are requested.
            random_walls: Walls to sample at random.
            random_traps: Traps to sample at random.
            seed: Seed for every random choice in setup.
            config: Settings to use instead of the module defaults.

        Returns:
            New Battle in the player's turn.

        Raises:
            KeyError: On an unknown enemy type id.
            ValueError: If there is no room to spawn every enemy.
        """
        config = config or default_settings
        if seed is None:
            seed = config.RANDOM_SEED
        rng = random.Random(seed)

        grid = HexGrid(config.HEX_SIZE, config.GRID_RADIUS, config.ORIGIN_X, config.ORIGIN_Y)
        player_start = HexPosition(0, 0)
        player = CombatUnit(
            id=PLAYER_ID,
            name="Player",
            team=UnitTeam.PLAYER,
            position=player_start,
            max_hit_points=config.PLAYER_HP,
            attack_damage=config.PLAYER_DAMAGE,
            attack_range=config.PLAYER_RANGE,
            max_action_points=config.PLAYER_AP,
            max_attacks_per_turn=config.PLAYER_AP,
            type_id="player",
        )

        if obstacles is not None:
            layout = list(obstacles)
        elif random_walls or random_traps:
            layout = place_random_obstacles(
                grid, random_walls, random_traps, rng, exclude=[player_start]
            )
        else:
            layout = [o for o in DEFAULT_OBSTACLES if grid.is_valid(o.position)]

        if spawn_list is None:
            spawn_list = generate_enemy_spawn_list(config.ENEMY_COUNT, rng=rng)

        blocked = {o.position for o in layout} | {player_start}
        candidates = [
            h
            for h in grid.hexes
            if h not in blocked and h.distance_to(player_start) >= config.MIN_SPAWN_DISTANCE
        ]
        if len(spawn_list) > len(candidates):
            raise ValueError(
                f"Cannot spawn {len(spawn_list)} enemies on {len(candidates)} free hexes"
            )
        spawn_points = rng.sample(candidates, len(spawn_list))

        enemies = []
        for i, (type_id, position) in enumerate(zip(spawn_list, spawn_points), start=1):
            enemy_type = get_enemy_type(type_id)
            if enemy_type is None:
                raise KeyError(f"Unknown enemy type: {type_id}")
            enemies.append(CombatUnit.from_enemy_type(i, enemy_type, position))

        logger.info(
            "Battle created: %d enemies, %d obstacles, seed=%s",
            len(enemies),
            len(layout),
            seed,
        )
        return cls(grid, player, enemies, layout, trap_damage=config.TRAP_DAMAGE)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def player(self) -> CombatUnit:
        return self.units[self.player_id]

    @property
    def enemies(self) -> List[CombatUnit]:
        """Enemy units in id order, dead ones included."""
        return [u for uid, u in sorted(self.units.items()) if uid != self.player_id]

    @property
    def live_enemies(self) -> List[CombatUnit]:
        return [u for u in self.enemies if u.alive]

    @property
    def all_units(self) -> List[CombatUnit]:
        return list(self.units.values())

    @property
    def phase(self) -> BattlePhase:
        return self.state.phase

    def is_over(self) -> bool:
        """Check if either side has been wiped out."""
        return not self.player.alive or not self.live_enemies

    @property
    def winner(self) -> Optional[UnitTeam]:
        """Winning team, or None while the battle is running."""
        if not self.player.alive:
            return UnitTeam.ENEMY
        if not self.live_enemies:
            return UnitTeam.PLAYER
        return None

    def unit_at(self, position: HexPosition) -> Optional[CombatUnit]:
        """Get the live unit on a hex."""
        for unit in self.units.values():
            if unit.alive and unit.position == position:
                return unit
        return None

    def obstacle_at(self, position: HexPosition) -> Optional[Obstacle]:
        return obstacle_at(self.obstacles, position)

    def wall_positions(self) -> set:
        return get_wall_positions(self.obstacles)

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------

    def player_move_cost(self, position: HexPosition) -> Optional[int]:
        """
        Get the AP cost of moving the player to a hex.

        Walls and live enemies block the way, traps do not.

        Args:
            position: Destination hex.

        Returns:
            AP cost, or None if the move is not legal right now.
        """
        player = self.player
        if self.state.phase != BattlePhase.PLAYER_TURN or not player.alive:
            return None
        if not self.grid.is_valid(position) or position == player.position:
            return None

        obstacle = self.obstacle_at(position)
        if obstacle is not None and obstacle.kind == ObstacleKind.WALL:
            return None
        if self.unit_at(position) is not None:
            return None

        blocked = self.wall_positions()
        blocked.update(u.position for u in self.live_enemies)
        path = self.pathfinder.find_path(player.position, position, blocked)
        if path is None or len(path) > player.action_points:
            return None
        return len(path)

    def move_player(self, position: HexPosition) -> bool:
        """
        Move the player, paying one AP per hex walked.

        Args:
            position: Destination hex.

        Returns:
            True if the player moved.
        """
        cost = self.player_move_cost(position)
        if cost is None:
            return False

        player = self.player
        player.spend_action_points(cost)
        player.position = position
        self._log("player_move", unit_id=player.id, position=position, cost=cost)

        obstacle = self.obstacle_at(position)
        if obstacle is not None and obstacle.kind == ObstacleKind.TRAP:
            dealt = player.take_damage(self.trap_damage)
            self._log("trap", unit_id=player.id, position=position, damage=dealt)
            logger.info("Player triggered trap at %s for %d damage", position, dealt)

        self._check_finished()
        return True

    def player_attack(self, enemy_id: int) -> bool:
        """
        Attack an enemy within the player's range.

        Args:
            enemy_id: Target unit id.

        Returns:
            True if the attack happened.
        """
        player = self.player
        target = self.units.get(enemy_id)
        if self.state.phase != BattlePhase.PLAYER_TURN:
            return False
        if target is None or target.id == self.player_id or not target.alive:
            return False
        if player.distance_to(target) > player.attack_range:
            return False
        if player.attack_range > 1 and not self._player_can_see(target):
            return False
        if not player.record_attack():
            return False

        dealt = self.apply_action(Attack(player.id, target.id, player.attack_damage))
        logger.info("Player hits %s for %d", target.name, dealt)
        return True

    def _player_can_see(self, target: CombatUnit) -> bool:
        return has_line_of_sight(self.player.position, target.position, self.wall_positions())

    # ------------------------------------------------------------------
    # Enemy phase
    # ------------------------------------------------------------------

    def apply_action(self, action: Action) -> int:
        """
        Apply an action to the arena and log it.

        Returns:
            Damage dealt (0 for moves).
        """
        dealt = apply_action(action, self.units)
        if isinstance(action, MoveTo):
            self._log("move", unit_id=action.unit_id, position=action.position)
        else:
            target = self.units[action.target_id]
            self._log(
                "attack",
                unit_id=action.unit_id,
                target_id=action.target_id,
                damage=dealt,
            )
            if not target.alive:
                self._log("death", unit_id=target.id)
                logger.info("%s destroyed", target.name)
        self._check_finished()
        return dealt

    def iter_enemy_phase(self) -> Iterator[Action]:
        """
        Run every live enemy's turn, yielding each action after applying it.

        The caller may pause between actions (animation). The player's AP
        is refilled when the phase completes. Closing the iterator early
        skips the remaining enemy actions and still hands the turn back to
        the player.
        """
        if self.state.phase != BattlePhase.PLAYER_TURN:
            return

        self.state.phase = BattlePhase.ENEMY_TURN
        logger.info("Enemy phase, turn %d", self.state.turn)

        try:
            for enemy in self.live_enemies:
                if self.is_over():
                    break
                if not enemy.alive:
                    continue

                enemy.reset_turn()
                turn = run_enemy_turn(
                    self.grid,
                    enemy,
                    self.all_units,
                    self.player,
                    self.obstacles,
                    is_battle_over=self.is_over,
                )
                for action in turn:
                    self.apply_action(action)
                    yield action
        finally:
            self._end_enemy_phase()

    def _end_enemy_phase(self) -> None:
        if self._check_finished():
            return

        self.player.reset_turn()
        self.state.turn += 1
        self.state.phase = BattlePhase.PLAYER_TURN

    def run_enemy_phase(self) -> List[Action]:
        """Run the enemy phase to completion."""
        return list(self.iter_enemy_phase())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_finished(self) -> bool:
        if self.state.phase != BattlePhase.FINISHED and self.is_over():
            self.state.phase = BattlePhase.FINISHED
            self._log("finished", winner=self.winner.value)
            logger.info("Battle finished, winner: %s", self.winner.value)
        return self.state.phase == BattlePhase.FINISHED

    def _log(self, event_type: str, **data: Any) -> None:
        self.state.events.append({"turn": self.state.turn, "type": event_type, **data})
