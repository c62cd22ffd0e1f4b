"""Combat core for Cog & Salvage.

This module provides the deterministic battle engine:
- Hex grid geometry and pixel conversion
- A* pathfinding and line of sight
- Combat units and obstacles
- The enemy AI turn state machine
- Battle orchestration
"""

# Hex Grid
from .hex_grid import HexPosition, HexGrid, HEX_DIRECTIONS, cube_round, hex_distance

# Obstacles
from .obstacles import (
    Obstacle,
    ObstacleKind,
    DEFAULT_OBSTACLES,
    get_blocked_positions,
    get_terrain_positions,
    get_wall_positions,
    obstacle_at,
    place_random_obstacles,
)

# Pathfinding
from .pathfinding import PathFinder, PathNode, find_path, get_walkable_neighbors

# Visibility
from .visibility import hex_line, has_line_of_sight

# Combat Units
from .combat_unit import CombatUnit, UnitBehavior, UnitTeam

# Enemy AI
from .enemy_ai import (
    Action,
    AITurnState,
    Attack,
    EnemyTurn,
    MoveTo,
    StepOutcome,
    apply_action,
    execute_enemy_turn,
    run_enemy_turn,
)

# Battle
from .battle import Battle, BattlePhase, BattleState

__all__ = [
    # Hex Grid
    "HexPosition",
    "HexGrid",
    "HEX_DIRECTIONS",
    "cube_round",
    "hex_distance",
    # Obstacles
    "Obstacle",
    "ObstacleKind",
    "DEFAULT_OBSTACLES",
    "get_blocked_positions",
    "get_terrain_positions",
    "get_wall_positions",
    "obstacle_at",
    "place_random_obstacles",
    # Pathfinding
    "PathFinder",
    "PathNode",
    "find_path",
    "get_walkable_neighbors",
    # Visibility
    "hex_line",
    "has_line_of_sight",
    # Combat Unit
    "CombatUnit",
    "UnitBehavior",
    "UnitTeam",
    # Enemy AI
    "Action",
    "AITurnState",
    "Attack",
    "EnemyTurn",
    "MoveTo",
    "StepOutcome",
    "apply_action",
    "execute_enemy_turn",
    "run_enemy_turn",
    # Battle
    "Battle",
    "BattlePhase",
    "BattleState",
]
