"""Static enemy configuration for Cog & Salvage."""

from .models import AIType, EnemyType
from .loaders import (
    load_enemy_types,
    get_enemy_type,
    get_enemy_types_by_ai,
    get_random_enemy_type,
    generate_enemy_spawn_list,
)

__all__ = [
    "AIType",
    "EnemyType",
    "load_enemy_types",
    "get_enemy_type",
    "get_enemy_types_by_ai",
    "get_random_enemy_type",
    "generate_enemy_spawn_list",
]
