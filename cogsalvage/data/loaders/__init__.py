# Data Loaders
from .enemy_type_loader import (
    load_enemy_types,
    get_enemy_type,
    get_enemy_types_by_ai,
    get_random_enemy_type,
    generate_enemy_spawn_list,
    clear_cache,
)

__all__ = [
    "load_enemy_types",
    "get_enemy_type",
    "get_enemy_types_by_ai",
    "get_random_enemy_type",
    "generate_enemy_spawn_list",
    "clear_cache",
]
