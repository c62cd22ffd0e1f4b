"""Enemy type data loader for Cog & Salvage."""

import json
import random
from functools import lru_cache
from pathlib import Path
from typing import Optional

from ..models.enemy_type import AIType, EnemyType


# Get the data directory path
DATA_DIR = Path(__file__).parent.parent
ENEMY_TYPES_FILE = DATA_DIR / "enemy_types.json"


@lru_cache(maxsize=1)
def load_enemy_types() -> tuple[EnemyType, ...]:
    """Load all enemy types from the JSON table.

    Returns:
        Tuple of EnemyType objects in table order.
    """
    with open(ENEMY_TYPES_FILE, "r", encoding="utf-8") as f:
        data = json.load(f)
    return tuple(EnemyType(**entry) for entry in data["enemy_types"])


def get_enemy_type(type_id: str) -> Optional[EnemyType]:
    """Get an enemy type by its ID.

    Args:
        type_id: The unique type identifier (e.g. "scrapper").

    Returns:
        EnemyType if found, None otherwise.
    """
    for enemy_type in load_enemy_types():
        if enemy_type.id == type_id:
            return enemy_type
    return None


def get_enemy_types_by_ai(ai_type: str) -> list[EnemyType]:
    """Get all enemy types with a given AI behavior.

    Args:
        ai_type: "melee" or "ranged".

    Returns:
        List of matching enemy types.
    """
    return [t for t in load_enemy_types() if t.ai_type == AIType(ai_type)]


def get_random_enemy_type(
    category: Optional[str] = None, rng: Optional[random.Random] = None
) -> str:
    """Pick a random enemy type ID.

    Args:
        category: Optional "melee" or "ranged" filter.
        rng: Random number generator for deterministic spawns.

    Returns:
        Enemy type ID.
    """
    rng = rng or random.Random()
    if category:
        types = get_enemy_types_by_ai(category)
    else:
        types = list(load_enemy_types())
    return rng.choice(types).id


def generate_enemy_spawn_list(
    count: int,
    min_melee: int = 1,
    min_ranged: int = 1,
    rng: Optional[random.Random] = None,
) -> list[str]:
    """Create the enemy type IDs for one battle.

    The minimum melee and ranged quotas are filled first, the rest is drawn
    from any type, and the list is shuffled.

    Args:
        count: Number of enemies to spawn.
        min_melee: Minimum melee enemies.
        min_ranged: Minimum ranged enemies.
        rng: Random number generator for deterministic spawns.

    Returns:
        List of enemy type IDs of length count.
    """
    rng = rng or random.Random()
    spawn_list: list[str] = []

    for _ in range(min_melee):
        if len(spawn_list) >= count:
            break
        spawn_list.append(get_random_enemy_type(AIType.MELEE.value, rng))

    for _ in range(min_ranged):
        if len(spawn_list) >= count:
            break
        spawn_list.append(get_random_enemy_type(AIType.RANGED.value, rng))

    while len(spawn_list) < count:
        spawn_list.append(get_random_enemy_type(rng=rng))

    rng.shuffle(spawn_list)
    return spawn_list


def clear_cache() -> None:
    """Clear the enemy type cache. Useful for testing or hot-reloading data."""
    load_enemy_types.cache_clear()
