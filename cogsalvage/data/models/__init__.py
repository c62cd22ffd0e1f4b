# Data Models
from .enemy_type import AIType, EnemyType

__all__ = [
    "AIType",
    "EnemyType",
]
