"""Enemy type data model for Cog & Salvage."""

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class AIType(str, Enum):
    """Enemy AI behavior."""
    MELEE = "melee"    # Chase the player
    RANGED = "ranged"  # Keep distance


class EnemyType(BaseModel):
    """Static per-type enemy configuration."""
    id: str = Field(..., description="Unique identifier (lowercase, no spaces)")
    name: str = Field(..., description="Display name")
    hp: int = Field(..., gt=0, description="Hit points")
    damage: int = Field(..., ge=0, description="Damage per attack")
    range: int = Field(..., ge=1, description="Attack range in hexes (1 = melee)")
    ap: int = Field(..., ge=1, description="Action points per turn")
    max_attacks_per_turn: int = Field(default=1, ge=1)
    ai_type: AIType
    preferred_distance: int = Field(default=1, ge=1, description="Distance a ranged unit backs off to")
    special: list[str] = Field(default_factory=list, description="Reserved for special properties")

    model_config = {"use_enum_values": True, "frozen": True}

    @model_validator(mode="after")
    def _check_ranged_distance(self) -> "EnemyType":
        if self.ai_type == AIType.RANGED and self.preferred_distance > self.range:
            raise ValueError(
                f"{self.id}: preferred_distance {self.preferred_distance} exceeds range {self.range}"
            )
        return self

    @property
    def is_ranged(self) -> bool:
        return self.ai_type == AIType.RANGED
