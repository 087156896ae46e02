"""Immutable combat log entries that make up a battle's record."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ...core.data import CombatAction


@dataclass(frozen=True)
class CombatLogEntry:
    """One state change during a battle.

    The timestamp is excluded from equality so that two seeded runs of the
    same battle produce equal logs.
    """
    message: str
    action: CombatAction
    turn: int = 0
    actor_id: Optional[str] = None
    target_id: Optional[str] = None
    damage: Optional[int] = None
    healing: Optional[int] = None
    is_special: bool = False
    timestamp: datetime = field(default_factory=datetime.now, compare=False)

    def is_significant(self, damage_threshold: int) -> bool:
        """Special actions and heavy hits are worth narrating."""
        return self.is_special or (self.damage is not None and self.damage > damage_threshold)

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "type": self.action.value,
            "turn": self.turn,
            "actorId": self.actor_id,
            "targetId": self.target_id,
            "damage": self.damage,
            "healing": self.healing,
            "isSpecialAction": self.is_special,
            "timestamp": self.timestamp.isoformat(),
        }
