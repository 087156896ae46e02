"""
Value objects returned by the combat engine.

TurnResult carries what one sweep produced for the animation layer;
CombatResult is the aggregated outcome handed to persistence and narrative
consumers. Neither holds a reference to a live unit.
"""
from dataclasses import dataclass
from typing import Sequence

from ...core.data import CombatOutcome
from ..entities.unit import UnitSnapshot
from .combat_log import CombatLogEntry


def select_significant_events(
    log: Sequence[CombatLogEntry],
    damage_threshold: int = 20,
    window: int = 10
) -> list[str]:
    """Messages worth narrating, trimmed to the first and last halves of a window.

    Args:
        log: Full combat log in order
        damage_threshold: Hits above this damage count as significant
        window: Maximum number of events kept

    Returns:
        Event messages in log order
    """
    events = [entry.message for entry in log if entry.is_significant(damage_threshold)]
    if len(events) <= window:
        return events
    if window == 0:
        return []

    head = window // 2
    tail = window - head
    return events[:head] + events[-tail:]


@dataclass(frozen=True)
class TurnResult:
    """Entries and deaths produced by one sweep of the initiative order."""
    turn: int
    entries: tuple[CombatLogEntry, ...] = ()
    dead_units: tuple[UnitSnapshot, ...] = ()
    units: tuple[UnitSnapshot, ...] = ()
    is_active: bool = False

    @classmethod
    def inactive(cls, turn: int, units: tuple[UnitSnapshot, ...] = ()) -> "TurnResult":
        """Empty result for a call made while no combat is running."""
        return cls(turn=turn, units=units)

    @property
    def is_empty(self) -> bool:
        return not self.entries


@dataclass(frozen=True)
class CombatResult:
    """Aggregated outcome of a finished battle."""
    outcome: CombatOutcome
    turns_elapsed: int
    log: tuple[CombatLogEntry, ...]
    resources_gained: int
    research_points_gained: int
    pathogen_ids_defeated: tuple[str, ...] = ()
    antibody_snapshots: tuple[UnitSnapshot, ...] = ()
    pathogen_snapshots: tuple[UnitSnapshot, ...] = ()
    significant_events: tuple[str, ...] = ()

    @property
    def player_victory(self) -> bool:
        return self.outcome is CombatOutcome.VICTORY

    def to_dict(self) -> dict:
        """Plain-data form for external persistence and narrative layers."""
        return {
            "playerVictory": self.player_victory,
            "outcome": self.outcome.name.lower(),
            "turnsElapsed": self.turns_elapsed,
            "combatLog": [entry.to_dict() for entry in self.log],
            "resourcesGained": self.resources_gained,
            "researchPointsGained": self.research_points_gained,
            "pathogenIdsDefeated": list(self.pathogen_ids_defeated),
            "playerUnits": [snap.to_dict() for snap in self.antibody_snapshots],
            "enemyUnits": [snap.to_dict() for snap in self.pathogen_snapshots],
            "significantEvents": list(self.significant_events),
        }
