"""Centralized game enums and constants.

This module contains all core game enums that are used across multiple modules,
eliminating duplication and providing a single source of truth.
"""

from enum import Enum, auto


class Side(Enum):
    """Side affiliations for combat units."""
    PLAYER = 0  # Antibodies
    ENEMY = 1   # Pathogens


class AttackType(Enum):
    """Fundamental attack types for combat."""
    PHYSICAL = "physical"
    CHEMICAL = "chemical"
    ENERGETIC = "energetic"


class UnitKind(Enum):
    """Closed set of unit variants the combat engine knows how to resolve."""
    BASIC_ANTIBODY = auto()
    OFFENSIVE = auto()
    DEFENSIVE = auto()
    MARKER = auto()
    BASIC_PATHOGEN = auto()
    VIRUS = auto()
    BACTERIA = auto()
    FUNGUS = auto()

    @property
    def side(self) -> Side:
        """Side this kind of unit always fights on."""
        return Side.PLAYER if self in ANTIBODY_KINDS else Side.ENEMY


class ComponentType(Enum):
    """Component types for the entity component system."""
    ACTOR = auto()
    HEALTH = auto()
    COMBAT = auto()
    PRODUCTION = auto()
    TARGETING = auto()
    DEFENSE = auto()
    STATUS = auto()
    ABILITY = auto()


class CombatAction(Enum):
    """Kinds of combat log entries."""
    START = "start"
    ATTACK = "attack"
    HEAL = "heal"
    SPECIAL = "special"
    DEATH = "death"
    END = "end"


class CombatPhase(Enum):
    """Lifecycle of a combat engine instance."""
    IDLE = auto()
    ACTIVE = auto()
    ENDED = auto()


class CombatOutcome(Enum):
    """How a battle ended."""
    VICTORY = auto()
    DEFEAT = auto()
    TIMEOUT = auto()   # Turn cap reached with both sides standing
    ABORTED = auto()   # Finalized by the caller while still active


ANTIBODY_KINDS = frozenset({
    UnitKind.BASIC_ANTIBODY,
    UnitKind.OFFENSIVE,
    UnitKind.DEFENSIVE,
    UnitKind.MARKER,
})

PATHOGEN_KINDS = frozenset({
    UnitKind.BASIC_PATHOGEN,
    UnitKind.VIRUS,
    UnitKind.BACTERIA,
    UnitKind.FUNGUS,
})


# Convenience mappings for display and external consumers
SIDE_NAMES = {
    Side.PLAYER: "Antibodies",
    Side.ENEMY: "Pathogens",
}

ATTACK_TYPE_NAMES = {
    AttackType.PHYSICAL: "Physical",
    AttackType.CHEMICAL: "Chemical",
    AttackType.ENERGETIC: "Energetic",
}

UNIT_KIND_NAMES = {
    UnitKind.BASIC_ANTIBODY: "Antibody",
    UnitKind.OFFENSIVE: "Offensive Antibody",
    UnitKind.DEFENSIVE: "Defensive Antibody",
    UnitKind.MARKER: "Marker Antibody",
    UnitKind.BASIC_PATHOGEN: "Pathogen",
    UnitKind.VIRUS: "Virus",
    UnitKind.BACTERIA: "Bacteria",
    UnitKind.FUNGUS: "Fungus",
}

COMPONENT_TYPE_NAMES = {
    ComponentType.ACTOR: "Actor",
    ComponentType.HEALTH: "Health",
    ComponentType.COMBAT: "Combat",
    ComponentType.PRODUCTION: "Production",
    ComponentType.TARGETING: "Targeting",
    ComponentType.DEFENSE: "Defense",
    ComponentType.STATUS: "Status",
    ComponentType.ABILITY: "Ability",
}
