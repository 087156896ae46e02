"""Core data definitions.

This package contains fundamental game definitions:
- game_enums.py: Centralized enums for sides, attack types, unit kinds and combat state
"""

from .game_enums import (
    Side,
    AttackType,
    UnitKind,
    ComponentType,
    CombatAction,
    CombatPhase,
    CombatOutcome,
    ANTIBODY_KINDS,
    PATHOGEN_KINDS,
    SIDE_NAMES,
    ATTACK_TYPE_NAMES,
    UNIT_KIND_NAMES,
    COMPONENT_TYPE_NAMES,
)

__all__ = [
    "Side",
    "AttackType",
    "UnitKind",
    "ComponentType",
    "CombatAction",
    "CombatPhase",
    "CombatOutcome",
    "ANTIBODY_KINDS",
    "PATHOGEN_KINDS",
    "SIDE_NAMES",
    "ATTACK_TYPE_NAMES",
    "UNIT_KIND_NAMES",
    "COMPONENT_TYPE_NAMES",
]
