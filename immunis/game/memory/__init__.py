"""Immune memory: pathogen signatures and the combat bonuses they grant."""

from .immune_memory import (
    ImmuneMemory,
    PathogenSignature,
    damage_bonus_for,
    cost_reduction_for,
    MAX_DAMAGE_BONUS,
    MAX_COST_REDUCTION,
    DISCOVERY_RESEARCH_POINTS,
)

__all__ = [
    "ImmuneMemory",
    "PathogenSignature",
    "damage_bonus_for",
    "cost_reduction_for",
    "MAX_DAMAGE_BONUS",
    "MAX_COST_REDUCTION",
    "DISCOVERY_RESEARCH_POINTS",
]
