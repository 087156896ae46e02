"""
Reward calculation for finished battles.

This module computes resources and research points from the outcome,
separate from the engine that resolves combat.
"""
from typing import TYPE_CHECKING, Sequence

from ...core.data import CombatOutcome
from .combat_config import CombatConfig

if TYPE_CHECKING:
    from ..entities.unit import Unit


class RewardCalculator:
    """Calculates battle rewards."""

    @staticmethod
    def calculate(
        outcome: CombatOutcome,
        turns_elapsed: int,
        defeated_pathogens: Sequence["Unit"],
        config: CombatConfig
    ) -> tuple[int, int]:
        """
        Calculate rewards for any outcome.

        Args:
            outcome: How the battle ended
            turns_elapsed: Turn counter at the end of combat
            defeated_pathogens: Pathogens that reached 0 health
            config: Reward constants

        Returns:
            (resources, research points)
        """
        if outcome is CombatOutcome.VICTORY:
            return RewardCalculator.victory_rewards(turns_elapsed, defeated_pathogens, config)
        return RewardCalculator.consolation_rewards(config)

    @staticmethod
    def victory_rewards(
        turns_elapsed: int,
        defeated_pathogens: Sequence["Unit"],
        config: CombatConfig
    ) -> tuple[int, int]:
        """Base victory reward plus a bonus per defeated pathogen."""
        resources = config.victory_base_resources + config.victory_resources_per_turn * turns_elapsed
        research = config.victory_base_research

        for pathogen in defeated_pathogens:
            resources += RewardCalculator.pathogen_bonus(pathogen, config)
            research += config.research_per_pathogen

        return resources, research

    @staticmethod
    def pathogen_bonus(pathogen: "Unit", config: CombatConfig) -> int:
        """Tougher pathogens are worth more resources."""
        return pathogen.hp_max // config.pathogen_health_divisor

    @staticmethod
    def consolation_rewards(config: CombatConfig) -> tuple[int, int]:
        return config.consolation_resources, config.consolation_research
