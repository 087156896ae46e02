"""Target selection heuristics for both sides."""

from typing import TYPE_CHECKING, Optional, Sequence

from ...core.random_source import RandomSource
from .combat_config import CombatConfig

if TYPE_CHECKING:
    from ..entities.unit import Unit
    from ..managers.log_manager import LogManager


class TargetSelector:
    """Picks attack and heal targets.

    Antibodies follow their own prioritize-low-health flag; pathogens focus
    the weakest enemy with a fixed probability and pick at random otherwise.
    """

    def __init__(
        self,
        rng: RandomSource,
        config: Optional[CombatConfig] = None,
        log_manager: Optional["LogManager"] = None
    ):
        self.rng = rng
        self.config = config or CombatConfig()
        self.log_manager = log_manager

    @staticmethod
    def lowest_health(candidates: Sequence["Unit"]) -> "Unit":
        """Unit with strictly lowest current health, first one wins ties."""
        return min(candidates, key=lambda unit: unit.hp_current)

    def select_target(self, attacker: "Unit", candidates: Sequence["Unit"]) -> Optional["Unit"]:
        """Choose an enemy to attack.

        Returns:
            The chosen unit, or None if there is nothing to attack
        """
        living = [unit for unit in candidates if not unit.is_defeated]
        if not living:
            if self.log_manager:
                self.log_manager.warning(f"{attacker.name} has no target left")
            return None

        if attacker.is_antibody:
            focus = attacker.prioritize_low_health
        else:
            focus = self.rng.chance(self.config.pathogen_focus_low_health_chance)

        target = self.lowest_health(living) if focus else self.rng.choice(living)

        if self.log_manager:
            policy = "lowest health" if focus else "random"
            self.log_manager.ai(f"{attacker.name} targets {target.name} ({policy}, hp={target.hp_current})")
        return target

    def select_heal_target(self, healer: "Unit", allies: Sequence["Unit"]) -> Optional["Unit"]:
        """Choose the ally to repair, or None if nobody needs it.

        Healing happens only when some other living ally is under the heal
        threshold; the ally with the lowest health ratio is chosen.
        """
        others = [ally for ally in allies if ally is not healer and not ally.is_defeated]
        threshold = self.config.heal_threshold
        if not any(ally.hp_current < ally.hp_max * threshold for ally in others):
            return None

        target = min(others, key=lambda ally: ally.health.get_hp_percent())
        if self.log_manager:
            self.log_manager.ai(
                f"{healer.name} chooses to repair {target.name} "
                f"({target.health.get_hp_percent():.0%} health)"
            )
        return target
