"""
Turn stepper over the combat engine.

Offers the two execution modes the presentation layer needs: single-step
(one sweep per call, for animating actions one turn at a time) and run to
completion. Both go through CombatEngine.resolve_turn, so one sweep is
always exactly one turn.
"""
from typing import TYPE_CHECKING, Iterator, Optional, Sequence

from ...core.random_source import RandomSource
from .combat_config import CombatConfig
from .combat_engine import CombatEngine
from .combat_result import CombatResult, TurnResult

if TYPE_CHECKING:
    from ..entities.unit import Unit
    from ..managers.log_manager import LogManager
    from ..memory.immune_memory import ImmuneMemory


class CombatStepper:
    """Drives a CombatEngine turn by turn or to the end."""

    def __init__(self, engine: CombatEngine, log_manager: Optional["LogManager"] = None):
        self.engine = engine
        self.log_manager = log_manager or engine.log_manager

    @property
    def is_active(self) -> bool:
        return self.engine.is_active

    def advance_one_turn(self) -> TurnResult:
        """Resolve exactly one sweep. A no-op returning an inactive result once ended."""
        result = self.engine.resolve_turn()
        if self.log_manager and result.is_active:
            self.log_manager.debug(f"Turn {result.turn} resolved with {len(result.entries)} entries")
        return result

    def iter_turns(self) -> Iterator[TurnResult]:
        """Yield one TurnResult per sweep until the battle ends.

        Each yield is the point where an animating caller may pause.
        """
        while self.engine.is_active:
            yield self.advance_one_turn()

    def simulate_to_completion(self) -> Optional[CombatResult]:
        """Run every remaining turn and return the final result.

        Returns:
            The CombatResult, or None if the engine was never started
        """
        for _ in self.iter_turns():
            pass
        return self.finalize_combat()

    def finalize_combat(self) -> Optional[CombatResult]:
        """Force the end of the battle if needed and return its result. Idempotent."""
        return self.engine.finalize_combat()


def simulate_combat(
    antibodies: Sequence["Unit"],
    pathogens: Sequence["Unit"],
    seed: Optional[int] = None,
    memory: Optional["ImmuneMemory"] = None,
    config: Optional[CombatConfig] = None,
    log_manager: Optional["LogManager"] = None
) -> CombatResult:
    """
    Run a whole battle in one call.

    Args:
        antibodies: Player roster
        pathogens: Enemy roster
        seed: Seed for deterministic replay (None for a random battle)
        memory: Immune memory to read bonuses from and record victories in
        config: Tunable constants
        log_manager: Optional diagnostic log

    Returns:
        The final CombatResult

    Raises:
        CombatSetupError: If the rosters are invalid
    """
    engine = CombatEngine(RandomSource(seed), config, memory, log_manager)
    engine.start_combat(antibodies, pathogens)
    result = CombatStepper(engine).simulate_to_completion()
    assert result is not None
    return result
