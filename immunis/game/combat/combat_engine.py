"""
Combat engine state machine.

The engine owns every unit of a battle, moves through Idle, Active and
Ended, resolves one sweep of the initiative order per turn and aggregates
the final CombatResult. Callers only ever see snapshots and result values.
"""
from typing import TYPE_CHECKING, Optional, Sequence

from ...core.data import CombatAction, CombatOutcome, CombatPhase, Side
from ...core.random_source import RandomSource
from ..entities.unit import Unit, UnitSnapshot
from .combat_config import CombatConfig
from .combat_log import CombatLogEntry
from .combat_resolver import CombatResolver
from .combat_result import CombatResult, TurnResult, select_significant_events
from .rewards import RewardCalculator

if TYPE_CHECKING:
    from ..managers.log_manager import LogManager
    from ..memory.immune_memory import ImmuneMemory


class CombatSetupError(ValueError):
    """Raised when a battle is started with an invalid roster or in the wrong state."""


class CombatEngine:
    """Runs one battle between antibodies and pathogens.

    An engine instance belongs to a single battle at a time; it may be
    started again once the previous battle has ended.
    """

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        config: Optional[CombatConfig] = None,
        memory: Optional["ImmuneMemory"] = None,
        log_manager: Optional["LogManager"] = None
    ):
        """
        Initialize the engine.

        Args:
            rng: Source of every random decision, seeded for replays
            config: Tunable constants, defaults to CombatConfig()
            memory: Immune memory read for damage bonuses and written on victory
            log_manager: Optional diagnostic log
        """
        self.rng = rng or RandomSource()
        self.config = config or CombatConfig()
        self.memory = memory
        self.log_manager = log_manager
        self.resolver = CombatResolver(self.rng, self.config, memory, log_manager)

        self._phase = CombatPhase.IDLE
        self._turn = 0
        self._antibodies: list[Unit] = []
        self._pathogens: list[Unit] = []
        self._order: list[Unit] = []
        self._log: list[CombatLogEntry] = []
        self._dead_ids: set[str] = set()
        self._outcome: Optional[CombatOutcome] = None
        self._result: Optional[CombatResult] = None

    # ============== State ==============

    @property
    def phase(self) -> CombatPhase:
        return self._phase

    @property
    def is_active(self) -> bool:
        return self._phase is CombatPhase.ACTIVE

    @property
    def current_turn(self) -> int:
        return self._turn

    @property
    def outcome(self) -> Optional[CombatOutcome]:
        return self._outcome

    @property
    def log(self) -> tuple[CombatLogEntry, ...]:
        return tuple(self._log)

    @property
    def units(self) -> tuple[UnitSnapshot, ...]:
        """Snapshots of every unit in initiative order."""
        return tuple(unit.snapshot() for unit in self._order)

    def living_units(self, side: Side) -> list[Unit]:
        roster = self._antibodies if side is Side.PLAYER else self._pathogens
        return [unit for unit in roster if not unit.is_defeated]

    def living_snapshots(self, side: Side) -> tuple[UnitSnapshot, ...]:
        return tuple(unit.snapshot() for unit in self.living_units(side))

    @property
    def all_pathogens_defeated(self) -> bool:
        return not self.living_units(Side.ENEMY)

    @property
    def all_antibodies_defeated(self) -> bool:
        return not self.living_units(Side.PLAYER)

    # ============== Lifecycle ==============

    def start_combat(self, antibodies: Sequence[Unit], pathogens: Sequence[Unit]) -> None:
        """
        Assemble the rosters and enter the Active phase.

        Units are ordered by initiative, highest first, keeping input order
        (antibodies before pathogens) among equals.

        Raises:
            CombatSetupError: If a battle is already active, a side is empty,
                a unit is on the wrong side or two units share an id
        """
        if self.is_active:
            raise CombatSetupError("Cannot start combat: a battle is already active")
        if not antibodies:
            raise CombatSetupError("Cannot start combat: no antibodies")
        if not pathogens:
            raise CombatSetupError("Cannot start combat: no pathogens")

        misplaced = [u.name for u in antibodies if not u.is_antibody]
        misplaced += [u.name for u in pathogens if not u.is_pathogen]
        if misplaced:
            raise CombatSetupError(f"Units on the wrong side: {', '.join(misplaced)}")

        ids = [u.unit_id for u in list(antibodies) + list(pathogens)]
        duplicates = sorted({uid for uid in ids if ids.count(uid) > 1})
        if duplicates:
            raise CombatSetupError(f"Duplicate unit ids: {', '.join(duplicates)}")

        self._antibodies = list(antibodies)
        self._pathogens = list(pathogens)
        self._order = sorted(self._antibodies + self._pathogens, key=lambda u: -u.initiative)
        self._log = []
        self._dead_ids = {u.unit_id for u in self._order if u.is_defeated}
        self._outcome = None
        self._result = None
        self._turn = 1
        self._phase = CombatPhase.ACTIVE

        self._add_entry(
            f"Combat initiated: {len(antibodies)} antibody units vs {len(pathogens)} pathogen units",
            CombatAction.START,
        )
        if self.log_manager:
            order = ", ".join(f"{u.name}({u.initiative})" for u in self._order)
            self.log_manager.battle(f"Combat started, initiative order: {order}")

        # A roster that arrives already wiped out ends immediately
        self._check_terminal()

    def resolve_turn(self) -> TurnResult:
        """
        Resolve one full sweep of the initiative order.

        Returns:
            TurnResult with the entries and deaths of this sweep, or an
            empty inactive result if no battle is running
        """
        if not self.is_active:
            if self.log_manager:
                self.log_manager.warning(f"resolve_turn ignored: combat is {self._phase.name.lower()}")
            return TurnResult.inactive(self._turn, self.units)

        turn = self._turn
        first_entry = len(self._log)
        dead: list[UnitSnapshot] = []

        for unit in self._order:
            if unit.is_defeated:
                continue

            allies = self.living_units(unit.side)
            enemies = self.living_units(Side.ENEMY if unit.side is Side.PLAYER else Side.PLAYER)
            if not enemies:
                break

            outcome = self.resolver.resolve_action(unit, allies, enemies, turn)
            self._log.extend(outcome.entries)
            dead.extend(self._record_deaths())
            unit.tick_cooldowns()

            if self._check_terminal():
                break

        if self.is_active:
            if turn >= self.config.max_turns:
                self._end(CombatOutcome.TIMEOUT)
            else:
                self._turn += 1

        return TurnResult(
            turn=turn,
            entries=tuple(self._log[first_entry:]),
            dead_units=tuple(dead),
            units=self.units,
            is_active=self.is_active,
        )

    def finalize_combat(self) -> Optional[CombatResult]:
        """
        End the battle if it is still running and aggregate its result.

        A still-active battle ends as ABORTED. The result is computed once;
        later calls return the same value.

        Returns:
            The CombatResult, or None if no battle was ever started
        """
        if self._result is not None:
            return self._result

        if self._phase is CombatPhase.IDLE:
            if self.log_manager:
                self.log_manager.warning("finalize_combat ignored: no combat started")
            return None

        if self.is_active:
            self._end(CombatOutcome.ABORTED)

        self._result = self._build_result()
        return self._result

    # ============== Internals ==============

    def _add_entry(self, message: str, action: CombatAction, **details) -> None:
        self._log.append(CombatLogEntry(message=message, action=action, turn=self._turn, **details))

    def _record_deaths(self) -> list[UnitSnapshot]:
        """Log every unit that reached 0 health since the last check."""
        dead = []
        for unit in self._order:
            if unit.is_defeated and unit.unit_id not in self._dead_ids:
                self._dead_ids.add(unit.unit_id)
                self._add_entry(f"{unit.name} was defeated", CombatAction.DEATH, target_id=unit.unit_id)
                dead.append(unit.snapshot())
                if self.log_manager:
                    self.log_manager.battle(f"{unit.name} defeated on turn {self._turn}")
        return dead

    def _check_terminal(self) -> bool:
        """End the battle if a side has no living units left."""
        if self.all_pathogens_defeated:
            self._end(CombatOutcome.VICTORY)
        elif self.all_antibodies_defeated:
            self._end(CombatOutcome.DEFEAT)
        return not self.is_active

    def _end(self, outcome: CombatOutcome) -> None:
        if not self.is_active:
            return

        self._phase = CombatPhase.ENDED
        self._outcome = outcome

        if outcome is CombatOutcome.TIMEOUT:
            message = f"Combat timeout reached after {self._turn} turns"
        elif outcome is CombatOutcome.ABORTED:
            message = f"Combat aborted after {self._turn} turns"
        else:
            message = f"Combat ended: {outcome.name} after {self._turn} turns"
        self._add_entry(message, CombatAction.END)

        if self.log_manager:
            self.log_manager.battle(message)

    def _build_result(self) -> CombatResult:
        outcome = self._outcome or CombatOutcome.ABORTED
        defeated = [p for p in self._pathogens if p.is_defeated]

        resources, research = RewardCalculator.calculate(outcome, self._turn, defeated, self.config)

        if outcome is CombatOutcome.VICTORY and self.memory is not None:
            for pathogen in defeated:
                self.memory.record_defeat(pathogen)

        events = select_significant_events(
            self._log,
            self.config.significant_damage_threshold,
            self.config.significant_event_window,
        )

        if self.log_manager:
            self.log_manager.system(
                f"Result: {outcome.name} in {self._turn} turns, "
                f"+{resources} resources, +{research} research"
            )

        return CombatResult(
            outcome=outcome,
            turns_elapsed=self._turn,
            log=tuple(self._log),
            resources_gained=resources,
            research_points_gained=research,
            pathogen_ids_defeated=tuple(p.unit_id for p in defeated),
            antibody_snapshots=tuple(u.snapshot() for u in self._antibodies),
            pathogen_snapshots=tuple(u.snapshot() for u in self._pathogens),
            significant_events=tuple(events),
        )
