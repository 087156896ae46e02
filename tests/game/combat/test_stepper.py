"""
Tests for stepping through a battle one turn at a time.
"""
from unittest.mock import Mock

from immunis.core.data import CombatOutcome
from immunis.game.combat import CombatConfig, CombatEngine, CombatStepper, simulate_combat
from immunis.game.memory import ImmuneMemory
from tests.test_utils import UnitFactory


def long_battle(fixed_rng, max_turns=50):
    engine = CombatEngine(fixed_rng, CombatConfig(max_turns=max_turns))
    engine.start_combat([UnitFactory.antibody(damage=10)], [UnitFactory.pathogen(hp=45, damage=1)])
    return CombatStepper(engine)


class TestCombatStepper:

    def test_advance_one_turn(self, fixed_rng):
        stepper = long_battle(fixed_rng)

        first = stepper.advance_one_turn()
        second = stepper.advance_one_turn()

        assert (first.turn, second.turn) == (1, 2)
        assert stepper.engine.current_turn == 3
        assert stepper.is_active

    def test_advance_after_end_is_noop(self, fixed_rng):
        stepper = long_battle(fixed_rng)
        stepper.simulate_to_completion()
        log_size = len(stepper.engine.log)

        result = stepper.advance_one_turn()

        assert not result.is_active
        assert result.is_empty
        assert len(stepper.engine.log) == log_size

    def test_iter_turns_yields_every_sweep(self, fixed_rng):
        stepper = long_battle(fixed_rng)

        turns = [result.turn for result in stepper.iter_turns()]

        # 45 health at 10 per hit
        assert turns == [1, 2, 3, 4, 5]
        assert not stepper.is_active

    def test_simulate_to_completion_finalizes(self, fixed_rng):
        stepper = long_battle(fixed_rng)

        result = stepper.simulate_to_completion()

        assert result.outcome is CombatOutcome.VICTORY
        assert result is stepper.finalize_combat()

    def test_stepping_respects_turn_cap(self, fixed_rng):
        stepper = long_battle(fixed_rng, max_turns=2)

        result = stepper.simulate_to_completion()

        assert result.outcome is CombatOutcome.TIMEOUT
        assert result.turns_elapsed == 2

    def test_finalize_mid_battle(self, fixed_rng):
        stepper = long_battle(fixed_rng)
        stepper.advance_one_turn()

        assert stepper.finalize_combat().outcome is CombatOutcome.ABORTED

    def test_logs_each_resolved_turn(self, fixed_rng):
        log_manager = Mock()
        stepper = long_battle(fixed_rng)
        stepper.log_manager = log_manager

        stepper.advance_one_turn()

        log_manager.debug.assert_called_once()
        assert "Turn 1" in log_manager.debug.call_args[0][0]

    def test_unstarted_engine(self, fixed_rng):
        stepper = CombatStepper(CombatEngine(fixed_rng))

        assert list(stepper.iter_turns()) == []
        assert stepper.simulate_to_completion() is None


class TestSimulateCombat:

    def test_runs_to_an_outcome(self):
        result = simulate_combat(
            UnitFactory.catalog_roster(["lymphocyte_t", "macrophage"], "ab"),
            UnitFactory.catalog_roster(["prion"], "pa"),
            seed=3,
        )

        assert result.outcome is CombatOutcome.VICTORY
        assert result.pathogen_ids_defeated == ("pa0_prion",)

    def test_records_memory_on_victory(self):
        memory = ImmuneMemory()

        simulate_combat(
            UnitFactory.catalog_roster(["lymphocyte_t"], "ab"),
            UnitFactory.catalog_roster(["prion", "prion"], "pa"),
            seed=8,
            memory=memory,
        )

        assert memory.find_signature("prion").encounter_count == 2
        assert memory.research_points == 5
