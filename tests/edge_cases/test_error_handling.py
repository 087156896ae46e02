"""
Edge case and error handling tests.

Covers invalid inputs, boundary values and misuse of the combat API.
"""
import pytest

from immunis.core.data import AttackType, CombatOutcome, UnitKind
from immunis.core.entities.components import MissingComponentError
from immunis.game.combat import CombatConfig, CombatEngine, CombatResolver, CombatSetupError
from immunis.game.entities import create_unit, get_template, load_unit_templates
from immunis.game.entities.components import ToxicSalvoComponent
from immunis.game.memory import ImmuneMemory
from tests.test_utils import FixedRandom, UnitFactory, damaged


class TestUnitEdgeCases:

    def test_negative_damage_rejected(self):
        with pytest.raises(ValueError):
            UnitFactory.antibody().receive_damage(-1)

    def test_overkill_clamps_at_zero(self):
        unit = UnitFactory.antibody(hp=10)

        assert unit.receive_damage(500) == 500
        assert unit.hp_current == 0
        assert unit.is_defeated

    def test_heal_capped_at_max(self):
        unit = damaged(UnitFactory.antibody(hp=50), 5)

        assert unit.heal(40) == 5
        assert unit.hp_current == 50

    def test_heavy_armor_still_deals_one(self):
        tank = UnitFactory.pathogen(armor=100.0)

        assert tank.receive_damage(30, AttackType.PHYSICAL) == 1

    def test_zero_damage_attack_on_pathogen_deals_one(self):
        assert UnitFactory.pathogen().receive_damage(0) == 1

    def test_wrong_kind_for_side(self):
        with pytest.raises(ValueError):
            UnitFactory.antibody(kind=UnitKind.VIRUS)
        with pytest.raises(ValueError):
            UnitFactory.pathogen(kind=UnitKind.MARKER)

    def test_ability_params_on_basic_unit_rejected(self):
        with pytest.raises(ValueError):
            UnitFactory.antibody(cooldown=2)

    def test_missing_ability(self):
        with pytest.raises(MissingComponentError):
            UnitFactory.antibody().require_ability(ToxicSalvoComponent)


class TestCatalogEdgeCases:

    def test_unknown_key(self):
        with pytest.raises(KeyError):
            get_template("smallpox")
        with pytest.raises(KeyError):
            create_unit("smallpox")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_unit_templates(str(tmp_path / "missing.yaml"))

    def test_bad_kind(self, tmp_path):
        path = tmp_path / "units.yaml"
        path.write_text(
            "antibodies:\n"
            "  odd:\n"
            "    name: Odd\n"
            "    kind: WIZARD\n"
            "    max_health: 10\n"
            "    damage: 1\n"
            "    initiative: 1\n"
        )

        with pytest.raises(KeyError):
            load_unit_templates(str(path))

    def test_pathogen_listed_as_antibody(self, tmp_path):
        path = tmp_path / "units.yaml"
        path.write_text(
            "antibodies:\n"
            "  flu:\n"
            "    name: Flu\n"
            "    kind: VIRUS\n"
            "    max_health: 10\n"
            "    damage: 1\n"
            "    initiative: 1\n"
        )

        with pytest.raises(ValueError, match="flu"):
            load_unit_templates(str(path))


class TestEngineMisuse:

    def test_failed_start_leaves_engine_idle(self, engine):
        with pytest.raises(CombatSetupError):
            engine.start_combat([UnitFactory.antibody(unit_id="x")], [UnitFactory.pathogen(unit_id="x")])

        assert engine.finalize_combat() is None
        assert not engine.resolve_turn().is_active

    def test_many_calls_after_end(self, engine, antibody, pathogen):
        engine.start_combat([antibody], [damaged(pathogen, 99)])
        engine.resolve_turn()

        for _ in range(5):
            engine.resolve_turn()

        assert engine.finalize_combat().outcome is CombatOutcome.VICTORY
        assert engine.finalize_combat().turns_elapsed == 1

    def test_both_sides_already_defeated(self, engine):
        engine.start_combat([damaged(UnitFactory.antibody(), 100)], [damaged(UnitFactory.pathogen(), 100)])

        assert engine.outcome is CombatOutcome.VICTORY

    def test_one_turn_cap(self, fixed_rng):
        engine = CombatEngine(fixed_rng, CombatConfig(max_turns=1))
        engine.start_combat([UnitFactory.antibody(damage=1)], [UnitFactory.pathogen(damage=1)])

        result = engine.resolve_turn()

        assert not result.is_active
        assert engine.outcome is CombatOutcome.TIMEOUT

    def test_defeated_actor_does_nothing(self, fixed_rng):
        resolver = CombatResolver(fixed_rng)
        dead = damaged(UnitFactory.antibody(), 100)

        outcome = resolver.resolve_action(dead, [dead], [UnitFactory.pathogen()], 1)

        assert outcome.entries == []

    def test_no_enemies_does_nothing(self, fixed_rng):
        resolver = CombatResolver(fixed_rng)
        unit = UnitFactory.antibody()

        assert resolver.resolve_action(unit, [unit], [], 1).entries == []


class TestMemoryEdgeCases:

    def test_record_antibody_rejected(self):
        with pytest.raises(ValueError):
            ImmuneMemory().record_defeat(UnitFactory.antibody())

    def test_bonus_caps(self):
        memory = ImmuneMemory()
        prion = create_unit("prion")
        for _ in range(20):
            memory.record_defeat(prion)

        assert memory.damage_bonus("prion") == pytest.approx(0.50)
        assert memory.cost_reduction("prion") == pytest.approx(0.30)

    def test_overspending_research(self):
        memory = ImmuneMemory()
        memory.add_research_points(3)

        assert not memory.spend_research_points(4)
        assert memory.spend_research_points(3)
        assert memory.research_points == 0

    def test_negative_research_ignored(self):
        memory = ImmuneMemory()
        memory.add_research_points(-10)

        assert memory.research_points == 0
        assert not memory.spend_research_points(-1)

    def test_shield_raised_and_broken_in_one_turn(self):
        engine = CombatEngine(FixedRandom(chance_result=True))
        bacteria = create_unit("staphylococcus", unit_id="s")
        engine.start_combat([UnitFactory.antibody(damage=1, initiative=1)], [bacteria])

        result = engine.resolve_turn()

        messages = [entry.message for entry in result.entries]
        assert any("activated its Biofilm Shield" in m for m in messages)
        assert any("Biofilm Shield broke" in m for m in messages)
        assert engine.is_active
