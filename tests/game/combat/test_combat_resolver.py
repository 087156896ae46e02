"""
Unit tests for the CombatResolver class.

Tests each unit kind's action, the damage multipliers applied to antibody
attacks, and the log entries every state change produces.
"""
import pytest

from immunis.core.data import AttackType, CombatAction, UnitKind
from immunis.game.combat import CombatConfig, CombatResolver
from immunis.game.entities import BiofilmShieldComponent
from immunis.game.memory import ImmuneMemory
from tests.test_utils import FixedRandom, UnitFactory, damaged


def resolve(resolver, unit, allies, enemies, turn=1):
    return resolver.resolve_action(unit, allies, enemies, turn)


class TestActionOutcome:

    def test_no_enemies_means_no_action(self, fixed_rng):
        resolver = CombatResolver(fixed_rng)
        unit = UnitFactory.antibody()

        outcome = resolve(resolver, unit, [unit], [])

        assert outcome.entries == []
        assert outcome.target_id is None

    def test_defeated_unit_does_not_act(self, fixed_rng):
        resolver = CombatResolver(fixed_rng)
        unit = damaged(UnitFactory.antibody(), 100)

        assert resolve(resolver, unit, [unit], [UnitFactory.pathogen()]).entries == []

    def test_entries_carry_turn_and_actor(self, fixed_rng):
        resolver = CombatResolver(fixed_rng)
        unit = UnitFactory.antibody(unit_id="ab")
        target = UnitFactory.pathogen(unit_id="pa")

        outcome = resolve(resolver, unit, [unit], [target], turn=7)

        entry = outcome.entries[0]
        assert (entry.turn, entry.actor_id, entry.target_id) == (7, "ab", "pa")
        assert outcome.damage_dealt == 10


class TestAntibodyActions:

    def test_basic_attack(self, fixed_rng):
        resolver = CombatResolver(fixed_rng)
        unit = UnitFactory.antibody(damage=12)
        target = UnitFactory.pathogen(hp=50)

        outcome = resolve(resolver, unit, [unit], [target])

        assert target.hp_current == 38
        assert outcome.entries[0].action is CombatAction.ATTACK
        assert outcome.entries[0].message == "Antibody attacked Pathogen for 12 damage"
        assert not outcome.entries[0].is_special

    def test_toxic_salvo_is_special(self, fixed_rng):
        resolver = CombatResolver(fixed_rng)
        unit = UnitFactory.antibody("T Cell", UnitKind.OFFENSIVE, damage=20)
        target = UnitFactory.pathogen(hp=100)

        first = resolve(resolver, unit, [unit], [target])
        second = resolve(resolver, unit, [unit], [target])

        assert first.entries[0].damage == 40
        assert first.entries[0].is_special
        assert "Toxic Salvo" in first.entries[0].message
        assert second.entries[0].damage == 20
        assert not second.entries[0].is_special

    def test_memory_bonus_applies_to_known_species(self, fixed_rng):
        memory = ImmuneMemory()
        memory.record_defeat(UnitFactory.pathogen(species="influenza"))
        resolver = CombatResolver(fixed_rng, memory=memory)
        unit = UnitFactory.antibody(damage=10)

        known = UnitFactory.pathogen(species="influenza")
        unknown = UnitFactory.pathogen(species="candida")

        assert resolve(resolver, unit, [unit], [known]).entries[0].damage == 12
        assert resolve(resolver, unit, [unit], [unknown]).entries[0].damage == 10

    def test_marked_target_takes_extra_damage(self, fixed_rng):
        resolver = CombatResolver(fixed_rng)
        unit = UnitFactory.antibody(damage=10)
        target = UnitFactory.pathogen()
        target.status.mark()

        assert resolve(resolver, unit, [unit], [target]).entries[0].damage == 15

    def test_multipliers_stack(self, fixed_rng):
        memory = ImmuneMemory()
        memory.record_defeat(UnitFactory.pathogen(species="prion"))
        resolver = CombatResolver(fixed_rng, memory=memory)
        unit = UnitFactory.antibody(damage=10)
        target = UnitFactory.pathogen(species="prion")
        target.status.mark()

        # 10 x 1.2 x 1.5
        assert resolve(resolver, unit, [unit], [target]).entries[0].damage == 18

    def test_attack_type_reaches_defenses(self, fixed_rng):
        resolver = CombatResolver(fixed_rng)
        unit = UnitFactory.antibody(damage=10, attack_type=AttackType.CHEMICAL)
        target = UnitFactory.pathogen(resistance_factors={AttackType.CHEMICAL: 0.5})

        assert resolve(resolver, unit, [unit], [target]).entries[0].damage == 5


class TestMarkerAction:

    def test_marks_then_strikes_with_marking_factor(self, fixed_rng):
        resolver = CombatResolver(fixed_rng)
        marker = UnitFactory.antibody("B Cell", UnitKind.MARKER, damage=10, damage_increase=0.5)
        target = UnitFactory.pathogen(hp=100)

        outcome = resolve(resolver, marker, [marker], [target])

        mark, strike = outcome.entries
        assert mark.action is CombatAction.SPECIAL and mark.is_special
        assert "increasing damage by 50%" in mark.message
        assert target.is_marked
        # Marking factor only; the mark boosts later attacks
        assert strike.damage == 15

    def test_later_attackers_benefit_from_mark(self, fixed_rng):
        resolver = CombatResolver(fixed_rng)
        marker = UnitFactory.antibody(kind=UnitKind.MARKER, damage=10)
        ally = UnitFactory.antibody(damage=10)
        target = UnitFactory.pathogen(hp=100)

        resolve(resolver, marker, [marker, ally], [target])
        outcome = resolve(resolver, ally, [marker, ally], [target])

        assert outcome.entries[0].damage == 15

    def test_no_mark_while_on_cooldown(self, fixed_rng):
        resolver = CombatResolver(fixed_rng)
        marker = UnitFactory.antibody(kind=UnitKind.MARKER, damage=10, cooldown=2)
        first = UnitFactory.pathogen(unit_id="p1", hp=100)

        resolve(resolver, marker, [marker], [first])
        second = UnitFactory.pathogen(unit_id="p2", hp=50)
        outcome = resolve(resolver, marker, [marker], [first, second])

        assert [e.action for e in outcome.entries] == [CombatAction.ATTACK]
        assert not second.is_marked
        assert outcome.entries[0].damage == 10


class TestDefensiveAction:

    def test_heals_wounded_ally(self, fixed_rng):
        resolver = CombatResolver(fixed_rng)
        healer = UnitFactory.antibody("Macrophage", UnitKind.DEFENSIVE, heal_amount=15)
        ally = damaged(UnitFactory.antibody("Ally", unit_id="ally"), 50)
        target = UnitFactory.pathogen()

        outcome = resolve(resolver, healer, [healer, ally], [target])

        entry = outcome.entries[0]
        assert entry.action is CombatAction.HEAL
        assert entry.healing == 15
        assert entry.target_id == "ally"
        assert entry.is_special
        assert ally.hp_current == 65
        assert target.hp_current == target.hp_max

    def test_attacks_when_nobody_needs_healing(self, fixed_rng):
        resolver = CombatResolver(fixed_rng)
        healer = UnitFactory.antibody(kind=UnitKind.DEFENSIVE, damage=10)
        ally = damaged(UnitFactory.antibody(), 20)
        target = UnitFactory.pathogen()

        outcome = resolve(resolver, healer, [healer, ally], [target])

        assert outcome.entries[0].action is CombatAction.ATTACK
        assert target.hp_current == 90

    def test_attacks_while_repair_on_cooldown(self, fixed_rng):
        resolver = CombatResolver(fixed_rng)
        healer = UnitFactory.antibody(kind=UnitKind.DEFENSIVE)
        ally = damaged(UnitFactory.antibody(), 80)
        target = UnitFactory.pathogen()

        resolve(resolver, healer, [healer, ally], [target])
        outcome = resolve(resolver, healer, [healer, ally], [target])

        assert outcome.entries[0].action is CombatAction.ATTACK

    def test_heal_reports_actual_amount(self, fixed_rng):
        resolver = CombatResolver(fixed_rng)
        healer = UnitFactory.antibody(kind=UnitKind.DEFENSIVE, heal_amount=50)
        ally = damaged(UnitFactory.antibody(hp=10), 4)

        outcome = resolve(resolver, healer, [healer, ally], [UnitFactory.pathogen()])

        assert outcome.entries[0].healing == 4
        assert outcome.healing_done == 4


class TestPathogenActions:

    def test_basic_pathogen_hits_antibody_directly(self, fixed_rng):
        resolver = CombatResolver(fixed_rng)
        unit = UnitFactory.pathogen(damage=9)
        target = UnitFactory.antibody(hp=50)

        outcome = resolve(resolver, unit, [unit], [target])

        assert target.hp_current == 41
        assert outcome.entries[0].damage == 9

    def test_virus_mutation_logged(self):
        resolver = CombatResolver(FixedRandom(chance_result=True))
        virus = UnitFactory.pathogen("Flu", UnitKind.VIRUS, attack_type=AttackType.CHEMICAL,
                                     resistance_factors={AttackType.ENERGETIC: 1.5})

        outcome = resolve(resolver, virus, [virus], [UnitFactory.antibody()])

        special = outcome.entries[0]
        assert special.action is CombatAction.SPECIAL and special.is_special
        assert "Rapid Mutation" in special.message
        assert virus.attack_type is AttackType.ENERGETIC

    def test_virus_mutation_roll_failure(self, fixed_rng):
        resolver = CombatResolver(fixed_rng)
        virus = UnitFactory.pathogen(kind=UnitKind.VIRUS, attack_type=AttackType.CHEMICAL)

        outcome = resolve(resolver, virus, [virus], [UnitFactory.antibody()])

        assert [e.action for e in outcome.entries] == [CombatAction.ATTACK]
        assert virus.attack_type is AttackType.CHEMICAL
        assert fixed_rng.chance_calls[0] == 0.2

    def test_bacteria_shield_activation(self):
        resolver = CombatResolver(FixedRandom(chance_result=True))
        bacteria = UnitFactory.pathogen("Staph", UnitKind.BACTERIA)

        outcome = resolve(resolver, bacteria, [bacteria], [UnitFactory.antibody()])

        assert "Biofilm Shield" in outcome.entries[0].message
        assert bacteria.require_ability(BiofilmShieldComponent).active

    def test_bacteria_does_not_reroll_active_shield(self, fixed_rng):
        resolver = CombatResolver(fixed_rng)
        bacteria = UnitFactory.pathogen(kind=UnitKind.BACTERIA)
        bacteria.execute_special_capability()

        resolve(resolver, bacteria, [bacteria], [UnitFactory.antibody()])

        assert 0.3 not in fixed_rng.chance_calls

    def test_fungus_spores(self):
        resolver = CombatResolver(FixedRandom(chance_result=True))
        fungus = UnitFactory.pathogen("Candida", UnitKind.FUNGUS, damage=10, spore_damage=3)
        weakest = damaged(UnitFactory.antibody("Weak", unit_id="weak"), 50)
        bystander = UnitFactory.antibody("Other", unit_id="other")

        outcome = resolve(resolver, fungus, [fungus], [weakest, bystander])

        release, attack, chip = outcome.entries
        assert release.is_special
        assert attack.damage == 13
        assert attack.message.endswith("(includes spore damage)")
        assert (chip.target_id, chip.damage) == ("other", 3)
        assert weakest.hp_current == 37
        assert bystander.hp_current == 97

    def test_released_spores_keep_chipping(self, fixed_rng):
        resolver = CombatResolver(fixed_rng)
        fungus = UnitFactory.pathogen(kind=UnitKind.FUNGUS, damage=10, spore_damage=2)
        fungus.execute_special_capability()
        first, second, third = (UnitFactory.antibody(unit_id=f"a{i}") for i in range(3))

        outcome = resolve(resolver, fungus, [fungus], [first, second, third])

        assert [e.damage for e in outcome.entries] == [12, 2, 2]
        assert outcome.damage_dealt == 16


class TestShieldBreakLogging:

    @pytest.mark.parametrize("breaks", [True, False])
    def test_break_entry_only_when_shield_drops(self, breaks):
        resolver = CombatResolver(FixedRandom(chance_result=breaks), CombatConfig())
        unit = UnitFactory.antibody(damage=20)
        bacteria = UnitFactory.pathogen("Staph", UnitKind.BACTERIA, hp=100, damage_reduction=0.5)
        bacteria.execute_special_capability()

        outcome = resolve(resolver, unit, [unit], [bacteria])

        assert outcome.entries[0].damage == 10
        broke = [e for e in outcome.entries if "broke" in e.message]
        assert bool(broke) is breaks
