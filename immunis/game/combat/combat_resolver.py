"""
Combat resolution system for executing one unit's action.

This module turns a unit's turn into state changes and combat log entries.
Each unit kind has its own handler, selected through a table keyed by
UnitKind, so adding a variant means adding one handler.
"""
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from ...core.data import CombatAction, UnitKind, ATTACK_TYPE_NAMES
from ...core.random_source import RandomSource
from ..entities.components import (
    BiofilmShieldComponent,
    CellularRepairComponent,
    CorrosiveSporesComponent,
    RapidMutationComponent,
    TargetMarkingComponent,
    ToxicSalvoComponent,
    round_half_up,
)
from .combat_config import CombatConfig
from .combat_log import CombatLogEntry
from .targeting import TargetSelector

if TYPE_CHECKING:
    from ..entities.unit import Unit
    from ..managers.log_manager import LogManager
    from ..memory.immune_memory import ImmuneMemory


@dataclass
class ActionOutcome:
    """Everything one unit did during its action."""
    actor_id: str
    turn: int
    target_id: Optional[str] = None
    entries: list[CombatLogEntry] = field(default_factory=list)

    @property
    def damage_dealt(self) -> int:
        return sum(entry.damage or 0 for entry in self.entries)

    @property
    def healing_done(self) -> int:
        return sum(entry.healing or 0 for entry in self.entries)

    def add(self, message: str, action: CombatAction, **details) -> CombatLogEntry:
        entry = CombatLogEntry(message=message, action=action, turn=self.turn, actor_id=self.actor_id, **details)
        self.entries.append(entry)
        return entry


@dataclass
class ActionContext:
    """Living units visible to the acting unit."""
    unit: "Unit"
    allies: Sequence["Unit"]
    enemies: Sequence["Unit"]
    outcome: ActionOutcome


class CombatResolver:
    """Handles per-kind action resolution and damage application."""

    def __init__(
        self,
        rng: RandomSource,
        config: Optional[CombatConfig] = None,
        memory: Optional["ImmuneMemory"] = None,
        log_manager: Optional["LogManager"] = None
    ):
        self.rng = rng
        self.config = config or CombatConfig()
        self.memory = memory
        self.log_manager = log_manager
        self.targeting = TargetSelector(rng, self.config, log_manager)

        self._handlers: dict[UnitKind, Callable[[ActionContext], None]] = {
            UnitKind.BASIC_ANTIBODY: self._resolve_basic_antibody,
            UnitKind.OFFENSIVE: self._resolve_offensive,
            UnitKind.DEFENSIVE: self._resolve_defensive,
            UnitKind.MARKER: self._resolve_marker,
            UnitKind.BASIC_PATHOGEN: self._resolve_basic_pathogen,
            UnitKind.VIRUS: self._resolve_virus,
            UnitKind.BACTERIA: self._resolve_bacteria,
            UnitKind.FUNGUS: self._resolve_fungus,
        }

    def resolve_action(
        self,
        unit: "Unit",
        allies: Sequence["Unit"],
        enemies: Sequence["Unit"],
        turn: int
    ) -> ActionOutcome:
        """
        Resolve one unit's action against the current battlefield.

        Args:
            unit: The acting unit
            allies: Living units on the acting unit's side, itself included
            enemies: Living units on the opposing side
            turn: Current turn number, stamped on every entry

        Returns:
            ActionOutcome with the log entries produced, empty if the unit
            could not act
        """
        outcome = ActionOutcome(actor_id=unit.unit_id, turn=turn)
        if unit.is_defeated or not enemies:
            return outcome

        self._handlers[unit.kind](ActionContext(unit, allies, enemies, outcome))
        return outcome

    # ============== Antibody Handlers ==============

    def _resolve_basic_antibody(self, ctx: ActionContext) -> None:
        target = self.targeting.select_target(ctx.unit, ctx.enemies)
        if target:
            self._antibody_strike(ctx, target, ctx.unit.attack(), target.is_marked)

    def _resolve_offensive(self, ctx: ActionContext) -> None:
        target = self.targeting.select_target(ctx.unit, ctx.enemies)
        if not target:
            return

        salvo = ctx.unit.require_ability(ToxicSalvoComponent)
        salvo_fired = salvo.ready
        raw = ctx.unit.attack()  # Fires the salvo when ready
        special_name = salvo.ability_name if salvo_fired else None
        self._antibody_strike(ctx, target, raw, target.is_marked, special_name)

    def _resolve_defensive(self, ctx: ActionContext) -> None:
        unit = ctx.unit
        repair = unit.require_ability(CellularRepairComponent)

        if repair.ready:
            ally = self.targeting.select_heal_target(unit, ctx.allies)
            if ally:
                unit.execute_special_capability()
                healed = ally.heal(repair.heal_amount)
                ctx.outcome.target_id = ally.unit_id
                ctx.outcome.add(
                    f"{unit.name} used {repair.ability_name} on {ally.name} for {healed} healing",
                    CombatAction.HEAL,
                    target_id=ally.unit_id,
                    healing=healed,
                    is_special=True,
                )
                return

        self._resolve_basic_antibody(ctx)

    def _resolve_marker(self, ctx: ActionContext) -> None:
        unit = ctx.unit
        target = self.targeting.select_target(unit, ctx.enemies)
        if not target:
            return

        marking = unit.require_ability(TargetMarkingComponent)
        was_marked = target.is_marked
        if marking.ready:
            target.status.mark()
            ctx.outcome.add(
                f"{unit.name} marked {target.name}, increasing damage by "
                f"{round_half_up(marking.damage_increase * 100)}%",
                CombatAction.SPECIAL,
                target_id=target.unit_id,
                is_special=True,
            )

        # The mark only boosts attacks made after this one
        self._antibody_strike(ctx, target, unit.attack(), was_marked)

    # ============== Pathogen Handlers ==============

    def _resolve_basic_pathogen(self, ctx: ActionContext) -> None:
        target = self.targeting.select_target(ctx.unit, ctx.enemies)
        if target:
            self._pathogen_strike(ctx, target)

    def _resolve_virus(self, ctx: ActionContext) -> None:
        unit = ctx.unit
        mutation = unit.require_ability(RapidMutationComponent)
        if not mutation.mutated and self.rng.chance(self.config.mutation_chance):
            unit.execute_special_capability()
            ctx.outcome.add(
                f"{unit.name} underwent {mutation.ability_name}, switching to "
                f"{ATTACK_TYPE_NAMES[unit.attack_type].lower()} attacks!",
                CombatAction.SPECIAL,
                is_special=True,
            )

        self._resolve_basic_pathogen(ctx)

    def _resolve_bacteria(self, ctx: ActionContext) -> None:
        unit = ctx.unit
        shield = unit.require_ability(BiofilmShieldComponent)
        if not shield.active and self.rng.chance(self.config.biofilm_trigger_chance):
            unit.execute_special_capability()
            ctx.outcome.add(
                f"{unit.name} activated its {shield.ability_name}!",
                CombatAction.SPECIAL,
                is_special=True,
            )

        self._resolve_basic_pathogen(ctx)

    def _resolve_fungus(self, ctx: ActionContext) -> None:
        unit = ctx.unit
        spores = unit.require_ability(CorrosiveSporesComponent)
        if not spores.released and self.rng.chance(self.config.spore_release_chance):
            unit.execute_special_capability()
            ctx.outcome.add(
                f"{unit.name} released {spores.ability_name} into the environment!",
                CombatAction.SPECIAL,
                is_special=True,
            )

        target = self.targeting.select_target(unit, ctx.enemies)
        if not target:
            return
        self._pathogen_strike(ctx, target, " (includes spore damage)" if spores.released else "")

        if not spores.released:
            return

        # Area chip damage on every other living enemy
        for bystander in ctx.enemies:
            if bystander is target or bystander.is_defeated:
                continue
            dealt = bystander.receive_damage(spores.spore_damage)
            ctx.outcome.add(
                f"{bystander.name} took {dealt} damage from corrosive spores",
                CombatAction.ATTACK,
                target_id=bystander.unit_id,
                damage=dealt,
            )

    # ============== Damage Application ==============

    def _antibody_strike(
        self,
        ctx: ActionContext,
        target: "Unit",
        raw_damage: int,
        target_marked: bool,
        special_name: Optional[str] = None
    ) -> None:
        """Apply memory and mark multipliers, then hit a pathogen."""
        unit = ctx.unit
        multiplier = 1.0
        if self.memory is not None:
            multiplier += self.memory.damage_bonus(target.species)
        if target_marked:
            multiplier *= self.config.mark_damage_multiplier
        amount = round_half_up(raw_damage * multiplier)

        shield = target.ability if isinstance(target.ability, BiofilmShieldComponent) else None
        shield_was_up = shield is not None and shield.active

        dealt = target.receive_damage(amount, unit.attack_type, self.rng)

        if self.log_manager:
            self.log_manager.debug(
                f"{unit.name}: raw={raw_damage} x{multiplier:.2f} -> {amount}, "
                f"after defenses {dealt} ({unit.attack_type.value})"
            )

        ctx.outcome.target_id = target.unit_id
        if special_name:
            message = f"{unit.name} unleashed {special_name} on {target.name} for {dealt} damage!"
        else:
            message = f"{unit.name} attacked {target.name} for {dealt} damage"
        ctx.outcome.add(
            message,
            CombatAction.ATTACK,
            target_id=target.unit_id,
            damage=dealt,
            is_special=special_name is not None,
        )

        if shield_was_up and not shield.active:
            ctx.outcome.add(
                f"{target.name}'s {shield.ability_name} broke!",
                CombatAction.SPECIAL,
                target_id=target.unit_id,
            )

    def _pathogen_strike(self, ctx: ActionContext, target: "Unit", suffix: str = "") -> None:
        """Hit an antibody with the pathogen's full attack."""
        unit = ctx.unit
        dealt = target.receive_damage(unit.attack(), unit.attack_type)
        ctx.outcome.target_id = target.unit_id
        ctx.outcome.add(
            f"{unit.name} attacked {target.name} for {dealt} damage{suffix}",
            CombatAction.ATTACK,
            target_id=target.unit_id,
            damage=dealt,
        )
