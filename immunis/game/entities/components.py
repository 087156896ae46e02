"""Game-specific components for combat units.

This module contains the concrete component implementations for antibody and
pathogen units: the shared Actor, Health, Combat and Status components, the
side-specific Production, Targeting and Defense components, and one ability
component per unit variant.
"""

import math
from typing import TYPE_CHECKING, Optional

from ...core.entities import Component
from ...core.data import (
    AttackType, ComponentType, Side, UnitKind, UNIT_KIND_NAMES,
)

if TYPE_CHECKING:
    from ...core.entities.components import Entity
    from ...core.random_source import RandomSource


def round_half_up(value: float) -> int:
    """Round a non-negative amount to the nearest integer, halves going up."""
    return int(math.floor(value + 0.5))


class ActorComponent(Component):
    """Component for identity and classification.

    Handles who the unit is - its display name, the species key used by
    immune memory, and the unit kind that decides how it acts in combat.
    """

    def __init__(self, entity: "Entity", name: str, kind: UnitKind, species: Optional[str] = None):
        """Initialize actor component.

        Args:
            entity: The entity this component belongs to
            name: Display name of the unit
            kind: Unit variant (Offensive, Virus, etc.)
            species: Stable identity shared by every instance of the same
                unit type; defaults to the display name
        """
        super().__init__(entity)
        self.name = name
        self.kind = kind
        self.species = species or name

    def get_component_type(self) -> ComponentType:
        return ComponentType.ACTOR

    @property
    def side(self) -> Side:
        """Side this unit fights on, derived from its kind."""
        return self.kind.side

    def get_kind_name(self) -> str:
        """Get the human-readable kind name."""
        return UNIT_KIND_NAMES[self.kind]

    def is_ally_of(self, other: "ActorComponent") -> bool:
        """Check if this unit fights on the same side as another unit."""
        return self.side == other.side


class HealthComponent(Component):
    """Component for life and death management.

    Health is only ever changed through take_damage and heal, both of which
    keep hp_current inside [0, hp_max].
    """

    def __init__(self, entity: "Entity", hp_max: int):
        """Initialize health component.

        Args:
            entity: The entity this component belongs to
            hp_max: Maximum health points for this unit
        """
        super().__init__(entity)
        if hp_max <= 0:
            raise ValueError("Maximum health must be positive")
        self.hp_max = hp_max
        self.hp_current = hp_max  # Start at full health

    def get_component_type(self) -> ComponentType:
        return ComponentType.HEALTH

    def is_alive(self) -> bool:
        """Check if the unit is alive (hp_current > 0)."""
        return self.hp_current > 0

    def get_hp_percent(self) -> float:
        """Get current health as a ratio of maximum, from 0.0 to 1.0."""
        return self.hp_current / self.hp_max

    def take_damage(self, amount: int) -> int:
        """Apply damage to this unit.

        Args:
            amount: Amount of damage to apply

        Returns:
            Health actually removed (less than amount on overkill)
        """
        if amount < 0:
            raise ValueError("Damage amount cannot be negative")

        old_hp = self.hp_current
        self.hp_current = max(0, self.hp_current - amount)
        return old_hp - self.hp_current

    def heal(self, amount: int) -> int:
        """Apply healing to this unit.

        Args:
            amount: Amount of healing to apply

        Returns:
            Actual healing done (may be less due to max hp cap)
        """
        if amount < 0:
            raise ValueError("Healing amount cannot be negative")

        old_hp = self.hp_current
        self.hp_current = min(self.hp_max, self.hp_current + amount)
        return self.hp_current - old_hp

    def restore_full_health(self) -> None:
        """Restore unit to full health."""
        self.hp_current = self.hp_max


class CombatComponent(Component):
    """Component for offensive statistics shared by both sides."""

    def __init__(self, entity: "Entity", damage: int, initiative: int, attack_type: AttackType):
        """Initialize combat component.

        Args:
            entity: The entity this component belongs to
            damage: Base damage of a regular attack
            initiative: Turn-order priority, higher acts first
            attack_type: Classification of the damage this unit deals
        """
        super().__init__(entity)
        self.damage = damage
        self.initiative = initiative
        self.attack_type = attack_type

    def get_component_type(self) -> ComponentType:
        return ComponentType.COMBAT


class ProductionComponent(Component):
    """Antibody production costs, consumed by the external bioforge."""

    def __init__(self, entity: "Entity", energy_cost: int, biomaterial_cost: int, production_time: int):
        super().__init__(entity)
        self.energy_cost = energy_cost
        self.biomaterial_cost = biomaterial_cost
        self.production_time = production_time  # seconds

    def get_component_type(self) -> ComponentType:
        return ComponentType.PRODUCTION


class TargetingComponent(Component):
    """Antibody target preference."""

    def __init__(self, entity: "Entity", prioritize_low_health: bool = True):
        super().__init__(entity)
        self.prioritize_low_health = prioritize_low_health

    def get_component_type(self) -> ComponentType:
        return ComponentType.TARGETING


class DefenseComponent(Component):
    """Pathogen armor and per-attack-type resistance multipliers.

    A resistance factor below 1.0 reduces incoming damage of that type,
    above 1.0 increases it. Missing types default to 1.0.
    """

    def __init__(
        self,
        entity: "Entity",
        armor: float = 0.0,
        resistance_factors: Optional[dict[AttackType, float]] = None
    ):
        """Initialize defense component.

        Args:
            entity: The entity this component belongs to
            armor: Percentage damage reduction (0-100)
            resistance_factors: Multiplier per attack type
        """
        super().__init__(entity)
        if not 0.0 <= armor <= 100.0:
            raise ValueError("Armor must be between 0 and 100")
        self.armor = armor
        self.resistance_factors: dict[AttackType, float] = dict(resistance_factors or {})

    def get_component_type(self) -> ComponentType:
        return ComponentType.DEFENSE

    def get_resistance(self, attack_type: AttackType) -> float:
        """Get the damage multiplier for an attack type."""
        return self.resistance_factors.get(attack_type, 1.0)

    def reduce_damage(self, incoming: int, attack_type: AttackType) -> int:
        """Apply resistance and armor to incoming damage.

        The result is never below 1 so that every hit makes progress.
        """
        reduced = incoming * self.get_resistance(attack_type) * (1 - self.armor / 100)
        return max(1, round_half_up(reduced))


class StatusComponent(Component):
    """Transient combat status. Currently only the target mark."""

    def __init__(self, entity: "Entity"):
        super().__init__(entity)
        self.marked = False

    def get_component_type(self) -> ComponentType:
        return ComponentType.STATUS

    def mark(self) -> None:
        self.marked = True

    def clear_mark(self) -> None:
        self.marked = False


# ============== Abilities ==============


class AbilityComponent(Component):
    """Base class for the single special ability a unit may carry."""

    ability_name = "Ability"

    def get_component_type(self) -> ComponentType:
        return ComponentType.ABILITY


class CooldownAbility(AbilityComponent):
    """Ability that is ready, gets used, then waits a number of ticks.

    The engine ticks the acting unit once after each of its actions, so an
    ability with cooldown 3 used on turn 1 is ready again on turn 4.
    """

    def __init__(self, entity: "Entity", cooldown: int):
        super().__init__(entity)
        if cooldown < 0:
            raise ValueError("Cooldown cannot be negative")
        self.cooldown = cooldown
        self.current_cooldown = 0

    @property
    def ready(self) -> bool:
        return self.current_cooldown <= 0

    def trigger(self) -> bool:
        """Use the ability if ready and start its cooldown.

        Returns:
            True if the ability fired
        """
        if not self.ready:
            return False
        self.current_cooldown = self.cooldown
        return True

    def tick(self) -> None:
        """Advance the cooldown by one turn."""
        if self.current_cooldown > 0:
            self.current_cooldown -= 1


class ToxicSalvoComponent(CooldownAbility):
    """Offensive antibody burst: multiplies its attack when ready."""

    ability_name = "Toxic Salvo"

    def __init__(self, entity: "Entity", cooldown: int = 3, damage_multiplier: float = 2.0):
        super().__init__(entity, cooldown)
        self.damage_multiplier = damage_multiplier


class CellularRepairComponent(CooldownAbility):
    """Defensive antibody heal restoring a fixed amount to an ally."""

    ability_name = "Cellular Repair"

    def __init__(self, entity: "Entity", cooldown: int = 2, heal_amount: int = 10):
        super().__init__(entity, cooldown)
        if heal_amount < 0:
            raise ValueError("Heal amount cannot be negative")
        self.heal_amount = heal_amount


class TargetMarkingComponent(CooldownAbility):
    """Marker antibody: marks its target and boosts its own strike."""

    ability_name = "Target Marking"

    def __init__(self, entity: "Entity", cooldown: int = 1, damage_increase: float = 0.5):
        super().__init__(entity, cooldown)
        self.damage_increase = damage_increase

    @property
    def marking_factor(self) -> float:
        return 1.0 + self.damage_increase


class RapidMutationComponent(AbilityComponent):
    """Virus mutation: swaps attack type and rebalances resistances once."""

    ability_name = "Rapid Mutation"

    def __init__(self, entity: "Entity", resistance_shift: float = 0.5, vulnerability_shift: float = 1.2):
        super().__init__(entity)
        self.resistance_shift = resistance_shift
        self.vulnerability_shift = vulnerability_shift
        self.mutated = False
        self.original_attack_type: Optional[AttackType] = None

    def mutate(self, combat: CombatComponent, defense: DefenseComponent) -> Optional[AttackType]:
        """Mutate towards the attack type this virus is weakest against.

        The new attack type is the non-current type with the highest
        resistance factor (ties broken by declaration order). Resistance to
        the new type is halved and every other type is multiplied by 1.2.

        Returns:
            The new attack type, or None if the virus already mutated
        """
        if self.mutated:
            return None

        candidates = [t for t in AttackType if t != combat.attack_type]
        new_type = max(candidates, key=defense.get_resistance)

        for attack_type in AttackType:
            factor = defense.get_resistance(attack_type)
            if attack_type == new_type:
                defense.resistance_factors[attack_type] = factor * self.resistance_shift
            else:
                defense.resistance_factors[attack_type] = factor * self.vulnerability_shift

        self.original_attack_type = combat.attack_type
        combat.attack_type = new_type
        self.mutated = True
        return new_type


class BiofilmShieldComponent(AbilityComponent):
    """Bacteria shield reducing incoming damage until it breaks."""

    ability_name = "Biofilm Shield"

    def __init__(self, entity: "Entity", damage_reduction: float = 0.4, break_chance: float = 0.3):
        super().__init__(entity)
        if not 0.0 <= damage_reduction <= 1.0:
            raise ValueError("Damage reduction must be between 0 and 1")
        self.damage_reduction = damage_reduction
        self.break_chance = break_chance
        self.active = False

    def activate(self) -> bool:
        """Raise the shield. Returns False if it was already up."""
        if self.active:
            return False
        self.active = True
        return True

    def absorb(self, incoming: int, rng: Optional["RandomSource"]) -> int:
        """Reduce an incoming hit, then roll whether the shield breaks.

        Raises:
            ValueError: If the shield is up and no random source is given
        """
        if not self.active:
            return incoming
        if rng is None:
            raise ValueError(f"{self.ability_name} on {self.owner_id} needs a RandomSource for its break roll")
        reduced = round_half_up(incoming * (1 - self.damage_reduction))
        if rng.chance(self.break_chance):
            self.active = False
        return reduced


class CorrosiveSporesComponent(AbilityComponent):
    """Fungus spores adding bonus damage and area chip damage once released."""

    ability_name = "Corrosive Spores"

    def __init__(self, entity: "Entity", spore_damage: int = 2):
        super().__init__(entity)
        if spore_damage < 0:
            raise ValueError("Spore damage cannot be negative")
        self.spore_damage = spore_damage
        self.released = False

    def release(self) -> bool:
        """Release spores. Returns False if they were already out."""
        if self.released:
            return False
        self.released = True
        return True

    @property
    def bonus_damage(self) -> int:
        return self.spore_damage if self.released else 0
