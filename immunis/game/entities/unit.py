"""Component-based combat unit.

This module provides the Unit class that wraps an Entity and its components
behind a property-based API, plus factory functions for antibodies and
pathogens and the immutable UnitSnapshot handed to presentation layers.
"""

from dataclasses import dataclass, field
from typing import Optional, TypeVar, cast

from ...core.data import (
    AttackType, ComponentType, Side, UnitKind, ANTIBODY_KINDS, PATHOGEN_KINDS,
    UNIT_KIND_NAMES,
)
from ...core.entities import Entity, MissingComponentError
from ...core.random_source import RandomSource
from .components import (
    AbilityComponent,
    ActorComponent,
    BiofilmShieldComponent,
    CellularRepairComponent,
    CombatComponent,
    CooldownAbility,
    CorrosiveSporesComponent,
    DefenseComponent,
    HealthComponent,
    ProductionComponent,
    RapidMutationComponent,
    StatusComponent,
    TargetingComponent,
    TargetMarkingComponent,
    ToxicSalvoComponent,
    round_half_up,
)

A = TypeVar("A", bound=AbilityComponent)


@dataclass(frozen=True)
class UnitSnapshot:
    """Immutable value copy of a unit's visible state."""
    unit_id: str
    name: str
    species: str
    kind: UnitKind
    side: Side
    hp_current: int
    hp_max: int
    attack_type: AttackType
    initiative: int
    is_marked: bool = False
    resistance_factors: dict[AttackType, float] = field(default_factory=dict, compare=False)

    @property
    def is_defeated(self) -> bool:
        return self.hp_current <= 0

    def to_dict(self) -> dict:
        """Summary consumed by the external narrative generator."""
        return {
            "id": self.unit_id,
            "name": self.name,
            "type": UNIT_KIND_NAMES[self.kind],
            "hp": self.hp_current,
            "maxHp": self.hp_max,
            "attackType": self.attack_type.value,
        }


class Unit:
    """Component-based combat unit with hybrid property access.

    This Unit class uses an Entity + Components internally:
    - Actor: Identity, species and kind
    - Health: Life and death management
    - Combat: Damage, initiative and attack type
    - Status: Target mark
    - Production/Targeting: antibodies only
    - Defense: pathogens only
    - Ability: at most one special ability

    Examples:
        unit.hp_current
        unit.is_defeated
        unit.combat.initiative
        unit.defense.get_resistance(AttackType.CHEMICAL)
    """

    def __init__(self, entity: Entity):
        """Wrap an entity that already carries the core components."""
        self.entity = entity

    def __repr__(self) -> str:
        return f"Unit({self.unit_id!r}, {self.name!r}, {self.kind.name}, hp={self.hp_current}/{self.hp_max})"

    # ============== Core Properties (Most Frequently Used) ==============

    @property
    def unit_id(self) -> str:
        return self.entity.entity_id

    @property
    def name(self) -> str:
        return self.actor.name

    @property
    def species(self) -> str:
        """Stable identity used by immune memory."""
        return self.actor.species

    @property
    def kind(self) -> UnitKind:
        return self.actor.kind

    @property
    def side(self) -> Side:
        return self.actor.side

    @property
    def is_antibody(self) -> bool:
        return self.kind in ANTIBODY_KINDS

    @property
    def is_pathogen(self) -> bool:
        return self.kind in PATHOGEN_KINDS

    @property
    def hp_current(self) -> int:
        return self.health.hp_current

    @property
    def hp_max(self) -> int:
        return self.health.hp_max

    @property
    def damage(self) -> int:
        return self.combat.damage

    @property
    def initiative(self) -> int:
        return self.combat.initiative

    @property
    def attack_type(self) -> AttackType:
        return self.combat.attack_type

    @property
    def is_defeated(self) -> bool:
        """Re-evaluated on every access, never cached."""
        return not self.health.is_alive()

    @property
    def is_alive(self) -> bool:
        return self.health.is_alive()

    @property
    def is_marked(self) -> bool:
        return self.status.marked

    @property
    def prioritize_low_health(self) -> bool:
        """Antibody target preference. Pathogens use a fixed policy."""
        targeting = self.entity.get_component(ComponentType.TARGETING)
        if targeting is None:
            return False
        return cast(TargetingComponent, targeting).prioritize_low_health

    @prioritize_low_health.setter
    def prioritize_low_health(self, value: bool) -> None:
        self.targeting.prioritize_low_health = value

    # ============== Core Components (Always Present) ==============

    @property
    def actor(self) -> ActorComponent:
        return cast(ActorComponent, self.entity.require_component(ComponentType.ACTOR))

    @property
    def health(self) -> HealthComponent:
        return cast(HealthComponent, self.entity.require_component(ComponentType.HEALTH))

    @property
    def combat(self) -> CombatComponent:
        return cast(CombatComponent, self.entity.require_component(ComponentType.COMBAT))

    @property
    def status(self) -> StatusComponent:
        return cast(StatusComponent, self.entity.require_component(ComponentType.STATUS))

    # ============== Side-specific Components ==============

    @property
    def production(self) -> ProductionComponent:
        return cast(ProductionComponent, self.entity.require_component(ComponentType.PRODUCTION))

    @property
    def targeting(self) -> TargetingComponent:
        return cast(TargetingComponent, self.entity.require_component(ComponentType.TARGETING))

    @property
    def defense(self) -> DefenseComponent:
        return cast(DefenseComponent, self.entity.require_component(ComponentType.DEFENSE))

    @property
    def ability(self) -> Optional[AbilityComponent]:
        return cast(Optional[AbilityComponent], self.entity.get_component(ComponentType.ABILITY))

    def require_ability(self, ability_type: type[A]) -> A:
        """Get the ability component, checking it is the expected kind.

        Raises:
            MissingComponentError: If the unit has no ability of that type
        """
        ability = self.ability
        if not isinstance(ability, ability_type):
            raise MissingComponentError(self.unit_id, ComponentType.ABILITY)
        return ability

    # ============== Combat Primitives ==============

    def attack(self) -> int:
        """Compute the damage of this unit's next strike.

        Cooldown-gated offensive abilities fire here when ready: the toxic
        salvo multiplies damage and the marking factor boosts the marker's
        strike. Released spores add their bonus damage.
        """
        base = self.combat.damage
        if self.kind is UnitKind.OFFENSIVE:
            salvo = self.require_ability(ToxicSalvoComponent)
            if salvo.trigger():
                return round_half_up(base * salvo.damage_multiplier)
        elif self.kind is UnitKind.MARKER:
            marking = self.require_ability(TargetMarkingComponent)
            if marking.trigger():
                return round_half_up(base * marking.marking_factor)
        elif self.kind is UnitKind.FUNGUS:
            return base + self.require_ability(CorrosiveSporesComponent).bonus_damage
        return base

    def receive_damage(
        self,
        amount: int,
        attack_type: Optional[AttackType] = None,
        rng: Optional[RandomSource] = None
    ) -> int:
        """Take a hit and return the damage it carried after defenses.

        Pathogens run the hit through their biofilm (bacteria only), then
        resistance and armor, with a floor of 1. Antibodies take the amount
        directly. Health is clamped at 0 either way, but the returned value
        is not: an overkill hit reports its full size, as the combat log does.

        Args:
            amount: Incoming damage before defenses
            attack_type: Classification of the incoming damage
            rng: Random source for the biofilm break roll, required while a
                shield is up

        Returns:
            Damage after defenses, before clamping to remaining health

        Raises:
            ValueError: If amount is negative, or a raised biofilm is hit
                without a random source
        """
        if amount < 0:
            raise ValueError("Damage amount cannot be negative")

        if not self.is_pathogen:
            self.health.take_damage(amount)
            return amount

        incoming = amount
        if self.kind is UnitKind.BACTERIA:
            shield = self.require_ability(BiofilmShieldComponent)
            incoming = shield.absorb(incoming, rng)

        actual = self.defense.reduce_damage(incoming, attack_type or AttackType.PHYSICAL)
        self.health.take_damage(actual)
        return actual

    def heal(self, amount: int) -> int:
        """Restore health, returning the amount actually healed."""
        return self.health.heal(amount)

    def execute_special_capability(self) -> bool:
        """Fire this unit's special ability if it can fire.

        The toxic salvo and target marking fire inside attack(), since they
        only exist as part of a strike; for those kinds this is a no-op
        returning False so a following attack() keeps its boost. Cellular
        repair starts its cooldown here.

        Returns:
            True if the ability changed state
        """
        if self.kind in (UnitKind.OFFENSIVE, UnitKind.MARKER):
            return False
        if self.kind is UnitKind.DEFENSIVE:
            return self.require_ability(CellularRepairComponent).trigger()
        if self.kind is UnitKind.VIRUS:
            mutation = self.require_ability(RapidMutationComponent)
            return mutation.mutate(self.combat, self.defense) is not None
        if self.kind is UnitKind.BACTERIA:
            return self.require_ability(BiofilmShieldComponent).activate()
        if self.kind is UnitKind.FUNGUS:
            return self.require_ability(CorrosiveSporesComponent).release()
        return False

    def tick_cooldowns(self) -> None:
        """Advance cooldown-based abilities by one turn."""
        ability = self.ability
        if isinstance(ability, CooldownAbility):
            ability.tick()

    def snapshot(self) -> UnitSnapshot:
        """Immutable copy of the current state."""
        defense = self.entity.get_component(ComponentType.DEFENSE)
        resistances = dict(cast(DefenseComponent, defense).resistance_factors) if defense else {}
        return UnitSnapshot(
            unit_id=self.unit_id,
            name=self.name,
            species=self.species,
            kind=self.kind,
            side=self.side,
            hp_current=self.hp_current,
            hp_max=self.hp_max,
            attack_type=self.attack_type,
            initiative=self.initiative,
            is_marked=self.is_marked,
            resistance_factors=resistances,
        )


# ============== Factories ==============


def _base_entity(
    unit_id: Optional[str], name: str, kind: UnitKind, species: Optional[str],
    max_health: int, damage: int, initiative: int, attack_type: AttackType
) -> Entity:
    entity = Entity(unit_id)
    entity.add_component(ActorComponent(entity, name, kind, species))
    entity.add_component(HealthComponent(entity, max_health))
    entity.add_component(CombatComponent(entity, damage, initiative, attack_type))
    entity.add_component(StatusComponent(entity))
    return entity


def create_antibody(
    name: str,
    kind: UnitKind = UnitKind.BASIC_ANTIBODY,
    *,
    max_health: int,
    damage: int,
    initiative: int,
    attack_type: AttackType = AttackType.PHYSICAL,
    energy_cost: int = 0,
    biomaterial_cost: int = 0,
    production_time: int = 0,
    prioritize_low_health: bool = True,
    unit_id: Optional[str] = None,
    species: Optional[str] = None,
    **ability_params,
) -> Unit:
    """Create an antibody unit.

    Args:
        name: Display name
        kind: One of the antibody kinds
        ability_params: Overrides for the kind's ability component, e.g.
            cooldown, damage_multiplier, heal_amount, damage_increase

    Raises:
        ValueError: If kind is not an antibody kind
    """
    if kind not in ANTIBODY_KINDS:
        raise ValueError(f"{kind} is not an antibody kind")

    entity = _base_entity(unit_id, name, kind, species, max_health, damage, initiative, attack_type)
    entity.add_component(ProductionComponent(entity, energy_cost, biomaterial_cost, production_time))
    entity.add_component(TargetingComponent(entity, prioritize_low_health))

    if kind is UnitKind.OFFENSIVE:
        entity.add_component(ToxicSalvoComponent(entity, **ability_params))
    elif kind is UnitKind.DEFENSIVE:
        entity.add_component(CellularRepairComponent(entity, **ability_params))
    elif kind is UnitKind.MARKER:
        entity.add_component(TargetMarkingComponent(entity, **ability_params))
    elif ability_params:
        raise ValueError(f"{kind} takes no ability parameters")

    return Unit(entity)


def create_pathogen(
    name: str,
    kind: UnitKind = UnitKind.BASIC_PATHOGEN,
    *,
    max_health: int,
    damage: int,
    initiative: int,
    attack_type: AttackType = AttackType.PHYSICAL,
    armor: float = 0.0,
    resistance_factors: Optional[dict[AttackType, float]] = None,
    unit_id: Optional[str] = None,
    species: Optional[str] = None,
    **ability_params,
) -> Unit:
    """Create a pathogen unit.

    Args:
        name: Display name
        kind: One of the pathogen kinds
        armor: Percentage damage reduction
        resistance_factors: Multiplier per attack type (default 1.0)
        ability_params: Overrides for the kind's ability component, e.g.
            damage_reduction, break_chance, spore_damage

    Raises:
        ValueError: If kind is not a pathogen kind
    """
    if kind not in PATHOGEN_KINDS:
        raise ValueError(f"{kind} is not a pathogen kind")

    entity = _base_entity(unit_id, name, kind, species, max_health, damage, initiative, attack_type)
    entity.add_component(DefenseComponent(entity, armor, resistance_factors))

    if kind is UnitKind.VIRUS:
        entity.add_component(RapidMutationComponent(entity, **ability_params))
    elif kind is UnitKind.BACTERIA:
        entity.add_component(BiofilmShieldComponent(entity, **ability_params))
    elif kind is UnitKind.FUNGUS:
        entity.add_component(CorrosiveSporesComponent(entity, **ability_params))
    elif ability_params:
        raise ValueError(f"{kind} takes no ability parameters")

    return Unit(entity)
