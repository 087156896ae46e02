"""Entity system components.

This package contains unit definitions and component implementations:
- components.py: Unit components (Actor, Health, Combat, Defense, abilities)
- unit.py: Component-based units, factories and immutable snapshots
- unit_templates.py: YAML-backed unit catalog
"""

from .components import (
    ActorComponent,
    HealthComponent,
    CombatComponent,
    ProductionComponent,
    TargetingComponent,
    DefenseComponent,
    StatusComponent,
    AbilityComponent,
    CooldownAbility,
    ToxicSalvoComponent,
    CellularRepairComponent,
    TargetMarkingComponent,
    RapidMutationComponent,
    BiofilmShieldComponent,
    CorrosiveSporesComponent,
    round_half_up,
)
from .unit import Unit, UnitSnapshot, create_antibody, create_pathogen
from .unit_templates import (
    UnitTemplate,
    UNIT_TEMPLATES,
    load_unit_templates,
    get_template,
    create_unit,
    create_unit_from_template,
    create_roster,
)

__all__ = [
    "ActorComponent",
    "HealthComponent",
    "CombatComponent",
    "ProductionComponent",
    "TargetingComponent",
    "DefenseComponent",
    "StatusComponent",
    "AbilityComponent",
    "CooldownAbility",
    "ToxicSalvoComponent",
    "CellularRepairComponent",
    "TargetMarkingComponent",
    "RapidMutationComponent",
    "BiofilmShieldComponent",
    "CorrosiveSporesComponent",
    "round_half_up",
    "Unit",
    "UnitSnapshot",
    "create_antibody",
    "create_pathogen",
    "UnitTemplate",
    "UNIT_TEMPLATES",
    "load_unit_templates",
    "get_template",
    "create_unit",
    "create_unit_from_template",
    "create_roster",
]
