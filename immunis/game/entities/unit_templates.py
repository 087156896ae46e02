"""Unit catalog templates for roster assembly.

This module defines the static stats of every antibody and pathogen type.
Templates are loaded from a YAML file and converted to data structures that
the unit factories turn into fully-componented units.
"""

import os
import uuid
from dataclasses import dataclass, field
from typing import Any, Optional

import yaml

from ...core.data import AttackType, UnitKind, ANTIBODY_KINDS
from .unit import Unit, create_antibody, create_pathogen

_ANTIBODY_FIELDS = ("energy_cost", "biomaterial_cost", "production_time", "prioritize_low_health")
_PATHOGEN_FIELDS = ("armor",)


@dataclass
class UnitTemplate:
    """Template for creating a unit of one catalog type.

    The key doubles as the species identity, so every unit built from the
    same template shares immune memory bonuses.
    """
    key: str
    name: str
    kind: UnitKind
    max_health: int
    damage: int
    initiative: int
    attack_type: AttackType
    extra: dict[str, Any] = field(default_factory=dict)
    resistances: dict[AttackType, float] = field(default_factory=dict)
    ability: dict[str, Any] = field(default_factory=dict)

    @property
    def is_antibody(self) -> bool:
        return self.kind in ANTIBODY_KINDS


def default_templates_path() -> str:
    """Path of the catalog bundled with the package."""
    package_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    return os.path.join(package_root, "assets", "data", "units", "unit_templates.yaml")


def _parse_template(key: str, data: dict[str, Any], allowed_extra: tuple[str, ...]) -> UnitTemplate:
    kind = UnitKind[data["kind"]]
    return UnitTemplate(
        key=key,
        name=data["name"],
        kind=kind,
        max_health=int(data["max_health"]),
        damage=int(data["damage"]),
        initiative=int(data["initiative"]),
        attack_type=AttackType(data.get("attack_type", "physical")),
        extra={name: data[name] for name in allowed_extra if name in data},
        resistances={AttackType(t): float(v) for t, v in (data.get("resistances") or {}).items()},
        ability=dict(data.get("ability") or {}),
    )


def load_unit_templates(yaml_path: Optional[str] = None) -> dict[str, UnitTemplate]:
    """Load unit templates from a YAML file.

    Args:
        yaml_path: Catalog file, defaults to the bundled one

    Returns:
        Dictionary mapping template keys to UnitTemplate objects

    Raises:
        FileNotFoundError: If the file does not exist
        KeyError: If a required field is missing
        ValueError: If a kind or attack type name is invalid
    """
    yaml_path = yaml_path or default_templates_path()

    try:
        with open(yaml_path, "r") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Unit templates file not found: {yaml_path}")

    try:
        templates = {}
        for key, template_data in (data.get("antibodies") or {}).items():
            template = _parse_template(key, template_data, _ANTIBODY_FIELDS)
            if not template.is_antibody:
                raise ValueError(f"{key} is listed as an antibody but has kind {template.kind.name}")
            templates[key] = template
        for key, template_data in (data.get("pathogens") or {}).items():
            template = _parse_template(key, template_data, _PATHOGEN_FIELDS)
            if template.is_antibody:
                raise ValueError(f"{key} is listed as a pathogen but has kind {template.kind.name}")
            templates[key] = template
        return templates

    except KeyError as e:
        raise KeyError(f"Invalid template structure in {yaml_path}: {e}")
    except (AttributeError, ValueError) as e:
        raise ValueError(f"Invalid template value in {yaml_path}: {e}")


# Load templates from the bundled catalog
UNIT_TEMPLATES: dict[str, UnitTemplate] = load_unit_templates()


def get_template(key: str) -> UnitTemplate:
    """Get the template for a catalog key.

    Raises:
        KeyError: If key is not recognized
    """
    if key not in UNIT_TEMPLATES:
        raise KeyError(f"No template found for unit type: {key}")

    return UNIT_TEMPLATES[key]


def create_unit_from_template(
    template: UnitTemplate,
    unit_id: Optional[str] = None,
    name: Optional[str] = None
) -> Unit:
    """Build a unit from a template.

    Args:
        template: Catalog entry to instantiate
        unit_id: Explicit instance ID, defaults to "<key>_<random hex>"
        name: Display name override
    """
    common = dict(
        kind=template.kind,
        max_health=template.max_health,
        damage=template.damage,
        initiative=template.initiative,
        attack_type=template.attack_type,
        unit_id=unit_id or f"{template.key}_{uuid.uuid4().hex[:8]}",
        species=template.key,
        **template.extra,
        **template.ability,
    )
    display_name = name or template.name

    if template.is_antibody:
        return create_antibody(display_name, **common)
    return create_pathogen(display_name, resistance_factors=dict(template.resistances), **common)


def create_unit(key: str, unit_id: Optional[str] = None, name: Optional[str] = None) -> Unit:
    """Build a unit from the bundled catalog by key."""
    return create_unit_from_template(get_template(key), unit_id=unit_id, name=name)


def create_roster(keys: list[str]) -> list[Unit]:
    """Build one unit per key, preserving order."""
    return [create_unit(key) for key in keys]
