"""Tunable combat constants and their YAML loader."""

import os
from dataclasses import dataclass, fields
from typing import Optional

import yaml


@dataclass
class CombatConfig:
    """Every probability, multiplier and reward constant the engine uses."""
    max_turns: int = 50

    # Per-turn trigger probabilities
    pathogen_focus_low_health_chance: float = 0.6
    mutation_chance: float = 0.2
    biofilm_trigger_chance: float = 0.3
    spore_release_chance: float = 0.25

    mark_damage_multiplier: float = 1.5
    heal_threshold: float = 0.7  # Fraction of max health under which allies get healed

    # Rewards
    victory_base_resources: int = 10
    victory_resources_per_turn: int = 5
    victory_base_research: int = 5
    pathogen_health_divisor: int = 5
    research_per_pathogen: int = 2
    consolation_resources: int = 5
    consolation_research: int = 1

    # Significant events for the narrative summary
    significant_damage_threshold: int = 20
    significant_event_window: int = 10

    def __post_init__(self):
        if self.max_turns < 1:
            raise ValueError("max_turns must be at least 1")
        for name in ("pathogen_focus_low_health_chance", "mutation_chance",
                     "biofilm_trigger_chance", "spore_release_chance", "heal_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0 and 1, got {value}")
        if self.mark_damage_multiplier < 0:
            raise ValueError("mark_damage_multiplier cannot be negative")
        if self.pathogen_health_divisor <= 0:
            raise ValueError("pathogen_health_divisor must be positive")
        if self.significant_event_window < 0:
            raise ValueError("significant_event_window cannot be negative")


def default_config_path() -> str:
    """Path of the combat tuning file bundled with the package."""
    package_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    return os.path.join(package_root, "assets", "data", "combat", "combat_config.yaml")


def load_combat_config(yaml_path: Optional[str] = None) -> CombatConfig:
    """Load combat tuning from a YAML file.

    Omitted keys keep their defaults.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If a key is unknown or a value is out of range
    """
    yaml_path = yaml_path or default_config_path()

    try:
        with open(yaml_path, "r") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise FileNotFoundError(f"Combat config file not found: {yaml_path}")

    if not isinstance(data, dict):
        raise ValueError(f"Invalid combat config in {yaml_path}: expected a mapping")

    known = {f.name for f in fields(CombatConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown combat config keys in {yaml_path}: {', '.join(unknown)}")

    try:
        return CombatConfig(**data)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid combat config value in {yaml_path}: {e}")
