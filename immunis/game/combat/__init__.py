"""Combat system for antibody versus pathogen battles.

This package contains the turn-based combat simulation:
- combat_config: Tunable constants and their YAML loader
- combat_log: Immutable log entries
- combat_result: TurnResult, CombatResult and significant event selection
- targeting: Target and heal-target selection
- combat_resolver: Per-kind action resolution
- rewards: Reward calculation
- combat_engine: Idle/Active/Ended state machine
- stepper: Single-step and run-to-completion execution
"""

from .combat_config import CombatConfig, load_combat_config, default_config_path
from .combat_log import CombatLogEntry
from .combat_result import CombatResult, TurnResult, select_significant_events
from .targeting import TargetSelector
from .combat_resolver import ActionOutcome, CombatResolver
from .rewards import RewardCalculator
from .combat_engine import CombatEngine, CombatSetupError
from .stepper import CombatStepper, simulate_combat

__all__ = [
    "CombatConfig",
    "load_combat_config",
    "default_config_path",
    "CombatLogEntry",
    "CombatResult",
    "TurnResult",
    "select_significant_events",
    "TargetSelector",
    "ActionOutcome",
    "CombatResolver",
    "RewardCalculator",
    "CombatEngine",
    "CombatSetupError",
    "CombatStepper",
    "simulate_combat",
]
