"""
Shared fixtures for the immunis test suite.

Provides seeded randomness, a quiet log manager, immune memory and small
hand-built rosters for combat tests.
"""

import sys
import os
import pytest

# Add the project root to the Python path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from immunis.core.random_source import RandomSource
from immunis.game.combat import CombatConfig, CombatEngine
from immunis.game.managers import LogManager
from immunis.game.memory import ImmuneMemory
from tests.test_utils import FixedRandom, UnitFactory


@pytest.fixture
def rng():
    """Seeded random source for reproducible draws."""
    return RandomSource(1234)


@pytest.fixture
def fixed_rng():
    """Random source whose rolls always fail and whose choices pick the first item."""
    return FixedRandom()


@pytest.fixture
def lucky_rng():
    """Random source whose rolls always succeed."""
    return FixedRandom(chance_result=True)


@pytest.fixture
def config():
    return CombatConfig()


@pytest.fixture
def log_manager():
    """Create a log manager for testing."""
    return LogManager(max_messages=500)


@pytest.fixture
def memory(log_manager):
    return ImmuneMemory(log_manager)


@pytest.fixture
def engine(fixed_rng, config, memory, log_manager):
    """Engine with deterministic rolls and an empty immune memory."""
    return CombatEngine(fixed_rng, config, memory, log_manager)


@pytest.fixture
def antibody():
    return UnitFactory.antibody("Test Antibody", unit_id="ab_1")


@pytest.fixture
def pathogen():
    return UnitFactory.pathogen("Test Pathogen", unit_id="pa_1")
