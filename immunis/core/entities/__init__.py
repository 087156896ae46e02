"""Entity system foundation.

This package contains the ECS foundation:
- components.py: Base Component and Entity classes plus component errors
"""

from .components import (
    Component,
    Entity,
    ComponentError,
    MissingComponentError,
    DuplicateComponentError,
)

__all__ = [
    "Component",
    "Entity",
    "ComponentError",
    "MissingComponentError",
    "DuplicateComponentError",
]
