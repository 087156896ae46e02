"""Entity/component foundation for combat units.

A combat unit is an Entity holding at most one component per ComponentType:
identity, vitals, combat stats, pathogen defenses, status and one special
ability. Game-level component classes live in immunis.game.entities.
"""

from abc import ABC, abstractmethod
from typing import Iterator, Optional
import uuid

from ..data.game_enums import ComponentType


class ComponentError(Exception):
    """Base exception for component bookkeeping errors."""


class MissingComponentError(ComponentError):
    """Raised when a unit lacks a component it is required to have."""

    def __init__(self, entity_id: str, component_type: ComponentType):
        super().__init__(f"Unit {entity_id} has no {component_type.name.lower()} component")
        self.entity_id = entity_id
        self.component_type = component_type


class DuplicateComponentError(ComponentError):
    """Raised when a unit would end up with two components of one type."""

    def __init__(self, entity_id: str, component_type: ComponentType):
        super().__init__(f"Unit {entity_id} already has a {component_type.name.lower()} component")
        self.entity_id = entity_id
        self.component_type = component_type


class Component(ABC):
    """One focused slice of a unit's state and behavior."""

    def __init__(self, entity: "Entity"):
        self.entity = entity

    @property
    def owner_id(self) -> str:
        return self.entity.entity_id

    @abstractmethod
    def get_component_type(self) -> ComponentType:
        """Slot this component occupies on its entity."""


class Entity:
    """Roster-level identity plus the components that make up a unit.

    The id doubles as the unit id seen in combat logs and results, so
    callers that need replayable battles pass explicit ids.
    """

    def __init__(self, entity_id: Optional[str] = None):
        """
        Args:
            entity_id: Stable id, or None to generate a random one
        """
        self.entity_id: str = entity_id or uuid.uuid4().hex[:12]
        self._components: dict[ComponentType, Component] = {}

    def __repr__(self) -> str:
        slots = ", ".join(t.name.lower() for t in self._components)
        return f"Entity({self.entity_id!r}: {slots})"

    def __contains__(self, component_type: ComponentType) -> bool:
        return component_type in self._components

    def __iter__(self) -> Iterator[Component]:
        return iter(self._components.values())

    def add_component(self, component: Component) -> None:
        """Attach a component to its slot.

        Raises:
            DuplicateComponentError: If the slot is already taken
        """
        slot = component.get_component_type()
        if slot in self._components:
            raise DuplicateComponentError(self.entity_id, slot)
        self._components[slot] = component

    def get_component(self, component_type: ComponentType) -> Optional[Component]:
        return self._components.get(component_type)

    def require_component(self, component_type: ComponentType) -> Component:
        """Component in the given slot.

        Raises:
            MissingComponentError: If the slot is empty
        """
        try:
            return self._components[component_type]
        except KeyError:
            raise MissingComponentError(self.entity_id, component_type) from None

    def has_component(self, component_type: ComponentType) -> bool:
        return component_type in self

    def remove_component(self, component_type: ComponentType) -> Optional[Component]:
        """Detach and return the component in a slot, if any."""
        return self._components.pop(component_type, None)
