"""
Walks the declared fields of a component, wiring shared singletons into place.

The walk is depth first in field declaration order. Inline fields receive a
component of their own; shared fields receive the instance registered for
their type in the :class:`SingletonRegistry`, constructing and registering it
on first sight. Every component field yields one :class:`DependencyNode`, so
the resulting tree mirrors the nesting of the fields.
"""

import logging
from typing import Any

from modgraph.domain import ComponentField, DependencyNode, FieldKind
from modgraph.errors import CyclicDependencyError, DependencyError
from modgraph.introspection import component_fields, constructor_arguments
from modgraph.singleton_registry import SingletonRegistry

__all__ = ["Walker"]

logger = logging.getLogger(__name__)


class Walker:
    """Build a :class:`DependencyNode` tree from a root component."""

    def __init__(self, registry: SingletonRegistry):
        self._registry = registry
        self._walking: list[type] = []

    def walk(self, component: Any) -> DependencyNode:
        """Initialise the component fields of ``component`` recursively.

        Args:
            component: The root component instance. It is mutated in place.

        Returns:
            The root node of the dependency tree.

        Raises:
            CyclicDependencyError: If a component type is reached through its own fields.
            DependencyError: If a component type cannot be constructed or its
                annotations cannot be resolved.
        """
        return self._walk(DependencyNode(component))

    def _walk(self, node: DependencyNode) -> DependencyNode:
        self._walking.append(node.component_type)
        try:
            for component_field in component_fields(node.component_type):
                if component_field.kind is FieldKind.OTHER or not component_field.settable:
                    continue
                self._check_not_walking(component_field.declared_type)

                child = DependencyNode(
                    self._resolve(node.component, component_field),
                    component_field.name,
                    component_field.kind,
                )
                node.children.append(self._walk(child))
        finally:
            self._walking.pop()
        return node

    def _check_not_walking(self, component_type: type):
        if component_type in self._walking:
            start = self._walking.index(component_type)
            raise CyclicDependencyError(tuple(self._walking[start:]) + (component_type,))

    def _resolve(self, owner: Any, component_field: ComponentField) -> Any:
        """Find or create the component for a field, and assign it to the field."""
        declared_type = component_field.declared_type

        if component_field.kind is FieldKind.INLINE:
            current = getattr(owner, component_field.name, None)
            # A class-level default would be shared between owners.
            if type(current) is declared_type and current is not getattr(
                type(owner), component_field.name, None
            ):
                return current
            instance = self._construct(owner, component_field)
        elif declared_type in self._registry:
            instance = self._registry[declared_type]
            logger.debug(
                "Reusing %s singleton for %s.%s",
                declared_type.__name__,
                type(owner).__name__,
                component_field.name,
            )
        else:
            instance = self._construct(owner, component_field)
            self._registry.register(declared_type, instance)
            logger.debug(
                "Allocated %s singleton for %s.%s",
                declared_type.__name__,
                type(owner).__name__,
                component_field.name,
            )

        setattr(owner, component_field.name, instance)
        return instance

    @staticmethod
    def _construct(owner: Any, component_field: ComponentField) -> Any:
        declared_type = component_field.declared_type
        arguments = constructor_arguments(declared_type)
        try:
            return declared_type(**arguments)
        except Exception as e:
            raise DependencyError(
                f"Cannot construct {declared_type.__name__} for field "
                f"{type(owner).__name__}.{component_field.name}: {e}"
            ) from e
