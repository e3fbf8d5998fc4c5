"""Domain models used throughout the framework."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional, Protocol, runtime_checkable


class FieldKind(Enum):
    """How a declared field takes part in the component graph.

    ``INLINE`` fields hold a component owned by their position in the graph,
    ``SHARED`` fields hold the singleton instance for their declared type and
    ``OTHER`` fields are never touched. ``ROOT`` marks the node of the object
    passed to the walk, which is held by no field.
    """

    ROOT = "root"
    INLINE = "inline"
    SHARED = "shared"
    OTHER = "other"


@runtime_checkable
class Loadable(Protocol):
    """A component exposing the lifecycle hook.

    ``load`` is called once per load, after the hooks of every component reachable
    through the component's own fields. It signals failure by raising.
    """

    def load(self) -> None: ...


@dataclass(frozen=True)
class ComponentField:
    """Represents a declared field of a component class.

    Attributes:
        name: The attribute name of the field.
        declared_type: The component type held by the field, or None for
            fields that are not components.
        kind: How the field takes part in the component graph.
        settable: Whether the framework may assign to the field.
    """

    name: str
    declared_type: Optional[type]
    kind: FieldKind
    settable: bool


@dataclass
class DependencyNode:
    """
    A component reached while walking the graph, together with the components
    reached through its own fields.

    Attributes:
        component: The component instance.
        field_name: The field the component was found in; None for the root.
        kind: ROOT for the root node, INLINE or SHARED otherwise.
        children: One node per component field, in field declaration order.
    """

    component: Any
    field_name: Optional[str] = None
    kind: FieldKind = FieldKind.ROOT
    children: list["DependencyNode"] = field(default_factory=list)

    @property
    def component_type(self) -> type:
        return type(self.component)

    def post_order(self) -> Iterator["DependencyNode"]:
        """Yield every node of the tree, each node's children before the node itself."""
        for child in self.children:
            yield from child.post_order()
        yield self
