"""High level entry points for initialising and loading component graphs."""

import inspect
from typing import Any, Optional

from modgraph.domain import DependencyNode
from modgraph.errors import DependencyError, InvalidArgumentError
from modgraph.introspection import is_component_type
from modgraph.loader import LoadedSet, Loader
from modgraph.singleton_registry import SingletonRegistry
from modgraph.walker import Walker

__all__ = ["make_dependency_tree", "load"]


def make_dependency_tree(
    root: Any,
    scope: Optional[dict[type, Any]] = None,
) -> DependencyNode:
    """Initialise the component fields of ``root`` without running any hook.

    Every inline and shared component field reachable from ``root`` is
    populated in place, and all shared fields of the same type are given the
    same instance.

    Args:
        root: An instance of a component type.
        scope: Optional mapping from component type to an already built
            instance, used as the singleton for that type.

    Returns:
        The root :class:`DependencyNode` of the resulting tree.

    Raises:
        InvalidArgumentError: If ``root`` is not an instance of a component type.
        DependencyError: If ``scope`` is malformed, or a component cannot be built.
        CyclicDependencyError: If a component type depends on itself.

    Example:
        >>> app = App()
        >>> tree = make_dependency_tree(app)
        >>> [child.field_name for child in tree.children]
        ['config', 'logger']
    """
    _validate_root(root)
    registry = SingletonRegistry(_validated_scope(scope or {}))
    return Walker(registry).walk(root)


def load(root: Any, scope: Optional[dict[type, Any]] = None) -> None:
    """Initialise the component graph of ``root`` and run its lifecycle hooks.

    After the fields are populated (see :func:`make_dependency_tree`), the
    ``load()`` hook of each component is called once per component type, after
    the hooks of every component reachable through its fields. ``root`` is
    loaded last.

    Args:
        root: An instance of a component type.
        scope: Optional mapping from component type to an already built
            instance, used as the singleton for that type.

    Raises:
        InvalidArgumentError: If ``root`` is not an instance of a component type.
        DependencyError: If ``scope`` is malformed, or a component cannot be built.
        CyclicDependencyError: If a component type depends on itself.
        Exception: Whatever the first failing ``load()`` hook raised.
    """
    tree = make_dependency_tree(root, scope)
    Loader(LoadedSet()).load(tree)


def _validate_root(root: Any):
    """Check that ``root`` is an instance, not a class, of a component type.

    Raises:
        InvalidArgumentError: If it is not.
    """
    if root is None or inspect.isclass(root) or not is_component_type(type(root)):
        raise InvalidArgumentError(
            f"Expected an instance of a component type, got {root!r}"
        )


def _validated_scope(scope: dict[type, Any]) -> dict[type, Any]:
    """Validate that every scoped instance is keyed by its own concrete component type.

    Raises:
        DependencyError: If a key is not a component type or a value is not
            exactly an instance of its key.
    """
    not_components = [key for key in scope if not is_component_type(key)]
    if not_components:
        raise DependencyError(f"Scope keys {not_components} are not component types")

    mismatched = [
        key.__name__ for key, instance in scope.items() if type(instance) is not key
    ]
    if mismatched:
        raise DependencyError(
            f"Scoped instances for {mismatched} are not of their declared type"
        )
    return scope
