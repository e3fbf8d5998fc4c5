"""Container for the single shared instance of each component type.

A registry lives for exactly one call to :func:`modgraph.load`. Every shared
field of a given type, wherever it sits in the graph, is assigned the
instance registered for that type.
"""
from typing import Any, Iterator, Optional


class SingletonRegistry:
    """Mapping from concrete component type to its one instance.

    Attributes:
        _instances: Dictionary mapping component types to their instance.

    Example:
        >>> registry = SingletonRegistry({Config: Config(name="test")})
        >>> Config in registry   # True
        >>> registry[Config]     # The supplied Config
    """

    def __init__(self, instances: Optional[dict[type, Any]] = None):
        self._instances: dict[type, Any] = dict(instances or {})

    def register(self, component_type: type, instance: Any) -> None:
        """Register ``instance`` as the singleton for ``component_type``.

        Raises:
            KeyError: If an instance is already registered for the type.
        """
        if component_type in self._instances:
            raise KeyError(f"A {component_type.__name__} singleton is already registered")
        self._instances[component_type] = instance

    def __getitem__(self, component_type: type) -> Any:
        return self._instances[component_type]

    def __contains__(self, component_type: type) -> bool:
        return component_type in self._instances

    def __iter__(self) -> Iterator[type]:
        return iter(self._instances)

    def __len__(self) -> int:
        return len(self._instances)
