"""Invocation of component lifecycle hooks in dependency order."""

import logging
from typing import Iterator

from modgraph.domain import DependencyNode
from modgraph.introspection import is_loadable

__all__ = ["LoadedSet", "Loader"]

logger = logging.getLogger(__name__)


class LoadedSet:
    """The component types whose hook has already run during one load."""

    def __init__(self):
        self._loaded: set[type] = set()

    def add(self, component_type: type) -> None:
        self._loaded.add(component_type)

    def __contains__(self, component_type: type) -> bool:
        return component_type in self._loaded

    def __iter__(self) -> Iterator[type]:
        return iter(self._loaded)

    def __len__(self) -> int:
        return len(self._loaded)


class Loader:
    """Run the ``load()`` hook of every component in a dependency tree."""

    def __init__(self, loaded: LoadedSet):
        self._loaded = loaded

    def load(self, root: DependencyNode) -> None:
        """Run hooks children first, left to right, at most once per component type.

        Components without a ``load()`` hook are passed over. The first hook to
        raise ends the load: its exception propagates unchanged, no further hook
        runs, and hooks which already ran are not undone.

        Args:
            root: The root of the tree built by :class:`~modgraph.walker.Walker`.
        """
        for node in root.post_order():
            self._load_node(node)

    def _load_node(self, node: DependencyNode) -> None:
        component = node.component
        if not is_loadable(component):
            return

        component_type = node.component_type
        if component_type in self._loaded:
            logger.debug("Skipping %s, already loaded", component_type.__name__)
            return

        logger.debug("Loading %s", component_type.__name__)
        try:
            component.load()
        except Exception:
            logger.debug("Loading %s failed", component_type.__name__, exc_info=True)
            raise
        self._loaded.add(component_type)
