"""Modgraph component graph loader.

Modgraph initialises an application object by walking its annotated fields.
Every field annotated with a component type is populated, with one shared
instance per component type across the whole graph, and then each
component's optional ``load()`` hook is run once, after the hooks of the
components it holds.

Key Features:
    - Fields declared with standard type hints, dataclasses included
    - One shared instance per component type, scoped to a single call
    - Inline components for per-field, unshared instances
    - Lifecycle hooks run children first, stopping at the first failure
    - Cycle detection while walking the graph

Basic Usage:
    >>> from modgraph import load
    >>>
    >>> class Config:
    ...     def load(self):
    ...         self.name = "config"
    >>>
    >>> class Logger:
    ...     config: Config
    ...
    ...     def load(self):
    ...         self.prefix = self.config.name
    >>>
    >>> class App:
    ...     config: Config
    ...     logger: Logger
    >>>
    >>> app = App()
    >>> load(app)
    >>> app.config is app.logger.config
    True

The framework consists of several core modules:
    - builders: High-level entry points
    - introspection: Classification of annotated fields
    - walker: Field initialisation and singleton wiring
    - loader: Ordered execution of lifecycle hooks
    - domain: Core domain models (ComponentField, DependencyNode)
    - errors: Framework-specific exceptions
"""

from modgraph.builders import load, make_dependency_tree
from modgraph.domain import ComponentField, DependencyNode, FieldKind, Loadable
from modgraph.errors import CyclicDependencyError, DependencyError, InvalidArgumentError
from modgraph.introspection import Inline, component_fields, is_component_type
from modgraph.loader import LoadedSet, Loader
from modgraph.singleton_registry import SingletonRegistry
from modgraph.walker import Walker

__all__ = [
    "load",
    "make_dependency_tree",
    "ComponentField",
    "DependencyNode",
    "FieldKind",
    "Loadable",
    "CyclicDependencyError",
    "DependencyError",
    "InvalidArgumentError",
    "Inline",
    "component_fields",
    "is_component_type",
    "LoadedSet",
    "Loader",
    "SingletonRegistry",
    "Walker",
]
