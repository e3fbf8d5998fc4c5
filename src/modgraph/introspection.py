"""Introspection of component classes and their declared fields."""

import dataclasses
import inspect
import types
from enum import Enum
from typing import (
    Annotated,
    Any,
    ClassVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
    is_typeddict,
)

from modgraph.domain import ComponentField, FieldKind, Loadable
from modgraph.errors import DependencyError

__all__ = [
    "Inline",
    "component_fields",
    "constructor_arguments",
    "is_component_type",
    "is_loadable",
]


_COLLECTION_TYPES = (dict, list, tuple, set, frozenset)


class Inline:
    """Marks a component field as owned by its position rather than shared by type.

    Example:
        >>> @dataclass
        ... class Server:
        ...     limits: Annotated[Limits, Inline]   # a private Limits per Server
        ...     config: Config                      # the single shared Config
    """


def is_loadable(target: Any) -> bool:
    """Whether a component class or instance exposes the ``load()`` lifecycle hook."""
    return isinstance(target, Loadable) and callable(target.load)


def is_component_type(target: Any) -> bool:
    """Determine whether a type is a component type.

    Component types are classes which declare their fields through annotations
    (dataclasses included) or expose the ``load()`` hook. Builtins, enums,
    protocols, abstract classes and collections (TypedDicts and NamedTuples
    included) are never component types, since the framework could not
    construct or populate them.

    Args:
        target: The object to check.

    Returns:
        True if instances of ``target`` can be walked and constructed.

    Example:
        >>> @dataclass
        ... class Config:
        ...     name: str = ""
        >>> is_component_type(Config)   # True
        >>> is_component_type(str)      # False
        >>> is_component_type(Config()) # False, not a class
    """
    if not inspect.isclass(target):
        return False
    if target.__module__ == "builtins" or issubclass(target, Enum):
        return False
    if is_typeddict(target) or issubclass(target, _COLLECTION_TYPES):
        return False
    if getattr(target, "_is_protocol", False) or inspect.isabstract(target):
        return False
    return (
        dataclasses.is_dataclass(target)
        or any(inspect.get_annotations(base) for base in target.__mro__[:-1])
        or is_loadable(target)
    )


def component_fields(cls: type) -> list[ComponentField]:
    """Classify the declared fields of a component class.

    Fields are returned in declaration order, fields of base classes first.

    Args:
        cls: The component class to analyze.

    Returns:
        One ComponentField per annotated attribute.

    Raises:
        DependencyError: If the annotations refer to names which cannot be resolved.

    Example:
        >>> @dataclass
        ... class Reporter:
        ...     config: Config
        ...     limits: Annotated[Limits, Inline]
        ...     name: str = ""
        ...     _cache: Optional[Cache] = None
        >>> component_fields(Reporter)
        >>> # Returns:
        >>> # [ComponentField("config", Config, FieldKind.SHARED, True),
        >>> #  ComponentField("limits", Limits, FieldKind.INLINE, True),
        >>> #  ComponentField("name", None, FieldKind.OTHER, True),
        >>> #  ComponentField("_cache", Cache, FieldKind.SHARED, False)]
    """
    try:
        hints = get_type_hints(cls, include_extras=True)
    except NameError as e:
        raise DependencyError(
            f"Cannot resolve field annotations of {cls.__name__}: {e}"
        ) from e

    frozen = _is_frozen_dataclass(cls)
    return [_make_field(name, annotation, frozen) for name, annotation in hints.items()]


def constructor_arguments(cls: type) -> dict[str, Any]:
    """Arguments for constructing ``cls`` before its component fields are populated.

    Required dataclass fields holding a component are passed ``None``; the walk
    assigns them right after construction. Other classes are constructed
    without arguments.

    Example:
        >>> @dataclass
        ... class Logger:
        ...     config: Config
        ...     level: int = 0
        >>> constructor_arguments(Logger)   # {"config": None}
    """
    if not dataclasses.is_dataclass(cls):
        return {}

    kinds = {f.name: f.kind for f in component_fields(cls)}
    return {
        f.name: None
        for f in dataclasses.fields(cls)
        if f.init
        and f.default is dataclasses.MISSING
        and f.default_factory is dataclasses.MISSING
        and kinds.get(f.name, FieldKind.OTHER) is not FieldKind.OTHER
    }


def _make_field(name: str, annotation: Any, frozen: bool) -> ComponentField:
    if get_origin(annotation) is ClassVar:
        return ComponentField(name, None, FieldKind.OTHER, False)

    settable = not frozen and not name.startswith("_")

    if get_origin(annotation) is Annotated:
        base_type, *metadata = get_args(annotation)
        base_type = _unwrap_optional(base_type)
        if any(m is Inline for m in metadata) and is_component_type(base_type):
            return ComponentField(name, base_type, FieldKind.INLINE, settable)
        annotation = base_type

    annotation = _unwrap_optional(annotation)
    if is_component_type(annotation):
        return ComponentField(name, annotation, FieldKind.SHARED, settable)
    return ComponentField(name, None, FieldKind.OTHER, settable)


def _unwrap_optional(annotation: Any) -> Any:
    """Strip ``None`` from ``Optional[T]`` and ``T | None``, leaving other annotations alone."""
    if get_origin(annotation) not in (Union, types.UnionType):
        return annotation
    args = [arg for arg in get_args(annotation) if arg is not type(None)]
    if len(args) == 1:
        return args[0]
    return annotation


def _is_frozen_dataclass(cls: type) -> bool:
    if not dataclasses.is_dataclass(cls):
        return False
    return cls.__dataclass_params__.frozen
