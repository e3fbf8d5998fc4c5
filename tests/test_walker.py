from dataclasses import dataclass
from typing import Annotated, Callable, ClassVar, NamedTuple, Optional, TypedDict, Union

import pytest

from modgraph import (
    CyclicDependencyError,
    DependencyError,
    FieldKind,
    Inline,
    SingletonRegistry,
    Walker,
    make_dependency_tree,
)


@dataclass
class Config:
    name: str = ""

    def load(self):
        self.name = "config"


@dataclass
class Logger:
    config: Optional[Config] = None


@dataclass
class Reporter:
    config: Optional[Config] = None
    logger: Optional[Logger] = None


@dataclass
class App:
    config: Optional[Config] = None
    logger: Optional[Logger] = None
    reporter: Optional[Reporter] = None


@dataclass
class Limits:
    config: Optional[Config] = None
    maximum: int = 0


@dataclass
class Server:
    primary: Annotated[Optional[Limits], Inline] = None
    secondary: Annotated[Optional[Limits], Inline] = None
    config: Optional[Config] = None


DEFAULT_LIMITS = Limits(maximum=1)


class Holder:
    limits: Annotated[Limits, Inline] = DEFAULT_LIMITS


@dataclass
class Guarded:
    _config: Optional[Config] = None
    shared: ClassVar[Optional[Config]] = None
    config: Optional[Config] = None


@dataclass(frozen=True)
class FrozenSettings:
    config: Optional[Config] = None


@dataclass
class Mixed:
    settings: Optional[FrozenSettings] = None
    name: str = "mixed"
    tags: Optional[list[str]] = None
    handler: Optional[Callable[[], None]] = None
    either: Union[Config, Logger, None] = None


class Chicken:
    egg: "Egg"


class Egg:
    chicken: Chicken


class Farm:
    chicken: Chicken


class Link:
    next: Optional["Link"] = None


class NeedsArgs:
    config: Config

    def __init__(self, value):
        self.value = value


class WantsNeedsArgs:
    needs: NeedsArgs


class Dangling:
    missing: "DoesNotExist"  # noqa: F821


def test_tree_mirrors_field_nesting():
    tree = make_dependency_tree(App())

    assert tree.kind == FieldKind.ROOT
    assert tree.field_name is None
    assert [child.field_name for child in tree.children] == ["config", "logger", "reporter"]

    reporter = tree.children[2]
    assert [child.field_name for child in reporter.children] == ["config", "logger"]
    assert [child.field_name for child in reporter.children[1].children] == ["config"]
    assert all(child.kind == FieldKind.SHARED for child in tree.children)


def test_nodes_refer_to_the_assigned_components():
    app = App()
    tree = make_dependency_tree(app)

    assert tree.component is app
    assert tree.children[0].component is app.config
    assert tree.children[2].children[1].component is app.logger
    assert tree.children[2].component_type is Reporter


def test_post_order_yields_children_first():
    tree = make_dependency_tree(App())

    assert [node.component_type for node in tree.post_order()] == [
        Config,
        Config,
        Logger,
        Config,
        Config,
        Logger,
        Reporter,
        App,
    ]


def test_tree_building_runs_no_hooks():
    app = App()
    make_dependency_tree(app)

    assert app.config.name == ""


def test_shared_fields_are_replaced_by_the_singleton():
    stale = Config(name="stale")
    app = App(logger=Logger(config=stale))
    make_dependency_tree(app)

    assert app.logger.config is app.config
    assert app.config is not stale


def test_registry_records_one_instance_per_type():
    app = App()
    registry = SingletonRegistry()
    Walker(registry).walk(app)

    assert set(registry) == {Config, Logger, Reporter}
    assert registry[Config] is app.config
    assert registry[Logger] is app.logger


def test_registry_rejects_second_instance_of_a_type():
    registry = SingletonRegistry({Config: Config()})

    with pytest.raises(KeyError):
        registry.register(Config, Config())


def test_inline_components_are_not_shared():
    server = Server()
    tree = make_dependency_tree(server)

    assert isinstance(server.primary, Limits)
    assert isinstance(server.secondary, Limits)
    assert server.primary is not server.secondary
    assert server.primary.config is server.config
    assert server.secondary.config is server.config
    assert [child.kind for child in tree.children] == [
        FieldKind.INLINE,
        FieldKind.INLINE,
        FieldKind.SHARED,
    ]


def test_existing_inline_component_is_kept():
    limits = Limits(maximum=5)
    server = Server(primary=limits)
    make_dependency_tree(server)

    assert server.primary is limits
    assert server.primary.maximum == 5
    assert server.primary.config is server.config


def test_inline_class_default_is_not_shared_between_owners():
    first, second = Holder(), Holder()
    make_dependency_tree(first)
    make_dependency_tree(second)

    assert first.limits is not DEFAULT_LIMITS
    assert first.limits is not second.limits
    assert first.limits.maximum == 0


def test_private_and_class_fields_are_skipped():
    guarded = Guarded()
    tree = make_dependency_tree(guarded)

    assert guarded._config is None
    assert Guarded.shared is None
    assert guarded.config is not None
    assert [child.field_name for child in tree.children] == ["config"]


def test_frozen_dataclass_fields_are_skipped():
    mixed = Mixed()
    tree = make_dependency_tree(mixed)

    assert isinstance(mixed.settings, FrozenSettings)
    assert mixed.settings.config is None
    assert tree.children[0].children == []


def test_non_component_fields_are_untouched():
    mixed = Mixed()
    tree = make_dependency_tree(mixed)

    assert mixed.name == "mixed"
    assert mixed.tags is None
    assert mixed.handler is None
    assert mixed.either is None
    assert [child.field_name for child in tree.children] == ["settings"]


def test_cycle_is_detected():
    with pytest.raises(CyclicDependencyError, match="Chicken -> Egg -> Chicken") as excinfo:
        make_dependency_tree(Chicken())

    assert excinfo.value.cycle == (Chicken, Egg, Chicken)


def test_cycle_below_the_root_is_detected():
    with pytest.raises(CyclicDependencyError) as excinfo:
        make_dependency_tree(Farm())

    assert excinfo.value.cycle == (Chicken, Egg, Chicken)


def test_self_reference_is_a_cycle():
    with pytest.raises(CyclicDependencyError, match="Link -> Link"):
        make_dependency_tree(Link())


def test_cycle_is_a_dependency_error():
    with pytest.raises(DependencyError):
        make_dependency_tree(Chicken())


def test_unconstructible_component_raises():
    with pytest.raises(
        DependencyError, match="Cannot construct NeedsArgs for field WantsNeedsArgs.needs"
    ) as excinfo:
        make_dependency_tree(WantsNeedsArgs())

    assert isinstance(excinfo.value.__cause__, TypeError)


def test_unresolvable_annotation_raises():
    with pytest.raises(DependencyError, match="Cannot resolve field annotations of Dangling"):
        make_dependency_tree(Dangling())


class Options(TypedDict):
    verbose: bool


class Service:
    options: Options
    backup: Options
    config: Config


class Point(NamedTuple):
    config: Optional[Config] = None


class PointHolder:
    point: Point
    config: Config


def test_typed_dict_fields_are_untouched():
    service = Service()
    tree = make_dependency_tree(service)

    assert not hasattr(service, "options")
    assert not hasattr(service, "backup")
    assert [child.field_name for child in tree.children] == ["config"]


def test_named_tuple_fields_are_untouched():
    holder = PointHolder()
    tree = make_dependency_tree(holder)

    assert not hasattr(holder, "point")
    assert [child.field_name for child in tree.children] == ["config"]


def test_registry_keys_by_declared_type():
    registry = SingletonRegistry()
    config = Config()
    registry.register(Config, config)

    assert registry[Config] is config
    assert list(registry) == [Config]
