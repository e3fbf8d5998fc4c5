__all__ = ["DependencyError", "InvalidArgumentError", "CyclicDependencyError"]


class DependencyError(Exception):
    """Raised when a component graph cannot be built from its annotations."""

    pass


class InvalidArgumentError(DependencyError, TypeError):
    """Raised when the object passed to ``load`` is not a component instance."""

    pass


class CyclicDependencyError(DependencyError):
    """Raised when a component type is reached again while it is still being walked.

    Attributes:
        cycle: The component types along the cycle, starting and ending with
            the repeated type.
    """

    def __init__(self, cycle: tuple[type, ...]):
        self.cycle = cycle
        path = " -> ".join(t.__name__ for t in cycle)
        super().__init__(f"Cyclic dependency between components: {path}")
