__all__ = [
    "DependencyError",
    "RegistrationError",
    "MissingDependencyError",
    "MissingImplementorError",
    "CyclicDependencyError",
    "ConstructionError",
    "ComponentNotFoundError",
    "BuildError",
    "AsyncExecutionError",
]


class DependencyError(Exception):
    """Raised when a component's dependency cannot be resolved or is misannotated."""

    pass


class RegistrationError(DependencyError):
    """Raised when a component or interface binding is rejected at registration time."""

    pass


class MissingDependencyError(DependencyError):
    """Raised when a required type was never registered."""

    pass


class MissingImplementorError(DependencyError):
    """Raised when no registered type can satisfy an interface requirement."""

    pass


class CyclicDependencyError(DependencyError):
    """Raised when a type re-enters its own construction."""

    pass


class ConstructionError(DependencyError):
    """Raised when a component type cannot be instantiated without arguments."""

    pass


class ComponentNotFoundError(DependencyError):
    """Raised by ``load`` when nothing registered satisfies the requested type."""

    pass


class BuildError(DependencyError):
    """Raised by lookups and entry points once the container's build pass has failed."""

    pass


class AsyncExecutionError(DependencyError):
    """Raised by ``wait()`` when background work failed.

    Attributes:
        errors: The exceptions raised by the failed work items, in completion order.
    """

    def __init__(self, errors: list[BaseException]):
        self.errors = errors
        super().__init__(
            f"{len(errors)} background invocation(s) failed: "
            + "; ".join(repr(error) for error in errors)
        )
