"""Graphwire runtime object-graph wiring.

Graphwire wires a graph of singleton components on demand. Components are
registered as classes to be built or as ready-made instances; requirements are
declared with ordinary type hints, either as the parameters of a ``construct``
method or as public annotated attributes. Interfaces (protocols and abstract
classes) are satisfied by the registered type bound to them, or else by the first
registered type that structurally implements them.

Key Features:
    - One shared instance per component type, built at most once
    - Structural interface matching with explicit binding overrides
    - Cycle detection during construction
    - ``construct`` / ``initialize`` lifecycle hooks
    - Injection into arbitrary functions and runnable objects, synchronously
      or on background workers

Basic Usage:
    >>> from graphwire import DependencyContainer
    >>>
    >>> container = DependencyContainer()
    >>> container.register(UserService, MemStore(["Bob"]))
    >>>
    >>> def add_carl(svc: UserService):
    ...     svc.create("Carl")
    >>>
    >>> container.exec(add_carl)
    >>> container.load(UserService).list_all()  # ["Bob", "Carl"]

The framework consists of several core modules:
    - registry: Component type registration and dependency introspection
    - resolver: Interface matching and recursive construction
    - lifecycle: Wiring and initialization hooks
    - executor: Entry-point invocation and background work
    - container: The public container and its build pass
    - errors: Framework-specific exceptions
"""

from graphwire.builders import make_container
from graphwire.container import DependencyContainer
from graphwire.contracts import Constructible, Container, Initializable, Runnable
from graphwire.domain import BuildState
from graphwire.errors import (
    AsyncExecutionError,
    BuildError,
    ComponentNotFoundError,
    ConstructionError,
    CyclicDependencyError,
    DependencyError,
    MissingDependencyError,
    MissingImplementorError,
    RegistrationError,
)
from graphwire.logging import setup_logging

__all__ = [
    "AsyncExecutionError",
    "BuildError",
    "BuildState",
    "ComponentNotFoundError",
    "Constructible",
    "ConstructionError",
    "Container",
    "CyclicDependencyError",
    "DependencyContainer",
    "DependencyError",
    "Initializable",
    "MissingDependencyError",
    "MissingImplementorError",
    "RegistrationError",
    "Runnable",
    "make_container",
    "setup_logging",
]
