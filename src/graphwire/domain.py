"""Domain models used throughout the framework."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Kind(Enum):
    """Classification of a required type.

    Every resolution hands back the shared instance itself, so there is no
    separate reference kind: a concrete requirement and a reference to it are
    the same thing.
    """

    CONCRETE = "concrete"
    INTERFACE = "interface"


class BuildState(Enum):
    """Lifecycle of a container's initial wiring pass."""

    UNBUILT = "unbuilt"
    BUILDING = "building"
    BUILT = "built"
    FAILED = "failed"


@dataclass(frozen=True)
class Dependency:
    """Represents a dependency required by a wiring hook or entry point.

    Attributes:
        parameter_name: The parameter name of the dependency in the callable's signature.
        declared_type: The annotated type of the parameter.
    """

    parameter_name: str
    declared_type: Any


@dataclass(frozen=True)
class CachedInstance:
    """
    Represents the single wired instance of a component type.

    Attributes:
        component_type: The concrete type the instance satisfies.
        instance: The instance itself, shared by every requester.
        supplied: True if the caller registered the instance ready-made.
    """

    component_type: type
    instance: Any
    supplied: bool
