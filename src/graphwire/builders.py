"""High level entry points for constructing containers."""

from typing import Any, Optional

from graphwire.config import Settings
from graphwire.container import DependencyContainer

__all__ = ["make_container"]


def make_container(
    *components: Any,
    interfaces: Optional[dict[type, Any]] = None,
    settings: Optional[Settings] = None,
    build: bool = False,
) -> DependencyContainer:
    """Create a :class:`DependencyContainer` with the given components registered.

    Args:
        *components: Classes to build, or ready-made instances to use as-is.
        interfaces: An optional mapping of interface to the component pinned as
            its implementor.
        settings: Optional settings; defaults to the environment-derived settings.
        build: If True, run the build pass before returning.

    Returns:
        The populated container.

    Raises:
        RegistrationError: If a component or binding is rejected.
        DependencyError: If ``build`` is set and a requirement cannot be satisfied.

    Example:
        >>> container = make_container(
        ...     ConcreteUserService,
        ...     interfaces={UserStore: InMemoryUserStore(["Alice"])},
        ...     build=True,
        ... )
        >>> container.load(UserService).list_all()
    """
    container = DependencyContainer(settings)
    container.register(*components)
    for interface, component in (interfaces or {}).items():
        container.register_as_interface(interface, component)
    if build:
        container.build()
    return container
