"""The dependency container: registration, the build pass, lookups and entry points.

A container moves through ``UNBUILT -> BUILDING -> BUILT`` exactly once. The
build pass is triggered explicitly with ``build()`` or implicitly by the first
lookup or entry-point invocation. It constructs every registered type that has
no instance yet, then runs the post-wiring hook of every caller-supplied
instance. A build pass that raises leaves the container ``FAILED``, and every
later lookup or entry point raises :class:`~graphwire.errors.BuildError`.

All shared state is guarded by one re-entrant lock, so background entry points
racing to construct overlapping parts of the graph are serialized.

Example:
    >>> container = DependencyContainer()
    >>> container.register(ConcreteUserService, InMemoryUserStore(["Alice"]))
    >>> container.exec(seed_users)
    >>> container.run(App())
"""

import threading
from typing import Any, Callable, Optional

from graphwire.config import Settings, get_settings
from graphwire.contracts import Container, Runnable, describe, is_interface
from graphwire.domain import BuildState
from graphwire.errors import BuildError, ComponentNotFoundError, RegistrationError
from graphwire.executor import EntryPointExecutor
from graphwire.guard import ConstructionGuard
from graphwire.instance_cache import InstanceCache
from graphwire.lifecycle import LifecycleInvoker, constructor_arity
from graphwire.logging import get_logger
from graphwire.registry import TypeRegistry, component_type_of
from graphwire.resolver import GraphResolver

__all__ = ["DependencyContainer"]

logger = get_logger(__name__)


class DependencyContainer(Container):
    """Process-wide singleton container for a graph of components.

    The container is itself a component: its class is registered, cached and
    bound to :class:`~graphwire.contracts.Container` when it is created. It is
    never constructed by the resolver, so this self-reference never trips
    cycle detection.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()
        self._lock = threading.RLock()
        self._state = BuildState.UNBUILT
        self._initialized: set[type] = set()

        self._registry = TypeRegistry()
        self._cache = InstanceCache()
        self._guard = ConstructionGuard()
        self._lifecycle = LifecycleInvoker(self._settings.wiring.strict_field_wiring)
        self._resolver = GraphResolver(self._registry, self._cache, self._guard, self._lifecycle)
        self._executor = EntryPointExecutor(
            self._resolver,
            self._lifecycle,
            self._lock,
            self._ensure_built,
            max_workers=self._settings.execution.max_workers,
            thread_name_prefix=self._settings.execution.thread_name_prefix,
        )

        self._registry.add(type(self), discoverable=False)
        self._cache.store(type(self), self)
        self._registry.bind(Container, type(self))

    @property
    def state(self) -> BuildState:
        return self._state

    def register(self, *components: Any) -> None:
        """Register components to fulfil requirements for their type and any interface they implement.

        A class is recorded to be built later; any other object is used as-is
        as the single instance of its class and is never wired.

        Raises:
            RegistrationError: If a component is an interface, or its type already has an instance.
        """
        with self._lock:
            for component in components:
                self._register_one(component)

    def register_as_interface(self, interface: type, component: Any) -> None:
        """Register a component and pin it as the implementor of ``interface``.

        Raises:
            RegistrationError: If ``interface`` is not an interface or the component does not implement it.
        """
        with self._lock:
            component_type, instance = component_type_of(component)
            self._check_registrable(component_type, instance)
            self._registry.bind(interface, component_type)
            self._register_one(component)

    def provides(self, interface: Optional[type] = None) -> Callable:
        """Decorator to register a class, optionally as the implementor of ``interface``.

        Example:
            @container.provides(UserStore)
            class InMemoryUserStore:
                ...
        """

        def decorator(cls: type) -> type:
            if interface is None:
                self.register(cls)
            else:
                self.register_as_interface(interface, cls)
            return cls

        return decorator

    def build(self) -> Container:
        """Construct every registered component that has no instance yet.

        Components are visited in ascending order of wiring-hook arity; each is
        built recursively together with whatever it depends on. Calling
        ``build`` again only constructs types registered since.

        Raises:
            DependencyError: If any requirement cannot be satisfied.
        """
        with self._lock:
            if self._state is BuildState.FAILED:
                raise BuildError("container build previously failed")
            if self._state is BuildState.BUILDING:
                return self

            self._state = BuildState.BUILDING
            logger.info("build_started", registered=len(self._registry.types()))
            try:
                self._construct_pending()
                self._initialize_supplied()
            except Exception:
                self._state = BuildState.FAILED
                logger.exception("build_failed")
                raise
            self._state = BuildState.BUILT
            logger.info("build_completed", instances=len(self._cache))
        return self

    def load(self, marker: type) -> Any:
        """
        Return the instance for a type or the implementor of an interface.

        Raises:
            ComponentNotFoundError: If nothing registered satisfies ``marker``.
        """
        instance, found = self.try_load(marker)
        if not found:
            raise ComponentNotFoundError(f"no instance of type found {describe(marker)}")
        return instance

    def try_load(self, marker: Any) -> tuple[Any, bool]:
        """Like ``load``, but a miss returns ``(None, False)`` instead of raising.

        Errors of the implicit build pass, or of building a registered type on
        a hit, still propagate.

        Raises:
            BuildError: If the container's build pass has failed.
        """
        with self._lock:
            self._ensure_built()
            return self._resolver.lookup(marker)

    def run(self, runnable: Runnable) -> None:
        """Inject dependencies into ``runnable`` and call its ``run`` method.

        The runnable is wired like a component even if its type was never
        registered, but it is not cached.
        """
        self._executor.run(runnable)

    def run_async(self, runnable: Runnable) -> None:
        self._executor.run_async(runnable)

    def exec(self, func: Callable) -> None:
        """Call ``func`` with each of its annotated parameters resolved."""
        self._executor.exec(func)

    def exec_async(self, func: Callable) -> None:
        self._executor.exec_async(func)

    def wait(self) -> None:
        self._executor.wait()

    def close(self) -> None:
        """Release the background worker threads once their work has finished.

        Failures of that work are still reported by a later ``wait()``.
        """
        self._executor.close()

    def __enter__(self) -> "DependencyContainer":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _register_one(self, component: Any):
        component_type, instance = component_type_of(component)
        self._check_registrable(component_type, instance)

        self._registry.add(component_type)
        if instance is None:
            return

        self._cache.store(component_type, instance, supplied=True)
        if self._state is BuildState.BUILT:
            self._initialize_supplied()

    def _check_registrable(self, component_type: type, instance: Any):
        if is_interface(component_type):
            raise RegistrationError(
                f"{describe(component_type)} is an interface; register an implementation instead"
            )
        if instance is not None and component_type in self._cache:
            raise RegistrationError(f"{describe(component_type)} already has an instance")

    def _ensure_built(self):
        if self._state is BuildState.UNBUILT:
            self.build()
        elif self._state is BuildState.FAILED:
            raise BuildError("container build previously failed")

    def _construct_pending(self):
        pending = [t for t in self._registry.types() if t not in self._cache]
        for component_type in sorted(pending, key=constructor_arity):
            # may already have been built as a dependency of an earlier type
            if component_type not in self._cache:
                self._resolver.create(component_type)

    def _initialize_supplied(self):
        for entry in self._cache.supplied():
            if entry.component_type in self._initialized:
                continue
            self._initialized.add(entry.component_type)
            self._lifecycle.initialize(entry.instance)
