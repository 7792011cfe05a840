"""Invocation of entry points with their dependencies injected."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, ContextManager, Optional

from graphwire.contracts import Runnable, describe
from graphwire.errors import AsyncExecutionError
from graphwire.lifecycle import LifecycleInvoker
from graphwire.logging import get_logger
from graphwire.registry import dependencies_of
from graphwire.resolver import GraphResolver

__all__ = ["CompletionCounter", "EntryPointExecutor"]

logger = get_logger(__name__)


class CompletionCounter:
    """Non-negative count of outstanding background work.

    ``wait`` blocks until the count drops to zero. Failures reported with
    ``fail`` are handed back by ``wait`` once nothing is outstanding.
    """

    def __init__(self) -> None:
        self._count = 0
        self._errors: list[BaseException] = []
        self._condition = threading.Condition()

    def add(self) -> None:
        with self._condition:
            self._count += 1

    def done(self) -> None:
        with self._condition:
            if self._count == 0:
                raise ValueError("CompletionCounter.done() called more times than add()")
            self._count -= 1
            if self._count == 0:
                self._condition.notify_all()

    def fail(self, error: BaseException) -> None:
        with self._condition:
            self._errors.append(error)

    def wait(self) -> list[BaseException]:
        """Block until no work is outstanding, then return and clear collected failures."""
        with self._condition:
            self._condition.wait_for(lambda: self._count == 0)
            errors, self._errors = self._errors, []
            return errors

    @property
    def outstanding(self) -> int:
        with self._condition:
            return self._count


class EntryPointExecutor:
    """Resolve and invoke runnables and functions, synchronously or in the background.

    Resolution happens while holding ``lock`` after ``prepare`` has made sure
    the container is built. The entry point itself runs outside the lock so it
    may call back into the container.
    """

    def __init__(
        self,
        resolver: GraphResolver,
        lifecycle: LifecycleInvoker,
        lock: ContextManager[Any],
        prepare: Callable[[], None],
        max_workers: int = 8,
        thread_name_prefix: str = "graphwire",
    ) -> None:
        self._resolver = resolver
        self._lifecycle = lifecycle
        self._lock = lock
        self._prepare = prepare
        self._max_workers = max_workers
        self._thread_name_prefix = thread_name_prefix
        self._counter = CompletionCounter()
        self._pool: Optional[ThreadPoolExecutor] = None
        self._pool_lock = threading.Lock()

    def run(self, runnable: Runnable) -> None:
        if not isinstance(runnable, Runnable):
            raise TypeError(f"{runnable!r} does not implement Runnable")
        with self._lock:
            self._prepare()
            self._lifecycle.wire(runnable, self._resolver.resolve)
            self._lifecycle.initialize(runnable)
        runnable.run()

    def exec(self, func: Callable[..., Any]) -> None:
        if not callable(func):
            raise TypeError(f"{func!r} is not callable")
        with self._lock:
            self._prepare()
            call_kwargs = {
                dependency.parameter_name: self._resolver.resolve(dependency.declared_type, func)
                for dependency in dependencies_of(func)
            }
        func(**call_kwargs)

    def run_async(self, runnable: Runnable) -> None:
        self._submit(self.run, runnable)

    def exec_async(self, func: Callable[..., Any]) -> None:
        self._submit(self.exec, func)

    def wait(self) -> None:
        """
        Block until every background invocation has finished.

        Raises:
            AsyncExecutionError: If any of them raised.
        """
        errors = self._counter.wait()
        if errors:
            raise AsyncExecutionError(errors)

    def close(self) -> None:
        """Wait for background work to finish and release the worker threads.

        A later ``*_async`` call starts a fresh pool.
        """
        with self._pool_lock:
            pool, self._pool = self._pool, None
        if pool is not None:
            pool.shutdown(wait=True)

    def _submit(self, invoke: Callable[[Any], None], entry_point: Any) -> None:
        self._counter.add()
        try:
            self._worker_pool().submit(self._work, invoke, entry_point)
        except BaseException:
            self._counter.done()
            raise

    def _work(self, invoke: Callable[[Any], None], entry_point: Any) -> None:
        try:
            invoke(entry_point)
        except Exception as e:
            logger.exception("async_work_failed", entry_point=describe(entry_point))
            self._counter.fail(e)
        finally:
            self._counter.done()

    def _worker_pool(self) -> ThreadPoolExecutor:
        with self._pool_lock:
            if self._pool is None:
                self._pool = ThreadPoolExecutor(
                    max_workers=self._max_workers,
                    thread_name_prefix=self._thread_name_prefix,
                )
            return self._pool
