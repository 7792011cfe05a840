import threading
import time

import pytest

from graphwire.errors import AsyncExecutionError
from graphwire.executor import CompletionCounter, EntryPointExecutor
from graphwire.guard import ConstructionGuard
from graphwire.instance_cache import InstanceCache
from graphwire.lifecycle import LifecycleInvoker
from graphwire.registry import TypeRegistry
from graphwire.resolver import GraphResolver


class Clock:
    pass


@pytest.fixture
def counter():
    return CompletionCounter()


@pytest.fixture
def prepared():
    return []


@pytest.fixture
def executor(prepared):
    registry = TypeRegistry()
    registry.add(Clock)
    resolver = GraphResolver(registry, InstanceCache(), ConstructionGuard(), LifecycleInvoker())
    return EntryPointExecutor(
        resolver,
        LifecycleInvoker(),
        threading.RLock(),
        lambda: prepared.append(True),
        max_workers=2,
    )


def test_wait_returns_immediately_when_nothing_is_outstanding(counter):
    assert counter.wait() == []
    assert counter.outstanding == 0


def test_wait_blocks_until_all_work_is_done(counter):
    finished = []

    def work(delay):
        time.sleep(delay)
        finished.append(delay)
        counter.done()

    for delay in (0.02, 0.01):
        counter.add()
        threading.Thread(target=work, args=(delay,)).start()

    counter.wait()

    assert sorted(finished) == [0.01, 0.02]
    assert counter.outstanding == 0


def test_done_without_add_is_an_error(counter):
    with pytest.raises(ValueError):
        counter.done()


def test_wait_hands_back_and_clears_failures(counter):
    error = RuntimeError("boom")
    counter.add()
    counter.fail(error)
    counter.done()

    assert counter.wait() == [error]
    assert counter.wait() == []


def test_exec_prepares_then_injects(executor, prepared):
    received = []

    def tick(clock: Clock):
        received.append(clock)

    executor.exec(tick)
    executor.exec(tick)

    assert prepared == [True, True]
    assert isinstance(received[0], Clock)
    assert received[0] is received[1]


def test_async_failures_are_raised_by_wait(executor):
    def explode(clock: Clock):
        raise RuntimeError("boom")

    executor.exec_async(explode)
    executor.exec_async(lambda: None)

    with pytest.raises(AsyncExecutionError, match="1 background invocation"):
        executor.wait()

    executor.wait()


def test_close_waits_for_work_and_releases_workers(executor):
    finished = []

    def slow(clock: Clock):
        time.sleep(0.01)
        finished.append(clock)

    executor.exec_async(slow)
    executor.close()

    assert len(finished) == 1
    assert executor.wait() is None

    executor.exec_async(slow)
    executor.wait()
    executor.close()

    assert len(finished) == 2
