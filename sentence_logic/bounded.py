# sentence_logic/bounded.py
"""
Bounded-time execution of arbitrary callables.

Each call runs on its own daemon thread and is raced against a wall-clock
deadline. The result is classified as Success, Faulted or TimedOut.

Known limitation
- Python threads cannot be cancelled. A unit that misses its deadline is
  abandoned: the caller stops waiting and its eventual result or exception is
  discarded, but the thread keeps running until the callable returns.
- BoundedExecutor caps how many units may be alive at once (running or
  abandoned). When every slot is still held after the deadline, the call is
  classified as Faulted(UnitCapacityError) instead of starting another thread.
- Daemon threads do not block interpreter exit, so a hung unit cannot keep the
  process alive after the batch has been written.
"""

from __future__ import annotations

import concurrent.futures as cf
import itertools
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from sentence_logic.errors import UnitCapacityError

T = TypeVar("T")

DEFAULT_MAX_UNITS = 64


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class Faulted:
    error: BaseException

    @property
    def message(self) -> str:
        return str(self.error) or type(self.error).__name__


@dataclass(frozen=True)
class TimedOut:
    deadline: float


Outcome = Union[Success[T], Faulted, TimedOut]


class BoundedExecutor:
    """Runs callables under a deadline with a cap on live units."""

    def __init__(self, max_units: int = DEFAULT_MAX_UNITS) -> None:
        if max_units < 1:
            raise ValueError(f"max_units must be >= 1, got {max_units}")
        self.max_units = max_units
        self._slots = threading.BoundedSemaphore(max_units)
        self._ids = itertools.count()

    def run(self, deadline: float, fn: Callable[[], T]) -> Outcome[T]:
        t0 = time.monotonic()
        if not self._slots.acquire(timeout=deadline):
            return Faulted(UnitCapacityError(f"All {self.max_units} bounded units busy for {deadline}s"))

        future: cf.Future[T] = cf.Future()

        def _target() -> None:
            try:
                if not future.set_running_or_notify_cancel():
                    return
                try:
                    result = fn()
                except Exception as exc:
                    future.set_exception(exc)
                else:
                    future.set_result(result)
            finally:
                self._slots.release()

        thread = threading.Thread(target=_target, name=f"bounded-unit-{next(self._ids)}", daemon=True)
        thread.start()

        # Time spent waiting for a slot counts against the deadline.
        remaining = max(0.0, deadline - (time.monotonic() - t0))
        done, _ = cf.wait([future], timeout=remaining)
        if not done:
            future.cancel()
            return TimedOut(deadline)

        # Read exception() rather than result(): a callable raising TimeoutError is a fault, not a timeout.
        exc = future.exception()
        if exc is not None:
            return Faulted(exc)
        return Success(future.result())


_DEFAULT_EXECUTOR = BoundedExecutor()


def run_bounded(deadline: float, fn: Callable[[], T], executor: BoundedExecutor | None = None) -> Outcome[T]:
    """Run ``fn`` with a hard deadline in seconds and classify how it ended."""
    return (executor or _DEFAULT_EXECUTOR).run(deadline, fn)
