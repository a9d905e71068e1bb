"""Reentrancy exclusion for state-mutating pool operations."""

from __future__ import annotations

import functools
import threading
from collections.abc import Callable
from typing import Any, TypeVar

from amm_pool.errors import ReentrantCall

F = TypeVar("F", bound=Callable[..., Any])


class ReentrancyGuard:
    """Scoped "operation in progress" token.

    Calls from different threads are serialized on a lock. A nested entry
    from the thread that already holds the guard (for example a ledger
    calling back into the pool mid-transfer) raises ReentrantCall instead
    of deadlocking.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._owner: int | None = None

    @property
    def entered(self) -> bool:
        """True while the current thread is inside a guarded operation."""
        return self._owner == threading.get_ident()

    def __enter__(self) -> ReentrancyGuard:
        if self.entered:
            raise ReentrantCall("Reentrant call into pool")
        self._lock.acquire()
        self._owner = threading.get_ident()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._owner = None
        self._lock.release()


def non_reentrant(method: F) -> F:
    """Run a method of an object with a `_guard` attribute under that guard."""

    @functools.wraps(method)
    def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
        with self._guard:
            return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]
