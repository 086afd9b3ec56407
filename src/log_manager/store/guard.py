# src/log_manager/store/guard.py

from __future__ import annotations

import contextlib
import logging
import threading
from collections.abc import Iterator
from typing import Generic, Protocol, TypeVar

from .errors import GuardPoisonedError, StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LockLike(Protocol):
    def __enter__(self) -> object: ...
    def __exit__(self, *exc: object) -> bool | None: ...


class Guarded(Generic[T]):
    """
    A value that is only reachable while holding its lock.

        with cell.hold() as data:
            ...  # exclusive access

    A StoreError leaving the block is a normal, state-preserving outcome.
    Anything else may have left the value half-mutated, so the cell is
    poisoned and every later hold() raises GuardPoisonedError.
    """

    def __init__(self, value: T, lock: LockLike | None = None) -> None:
        self._value = value
        self._lock: LockLike = lock if lock is not None else threading.Lock()
        self._poisoned = False

    @property
    def poisoned(self) -> bool:
        return self._poisoned

    @contextlib.contextmanager
    def hold(self) -> Iterator[T]:
        with self._lock:
            if self._poisoned:
                raise GuardPoisonedError("store guard is poisoned; restart required")
            try:
                yield self._value
            except StoreError:
                raise
            except BaseException:
                self._poisoned = True
                logger.critical("Operation failed while holding the store guard; poisoning it.")
                raise
