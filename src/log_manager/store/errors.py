# src/log_manager/store/errors.py

from __future__ import annotations


class StoreError(Exception):
    """Base for errors reported back to the caller of a store operation."""


class NotFoundError(StoreError):
    def __init__(self, kind: str, entity_id: str) -> None:
        super().__init__(f"{kind} not found")
        self.kind = kind
        self.entity_id = entity_id


class MalformedError(StoreError):
    def __init__(self, field: str, value: object, reason: str) -> None:
        super().__init__(f"Invalid {field} {value!r}: {reason}")
        self.field = field
        self.value = value
        self.reason = reason


class PersistenceError(Exception):
    """Reading or writing the data file failed. Logged, never surfaced by the store."""


class DocumentError(PersistenceError):
    """The data file content is not a valid store document."""


class GuardPoisonedError(RuntimeError):
    """
    A previous holder of the guard failed mid-operation.

    The guarded state may be half-mutated; the process has to be restarted.
    """
