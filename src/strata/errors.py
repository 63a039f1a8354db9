"""Domain errors shared by the store, cache and accessor layers.

Only ``EntityNotFoundError`` and ``StoreUnavailableError`` ever reach a caller.
``CacheUnavailableError`` is raised by cache adapters and absorbed by the
accessors, which treat an unavailable cache like a miss.
"""

from __future__ import annotations


class StrataError(Exception):
    """Base class for all Strata errors."""


class EntityNotFoundError(StrataError):
    """The requested identifier does not exist in the store."""

    def __init__(self, entity: str, identifier: object):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} with id '{identifier}' not found")


class StoreUnavailableError(StrataError):
    """A store operation failed; always fatal to the calling operation."""

    def __init__(self, operation: str, entity: str, cause: BaseException | None = None):
        self.operation = operation
        self.entity = entity
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Store {operation} failed for {entity}{detail}")


class CacheUnavailableError(StrataError):
    """A cache operation failed or timed out."""

    def __init__(self, operation: str, key: str | None = None, cause: BaseException | None = None):
        self.operation = operation
        self.key = key
        self.cause = cause
        target = f" ({key})" if key else ""
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Cache {operation} failed{target}{detail}")
