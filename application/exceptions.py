"""
Application-layer exceptions.

These exceptions are used across the application, service and
infrastructure layers. Enrichment reads catch DataStoreError only;
Unauthenticated always reaches the caller unchanged.
"""

from typing import List, Optional, Sequence


class LogbookError(Exception):
    """Base class for every error raised by the engine."""

    pass


class Unauthenticated(LogbookError):
    """No active user session. Surfaced immediately, never retried."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class NotFound(LogbookError):
    """A referenced template, workout, day or library item does not exist.

    Also raised when the row exists but belongs to another user.
    """

    def __init__(self, entity: str, entity_id: Optional[str] = None):
        self.entity = entity
        self.entity_id = entity_id
        message = f"{entity} not found" if entity_id is None else f"{entity} not found: {entity_id}"
        super().__init__(message)


class DataStoreError(LogbookError):
    """A store call failed.

    Attributes:
        table: Table the call targeted, when known
        code: Store error code (e.g. a Postgres SQLSTATE), when known
    """

    def __init__(self, message: str, *, table: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message)
        self.table = table
        self.code = code


class ConstraintViolation(DataStoreError):
    """A uniqueness constraint rejected a write, e.g. duplicate (date, title).

    Recoverable: the caller may pick another title/date. Week generation
    skips the day and continues.
    """

    pass


class PartialWriteFailure(LogbookError):
    """A multi-step clone or generation failed after some rows were written.

    Nothing is rolled back; the rows already written stay until the user
    deletes them.

    Attributes:
        steps_completed: Number of rows written before the failure
        root_id: Id of the top-level row that was written, if any
        created_ids: Ids of the top-level rows written by the run
    """

    def __init__(
        self,
        message: str,
        *,
        steps_completed: int,
        root_id: Optional[str] = None,
        created_ids: Optional[Sequence[str]] = None,
    ):
        super().__init__(f"{message} (after {steps_completed} steps)")
        self.steps_completed = steps_completed
        self.root_id = root_id
        self.created_ids: List[str] = list(created_ids or [])
