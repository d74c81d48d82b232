"""
Data Store Interface (Port).

The engine's only collaborator for persistence. Implementations offer keyed
CRUD plus an ordered, filtered query whose `columns` argument is a PostgREST
select string (embedded relations allowed).

All calls are coroutines; they are the engine's only suspension points.
Reads that touch multi-user tables must always pass an explicit `user_id`
filter, even though the store may also enforce row-level isolation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Protocol, Sequence


class FilterOp(str, Enum):
    """Comparison operators understood by `query()`."""

    EQ = "eq"
    NEQ = "neq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    ILIKE = "ilike"
    IN = "in"


@dataclass(frozen=True)
class Filter:
    """
    A single column filter.

    `column` may be a dotted path (`alias.column`) into an embedded relation
    joined with `!inner`; rows whose embedded row fails the filter are dropped.
    """

    column: str
    value: Any
    op: FilterOp = FilterOp.EQ


@dataclass(frozen=True)
class Order:
    """A sort key; several keys apply in sequence."""

    column: str
    desc: bool = False


def eq(column: str, value: Any) -> Filter:
    return Filter(column, value, FilterOp.EQ)


def neq(column: str, value: Any) -> Filter:
    return Filter(column, value, FilterOp.NEQ)


def gte(column: str, value: Any) -> Filter:
    return Filter(column, value, FilterOp.GTE)


def lt(column: str, value: Any) -> Filter:
    return Filter(column, value, FilterOp.LT)


def lte(column: str, value: Any) -> Filter:
    return Filter(column, value, FilterOp.LTE)


def in_(column: str, values: Sequence[Any]) -> Filter:
    return Filter(column, list(values), FilterOp.IN)


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the pattern only matches the literal text."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def ilike_exact(column: str, value: str) -> Filter:
    """Case-insensitive equality expressed as an escaped ILIKE pattern."""
    return Filter(column, escape_like(value.strip()), FilterOp.ILIKE)


class DataStore(Protocol):
    """
    Abstract interface for the record store.

    Errors:
        Unauthenticated: find_user() with no active session
        NotFound: update() of a row that does not exist
        ConstraintViolation: insert/update rejected by a uniqueness constraint
        DataStoreError: any other store or transport failure
    """

    async def find_user(self) -> str:
        """
        Get the id of the user with the active session.

        Returns:
            User ID

        Raises:
            Unauthenticated: If there is no active session
        """
        ...

    async def query(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order: Sequence[Order] = (),
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """
        Read rows from a table.

        Args:
            table: Table name
            columns: PostgREST select string, may embed related tables
            filters: Column filters (dotted paths reach embedded relations)
            order: Sort keys applied in sequence
            limit: Maximum number of top-level rows

        Returns:
            List of row dicts (empty when nothing matches)
        """
        ...

    async def insert(self, table: str, rows: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Insert rows and return them as stored (with generated ids).

        Args:
            table: Table name
            rows: Rows to insert

        Returns:
            Inserted rows, in input order
        """
        ...

    async def update(self, table: str, row_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        """
        Patch one row by id.

        Returns:
            The updated row

        Raises:
            NotFound: If no row has that id
        """
        ...

    async def delete(self, table: str, row_id: str) -> None:
        """Delete one row by id; child rows cascade."""
        ...
