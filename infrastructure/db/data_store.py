"""
Supabase implementation of the DataStore port.

This module provides the concrete Supabase implementation for the engine's
record store, using supabase-py's async client. Errors are translated into
the engine's exception taxonomy:

- PostgREST unique violation (23505) -> ConstraintViolation
- Any other PostgREST or transport failure -> DataStoreError
- Auth failure or no user -> Unauthenticated
"""
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, AuthError

from application.exceptions import ConstraintViolation, DataStoreError, NotFound, Unauthenticated
from application.ports import Filter, FilterOp, Order

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"

_FILTER_METHODS = {
    FilterOp.EQ: "eq",
    FilterOp.NEQ: "neq",
    FilterOp.GT: "gt",
    FilterOp.GTE: "gte",
    FilterOp.LT: "lt",
    FilterOp.LTE: "lte",
    FilterOp.ILIKE: "ilike",
    FilterOp.IN: "in_",
}


class SupabaseDataStore:
    """
    Supabase implementation of the DataStore protocol.

    Every call is a single PostgREST request; there are no transactions.
    Row-level security may also scope rows to the user, but callers still
    pass explicit user filters.
    """

    def __init__(self, client: AsyncClient, access_token: Optional[str] = None):
        """
        Initialize with Supabase client.

        Args:
            client: Async Supabase client instance (injected, not global)
            access_token: User JWT to resolve the user from; the client's
                own session is used when None
        """
        self._client = client
        self._access_token = access_token

    async def find_user(self) -> str:
        """
        Get the id of the authenticated user.

        Raises:
            Unauthenticated: If there is no valid session
        """
        try:
            response = await self._client.auth.get_user(self._access_token)
        except AuthError as e:
            logger.warning(f"Supabase auth rejected the session: {e}")
            raise Unauthenticated(str(e)) from e

        user = getattr(response, "user", None) if response else None
        if user is None or not getattr(user, "id", None):
            raise Unauthenticated()
        return str(user.id)

    async def query(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        order: Sequence[Order] = (),
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        builder = self._client.table(table).select(columns)
        for f in filters:
            builder = getattr(builder, _FILTER_METHODS[FilterOp(f.op)])(f.column, f.value)
        for o in order:
            builder = builder.order(o.column, desc=o.desc)
        if limit is not None:
            builder = builder.limit(limit)

        response = await self._execute(table, builder)
        return response.data or []

    async def insert(self, table: str, rows: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if not rows:
            return []
        response = await self._execute(table, self._client.table(table).insert(list(rows)))
        data = response.data or []
        if len(data) != len(rows):
            raise DataStoreError(
                f"Insert into {table} returned {len(data)} of {len(rows)} rows",
                table=table,
            )
        return data

    async def update(self, table: str, row_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._execute(
            table, self._client.table(table).update(patch).eq("id", row_id)
        )
        if not response.data:
            raise NotFound(table, row_id)
        return response.data[0]

    async def delete(self, table: str, row_id: str) -> None:
        await self._execute(table, self._client.table(table).delete().eq("id", row_id))

    async def _execute(self, table: str, builder: Any) -> Any:
        try:
            return await builder.execute()
        except APIError as e:
            if e.code == UNIQUE_VIOLATION:
                raise ConstraintViolation(e.message or "Duplicate key", table=table, code=e.code) from e
            logger.error(f"Supabase request on {table} failed: {e.code} {e.message}")
            raise DataStoreError(e.message or str(e), table=table, code=e.code) from e
        except httpx.HTTPError as e:
            logger.error(f"Supabase request on {table} failed: {e}")
            raise DataStoreError(str(e), table=table) from e
