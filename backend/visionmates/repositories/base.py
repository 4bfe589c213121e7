from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import delete
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class BaseRepository:
    """Shared write primitives that stay correct under concurrent requests.

    ``insert_ignore`` and ``upsert`` lean on the store's unique constraints
    (``ON CONFLICT``) instead of a read-then-write, and ``delete_where`` is
    a no-op when nothing matches. None of them commit.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    def _insert(self, model: type) -> Any:
        dialect = self.session.bind.dialect.name
        try:
            insert = _DIALECT_INSERTS[dialect]
        except KeyError as exc:
            raise NotImplementedError(
                f"Conflict-tolerant inserts are not supported on '{dialect}'"
            ) from exc
        return insert(model)

    async def insert_ignore(
        self,
        model: type,
        values: Mapping[str, Any],
        conflict_columns: Iterable[str],
    ) -> bool:
        """Insert a row unless it collides with a unique key. Returns True if inserted."""
        stmt = (
            self._insert(model)
            .values(**values)
            .on_conflict_do_nothing(index_elements=list(conflict_columns))
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def upsert(
        self,
        model: type,
        values: Mapping[str, Any],
        conflict_columns: Iterable[str],
        update_columns: Iterable[str],
    ) -> None:
        """Insert a row, or update ``update_columns`` on the colliding row."""
        stmt = self._insert(model).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=list(conflict_columns),
            set_={column: stmt.excluded[column] for column in update_columns},
        )
        await self.session.execute(stmt)

    async def delete_where(self, model: type, *criteria: Any) -> int:
        """Delete matching rows; returns how many went away (possibly zero)."""
        result = await self.session.execute(delete(model).where(*criteria))
        return result.rowcount or 0

    async def commit(self) -> None:
        await self.session.commit()
