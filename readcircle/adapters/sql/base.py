"""Helpers shared by the SQL adapters."""

from sqlalchemy import Table
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import ArgumentError
from sqlalchemy.ext.asyncio import AsyncSession

# Dialects whose insert() supports ON CONFLICT and RETURNING
_INSERT_FACTORIES = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def upsert_insert(session: AsyncSession, table: Table):
    """Return an ``INSERT`` for ``table`` that accepts ``on_conflict_*`` clauses."""
    dialect = session.bind.dialect.name
    try:
        factory = _INSERT_FACTORIES[dialect]
    except KeyError:
        raise ArgumentError(f"Conflict-aware inserts need PostgreSQL or SQLite, not {dialect}") from None
    return factory(table)


def page_offset(page: int, size: int) -> int:
    """Offset of a 1-based page; page 0 is treated as the first page."""
    return (max(page, 1) - 1) * size
