"""
Insert-if-absent across the supported database backends.

Both PostgreSQL and SQLite implement ``INSERT ... ON CONFLICT DO NOTHING``,
which is atomic with respect to concurrent inserts of the same key.
"""

from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StorageException

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def insert_if_absent(db: AsyncSession, model: type, rows: list[dict[str, Any]], conflict_column):
    """
    Build a multi-row insert that silently skips rows whose
    ``conflict_column`` value already exists.

    Raises:
        StorageException: If the session is bound to an unsupported backend
    """
    dialect = db.get_bind().dialect.name
    try:
        insert = _INSERT_BY_DIALECT[dialect]
    except KeyError:
        raise StorageException(f"Insert-if-absent is not supported on '{dialect}'")
    return insert(model).values(rows).on_conflict_do_nothing(index_elements=[conflict_column])
