"""Schema catalog with a time-to-live cache.

Refreshes are not de-duplicated: two requests that miss the cache at the same
moment will both run the loader. The schema changes rarely, so the duplicate
introspection query is tolerated rather than serialised behind a lock.
"""
from __future__ import annotations

import time
from typing import Callable, Dict, List, Optional, Sequence

from sqlalchemy import text
from sqlalchemy.engine import Engine

from core.logging_utils import get_logger, log_event

from .models import ColumnInfo

log = get_logger(__name__)

DEFAULT_TTL_SECONDS = 300

Loader = Callable[[], Sequence[ColumnInfo]]

_COLUMNS_SQL = text(
    """
    SELECT c.table_name,
           c.column_name,
           c.data_type,
           c.is_nullable
      FROM information_schema.columns c
     WHERE c.table_schema = :schema
     ORDER BY c.table_name, c.ordinal_position
    """
)


def information_schema_loader(engine: Engine, schema: str = "public") -> Loader:
    """Loader reading ``information_schema.columns`` for one schema."""

    def _load() -> List[ColumnInfo]:
        with engine.connect() as conn:
            rows = conn.execute(_COLUMNS_SQL, {"schema": schema}).mappings().all()
        return [
            ColumnInfo(
                table=row["table_name"],
                column=row["column_name"],
                data_type=row["data_type"],
                nullable=str(row["is_nullable"]).upper() == "YES",
            )
            for row in rows
        ]

    return _load


class SchemaCatalog:
    def __init__(
        self,
        loader: Loader,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._loader = loader
        self._ttl = ttl_seconds
        self._clock = clock
        self._schema: Dict[str, List[ColumnInfo]] = {}
        self._last_refresh: Optional[float] = None

    def _expired(self, now: float) -> bool:
        return self._last_refresh is None or now - self._last_refresh > self._ttl

    def refresh(self) -> Dict[str, List[ColumnInfo]]:
        now = self._clock()
        tables: Dict[str, List[ColumnInfo]] = {}
        for column in self._loader():
            tables.setdefault(column.table, []).append(column)
        self._schema = tables
        self._last_refresh = now
        log_event(
            log,
            "catalog",
            "schema.refreshed",
            {
                "tables": len(tables),
                "columns": sum(len(cols) for cols in tables.values()),
            },
        )
        return tables

    def get_schema(self) -> Dict[str, List[ColumnInfo]]:
        if self._expired(self._clock()):
            return self.refresh()
        return self._schema

    def get_table_names(self) -> List[str]:
        return list(self.get_schema().keys())

    def get_columns_for_table(self, table: str) -> List[ColumnInfo]:
        return list(self.get_schema().get(table, []))

    def get_all_columns(self) -> List[ColumnInfo]:
        columns: List[ColumnInfo] = []
        for table_columns in self.get_schema().values():
            columns.extend(table_columns)
        return columns


__all__ = ["SchemaCatalog", "information_schema_loader", "DEFAULT_TTL_SECONDS"]
