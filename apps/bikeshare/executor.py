from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.engine import Engine

from core.logging_utils import get_logger, log_event
from core.sql_exec import run_sql
from core.sql_utils import positional_to_named

from .errors import ExecutionError

log = get_logger(__name__)


class EngineExecutor:
    """Run positional-parameter SQL through a SQLAlchemy engine."""

    def __init__(self, engine: Engine, *, limit: Optional[int] = None) -> None:
        self.engine = engine
        self.limit = limit

    def execute(self, sql: str, parameters: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        try:
            named_sql, binds = positional_to_named(sql, parameters)
        except ValueError as exc:
            raise ExecutionError(str(exc)) from exc

        result = run_sql(self.engine, named_sql, binds, limit=self.limit)
        if not result.ok:
            raise ExecutionError(result.error or "Query execution failed")

        log_event(log, "executor", "sql.executed", {"rowcount": result.rowcount})
        return result.rows


__all__ = ["EngineExecutor"]
