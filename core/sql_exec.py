from __future__ import annotations

import re
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

SAFE_SQL_RE = re.compile(r"(?is)^\s*(with|select)\b")

_ENGINES: Dict[str, Engine] = {}
_ENGINES_LOCK = threading.Lock()


def get_engine_for_url(
    url: str,
    *,
    pool_pre_ping: bool = True,
    pool_recycle: int = 3600,
    echo: bool = False,
) -> Engine:
    """Create or reuse an Engine for the provided SQLAlchemy URL."""

    if not url:
        raise ValueError("Database URL must be provided")

    key = f"url::{url}::{pool_recycle}" if pool_pre_ping else f"url::{url}::np"
    if key in _ENGINES:
        return _ENGINES[key]

    with _ENGINES_LOCK:
        if key not in _ENGINES:
            _ENGINES[key] = create_engine(
                url,
                pool_pre_ping=pool_pre_ping,
                pool_recycle=pool_recycle,
                echo=echo,
                future=True,
            )
        return _ENGINES[key]


@dataclass
class SQLExecutionResult:
    """Normalised result wrapper for SQL execution."""

    ok: bool
    columns: List[str] = field(default_factory=list)
    rows: List[Dict[str, Any]] = field(default_factory=list)
    rowcount: int = 0
    error: Optional[str] = None

    def dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "columns": self.columns,
            "rows": self.rows,
            "rowcount": self.rowcount,
            "error": self.error,
        }


def validate_select(sql: str) -> Tuple[bool, str]:
    s = (sql or "").strip().lstrip("(")
    if not SAFE_SQL_RE.match(s):
        return False, "Only SELECT/CTE queries are allowed"
    return True, ""


def run_select(
    engine: Engine,
    sql: str,
    binds: Optional[Mapping[str, Any]] = None,
    limit: Optional[int] = None,
) -> Dict[str, Any]:
    s = sql.strip().rstrip(";")
    if limit and " limit " not in s.lower():
        s = f"{s} LIMIT {int(limit)}"
    with engine.connect() as c:
        rs = c.execute(text(s), dict(binds or {}))
        cols = list(rs.keys())
        rows = [dict(zip(cols, list(r))) for r in rs]
    return {"columns": cols, "rows": rows, "rowcount": len(rows)}


def run_sql(
    engine: Engine,
    sql: str,
    binds: Optional[Mapping[str, Any]] = None,
    limit: Optional[int] = None,
) -> SQLExecutionResult:
    """Execute a read-only SQL statement and normalise the response."""

    valid, message = validate_select(sql)
    if not valid:
        return SQLExecutionResult(ok=False, error=message)

    try:
        result = run_select(engine, sql, binds, limit)
    except SQLAlchemyError as exc:
        return SQLExecutionResult(ok=False, error=str(getattr(exc, "orig", None) or exc))

    rows = result.get("rows", [])
    return SQLExecutionResult(
        ok=True,
        columns=result.get("columns", []),
        rows=rows,
        rowcount=result.get("rowcount") or len(rows),
    )
