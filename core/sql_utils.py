"""
Small helpers for SQL text checks and bind-style conversion.
Keep generic; bike-share specifics stay in apps/bikeshare.
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

import sqlglot
from sqlglot.errors import ParseError, TokenError

# $1, $2 ... outside of quoted literals
_RE_POSITIONAL = re.compile(r"'(?:[^']|'')*'|\$(\d+)")
_RE_IDENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

NAMED_BIND_PREFIX = "p"


def is_identifier(name: str) -> bool:
    return bool(name) and bool(_RE_IDENT.match(name))


def positional_indexes(sql: str) -> List[int]:
    """Return placeholder numbers in order of appearance (duplicates kept)."""

    if not sql:
        return []
    out: List[int] = []
    for match in _RE_POSITIONAL.finditer(sql):
        if match.group(1) is not None:
            out.append(int(match.group(1)))
    return out


def count_placeholders(sql: str) -> int:
    """Number of distinct positional placeholders in ``sql``."""

    return len(set(positional_indexes(sql)))


def positional_to_named(
    sql: str,
    parameters: Optional[Sequence[Any]] = None,
    *,
    prefix: str = NAMED_BIND_PREFIX,
) -> Tuple[str, Dict[str, Any]]:
    """Rewrite ``$n`` placeholders as ``:p<n>`` binds for SQLAlchemy ``text()``."""

    params = list(parameters or [])
    binds: Dict[str, Any] = {}

    def _swap(match: "re.Match[str]") -> str:
        if match.group(1) is None:
            return match.group(0)
        idx = int(match.group(1))
        if idx < 1 or idx > len(params):
            raise ValueError(
                f"Placeholder ${idx} has no parameter ({len(params)} supplied)"
            )
        name = f"{prefix}{idx}"
        binds[name] = params[idx - 1]
        return f":{name}"

    return _RE_POSITIONAL.sub(_swap, sql or ""), binds


def check_syntax(sql: str, dialect: str = "postgres") -> Tuple[bool, str]:
    """Parse ``sql`` with sqlglot; positional binds are read as NULL literals."""

    if not (sql or "").strip():
        return False, "empty SQL"
    literal = _RE_POSITIONAL.sub(
        lambda m: m.group(0) if m.group(1) is None else "NULL", sql
    )
    try:
        sqlglot.parse_one(literal, read=dialect)
    except (ParseError, TokenError) as exc:
        return False, str(exc)
    return True, ""


__all__ = [
    "is_identifier",
    "positional_indexes",
    "count_placeholders",
    "positional_to_named",
    "check_syntax",
]
