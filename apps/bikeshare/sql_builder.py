"""Turn a :class:`QueryIntent` into PostgreSQL text plus positional parameters."""
from __future__ import annotations

import re
from numbers import Real
from typing import Any, List, Optional, Sequence, Set, Tuple

from core.sql_utils import check_syntax, count_placeholders, is_identifier

from .errors import BuildError
from .explain import build_explanation
from .models import (
    AGGREGATION_TYPES,
    OPERATORS,
    ColumnInfo,
    DateRange,
    FilterCondition,
    GeneratedSQL,
    QueryIntent,
)
from .table_profiles import (
    AVERAGE_ALIAS,
    COUNT_ALIAS,
    DEPARTURES_ALIAS,
    DIMENSION_JOINS,
    DISTANCE_ALIAS,
    FACT_TABLE,
    LOCATION_TABLE,
    STATION_NAME_ALIAS,
    alias_for,
    distance_column,
    end_time_column,
    find_column,
    start_time_column,
    station_name_column,
)

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_FACT_ALIAS = alias_for(FACT_TABLE)


def _resolve(columns: Sequence[ColumnInfo], name: str, role: str) -> ColumnInfo:
    column = find_column(columns, name)
    if column is None:
        raise BuildError(f"Unknown {role} column: {name!r}")
    if not is_identifier(column.column) or not is_identifier(column.table):
        raise BuildError(f"Unsupported identifier for {role} column: {name!r}")
    return column


def _qualified(column: ColumnInfo) -> str:
    return f"{alias_for(column.table)}.{column.column}"


def _group_projection(intent: QueryIntent, column: ColumnInfo) -> str:
    """Top-station answers always expose the station under one result key."""

    target = _qualified(column)
    if (
        intent.aggregation_type == "max"
        and column.table == LOCATION_TABLE
        and column.column != STATION_NAME_ALIAS
    ):
        return f"{target} AS {STATION_NAME_ALIAS}"
    return target


def _require(value: Optional[str], what: str) -> str:
    if not value:
        raise BuildError(f"The schema has no {what} column")
    return value


def _grouping(intent: QueryIntent, columns: Sequence[ColumnInfo]) -> Tuple[List[str], List[ColumnInfo]]:
    names = list(intent.group_by or [])
    resolved = [_resolve(columns, name, "group-by") for name in names]
    if not resolved and intent.aggregation_type == "max":
        station = station_name_column(columns)
        if station is None:
            raise BuildError("A 'most' question needs a station name column to group by")
        names = [station.column]
        resolved = [station]
    return names, resolved


def _aggregate(intent: QueryIntent, columns: Sequence[ColumnInfo]) -> str:
    kind = intent.aggregation_type
    if kind == "avg":
        start = _require(start_time_column(columns), "trip start time")
        end = _require(end_time_column(columns), "trip end time")
        return (
            f"AVG(EXTRACT(EPOCH FROM ({_FACT_ALIAS}.{end} - {_FACT_ALIAS}.{start}))/60) "
            f"AS {AVERAGE_ALIAS}"
        )
    if kind == "sum":
        distance = _require(distance_column(columns), "trip distance")
        return f"SUM({_FACT_ALIAS}.{distance}) AS {DISTANCE_ALIAS}"
    if kind == "max":
        return f"COUNT(*) AS {DEPARTURES_ALIAS}"
    # count, and min which has no dedicated projection
    return f"COUNT(*) AS {COUNT_ALIAS}"


def _joins(tables: Set[str], columns: Sequence[ColumnInfo]) -> List[str]:
    out: List[str] = []
    for table, template in DIMENSION_JOINS:
        if table not in tables:
            continue
        if "{start}" in template:
            start = _require(start_time_column(columns), "trip start time")
            template = template.format(start=start)
        out.append(template)
    return out


def _inline_number(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise BuildError(f"Only numeric values can be inlined, got {value!r}")
    return repr(value) if isinstance(value, float) else str(int(value))


def _filter_predicate(
    condition: FilterCondition,
    column: ColumnInfo,
    parameters: List[Any],
) -> str:
    """Render one predicate; a placeholder and its parameter are appended together."""

    operator = condition.operator
    if operator not in OPERATORS:
        raise BuildError(f"Unsupported operator: {operator!r}")
    target = _qualified(column)

    if operator == "IN" and not isinstance(condition.value, (list, tuple)):
        raise BuildError(f"IN filter on {column.column} needs a list value")

    if condition.is_parameterized:
        parameters.append(list(condition.value) if operator == "IN" else condition.value)
        placeholder = f"${len(parameters)}"
        if operator == "IN":
            return f"{target} = ANY({placeholder})"
        return f"{target} {operator} {placeholder}"

    if operator == "IN":
        values = ", ".join(_inline_number(v) for v in condition.value)
        return f"{target} IN ({values})"
    return f"{target} {operator} {_inline_number(condition.value)}"


def _date_predicates(date_range: Optional[DateRange], columns: Sequence[ColumnInfo]) -> List[str]:
    if date_range is None:
        return []
    if date_range.has_range():
        start_date, end_date = date_range.start_date, date_range.end_date
        for value in (start_date, end_date):
            if not _ISO_DATE_RE.match(value or ""):
                raise BuildError(f"Malformed date literal: {value!r}")
        start = _require(start_time_column(columns), "trip start time")
        return [f"DATE({_FACT_ALIAS}.{start}) BETWEEN '{start_date}' AND '{end_date}'"]

    out: List[str] = []
    if date_range.specific_month or date_range.specific_year:
        start = _require(start_time_column(columns), "trip start time")
        if date_range.specific_month:
            month = date_range.specific_month
            if not month.isdigit() or not 1 <= int(month) <= 12:
                raise BuildError(f"Malformed month: {month!r}")
            out.append(f"EXTRACT(MONTH FROM {_FACT_ALIAS}.{start}) = {int(month)}")
        if date_range.specific_year:
            year = date_range.specific_year
            if not year.isdigit() or len(year) != 4:
                raise BuildError(f"Malformed year: {year!r}")
            out.append(f"EXTRACT(YEAR FROM {_FACT_ALIAS}.{start}) = {int(year)}")
    return out


def build_query(intent: QueryIntent, columns: Sequence[ColumnInfo]) -> GeneratedSQL:
    if intent.aggregation_type not in AGGREGATION_TYPES:
        raise BuildError(f"Unsupported aggregation: {intent.aggregation_type!r}")

    group_names, group_columns = _grouping(intent, columns)
    filters = [
        (condition, _resolve(columns, condition.column, "filter"))
        for condition in intent.filter_conditions or []
    ]

    projection = [_group_projection(intent, c) for c in group_columns] + [_aggregate(intent, columns)]
    sql = f"SELECT {', '.join(projection)} FROM {FACT_TABLE} {_FACT_ALIAS}"

    tables = {c.table for _, c in filters} | {c.table for c in group_columns}
    for join in _joins(tables, columns):
        sql += f" {join}"

    parameters: List[Any] = []
    where = [_filter_predicate(cond, col, parameters) for cond, col in filters]
    where += _date_predicates(intent.date_range, columns)
    if where:
        sql += " WHERE " + " AND ".join(where)

    if group_names:
        sql += " GROUP BY " + ", ".join(group_names)

    if intent.aggregation_type == "max" and any(c.table == LOCATION_TABLE for c in group_columns):
        sql += f" ORDER BY {DEPARTURES_ALIAS} DESC LIMIT 1"

    if count_placeholders(sql) != len(parameters):
        raise BuildError("Placeholder count does not match parameter count")
    ok, error = check_syntax(sql)
    if not ok:
        raise BuildError(f"Generated SQL is not well-formed: {error}")

    return GeneratedSQL(
        sql=sql,
        parameters=parameters,
        explanation=build_explanation(intent, columns),
    )


__all__ = ["build_query"]
