from __future__ import annotations

from typing import List, Sequence

from .models import ColumnInfo, FilterCondition, QueryIntent
from .table_profiles import LOCATION_TABLE, WEATHER_TABLE, find_column, is_gender_column

_AGGREGATION_PHRASES = {
    "avg": "Calculate average ride time",
    "count": "Count total trips",
    "min": "Count total trips",
    "sum": "Sum total distance",
    "max": "Find the group with the most departures",
}


def _describe_filter(condition: FilterCondition, columns: Sequence[ColumnInfo]) -> str:
    column = find_column(columns, condition.column)
    if column is not None and column.table == LOCATION_TABLE and condition.operator == "LIKE":
        return f"at stations matching '{str(condition.value).strip('%')}'"
    if column is not None and is_gender_column(column):
        return f"for {condition.value} riders"
    if column is not None and column.table == WEATHER_TABLE and condition.operator == ">":
        return "on rainy days"
    return f"where {condition.column} {condition.operator} {condition.value}"


def build_explanation(intent: QueryIntent, columns: Sequence[ColumnInfo]) -> str:
    parts: List[str] = [_AGGREGATION_PHRASES.get(intent.aggregation_type, "Count total trips")]
    if intent.group_by:
        parts.append(f"grouped by {', '.join(intent.group_by)}")
    if intent.filter_conditions:
        parts.append(", ".join(_describe_filter(f, columns) for f in intent.filter_conditions))
    date_range = intent.date_range
    if date_range is not None:
        if date_range.has_range():
            parts.append(f"from {date_range.start_date} to {date_range.end_date}")
        elif date_range.specific_month and date_range.specific_year:
            parts.append(f"for {date_range.specific_month}/{date_range.specific_year}")
        elif date_range.specific_year:
            parts.append(f"in {date_range.specific_year}")
        elif date_range.specific_month:
            parts.append(f"in month {date_range.specific_month}")
    return " ".join(parts)
