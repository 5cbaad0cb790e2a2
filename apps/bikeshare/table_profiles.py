from __future__ import annotations

from typing import Dict, Optional, Sequence, Tuple

from .models import ColumnInfo
from .patterns import CATEGORICAL_TYPES, NUMERIC_TYPES

FACT_TABLE = "trips"
LOCATION_TABLE = "stations"
WEATHER_TABLE = "daily_weather"
USERS_TABLE = "users"

TABLE_ALIASES: Dict[str, str] = {
    FACT_TABLE: "t",
    LOCATION_TABLE: "s",
    WEATHER_TABLE: "w",
    USERS_TABLE: "u",
}

# Known dimension joins, in emission order. ``{start}`` is the trip start column.
DIMENSION_JOINS: Tuple[Tuple[str, str], ...] = (
    (LOCATION_TABLE, "JOIN stations s ON t.start_station_id = s.station_id"),
    (WEATHER_TABLE, "JOIN daily_weather w ON DATE(t.{start}) = w.weather_date"),
    (USERS_TABLE, "JOIN users u ON t.user_id = u.user_id"),
)

AVERAGE_ALIAS = "average_minutes"
COUNT_ALIAS = "total_count"
DISTANCE_ALIAS = "total_kilometers"
DEPARTURES_ALIAS = "departure_count"
STATION_NAME_ALIAS = "station_name"

_TIME_TYPES = ("timestamp", "date", "time")
_DISTANCE_MARKERS = ("distance", "km", "length", "miles")


def find_column(columns: Sequence[ColumnInfo], name: str) -> Optional[ColumnInfo]:
    for column in columns:
        if column.column == name:
            return column
    return None


def alias_for(table: str) -> str:
    return TABLE_ALIASES.get(table, TABLE_ALIASES[FACT_TABLE])


def _fact_column(
    columns: Sequence[ColumnInfo],
    markers: Sequence[str],
    types: Sequence[str],
) -> Optional[str]:
    for column in columns:
        if column.table != FACT_TABLE:
            continue
        lowered = column.column.lower()
        data_type = (column.data_type or "").lower()
        if any(m in lowered for m in markers) and any(t in data_type for t in types):
            return column.column
    return None


def start_time_column(columns: Sequence[ColumnInfo]) -> Optional[str]:
    return _fact_column(columns, ("start",), _TIME_TYPES)


def end_time_column(columns: Sequence[ColumnInfo]) -> Optional[str]:
    return _fact_column(columns, ("end",), _TIME_TYPES)


def distance_column(columns: Sequence[ColumnInfo]) -> Optional[str]:
    return _fact_column(columns, _DISTANCE_MARKERS, NUMERIC_TYPES)


def station_name_column(columns: Sequence[ColumnInfo]) -> Optional[ColumnInfo]:
    """First stations column that looks like a display name."""

    for column in columns:
        if column.table != LOCATION_TABLE:
            continue
        lowered = column.column.lower()
        if ("name" in lowered or "title" in lowered) and any(
            t in (column.data_type or "").lower() for t in CATEGORICAL_TYPES
        ):
            return column
    for column in columns:
        if column.table == LOCATION_TABLE and (
            "name" in column.column.lower() or "title" in column.column.lower()
        ):
            return column
    return None


def is_gender_column(column: ColumnInfo) -> bool:
    lowered = column.column.lower()
    return "gender" in lowered or "sex" in lowered
