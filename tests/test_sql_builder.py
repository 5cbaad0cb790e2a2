import sys
from datetime import date
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from apps.bikeshare.errors import BuildError
from apps.bikeshare.intent import analyze_query
from apps.bikeshare.models import ColumnInfo, DateRange, FilterCondition, QueryIntent
from apps.bikeshare.sql_builder import build_query
from core.sql_utils import count_placeholders, positional_indexes

TODAY = date(2025, 7, 16)

SCENARIO_A = "What was the average ride time for journeys that started at Congress Avenue in June 2025?"
SCENARIO_B = "How many kilometres were ridden by women on rainy days in June 2025?"
SCENARIO_D = "Which docking point saw the most departures during the first week of June 2025?"


def _build(question, columns):
    return build_query(analyze_query(question, columns, today=TODAY), columns)


def test_scenario_a_sql(columns):
    generated = _build(SCENARIO_A, columns)
    assert generated.sql == (
        "SELECT AVG(EXTRACT(EPOCH FROM (t.ended_at - t.started_at))/60) AS average_minutes "
        "FROM trips t JOIN stations s ON t.start_station_id = s.station_id "
        "WHERE s.station_name LIKE $1 "
        "AND EXTRACT(MONTH FROM t.started_at) = 6 "
        "AND EXTRACT(YEAR FROM t.started_at) = 2025"
    )
    assert generated.parameters == ["%Congress Avenue%"]
    assert count_placeholders(generated.sql) == 1


def test_scenario_b_parameter_order(columns):
    generated = _build(SCENARIO_B, columns)
    assert generated.parameters == ["female", 0]
    assert "SUM(t.trip_distance_km) AS total_kilometers" in generated.sql
    assert "JOIN daily_weather w ON DATE(t.started_at) = w.weather_date" in generated.sql
    assert "t.rider_gender = $1" in generated.sql
    assert "w.precipitation_mm > $2" in generated.sql
    assert "JOIN stations" not in generated.sql


def test_scenario_d_top_station(columns):
    generated = _build(SCENARIO_D, columns)
    assert generated.sql.startswith("SELECT s.station_name, COUNT(*) AS departure_count FROM trips t")
    assert "DATE(t.started_at) BETWEEN '2025-06-01' AND '2025-06-07'" in generated.sql
    assert "EXTRACT(MONTH" not in generated.sql
    assert "GROUP BY station_name" in generated.sql
    assert generated.sql.endswith("ORDER BY departure_count DESC LIMIT 1")
    assert generated.parameters == []


def test_plain_count(columns):
    generated = _build("How many trips were taken in June 2025?", columns)
    assert generated.sql.startswith("SELECT COUNT(*) AS total_count FROM trips t WHERE")
    assert "JOIN" not in generated.sql
    assert generated.explanation.startswith("Count total trips")


def test_min_falls_back_to_count(columns):
    generated = build_query(QueryIntent(aggregation_type="min"), columns)
    assert generated.sql == "SELECT COUNT(*) AS total_count FROM trips t"


def test_placeholders_are_sequential(columns):
    intent = QueryIntent(
        aggregation_type="count",
        filter_conditions=[
            FilterCondition(column="rider_gender", operator="=", value="female"),
            FilterCondition(column="station_name", operator="LIKE", value="%Lamar%"),
            FilterCondition(column="precipitation_mm", operator=">=", value=2.5),
        ],
    )
    generated = build_query(intent, columns)
    assert positional_indexes(generated.sql) == [1, 2, 3]
    assert generated.parameters == ["female", "%Lamar%", 2.5]
    # joins follow a fixed order regardless of filter order
    assert generated.sql.index("JOIN stations") < generated.sql.index("JOIN daily_weather")


def test_build_is_pure(columns):
    intent = analyze_query(SCENARIO_B, columns, today=TODAY)
    snapshot = intent.model_dump()
    first = build_query(intent, columns)
    second = build_query(intent, columns)
    assert first == second
    assert intent.model_dump() == snapshot


def test_in_filter_binds_a_list(columns):
    intent = QueryIntent(
        filter_conditions=[FilterCondition(column="rider_gender", operator="IN", value=["female", "male"])]
    )
    generated = build_query(intent, columns)
    assert "t.rider_gender = ANY($1)" in generated.sql
    assert generated.parameters == [["female", "male"]]


def test_inline_numeric_value(columns):
    intent = QueryIntent(
        filter_conditions=[
            FilterCondition(column="precipitation_mm", operator=">", value=5, is_parameterized=False)
        ]
    )
    generated = build_query(intent, columns)
    assert "w.precipitation_mm > 5" in generated.sql
    assert generated.parameters == []
    assert count_placeholders(generated.sql) == 0


@pytest.mark.parametrize(
    "intent",
    [
        QueryIntent(filter_conditions=[FilterCondition(column="nope", operator="=", value=1)]),
        QueryIntent(group_by=["nope"]),
        QueryIntent(filter_conditions=[FilterCondition(column="rider_gender", operator="IN", value="female")]),
        QueryIntent(
            filter_conditions=[
                FilterCondition(column="rider_gender", operator="=", value="x' OR 1=1", is_parameterized=False)
            ]
        ),
        QueryIntent(date_range=DateRange(start_date="June 1", end_date="2025-06-07")),
        QueryIntent(date_range=DateRange(specific_month="13")),
        QueryIntent(date_range=DateRange(specific_year="25")),
        QueryIntent.model_construct(aggregation_type="median"),
    ],
)
def test_build_errors(intent, columns):
    with pytest.raises(BuildError):
        build_query(intent, columns)


def test_unsupported_operator(columns):
    condition = FilterCondition.model_construct(column="rider_gender", operator="~", value="f")
    with pytest.raises(BuildError):
        build_query(QueryIntent.model_construct(filter_conditions=[condition]), columns)


def test_most_without_station_names(columns):
    no_stations = [c for c in columns if c.table != "stations"]
    with pytest.raises(BuildError):
        build_query(QueryIntent(aggregation_type="max"), no_stations)


def test_average_without_time_columns(columns):
    untimed = [c for c in columns if c.column not in ("started_at", "ended_at")]
    with pytest.raises(BuildError):
        build_query(QueryIntent(aggregation_type="avg"), untimed)


def test_explanation_mentions_filters(columns):
    generated = _build(SCENARIO_B, columns)
    assert "for female riders" in generated.explanation
    assert "on rainy days" in generated.explanation
    assert "for 06/2025" in generated.explanation


def _renamed_station_columns(columns):
    out = []
    for c in columns:
        if c.table == "stations" and c.column == "station_name":
            c = ColumnInfo("stations", "name", "character varying")
        out.append(c)
    return out


def test_top_station_is_exposed_as_station_name(columns):
    renamed = _renamed_station_columns(columns)
    generated = _build(SCENARIO_D, renamed)
    assert generated.sql.startswith("SELECT s.name AS station_name, COUNT(*) AS departure_count")
    assert "GROUP BY name" in generated.sql
    assert generated.sql.endswith("ORDER BY departure_count DESC LIMIT 1")


def test_station_grouping_without_max_keeps_column_name(columns):
    renamed = _renamed_station_columns(columns)
    generated = build_query(QueryIntent(aggregation_type="count", group_by=["name"]), renamed)
    assert generated.sql.startswith("SELECT s.name, COUNT(*) AS total_count")
