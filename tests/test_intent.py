import sys
from datetime import date
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from apps.bikeshare.errors import REPHRASE_MESSAGE, ValidationError
from apps.bikeshare.intent import (
    analyze_query,
    classify_query_type,
    find_aggregation_type,
    find_group_by,
    is_valid_question,
)

TODAY = date(2025, 7, 16)

SCENARIO_A = "What was the average ride time for journeys that started at Congress Avenue in June 2025?"
SCENARIO_B = "How many kilometres were ridden by women on rainy days in June 2025?"
SCENARIO_D = "Which docking point saw the most departures during the first week of June 2025?"


@pytest.mark.parametrize("question", ["", "   ", "banana smoothie recipe"])
def test_invalid_questions_raise(question, columns):
    with pytest.raises(ValidationError) as excinfo:
        analyze_query(question, columns, today=TODAY)
    assert str(excinfo.value) == REPHRASE_MESSAGE


def test_question_verbs_are_valid():
    assert is_valid_question("Show me something")
    assert is_valid_question("how are you")


def test_keywords_make_statement_valid():
    assert is_valid_question("trips on rainy days")
    assert not is_valid_question("bike")


def test_aggregation_priority():
    assert find_aggregation_type("average distance") == "avg"
    assert find_aggregation_type("how many kilometres") == "sum"
    assert find_aggregation_type("the most departures") == "max"
    assert find_aggregation_type("the least used") == "min"
    assert find_aggregation_type("how many trips") == "count"


def test_type_is_always_aggregation():
    assert classify_query_type("list trips that started at congress avenue") == "aggregation"


def test_group_by_needs_which_and_most(columns):
    assert find_group_by("which station", columns) == []
    assert find_group_by("the most departures", columns) == []


def test_group_by_falls_back_to_station_name(columns):
    assert find_group_by("which qqq most", columns, scored=[]) == ["station_name"]


def test_scenario_a(columns):
    intent = analyze_query(SCENARIO_A, columns, today=TODAY)
    assert intent.type == "aggregation"
    assert intent.aggregation_type == "avg"
    assert len(intent.filter_conditions) == 1
    condition = intent.filter_conditions[0]
    assert condition.operator == "LIKE"
    assert condition.value == "%Congress Avenue%"
    assert intent.date_range.specific_month == "06"
    assert intent.date_range.specific_year == "2025"
    assert intent.group_by == []


def test_scenario_b(columns):
    intent = analyze_query(SCENARIO_B, columns, today=TODAY)
    assert intent.aggregation_type == "sum"
    assert [(f.column, f.operator, f.value) for f in intent.filter_conditions] == [
        ("rider_gender", "=", "female"),
        ("precipitation_mm", ">", 0),
    ]


def test_scenario_d(columns):
    intent = analyze_query(SCENARIO_D, columns, today=TODAY)
    assert intent.aggregation_type == "max"
    assert intent.group_by == ["station_name"]
    assert intent.filter_conditions == []
    assert intent.date_range.start_date == "2025-06-01"
    assert intent.date_range.end_date == "2025-06-07"


def test_relative_dates_use_today(columns):
    intent = analyze_query("What was the total distance ridden last month?", columns, today=TODAY)
    assert intent.aggregation_type == "sum"
    assert intent.date_range.relative_date == "last_month"
    assert intent.date_range.start_date == "2025-06-01"
    assert intent.date_range.end_date == "2025-06-30"


@pytest.mark.parametrize("text", ["Whatever happens", "Showcase banana", "Getaway plans", "Whence"])
def test_question_verb_must_be_a_whole_word(text):
    assert not is_valid_question(text)
