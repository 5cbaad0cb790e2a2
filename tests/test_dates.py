import sys
from datetime import date
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from apps.bikeshare.dates import parse_date_range, relative_window, specific_month, specific_year

TODAY = date(2025, 7, 16)  # a Wednesday


def test_month_and_year():
    dr = parse_date_range("how many trips in june 2025", today=TODAY)
    assert dr.specific_month == "06"
    assert dr.specific_year == "2025"
    assert not dr.has_range()


def test_no_dates():
    assert parse_date_range("how many trips", today=TODAY) is None


def test_may_needs_a_year():
    assert specific_month("what may happen to rides") is None
    assert specific_month("rides in may 2025") == "05"
    assert specific_month("rides in may, 2024") == "05"


def test_specific_year():
    assert specific_year("trips in 2024") == "2024"
    assert specific_year("trip 12345") is None


def test_first_week_is_fixed_range():
    dr = parse_date_range("most departures during the first week of june 2025", today=TODAY)
    assert (dr.start_date, dr.end_date) == ("2025-06-01", "2025-06-07")
    assert dr.specific_month == "06"


def test_last_month():
    dr = parse_date_range("total distance last month", today=TODAY)
    assert dr.relative_date == "last_month"
    assert (dr.start_date, dr.end_date) == ("2025-06-01", "2025-06-30")


def test_last_month_across_year_boundary():
    dr = parse_date_range("trips last month", today=date(2025, 1, 10))
    assert (dr.start_date, dr.end_date) == ("2024-12-01", "2024-12-31")


def test_this_month():
    dr = parse_date_range("trips this month", today=TODAY)
    assert (dr.start_date, dr.end_date) == ("2025-07-01", "2025-07-16")


def test_weeks_start_on_monday():
    name, window = relative_window("trips last week", TODAY)
    assert name == "last_week"
    assert window == (date(2025, 7, 7), date(2025, 7, 13))

    name, window = relative_window("trips this week", TODAY)
    assert name == "this_week"
    assert window == (date(2025, 7, 14), TODAY)


def test_relative_none():
    assert relative_window("trips", TODAY) == (None, None)
