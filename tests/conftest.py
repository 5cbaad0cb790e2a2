import sys
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Sequence

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from apps.bikeshare.models import ColumnInfo
from apps.bikeshare.processor import QueryProcessor

TODAY = date(2025, 7, 16)

BIKESHARE_COLUMNS: List[ColumnInfo] = [
    ColumnInfo("trips", "trip_id", "integer", nullable=False),
    ColumnInfo("trips", "start_station_id", "integer"),
    ColumnInfo("trips", "end_station_id", "integer"),
    ColumnInfo("trips", "started_at", "timestamp without time zone"),
    ColumnInfo("trips", "ended_at", "timestamp without time zone"),
    ColumnInfo("trips", "trip_distance_km", "numeric"),
    ColumnInfo("trips", "rider_gender", "character varying"),
    ColumnInfo("stations", "station_id", "integer", nullable=False),
    ColumnInfo("stations", "station_name", "character varying"),
    ColumnInfo("daily_weather", "weather_date", "date", nullable=False),
    ColumnInfo("daily_weather", "precipitation_mm", "numeric"),
    ColumnInfo("daily_weather", "high_temp_c", "numeric"),
]


class FakeCatalog:
    def __init__(self, columns: Sequence[ColumnInfo]):
        self.columns = list(columns)
        self.calls = 0

    def get_all_columns(self) -> List[ColumnInfo]:
        self.calls += 1
        return list(self.columns)


class FakeExecutor:
    def __init__(self, rows=None, error: Exception = None):
        self.rows: List[Dict[str, Any]] = rows if rows is not None else []
        self.error = error
        self.calls: List[tuple] = []

    def execute(self, sql, parameters):
        self.calls.append((sql, list(parameters)))
        if self.error is not None:
            raise self.error
        return self.rows


@pytest.fixture
def columns() -> List[ColumnInfo]:
    return list(BIKESHARE_COLUMNS)


@pytest.fixture
def catalog(columns) -> FakeCatalog:
    return FakeCatalog(columns)


@pytest.fixture
def executor() -> FakeExecutor:
    return FakeExecutor(rows=[{"total_count": 3}])


@pytest.fixture
def processor(catalog, executor) -> QueryProcessor:
    return QueryProcessor(catalog, executor, today=lambda: TODAY)


@pytest.fixture
def make_processor(catalog):
    def _make(rows=None, error=None):
        fake = FakeExecutor(rows=rows, error=error)
        return QueryProcessor(catalog, fake, today=lambda: TODAY), fake

    return _make
