from __future__ import annotations

import time
from datetime import date
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from core.logging_setup import set_corr_id
from core.logging_utils import get_logger, log_event

from .errors import ExecutionError, QueryError
from .intent import analyze_query
from .models import ColumnInfo, QueryResult
from .sql_builder import build_query
from .table_profiles import (
    AVERAGE_ALIAS,
    COUNT_ALIAS,
    DEPARTURES_ALIAS,
    DISTANCE_ALIAS,
    STATION_NAME_ALIAS,
)

log = get_logger(__name__)

SAMPLE_QUESTIONS: List[str] = [
    "What was the average ride time for journeys that started at Congress Avenue in June 2025?",
    "How many kilometres were ridden by women on rainy days in June 2025?",
    "Which docking point saw the most departures during the first week of June 2025?",
    "How many trips were taken in June 2025?",
    "What was the total distance ridden last month?",
]


class Catalog(Protocol):
    def get_all_columns(self) -> Sequence[ColumnInfo]: ...


class Executor(Protocol):
    def execute(self, sql: str, parameters: Sequence[Any]) -> Sequence[Mapping[str, Any]]: ...


def _number(value: Any) -> Optional[float]:
    # Postgres returns NUMERIC as Decimal
    return None if value is None else float(value)


def _shape_average(row: Mapping[str, Any]) -> Dict[str, Any]:
    minutes = _number(row[AVERAGE_ALIAS])
    if minutes is None:
        return {AVERAGE_ALIAS: None, "formatted_result": "No matching rides"}
    rounded = int(round(minutes))
    return {AVERAGE_ALIAS: rounded, "formatted_result": f"{rounded} minutes"}


def _shape_distance(row: Mapping[str, Any]) -> Dict[str, Any]:
    km = round(_number(row[DISTANCE_ALIAS]) or 0.0, 1)
    return {DISTANCE_ALIAS: km, "formatted_result": f"{km:.1f} km"}


def _shape_station(row: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        STATION_NAME_ALIAS: row[STATION_NAME_ALIAS],
        DEPARTURES_ALIAS: row.get(DEPARTURES_ALIAS),
        "formatted_result": row[STATION_NAME_ALIAS],
    }


def _shape_count(row: Mapping[str, Any]) -> Dict[str, Any]:
    count = row[COUNT_ALIAS]
    return {COUNT_ALIAS: count, "formatted_result": str(count)}


# First entry whose key is present in a single-row result wins.
RESULT_SHAPES: Tuple[Tuple[str, Callable[[Mapping[str, Any]], Dict[str, Any]]], ...] = (
    (AVERAGE_ALIAS, _shape_average),
    (DISTANCE_ALIAS, _shape_distance),
    (STATION_NAME_ALIAS, _shape_station),
    (COUNT_ALIAS, _shape_count),
)


def shape_result(rows: Sequence[Mapping[str, Any]]) -> Any:
    if len(rows) == 1:
        row = rows[0]
        for key, shaper in RESULT_SHAPES:
            if key in row:
                return shaper(row)
    return [dict(r) for r in rows]


class QueryProcessor:
    """Answer one question: catalog -> intent -> SQL -> rows -> shaped result."""

    def __init__(
        self,
        catalog: Catalog,
        executor: Executor,
        *,
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self.catalog = catalog
        self.executor = executor
        self._today = today or date.today

    def _execute(self, sql: str, parameters: List[Any]) -> Sequence[Mapping[str, Any]]:
        try:
            return self.executor.execute(sql, parameters)
        except ExecutionError:
            raise
        except Exception as exc:
            raise ExecutionError(str(exc)) from exc

    def process_query(self, question: str) -> QueryResult:
        started = time.perf_counter()
        set_corr_id()
        log_event(log, "processor", "query.receive", {"question": question})

        try:
            columns = list(self.catalog.get_all_columns())
            intent = analyze_query(question, columns, today=self._today())
            log_event(log, "processor", "query.intent", intent.model_dump())

            generated = build_query(intent, columns)
            log_event(
                log,
                "processor",
                "query.sql",
                {"sql": generated.sql, "parameters": generated.parameters},
            )

            rows = self._execute(generated.sql, generated.parameters)
            result = shape_result(rows)
        except Exception as exc:
            elapsed = int((time.perf_counter() - started) * 1000)
            event = "query.rejected" if isinstance(exc, QueryError) else "query.failed"
            log_event(
                log,
                "processor",
                event,
                {"error": str(exc), "kind": type(exc).__name__, "ms": elapsed},
            )
            if not isinstance(exc, QueryError):
                log.exception("unexpected failure while answering %r", question)
            return QueryResult(
                sql="",
                result=None,
                error=str(exc) or type(exc).__name__,
                explanation="",
                execution_time=elapsed,
            )

        elapsed = int((time.perf_counter() - started) * 1000)
        log_event(
            log,
            "processor",
            "query.done",
            {"rows": len(rows), "ms": elapsed},
        )
        return QueryResult(
            sql=generated.sql,
            result=result,
            error=None,
            explanation=generated.explanation,
            execution_time=elapsed,
        )


__all__ = ["QueryProcessor", "shape_result", "RESULT_SHAPES", "SAMPLE_QUESTIONS"]
