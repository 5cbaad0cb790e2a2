from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

QueryType = Literal["aggregation", "filter", "join", "group_by", "date_range"]
AggregationType = Literal["count", "sum", "avg", "max", "min"]
Operator = Literal["=", "!=", ">", "<", ">=", "<=", "LIKE", "IN"]
RelativeDate = Literal["last_month", "last_week", "this_month", "this_week"]

AGGREGATION_TYPES: Tuple[str, ...] = ("count", "sum", "avg", "max", "min")
OPERATORS: Tuple[str, ...] = ("=", "!=", ">", "<", ">=", "<=", "LIKE", "IN")


@dataclass(frozen=True)
class ColumnInfo:
    table: str
    column: str
    data_type: str
    nullable: bool = True

    @property
    def qualified(self) -> str:
        return f"{self.table}.{self.column}"


@dataclass(frozen=True)
class ScoredColumn:
    column: ColumnInfo
    score: int
    reasons: Tuple[str, ...] = ()

    @property
    def reason(self) -> str:
        return "; ".join(self.reasons)


class FilterCondition(BaseModel):
    model_config = ConfigDict(frozen=True)

    column: str
    operator: Operator
    value: Union[int, float, str, List[str]]
    is_parameterized: bool = True


class DateRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_date: Optional[str] = None
    end_date: Optional[str] = None
    relative_date: Optional[RelativeDate] = None
    specific_month: Optional[str] = None
    specific_year: Optional[str] = None

    def has_range(self) -> bool:
        return bool(self.start_date and self.end_date)


class QueryIntent(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: QueryType = "aggregation"
    aggregation_type: AggregationType = "count"
    filter_conditions: List[FilterCondition] = Field(default_factory=list)
    date_range: Optional[DateRange] = None
    group_by: List[str] = Field(default_factory=list)


@dataclass(frozen=True)
class GeneratedSQL:
    sql: str
    parameters: List[Any]
    explanation: str


@dataclass
class QueryResult:
    sql: str = ""
    result: Any = None
    error: Optional[str] = None
    explanation: str = ""
    execution_time: int = 0

    def dict(self) -> Dict[str, Any]:
        return {
            "sql": self.sql,
            "result": self.result,
            "error": self.error,
            "explanation": self.explanation,
            "execution_time": self.execution_time,
        }


__all__ = [
    "AGGREGATION_TYPES",
    "OPERATORS",
    "ColumnInfo",
    "ScoredColumn",
    "FilterCondition",
    "DateRange",
    "QueryIntent",
    "GeneratedSQL",
    "QueryResult",
]
