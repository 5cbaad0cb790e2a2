"""Bike-share question answering: natural-language questions to parameterised SQL."""

from .errors import BuildError, ExecutionError, QueryError, ValidationError
from .intent import analyze_query
from .models import ColumnInfo, DateRange, FilterCondition, GeneratedSQL, QueryIntent, QueryResult
from .processor import SAMPLE_QUESTIONS, QueryProcessor
from .scorer import find_best_match, find_best_matches, find_columns_for_query_type, score_column
from .sql_builder import build_query

__all__ = [
    "BuildError",
    "ExecutionError",
    "QueryError",
    "ValidationError",
    "analyze_query",
    "ColumnInfo",
    "DateRange",
    "FilterCondition",
    "GeneratedSQL",
    "QueryIntent",
    "QueryResult",
    "SAMPLE_QUESTIONS",
    "QueryProcessor",
    "find_best_match",
    "find_best_matches",
    "find_columns_for_query_type",
    "score_column",
    "build_query",
]
