from __future__ import annotations

from datetime import date
from typing import List, Optional, Sequence

from core.logging_utils import get_logger

from .dates import parse_date_range
from .detectors import detect_filters
from .errors import ValidationError
from .models import ColumnInfo, QueryIntent, ScoredColumn
from .patterns import (
    AGGREGATION_PRIORITY,
    CATEGORICAL_TYPES,
    DEFAULT_AGGREGATION,
    DOMAIN_KEYWORDS,
    GROUP_BY_TRIGGERS,
    MIN_DOMAIN_KEYWORDS,
    QUESTION_START_RE,
)
from .scorer import find_best_matches, has_type
from .table_profiles import LOCATION_TABLE

log = get_logger(__name__)


def domain_keywords(question: str) -> List[str]:
    lowered = (question or "").lower()
    return [kw for kw in DOMAIN_KEYWORDS if kw in lowered]


def is_valid_question(question: str) -> bool:
    stripped = (question or "").strip()
    if not stripped:
        return False
    if QUESTION_START_RE.match(stripped):
        return True
    return len(domain_keywords(stripped)) >= MIN_DOMAIN_KEYWORDS


def classify_query_type(question: str) -> str:
    """Every question is answered with an aggregate today.

    Listing-style "filter" answers are not produced; questions such as
    "trips that started at X" are counted instead.
    """

    return "aggregation"


def find_aggregation_type(question: str) -> str:
    lowered = (question or "").lower()
    for kind, vocabulary in AGGREGATION_PRIORITY:
        if any(word in lowered for word in vocabulary):
            return kind
    return DEFAULT_AGGREGATION


def wants_group_by(question: str) -> bool:
    lowered = (question or "").lower()
    return all(word in lowered for word in GROUP_BY_TRIGGERS)


def find_group_by(
    question: str,
    columns: Sequence[ColumnInfo],
    scored: Optional[Sequence[ScoredColumn]] = None,
) -> List[str]:
    if not wants_group_by(question):
        return []

    matches = list(scored) if scored is not None else find_best_matches(question, columns)
    if matches:
        stations = [m for m in matches if m.column.table == LOCATION_TABLE]
        if stations:
            textual = [m for m in stations if has_type(m.column, CATEGORICAL_TYPES)]
            return [(textual or stations)[0].column.column]
        textual = [m for m in matches if has_type(m.column, CATEGORICAL_TYPES)]
        if textual:
            return [textual[0].column.column]
        return [matches[0].column.column]

    for column in columns:
        lowered = column.column.lower()
        if column.table == LOCATION_TABLE and ("name" in lowered or "title" in lowered):
            return [column.column]
    return []


def analyze_query(
    question: str,
    columns: Sequence[ColumnInfo],
    *,
    today: Optional[date] = None,
) -> QueryIntent:
    if not is_valid_question(question):
        raise ValidationError()

    lowered = question.lower()
    scored = find_best_matches(lowered, columns)
    log.debug(
        "scored columns: %s",
        [(s.column.qualified, s.score) for s in scored[:5]],
    )

    return QueryIntent(
        type=classify_query_type(lowered),
        aggregation_type=find_aggregation_type(lowered),
        filter_conditions=detect_filters(question, scored),
        date_range=parse_date_range(lowered, today=today),
        group_by=find_group_by(lowered, columns, scored),
    )


__all__ = [
    "analyze_query",
    "is_valid_question",
    "domain_keywords",
    "classify_query_type",
    "find_aggregation_type",
    "find_group_by",
]
