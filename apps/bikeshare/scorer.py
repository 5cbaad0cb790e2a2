"""Schema-aware column relevance scoring.

Each rule below looks at the question and one catalog column independently and
contributes a fixed number of points; the total is the plain sum. No column
names are hard-coded here: relevance comes from naming conventions, SQL data
types and a handful of domain vocabularies, so an unseen schema still gets
sensible rankings.

    exact      column name appears verbatim in the text          100
    partial    a text word (len > 2) appears in the column name   50
    table      a text word (len > 2) appears in the table name    30
    type       text vocabulary matches the column's type family   20
    naming     _id/_name/_at/_by/_count conventions (capped)      25
    context    known table + its domain vocabulary                15
    semantic   gender/weather/location/distance column + words    40
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .models import ColumnInfo, ScoredColumn
from .patterns import (
    CATEGORICAL_TYPES,
    FILTERABLE_TYPES,
    NAMING_CAP,
    NAMING_CONVENTIONS,
    NAMING_POINTS,
    NUMERIC_TYPES,
    SEMANTIC_DOMAINS,
    TABLE_CONTEXT,
    TYPE_FAMILIES,
)

EXACT_POINTS = 100
PARTIAL_POINTS = 50
TABLE_POINTS = 30
TYPE_POINTS = 20
CONTEXT_POINTS = 15
SEMANTIC_POINTS = 40
MIN_TOKEN_LEN = 3


def _tokens(text: str) -> List[str]:
    return [w for w in text.split() if len(w) >= MIN_TOKEN_LEN]


def _first_token_in(tokens: Iterable[str], target: str) -> Optional[str]:
    for word in tokens:
        if word in target:
            return word
    return None


def has_type(column: ColumnInfo, markers: Sequence[str]) -> bool:
    lowered = (column.data_type or "").lower()
    return any(m in lowered for m in markers)


def type_relevance(text: str, data_type: str) -> int:
    lowered = (data_type or "").lower()
    for _, vocabulary, markers in TYPE_FAMILIES:
        if any(word in text for word in vocabulary) and any(m in lowered for m in markers):
            return TYPE_POINTS
    return 0


def naming_pattern_score(text: str, column_name: str) -> int:
    score = 0
    for marker, vocabulary in NAMING_CONVENTIONS:
        if marker in column_name and any(word in text for word in vocabulary):
            score += NAMING_POINTS
    return min(score, NAMING_CAP)


def contextual_relevance(text: str, table_name: str) -> int:
    vocabulary = TABLE_CONTEXT.get(table_name)
    if vocabulary and any(word in text for word in vocabulary):
        return CONTEXT_POINTS
    return 0


def semantic_relevance(text: str, column_name: str) -> int:
    lowered = column_name.lower()
    for _, markers, vocabulary in SEMANTIC_DOMAINS:
        if any(m in lowered for m in markers) and vocabulary.search(text):
            return SEMANTIC_POINTS
    return 0


def score_column(text: str, column: ColumnInfo) -> ScoredColumn:
    lowered = (text or "").lower()
    column_name = column.column.lower()
    table_name = column.table.lower()
    tokens = _tokens(lowered)

    score = 0
    reasons: List[str] = []

    if column_name and column_name in lowered:
        score += EXACT_POINTS
        reasons.append(f'Exact column name match: "{column.column}"')

    word = _first_token_in(tokens, column_name)
    if word:
        score += PARTIAL_POINTS
        reasons.append(f'Partial match: "{word}" in "{column.column}"')

    word = _first_token_in(tokens, table_name)
    if word:
        score += TABLE_POINTS
        reasons.append(f'Table match: "{word}" in "{column.table}"')

    points = type_relevance(lowered, column.data_type)
    if points:
        score += points
        reasons.append(f"Data type relevance: {column.data_type}")

    points = naming_pattern_score(lowered, column_name)
    if points:
        score += points
        reasons.append(f'Naming pattern match: "{column.column}"')

    points = contextual_relevance(lowered, table_name)
    if points:
        score += points
        reasons.append(f"Contextual relevance: {column.table}.{column.column}")

    points = semantic_relevance(lowered, column_name)
    if points:
        score += points
        reasons.append(f'Semantic relevance: "{column.column}"')

    return ScoredColumn(column=column, score=score, reasons=tuple(reasons))


def find_best_matches(text: str, columns: Sequence[ColumnInfo]) -> List[ScoredColumn]:
    scored = [score_column(text, column) for column in columns]
    # sorted() is stable, so ties keep catalog order
    return sorted((s for s in scored if s.score > 0), key=lambda s: s.score, reverse=True)


def find_best_match(text: str, columns: Sequence[ColumnInfo]) -> Optional[ScoredColumn]:
    matches = find_best_matches(text, columns)
    return matches[0] if matches else None


_QUERY_KIND_TYPES = {
    "aggregation": NUMERIC_TYPES,
    "filter": FILTERABLE_TYPES,
    "group_by": CATEGORICAL_TYPES,
}


def find_columns_for_query_type(
    text: str, columns: Sequence[ColumnInfo], kind: str
) -> List[ScoredColumn]:
    matches = find_best_matches(text, columns)
    markers = _QUERY_KIND_TYPES.get(kind)
    if markers is None:
        return matches
    return [m for m in matches if has_type(m.column, markers)]


__all__ = [
    "score_column",
    "find_best_matches",
    "find_best_match",
    "find_columns_for_query_type",
    "has_type",
]
