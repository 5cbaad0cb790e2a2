"""Filter detectors.

Every detector receives the raw question and the scored catalog columns and
returns at most one :class:`FilterCondition`. Detectors do not see each other's
output; :func:`detect_filters` simply runs them in registration order.
"""
from __future__ import annotations

import re
from typing import Callable, List, Optional, Sequence

from .models import FilterCondition, ScoredColumn
from .patterns import (
    CATEGORICAL_TYPES,
    FEMALE_RE,
    GENDER_COLUMN_MARKERS,
    GENDER_RE,
    LOCATION_HINTS,
    MALE_RE,
    MONTHS,
    NUMERIC_TYPES,
    STREET_SUFFIXES,
    WEATHER_COLUMN_MARKERS,
    WEATHER_RE,
)
from .scorer import has_type
from .table_profiles import LOCATION_TABLE

Detector = Callable[[str, Sequence[ScoredColumn]], Optional[FilterCondition]]

DETECTORS: List[Detector] = []


def register_detector(fn: Detector) -> Detector:
    DETECTORS.append(fn)
    return fn


def detect_filters(
    question: str,
    scored: Sequence[ScoredColumn],
    detectors: Optional[Sequence[Detector]] = None,
) -> List[FilterCondition]:
    conditions: List[FilterCondition] = []
    for detector in detectors if detectors is not None else DETECTORS:
        condition = detector(question, scored)
        if condition is not None:
            conditions.append(condition)
    return conditions


# ---------------------------------------------------------------------------
# location

_PLACE_AFTER_PREP_RE = re.compile(
    r"\b(?:at|from|near)\s+([A-Z][\w'.&-]*(?:\s+[A-Z][\w'.&-]*)*)"
)
_STREET_RE = re.compile(
    r"\b([A-Za-z][\w'-]*)\s+(" + "|".join(STREET_SUFFIXES) + r")\b",
    re.IGNORECASE,
)
_NOT_A_PLACE = {"the", "a", "an", "this", "that", "each", "every", "which", "any"}


def extract_place(question: str) -> Optional[str]:
    """Pull a place name such as ``Congress Avenue`` out of the question."""

    text = question or ""
    match = _PLACE_AFTER_PREP_RE.search(text)
    if match:
        words = match.group(1).split()
        while words and words[-1].lower().strip(".,?!") in MONTHS:
            words.pop()
        place = " ".join(words).strip(".,?!")
        if place:
            return place

    match = _STREET_RE.search(text)
    if match and match.group(1).lower() not in _NOT_A_PLACE:
        place = f"{match.group(1)} {match.group(2)}"
        return place if any(ch.isupper() for ch in place) else place.title()
    return None


@register_detector
def detect_location(question: str, scored: Sequence[ScoredColumn]) -> Optional[FilterCondition]:
    lowered = (question or "").lower()
    if not any(hint in lowered for hint in LOCATION_HINTS):
        return None
    candidates = [s for s in scored if s.column.table == LOCATION_TABLE]
    if not candidates:
        return None
    place = extract_place(question)
    if not place:
        return None
    textual = [s for s in candidates if has_type(s.column, CATEGORICAL_TYPES)]
    best = (textual or candidates)[0]
    return FilterCondition(
        column=best.column.column,
        operator="LIKE",
        value=f"%{place}%",
        is_parameterized=True,
    )


# ---------------------------------------------------------------------------
# gender


def gender_value(question: str) -> Optional[str]:
    if FEMALE_RE.search(question or ""):
        return "female"
    if MALE_RE.search(question or ""):
        return "male"
    return None


@register_detector
def detect_gender(question: str, scored: Sequence[ScoredColumn]) -> Optional[FilterCondition]:
    if not GENDER_RE.search(question or ""):
        return None
    candidates = [
        s
        for s in scored
        if any(m in s.column.column.lower() for m in GENDER_COLUMN_MARKERS)
    ]
    value = gender_value(question)
    if not candidates or value is None:
        return None
    return FilterCondition(
        column=candidates[0].column.column,
        operator="=",
        value=value,
        is_parameterized=True,
    )


# ---------------------------------------------------------------------------
# weather


@register_detector
def detect_weather(question: str, scored: Sequence[ScoredColumn]) -> Optional[FilterCondition]:
    if not WEATHER_RE.search(question or ""):
        return None
    candidates = [
        s
        for s in scored
        if any(m in s.column.column.lower() for m in WEATHER_COLUMN_MARKERS)
        and has_type(s.column, NUMERIC_TYPES)
    ]
    if not candidates:
        return None
    precipitation = [s for s in candidates if "precipitation" in s.column.column.lower()]
    best = (precipitation or candidates)[0]
    return FilterCondition(
        column=best.column.column,
        operator=">",
        value=0,
        is_parameterized=True,
    )


__all__ = [
    "DETECTORS",
    "register_detector",
    "detect_filters",
    "extract_place",
    "gender_value",
    "detect_location",
    "detect_gender",
    "detect_weather",
]
