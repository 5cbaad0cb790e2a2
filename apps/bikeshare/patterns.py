"""Word lists and regexes shared by the scorer, detectors and intent analyzer."""
from __future__ import annotations

import re
from typing import Dict, Pattern, Tuple

# (category, text vocabulary, SQL data-type markers); first category that
# matches both the text and the column type wins.
TYPE_FAMILIES: Tuple[Tuple[str, Tuple[str, ...], Tuple[str, ...]], ...] = (
    (
        "time",
        ("time", "date", "month", "year", "week", "day", "hour", "minute"),
        ("timestamp", "date", "time"),
    ),
    (
        "numeric",
        ("count", "sum", "total", "average", "distance", "km", "kilometer"),
        ("numeric", "integer", "bigint", "smallint", "decimal", "double", "real", "float"),
    ),
    (
        "text",
        ("name", "station", "location", "address", "street"),
        ("character", "text", "varchar"),
    ),
    (
        "boolean",
        ("is", "has", "active", "enabled", "valid"),
        ("boolean", "bit"),
    ),
)

# Data-type markers used to narrow matches per query kind.
NUMERIC_TYPES = ("numeric", "integer", "bigint", "smallint", "decimal", "double", "real", "float")
FILTERABLE_TYPES = ("character", "timestamp", "date", "boolean")
CATEGORICAL_TYPES = ("character", "text", "varchar")

# column-name marker -> words in the question that point at it
NAMING_CONVENTIONS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("_id", ("id", "identifier")),
    ("_name", ("name", "title")),
    ("_at", ("time", "date")),
    ("_by", ("by", "user")),
    ("_count", ("count", "number")),
)
NAMING_POINTS = 15
NAMING_CAP = 25

# known table -> words that put a question in that table's context
TABLE_CONTEXT: Dict[str, Tuple[str, ...]] = {
    "stations": ("station", "location", "address", "dock"),
    "trips": ("trip", "ride", "journey"),
    "daily_weather": ("weather", "rain", "temperature"),
    "users": ("user", "rider", "person"),
}


def _words(*words: str) -> Pattern[str]:
    return re.compile(r"\b(?:" + "|".join(words) + r")\b", re.IGNORECASE)


# domain -> (column-name markers, word-boundary vocabulary)
SEMANTIC_DOMAINS: Tuple[Tuple[str, Tuple[str, ...], Pattern[str]], ...] = (
    (
        "gender",
        ("gender", "sex", "male", "female"),
        _words("women", "female", "woman", "men", "male", "man", "gender"),
    ),
    (
        "weather",
        ("precipitation", "weather", "rain", "temperature"),
        _words("rainy", "rain", "wet", "weather", "precipitation", "humid", "temperature"),
    ),
    (
        "location",
        ("station", "name", "address", "location"),
        _words(
            "station", "location", "address", "avenue", "street", "road",
            "boulevard", "congress", "place", "dock", "docking",
        ),
    ),
    (
        "distance",
        ("distance", "km", "length", "miles"),
        _words(
            "kilometers?", "kilometres?", "km", "distance", "length",
            "miles", "far", "near", "away",
        ),
    ),
)

# Detector vocabulary
GENDER_COLUMN_MARKERS = ("gender", "sex")
FEMALE_RE = _words("women", "female", "woman")
MALE_RE = _words("men", "male", "man")
GENDER_RE = _words("women", "female", "woman", "men", "male", "man", "gender")

WEATHER_COLUMN_MARKERS = ("precipitation", "weather", "rain")
WEATHER_RE = _words("rainy", "rain", "precipitation", "wet", "weather")

LOCATION_HINTS = ("congress", "avenue", "street", "station", "dock", "road", "boulevard")
STREET_SUFFIXES = ("avenue", "street", "road", "boulevard", "lane", "drive", "square", "place")

# Validation
DOMAIN_KEYWORDS: Tuple[str, ...] = (
    # data concepts
    "ride", "trip", "journey", "bike", "cycle", "station", "docking", "point",
    # time
    "time", "duration", "minute", "hour", "day", "week", "month", "year",
    # location
    "avenue", "street", "congress", "start", "end", "departure", "arrival",
    # weather
    "weather", "rain", "rainy", "precipitation", "wet", "dry",
    # riders
    "rider", "user", "male", "female", "woman", "man", "gender",
    # distance
    "distance", "kilometer", "km", "length", "far", "near",
    # aggregation
    "how many", "count", "total", "average", "mean", "most", "least",
    "highest", "lowest",
    # question words
    "what", "which", "when", "where", "how",
)
QUESTION_START_RE = re.compile(r"^(what|which|when|where|how|show|tell|find|get)\b", re.IGNORECASE)
MIN_DOMAIN_KEYWORDS = 2

# Aggregation priority: first entry whose vocabulary appears wins.
AGGREGATION_PRIORITY: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("avg", ("average", "mean", "typical", "usual")),
    ("sum", ("kilometer", "kilometre", "km", "distance", "length")),
    ("max", ("most", "highest")),
    ("min", ("least", "lowest")),
)
DEFAULT_AGGREGATION = "count"

# Dates
MONTHS: Tuple[str, ...] = (
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
)
MONTH_RE = re.compile(r"\b(" + "|".join(MONTHS) + r")\b", re.IGNORECASE)
YEAR_RE = re.compile(r"\b((?:19|20)\d{2})\b")
FIRST_WEEK_RE = re.compile(r"\bfirst\s+week\b", re.IGNORECASE)
# The first-week window is a fixed literal, not derived from the month asked about.
FIRST_WEEK_RANGE = ("2025-06-01", "2025-06-07")
RELATIVE_DATES: Tuple[Tuple[str, Pattern[str]], ...] = (
    ("last_month", re.compile(r"\blast\s+month\b", re.IGNORECASE)),
    ("this_month", re.compile(r"\bthis\s+month\b", re.IGNORECASE)),
    ("last_week", re.compile(r"\blast\s+week\b", re.IGNORECASE)),
    ("this_week", re.compile(r"\bthis\s+week\b", re.IGNORECASE)),
)

GROUP_BY_TRIGGERS = ("which", "most")
