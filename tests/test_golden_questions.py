import re
import sys
from datetime import date
from pathlib import Path

import pytest
import yaml

sys.path.append(str(Path(__file__).resolve().parents[1]))

from apps.bikeshare.errors import QueryError
from apps.bikeshare.intent import analyze_query
from apps.bikeshare.sql_builder import build_query
from core.sql_utils import count_placeholders

GOLDEN = Path(__file__).resolve().parent / "golden" / "questions.yaml"
TODAY = date(2025, 7, 16)


def _normalize_sql(sql):
    return re.sub(r"\s+", " ", (sql or "")).strip()


def _load_cases():
    data = yaml.safe_load(GOLDEN.read_text(encoding="utf-8"))
    if isinstance(data, dict) and "cases" in data:
        return data["cases"]
    return data


@pytest.mark.parametrize("case", _load_cases(), ids=lambda c: c["q"][:40] or "<empty>")
def test_golden_question(case, columns):
    if case.get("expect_error"):
        with pytest.raises(QueryError) as excinfo:
            build_query(analyze_query(case["q"], columns, today=TODAY), columns)
        assert case["expect_error"] in str(excinfo.value)
        return

    generated = build_query(analyze_query(case["q"], columns, today=TODAY), columns)
    sql = _normalize_sql(generated.sql)
    for fragment in case.get("expect_sql_contains") or []:
        assert fragment in sql, f"missing {fragment!r} in {sql}"
    for fragment in case.get("expect_sql_not_contains") or []:
        assert fragment not in sql, f"unexpected {fragment!r} in {sql}"
    if "expect_params" in case:
        assert generated.parameters == case["expect_params"]
    assert count_placeholders(sql) == len(generated.parameters)
