"""
Tiny CLI for asking questions against the configured database.

Usage:
  python -m apps.bikeshare.cli ask "How many trips were taken in June 2025?"
  python -m apps.bikeshare.cli samples
"""
from __future__ import annotations

import json
import sys
from typing import List, Optional

from core.logging_utils import setup_logging
from core.settings import Settings

from .boot import build_processor
from .processor import SAMPLE_QUESTIONS, QueryProcessor


def main(argv: List[str], processor: Optional[QueryProcessor] = None) -> int:
    if len(argv) < 2:
        print("usage: python -m apps.bikeshare.cli <ask|samples> [question]")
        return 2
    cmd = argv[1]
    if cmd == "samples":
        questions = list(SAMPLE_QUESTIONS)
    elif cmd == "ask":
        if len(argv) < 3:
            print("usage: python -m apps.bikeshare.cli ask <question>")
            return 2
        questions = [" ".join(argv[2:])]
    else:
        print(f"unknown command: {cmd}")
        return 2

    if processor is None:
        settings = Settings()
        setup_logging(settings)
        processor = build_processor(settings)

    failures = 0
    for question in questions:
        outcome = processor.process_query(question)
        print(json.dumps({"question": question, **outcome.dict()}, indent=2, default=str))
        failures += outcome.error is not None
    return 0 if failures == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
