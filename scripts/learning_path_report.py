"""Print a student's math-fact learning path as JSON."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List, Sequence

from pydantic import TypeAdapter, ValidationError

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import db
from env_validation import ConfigurationError, validate_environment
from fact_categories import FACT_CATEGORIES, FactCategoryConfigError, FactCategoryRegistry
from learning_path import LearningPathEngine, build_learning_path
from schemas import ProgressRecord

_PROGRESS_LIST = TypeAdapter(List[ProgressRecord])


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--student",
        type=str,
        required=True,
        help="Identifier of the student to analyse",
    )
    parser.add_argument(
        "--progress",
        type=str,
        default=None,
        help="Optional JSON file with progress records (default: read from the progress store)",
    )
    parser.add_argument(
        "--categories",
        type=str,
        default=None,
        help="Optional fact category catalog JSON (default: the bundled catalog)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Optional path to write the JSON report",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2)",
    )
    return parser


def _load_progress(path: str, student_id: str) -> List[ProgressRecord]:
    """Read ``student_id``'s records from ``path``, one per fact category.

    A repeated category overwrites the earlier entry in its first-seen position,
    the same way ``db.upsert_student_progress`` treats a repeated write.
    """
    raw = Path(path).read_text(encoding="utf-8")
    latest: Dict[str, ProgressRecord] = {}
    for record in _PROGRESS_LIST.validate_json(raw):
        if record.student_id == student_id:
            latest[record.fact_category_id] = record
    return list(latest.values())


def _write_output(payload: dict, output_path: str | None, indent: int) -> None:
    text = json.dumps(payload, indent=indent, ensure_ascii=False)
    if output_path:
        Path(output_path).write_text(text + "\n", encoding="utf-8")
    print(text)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        validate_environment()
        catalog = (
            FactCategoryRegistry(args.categories).categories
            if args.categories
            else FACT_CATEGORIES.categories
        )
        engine = LearningPathEngine()
        if args.progress:
            records = _load_progress(args.progress, args.student)
            path = engine.analyze(args.student, records, catalog)
        else:
            db.init()
            path = build_learning_path(args.student, categories=catalog, engine=engine)
    except (
        ConfigurationError,
        FactCategoryConfigError,
        FileNotFoundError,
        ValidationError,
        ValueError,
    ) as exc:
        print(str(exc), file=sys.stderr)
        return 1

    _write_output(path.to_payload(), args.output, args.indent)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
