"""Seed the progress store with a demo student and sample fluency progress."""

from __future__ import annotations

import argparse
import logging
from typing import List, Sequence

import db
from schemas import ProgressRecord, ProgressUpdate

logger = logging.getLogger(__name__)

DEMO_STUDENT = {
    "name": "Alex Rodriguez",
    "grade": 6,
    "section": "A",
    "initials": "AR",
}

# (fact category, phase, accuracy, efficiency, flexibility, strategy use)
DEMO_PROGRESS = [
    ("add-plus-minus-1-2", "mastery", 95, 90, 80, 85),
    ("add-doubles", "mastery", 92, 88, 85, 90),
    ("add-combinations-10", "deriving", 80, 70, 75, 78),
    ("mult-2-5-10", "mastery", 88, 85, 80, 82),
]


def seed_demo_student(student_id: str = "student-1") -> List[ProgressRecord]:
    """Create the demo student if missing and upsert its sample progress."""

    db.init()
    if db.get_student(student_id) is None:
        db.create_student(student_id=student_id, **DEMO_STUDENT)
        logger.info("Created demo student %s", student_id)

    records = []
    for category_id, phase, accuracy, efficiency, flexibility, strategy_use in DEMO_PROGRESS:
        records.append(
            db.upsert_student_progress(
                ProgressUpdate(
                    student_id=student_id,
                    fact_category_id=category_id,
                    phase=phase,
                    accuracy=accuracy,
                    efficiency=efficiency,
                    flexibility=flexibility,
                    strategy_use=strategy_use,
                )
            )
        )
    logger.info("Seeded %d progress records for %s", len(records), student_id)
    return records


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--student",
        type=str,
        default="student-1",
        help="Identifier of the demo student to seed (default: student-1)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    records = seed_demo_student(args.student)
    for record in records:
        print(f"{record.fact_category_id}: {record.phase} ({record.accuracy}% accuracy)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
