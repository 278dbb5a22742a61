from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from schemas import FactCategory, LearningPath, ProgressRecord, ProgressUpdate


def _sample_payload() -> dict[str, object]:
    return {
        "id": "progress-1",
        "studentId": "student-1",
        "factCategoryId": "add-doubles",
        "phase": "mastery",
        "accuracy": 92,
        "efficiency": 88,
        "flexibility": 85,
        "strategyUse": 90,
        "lastPracticed": "2024-02-01T10:00:00+00:00",
        "updatedAt": "2024-02-02T10:00:00+00:00",
    }


def test_progress_record_accepts_camel_case_payload():
    record = ProgressRecord.model_validate(_sample_payload())
    assert record.student_id == "student-1"
    assert record.fact_category_id == "add-doubles"
    assert record.strategy_use == 90
    assert record.last_practiced == datetime(2024, 2, 1, 10, tzinfo=timezone.utc)


def test_progress_update_defaults_scores_to_zero():
    update = ProgressUpdate(student_id="s1", fact_category_id="add-doubles")
    assert update.phase == "counting"
    assert (update.accuracy, update.efficiency, update.flexibility, update.strategy_use) == (
        0,
        0,
        0,
        0,
    )


@pytest.mark.parametrize(
    "override",
    [
        {"accuracy": -1},
        {"efficiency": 101},
        {"phase": "guessing"},
        {"factCategoryId": ""},
    ],
)
def test_progress_record_rejects_invalid_values(override):
    payload = {**_sample_payload(), **override}
    with pytest.raises(ValidationError):
        ProgressRecord.model_validate(payload)


def test_fact_category_examples_are_a_tuple():
    category = FactCategory(
        id="add-doubles",
        operation="addition",
        grouping="foundational",
        name="Doubles",
        examples=["2+2", "6+6"],
    )
    assert category.examples == ("2+2", "6+6")
    assert category.model_dump(by_alias=True)["grouping"] == "foundational"


def test_learning_path_defaults():
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    path = LearningPath(student_id="s1", generated_at=now)
    payload = path.to_payload()
    assert payload["currentPhase"] == "counting"
    assert payload["overallProgress"] == {
        "accuracy": 0,
        "efficiency": 0,
        "flexibility": 0,
        "strategyUse": 0,
    }
    assert payload["generatedAt"].startswith("2024-01-01T00:00:00")
