"""Learning path engine for math-fact fluency progress.

The engine turns a student's per-category progress records into a learning
path: the overall phase (counting, deriving, mastery), averaged fluency scores,
strengths and growth areas, up to four prioritised recommendations and up to
three near-term mastery milestones. It performs no I/O and never mutates its
inputs; ``build_learning_path`` is the thin glue that reads the progress store
and the catalog first.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from itertools import islice
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

import db
from engines.activity_templates import (
    building_activities,
    intensive_activities,
    self_assessment_activities,
)
from env_validation import get_env_bool
from fact_categories import FACT_CATEGORIES
from schemas import (
    FactCategory,
    LearningPath,
    Milestone,
    OverallProgress,
    Phase,
    ProgressRecord,
    Recommendation,
)


_LOGGER = logging.getLogger(__name__)

PHASE_WEIGHTS: Dict[str, int] = {"counting": 0, "deriving": 1, "mastery": 2}
FLUENCY_DIMENSIONS = ("accuracy", "efficiency", "flexibility", "strategy_use")

STRENGTH_LABELS: Dict[str, str] = {
    "accuracy": "Strong accuracy",
    "efficiency": "Good speed and efficiency",
    "flexibility": "Flexible strategy use",
    "strategy_use": "Strategic thinking",
}
GROWTH_LABELS: Dict[str, str] = {
    "accuracy": "Accuracy needs improvement",
    "efficiency": "Speed and efficiency",
    "flexibility": "Strategy flexibility",
    "strategy_use": "Strategy development",
}

STRONG_CATEGORY_ACCURACY = 90
STRONG_DIMENSION_SCORE = 85
WEAK_CATEGORY_ACCURACY = 70
WEAK_DIMENSION_SCORE = 75
URGENT_ACCURACY = 60
ADVANCEMENT_RANGE = (70, 85)
MIXED_HIGH_ACCURACY = 80
MASTERY_ACCURACY = 90

MAX_STRENGTHS = 4
MAX_GROWTH_AREAS = 4
MAX_URGENT = 2
MAX_ADVANCEMENT = 2
MAX_RECOMMENDATIONS = 4
MAX_MILESTONES = 3


def _log_json(event: str, payload: Dict[str, Any]) -> None:
    """Emit a structured JSON log line."""

    record = {"event": event, **payload}
    try:
        message = json.dumps(record, ensure_ascii=False, sort_keys=True)
    except (TypeError, ValueError):
        fallback = {
            "event": event,
            "error": "serialization_failed",
            "payload_repr": repr(payload),
        }
        message = json.dumps(fallback, ensure_ascii=False, sort_keys=True)
    _LOGGER.info(message)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _rounded_mean(total: int, count: int) -> int:
    # Exact round-half-up for non-negative integer sums: 84.5 -> 85.
    return (2 * total + count) // (2 * count)


def _first(records: Iterable[ProgressRecord], limit: int) -> List[ProgressRecord]:
    return list(islice(records, limit))


def _index_categories(categories: Iterable[FactCategory]) -> Dict[str, FactCategory]:
    index: Dict[str, FactCategory] = {}
    for category in categories:
        index.setdefault(category.id, category)
    return index


def milestone_weeks(accuracy: int) -> int:
    """Weeks until the mastery target for a category at ``accuracy``."""

    if accuracy < 60:
        return 4
    if accuracy < 80:
        return 2
    return 1


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

def calculate_overall_progress(records: Sequence[ProgressRecord]) -> OverallProgress:
    """Average each fluency dimension across ``records`` (0 when empty)."""

    if not records:
        return OverallProgress()
    count = len(records)
    return OverallProgress(
        **{
            dimension: _rounded_mean(sum(getattr(r, dimension) for r in records), count)
            for dimension in FLUENCY_DIMENSIONS
        }
    )


def determine_current_phase(records: Sequence[ProgressRecord]) -> Phase:
    """Classify the mean phase weight into three buckets split at 0.5 and 1.5."""

    if not records:
        return "counting"
    average = sum(PHASE_WEIGHTS[r.phase] for r in records) / len(records)
    if average < 0.5:
        return "counting"
    if average < 1.5:
        return "deriving"
    return "mastery"


# ---------------------------------------------------------------------------
# Strengths and growth areas
# ---------------------------------------------------------------------------

def identify_strengths(
    records: Sequence[ProgressRecord],
    categories: Mapping[str, FactCategory],
    overall: OverallProgress,
) -> List[str]:
    strengths: List[str] = []
    for record in records:
        if record.accuracy < STRONG_CATEGORY_ACCURACY:
            continue
        category = categories.get(record.fact_category_id)
        if category is not None:
            strengths.append(category.label)

    for dimension in FLUENCY_DIMENSIONS:
        if getattr(overall, dimension) >= STRONG_DIMENSION_SCORE:
            strengths.append(STRENGTH_LABELS[dimension])

    return strengths[:MAX_STRENGTHS]


def identify_growth_areas(
    records: Sequence[ProgressRecord],
    categories: Mapping[str, FactCategory],
    overall: OverallProgress,
) -> List[str]:
    growth_areas: List[str] = []
    for record in records:
        if record.accuracy >= WEAK_CATEGORY_ACCURACY:
            continue
        category = categories.get(record.fact_category_id)
        if category is not None:
            growth_areas.append(category.label)

    if records:
        for dimension in FLUENCY_DIMENSIONS:
            if getattr(overall, dimension) < WEAK_DIMENSION_SCORE:
                growth_areas.append(GROWTH_LABELS[dimension])

    return growth_areas[:MAX_GROWTH_AREAS]


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------

def _urgent_recommendation(record: ProgressRecord, category: FactCategory) -> Recommendation:
    return Recommendation(
        id=f"urgent-{record.fact_category_id}",
        title=f"Focus on {category.name}",
        description=(
            "This foundational area needs immediate attention. "
            f"Current accuracy: {record.accuracy}%"
        ),
        priority="high",
        category=category.grouping,
        target_facts=list(category.examples),
        suggested_activities=intensive_activities(category),
        estimated_time=30,
        prerequisites=[],
        next_steps=[f"Achieve 75% accuracy in {category.name}"],
    )


def _advancement_recommendation(record: ProgressRecord, category: FactCategory) -> Recommendation:
    return Recommendation(
        id=f"advance-{record.fact_category_id}",
        title=f"Build fluency in {category.name}",
        description=(
            "You're making good progress! Let's build speed and flexibility. "
            f"Current accuracy: {record.accuracy}%"
        ),
        priority="medium",
        category=category.grouping,
        target_facts=list(category.examples),
        suggested_activities=building_activities(category),
        estimated_time=20,
        prerequisites=[f"70% accuracy in {category.name}"],
        next_steps=[f"Achieve 90% accuracy and improve efficiency in {category.name}"],
    )


def _self_assessment_recommendation() -> Recommendation:
    return Recommendation(
        id="comprehensive-assessment",
        title="Complete Self-Assessment",
        description="Reflect on your problem-solving strategies to identify your best approaches",
        priority="medium",
        category="assessment",
        target_facts=[],
        suggested_activities=self_assessment_activities(),
        estimated_time=15,
        prerequisites=[],
        next_steps=["Use assessment insights to focus practice"],
    )


def has_mixed_performance(records: Sequence[ProgressRecord]) -> bool:
    """True when some category is at 80%+ accuracy while another is below 70%."""

    return any(r.accuracy >= MIXED_HIGH_ACCURACY for r in records) and any(
        r.accuracy < WEAK_CATEGORY_ACCURACY for r in records
    )


def generate_recommendations(
    records: Sequence[ProgressRecord],
    categories: Mapping[str, FactCategory],
) -> List[Recommendation]:
    """Urgent first, then advancement, then the self-assessment; capped at four."""

    recommendations: List[Recommendation] = []

    urgent = _first((r for r in records if r.accuracy < URGENT_ACCURACY), MAX_URGENT)
    for record in urgent:
        category = categories.get(record.fact_category_id)
        if category is not None:
            recommendations.append(_urgent_recommendation(record, category))

    low, high = ADVANCEMENT_RANGE
    advancing = _first((r for r in records if low <= r.accuracy < high), MAX_ADVANCEMENT)
    for record in advancing:
        category = categories.get(record.fact_category_id)
        if category is not None:
            recommendations.append(_advancement_recommendation(record, category))

    if has_mixed_performance(records):
        recommendations.append(_self_assessment_recommendation())

    return recommendations[:MAX_RECOMMENDATIONS]


# ---------------------------------------------------------------------------
# Milestones
# ---------------------------------------------------------------------------

def generate_milestones(
    records: Sequence[ProgressRecord],
    categories: Mapping[str, FactCategory],
    now: datetime,
) -> List[Milestone]:
    milestones: List[Milestone] = []
    pending = _first((r for r in records if r.accuracy < MASTERY_ACCURACY), MAX_MILESTONES)
    for record in pending:
        category = categories.get(record.fact_category_id)
        if category is None:
            continue
        milestones.append(
            Milestone(
                id=f"milestone-{record.fact_category_id}",
                title=f"Master {category.name}",
                description=f"Achieve {MASTERY_ACCURACY}% accuracy in {category.name} facts",
                target_date=now + timedelta(weeks=milestone_weeks(record.accuracy)),
                category=category.name,
                required_accuracy=MASTERY_ACCURACY,
                # Always False here; only meaningful if re-evaluated against newer records.
                is_completed=record.accuracy >= MASTERY_ACCURACY,
            )
        )
    return milestones


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class LearningPathEngine:
    """Stateless learning path analyser.

    ``clock`` supplies "now" for ``generated_at`` and milestone target dates so
    callers (and tests) can freeze time. The engine keeps no state between
    calls and may be shared freely across threads.
    """

    def __init__(
        self,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        decision_log: Optional[bool] = None,
    ) -> None:
        self._clock = clock or _utcnow
        if decision_log is None:
            decision_log = get_env_bool("LEARNING_PATH_DECISION_LOG", True)
        self.decision_log = decision_log

    # ------------------------------------------------------------------
    def analyze(
        self,
        student_id: str,
        progress_records: Iterable[ProgressRecord],
        categories: Iterable[FactCategory],
        *,
        now: Optional[datetime] = None,
    ) -> LearningPath:
        records = list(progress_records)
        catalog = _index_categories(categories)
        moment = now or self._clock()

        orphaned = [r.fact_category_id for r in records if r.fact_category_id not in catalog]
        if orphaned:
            _LOGGER.debug(
                "Skipping category-specific output for unknown categories %s (student %s)",
                orphaned,
                student_id,
            )

        overall = calculate_overall_progress(records)
        path = LearningPath(
            student_id=student_id,
            current_phase=determine_current_phase(records),
            overall_progress=overall,
            strengths=identify_strengths(records, catalog, overall),
            growth_areas=identify_growth_areas(records, catalog, overall),
            recommendations=generate_recommendations(records, catalog),
            next_milestones=generate_milestones(records, catalog, moment),
            generated_at=moment,
        )

        if self.decision_log:
            _log_json(
                "learning_path_generated",
                {
                    "student_id": student_id,
                    "record_count": len(records),
                    "current_phase": path.current_phase,
                    "overall_progress": overall.model_dump(),
                    "strengths": len(path.strengths),
                    "growth_areas": len(path.growth_areas),
                    "recommendations": [rec.id for rec in path.recommendations],
                    "milestones": len(path.next_milestones),
                    "orphaned_categories": orphaned,
                },
            )
        return path


def analyze_learning_path(
    student_id: str,
    progress_records: Iterable[ProgressRecord],
    categories: Iterable[FactCategory],
    *,
    now: Optional[datetime] = None,
) -> LearningPath:
    """Convenience wrapper around a default :class:`LearningPathEngine`."""

    return LearningPathEngine().analyze(student_id, progress_records, categories, now=now)


def build_learning_path(
    student_id: str,
    *,
    categories: Optional[Iterable[FactCategory]] = None,
    engine: Optional[LearningPathEngine] = None,
    now: Optional[datetime] = None,
) -> LearningPath:
    """Read ``student_id``'s stored progress and derive a fresh learning path."""

    if not student_id or not str(student_id).strip():
        raise ValueError("student_id is required")
    records = db.get_student_progress(student_id)
    catalog = FACT_CATEGORIES.categories if categories is None else categories
    return (engine or LearningPathEngine()).analyze(student_id, records, catalog, now=now)


__all__ = [
    "LearningPathEngine",
    "analyze_learning_path",
    "build_learning_path",
    "calculate_overall_progress",
    "determine_current_phase",
    "generate_milestones",
    "generate_recommendations",
    "has_mixed_performance",
    "identify_growth_areas",
    "identify_strengths",
    "milestone_weeks",
]
