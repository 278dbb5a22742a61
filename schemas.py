"""Pydantic schemas for fact categories, student progress and learning paths."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Tuple

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

__all__ = [
    "Phase",
    "Operation",
    "Grouping",
    "FactCategory",
    "Game",
    "Student",
    "ProgressUpdate",
    "ProgressRecord",
    "OverallProgress",
    "Activity",
    "Recommendation",
    "Milestone",
    "LearningPath",
]

Phase = Literal["counting", "deriving", "mastery"]
Operation = Literal["addition", "subtraction", "multiplication", "division"]
Grouping = Literal["foundational", "derived"]
GameCategory = Literal["foundational", "derived", "advanced"]
Difficulty = Literal["beginner", "intermediate", "advanced"]


class _WireModel(BaseModel):
    """Base model exposing camelCase aliases while accepting snake_case names."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class FactCategory(_WireModel):
    """Catalog entry grouping arithmetic facts that share a strategy focus."""

    id: str = Field(min_length=1)
    operation: Operation
    grouping: Grouping = Field(
        description="Foundational facts are learned directly; derived facts are reasoned from them.",
    )
    name: str = Field(min_length=1)
    description: str = ""
    examples: Tuple[str, ...] = ()
    phase: Phase = "counting"

    model_config = {"frozen": True}

    @property
    def label(self) -> str:
        return f"{self.name} ({self.operation})"


class Game(_WireModel):
    """Catalog entry for a practice game that activities can point at."""

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str = ""
    operation: Literal["addition", "subtraction", "multiplication", "division", "mixed"]
    category: GameCategory
    target_facts: Tuple[str, ...] = ()
    emoji: str = ""
    difficulty: Difficulty = "beginner"

    model_config = {"frozen": True}


class Student(_WireModel):
    id: str
    name: str
    grade: int = Field(ge=0, le=12)
    section: str = ""
    initials: str = ""
    created_at: datetime | None = None


class ProgressUpdate(_WireModel):
    """Write shape for one student's progress in one fact category."""

    student_id: str = Field(min_length=1)
    fact_category_id: str = Field(min_length=1)
    phase: Phase = "counting"
    accuracy: int = Field(default=0, ge=0, le=100)
    efficiency: int = Field(default=0, ge=0, le=100)
    flexibility: int = Field(default=0, ge=0, le=100)
    strategy_use: int = Field(default=0, ge=0, le=100)


class ProgressRecord(ProgressUpdate):
    """Stored progress; at most one exists per ``(student_id, fact_category_id)``."""

    id: str | None = None
    last_practiced: datetime | None = None
    updated_at: datetime | None = None


class OverallProgress(_WireModel):
    accuracy: int = 0
    efficiency: int = 0
    flexibility: int = 0
    strategy_use: int = 0


class Activity(_WireModel):
    type: Literal["game", "practice", "assessment", "strategy-instruction"]
    name: str
    description: str
    game_id: str | None = None
    duration: int = Field(ge=0, description="Duration in minutes.")


class Recommendation(_WireModel):
    id: str
    title: str
    description: str
    priority: Literal["high", "medium", "low"]
    category: Literal["foundational", "derived", "assessment", "review"]
    target_facts: List[str] = Field(default_factory=list)
    suggested_activities: List[Activity] = Field(default_factory=list)
    estimated_time: int = Field(ge=0, description="Estimated time in minutes.")
    prerequisites: List[str] = Field(default_factory=list)
    next_steps: List[str] = Field(default_factory=list)


class Milestone(_WireModel):
    id: str
    title: str
    description: str
    target_date: datetime
    category: str
    required_accuracy: int = 90
    is_completed: bool = Field(
        default=False,
        description=(
            "Evaluated once at generation time against the record that produced the "
            "milestone; milestones are only generated below the required accuracy."
        ),
    )


class LearningPath(_WireModel):
    """Derived, never persisted; recomputed from current progress on demand."""

    student_id: str
    current_phase: Phase = "counting"
    overall_progress: OverallProgress = Field(default_factory=OverallProgress)
    strengths: List[str] = Field(default_factory=list)
    growth_areas: List[str] = Field(default_factory=list)
    recommendations: List[Recommendation] = Field(default_factory=list)
    next_milestones: List[Milestone] = Field(default_factory=list)
    generated_at: datetime

    def to_payload(self) -> Dict[str, Any]:
        """Return the JSON-ready camelCase representation."""

        return self.model_dump(mode="json", by_alias=True)
