"""Pydantic data models shared by the scoring engine, storage and tools.

Records (courses, grades, exercises, goals) are plain snapshots handed to the
scoring engine by the persistence layer. Result models are what the engine
returns and what the server serializes for tools.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class Gender(str, Enum):
    """Selector for the gender-keyed CFA standards."""

    MALE = "male"
    FEMALE = "female"


class LetterGrade(str, Enum):
    """Letter grades, highest first."""

    A_PLUS = "A+"
    A = "A"
    A_MINUS = "A-"
    B_PLUS = "B+"
    B = "B"
    B_MINUS = "B-"
    C_PLUS = "C+"
    C = "C"
    C_MINUS = "C-"
    D_PLUS = "D+"
    D = "D"
    D_MINUS = "D-"
    F = "F"


class GradeType(str, Enum):
    EXAM = "exam"
    QUIZ = "quiz"
    HOMEWORK = "homework"
    PROJECT = "project"
    PAPER = "paper"
    PARTICIPATION = "participation"
    OTHER = "other"


class GoalCategory(str, Enum):
    ACADEMIC = "Academic"
    FITNESS = "Fitness"
    APPLICATION = "Application"
    OTHER = "Other"


class GoalPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ExerciseType(str, Enum):
    """The six Candidate Fitness Assessment events."""

    BASKETBALL_THROW = "Basketball Throw"
    PULL_UPS = "Pull-ups"
    SHUTTLE_RUN = "Shuttle Run"
    CRUNCHES = "Crunches"
    PUSH_UPS = "Push-ups"
    MILE_RUN = "1-Mile Run"


class StatusBand(str, Enum):
    """Standards-table status, best first."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    NEEDS_WORK = "Needs Work"
    BELOW_MINIMUM = "Below Minimum"
    NOT_STARTED = "Not Started"


# ─── Records ─────────────────────────────────────────────────────────────────


class Course(BaseModel):
    """A course on the student's schedule."""

    id: str
    code: str = ""
    name: str = ""
    instructor: str = ""
    credits: float = 3.0
    semester: str = ""
    year: Optional[int] = None
    category: str = ""
    is_ap: bool = False
    notes: str = ""


class Grade(BaseModel):
    """A single graded item belonging to one course."""

    id: str = ""
    course_id: str
    title: str = ""
    type: GradeType = GradeType.OTHER
    score: float = Field(ge=0.0)
    max_score: float = Field(gt=0.0)
    weight: float = Field(1.0, ge=0.0)
    date: date
    notes: str = ""

    @model_validator(mode="after")
    def _score_within_max(self) -> Grade:
        if self.score > self.max_score:
            raise ValueError(f"score {self.score} exceeds max_score {self.max_score}")
        return self

    @property
    def percentage(self) -> float:
        return (self.score / self.max_score) * 100


class Exercise(BaseModel):
    """A measured fitness result. ``exercise_type`` may be a custom label."""

    id: str = ""
    exercise_type: str
    value: float
    target_value: float = 0.0
    unit: str = "reps"
    date: date


class Goal(BaseModel):
    id: str = ""
    title: str
    description: str = ""
    category: GoalCategory = GoalCategory.OTHER
    priority: GoalPriority = GoalPriority.MEDIUM
    progress: float = Field(0.0, ge=0.0, le=100.0)
    completed: bool = False
    target_date: Optional[date] = None

    @property
    def effective_progress(self) -> float:
        return 100.0 if self.completed else self.progress


class CFAStandard(BaseModel, frozen=True):
    """Scoring bounds for one CFA event.

    ``min`` is always the numerically lower bound. For reversed events (times,
    where lower is better) that makes ``min`` the competitive mark and ``max``
    the passing mark.
    """

    min: float
    max: float
    unit: str
    is_reversed: bool = False

    @property
    def passing(self) -> float:
        return self.max if self.is_reversed else self.min

    @property
    def competitive(self) -> float:
        return self.min if self.is_reversed else self.max

    @property
    def average(self) -> float:
        return (self.min + self.max) / 2


# ─── Results ─────────────────────────────────────────────────────────────────


class CourseGrade(BaseModel):
    """Current standing in one course."""

    course_id: str
    percentage: float
    letter_grade: Optional[LetterGrade] = Field(None, description="None when the course has no grades")
    grade_count: int = 0


class ExerciseProgress(BaseModel):
    exercise_type: str
    percentage: float = Field(ge=0.0, le=100.0, description="Progress-bar fraction times 100")
    score: int = Field(ge=0, le=100)


class ExerciseStatus(BaseModel):
    exercise_type: str
    status: StatusBand
    value: Optional[float] = None
    passing: Optional[float] = None
    average: Optional[float] = None
    competitive: Optional[float] = None
    unit: Optional[str] = None


class ApplicationComponent(BaseModel):
    key: str
    name: str
    weight: float
    progress: float = Field(0.0, ge=0.0, le=100.0)
    available: bool = Field(False, description="False when no data backs this component")


class ApplicationProgress(BaseModel):
    """Overall application readiness from independently scored components."""

    overall: int = Field(ge=0, le=100)
    components: dict[str, ApplicationComponent]


class GoalSummary(BaseModel):
    total: int
    completed: int
    completion_rate: float = Field(description="Completed goals as a percentage of all goals")
    average_progress: float
    overdue: int
    by_category: dict[str, int] = Field(default_factory=dict)


class FutureAssignment(BaseModel):
    """A not-yet-graded assignment with an assumed score."""

    id: str
    title: str
    type: GradeType = GradeType.OTHER
    weight: float = Field(ge=0.0)
    predicted_score: float = Field(ge=0.0)
    max_score: float = Field(100.0, gt=0.0)

    @property
    def percentage(self) -> float:
        return (self.predicted_score / self.max_score) * 100


class GradePrediction(BaseModel):
    course_id: str
    course_name: str
    course_code: str
    current_average: float
    current_letter_grade: LetterGrade
    predicted_average: float
    predicted_letter_grade: LetterGrade
    future_assignments: list[FutureAssignment] = Field(default_factory=list)


class GPAImpact(BaseModel):
    current_gpa: float
    predicted_gpa: float
    difference: float


class CourseMetric(BaseModel):
    course_id: str
    course_name: str
    value: float


class ComparativeMetrics(BaseModel):
    """Cross-course highlights for the grade comparison view."""

    highest_average: Optional[CourseMetric] = None
    lowest_average: Optional[CourseMetric] = None
    most_improved: Optional[CourseMetric] = None
    most_consistent: Optional[CourseMetric] = Field(None, description="Lowest standard deviation of percentages")
