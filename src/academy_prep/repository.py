"""Record storage for the app shell.

Converts between SQLite rows and the pydantic records the scoring engine
consumes. Records are validated as pydantic models before they are written,
so every row read back is a valid snapshot.

Scores are never written here as a side effect of reading; the server saves
derived values explicitly with :func:`save_setting` after computing them.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from sqlalchemy import delete, select

from .core.models import Course, Exercise, Gender, Goal, Grade
from .db import session_scope
from .sqlmodels import AppSetting, CourseRow, ExerciseRow, GoalRow, GradeRow

logger = logging.getLogger(__name__)

GENDER_SETTING = "gender"
APPLICATION_PROGRESS_SETTING = "application_progress"


class RecordNotFoundError(LookupError):
    """Raised when an update or delete names a record that doesn't exist."""


@dataclass
class Snapshot:
    """Everything the scoring engine needs, loaded in one pass."""

    courses: list[Course] = field(default_factory=list)
    grades: list[Grade] = field(default_factory=list)
    exercises: list[Exercise] = field(default_factory=list)
    goals: list[Goal] = field(default_factory=list)
    gender: Gender = Gender.MALE


# ─── Row conversion ──────────────────────────────────────────────────────────


def _course_from_row(r: CourseRow) -> Course:
    return Course(
        id=r.id,
        code=r.code,
        name=r.name,
        instructor=r.instructor,
        credits=r.credits,
        semester=r.semester,
        year=r.year,
        category=r.category,
        is_ap=r.is_ap,
        notes=r.notes,
    )


def _grade_from_row(r: GradeRow) -> Grade:
    return Grade(
        id=r.id,
        course_id=r.course_id,
        title=r.title,
        type=r.type,
        score=r.score,
        max_score=r.max_score,
        weight=r.weight,
        date=r.date,
        notes=r.notes,
    )


def _exercise_from_row(r: ExerciseRow) -> Exercise:
    return Exercise(
        id=r.id,
        exercise_type=r.exercise_type,
        value=r.value,
        target_value=r.target_value,
        unit=r.unit,
        date=r.date,
    )


def _goal_from_row(r: GoalRow) -> Goal:
    return Goal(
        id=r.id,
        title=r.title,
        description=r.description,
        category=r.category,
        priority=r.priority,
        progress=r.progress,
        completed=r.completed,
        target_date=r.target_date,
    )


# ─── Courses & grades ────────────────────────────────────────────────────────


async def add_course(course: Course) -> Course:
    """Insert a course. An empty ``id`` gets a generated one."""
    async with session_scope() as session:
        row = CourseRow(**course.model_dump(exclude={"id"} if not course.id else set()))
        session.add(row)
        await session.flush()
        logger.info("Added course %s (%s)", row.id, row.name)
        return _course_from_row(row)


async def add_grade(grade: Grade) -> Grade:
    """Insert a grade for an existing course."""
    async with session_scope() as session:
        if await session.get(CourseRow, grade.course_id) is None:
            raise RecordNotFoundError(f"Course {grade.course_id} does not exist")

        data = grade.model_dump(exclude={"id"} if not grade.id else set())
        data["type"] = grade.type.value
        row = GradeRow(**data)
        session.add(row)
        await session.flush()
        logger.info("Added grade %s to course %s", row.id, row.course_id)
        return _grade_from_row(row)


async def list_courses() -> list[Course]:
    async with session_scope() as session:
        result = await session.execute(select(CourseRow).order_by(CourseRow.year, CourseRow.code, CourseRow.name))
        return [_course_from_row(r) for r in result.scalars().all()]


async def list_grades(course_id: Optional[str] = None) -> list[Grade]:
    async with session_scope() as session:
        query = select(GradeRow).order_by(GradeRow.date.asc())
        if course_id:
            query = query.where(GradeRow.course_id == course_id)
        result = await session.execute(query)
        return [_grade_from_row(r) for r in result.scalars().all()]


# ─── Exercises ───────────────────────────────────────────────────────────────


async def add_exercise(exercise: Exercise) -> Exercise:
    async with session_scope() as session:
        row = ExerciseRow(**exercise.model_dump(exclude={"id"} if not exercise.id else set()))
        session.add(row)
        await session.flush()
        logger.info("Recorded %s = %s %s", row.exercise_type, row.value, row.unit)
        return _exercise_from_row(row)


async def list_exercises() -> list[Exercise]:
    async with session_scope() as session:
        result = await session.execute(select(ExerciseRow).order_by(ExerciseRow.date.asc(), ExerciseRow.created_at.asc()))
        return [_exercise_from_row(r) for r in result.scalars().all()]


# ─── Goals ───────────────────────────────────────────────────────────────────


async def add_goal(goal: Goal) -> Goal:
    async with session_scope() as session:
        data = goal.model_dump(exclude={"id"} if not goal.id else set())
        data["category"] = goal.category.value
        data["priority"] = goal.priority.value
        row = GoalRow(**data)
        session.add(row)
        await session.flush()
        logger.info("Added goal %s (%s)", row.id, row.title)
        return _goal_from_row(row)


async def update_goal(goal_id: str, progress: Optional[float] = None, completed: Optional[bool] = None) -> Goal:
    """Update a goal's progress and/or completion flag.

    The merged goal is re-validated before it is written.
    """
    async with session_scope() as session:
        row = await session.get(GoalRow, goal_id)
        if row is None:
            raise RecordNotFoundError(f"Goal {goal_id} does not exist")

        updated = _goal_from_row(row).model_copy(update={
            k: v for k, v in {"progress": progress, "completed": completed}.items() if v is not None
        })
        Goal.model_validate(updated.model_dump())

        row.progress = updated.progress
        row.completed = updated.completed
        await session.flush()
        return _goal_from_row(row)


async def list_goals(category: Optional[str] = None) -> list[Goal]:
    async with session_scope() as session:
        query = select(GoalRow).order_by(GoalRow.target_date.asc(), GoalRow.created_at.asc())
        if category:
            query = query.where(GoalRow.category == category)
        result = await session.execute(query)
        return [_goal_from_row(r) for r in result.scalars().all()]


# ─── Deletes ─────────────────────────────────────────────────────────────────

_ROW_TYPES = {
    "course": CourseRow,
    "grade": GradeRow,
    "exercise": ExerciseRow,
    "goal": GoalRow,
}


async def delete_record(kind: str, record_id: str) -> None:
    """Delete one record. Deleting a course also deletes its grades."""
    model = _ROW_TYPES.get(kind)
    if model is None:
        raise ValueError(f"Unknown record kind '{kind}'. Expected one of: {', '.join(_ROW_TYPES)}")

    async with session_scope() as session:
        if kind == "course":
            await session.execute(delete(GradeRow).where(GradeRow.course_id == record_id))
        result = await session.execute(delete(model).where(model.id == record_id))
        if result.rowcount == 0:
            raise RecordNotFoundError(f"{kind.capitalize()} {record_id} does not exist")
        await session.flush()
    logger.info("Deleted %s %s", kind, record_id)


# ─── Settings ────────────────────────────────────────────────────────────────


async def get_setting(key: str) -> Optional[str]:
    async with session_scope() as session:
        result = await session.execute(select(AppSetting).where(AppSetting.key == key))
        row = result.scalar_one_or_none()
        return row.value if row else None


async def save_setting(key: str, value: str) -> None:
    """Insert or overwrite a setting."""
    async with session_scope() as session:
        result = await session.execute(select(AppSetting).where(AppSetting.key == key))
        row = result.scalar_one_or_none()
        if row:
            row.value = value
            row.updated_at = datetime.utcnow()
        else:
            session.add(AppSetting(key=key, value=value, updated_at=datetime.utcnow()))
        await session.flush()


async def get_gender(default: Gender = Gender.MALE) -> Gender:
    value = await get_setting(GENDER_SETTING)
    if value is None:
        return default
    try:
        return Gender(value)
    except ValueError:
        logger.warning("Ignoring invalid stored gender setting %r", value)
        return default


async def save_application_progress(progress: dict, as_of: Optional[date] = None) -> None:
    """Store the latest computed application progress for the dashboard."""
    payload = {"as_of": (as_of or date.today()).isoformat(), **progress}
    await save_setting(APPLICATION_PROGRESS_SETTING, json.dumps(payload))


async def load_snapshot(default_gender: Gender = Gender.MALE) -> Snapshot:
    """Load every record plus the selected gender."""
    return Snapshot(
        courses=await list_courses(),
        grades=await list_grades(),
        exercises=await list_exercises(),
        goals=await list_goals(),
        gender=await get_gender(default_gender),
    )
