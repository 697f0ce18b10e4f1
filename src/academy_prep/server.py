"""Academy Prep MCP App Server.

FastMCP server with 15 tools and MCP Apps interactive UI.
Run: academy-prep-mcp
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from datetime import date
from typing import AsyncIterator, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import ValidationError

from . import get_app_html, repository
from .core.analysis import (
    comparative_metrics,
    default_future_assignments,
    gpa_impact,
    grade_distribution,
    grade_trends,
    predict_course_grade,
    required_score,
)
from .core.fitness import cfa_score, cfa_scores, latest_exercises, standards_table
from .core.grading import calculate_gpa, course_contribution, course_grade, grades_for_course
from .core.models import Course, Exercise, Gender, Goal, Grade
from .core.scoring import application_progress, goal_summary
from .core.standards import standards_for
from .db import close_db, init_db

logger = logging.getLogger(__name__)

MCP_APP_MIME = "text/html;profile=mcp-app"

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=False)
WRITE = ToolAnnotations(readOnlyHint=False, destructiveHint=False, idempotentHint=False, openWorldHint=False)
DESTRUCTIVE = ToolAnnotations(readOnlyHint=False, destructiveHint=True, idempotentHint=True, openWorldHint=False)


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Initialize the database on start, dispose it on shutdown."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    await init_db()
    try:
        yield
    finally:
        await close_db()


mcp = FastMCP(
    "Academy Prep",
    instructions="Track a service-academy application: course grades and GPA, Candidate Fitness Assessment results, and application goals. Record data with the prep_add_* tools; every score is recomputed from the stored records.",
    lifespan=lifespan,
)


def _default_gender() -> Gender:
    value = os.environ.get("ACADEMY_PREP_GENDER", Gender.MALE.value).lower()
    try:
        return Gender(value)
    except ValueError:
        logger.warning("ACADEMY_PREP_GENDER=%r is not 'male' or 'female'; using male standards", value)
        return Gender.MALE


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "record"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def _build(model, **fields):
    """Construct a record, turning pydantic errors into a readable ValueError."""
    try:
        return model(**fields)
    except ValidationError as exc:
        raise ValueError(f"Invalid {model.__name__.lower()}: {_validation_message(exc)}") from exc


def _parse_date(value: str) -> date:
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValueError(f"Dates must be YYYY-MM-DD, got '{value}'") from exc


def _overview(snapshot: repository.Snapshot) -> dict:
    has_gpa = any(course_contribution(c, snapshot.grades) is not None for c in snapshot.courses)
    gpa = calculate_gpa(snapshot.courses, snapshot.grades)
    progress = application_progress(
        snapshot.goals,
        snapshot.exercises,
        snapshot.gender,
        gpa if has_gpa else None,
    )
    return {
        "gpa": gpa,
        "cfa_score": cfa_score(snapshot.exercises, snapshot.gender),
        "application_progress": progress,
    }


# ─── MCP Apps UI Resource ─────────────────────────────────────────────────────

APP_RESOURCE_URI = "ui://academy-prep/app"


@mcp.resource(
    APP_RESOURCE_URI,
    mime_type=MCP_APP_MIME,
)
def app_ui() -> str:
    """Academy Prep: GPA, CFA fitness, goals and application progress."""
    return get_app_html()


# ─── Write tools ─────────────────────────────────────────────────────────────


@mcp.tool(annotations=WRITE)
async def prep_add_course(
    name: str,
    code: str = "",
    credits: float = 3.0,
    is_ap: bool = False,
    category: str = "",
    semester: str = "",
    year: Optional[int] = None,
    instructor: str = "",
) -> dict:
    """Add a course.

    Args:
        name: Course name, e.g. 'AP Chemistry'.
        code: Short code, e.g. 'CHEM301'.
        credits: Credit count used to weight GPA. Default 3.
        is_ap: Whether the course earns the AP grade-point bonus.
        category: Subject area, e.g. 'Science'.
        semester: e.g. 'Fall'.
        year: Academic year.
        instructor: Teacher's name.
    """
    course = _build(
        Course, id="", name=name, code=code, credits=credits, is_ap=is_ap,
        category=category, semester=semester, year=year, instructor=instructor,
    )
    saved = await repository.add_course(course)
    return {"course": saved.model_dump(mode="json"), "summary": f"Added {saved.name}."}


@mcp.tool(annotations=WRITE)
async def prep_add_grade(
    course_id: str,
    score: float,
    max_score: float = 100.0,
    weight: float = 1.0,
    title: str = "",
    grade_type: str = "other",
    date: str = "",
) -> dict:
    """Record a graded item for a course.

    Args:
        course_id: ID returned by prep_add_course or listed by prep_courses.
        score: Points earned; must be between 0 and max_score.
        max_score: Points possible; must be positive. Default 100.
        weight: Relative weight within the course. Default 1.
        title: e.g. 'Unit 3 Test'.
        grade_type: exam, quiz, homework, project, paper, participation or other.
        date: YYYY-MM-DD. Defaults to today.
    """
    grade = _build(
        Grade, course_id=course_id, score=score, max_score=max_score, weight=weight,
        title=title, type=grade_type, date=_parse_date(date),
    )
    try:
        saved = await repository.add_grade(grade)
    except repository.RecordNotFoundError as exc:
        raise ValueError(str(exc)) from exc

    return {
        "grade": saved.model_dump(mode="json"),
        "percentage": round(saved.percentage, 2),
        "summary": f"Recorded {saved.score:g}/{saved.max_score:g} ({saved.percentage:.1f}%).",
    }


@mcp.tool(annotations=WRITE)
async def prep_add_exercise(
    exercise_type: str,
    value: float,
    unit: str = "",
    target_value: float = 0.0,
    date: str = "",
) -> dict:
    """Record a fitness result.

    Args:
        exercise_type: One of 'Basketball Throw', 'Pull-ups', 'Shuttle Run', 'Crunches',
                       'Push-ups', '1-Mile Run', or any custom label (custom labels are
                       stored but not scored).
        value: Result, in the event's unit (feet, reps, seconds or minutes).
        unit: Unit label. Defaults to the standard's unit for CFA events.
        target_value: Personal target.
        date: YYYY-MM-DD. Defaults to today.
    """
    gender = await repository.get_gender(_default_gender())
    standards = standards_for(gender)
    if not unit:
        unit = standards[exercise_type].unit if exercise_type in standards else "reps"

    exercise = _build(
        Exercise, exercise_type=exercise_type, value=value, unit=unit,
        target_value=target_value, date=_parse_date(date),
    )
    saved = await repository.add_exercise(exercise)
    return {"exercise": saved.model_dump(mode="json"), "summary": f"Recorded {saved.exercise_type}: {saved.value:g} {saved.unit}."}


@mcp.tool(annotations=WRITE)
async def prep_add_goal(
    title: str,
    category: str = "Other",
    description: str = "",
    priority: str = "medium",
    progress: float = 0.0,
    target_date: str = "",
) -> dict:
    """Add a goal.

    Application goals feed overall application progress by title keyword:
    nomination/congress, leadership/extracurricular, medical/physical, or other.

    Args:
        title: e.g. 'Secure congressional nomination'.
        category: Academic, Fitness, Application or Other.
        description: Free text.
        priority: low, medium or high.
        progress: 0-100.
        target_date: Deadline, YYYY-MM-DD. Optional.
    """
    goal = _build(
        Goal, title=title, category=category, description=description, priority=priority,
        progress=progress, target_date=_parse_date(target_date) if target_date else None,
    )
    saved = await repository.add_goal(goal)
    return {"goal": saved.model_dump(mode="json"), "summary": f"Added goal '{saved.title}'."}


@mcp.tool(annotations=WRITE)
async def prep_update_goal(goal_id: str, progress: Optional[float] = None, completed: Optional[bool] = None) -> dict:
    """Update a goal's progress or completion.

    Args:
        goal_id: ID listed by prep_goals.
        progress: New progress, 0-100.
        completed: Mark complete (True) or reopen (False).
    """
    try:
        saved = await repository.update_goal(goal_id, progress=progress, completed=completed)
    except repository.RecordNotFoundError as exc:
        raise ValueError(str(exc)) from exc
    except ValidationError as exc:
        raise ValueError(f"Invalid goal: {_validation_message(exc)}") from exc
    return {"goal": saved.model_dump(mode="json"), "summary": f"'{saved.title}' is at {saved.effective_progress:.0f}%."}


@mcp.tool(annotations=DESTRUCTIVE)
async def prep_delete_record(kind: str, record_id: str) -> dict:
    """Delete a record. Deleting a course also deletes its grades.

    Args:
        kind: course, grade, exercise or goal.
        record_id: The record's ID.
    """
    try:
        await repository.delete_record(kind, record_id)
    except repository.RecordNotFoundError as exc:
        raise ValueError(str(exc)) from exc
    return {"deleted": {"kind": kind, "id": record_id}, "summary": f"Deleted {kind} {record_id}."}


@mcp.tool(annotations=WRITE)
async def prep_set_gender(gender: str) -> dict:
    """Choose which CFA standards table scores fitness results.

    Args:
        gender: 'male' or 'female'.
    """
    try:
        selected = Gender(gender.lower())
    except ValueError as exc:
        raise ValueError("gender must be 'male' or 'female'") from exc
    await repository.save_setting(repository.GENDER_SETTING, selected.value)
    return {"gender": selected.value, "summary": f"Using {selected.value} CFA standards."}


# ─── Read tools ──────────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def prep_courses() -> dict:
    """All courses with their current weighted average and letter grade."""
    courses = await repository.list_courses()
    grades = await repository.list_grades()

    rows = []
    for course in courses:
        standing = course_grade(course.id, grades)
        rows.append({
            **course.model_dump(mode="json"),
            "percentage": round(standing.percentage, 2),
            "letter_grade": standing.letter_grade.value if standing.letter_grade else None,
            "grade_count": standing.grade_count,
        })

    graded = [r for r in rows if r["grade_count"]]
    return {
        "title": "Courses",
        "courses": rows,
        "count": len(rows),
        "summary": f"{len(rows)} course(s), {len(graded)} with grades." if rows else "No courses yet. Add one with prep_add_course.",
    }


@mcp.tool(annotations=READ_ONLY)
async def prep_gpa() -> dict:
    """Credit-weighted GPA (4.0 scale, AP +1.0 capped at 4.0) and each course's contribution."""
    courses = await repository.list_courses()
    grades = await repository.list_grades()

    breakdown = []
    for course in courses:
        contribution = course_contribution(course, grades)
        if contribution is None:
            continue
        points, credits = contribution
        standing = course_grade(course.id, grades)
        breakdown.append({
            "course_id": course.id,
            "name": course.name,
            "is_ap": course.is_ap,
            "credits": credits,
            "percentage": round(standing.percentage, 2),
            "letter_grade": standing.letter_grade.value if standing.letter_grade else None,
            "grade_points": round(points / credits, 2),
        })

    gpa = calculate_gpa(courses, grades)
    return {
        "title": "GPA",
        "gpa": gpa,
        "courses": breakdown,
        "total_credits": sum(row["credits"] for row in breakdown),
        "summary": f"GPA {gpa:.2f} across {len(breakdown)} graded course(s)." if breakdown else "No graded courses yet.",
    }


@mcp.tool(annotations=READ_ONLY)
async def prep_fitness() -> dict:
    """CFA score, per-event progress, and the standards table with your status for each event."""
    exercises = await repository.list_exercises()
    gender = await repository.get_gender(_default_gender())

    scores = cfa_scores(exercises, gender)
    latest = latest_exercises(exercises)
    custom = [e.model_dump(mode="json") for name, e in latest.items() if name not in scores]
    total = cfa_score(exercises, gender)

    return {
        "title": "Candidate Fitness Assessment",
        "gender": gender.value,
        "cfa_score": total,
        "events": [p.model_dump(mode="json") for p in scores.values()],
        "standards": [row.model_dump(mode="json") for row in standards_table(exercises, gender)],
        "custom_exercises": custom,
        "summary": f"CFA score {total}/100 from {len(scores)} of 6 events." if scores else "No CFA events recorded yet.",
    }


@mcp.tool(annotations=READ_ONLY)
async def prep_goals(category: str = "") -> dict:
    """Goals with completion summary.

    Args:
        category: Filter to Academic, Fitness, Application or Other. Empty for all.
    """
    goals = await repository.list_goals(category or None)
    summary = goal_summary(goals)
    return {
        "title": "Goals",
        "goals": [g.model_dump(mode="json") for g in goals],
        "stats": summary.model_dump(mode="json"),
        "summary": f"{summary.completed}/{summary.total} goals complete, {summary.overdue} overdue." if goals else "No goals yet.",
    }


@mcp.tool(annotations=WRITE)
async def prep_application_progress() -> dict:
    """Overall application readiness from GPA, CFA score and application goals.

    The result is saved so the dashboard can show the last computed value.
    """
    snapshot = await repository.load_snapshot(_default_gender())
    overview = _overview(snapshot)
    progress = overview["application_progress"]

    payload = progress.model_dump(mode="json")
    await repository.save_application_progress(payload)

    missing = [c.name for c in progress.components.values() if not c.available]
    return {
        "title": "Application Progress",
        **payload,
        "gpa": overview["gpa"],
        "cfa_score": overview["cfa_score"],
        "summary": f"Application {progress.overall}% complete."
        + (f" No data yet for: {', '.join(missing)}." if missing else ""),
    }


@mcp.tool(annotations=READ_ONLY)
async def prep_grade_analysis() -> dict:
    """Grade distribution, monthly course trends, and cross-course comparison."""
    courses = await repository.list_courses()
    grades = await repository.list_grades()
    metrics = comparative_metrics(courses, grades)

    return {
        "title": "Grade Analysis",
        "distribution": grade_distribution(grades),
        "trends": grade_trends(grades, courses),
        "comparative_metrics": metrics.model_dump(mode="json"),
        "summary": (
            f"Strongest course: {metrics.highest_average.course_name} ({metrics.highest_average.value:.1f}%)."
            if metrics.highest_average and grades else "No grades to analyze yet."
        ),
    }


@mcp.tool(annotations=READ_ONLY)
async def prep_grade_prediction(course_id: str, target_percentage: Optional[float] = None) -> dict:
    """Project a course's final grade from typical remaining assignments.

    Args:
        course_id: Course to project.
        target_percentage: Optional goal; returns the final-exam score needed to reach it.
    """
    courses = await repository.list_courses()
    course = next((c for c in courses if c.id == course_id), None)
    if course is None:
        raise ValueError(f"Course {course_id} does not exist")

    grades = await repository.list_grades()
    course_grades = grades_for_course(course_id, grades)
    future = default_future_assignments(course_grades)
    prediction = predict_course_grade(course, course_grades, future)
    impact = gpa_impact(courses, grades, {course_id: prediction})

    result = {
        "title": f"Prediction: {course.name}",
        "prediction": prediction.model_dump(mode="json"),
        "gpa_impact": impact.model_dump(mode="json"),
        "summary": (
            f"Currently {prediction.current_average:.1f}% ({prediction.current_letter_grade.value}); "
            f"projected {prediction.predicted_average:.1f}% ({prediction.predicted_letter_grade.value})."
        ),
    }

    if target_percentage is not None:
        needed = required_score(target_percentage, course_grades, future, future[0].id)
        result["required_final_exam_score"] = round(needed, 1) if needed is not None else None
        if needed is not None:
            result["summary"] += f" Need {needed:.1f}/{future[0].max_score:g} on the final for {target_percentage:g}%."

    return result


@mcp.tool(annotations=READ_ONLY, meta={"ui": {"resourceUri": APP_RESOURCE_URI}})
async def open_prep_app() -> dict:
    """Open the Academy Prep app: GPA, CFA score, goals and application progress."""
    snapshot = await repository.load_snapshot(_default_gender())
    overview = _overview(snapshot)
    progress = overview["application_progress"]

    return {
        "title": "Application Overview",
        "gpa": overview["gpa"],
        "cfa_score": overview["cfa_score"],
        "application_progress": progress.model_dump(mode="json"),
        "goals": goal_summary(snapshot.goals).model_dump(mode="json"),
        "last_saved_progress": await repository.get_setting(repository.APPLICATION_PROGRESS_SETTING),
        "summary": f"GPA {overview['gpa']:.2f} | CFA {overview['cfa_score']}/100 | Application {progress.overall}%",
    }


def main():
    """Entry point for the CLI command."""
    mcp.run()


if __name__ == "__main__":
    main()
