"""Grade analysis and prediction.

Period grouping, letter distributions, per-course trends, cross-course
comparisons, and "what do I need on the final" predictions.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Mapping, Optional

from .grading import (
    course_average,
    grades_for_course,
    letter_grade_to_points,
    percentage_to_letter_grade,
    round_half_up,
)
from .models import (
    ComparativeMetrics,
    Course,
    CourseMetric,
    FutureAssignment,
    GPAImpact,
    Grade,
    GradePrediction,
    GradeType,
    LetterGrade,
)

logger = logging.getLogger(__name__)


def group_grades_by_period(grades: Iterable[Grade]) -> dict[str, list[Grade]]:
    """Bucket grades by ``YYYY-MM`` of their date."""
    grouped: dict[str, list[Grade]] = {}
    for grade in grades:
        grouped.setdefault(grade.date.strftime("%Y-%m"), []).append(grade)
    return grouped


def grade_distribution(grades: Iterable[Grade]) -> dict[str, int]:
    distribution = {letter.value: 0 for letter in LetterGrade}
    for grade in grades:
        distribution[percentage_to_letter_grade(grade.percentage).value] += 1
    return distribution


def grade_trends(grades: Iterable[Grade], courses: Iterable[Course]) -> list[dict]:
    """Per-period course averages, oldest period first.

    Each row is ``{"period": "YYYY-MM", <course_id>: average, ...}``.
    """
    courses = list(courses)
    grouped = group_grades_by_period(grades)
    trends = []
    for period in sorted(grouped):
        row: dict = {"period": period}
        for course in courses:
            row[course.id] = course_average(grades_for_course(course.id, grouped[period]))
        trends.append(row)
    return trends


def _std_dev(values: list[float]) -> float:
    if not values:
        return 0.0
    mean = math.fsum(values) / len(values)
    return math.sqrt(math.fsum((v - mean) ** 2 for v in values) / len(values))


def comparative_metrics(courses: Iterable[Course], grades: Iterable[Grade]) -> ComparativeMetrics:
    """Highest and lowest average, most improved, and most consistent course."""
    courses = list(courses)
    grades = list(grades)
    if not courses:
        return ComparativeMetrics()

    rows = []
    for course in courses:
        course_grades = grades_for_course(course.id, grades)
        ordered = sorted(course_grades, key=lambda g: g.date)
        improvement = ordered[-1].percentage - ordered[0].percentage if len(ordered) >= 2 else 0.0
        rows.append((
            course,
            course_average(course_grades),
            improvement,
            _std_dev([g.percentage for g in course_grades]),
        ))

    def metric(row, index: int) -> CourseMetric:
        return CourseMetric(course_id=row[0].id, course_name=row[0].name, value=row[index])

    by_average = sorted(rows, key=lambda r: r[1], reverse=True)
    return ComparativeMetrics(
        highest_average=metric(by_average[0], 1),
        lowest_average=metric(by_average[-1], 1),
        most_improved=metric(max(rows, key=lambda r: r[2]), 2),
        most_consistent=metric(min(rows, key=lambda r: r[3]), 3),
    )


# ─── Prediction ──────────────────────────────────────────────────────────────


def _weighted_parts(grades: Iterable[Grade], future: Iterable[FutureAssignment]) -> tuple[float, float]:
    """Return ``(sum(percentage * weight), sum(weight))`` over grades and future work."""
    sums = []
    weights = []
    for item in list(grades) + list(future):
        sums.append(item.percentage * item.weight)
        weights.append(item.weight)
    return math.fsum(sums), math.fsum(weights)


def predict_course_grade(
    course: Course,
    grades: Iterable[Grade],
    future_assignments: Iterable[FutureAssignment],
) -> GradePrediction:
    """Project a course's final average if future assignments score as assumed."""
    course_grades = grades_for_course(course.id, grades)
    future_assignments = list(future_assignments)

    current_average = course_average(course_grades)
    weighted_sum, total_weight = _weighted_parts(course_grades, future_assignments)
    predicted_average = weighted_sum / total_weight if total_weight > 0 else current_average

    return GradePrediction(
        course_id=course.id,
        course_name=course.name,
        course_code=course.code,
        current_average=current_average,
        current_letter_grade=percentage_to_letter_grade(current_average),
        predicted_average=predicted_average,
        predicted_letter_grade=percentage_to_letter_grade(predicted_average),
        future_assignments=future_assignments,
    )


def default_future_assignments(existing_grades: Iterable[Grade]) -> list[FutureAssignment]:
    """Placeholder future work shaped after the assignment types already seen.

    A final exam is always included. Homework, quiz and project placeholders
    are added when those types appear in the existing grades (or when there
    are no grades at all, homework and quiz).
    """
    seen = {g.type for g in existing_grades}
    if not seen:
        seen = {GradeType.EXAM, GradeType.HOMEWORK, GradeType.QUIZ}

    future = [FutureAssignment(id="future-1", title="Final Exam", type=GradeType.EXAM, weight=20, predicted_score=85)]
    placeholders = (
        (GradeType.HOMEWORK, "Upcoming Homework", 5, 90),
        (GradeType.QUIZ, "Upcoming Quiz", 10, 85),
        (GradeType.PROJECT, "Final Project", 15, 88),
    )
    for grade_type, title, weight, score in placeholders:
        if grade_type in seen:
            future.append(FutureAssignment(
                id=f"future-{len(future) + 1}",
                title=title,
                type=grade_type,
                weight=weight,
                predicted_score=score,
            ))
    return future


def required_score(
    target_percentage: float,
    grades: Iterable[Grade],
    future_assignments: Iterable[FutureAssignment],
    target_assignment_id: str,
) -> Optional[float]:
    """Raw score needed on one future assignment to finish at ``target_percentage``.

    Other future assignments are assumed to score as predicted. The result is
    clamped to ``[0, max_score]``; None if the assignment is unknown or
    carries no weight.
    """
    future_assignments = list(future_assignments)
    target = next((a for a in future_assignments if a.id == target_assignment_id), None)
    if target is None or target.weight <= 0:
        logger.debug("Cannot solve for %r: unknown or zero-weight assignment", target_assignment_id)
        return None

    others = [a for a in future_assignments if a.id != target_assignment_id]
    known_sum, known_weight = _weighted_parts(grades, others)

    total_weight = known_weight + target.weight
    required_percentage = (target_percentage * total_weight - known_sum) / target.weight
    raw = required_percentage * target.max_score / 100
    return max(0.0, min(target.max_score, raw))


def gpa_impact(
    courses: Iterable[Course],
    grades: Iterable[Grade],
    predictions: Mapping[str, GradePrediction],
) -> GPAImpact:
    """Compare current GPA to the GPA implied by predicted letter grades.

    Only courses with grades count; a course without a prediction keeps its
    current points.
    """
    grades = list(grades)
    current_points = []
    predicted_points = []
    credits = []

    for course in courses:
        course_grades = grades_for_course(course.id, grades)
        if not course_grades or course.credits <= 0:
            continue

        current = letter_grade_to_points(percentage_to_letter_grade(course_average(course_grades)), course.is_ap)
        prediction = predictions.get(course.id)
        predicted = letter_grade_to_points(prediction.predicted_letter_grade, course.is_ap) if prediction else current

        current_points.append(current * course.credits)
        predicted_points.append(predicted * course.credits)
        credits.append(course.credits)

    credit_total = math.fsum(credits)
    if credit_total <= 0:
        return GPAImpact(current_gpa=0.0, predicted_gpa=0.0, difference=0.0)

    current_gpa = math.fsum(current_points) / credit_total
    predicted_gpa = math.fsum(predicted_points) / credit_total
    return GPAImpact(
        current_gpa=round_half_up(current_gpa, 2),
        predicted_gpa=round_half_up(predicted_gpa, 2),
        difference=round_half_up(predicted_gpa - current_gpa, 2),
    )
