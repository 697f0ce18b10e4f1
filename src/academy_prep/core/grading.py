"""Grade → percentage → letter grade → GPA pipeline.

Every function here is pure: inputs are record snapshots, outputs are plain
values. Degenerate input (no grades, zero weights, zero credits, unknown
letters) resolves to 0 instead of raising.
"""

from __future__ import annotations

import logging
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

from .models import Course, CourseGrade, Grade, LetterGrade
from .standards import AP_BONUS, GRADE_POINTS, LETTER_GRADE_THRESHOLDS, MAX_GRADE_POINTS

logger = logging.getLogger(__name__)


def round_half_up(value: float, places: int = 0) -> float:
    """Round like a gradebook does: .5 always goes up, never to even."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def course_average(grades: Iterable[Grade]) -> float:
    """Weight-normalized mean percentage of a course's grades.

    Returns 0 for an empty collection or when every weight is zero.
    """
    weighted = []
    weights = []
    for grade in grades:
        weighted.append(grade.percentage * grade.weight)
        weights.append(grade.weight)

    weight_total = math.fsum(weights)
    if weight_total <= 0:
        return 0.0
    return math.fsum(weighted) / weight_total


def percentage_to_letter_grade(percentage: float) -> LetterGrade:
    """Map a percentage onto the letter ladder. Total over all floats."""
    for threshold, letter in LETTER_GRADE_THRESHOLDS:
        if percentage >= threshold:
            return letter
    return LetterGrade.F


def letter_grade_to_points(letter: Union[LetterGrade, str], is_ap: bool = False) -> float:
    """Grade points for a letter, with the AP bonus capped at 4.0.

    Unknown letters are worth 0.
    """
    key = letter.value if isinstance(letter, LetterGrade) else str(letter)
    points = GRADE_POINTS.get(key, 0.0)
    if is_ap:
        points = min(MAX_GRADE_POINTS, points + AP_BONUS)
    return points


def percentage_to_grade_points(percentage: float, is_ap: bool = False) -> float:
    return letter_grade_to_points(percentage_to_letter_grade(percentage), is_ap)


def grades_for_course(course_id: str, grades: Iterable[Grade]) -> list[Grade]:
    return [g for g in grades if g.course_id == course_id]


def course_grade(course_id: str, grades: Iterable[Grade]) -> CourseGrade:
    """Current percentage and letter for one course."""
    course_grades = grades_for_course(course_id, grades)
    if not course_grades:
        return CourseGrade(course_id=course_id, percentage=0.0, letter_grade=None, grade_count=0)

    percentage = course_average(course_grades)
    return CourseGrade(
        course_id=course_id,
        percentage=percentage,
        letter_grade=percentage_to_letter_grade(percentage),
        grade_count=len(course_grades),
    )


def course_contribution(course: Course, grades: Iterable[Grade]) -> Optional[tuple[float, float]]:
    """Return ``(points * credits, credits)`` for one course, or None if it doesn't count.

    A course counts only when it has at least one grade and positive credits.
    """
    course_grades = grades_for_course(course.id, grades)
    if not course_grades:
        return None
    if course.credits <= 0:
        logger.debug("Excluding course %s from GPA: non-positive credits %s", course.id, course.credits)
        return None

    points = percentage_to_grade_points(course_average(course_grades), course.is_ap)
    return points * course.credits, course.credits


def calculate_gpa(courses: Iterable[Course], grades: Iterable[Grade]) -> float:
    """Credit-weighted GPA across courses that have grades, rounded to 2 places."""
    grades = list(grades)
    total_points = []
    total_credits = []

    for course in courses:
        contribution = course_contribution(course, grades)
        if contribution is None:
            continue
        points, credits = contribution
        total_points.append(points)
        total_credits.append(credits)

    credit_sum = math.fsum(total_credits)
    if credit_sum <= 0:
        return 0.0
    return round_half_up(math.fsum(total_points) / credit_sum, 2)
