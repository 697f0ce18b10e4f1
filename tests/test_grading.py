import itertools
import random

import pytest
from pydantic import ValidationError

from academy_prep.core.grading import (
    calculate_gpa,
    course_average,
    course_grade,
    letter_grade_to_points,
    percentage_to_grade_points,
    percentage_to_letter_grade,
    round_half_up,
)
from academy_prep.core.models import LetterGrade

from conftest import make_course, make_grade

LETTER_ORDER = list(LetterGrade)


def test_course_average_weighted():
    grades = [
        make_grade("c1", 90, weight=3),
        make_grade("c1", 40, max_score=50, weight=1),
    ]
    # (90*3 + 80*1) / 4
    assert course_average(grades) == pytest.approx(87.5)


def test_course_average_empty_and_zero_weight():
    assert course_average([]) == 0
    assert course_average([make_grade("c1", 90, weight=0), make_grade("c1", 50, weight=0)]) == 0


@pytest.mark.parametrize(
    "percentage,letter",
    [
        (100, "A+"), (97, "A+"), (96.99, "A"), (93, "A"), (90, "A-"), (89.9, "B+"),
        (87, "B+"), (83, "B"), (80, "B-"), (77, "C+"), (73, "C"), (70, "C-"),
        (67, "D+"), (63, "D"), (60, "D-"), (59.99, "F"), (0, "F"),
    ],
)
def test_letter_ladder_boundaries(percentage, letter):
    assert percentage_to_letter_grade(percentage) == LetterGrade(letter)


def test_letter_ladder_is_total():
    assert percentage_to_letter_grade(float("inf")) == LetterGrade.A_PLUS
    assert percentage_to_letter_grade(1e9) == LetterGrade.A_PLUS
    assert percentage_to_letter_grade(-1e9) == LetterGrade.F
    assert percentage_to_letter_grade(float("-inf")) == LetterGrade.F


def test_letter_ladder_is_monotonic():
    previous = 0
    for tenth in range(1100, -200, -1):
        rank = LETTER_ORDER.index(percentage_to_letter_grade(tenth / 10))
        assert rank >= previous
        previous = rank


def test_letter_points_table():
    assert letter_grade_to_points("A+") == 4.0
    assert letter_grade_to_points(LetterGrade.B_MINUS) == 2.7
    assert letter_grade_to_points("D-") == 0.7
    assert letter_grade_to_points("F") == 0.0


def test_ap_bonus_is_added_then_capped():
    for letter in LETTER_ORDER:
        assert letter_grade_to_points(letter, True) == min(4.0, letter_grade_to_points(letter, False) + 1.0)
    assert letter_grade_to_points("A-", True) == 4.0
    assert letter_grade_to_points("C", True) == 3.0


def test_unknown_letter_is_zero():
    assert letter_grade_to_points("N/A") == 0.0
    assert letter_grade_to_points("Z", True) == 1.0


def test_gpa_worked_example():
    course = make_course("chem", credits=4, is_ap=True)
    grades = [make_grade("chem", 90), make_grade("chem", 70)]

    assert course_average(grades) == pytest.approx(80)
    assert percentage_to_letter_grade(80) == LetterGrade.B_MINUS
    assert calculate_gpa([course], grades) == 3.7


def test_gpa_empty_inputs():
    assert calculate_gpa([], []) == 0
    assert calculate_gpa([make_course("a"), make_course("b")], []) == 0


def test_gpa_excludes_courses_without_grades():
    courses = [make_course("a", credits=3), make_course("b", credits=4)]
    grades = [make_grade("a", 95)]
    assert calculate_gpa(courses, grades) == 4.0


def test_gpa_excludes_non_positive_credits():
    courses = [make_course("a", credits=3), make_course("b", credits=0), make_course("c", credits=-2)]
    grades = [make_grade("a", 95), make_grade("b", 50), make_grade("c", 10)]
    assert calculate_gpa(courses, grades) == 4.0


def test_gpa_credit_weighting_and_rounding():
    courses = [make_course("a", credits=3), make_course("b", credits=4)]
    grades = [make_grade("a", 90), make_grade("b", 85)]
    # (3.7*3 + 3.0*4) / 7 = 3.3
    assert calculate_gpa(courses, grades) == 3.3

    courses = [make_course("a", credits=1), make_course("b", credits=2)]
    # (3.7 + 6.0) / 3 = 3.2333...
    assert calculate_gpa(courses, grades) == 3.23


def test_gpa_order_independent():
    courses = [
        make_course("a", credits=1, is_ap=True),
        make_course("b", credits=3),
        make_course("c", credits=4.5),
        make_course("d", credits=2, is_ap=True),
    ]
    grades = [
        make_grade("a", 71), make_grade("a", 88, weight=2),
        make_grade("b", 93.5), make_grade("b", 61, weight=0.5),
        make_grade("c", 78), make_grade("c", 19, max_score=20),
        make_grade("d", 45),
    ]
    expected = calculate_gpa(courses, grades)

    rng = random.Random(7)
    for course_order in itertools.permutations(courses):
        shuffled = grades[:]
        rng.shuffle(shuffled)
        assert calculate_gpa(list(course_order), shuffled) == expected


def test_single_course_contribution_round_trip():
    course = make_course("bio", credits=2, is_ap=True)
    grades = [make_grade("bio", 64), make_grade("bio", 18, max_score=25, weight=2)]

    direct = letter_grade_to_points(percentage_to_letter_grade(course_average(grades)), course.is_ap)
    assert calculate_gpa([course], grades) == round_half_up(direct, 2)
    assert percentage_to_grade_points(course_average(grades), True) == direct


def test_inputs_are_not_mutated():
    courses = [make_course("a")]
    grades = [make_grade("a", 80), make_grade("a", 60)]
    before = [g.model_dump() for g in grades]
    calculate_gpa(courses, grades)
    assert [g.model_dump() for g in grades] == before
    assert len(courses) == 1


def test_course_grade_without_grades():
    standing = course_grade("missing", [make_grade("a", 80)])
    assert standing.percentage == 0
    assert standing.letter_grade is None
    assert standing.grade_count == 0


def test_course_grade_with_grades():
    standing = course_grade("a", [make_grade("a", 80), make_grade("a", 100), make_grade("b", 10)])
    assert standing.percentage == pytest.approx(90)
    assert standing.letter_grade == LetterGrade.A_MINUS
    assert standing.grade_count == 2


def test_round_half_up():
    assert round_half_up(2.5) == 3.0
    assert round_half_up(3.5) == 4.0
    assert round_half_up(0.125, 2) == 0.13
    assert round_half_up(3.14159, 2) == 3.14


@pytest.mark.parametrize(
    "fields",
    [
        {"score": 101, "max_score": 100},
        {"score": -1, "max_score": 100},
        {"score": 0, "max_score": 0},
        {"score": 5, "max_score": -10},
        {"score": 50, "max_score": 100, "weight": -1},
    ],
)
def test_invalid_grades_are_rejected(fields):
    with pytest.raises(ValidationError):
        make_grade("a", **fields)
