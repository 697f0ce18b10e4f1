"""Static lookup tables: letter-grade ladder, grade points and CFA standards.

CFA bounds are approximations of the published service-academy averages.
Timed events are stored with the faster (competitive) mark as ``min``.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from .models import CFAStandard, ExerciseType, Gender, LetterGrade

# Inclusive lower bounds, highest first.
LETTER_GRADE_THRESHOLDS: tuple[tuple[float, LetterGrade], ...] = (
    (97, LetterGrade.A_PLUS),
    (93, LetterGrade.A),
    (90, LetterGrade.A_MINUS),
    (87, LetterGrade.B_PLUS),
    (83, LetterGrade.B),
    (80, LetterGrade.B_MINUS),
    (77, LetterGrade.C_PLUS),
    (73, LetterGrade.C),
    (70, LetterGrade.C_MINUS),
    (67, LetterGrade.D_PLUS),
    (63, LetterGrade.D),
    (60, LetterGrade.D_MINUS),
)

GRADE_POINTS: Mapping[str, float] = MappingProxyType({
    LetterGrade.A_PLUS.value: 4.0,
    LetterGrade.A.value: 4.0,
    LetterGrade.A_MINUS.value: 3.7,
    LetterGrade.B_PLUS.value: 3.3,
    LetterGrade.B.value: 3.0,
    LetterGrade.B_MINUS.value: 2.7,
    LetterGrade.C_PLUS.value: 2.3,
    LetterGrade.C.value: 2.0,
    LetterGrade.C_MINUS.value: 1.7,
    LetterGrade.D_PLUS.value: 1.3,
    LetterGrade.D.value: 1.0,
    LetterGrade.D_MINUS.value: 0.7,
    LetterGrade.F.value: 0.0,
})

AP_BONUS = 1.0
MAX_GRADE_POINTS = 4.0

CFA_EVENTS: tuple[ExerciseType, ...] = tuple(ExerciseType)

_MALE = MappingProxyType({
    ExerciseType.BASKETBALL_THROW.value: CFAStandard(min=60, max=102, unit="feet"),
    ExerciseType.PULL_UPS.value: CFAStandard(min=7, max=18, unit="reps"),
    ExerciseType.SHUTTLE_RUN.value: CFAStandard(min=7.1, max=8.1, unit="seconds", is_reversed=True),
    ExerciseType.CRUNCHES.value: CFAStandard(min=58, max=95, unit="reps"),
    ExerciseType.PUSH_UPS.value: CFAStandard(min=35, max=75, unit="reps"),
    ExerciseType.MILE_RUN.value: CFAStandard(min=5.2, max=7.3, unit="minutes", is_reversed=True),
})

_FEMALE = MappingProxyType({
    ExerciseType.BASKETBALL_THROW.value: CFAStandard(min=40, max=66, unit="feet"),
    ExerciseType.PULL_UPS.value: CFAStandard(min=1, max=7, unit="reps"),
    ExerciseType.SHUTTLE_RUN.value: CFAStandard(min=7.8, max=9.1, unit="seconds", is_reversed=True),
    ExerciseType.CRUNCHES.value: CFAStandard(min=50, max=95, unit="reps"),
    ExerciseType.PUSH_UPS.value: CFAStandard(min=18, max=41, unit="reps"),
    ExerciseType.MILE_RUN.value: CFAStandard(min=6.0, max=8.3, unit="minutes", is_reversed=True),
})

CFA_STANDARDS: Mapping[Gender, Mapping[str, CFAStandard]] = MappingProxyType({
    Gender.MALE: _MALE,
    Gender.FEMALE: _FEMALE,
})


def standards_for(gender: Gender) -> Mapping[str, CFAStandard]:
    """Return the CFA standards table for a gender."""
    return CFA_STANDARDS[Gender(gender)]
