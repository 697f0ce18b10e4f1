"""Candidate Fitness Assessment scoring.

Raw event results are scored 0–100 against the gender-keyed standards in
:mod:`.standards`. Reversed events (runs) score higher for lower values.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Mapping, Optional

from .grading import round_half_up
from .models import CFAStandard, Exercise, ExerciseProgress, ExerciseStatus, Gender, StatusBand
from .standards import CFA_EVENTS, standards_for

logger = logging.getLogger(__name__)


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def standard_for(
    exercise_type: str,
    gender: Gender,
    standards: Optional[Mapping[str, CFAStandard]] = None,
) -> Optional[CFAStandard]:
    """Look up an event's standard, from ``standards`` if given, else the gender table."""
    table = standards if standards is not None else standards_for(gender)
    return table.get(exercise_type)


def progress_fraction(value: float, standard: CFAStandard) -> float:
    """Fraction of the way from the passing mark to the competitive mark, clamped to [0, 1]."""
    span = standard.max - standard.min
    if span <= 0:
        # Degenerate bounds: all or nothing at the single mark.
        if standard.is_reversed:
            return 1.0 if value <= standard.min else 0.0
        return 1.0 if value >= standard.max else 0.0

    if standard.is_reversed:
        return _clamp01((standard.max - value) / span)
    return _clamp01((value - standard.min) / span)


def exercise_progress(
    exercise: Exercise,
    gender: Gender,
    standards: Optional[Mapping[str, CFAStandard]] = None,
) -> ExerciseProgress:
    """Score one exercise result. Custom or unknown events score zero."""
    standard = standard_for(exercise.exercise_type, gender, standards)
    if standard is None:
        logger.debug("No CFA standard for %r; scoring as zero", exercise.exercise_type)
        return ExerciseProgress(exercise_type=exercise.exercise_type, percentage=0.0, score=0)

    percentage = progress_fraction(exercise.value, standard) * 100
    return ExerciseProgress(
        exercise_type=exercise.exercise_type,
        percentage=percentage,
        score=int(round_half_up(percentage)),
    )


def latest_exercises(exercises: Iterable[Exercise]) -> dict[str, Exercise]:
    """Keep the most recent result per exercise type.

    Ties on date keep the entry seen first.
    """
    latest: dict[str, Exercise] = {}
    for exercise in exercises:
        current = latest.get(exercise.exercise_type)
        if current is None or exercise.date > current.date:
            latest[exercise.exercise_type] = exercise
    return latest


def cfa_scores(exercises: Iterable[Exercise], gender: Gender) -> dict[str, ExerciseProgress]:
    """Per-event progress for the canonical CFA events that have a result."""
    latest = latest_exercises(exercises)
    return {
        event.value: exercise_progress(latest[event.value], gender)
        for event in CFA_EVENTS
        if event.value in latest
    }


def cfa_score(exercises: Iterable[Exercise], gender: Gender) -> int:
    """Mean score over the canonical events present. Missing events are not zeros."""
    scores = cfa_scores(exercises, gender)
    if not scores:
        return 0
    mean = math.fsum(p.score for p in scores.values()) / len(scores)
    return int(round_half_up(mean))


def exercise_status(exercise_type: str, value: Optional[float], gender: Gender) -> ExerciseStatus:
    """Classify a result against the standard's passing, average and competitive marks."""
    standard = standard_for(exercise_type, gender)
    if standard is None or value is None:
        return ExerciseStatus(exercise_type=exercise_type, status=StatusBand.NOT_STARTED, value=value)

    if standard.is_reversed:
        if value <= standard.competitive:
            status = StatusBand.EXCELLENT
        elif value <= standard.average:
            status = StatusBand.GOOD
        elif value <= standard.passing:
            status = StatusBand.NEEDS_WORK
        else:
            status = StatusBand.BELOW_MINIMUM
    else:
        if value >= standard.competitive:
            status = StatusBand.EXCELLENT
        elif value >= standard.average:
            status = StatusBand.GOOD
        elif value >= standard.passing:
            status = StatusBand.NEEDS_WORK
        else:
            status = StatusBand.BELOW_MINIMUM

    return ExerciseStatus(
        exercise_type=exercise_type,
        status=status,
        value=value,
        passing=standard.passing,
        average=standard.average,
        competitive=standard.competitive,
        unit=standard.unit,
    )


def standards_table(exercises: Iterable[Exercise], gender: Gender) -> list[ExerciseStatus]:
    """One status row per CFA event, using the latest result where there is one."""
    latest = latest_exercises(exercises)
    rows = []
    for event in CFA_EVENTS:
        exercise = latest.get(event.value)
        rows.append(exercise_status(event.value, exercise.value if exercise else None, gender))
    return rows
