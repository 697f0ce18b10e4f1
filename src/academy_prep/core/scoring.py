"""Application progress, the composite readiness score.

Combines independently scored signals (GPA, CFA score, application goals)
into one percentage. Components with no data behind them are left out of the
weighted mean rather than counted as zero.
"""

from __future__ import annotations

import logging
import math
from datetime import date
from typing import Iterable, Optional

from .fitness import cfa_scores, cfa_score
from .grading import round_half_up
from .models import (
    ApplicationComponent,
    ApplicationProgress,
    Exercise,
    Gender,
    Goal,
    GoalCategory,
    GoalSummary,
)

logger = logging.getLogger(__name__)

# key -> (weight, display name)
APPLICATION_COMPONENTS: dict[str, tuple[float, str]] = {
    "academics": (0.30, "Academic Preparation"),
    "fitness": (0.20, "Fitness Assessment"),
    "nomination": (0.20, "Congressional Nomination"),
    "leadership": (0.15, "Leadership Experience"),
    "medical": (0.10, "Medical Qualification"),
    "other": (0.05, "Other Requirements"),
}

# Checked in order; the first component whose keywords appear in a goal title wins.
GOAL_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("nomination", ("nomination", "congress")),
    ("leadership", ("leadership", "extracurricular")),
    ("medical", ("medical", "physical")),
)


def classify_application_goal(goal: Goal) -> str:
    """Map an application goal to a component key by title keyword."""
    title = goal.title.lower()
    for key, keywords in GOAL_KEYWORDS:
        if any(k in title for k in keywords):
            return key
    return "other"


def gpa_to_percentage(gpa: float) -> float:
    return max(0.0, min(100.0, (gpa / 4.0) * 100))


def application_progress(
    goals: Iterable[Goal],
    exercises: Iterable[Exercise],
    gender: Gender = Gender.MALE,
    gpa: Optional[float] = None,
) -> ApplicationProgress:
    """Compute overall application progress from goals, fitness and GPA.

    ``gpa=None`` means no academic data yet; the academics component is then
    excluded. Each goal-backed component averages the effective progress of
    its goals (completed goals count as 100).
    """
    exercises = list(exercises)
    components = {
        key: ApplicationComponent(key=key, name=name, weight=weight)
        for key, (weight, name) in APPLICATION_COMPONENTS.items()
    }

    if gpa is not None:
        components["academics"].progress = gpa_to_percentage(gpa)
        components["academics"].available = True

    if cfa_scores(exercises, gender):
        components["fitness"].progress = float(cfa_score(exercises, gender))
        components["fitness"].available = True

    by_component: dict[str, list[float]] = {}
    for goal in goals:
        if goal.category != GoalCategory.APPLICATION:
            continue
        by_component.setdefault(classify_application_goal(goal), []).append(goal.effective_progress)

    for key, progresses in by_component.items():
        components[key].progress = math.fsum(progresses) / len(progresses)
        components[key].available = True

    available = [c for c in components.values() if c.available]
    weight_total = math.fsum(c.weight for c in available)
    if weight_total <= 0:
        logger.debug("No application components have data; overall progress is 0")
        return ApplicationProgress(overall=0, components=components)

    overall = math.fsum(c.progress * c.weight for c in available) / weight_total
    overall = max(0.0, min(100.0, overall))

    return ApplicationProgress(overall=int(round_half_up(overall)), components=components)


def goal_summary(goals: Iterable[Goal], today: Optional[date] = None) -> GoalSummary:
    """Counts and completion rates for the goals view."""
    goals = list(goals)
    today = today or date.today()

    if not goals:
        return GoalSummary(total=0, completed=0, completion_rate=0.0, average_progress=0.0, overdue=0)

    completed = sum(1 for g in goals if g.completed)
    overdue = sum(1 for g in goals if not g.completed and g.target_date is not None and g.target_date < today)

    by_category: dict[str, int] = {}
    for g in goals:
        by_category[g.category.value] = by_category.get(g.category.value, 0) + 1

    return GoalSummary(
        total=len(goals),
        completed=completed,
        completion_rate=round_half_up(completed / len(goals) * 100, 1),
        average_progress=round_half_up(math.fsum(g.effective_progress for g in goals) / len(goals), 1),
        overdue=overdue,
        by_category=by_category,
    )
