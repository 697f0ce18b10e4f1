from datetime import date

import pytest

from academy_prep.core.models import Course, Exercise, Goal, Grade
from academy_prep.db import close_db, init_db


@pytest.fixture
async def database(tmp_path, monkeypatch):
    """A fresh SQLite database under a temporary DATA_DIR."""
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    monkeypatch.delenv("DATABASE_URL", raising=False)
    await close_db()
    await init_db()
    yield tmp_path
    await close_db()


def make_course(course_id="c1", credits=3.0, is_ap=False, name=None):
    return Course(id=course_id, name=name or course_id.upper(), credits=credits, is_ap=is_ap)


def make_grade(course_id, score, max_score=100.0, weight=1.0, on=date(2025, 9, 15), **kwargs):
    return Grade(course_id=course_id, score=score, max_score=max_score, weight=weight, date=on, **kwargs)


def make_exercise(exercise_type, value, on=date(2025, 10, 1)):
    return Exercise(exercise_type=exercise_type, value=value, date=on)


def make_goal(title, progress=0.0, category="Application", completed=False, **kwargs):
    return Goal(title=title, progress=progress, category=category, completed=completed, **kwargs)
