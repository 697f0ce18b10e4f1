import json
from datetime import date

import pytest
from pydantic import ValidationError

from academy_prep import repository
from academy_prep.core.models import Gender, GoalCategory

from conftest import make_course, make_exercise, make_goal, make_grade


async def test_course_and_grade_round_trip(database):
    course = await repository.add_course(make_course("", name="AP Physics", credits=4, is_ap=True))
    assert course.id

    await repository.add_grade(make_grade(course.id, 45, max_score=50, title="Lab 1"))
    await repository.add_grade(make_grade(course.id, 88, on=date(2025, 8, 1)))

    courses = await repository.list_courses()
    grades = await repository.list_grades(course.id)
    assert [c.name for c in courses] == ["AP Physics"]
    assert courses[0].is_ap and courses[0].credits == 4
    assert [g.score for g in grades] == [88, 45]


async def test_grade_for_missing_course_is_rejected(database):
    with pytest.raises(repository.RecordNotFoundError):
        await repository.add_grade(make_grade("nope", 90))


async def test_deleting_course_deletes_its_grades(database):
    course = await repository.add_course(make_course("", name="History"))
    await repository.add_grade(make_grade(course.id, 70))

    await repository.delete_record("course", course.id)
    assert await repository.list_courses() == []
    assert await repository.list_grades() == []


async def test_delete_unknown(database):
    with pytest.raises(repository.RecordNotFoundError):
        await repository.delete_record("goal", "missing")
    with pytest.raises(ValueError):
        await repository.delete_record("journal", "x")


async def test_goal_update_is_validated(database):
    goal = await repository.add_goal(make_goal("Nomination", progress=10))

    updated = await repository.update_goal(goal.id, progress=65)
    assert updated.progress == 65
    assert updated.category == GoalCategory.APPLICATION

    done = await repository.update_goal(goal.id, completed=True)
    assert done.completed and done.progress == 65

    with pytest.raises(ValidationError):
        await repository.update_goal(goal.id, progress=150)
    with pytest.raises(repository.RecordNotFoundError):
        await repository.update_goal("missing", progress=5)


async def test_list_goals_by_category(database):
    await repository.add_goal(make_goal("Nomination"))
    await repository.add_goal(make_goal("Run", category="Fitness"))
    assert [g.title for g in await repository.list_goals("Fitness")] == ["Run"]
    assert len(await repository.list_goals()) == 2


async def test_settings(database):
    assert await repository.get_setting("missing") is None
    await repository.save_setting("k", "1")
    await repository.save_setting("k", "2")
    assert await repository.get_setting("k") == "2"


async def test_gender_setting_falls_back_on_bad_value(database):
    assert await repository.get_gender() == Gender.MALE
    assert await repository.get_gender(Gender.FEMALE) == Gender.FEMALE

    await repository.save_setting(repository.GENDER_SETTING, "female")
    assert await repository.get_gender() == Gender.FEMALE

    await repository.save_setting(repository.GENDER_SETTING, "other")
    assert await repository.get_gender() == Gender.MALE


async def test_save_application_progress(database):
    await repository.save_application_progress({"overall": 42}, as_of=date(2025, 10, 1))
    stored = json.loads(await repository.get_setting(repository.APPLICATION_PROGRESS_SETTING))
    assert stored == {"as_of": "2025-10-01", "overall": 42}


async def test_load_snapshot(database):
    course = await repository.add_course(make_course("", name="English"))
    await repository.add_grade(make_grade(course.id, 91))
    await repository.add_exercise(make_exercise("Pull-ups", 12))
    await repository.add_goal(make_goal("Essay"))
    await repository.save_setting(repository.GENDER_SETTING, "female")

    snapshot = await repository.load_snapshot()
    assert len(snapshot.courses) == len(snapshot.grades) == len(snapshot.exercises) == len(snapshot.goals) == 1
    assert snapshot.gender == Gender.FEMALE
    assert snapshot.exercises[0].exercise_type == "Pull-ups"


async def test_same_day_exercises_keep_insertion_order(database):
    await repository.add_exercise(make_exercise("Pull-ups", 5))
    await repository.add_exercise(make_exercise("Pull-ups", 9))

    exercises = await repository.list_exercises()
    assert [e.value for e in exercises] == [5, 9]
