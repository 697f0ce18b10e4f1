import json

import pytest

from academy_prep import repository, server


async def test_record_and_score_flow(database):
    course = (await server.prep_add_course(name="AP Chemistry", credits=4, is_ap=True))["course"]
    await server.prep_add_grade(course_id=course["id"], score=90, date="2025-09-10")
    await server.prep_add_grade(course_id=course["id"], score=70, date="2025-09-20")

    gpa = await server.prep_gpa()
    assert gpa["gpa"] == 3.7
    assert gpa["courses"][0]["letter_grade"] == "B-"

    courses = await server.prep_courses()
    assert courses["courses"][0]["percentage"] == 80.0


async def test_fitness_uses_selected_gender(database):
    await server.prep_add_exercise(exercise_type="Pull-ups", value=4)
    male = await server.prep_fitness()
    assert male["cfa_score"] == 0

    await server.prep_set_gender("female")
    female = await server.prep_fitness()
    assert female["cfa_score"] == 50
    assert female["events"][0]["exercise_type"] == "Pull-ups"
    assert len(female["standards"]) == 6


async def test_exercise_unit_defaults_from_standard(database):
    result = await server.prep_add_exercise(exercise_type="1-Mile Run", value=6.5)
    assert result["exercise"]["unit"] == "minutes"
    custom = await server.prep_add_exercise(exercise_type="Burpees", value=30)
    assert custom["exercise"]["unit"] == "reps"

    fitness = await server.prep_fitness()
    assert [e["exercise_type"] for e in fitness["custom_exercises"]] == ["Burpees"]


async def test_application_progress_is_saved_after_computing(database):
    await server.prep_add_goal(title="Congressional nomination", category="Application", progress=80)
    result = await server.prep_application_progress()
    assert result["overall"] == 80

    stored = json.loads(await repository.get_setting(repository.APPLICATION_PROGRESS_SETTING))
    assert stored["overall"] == 80


async def test_invalid_input_becomes_value_error(database):
    course = (await server.prep_add_course(name="Math"))["course"]
    with pytest.raises(ValueError, match="score"):
        await server.prep_add_grade(course_id=course["id"], score=120, max_score=100)
    with pytest.raises(ValueError, match="does not exist"):
        await server.prep_add_grade(course_id="missing", score=10)
    with pytest.raises(ValueError, match="YYYY-MM-DD"):
        await server.prep_add_grade(course_id=course["id"], score=10, date="10/01/2025")
    with pytest.raises(ValueError):
        await server.prep_set_gender("x")


async def test_grade_prediction(database):
    course = (await server.prep_add_course(name="Biology"))["course"]
    await server.prep_add_grade(course_id=course["id"], score=80, grade_type="exam")

    result = await server.prep_grade_prediction(course_id=course["id"], target_percentage=85)
    assert result["prediction"]["current_letter_grade"] == "B-"
    # 80 weight 1 plus a final worth 20: (85*21 - 80) / 20 = 85.25
    assert result["required_final_exam_score"] == pytest.approx(85.2, abs=0.1)

    with pytest.raises(ValueError):
        await server.prep_grade_prediction(course_id="missing")


async def test_courses_without_credits_leave_academics_out(database):
    course = (await server.prep_add_course(name="Study Hall", credits=0))["course"]
    await server.prep_add_grade(course_id=course["id"], score=100)
    await server.prep_add_goal(title="Congressional nomination", category="Application", progress=80)

    result = await server.prep_application_progress()
    assert result["components"]["academics"]["available"] is False
    assert result["overall"] == 80
