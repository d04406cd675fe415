import copy
import json

import pytest

from core.errors import GenerationError
from schemas.learning import LearningPlanRequest
from services.learning_planner import (
    FALLBACK_GOAL_MAX_CHARS, LearningPlanner, build_fallback_plan, build_prompt,
)

VALID_PLAN = {
    "title": "Personalized Learning Plan for Data Engineer",
    "summary": "From SQL to streaming pipelines",
    "modules": [
        {
            "title": "Warehousing",
            "description": "Modelling and loading",
            "lessons": [
                {
                    "title": "Star schemas",
                    "description": "Facts and dimensions",
                    "duration": "90",
                    "difficulty": "beginner",
                    "resources": ["Book", "Exercises"],
                }
            ],
        }
    ],
    "estimatedDuration": "30 hours",
}


def _req(**kwargs):
    kwargs.setdefault("careerGoal", "Data Engineer")
    return LearningPlanRequest(**kwargs)


# ---------- prompt ----------

def test_prompt_is_deterministic():
    req = _req(resumeText="5 years of Python", currentRole="Analyst", targetRole="Data Engineer")
    assert build_prompt(req) == build_prompt(req.model_copy())


def test_prompt_uses_placeholders_for_missing_fields():
    prompt = build_prompt(_req(resumeText="   "))
    assert "RESUME:\nNo resume provided\n" in prompt
    assert "CURRENT ROLE:\nNot specified\n" in prompt
    assert "TARGET ROLE:\nNot specified\n" in prompt
    assert "CAREER GOAL:\nData Engineer\n" in prompt


def test_prompt_describes_plan_shape():
    prompt = build_prompt(_req(resumeText="Built ETL jobs"))
    assert "Built ETL jobs" in prompt
    for key in ('"title"', '"summary"', '"modules"', '"lessons"', '"duration"', '"difficulty"', '"resources"'):
        assert key in prompt


# ---------- fallback plan ----------

def test_fallback_truncates_long_goal():
    goal = "Principal Machine Learning Infrastructure Engineer at a large company"
    plan = build_fallback_plan(goal)
    short = goal[:FALLBACK_GOAL_MAX_CHARS]
    assert plan["title"] == f"Personalized Learning Plan for {short}"
    assert f"transition into {short}." in plan["summary"]
    assert goal not in plan["title"]


def test_fallback_defaults_blank_goal():
    assert build_fallback_plan("  ")["title"] == "Personalized Learning Plan for Software Developer"


def test_fallback_returns_independent_copies():
    first = build_fallback_plan("Designer")
    first["modules"][0]["lessons"].clear()
    assert build_fallback_plan("Designer")["modules"][0]["lessons"]


# ---------- orchestration ----------

def test_mock_provider_is_deterministic(make_settings):
    planner = LearningPlanner(make_settings())
    assert planner.provider.value == "mock"

    first = planner.generate(_req())
    second = planner.generate(_req())
    assert first.source == "fallback"
    assert first.structure == second.structure == build_fallback_plan("Data Engineer")


def test_generated_plan_is_returned_unchanged(make_settings, fake_generator):
    raw = "Here is your plan: " + json.dumps(VALID_PLAN) + " Hope that helps!"
    gen = fake_generator(raw)
    planner = LearningPlanner(make_settings(), generator=gen)

    result = planner.generate(_req())

    assert result.source == "generated"
    assert result.provider == "openai"
    assert result.structure == VALID_PLAN
    assert gen.prompts == [build_prompt(_req())]


def test_network_failure_falls_back(make_settings, fake_generator, network_failure):
    goal = "Site Reliability Engineer for global payment systems"
    planner = LearningPlanner(make_settings(), generator=fake_generator(network_failure))

    result = planner.generate(_req(careerGoal=goal))

    assert result.source == "fallback"
    assert result.structure == build_fallback_plan(goal)
    assert result.structure["title"].endswith(goal[:FALLBACK_GOAL_MAX_CHARS])


def test_reply_without_braces_falls_back(make_settings, fake_generator):
    planner = LearningPlanner(make_settings(), generator=fake_generator("Sorry, I cannot help with that."))
    assert planner.generate_plan(_req()) == build_fallback_plan("Data Engineer")


@pytest.mark.parametrize(
    "reply",
    [
        '{"title": "x"',
        '{"answer": 42}',
        '{"title": "T", "summary": "S", "modules": []}',
        '{"title": "T", "summary": "S", "modules": "none"}',
    ],
)
def test_invalid_or_wrong_shape_falls_back(make_settings, fake_generator, reply):
    result = LearningPlanner(make_settings(), generator=fake_generator(reply)).generate(_req())
    assert result.source == "fallback"


def _with_lesson_duration(duration):
    plan = copy.deepcopy(VALID_PLAN)
    plan["modules"][0]["lessons"][0]["duration"] = duration
    return plan


def _with_overview():
    plan = copy.deepcopy(VALID_PLAN)
    plan["overview"] = plan.pop("summary")
    return plan


@pytest.mark.parametrize(
    "plan",
    [
        {**VALID_PLAN, "estimatedDuration": 40},
        {**VALID_PLAN, "prerequisites": None},
        _with_lesson_duration(1.5),
        _with_overview(),
    ],
    ids=["numeric-duration-total", "null-prerequisites", "float-lesson-duration", "overview-instead-of-summary"],
)
def test_loosely_typed_optional_fields_are_accepted(make_settings, fake_generator, plan):
    result = LearningPlanner(make_settings(), generator=fake_generator(json.dumps(plan))).generate(_req())

    assert result.source == "generated"
    assert result.structure == plan


def test_unexpected_error_never_escapes(make_settings, fake_generator):
    planner = LearningPlanner(make_settings(), generator=fake_generator(RuntimeError("boom")))
    plan = planner.generate_plan(_req())
    assert plan["modules"]


@pytest.mark.parametrize(
    "reply",
    [
        json.dumps(VALID_PLAN),
        "no json",
        GenerationError("timeout"),
        KeyError("choices"),
    ],
)
@pytest.mark.parametrize(
    "req",
    [
        LearningPlanRequest(careerGoal="Nurse"),
        LearningPlanRequest(careerGoal="Backend Engineer", resumeText="", currentRole="QA", targetRole=None),
    ],
)
def test_always_returns_plan_with_modules(make_settings, fake_generator, reply, req):
    plan = LearningPlanner(make_settings(), generator=fake_generator(reply)).generate_plan(req)
    assert plan is not None
    assert plan["modules"]


def test_blank_career_goal_is_rejected():
    with pytest.raises(ValueError):
        LearningPlanRequest(careerGoal="   ")
