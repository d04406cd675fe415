import copy
import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from core.config import Settings
from core.errors import GenerationError, PlanParseError
from schemas.learning import GeneratedPlan, LearningPlanRequest, PlanStructure
from services.providers import TextGenerator, build_generator, select_provider
from utils.jsonutils import extract_json_object
from utils.templater import render_template

LOGGER = logging.getLogger(__name__)

FALLBACK_GOAL_MAX_CHARS = 30
DEFAULT_CAREER_GOAL = "Software Developer"
NO_RESUME = "No resume provided"
NOT_SPECIFIED = "Not specified"

_FALLBACK_MODULES = [
    {
        "title": "Foundation Skills",
        "description": "Build the core fundamentals needed for your career transition",
        "lessons": [
            {
                "title": "Programming Fundamentals",
                "description": "Learn basic programming concepts and problem-solving",
                "duration": "120",
                "difficulty": "beginner",
                "resources": ["Video Lectures", "Interactive Exercises", "Coding Challenges"],
            },
            {
                "title": "Data Structures & Algorithms",
                "description": "Master essential data structures and algorithmic thinking",
                "duration": "180",
                "difficulty": "intermediate",
                "resources": ["Online Course", "Practice Problems", "Code Reviews"],
            },
        ],
    },
    {
        "title": "Core Technologies",
        "description": "Master the specific technologies relevant to your career goal",
        "lessons": [
            {
                "title": "Modern Web Development",
                "description": "Learn HTML, CSS, JavaScript and modern frameworks",
                "duration": "240",
                "difficulty": "intermediate",
                "resources": ["Project-Based Learning", "Documentation", "Community Forums"],
            },
            {
                "title": "Backend Development",
                "description": "Build robust server-side applications and APIs",
                "duration": "200",
                "difficulty": "intermediate",
                "resources": ["Hands-on Projects", "API Documentation", "Best Practices"],
            },
        ],
    },
    {
        "title": "Advanced Concepts",
        "description": "Dive deep into advanced topics and real-world applications",
        "lessons": [
            {
                "title": "System Design",
                "description": "Learn to design scalable and efficient systems",
                "duration": "300",
                "difficulty": "advanced",
                "resources": ["Case Studies", "Architecture Patterns", "System Design Interviews"],
            },
            {
                "title": "DevOps & Deployment",
                "description": "Master deployment, CI/CD, and infrastructure management",
                "duration": "180",
                "difficulty": "intermediate",
                "resources": ["Cloud Platforms", "Automation Tools", "Best Practices"],
            },
        ],
    },
]


def _or_placeholder(value: Optional[str], placeholder: str) -> str:
    value = (value or "").strip()
    return value or placeholder


def build_prompt(req: LearningPlanRequest) -> str:
    return render_template(
        "learning_plan_prompt.j2",
        resume_text=_or_placeholder(req.resumeText, NO_RESUME),
        current_role=_or_placeholder(req.currentRole, NOT_SPECIFIED),
        target_role=_or_placeholder(req.targetRole, NOT_SPECIFIED),
        career_goal=req.careerGoal.strip(),
    )


def build_fallback_plan(career_goal: Optional[str]) -> Dict[str, Any]:
    goal = (career_goal or "").strip()[:FALLBACK_GOAL_MAX_CHARS] or DEFAULT_CAREER_GOAL
    return {
        "title": f"Personalized Learning Plan for {goal}",
        "summary": (
            f"A comprehensive learning journey designed to help you transition into {goal}. "
            "This plan is based on your current skills and career aspirations."
        ),
        "modules": copy.deepcopy(_FALLBACK_MODULES),
        "estimatedDuration": "40 hours",
        "prerequisites": ["Basic computer literacy", "Willingness to learn"],
        "learningOutcomes": [
            "Proficiency in modern programming languages",
            "Understanding of software development lifecycle",
            "Ability to build and deploy web applications",
            "Problem-solving and algorithmic thinking skills",
        ],
    }


def parse_plan(raw: str) -> Dict[str, Any]:
    """Pull the plan object out of a provider reply.

    The object must also have the plan shape (title, summary and at least one
    module); it is returned as parsed, without normalisation.
    """
    data = extract_json_object(raw)
    try:
        PlanStructure.model_validate(data)
    except ValidationError as exc:
        raise PlanParseError(f"Response JSON is not a learning plan ({exc.error_count()} errors)") from exc
    return data


class LearningPlanner:
    """Generates plans through one provider chosen at construction time.

    ``generate`` never raises: provider, parse and validation failures all
    degrade to the fallback curriculum.
    """

    def __init__(self, settings: Settings, generator: Optional[TextGenerator] = None) -> None:
        self.settings = settings
        if generator is not None:
            self.provider = generator.tag
            self.generator: Optional[TextGenerator] = generator
        else:
            self.provider = select_provider(settings)
            self.generator = build_generator(self.provider, settings)
        LOGGER.info("Learning planner using provider=%s", self.provider.value)

    def _fallback(self, req: LearningPlanRequest) -> GeneratedPlan:
        return GeneratedPlan(
            structure=build_fallback_plan(req.careerGoal),
            source="fallback",
            provider=self.provider.value,
            promptVersion=self.settings.prompt_version,
        )

    def generate(self, req: LearningPlanRequest) -> GeneratedPlan:
        if self.generator is None:
            return self._fallback(req)

        try:
            prompt = build_prompt(req)
            raw = self.generator.generate(prompt)
            structure = parse_plan(raw)
        except (GenerationError, PlanParseError) as exc:
            LOGGER.warning("Plan generation via %s failed, using fallback plan: %s", self.provider.value, exc)
            return self._fallback(req)
        except Exception:
            LOGGER.exception("Unexpected error during plan generation via %s, using fallback plan", self.provider.value)
            return self._fallback(req)

        return GeneratedPlan(
            structure=structure,
            source="generated",
            provider=self.provider.value,
            promptVersion=self.settings.prompt_version,
        )

    def generate_plan(self, req: LearningPlanRequest) -> Dict[str, Any]:
        return self.generate(req).structure

    def close(self) -> None:
        if self.generator is not None:
            self.generator.close()
