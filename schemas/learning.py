# schemas/learning.py
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Literal, Optional
from datetime import datetime

PlanStatus = Literal["not-started", "in-progress", "completed"]
PlanSource = Literal["generated", "fallback"]


class LearningPlanRequest(BaseModel):
    careerGoal: str
    resumeText: Optional[str] = None
    currentRole: Optional[str] = None
    targetRole: Optional[str] = None

    @field_validator("careerGoal")
    @classmethod
    def _goal_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("careerGoal must not be blank")
        return v


class PlanLesson(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str
    description: Any = None
    duration: Any = None
    difficulty: Any = None
    resources: Any = None


class PlanModule(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str
    description: Any = None
    lessons: Optional[List[PlanLesson]] = None


class PlanStructure(BaseModel):
    """Only title, summary (or overview) and titled modules are checked."""
    model_config = ConfigDict(extra="allow")

    title: str
    summary: str = Field(validation_alias=AliasChoices("summary", "overview"))
    modules: List[PlanModule] = Field(min_length=1)
    estimatedDuration: Any = None
    prerequisites: Any = None
    learningOutcomes: Any = None


class GeneratedPlan(BaseModel):
    structure: Dict[str, Any]
    source: PlanSource
    provider: str
    promptVersion: str


class LearningPlanDocument(BaseModel):
    owner: str
    structure: Dict[str, Any]
    progress: int = Field(default=0, ge=0, le=100)
    status: PlanStatus = "not-started"
    source: PlanSource = "generated"
    provider: str = "mock"
    promptVersion: str = ""
    createdAt: datetime
    updatedAt: datetime


class RegeneratePlanReq(BaseModel):
    careerGoal: Optional[str] = None
    resumeText: Optional[str] = None
    currentRole: Optional[str] = None
    targetRole: Optional[str] = None

    @field_validator("careerGoal")
    @classmethod
    def _goal_not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("careerGoal must not be blank")
        return v


class ProgressUpdateReq(BaseModel):
    progress: int
    status: Optional[PlanStatus] = None
