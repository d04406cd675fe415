from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from schemas.learning import LearningPlanDocument, LearningPlanRequest


class UserRecord(BaseModel):
    id: str
    careerGoal: str
    resumeText: Optional[str] = None
    currentRole: Optional[str] = None
    targetRole: Optional[str] = None
    createdAt: datetime


class UserCreateReq(LearningPlanRequest):
    pass


class UserRegisterRes(BaseModel):
    user: UserRecord
    plan: LearningPlanDocument
