import logging
from datetime import datetime, timezone
from typing import Optional

from core.errors import PlanNotFoundError
from schemas.learning import (
    GeneratedPlan, LearningPlanDocument, LearningPlanRequest, PlanStatus, RegeneratePlanReq,
)
from schemas.user import UserCreateReq, UserRecord
from services.learning_planner import LearningPlanner
from services.stores import PlanStore, UserStore

LOGGER = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def clamp_progress(progress: int) -> int:
    return max(0, min(100, int(progress)))


def derive_status(progress: int) -> PlanStatus:
    if progress <= 0:
        return "not-started"
    if progress >= 100:
        return "completed"
    return "in-progress"


def _request_for(user: UserRecord) -> LearningPlanRequest:
    return LearningPlanRequest(
        careerGoal=user.careerGoal,
        resumeText=user.resumeText,
        currentRole=user.currentRole,
        targetRole=user.targetRole,
    )


class PlanService:
    def __init__(self, planner: LearningPlanner, users: UserStore, plans: PlanStore) -> None:
        self.planner = planner
        self.users = users
        self.plans = plans

    def _new_document(self, owner: str, generated: GeneratedPlan, created_at: Optional[datetime] = None) -> LearningPlanDocument:
        now = _now()
        return LearningPlanDocument(
            owner=owner,
            structure=generated.structure,
            progress=0,
            status="not-started",
            source=generated.source,
            provider=generated.provider,
            promptVersion=generated.promptVersion,
            createdAt=created_at or now,
            updatedAt=now,
        )

    def register_user(self, req: UserCreateReq) -> tuple[UserRecord, LearningPlanDocument]:
        user = self.users.create(UserRecord(id="", createdAt=_now(), **req.model_dump()))
        return user, self.create_initial_plan(user)

    def create_initial_plan(self, user: UserRecord) -> LearningPlanDocument:
        generated = self.planner.generate(_request_for(user))
        doc = self.plans.insert(self._new_document(user.id, generated))
        LOGGER.info("Created learning plan for user=%s source=%s", user.id, doc.source)
        return doc

    def get_plan(self, user_id: str) -> LearningPlanDocument:
        self.users.get(user_id)
        doc = self.plans.find_by_owner(user_id)
        if doc is None:
            raise PlanNotFoundError(f"No learning plan for user '{user_id}'")
        return doc

    def regenerate_plan(self, user_id: str, overrides: Optional[RegeneratePlanReq] = None) -> LearningPlanDocument:
        user = self.users.get(user_id)
        changes = overrides.model_dump(exclude_none=True) if overrides else {}
        if changes:
            user = self.users.update(user.model_copy(update=changes))

        generated = self.planner.generate(_request_for(user))
        existing = self.plans.find_by_owner(user_id)
        created_at = existing.createdAt if existing is not None else None
        doc = self.plans.upsert_by_owner(self._new_document(user_id, generated, created_at))
        LOGGER.info("Regenerated learning plan for user=%s source=%s", user_id, doc.source)
        return doc

    def update_progress(self, user_id: str, progress: int, status: Optional[PlanStatus] = None) -> LearningPlanDocument:
        doc = self.get_plan(user_id)
        progress = clamp_progress(progress)
        updated = doc.model_copy(update={
            "progress": progress,
            "status": status or derive_status(progress),
            "updatedAt": _now(),
        })
        return self.plans.replace_by_owner(updated)

    def delete_user(self, user_id: str) -> UserRecord:
        user = self.users.delete(user_id)
        if self.plans.delete_by_owner(user_id):
            LOGGER.info("Deleted learning plan for user=%s", user_id)
        return user
