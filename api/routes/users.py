from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from api.deps import get_plan_service
from core.errors import PlanNotFoundError, UserNotFoundError
from schemas.common import CommonResponse
from schemas.learning import LearningPlanDocument, ProgressUpdateReq, RegeneratePlanReq
from schemas.user import UserCreateReq, UserRecord, UserRegisterRes
from services.plan_service import PlanService

router = APIRouter(prefix="/users")


def _not_found(exc: LookupError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=CommonResponse[UserRegisterRes]
)
def register_user_route(req: UserCreateReq, service: PlanService = Depends(get_plan_service)):
    user, plan = service.register_user(req)
    return CommonResponse[UserRegisterRes](
        success=True,
        code="Created",
        message="User registered",
        data=UserRegisterRes(user=user, plan=plan)
    )


@router.get("/{user_id}", response_model=CommonResponse[UserRecord])
def get_user_route(user_id: str, service: PlanService = Depends(get_plan_service)):
    try:
        user = service.users.get(user_id)
    except UserNotFoundError as exc:
        raise _not_found(exc)
    return CommonResponse[UserRecord](success=True, code="Success", message="User found", data=user)


@router.delete("/{user_id}", response_model=CommonResponse[UserRecord])
def delete_user_route(user_id: str, service: PlanService = Depends(get_plan_service)):
    try:
        user = service.delete_user(user_id)
    except UserNotFoundError as exc:
        raise _not_found(exc)
    return CommonResponse[UserRecord](success=True, code="Success", message="User deleted", data=user)


@router.get("/{user_id}/learning-plan", response_model=CommonResponse[LearningPlanDocument])
def get_learning_plan_route(user_id: str, service: PlanService = Depends(get_plan_service)):
    try:
        plan = service.get_plan(user_id)
    except (UserNotFoundError, PlanNotFoundError) as exc:
        raise _not_found(exc)
    return CommonResponse[LearningPlanDocument](success=True, code="Success", message="Learning plan found", data=plan)


@router.post("/{user_id}/learning-plan/regenerate", response_model=CommonResponse[LearningPlanDocument])
def regenerate_learning_plan_route(
        user_id: str,
        req: Optional[RegeneratePlanReq] = None,
        service: PlanService = Depends(get_plan_service),
):
    try:
        plan = service.regenerate_plan(user_id, req)
    except UserNotFoundError as exc:
        raise _not_found(exc)
    return CommonResponse[LearningPlanDocument](
        success=True,
        code="Success",
        message="Learning plan regenerated",
        data=plan
    )


@router.patch("/{user_id}/learning-plan/progress", response_model=CommonResponse[LearningPlanDocument])
def update_progress_route(user_id: str, req: ProgressUpdateReq, service: PlanService = Depends(get_plan_service)):
    try:
        plan = service.update_progress(user_id, req.progress, req.status)
    except (UserNotFoundError, PlanNotFoundError) as exc:
        raise _not_found(exc)
    return CommonResponse[LearningPlanDocument](
        success=True,
        code="Success",
        message="Progress updated",
        data=plan
    )
