from fastapi import APIRouter, Depends

from api.deps import get_planner
from schemas.common import CommonResponse
from schemas.learning import GeneratedPlan, LearningPlanRequest
from services.learning_planner import LearningPlanner


router = APIRouter()


@router.post(
    "/generate-learning-plan",
    response_model=CommonResponse[GeneratedPlan]
)
def generate_learning_plan_route(req: LearningPlanRequest, planner: LearningPlanner = Depends(get_planner)):
    plan = planner.generate(req)
    return CommonResponse[GeneratedPlan](
        success=True,
        code="Success",
        message="Learning plan generated",
        data=plan
    )
