from functools import lru_cache

from core.config import get_settings
from services.learning_planner import LearningPlanner
from services.plan_service import PlanService
from services.stores import PlanStore, UserStore


@lru_cache
def get_planner() -> LearningPlanner:
    return LearningPlanner(get_settings())


@lru_cache
def get_user_store() -> UserStore:
    return UserStore()


@lru_cache
def get_plan_store() -> PlanStore:
    return PlanStore()


def get_plan_service() -> PlanService:
    return PlanService(get_planner(), get_user_store(), get_plan_store())
