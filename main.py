import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.deps import get_planner
from api.routes.learning import router as learning_router
from api.routes.users import router as users_router
from core.config import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    if get_planner.cache_info().currsize:
        get_planner().close()


app = FastAPI(title=settings.app_name, version="1.0.0", lifespan=lifespan)

app.include_router(learning_router, tags=["learning"])
app.include_router(users_router, tags=["users"])


@app.get("/health")
def health():
    return {"ok": True}
