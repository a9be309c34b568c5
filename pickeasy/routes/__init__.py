from fastapi import APIRouter

from pickeasy.routes.users import router as users_router
from pickeasy.routes.restaurants import router as restaurants_router

api_router = APIRouter(prefix="/api")


@api_router.get("/health", tags=["Health"])
def health() -> dict:
    return {"status": "ok"}


api_router.include_router(users_router)
api_router.include_router(restaurants_router)
