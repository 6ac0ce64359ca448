from fastapi import APIRouter

from app.api.v1.messages import config_router, router as messages_router


api_router = APIRouter(prefix="/api/v1")
api_router.include_router(config_router)
api_router.include_router(messages_router)
