from fastapi import APIRouter

from miniapp.routers.health import router as health_router
from miniapp.routers.pages import router as pages_router
from miniapp.routers.widgets import router as widgets_router

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(health_router)
api_router.include_router(pages_router)
api_router.include_router(widgets_router)
