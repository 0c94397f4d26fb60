from fastapi import APIRouter

from app.api.routers.auth import router as auth_router
from app.api.routers.clients import router as clients_router
from app.api.routers.reporting import router as reporting_router
from app.api.routers.sessions import router as sessions_router
from app.api.routers.tools import router as tools_router

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(clients_router)
api_router.include_router(sessions_router)
api_router.include_router(reporting_router)
api_router.include_router(tools_router)

__all__ = ["api_router"]
