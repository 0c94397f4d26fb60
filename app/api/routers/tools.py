from fastapi import APIRouter, Depends, Query

from app.api.deps import get_studio, raise_studio_error, require_user
from app.services.audit_log_service import read_recent_logs
from app.services.studio_service import PhotoStudioService, StudioError

router = APIRouter(prefix="/tools", tags=["tools"], dependencies=[Depends(require_user)])


@router.get("/state")
async def get_studio_state(studio: PhotoStudioService = Depends(get_studio)) -> dict:
    return {
        "loading": studio.loading,
        "last_error": studio.last_error,
        "clients": len(studio.clients),
        "sessions": len(studio.sessions),
    }


@router.post("/reload")
async def reload_studio_data(studio: PhotoStudioService = Depends(get_studio)) -> dict:
    try:
        await studio.load()
    except StudioError as exc:
        raise_studio_error(exc)
    return {"clients": len(studio.clients), "sessions": len(studio.sessions)}


@router.get("/logs")
async def get_system_logs(
    limit: int = Query(default=200, ge=1, le=2000),
    action: str | None = Query(default=None),
) -> dict:
    return {"lines": read_recent_logs(limit=limit, action=action)}
