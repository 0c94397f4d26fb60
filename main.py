import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from app.api import api_router
from app.core.app_config import get_app_json_config
from app.core.config import get_settings
from app.db.init_db import init_db
from app.db.session import SessionLocal
from app.services.auth_service import AuthService
from app.services.studio_service import PhotoStudioService, StudioError

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

logger = logging.getLogger(__name__)
settings = get_settings()
app_json = get_app_json_config()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()

    app.state.auth = AuthService(SessionLocal, settings)
    app.state.studio = PhotoStudioService.from_session_factory(SessionLocal)
    try:
        await app.state.studio.load()
    except StudioError as exc:
        logger.warning("Initial data load failed: %s", exc.message)

    yield


app = FastAPI(title=app_json.app_name, lifespan=lifespan)

app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/health", tags=["health"])
async def health() -> dict[str, str]:
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.uvicorn_host,
        port=settings.uvicorn_port,
        reload=settings.uvicorn_reload,
    )
