from typing import NoReturn

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import get_settings
from app.models.user import User
from app.services.auth_service import AuthService
from app.services.studio_service import PhotoStudioService, StudioError

bearer_scheme = HTTPBearer(auto_error=False)

STUDIO_ERROR_STATUS = {
    "not-found": status.HTTP_404_NOT_FOUND,
    "invalid-argument": status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def get_studio(request: Request) -> PhotoStudioService:
    return request.app.state.studio


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    auth: AuthService = Depends(get_auth_service),
) -> User:
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Você precisa estar logado para realizar esta operação.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    result = await auth.verify_token(credentials.credentials)
    if result.error or result.user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.error,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return result.user


async def require_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    auth: AuthService = Depends(get_auth_service),
) -> User | None:
    if not get_settings().auth_required:
        return None
    return await get_current_user(credentials, auth)


def raise_studio_error(exc: StudioError) -> NoReturn:
    status_code = STUDIO_ERROR_STATUS.get(exc.code, status.HTTP_503_SERVICE_UNAVAILABLE)
    raise HTTPException(status_code=status_code, detail=exc.message) from exc
