from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_auth_service, get_current_user
from app.models.user import User
from app.schemas.auth import (
    AuthMessage,
    AuthResponse,
    AuthState,
    LoginRequest,
    RegisterRequest,
    ResetPasswordConfirm,
    ResetPasswordRequest,
    UserRead,
)
from app.services.auth_service import AuthResult, AuthService

router = APIRouter(prefix="/auth", tags=["auth"])

AUTH_ERROR_STATUS = {
    "auth/user-not-found": status.HTTP_404_NOT_FOUND,
    "auth/wrong-password": status.HTTP_401_UNAUTHORIZED,
    "auth/invalid-credential": status.HTTP_401_UNAUTHORIZED,
    "auth/email-already-in-use": status.HTTP_409_CONFLICT,
    "auth/weak-password": status.HTTP_400_BAD_REQUEST,
    "auth/invalid-email": status.HTTP_400_BAD_REQUEST,
    "auth/too-many-requests": status.HTTP_429_TOO_MANY_REQUESTS,
    "auth/network-request-failed": status.HTTP_503_SERVICE_UNAVAILABLE,
    "auth/user-disabled": status.HTTP_403_FORBIDDEN,
    "auth/operation-not-allowed": status.HTTP_403_FORBIDDEN,
}


def _raise_for_error(result: AuthResult) -> None:
    if result.error is None:
        return
    status_code = AUTH_ERROR_STATUS.get(result.code or "", status.HTTP_400_BAD_REQUEST)
    raise HTTPException(status_code=status_code, detail=result.error)


def _auth_response(result: AuthResult) -> AuthResponse:
    _raise_for_error(result)
    return AuthResponse(user=UserRead.model_validate(result.user), access_token=result.access_token)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, auth: AuthService = Depends(get_auth_service)) -> AuthResponse:
    result = await auth.register(payload.email, payload.password, payload.display_name)
    return _auth_response(result)


@router.post("/login", response_model=AuthResponse)
async def login(payload: LoginRequest, auth: AuthService = Depends(get_auth_service)) -> AuthResponse:
    result = await auth.login(payload.email, payload.password)
    return _auth_response(result)


@router.post("/logout", response_model=AuthMessage)
async def logout(
    user: User = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
) -> AuthMessage:
    result = await auth.logout(user)
    _raise_for_error(result)
    return AuthMessage()


@router.post("/reset-password", response_model=AuthMessage)
async def reset_password(
    payload: ResetPasswordRequest,
    auth: AuthService = Depends(get_auth_service),
) -> AuthMessage:
    result = await auth.reset_password(payload.email)
    _raise_for_error(result)
    return AuthMessage()


@router.post("/reset-password/confirm", response_model=AuthMessage)
async def confirm_password_reset(
    payload: ResetPasswordConfirm,
    auth: AuthService = Depends(get_auth_service),
) -> AuthMessage:
    result = await auth.confirm_password_reset(payload.token, payload.new_password)
    _raise_for_error(result)
    return AuthMessage()


@router.get("/me", response_model=AuthState)
async def read_current_user(
    user: User = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
) -> AuthState:
    return AuthState(user=UserRead.model_validate(user), loading=auth.loading)
