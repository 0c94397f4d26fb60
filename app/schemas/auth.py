from datetime import datetime

from pydantic import BaseModel, ConfigDict


class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    email: str
    password: str
    display_name: str = ""


class ResetPasswordRequest(BaseModel):
    email: str


class UserRead(BaseModel):
    id: str
    email: str
    display_name: str
    disabled: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(BaseModel):
    user: UserRead
    access_token: str
    token_type: str = "bearer"


class AuthState(BaseModel):
    user: UserRead | None = None
    loading: bool = False


class ResetPasswordConfirm(BaseModel):
    token: str
    new_password: str


class AuthMessage(BaseModel):
    error: str | None = None
