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
from app.schemas.client import ClientCreate, ClientRead, ClientUpdate
from app.schemas.reporting import DashboardStats, DashboardSummary, SessionSummary, UpcomingSessionItem
from app.schemas.session import (
    PaymentStatusUpdate,
    SessionCreate,
    SessionRead,
    SessionStatusUpdate,
    SessionUpdate,
)

__all__ = [
    "AuthMessage",
    "AuthResponse",
    "AuthState",
    "ClientCreate",
    "ClientRead",
    "ClientUpdate",
    "DashboardStats",
    "DashboardSummary",
    "LoginRequest",
    "PaymentStatusUpdate",
    "RegisterRequest",
    "ResetPasswordConfirm",
    "ResetPasswordRequest",
    "SessionCreate",
    "SessionRead",
    "SessionStatusUpdate",
    "SessionSummary",
    "SessionUpdate",
    "UpcomingSessionItem",
    "UserRead",
]
