import datetime as dt

from pydantic import BaseModel

from app.models.photo_session import PaymentStatus, SessionStatus, SessionType


class DashboardStats(BaseModel):
    total_clients: int
    sessions_this_month: int
    revenue_this_month: float
    pending_payments: float


class SessionSummary(BaseModel):
    total: int
    completed: int
    active: int
    cancelled: int


class UpcomingSessionItem(BaseModel):
    id: str
    client_id: str
    client_name: str
    type: SessionType
    type_label: str
    date: dt.date
    time: str
    when: str
    value: float
    value_display: str
    status: SessionStatus
    status_label: str
    payment_status: PaymentStatus
    payment_status_label: str


class DashboardSummary(BaseModel):
    studio_name: str
    workspace_subtitle: str
    contact_email: str
    contact_phone: str
    upcoming_title: str
    reference_date: dt.date
    stats: DashboardStats
    revenue_this_month_display: str
    pending_payments_display: str
    upcoming_sessions: list[UpcomingSessionItem]
