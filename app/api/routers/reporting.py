from datetime import datetime

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_studio, require_user
from app.core.app_config import get_app_json_config
from app.core.config import get_settings
from app.schemas.reporting import DashboardSummary, SessionSummary, UpcomingSessionItem
from app.schemas.session import SessionRead
from app.services.format_service import (
    format_currency,
    format_date_time,
    get_payment_status_label,
    get_session_type_label,
    get_status_label,
)
from app.services.stats_service import calculate_dashboard_stats, get_upcoming_sessions, summarize_sessions
from app.services.studio_service import PhotoStudioService

router = APIRouter(prefix="/reporting", tags=["reporting"], dependencies=[Depends(require_user)])


def _upcoming_item(session: SessionRead) -> UpcomingSessionItem:
    return UpcomingSessionItem(
        id=session.id,
        client_id=session.client_id,
        client_name=session.client_name,
        type=session.type,
        type_label=get_session_type_label(session.type.value),
        date=session.date,
        time=session.time,
        when=format_date_time(session.date, session.time),
        value=session.value,
        value_display=format_currency(session.value),
        status=session.status,
        status_label=get_status_label(session.status.value),
        payment_status=session.payment_status,
        payment_status_label=get_payment_status_label(session.payment_status.value),
    )


@router.get("/dashboard", response_model=DashboardSummary)
async def get_dashboard_summary(
    limit: int | None = Query(default=None, ge=1, le=50),
    studio: PhotoStudioService = Depends(get_studio),
) -> DashboardSummary:
    now = datetime.now()
    clients, sessions = studio.clients, studio.sessions

    stats = calculate_dashboard_stats(clients, sessions, now)
    upcoming = get_upcoming_sessions(sessions, now, limit or get_settings().upcoming_sessions_limit)

    branding = get_app_json_config()
    return DashboardSummary(
        studio_name=branding.studio.studio_name,
        workspace_subtitle=branding.workspace_subtitle,
        contact_email=branding.studio.contact_email,
        contact_phone=branding.studio.contact_phone,
        upcoming_title=branding.dashboard.upcoming_title,
        reference_date=now.date(),
        stats=stats,
        revenue_this_month_display=format_currency(stats.revenue_this_month),
        pending_payments_display=format_currency(stats.pending_payments),
        upcoming_sessions=[_upcoming_item(session) for session in upcoming],
    )


@router.get("/upcoming", response_model=list[UpcomingSessionItem])
async def list_upcoming_sessions(
    limit: int | None = Query(default=None, ge=1, le=50),
    studio: PhotoStudioService = Depends(get_studio),
) -> list[UpcomingSessionItem]:
    upcoming = get_upcoming_sessions(studio.sessions, datetime.now(), limit or get_settings().upcoming_sessions_limit)
    return [_upcoming_item(session) for session in upcoming]


@router.get("/sessions-summary", response_model=SessionSummary)
async def get_sessions_summary(studio: PhotoStudioService = Depends(get_studio)) -> SessionSummary:
    return summarize_sessions(studio.sessions)
