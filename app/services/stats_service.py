from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime

from app.models.photo_session import PaymentStatus, SessionStatus
from app.schemas.client import ClientRead
from app.schemas.reporting import DashboardStats, SessionSummary
from app.schemas.session import SessionRead


def _reference_date(now: datetime | date) -> date:
    return now.date() if isinstance(now, datetime) else now


def calculate_dashboard_stats(
    clients: Sequence[ClientRead],
    sessions: Iterable[SessionRead],
    now: datetime | date,
) -> DashboardStats:
    """Aggregate dashboard figures for the calendar month containing ``now``.

    Revenue only counts fully paid sessions of the month, while pending
    payments span every month. Amounts are summed unrounded.
    """
    today = _reference_date(now)
    sessions = list(sessions)

    sessions_this_month = [
        session
        for session in sessions
        if session.date.month == today.month and session.date.year == today.year
    ]
    revenue_this_month = sum(
        (session.value for session in sessions_this_month if session.payment_status == PaymentStatus.PAGO),
        0.0,
    )
    pending_payments = sum(
        (session.value for session in sessions if session.payment_status == PaymentStatus.PENDENTE),
        0.0,
    )

    return DashboardStats(
        total_clients=len(clients),
        sessions_this_month=len(sessions_this_month),
        revenue_this_month=revenue_this_month,
        pending_payments=pending_payments,
    )


def get_upcoming_sessions(
    sessions: Iterable[SessionRead],
    now: datetime | date,
    limit: int = 5,
) -> list[SessionRead]:
    """Return the next non-cancelled sessions from ``now`` on, earliest first."""
    today = _reference_date(now)
    upcoming = [
        session
        for session in sessions
        if session.date >= today and session.status != SessionStatus.CANCELADO
    ]
    upcoming.sort(key=lambda session: session.date)
    return upcoming[: max(limit, 0)]


def filter_sessions(
    sessions: Iterable[SessionRead],
    status: SessionStatus | None = None,
    payment_status: PaymentStatus | None = None,
) -> list[SessionRead]:
    selected = [
        session
        for session in sessions
        if (status is None or session.status == status)
        and (payment_status is None or session.payment_status == payment_status)
    ]
    selected.sort(key=lambda session: session.date)
    return selected


def summarize_sessions(sessions: Iterable[SessionRead]) -> SessionSummary:
    total = completed = active = cancelled = 0
    for session in sessions:
        total += 1
        if session.status == SessionStatus.REALIZADO:
            completed += 1
        elif session.status == SessionStatus.CANCELADO:
            cancelled += 1
        else:
            active += 1

    return SessionSummary(total=total, completed=completed, active=active, cancelled=cancelled)
