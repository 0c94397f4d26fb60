from __future__ import annotations

import re

from app.models.photo_session import SessionStatus

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
PHONE_PATTERN = re.compile(r"\(\d{2}\)\s\d{4,5}-\d{4}")

# Terminal statuses have no outgoing transitions.
STATUS_TRANSITIONS: dict[SessionStatus, set[SessionStatus]] = {
    SessionStatus.AGENDADO: {SessionStatus.CONFIRMADO, SessionStatus.CANCELADO},
    SessionStatus.CONFIRMADO: {SessionStatus.REALIZADO, SessionStatus.CANCELADO},
    SessionStatus.REALIZADO: set(),
    SessionStatus.CANCELADO: set(),
}


class InvalidStatusTransition(ValueError):
    def __init__(self, current: SessionStatus, target: SessionStatus) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Não é possível alterar o status de '{current.value}' para '{target.value}'.")


def validate_email(email: str) -> bool:
    return EMAIL_PATTERN.fullmatch(email) is not None


def validate_phone(phone: str) -> bool:
    # Loose on purpose: anything with 10+ characters passes.
    return PHONE_PATTERN.fullmatch(phone) is not None or len(phone) >= 10


def can_transition(current: SessionStatus, target: SessionStatus) -> bool:
    return current == target or target in STATUS_TRANSITIONS[current]


def ensure_status_transition(current: SessionStatus | str, target: SessionStatus | str) -> None:
    current_status = SessionStatus(current)
    target_status = SessionStatus(target)
    if not can_transition(current_status, target_status):
        raise InvalidStatusTransition(current_status, target_status)
