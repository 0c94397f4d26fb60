from __future__ import annotations

import re
from datetime import date, datetime

DATE_NOT_PROVIDED = "Data não informada"
INVALID_DATE = "Data inválida"

_PT_BR_SEPARATORS = str.maketrans(",.", ".,")

SESSION_TYPE_LABELS = {
    "newborn": "Newborn",
    "gestante": "Gestante",
    "casamento": "Casamento",
    "corporativo": "Corporativo",
    "familia": "Família",
    "evento": "Evento",
    "produto": "Produto",
}

STATUS_LABELS = {
    "agendado": "Agendado",
    "confirmado": "Confirmado",
    "realizado": "Realizado",
    "cancelado": "Cancelado",
}

PAYMENT_STATUS_LABELS = {
    "pendente": "Pendente",
    "sinal": "50% Pago",
    "pago": "Pago Completo",
}


def format_currency(value: float) -> str:
    """Render an amount in Brazilian Real, e.g. ``R$ 1.234,56``."""
    amount = f"{abs(value):,.2f}".translate(_PT_BR_SEPARATORS)
    sign = "-" if value < 0 else ""
    return f"{sign}R$\xa0{amount}"


def parse_calendar_date(value: str | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        return datetime.fromisoformat(text).date()


def format_date(value: str | date) -> str:
    return parse_calendar_date(value).strftime("%d/%m/%Y")


def format_date_safe(value: str | date | None) -> str:
    if not value:
        return DATE_NOT_PROVIDED

    try:
        return format_date(value)
    except (TypeError, ValueError):
        return INVALID_DATE


def format_date_time(value: str | date | None, time: str) -> str:
    return f"{format_date_safe(value)} às {time}"


def format_phone(value: str) -> str:
    digits = re.sub(r"\D", "", value)
    if len(digits) <= 10:
        return re.sub(r"^(\d{2})(\d{4})(\d{4})$", r"(\1) \2-\3", digits)
    return re.sub(r"^(\d{2})(\d{5})(\d{4})$", r"(\1) \2-\3", digits)


def get_session_type_label(session_type: str) -> str:
    return SESSION_TYPE_LABELS.get(session_type, session_type)


def get_status_label(status: str) -> str:
    return STATUS_LABELS.get(status, status)


def get_payment_status_label(payment_status: str) -> str:
    return PAYMENT_STATUS_LABELS.get(payment_status, payment_status)
