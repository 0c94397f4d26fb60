from app.services.audit_log_service import log_event, read_recent_logs
from app.services.format_service import format_currency, format_date_safe, format_date_time
from app.services.validation_service import validate_email, validate_phone

__all__ = [
    "format_currency",
    "format_date_safe",
    "format_date_time",
    "log_event",
    "read_recent_logs",
    "validate_email",
    "validate_phone",
]
