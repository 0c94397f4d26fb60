import logging
from datetime import datetime
from pathlib import Path
from typing import Any

LOG_DIR = Path("storage/logs")
LOG_FILE = LOG_DIR / "studio.log"

logger = logging.getLogger("studio.audit")


def format_fields(**fields: Any) -> str:
    return ", ".join(f"{key}={value}" for key, value in fields.items())


def log_event(action: str, **fields: Any) -> None:
    """Append ``[timestamp] action: key=value, ...`` to the studio audit file."""
    details = format_fields(**fields)
    timestamp = datetime.utcnow().isoformat(timespec="seconds")

    LOG_DIR.mkdir(parents=True, exist_ok=True)
    with LOG_FILE.open("a", encoding="utf-8") as stream:
        stream.write(f"[{timestamp}] {action}: {details}\n")
    logger.info("%s: %s", action, details)


def read_recent_logs(limit: int = 200, action: str | None = None) -> list[str]:
    if limit <= 0 or not LOG_FILE.exists():
        return []

    lines = LOG_FILE.read_text(encoding="utf-8").splitlines()
    if action:
        marker = f"] {action}:"
        lines = [line for line in lines if marker in line]
    return lines[-limit:]
