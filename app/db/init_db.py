import logging
import sqlite3
from datetime import datetime
from pathlib import Path

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine

from app.core.config import get_settings
from app.db.base import Base
from app.db.session import engine as default_engine
from app.models import Client, PhotoSession, User  # noqa: F401
from app.services.audit_log_service import log_event

logger = logging.getLogger(__name__)

# Columns the running code reads; an older SQLite file missing any of them is rebuilt.
EXPECTED_COLUMNS = {
    Client.__tablename__: {column.key for column in Client.__table__.columns},
    PhotoSession.__tablename__: {column.key for column in PhotoSession.__table__.columns},
    User.__tablename__: {column.key for column in User.__table__.columns},
}


def sqlite_file_path(url: URL) -> Path | None:
    if url.get_backend_name() != "sqlite" or not url.database or url.database == ":memory:":
        return None

    path = Path(url.database).expanduser()
    return path if path.is_absolute() else Path.cwd() / path


def backup_sqlite_file(db_path: Path, keep_last: int) -> Path | None:
    """Copy the studio database next to itself under ``backups/``, pruning old copies."""
    if not db_path.exists():
        return None

    backup_dir = db_path.parent / "backups"
    backup_dir.mkdir(parents=True, exist_ok=True)
    suffix = db_path.suffix or ".db"
    backup_path = backup_dir / f"{db_path.stem}_{datetime.now():%Y%m%d_%H%M%S}{suffix}"

    try:
        with sqlite3.connect(db_path, timeout=30) as source, sqlite3.connect(backup_path, timeout=30) as target:
            source.backup(target)
    except sqlite3.Error as exc:
        logger.warning("Startup backup of %s failed: %s", db_path, exc)
        log_event("startup_backup_error", source=db_path.as_posix(), error=exc)
        return None

    if keep_last > 0:
        backups = sorted(backup_dir.glob(f"{db_path.stem}_*{suffix}"), reverse=True)
        for stale in backups[keep_last:]:
            stale.unlink(missing_ok=True)

    log_event("startup_backup", source=db_path.as_posix(), backup=backup_path.as_posix())
    return backup_path


async def has_schema_mismatch(engine: AsyncEngine) -> bool:
    async with engine.connect() as conn:
        for table, expected in EXPECTED_COLUMNS.items():
            result = await conn.exec_driver_sql(f"PRAGMA table_info({table})")
            columns = {row[1] for row in result.fetchall()}
            if columns and not expected.issubset(columns):
                logger.warning("Table %s is missing columns %s", table, sorted(expected - columns))
                return True
    return False


async def init_db(engine: AsyncEngine = default_engine) -> None:
    settings = get_settings()
    db_path = sqlite_file_path(engine.url)

    if db_path is not None and settings.backup_on_startup:
        backup_sqlite_file(db_path, settings.backup_keep_last)

    should_reset = settings.reset_db_on_startup
    if not should_reset and db_path is not None and settings.auto_reset_sqlite_on_schema_mismatch:
        should_reset = await has_schema_mismatch(engine)
        if should_reset:
            log_event("schema_reset", database=engine.url.render_as_string(hide_password=True))

    async with engine.begin() as conn:
        if should_reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
