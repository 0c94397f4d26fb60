from datetime import date, datetime
from typing import AsyncGenerator, Callable
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import get_settings
from app.db.base import Base
from app.db.session import build_engine, build_session_factory
from app.models.photo_session import PaymentStatus, SessionStatus, SessionType
from app.schemas.client import ClientRead
from app.schemas.session import SessionRead
from app.services import audit_log_service
from app.services.auth_service import AuthService
from app.services.studio_service import PhotoStudioService
from main import app


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def isolated_audit_log(tmp_path, monkeypatch):
    log_dir = tmp_path / "logs"
    monkeypatch.setattr(audit_log_service, "LOG_DIR", log_dir)
    monkeypatch.setattr(audit_log_service, "LOG_FILE", log_dir / "studio.log")
    return log_dir / "studio.log"


@pytest.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    db_path = tmp_path / "test.db"
    db_url = f"sqlite+aiosqlite:///{db_path}"

    engine = build_engine(db_url)
    factory = build_session_factory(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield factory

    await engine.dispose()


@pytest.fixture
async def studio(session_factory: async_sessionmaker[AsyncSession]) -> PhotoStudioService:
    service = PhotoStudioService.from_session_factory(session_factory)
    await service.load()
    return service


@pytest.fixture
def auth_service(session_factory: async_sessionmaker[AsyncSession]) -> AuthService:
    return AuthService(session_factory, get_settings())


@pytest.fixture
async def client(
    studio: PhotoStudioService,
    auth_service: AuthService,
) -> AsyncGenerator[AsyncClient, None]:
    app.state.studio = studio
    app.state.auth = auth_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as test_client:
        yield test_client


@pytest.fixture
async def auth_headers(client: AsyncClient) -> dict[str, str]:
    response = await client.post(
        "/api/v1/auth/register",
        json={"email": "estudio@example.com", "password": "segredo123", "display_name": "Equipe"},
    )
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def make_client() -> Callable[..., ClientRead]:
    def _make(name: str = "Ana") -> ClientRead:
        return ClientRead(
            id=uuid4().hex,
            name=name,
            email=f"{name.lower()}@example.com",
            phone="(11) 98765-4321",
            created_at=datetime(2026, 1, 1, 9, 0),
            updated_at=datetime(2026, 1, 1, 9, 0),
        )

    return _make


@pytest.fixture
def make_session() -> Callable[..., SessionRead]:
    def _make(
        session_date: date,
        *,
        status: SessionStatus = SessionStatus.AGENDADO,
        payment_status: PaymentStatus = PaymentStatus.PENDENTE,
        value: float = 100.0,
        client_name: str = "Ana",
    ) -> SessionRead:
        return SessionRead(
            id=uuid4().hex,
            client_id="cliente-1",
            client_name=client_name,
            type=SessionType.FAMILIA,
            date=session_date,
            time="10:00",
            duration=2,
            value=value,
            status=status,
            payment_status=payment_status,
            created_at=datetime(2026, 1, 1, 9, 0),
            updated_at=datetime(2026, 1, 1, 9, 0),
        )

    return _make
