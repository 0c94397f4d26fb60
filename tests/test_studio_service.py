from datetime import date, datetime, timedelta

import pytest
from sqlalchemy import update

from app.db.document_store import DocumentStore, StorageError
from app.models.photo_session import PaymentStatus, PhotoSession, SessionStatus, SessionType
from app.schemas.client import ClientCreate, ClientUpdate
from app.schemas.session import SessionCreate, SessionUpdate
from app.services.studio_service import UNKNOWN_CLIENT_NAME, PhotoStudioService, StudioError
from app.services.validation_service import InvalidStatusTransition


class FlakyDocumentStore(DocumentStore):
    """Fails the Nth update or delete with an ``unavailable`` error."""

    def __init__(self, session_factory, collection, fail_update_at=None, fail_delete_at=None):
        super().__init__(session_factory, collection)
        self.fail_update_at = fail_update_at
        self.fail_delete_at = fail_delete_at
        self.updates = 0
        self.deletes = 0

    async def update(self, doc_id, data):
        self.updates += 1
        if self.updates == self.fail_update_at:
            raise StorageError("unavailable", "conexão perdida")
        await super().update(doc_id, data)

    async def delete(self, doc_id):
        self.deletes += 1
        if self.deletes == self.fail_delete_at:
            raise StorageError("unavailable", "conexão perdida")
        await super().delete(doc_id)


def _client_payload(name: str = "Ana") -> ClientCreate:
    return ClientCreate(name=name, email=f"{name.split()[0].lower()}@example.com", phone="(11) 98765-4321")


def _session_payload(client_id: str, days_ahead: int = 1, value: float = 300.0) -> SessionCreate:
    return SessionCreate(
        client_id=client_id,
        type=SessionType.GESTANTE,
        date=date.today() + timedelta(days=days_ahead),
        time="14:00",
        value=value,
    )


async def _client_with_sessions(studio: PhotoStudioService, count: int = 3):
    client = await studio.add_client(_client_payload())
    sessions = [await studio.add_session(_session_payload(client.id, days_ahead=index + 1)) for index in range(count)]
    return client, sessions


@pytest.mark.anyio
async def test_load_reads_both_collections(session_factory, studio):
    await _client_with_sessions(studio, count=2)

    fresh = PhotoStudioService.from_session_factory(session_factory)
    await fresh.load()

    assert [client.name for client in fresh.clients] == ["Ana"]
    assert len(fresh.sessions) == 2
    assert fresh.loading is False
    assert fresh.last_error is None


@pytest.mark.anyio
async def test_add_client_and_list_sorted_by_name(studio):
    await studio.add_client(_client_payload("Carla"))
    await studio.add_client(_client_payload("bruno"))
    await studio.add_client(_client_payload("Ana"))

    assert [client.name for client in studio.list_clients()] == ["Ana", "bruno", "Carla"]


@pytest.mark.anyio
async def test_add_session_sets_defaults_and_client_name(studio):
    client = await studio.add_client(_client_payload("Ana"))

    session = await studio.add_session(_session_payload(client.id))

    assert session.client_name == "Ana"
    assert session.status == SessionStatus.AGENDADO
    assert session.payment_status == PaymentStatus.PENDENTE
    assert session.duration == 2
    assert studio.get_session(session.id) == session


@pytest.mark.anyio
async def test_add_session_for_unknown_client_uses_placeholder_name(studio):
    session = await studio.add_session(_session_payload("nao-existe"))

    assert session.client_name == UNKNOWN_CLIENT_NAME


@pytest.mark.anyio
async def test_rename_client_updates_every_session(studio):
    client, sessions = await _client_with_sessions(studio)

    updated = await studio.update_client(client.id, ClientUpdate(name="Ana Paula"))

    assert updated.name == "Ana Paula"
    assert {session.client_name for session in studio.sessions} == {"Ana Paula"}
    stored = await studio.list_client_sessions(client.id)
    assert [session.client_name for session in stored] == ["Ana Paula"] * len(sessions)


@pytest.mark.anyio
async def test_rename_caches_refreshed_session_timestamps(session_factory, studio):
    client, sessions = await _client_with_sessions(studio, count=2)
    long_ago = datetime(2020, 1, 1, 8, 0)
    async with session_factory() as db:
        await db.execute(update(PhotoSession).values(updated_at=long_ago))
        await db.commit()

    renamed = await studio.propagate_client_name(client.id, "Ana Paula")

    stored = {session.id: session for session in await studio.list_client_sessions(client.id)}
    assert {session.id for session in renamed} == {session.id for session in sessions}
    for session in [*renamed, *studio.sessions]:
        assert session.updated_at == stored[session.id].updated_at
        assert session.updated_at > long_ago


@pytest.mark.anyio
async def test_update_without_name_leaves_sessions_untouched(studio):
    client, _ = await _client_with_sessions(studio, count=1)

    updated = await studio.update_client(client.id, ClientUpdate(notes="Cliente antiga"))

    assert updated.notes == "Cliente antiga"
    assert studio.sessions[0].client_name == "Ana"


@pytest.mark.anyio
async def test_partial_rename_failure_keeps_applied_sessions(session_factory):
    sessions_store = FlakyDocumentStore(session_factory, "sessions", fail_update_at=2)
    studio = PhotoStudioService(DocumentStore(session_factory, "clients"), sessions_store)
    client, _ = await _client_with_sessions(studio)

    with pytest.raises(StudioError) as exc_info:
        await studio.update_client(client.id, ClientUpdate(name="Ana Paula"))

    assert exc_info.value.code == "unavailable"
    assert studio.last_error == "Falha ao atualizar cliente. Por favor, tente novamente."
    assert studio.loading is False

    stored = await sessions_store.list_where("client_id", client.id, order_by="date")
    assert [document["client_name"] for document in stored] == ["Ana Paula", "Ana", "Ana"]
    cached = studio.list_sessions()
    assert [session.client_name for session in cached] == ["Ana Paula", "Ana", "Ana"]
    assert studio.get_client(client.id).name == "Ana Paula"


@pytest.mark.anyio
async def test_delete_client_cascades_to_sessions(studio):
    client, _ = await _client_with_sessions(studio)
    other = await studio.add_client(_client_payload("Bia"))
    kept = await studio.add_session(_session_payload(other.id))

    await studio.delete_client(client.id)

    assert studio.get_client(client.id) is None
    assert [session.id for session in studio.sessions] == [kept.id]
    assert await studio.list_client_sessions(client.id) == []


@pytest.mark.anyio
async def test_failed_session_delete_keeps_client(session_factory):
    sessions_store = FlakyDocumentStore(session_factory, "sessions", fail_delete_at=2)
    studio = PhotoStudioService(DocumentStore(session_factory, "clients"), sessions_store)
    client, _ = await _client_with_sessions(studio)

    with pytest.raises(StudioError):
        await studio.delete_client(client.id)

    assert studio.last_error == "Falha ao excluir cliente. Por favor, tente novamente."
    assert studio.get_client(client.id) is not None
    assert len(studio.sessions) == 2
    assert len(await studio.list_client_sessions(client.id)) == 2


@pytest.mark.anyio
async def test_update_session_resolves_new_client_name(studio):
    ana, sessions = await _client_with_sessions(studio, count=1)
    bia = await studio.add_client(_client_payload("Bia"))

    updated = await studio.update_session(sessions[0].id, SessionUpdate(client_id=bia.id, value=420.0))

    assert updated.client_id == bia.id
    assert updated.client_name == "Bia"
    assert updated.value == 420.0
    assert updated.time == "14:00"


@pytest.mark.anyio
async def test_status_and_payment_updates(studio):
    _, sessions = await _client_with_sessions(studio, count=1)
    session_id = sessions[0].id

    confirmed = await studio.update_session_status(session_id, SessionStatus.CONFIRMADO)
    done = await studio.update_session_status(session_id, SessionStatus.REALIZADO)
    paid = await studio.update_payment_status(session_id, PaymentStatus.PAGO)
    back_to_deposit = await studio.update_payment_status(session_id, PaymentStatus.SINAL)

    assert confirmed.status == SessionStatus.CONFIRMADO
    assert done.status == SessionStatus.REALIZADO
    assert paid.payment_status == PaymentStatus.PAGO
    assert back_to_deposit.payment_status == PaymentStatus.SINAL

    with pytest.raises(InvalidStatusTransition):
        await studio.update_session_status(session_id, SessionStatus.CANCELADO)
    assert studio.get_session(session_id).status == SessionStatus.REALIZADO


@pytest.mark.anyio
async def test_missing_entities_raise_not_found(studio):
    with pytest.raises(StudioError) as update_error:
        await studio.update_client("nao-existe", ClientUpdate(notes="x"))
    assert update_error.value.code == "not-found"
    assert update_error.value.message == "Falha ao atualizar cliente. Por favor, tente novamente."

    with pytest.raises(StudioError) as delete_error:
        await studio.delete_session("nao-existe")
    assert delete_error.value.code == "not-found"


@pytest.mark.anyio
async def test_mutations_are_written_to_audit_log(studio, isolated_audit_log):
    client, sessions = await _client_with_sessions(studio, count=1)
    await studio.delete_session(sessions[0].id)

    content = isolated_audit_log.read_text(encoding="utf-8")
    assert f"create_client: client_id={client.id}" in content
    assert f"delete_session: session_id={sessions[0].id}" in content
