from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.document_store import DocumentStore, StorageError
from app.models.photo_session import PaymentStatus, SessionStatus
from app.schemas.client import ClientCreate, ClientRead, ClientUpdate
from app.schemas.session import SessionCreate, SessionRead, SessionUpdate
from app.services.audit_log_service import log_event
from app.services.validation_service import ensure_status_transition

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT_NAME = "Cliente não encontrado"

OPERATION_ERRORS = {
    "load": "Falha ao carregar dados. Por favor, tente novamente.",
    "load_client_sessions": "Falha ao carregar sessões do cliente. Por favor, tente novamente.",
    "add_client": "Falha ao adicionar cliente. Por favor, tente novamente.",
    "update_client": "Falha ao atualizar cliente. Por favor, tente novamente.",
    "delete_client": "Falha ao excluir cliente. Por favor, tente novamente.",
    "add_session": "Falha ao adicionar sessão. Por favor, tente novamente.",
    "update_session": "Falha ao atualizar sessão. Por favor, tente novamente.",
    "update_status": "Falha ao atualizar status. Por favor, tente novamente.",
    "update_payment": "Falha ao atualizar pagamento. Por favor, tente novamente.",
    "delete_session": "Falha ao excluir sessão. Por favor, tente novamente.",
}


class StudioError(Exception):
    """A storage failure translated into the user-facing message of its operation."""

    def __init__(self, message: str, code: str = "unknown") -> None:
        self.message = message
        self.code = code
        super().__init__(message)


def _replace_by_id(items: list[Any], item: Any) -> list[Any]:
    replaced = False
    result = []
    for current in items:
        if current.id == item.id:
            result.append(item)
            replaced = True
        else:
            result.append(current)
    if not replaced:
        result.append(item)
    return result


class PhotoStudioService:
    """Owns the in-memory client and session lists and keeps them in step with storage.

    Every mutation awaits the storage call, reads the entity back and then
    swaps the affected cache list in a single assignment, so readers never
    observe a half-applied change.
    """

    def __init__(self, clients_store: DocumentStore, sessions_store: DocumentStore) -> None:
        self._clients_store = clients_store
        self._sessions_store = sessions_store
        self.clients: list[ClientRead] = []
        self.sessions: list[SessionRead] = []
        self.loading = False
        self.last_error: str | None = None

    @classmethod
    def from_session_factory(cls, session_factory: async_sessionmaker[AsyncSession]) -> PhotoStudioService:
        return cls(
            DocumentStore(session_factory, "clients"),
            DocumentStore(session_factory, "sessions"),
        )

    @asynccontextmanager
    async def _operation(self, name: str) -> AsyncIterator[None]:
        self.loading = True
        try:
            yield
        except StorageError as exc:
            message = OPERATION_ERRORS[name]
            logger.exception("Studio operation %s failed (%s)", name, exc.code)
            self.last_error = message
            raise StudioError(message, code=exc.code) from exc
        finally:
            self.loading = False

    async def _read_client(self, client_id: str) -> ClientRead:
        document = await self._clients_store.get_by_id(client_id)
        if document is None:
            raise StorageError("not-found", f"clients/{client_id} não encontrado")
        return ClientRead.model_validate(document)

    async def _read_session(self, session_id: str) -> SessionRead:
        document = await self._sessions_store.get_by_id(session_id)
        if document is None:
            raise StorageError("not-found", f"sessions/{session_id} não encontrado")
        return SessionRead.model_validate(document)

    async def _resolve_client_name(self, client_id: str) -> str:
        document = await self._clients_store.get_by_id(client_id)
        return document["name"] if document is not None else UNKNOWN_CLIENT_NAME

    async def load(self) -> None:
        async with self._operation("load"):
            clients = [ClientRead.model_validate(doc) for doc in await self._clients_store.list_all(order_by="name")]
            sessions = [SessionRead.model_validate(doc) for doc in await self._sessions_store.list_all(order_by="date")]
            self.clients = clients
            self.sessions = sessions
            self.last_error = None
        logger.info("Loaded %s clients and %s sessions", len(clients), len(sessions))

    # Clients

    def list_clients(self) -> list[ClientRead]:
        return sorted(self.clients, key=lambda client: client.name.lower())

    def get_client(self, client_id: str) -> ClientRead | None:
        return next((client for client in self.clients if client.id == client_id), None)

    async def add_client(self, data: ClientCreate) -> ClientRead:
        async with self._operation("add_client"):
            client_id = await self._clients_store.create(data.model_dump())
            client = await self._read_client(client_id)
            self.clients = [*self.clients, client]

        log_event("create_client", client_id=client.id)
        return client

    async def update_client(self, client_id: str, data: ClientUpdate) -> ClientRead:
        updates = data.model_dump(exclude_unset=True)
        async with self._operation("update_client"):
            await self._clients_store.update(client_id, updates)
            client = await self._read_client(client_id)
            self.clients = _replace_by_id(self.clients, client)
            if "name" in updates:
                await self.propagate_client_name(client_id, client.name)

        log_event("update_client", client_id=client_id, fields=",".join(sorted(updates)))
        return client

    async def propagate_client_name(self, client_id: str, new_name: str) -> list[SessionRead]:
        """Copy a client's new name into every session that caches it.

        Each session is updated on its own. The first failure stops the
        propagation and is raised; sessions already renamed keep the new
        name, and the cache reflects exactly those.
        """
        documents = await self._sessions_store.list_where("client_id", client_id, order_by="date")
        applied: dict[str, SessionRead] = {}
        try:
            for document in documents:
                session_id = document["id"]
                await self._sessions_store.update(session_id, {"client_name": new_name})
                applied[session_id] = await self._read_session(session_id)
        finally:
            if applied:
                self.sessions = [applied.get(session.id, session) for session in self.sessions]
                log_event("propagate_client_name", client_id=client_id, sessions=len(applied))

        return list(applied.values())

    async def delete_client(self, client_id: str) -> None:
        async with self._operation("delete_client"):
            await self._read_client(client_id)
            documents = await self._sessions_store.list_where("client_id", client_id, order_by="date")

            deleted: set[str] = set()
            try:
                for document in documents:
                    await self._sessions_store.delete(document["id"])
                    deleted.add(document["id"])
            finally:
                if deleted:
                    self.sessions = [session for session in self.sessions if session.id not in deleted]

            await self._clients_store.delete(client_id)
            self.clients = [client for client in self.clients if client.id != client_id]

        log_event("delete_client", client_id=client_id, sessions=len(deleted))

    # Sessions

    def list_sessions(self) -> list[SessionRead]:
        return sorted(self.sessions, key=lambda session: session.date)

    def get_session(self, session_id: str) -> SessionRead | None:
        return next((session for session in self.sessions if session.id == session_id), None)

    async def list_client_sessions(self, client_id: str) -> list[SessionRead]:
        async with self._operation("load_client_sessions"):
            documents = await self._sessions_store.list_where("client_id", client_id, order_by="date")
        return [SessionRead.model_validate(document) for document in documents]

    async def add_session(self, data: SessionCreate) -> SessionRead:
        async with self._operation("add_session"):
            payload = data.model_dump()
            payload["client_name"] = await self._resolve_client_name(data.client_id)
            payload["status"] = SessionStatus.AGENDADO
            payload["payment_status"] = PaymentStatus.PENDENTE

            session_id = await self._sessions_store.create(payload)
            session = await self._read_session(session_id)
            self.sessions = [*self.sessions, session]

        log_event("create_session", session_id=session.id, client_id=session.client_id)
        return session

    async def update_session(self, session_id: str, data: SessionUpdate) -> SessionRead:
        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        async with self._operation("update_session"):
            if "client_id" in updates:
                updates["client_name"] = await self._resolve_client_name(updates["client_id"])

            await self._sessions_store.update(session_id, updates)
            session = await self._read_session(session_id)
            self.sessions = _replace_by_id(self.sessions, session)

        log_event("update_session", session_id=session_id, fields=",".join(sorted(updates)))
        return session

    async def update_session_status(self, session_id: str, status: SessionStatus) -> SessionRead:
        async with self._operation("update_status"):
            current = await self._read_session(session_id)
            ensure_status_transition(current.status, status)

            await self._sessions_store.update(session_id, {"status": status})
            session = await self._read_session(session_id)
            self.sessions = _replace_by_id(self.sessions, session)

        log_event("update_session_status", session_id=session_id, status=session.status.value)
        return session

    async def update_payment_status(self, session_id: str, payment_status: PaymentStatus) -> SessionRead:
        async with self._operation("update_payment"):
            await self._sessions_store.update(session_id, {"payment_status": payment_status})
            session = await self._read_session(session_id)
            self.sessions = _replace_by_id(self.sessions, session)

        log_event("update_payment_status", session_id=session_id, payment_status=session.payment_status.value)
        return session

    async def delete_session(self, session_id: str) -> None:
        async with self._operation("delete_session"):
            await self._sessions_store.delete(session_id)
            self.sessions = [session for session in self.sessions if session.id != session_id]

        log_event("delete_session", session_id=session_id)
