from __future__ import annotations

import enum
from datetime import date, datetime
from typing import Any

from sqlalchemy import Column, Date, DateTime, select
from sqlalchemy import Enum as SAEnum
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.sql import Select

from app.db.base import Base
from app.models.client import Client
from app.models.photo_session import PhotoSession

COLLECTIONS: dict[str, type[Base]] = {
    "clients": Client,
    "sessions": PhotoSession,
}

# Assigned by the store, never accepted from callers.
SERVER_FIELDS = {"id", "created_at", "updated_at"}

STORAGE_ERROR_MESSAGES = {
    "permission-denied": "Você não tem permissão para realizar esta operação.",
    "unauthenticated": "Você precisa estar logado para realizar esta operação.",
    "unavailable": "Serviço temporariamente indisponível. Tente novamente em alguns minutos.",
    "not-found": "Recurso não encontrado.",
    "invalid-argument": "Dados inválidos para esta operação.",
}


def describe_storage_error(code: str) -> str:
    return STORAGE_ERROR_MESSAGES.get(code, "Erro desconhecido")


class StorageError(Exception):
    def __init__(self, code: str, detail: str | None = None) -> None:
        self.code = code
        self.detail = detail
        super().__init__(detail or describe_storage_error(code))


def to_document(record: Base) -> dict[str, Any]:
    """Convert a stored record into a plain document with ISO date strings."""
    document: dict[str, Any] = {}
    for column in record.__table__.columns:
        value = getattr(record, column.key)
        if isinstance(value, datetime):
            value = value.isoformat(timespec="seconds")
        elif isinstance(value, date):
            value = value.isoformat()
        elif isinstance(value, enum.Enum):
            value = value.value
        document[column.key] = value
    return document


def _to_native(column: Column, value: Any) -> Any:
    if not isinstance(value, str):
        return value

    column_type = column.type
    if isinstance(column_type, SAEnum) and column_type.enum_class is not None:
        return column_type.enum_class(value)
    if isinstance(column_type, DateTime):
        return datetime.fromisoformat(value)
    if isinstance(column_type, Date):
        return date.fromisoformat(value)
    return value


class DocumentStore:
    """Per-collection document access: list, get, create, update, delete."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], collection: str) -> None:
        model = COLLECTIONS.get(collection)
        if model is None:
            raise StorageError("invalid-argument", f"Coleção desconhecida: {collection}")

        self.collection = collection
        self.model = model
        self._session_factory = session_factory

    def _column(self, field: str) -> Column:
        column = self.model.__table__.columns.get(field)
        if column is None:
            raise StorageError("invalid-argument", f"Campo desconhecido em {self.collection}: {field}")
        return column

    def _prepare(self, data: dict[str, Any]) -> dict[str, Any]:
        values: dict[str, Any] = {}
        for field, value in data.items():
            if field in SERVER_FIELDS:
                continue
            column = self._column(field)
            try:
                values[field] = _to_native(column, value)
            except ValueError as exc:
                raise StorageError("invalid-argument", f"Valor inválido para {field}: {value!r}") from exc
        return values

    async def _fetch(self, query: Select) -> list[dict[str, Any]]:
        try:
            async with self._session_factory() as session:
                records = list(await session.scalars(query))
        except SQLAlchemyError as exc:
            raise StorageError("unavailable", str(exc)) from exc
        return [to_document(record) for record in records]

    async def list_all(self, order_by: str = "created_at") -> list[dict[str, Any]]:
        query = select(self.model).order_by(self._column(order_by))
        return await self._fetch(query)

    async def list_where(self, field: str, value: Any, order_by: str = "created_at") -> list[dict[str, Any]]:
        column = self._column(field)
        query = select(self.model).where(column == _to_native(column, value)).order_by(self._column(order_by))
        return await self._fetch(query)

    async def get_by_id(self, doc_id: str) -> dict[str, Any] | None:
        try:
            async with self._session_factory() as session:
                record = await session.get(self.model, doc_id)
        except SQLAlchemyError as exc:
            raise StorageError("unavailable", str(exc)) from exc
        return to_document(record) if record is not None else None

    async def create(self, data: dict[str, Any]) -> str:
        values = self._prepare(data)
        try:
            async with self._session_factory() as session:
                record = self.model(**values)
                session.add(record)
                await session.flush()
                doc_id = record.id
                await session.commit()
        except SQLAlchemyError as exc:
            raise StorageError("unavailable", str(exc)) from exc
        return doc_id

    async def update(self, doc_id: str, data: dict[str, Any]) -> None:
        values = self._prepare(data)
        try:
            async with self._session_factory() as session:
                record = await session.get(self.model, doc_id)
                if record is None:
                    raise StorageError("not-found", f"{self.collection}/{doc_id} não encontrado")

                for field, value in values.items():
                    setattr(record, field, value)
                record.updated_at = datetime.utcnow()
                await session.commit()
        except SQLAlchemyError as exc:
            raise StorageError("unavailable", str(exc)) from exc

    async def delete(self, doc_id: str) -> None:
        try:
            async with self._session_factory() as session:
                record = await session.get(self.model, doc_id)
                if record is None:
                    raise StorageError("not-found", f"{self.collection}/{doc_id} não encontrado")

                await session.delete(record)
                await session.commit()
        except SQLAlchemyError as exc:
            raise StorageError("unavailable", str(exc)) from exc
