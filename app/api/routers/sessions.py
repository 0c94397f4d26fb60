from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.api.deps import get_studio, raise_studio_error, require_user
from app.models.photo_session import PaymentStatus, SessionStatus
from app.schemas.session import (
    PaymentStatusUpdate,
    SessionCreate,
    SessionRead,
    SessionStatusUpdate,
    SessionUpdate,
)
from app.services.stats_service import filter_sessions
from app.services.studio_service import PhotoStudioService, StudioError
from app.services.validation_service import InvalidStatusTransition

router = APIRouter(prefix="/sessions", tags=["sessions"], dependencies=[Depends(require_user)])


def _get_session_or_404(studio: PhotoStudioService, session_id: str) -> SessionRead:
    session = studio.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sessão não encontrada.")
    return session


def _ensure_client_exists(studio: PhotoStudioService, client_id: str) -> None:
    if studio.get_client(client_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cliente não encontrado.")


@router.post("", response_model=SessionRead, status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: SessionCreate,
    studio: PhotoStudioService = Depends(get_studio),
) -> SessionRead:
    _ensure_client_exists(studio, payload.client_id)
    try:
        return await studio.add_session(payload)
    except StudioError as exc:
        raise_studio_error(exc)


@router.get("", response_model=list[SessionRead])
async def list_sessions(
    status_filter: SessionStatus | None = Query(default=None, alias="status"),
    payment_status: PaymentStatus | None = Query(default=None),
    studio: PhotoStudioService = Depends(get_studio),
) -> list[SessionRead]:
    return filter_sessions(studio.sessions, status=status_filter, payment_status=payment_status)


@router.get("/{session_id}", response_model=SessionRead)
async def get_session(session_id: str, studio: PhotoStudioService = Depends(get_studio)) -> SessionRead:
    return _get_session_or_404(studio, session_id)


@router.patch("/{session_id}", response_model=SessionRead)
async def update_session(
    session_id: str,
    payload: SessionUpdate,
    studio: PhotoStudioService = Depends(get_studio),
) -> SessionRead:
    _get_session_or_404(studio, session_id)
    if payload.client_id is not None:
        _ensure_client_exists(studio, payload.client_id)

    try:
        return await studio.update_session(session_id, payload)
    except StudioError as exc:
        raise_studio_error(exc)


@router.patch("/{session_id}/status", response_model=SessionRead)
async def update_session_status(
    session_id: str,
    payload: SessionStatusUpdate,
    studio: PhotoStudioService = Depends(get_studio),
) -> SessionRead:
    _get_session_or_404(studio, session_id)
    try:
        return await studio.update_session_status(session_id, payload.status)
    except InvalidStatusTransition as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except StudioError as exc:
        raise_studio_error(exc)


@router.patch("/{session_id}/payment-status", response_model=SessionRead)
async def update_payment_status(
    session_id: str,
    payload: PaymentStatusUpdate,
    studio: PhotoStudioService = Depends(get_studio),
) -> SessionRead:
    _get_session_or_404(studio, session_id)
    try:
        return await studio.update_payment_status(session_id, payload.payment_status)
    except StudioError as exc:
        raise_studio_error(exc)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: str, studio: PhotoStudioService = Depends(get_studio)) -> Response:
    _get_session_or_404(studio, session_id)
    try:
        await studio.delete_session(session_id)
    except StudioError as exc:
        raise_studio_error(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
