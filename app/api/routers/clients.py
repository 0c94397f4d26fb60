from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.api.deps import get_studio, raise_studio_error, require_user
from app.schemas.client import ClientCreate, ClientRead, ClientUpdate
from app.schemas.session import SessionRead
from app.services.studio_service import PhotoStudioService, StudioError

router = APIRouter(prefix="/clients", tags=["clients"], dependencies=[Depends(require_user)])


def _get_client_or_404(studio: PhotoStudioService, client_id: str) -> ClientRead:
    client = studio.get_client(client_id)
    if client is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Cliente não encontrado.")
    return client


@router.post("", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
async def create_client(
    payload: ClientCreate,
    studio: PhotoStudioService = Depends(get_studio),
) -> ClientRead:
    try:
        return await studio.add_client(payload)
    except StudioError as exc:
        raise_studio_error(exc)


@router.get("", response_model=list[ClientRead])
async def list_clients(
    q: str | None = Query(default=None),
    studio: PhotoStudioService = Depends(get_studio),
) -> list[ClientRead]:
    clients = studio.list_clients()
    if q:
        needle = q.strip().lower()
        clients = [
            client
            for client in clients
            if needle in client.name.lower() or needle in client.email.lower() or needle in client.phone
        ]
    return clients


@router.get("/{client_id}", response_model=ClientRead)
async def get_client(client_id: str, studio: PhotoStudioService = Depends(get_studio)) -> ClientRead:
    return _get_client_or_404(studio, client_id)


@router.get("/{client_id}/sessions", response_model=list[SessionRead])
async def list_client_sessions(client_id: str, studio: PhotoStudioService = Depends(get_studio)) -> list[SessionRead]:
    _get_client_or_404(studio, client_id)
    try:
        return await studio.list_client_sessions(client_id)
    except StudioError as exc:
        raise_studio_error(exc)


@router.patch("/{client_id}", response_model=ClientRead)
async def update_client(
    client_id: str,
    payload: ClientUpdate,
    studio: PhotoStudioService = Depends(get_studio),
) -> ClientRead:
    _get_client_or_404(studio, client_id)
    try:
        return await studio.update_client(client_id, payload)
    except StudioError as exc:
        raise_studio_error(exc)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(client_id: str, studio: PhotoStudioService = Depends(get_studio)) -> Response:
    _get_client_or_404(studio, client_id)
    try:
        await studio.delete_client(client_id)
    except StudioError as exc:
        raise_studio_error(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
