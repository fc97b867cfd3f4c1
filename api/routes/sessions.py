from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from api.dependencies import get_store
from api.schemas import (
    ActionSignalPayload,
    PosePayload,
    PoseResponse,
    SessionCreateRequest,
    SessionStatus,
)
from api.services.sessions import SessionStore

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", response_model=SessionStatus, status_code=201)
async def create_session(payload: SessionCreateRequest, store: SessionStore = Depends(get_store)) -> SessionStatus:
    """
    Start counting `payload.action_type`. Fails with 404 when no descriptor is registered for it.
    """
    return store.create(payload.action_type).status()


@router.get("/{session_id}", response_model=SessionStatus)
async def get_session(session_id: str, store: SessionStore = Depends(get_store)) -> SessionStatus:
    return store.get(session_id).status()


@router.post("/{session_id}/poses", response_model=PoseResponse)
async def push_pose(
    session_id: str,
    payload: PosePayload,
    store: SessionStore = Depends(get_store),
) -> PoseResponse:
    """
    Feed one pose snapshot. Poses without a tracked joint are accepted and ignored.
    """
    counter = store.get(session_id).counter
    value = counter.register_pose(payload.to_snapshot())
    return PoseResponse(value=value, repetitions=counter.repetitions)


@router.post("/{session_id}/actions", response_model=SessionStatus)
async def push_action(
    session_id: str,
    payload: ActionSignalPayload,
    store: SessionStore = Depends(get_store),
) -> SessionStatus:
    session = store.get(session_id)
    session.counter.register_action_detection(payload.action_type)
    return session.status()


@router.post("/{session_id}/reset", response_model=SessionStatus)
async def reset_session(session_id: str, store: SessionStore = Depends(get_store)) -> SessionStatus:
    session = store.get(session_id)
    session.counter.reset()
    return session.status()


@router.delete("/{session_id}", status_code=204)
async def close_session(session_id: str, store: SessionStore = Depends(get_store)) -> Response:
    store.close(session_id)
    return Response(status_code=204)
