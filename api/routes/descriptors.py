from __future__ import annotations

from fastapi import APIRouter, Depends

from api.dependencies import get_store
from api.schemas import DescriptorListResponse, DescriptorPayload, RemovalResponse
from api.services.sessions import SessionStore

router = APIRouter(prefix="/descriptors", tags=["descriptors"])


@router.get("", response_model=DescriptorListResponse)
async def list_descriptors(store: SessionStore = Depends(get_store)) -> DescriptorListResponse:
    return DescriptorListResponse(action_types=sorted(store.registry))


@router.put("/{action_type}", response_model=DescriptorListResponse)
async def register_descriptor(
    action_type: str,
    payload: DescriptorPayload,
    store: SessionStore = Depends(get_store),
) -> DescriptorListResponse:
    """
    Register or replace the descriptor for `action_type`. Existing sessions keep the descriptor they were created with.
    """
    store.registry.register(action_type, payload.to_descriptor())
    return DescriptorListResponse(action_types=sorted(store.registry))


@router.delete("/{action_type}", response_model=RemovalResponse)
async def unregister_descriptor(action_type: str, store: SessionStore = Depends(get_store)) -> RemovalResponse:
    return RemovalResponse(removed=store.registry.unregister(action_type))
