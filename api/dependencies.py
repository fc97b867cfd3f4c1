from __future__ import annotations

from fastapi import Request

from api.services.sessions import SessionStore


def get_store(request: Request) -> SessionStore:
    return request.app.state.store
