from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from api.routes import descriptors as descriptor_routes
from api.routes import sessions as session_routes
from api.services.sessions import SessionStore


def create_app(store: Optional[SessionStore] = None) -> FastAPI:
    app = FastAPI(
        title="Repetition Counter API",
        description="REST API wrapping repcount counters as in-memory counting sessions.",
        version="0.1.0",
    )
    app.state.store = store if store is not None else SessionStore()
    app.include_router(descriptor_routes.router)
    app.include_router(session_routes.router)

    @app.get("/", include_in_schema=False)
    async def redirect_to_docs() -> RedirectResponse:
        return RedirectResponse(url="/docs")

    return app


app = create_app()
