"""Master API router: mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from vectoredit.api import document, edit, health, merge, simplify, viewbox

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(document.router)
api_router.include_router(edit.router)
api_router.include_router(simplify.router)
api_router.include_router(merge.router)
api_router.include_router(viewbox.router)
