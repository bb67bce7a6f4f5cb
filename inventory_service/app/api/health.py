from __future__ import annotations

from fastapi import APIRouter

from .routing import ErrorBoundaryRoute


router = APIRouter(route_class=ErrorBoundaryRoute)


@router.get("/health", summary="헬스 체크")
async def health() -> dict[str, str]:
    return {"status": "ok"}
