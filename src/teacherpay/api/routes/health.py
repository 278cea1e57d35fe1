"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request

from teacherpay.orchestration.storage_router import is_ready

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


@router.get("/ready")
async def ready(request: Request) -> dict:
    """Report which stores can take writes right now."""
    storage = request.app.state.router
    primary = await is_ready(storage.primary)
    secondary = await is_ready(storage.secondary)
    return {
        "status": "ready" if primary or secondary else "unavailable",
        "stores": {
            "primary": {"name": storage.primary.name, "ready": primary},
            "secondary": {"name": storage.secondary.name, "ready": secondary},
        },
    }
