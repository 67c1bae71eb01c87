"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/database", status_code=status.HTTP_200_OK)
def check_database() -> dict:
    """Check database connection and the core tables."""
    from ...data.catalog_repository import TEMPLATES
    from ...db.store import get_store
    from ...errors import StoreError

    try:
        store = get_store()
    except StoreError as exc:
        return {
            "configured": False,
            "message": str(exc),
        }

    try:
        templates = store.select(TEMPLATES, columns="id")
        return {
            "configured": True,
            "connected": True,
            "templates_count": len(templates),
            "message": f"Database connected. Found {len(templates)} templates.",
        }
    except StoreError as exc:
        return {
            "configured": True,
            "connected": False,
            "error": str(exc),
            "message": f"Database connection error: {exc}",
        }
