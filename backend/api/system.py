"""System API — health check."""

from fastapi import APIRouter

from backend.config import settings

router = APIRouter(prefix="/api/system", tags=["system"])


@router.get("/health")
def health_check():
    return {"status": "ok", "currency": settings.currency}
