"""Health endpoint."""

from fastapi import APIRouter

from sitefront.engine.modules import MODULE_REGISTRY

router = APIRouter()


@router.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok", "modules": sorted(MODULE_REGISTRY)}
