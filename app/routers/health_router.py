from fastapi import APIRouter, HTTPException, Request
from app.utils.logger import logger

router = APIRouter()

@router.get("/live")
async def liveness_check():
    logger.debug("Liveness check passed")
    return {"status": "alive"}

@router.get("/ready")
async def readiness_check(request: Request):
    context = getattr(request.app.state, "context", None)
    if context is None or not context.issuer.is_ready:
        logger.error("Readiness failed: signed URL issuer not ready")
        raise HTTPException(status_code=503, detail="Signed URL issuer unavailable")

    loaded_at = context.issuer.key_loaded_at
    return {"status": "ready", "key_loaded_at": loaded_at.isoformat()}
