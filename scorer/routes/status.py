from fastapi import APIRouter
import time

from scorer.services.supabase_client import is_configured


router = APIRouter(prefix="/status", tags=["status"])

_started_at = time.time()


@router.get("")
def status():
    uptime_s = int(time.time() - _started_at)
    return {
        "status": "ok",
        "service": "submission-scorer",
        "supabase": "configured" if is_configured() else "not_configured",
        "uptime": f"{uptime_s}s",
    }
