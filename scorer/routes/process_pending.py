from typing import Optional

from fastapi import APIRouter, Depends

from scorer.models.submission_schema import ProcessPendingItem, ProcessPendingRequest, ProcessPendingResponse
from scorer.services.orchestrator import process_submission
from scorer.services.supabase_client import SupabaseStore, get_store
from scorer.utils.config import PROCESS_PENDING_LIMIT
from scorer.utils.logger import get_logger


router = APIRouter(prefix="/process-pending", tags=["scoring"])
logger = get_logger("process-pending")


@router.post("", response_model=ProcessPendingResponse)
def process_pending(
    req: Optional[ProcessPendingRequest] = None,
    store: SupabaseStore = Depends(get_store),
):
    """Re-run submissions still pending, oldest first, one at a time."""
    limit = (req.limit if req else None) or PROCESS_PENDING_LIMIT
    pending = store.list_pending(limit=limit)
    if not pending:
        logger.info("No pending submissions")
        return ProcessPendingResponse(status="idle")

    logger.info("Batch processing %d pending submission(s)", len(pending))
    results = [
        ProcessPendingItem(submission_id=sub.id, outcome=process_submission(sub.id, store))
        for sub in pending
    ]
    logger.info("Batch processing completed")
    return ProcessPendingResponse(status="ok", count=len(results), results=results)
