from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from scorer.models.submission_schema import PrecheckResponse
from scorer.services.precheck import check_competition_quota, precheck_csv_file
from scorer.services.supabase_client import SupabaseStore, get_store
from scorer.utils.config import DEFAULT_MAX_FILE_SIZE_MB
from scorer.utils.logger import get_logger


router = APIRouter(prefix="/precheck", tags=["files"])
logger = get_logger("precheck")


@router.post("", response_model=PrecheckResponse)
async def precheck(
    file: UploadFile = File(...),
    competition_id: str = Form(...),
    user_id: Optional[str] = Form(default=None),
    team_id: Optional[str] = Form(default=None),
    expected_rows: Optional[int] = Form(default=None),
    store: SupabaseStore = Depends(get_store),
):
    """Quota and file checks for an upload, using the competition's own limits."""
    competition = store.get_competition(competition_id)
    if competition is None:
        raise HTTPException(status_code=404, detail="Competition not found")

    quota_error = check_competition_quota(store, competition_id, competition, user_id=user_id, team_id=team_id)
    if quota_error:
        logger.info("Quota reached for %s in %s: %s", team_id or user_id, competition_id, quota_error)
        return PrecheckResponse(valid=False, errors=[quota_error])

    max_file_size_mb = competition.max_file_size_mb or DEFAULT_MAX_FILE_SIZE_MB
    # one byte past the limit is enough to reject an oversize file
    contents = await file.read(max_file_size_mb * 1024 * 1024 + 1)
    result = precheck_csv_file(file.filename or "", contents, expected_rows, max_file_size_mb)
    logger.info("Pre-checked %s (%d bytes): %s", file.filename, len(contents), "ok" if result.valid else result.errors)
    return result
