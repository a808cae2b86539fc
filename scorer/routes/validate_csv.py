from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from scorer.models.submission_schema import Invalid, Scored, ValidateRequest, ValidateResponse
from scorer.services.orchestrator import process_submission
from scorer.services.supabase_client import SupabaseStore, get_store


router = APIRouter(prefix="/validate-csv", tags=["scoring"])


@router.post("", response_model=ValidateResponse, response_model_exclude_none=True)
def validate_csv(req: ValidateRequest, store: SupabaseStore = Depends(get_store)):
    """
    Validate and score one uploaded submission.
    200 when scored, 400 when the CSV fails validation, 500 on any other failure.
    """
    outcome = process_submission(req.submissionId, store)
    if isinstance(outcome, Scored):
        body, status_code = ValidateResponse(success=True, score=outcome.score), 200
    elif isinstance(outcome, Invalid):
        body, status_code = ValidateResponse(success=False, errors=outcome.errors), 400
    else:
        body, status_code = ValidateResponse(success=False, error=outcome.reason), 500
    return JSONResponse(content=body.model_dump(exclude_none=True), status_code=status_code)
