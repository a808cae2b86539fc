"""
orchestrator.py – fetch, download, parse, validate, score and persist one submission.

The store is anything exposing the SupabaseStore methods used below; tests pass
an in-memory fake. Every failure is returned as a Failed outcome so callers only
ever deal with one result shape.
"""


from datetime import datetime, timezone
from typing import Any, Optional, Protocol

from scorer.models.submission_schema import (
    Failed,
    Invalid,
    ProcessOutcome,
    Scored,
    Submission,
    ValidationStatus,
)
from scorer.services.csv_parser import parse_csv_bytes
from scorer.services.errors import SubmissionAlreadyProcessedError
from scorer.services.metrics import calculate_score, resolve_metric
from scorer.services.supabase_client import SupabaseStore
from scorer.services.validator import validate_submission
from scorer.utils.logger import get_logger


logger = get_logger("orchestrator")


class SubmissionStore(Protocol):
    def get_submission(self, submission_id: str) -> Submission: ...

    def get_answer_key_path(self, competition_id: str, phase: str) -> str: ...

    def download_submission(self, path: str) -> bytes: ...

    def download_answer_key(self, path: str) -> bytes: ...

    def update_submission(self, submission_id: str, patch: dict[str, Any]) -> None: ...


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _run(submission_id: str, store: SubmissionStore) -> ProcessOutcome:
    submission = store.get_submission(submission_id)
    status = submission.validation_status
    if status.is_terminal:
        raise SubmissionAlreadyProcessedError(f"Submission {submission_id} already {status.value}")

    submission_raw = store.download_submission(submission.file_path)
    answer_path = store.get_answer_key_path(submission.competition_id, submission.phase)
    answer_raw = store.download_answer_key(answer_path)

    submission_rows = parse_csv_bytes(submission_raw)
    answer_rows = parse_csv_bytes(answer_raw)
    logger.info(
        "Submission %s: %d rows vs %d answer rows (%s phase)",
        submission_id, len(submission_rows), len(answer_rows), submission.phase,
    )

    validation = validate_submission(submission_rows, answer_rows)
    if not validation.valid:
        store.update_submission(submission_id, {
            "validation_status": status.transition(ValidationStatus.INVALID).value,
            "validation_errors": validation.errors,
            "processed_at": _now(),
        })
        logger.info("Submission %s invalid: %d error(s)", submission_id, len(validation.errors))
        return Invalid(errors=validation.errors)

    configured = submission.competition.scoring_metric if submission.competition else None
    metric = resolve_metric(configured)
    score = calculate_score(submission_rows, answer_rows, metric)

    store.update_submission(submission_id, {
        "validation_status": status.transition(ValidationStatus.VALID).value,
        "score": score,
        "processed_at": _now(),
    })
    logger.info("Submission %s scored %s=%.6f", submission_id, metric.value, score)
    return Scored(score=score)


def process_submission(submission_id: str, store: Optional[SubmissionStore] = None) -> ProcessOutcome:
    try:
        return _run(submission_id, store or SupabaseStore())
    except Exception as e:
        logger.exception("Processing submission %s failed", submission_id)
        return Failed(reason=str(e))
