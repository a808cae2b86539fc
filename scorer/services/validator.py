from typing import List

from scorer.models.submission_schema import Record, ValidationResult
from scorer.utils.logger import get_logger


logger = get_logger("validator")


def validate_submission(submission: List[Record], answer: List[Record]) -> ValidationResult:
    """
    Structural checks of a parsed submission against the parsed answer key.

    Every check runs so the submitter sees the full error set:
      1. row count
      2. one message per answer id missing from the submission
      3. a single message if any submission id repeats
      4. a single message for the first row with an empty id or value

    Ids present in the submission but not in the answer key are tolerated.
    """
    errors: List[str] = []

    if len(submission) != len(answer):
        errors.append(f"Row count mismatch: expected {len(answer)}, got {len(submission)}")

    submission_ids = {row.id for row in submission}
    answer_ids = dict.fromkeys(row.id for row in answer)

    for answer_id in answer_ids:
        if answer_id not in submission_ids:
            errors.append(f"Missing ID: {answer_id}")

    if len(submission_ids) < len(submission):
        errors.append("Duplicate IDs found")

    for row in submission:
        if not row.id or not row.value:
            errors.append("CSV contains empty values")
            break

    extra = submission_ids.difference(answer_ids)
    if extra:
        logger.warning("Submission has %d id(s) not present in the answer key; not treated as an error", len(extra))

    return ValidationResult(errors=errors)
