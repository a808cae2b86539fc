"""Checks run on an uploaded file before a submission row is created."""

import csv
from datetime import datetime, timezone
from io import StringIO
from typing import Optional

from scorer.models.submission_schema import Competition, PrecheckResponse, ValidationStatus
from scorer.services.csv_parser import decode_csv_bytes
from scorer.utils.config import (
    DEFAULT_DAILY_SUBMISSION_LIMIT,
    DEFAULT_MAX_FILE_SIZE_MB,
    DEFAULT_TOTAL_SUBMISSION_LIMIT,
)


def precheck_csv_file(
    filename: str,
    content: bytes,
    expected_rows: Optional[int] = None,
    max_file_size_mb: int = DEFAULT_MAX_FILE_SIZE_MB,
) -> PrecheckResponse:
    """
    Stricter than the scoring-time parser: the file must be a real two-column
    CSV with an ``id`` first column, unique ids and no blanks. File type, size,
    emptiness and column count stop the check early; the rest accumulate.
    """
    if not filename.lower().endswith(".csv"):
        return PrecheckResponse(valid=False, errors=["File must be a CSV"])

    max_size = max_file_size_mb * 1024 * 1024
    if len(content) > max_size:
        return PrecheckResponse(valid=False, errors=[f"File size must be less than {max_file_size_mb}MB"])

    try:
        reader = csv.DictReader(StringIO(decode_csv_bytes(content)))
        rows = list(reader)
        columns = reader.fieldnames or []
    except csv.Error as e:
        return PrecheckResponse(valid=False, errors=[f"Failed to parse CSV: {e}"])

    if not rows:
        return PrecheckResponse(valid=False, errors=["CSV file is empty"])

    if len(columns) != 2:
        return PrecheckResponse(
            valid=False,
            errors=[f"CSV must have exactly 2 columns (id, prediction). Found {len(columns)} columns"],
        )

    errors: list[str] = []
    if columns[0].strip().lower() != "id":
        errors.append('First column must be named "id"')

    ids = [row[columns[0]] for row in rows]
    if len(set(ids)) != len(ids):
        errors.append("Duplicate IDs found in CSV")

    # short rows come back from DictReader with None for the missing fields
    if any(row.get(c) is None or not row[c].strip() for row in rows for c in columns):
        errors.append("CSV contains missing values")

    if expected_rows is not None and len(rows) != expected_rows:
        errors.append(f"Row count mismatch: expected {expected_rows}, got {len(rows)}")

    return PrecheckResponse(valid=not errors, errors=errors, rows=len(rows))


def check_submission_quota(current_count: int, limit: int, kind: str = "daily") -> Optional[str]:
    """Return the rejection message when the quota is used up, else None."""
    if current_count >= limit:
        label = "Daily" if kind == "daily" else "Total"
        return f"{label} submission limit ({limit}) exceeded"
    return None


def check_competition_quota(
    store,
    competition_id: str,
    competition: Competition,
    user_id: Optional[str] = None,
    team_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Optional[str]:
    """
    Apply the competition's daily and total limits to a team (or, without one,
    a user). Only valid submissions since UTC midnight count toward the daily
    limit; every submission counts toward the total.
    """
    if not (user_id or team_id):
        return None
    now = now or datetime.now(timezone.utc)
    day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)

    daily = store.count_submissions(
        competition_id, user_id=user_id, team_id=team_id,
        since=day_start, validation_status=ValidationStatus.VALID,
    )
    message = check_submission_quota(
        daily, competition.daily_submission_limit or DEFAULT_DAILY_SUBMISSION_LIMIT, "daily"
    )
    if message:
        return message

    total = store.count_submissions(competition_id, user_id=user_id, team_id=team_id)
    return check_submission_quota(
        total, competition.total_submission_limit or DEFAULT_TOTAL_SUBMISSION_LIMIT, "total"
    )
