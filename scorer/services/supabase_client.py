from datetime import datetime
from typing import Any, Optional
from supabase import create_client, Client

from scorer.models.submission_schema import Competition, Submission, ValidationStatus
from scorer.services.errors import AnswerKeyNotFoundError, DownloadError, SubmissionNotFoundError
from scorer.utils.config import (
    SUPABASE_URL,
    SUPABASE_SERVICE_ROLE_KEY,
    SUBMISSIONS_BUCKET,
    ANSWER_KEYS_BUCKET,
)
from scorer.utils.logger import get_logger


logger = get_logger("supabase-client")


_client: Optional[Client] = None


def is_configured() -> bool:
    return bool(SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY)


def get_client() -> Client:
    global _client
    if _client is not None:
        return _client
    if not is_configured():
        raise RuntimeError("Supabase not configured: set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY")
    _client = create_client(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)
    return _client


class SupabaseStore:
    """Record and object store backed by Supabase tables and storage buckets."""

    def __init__(self, client: Optional[Client] = None):
        self._sb = client

    @property
    def sb(self) -> Client:
        if self._sb is None:
            self._sb = get_client()
        return self._sb

    def get_submission(self, submission_id: str) -> Submission:
        res = (
            self.sb.table("submissions")
            .select("*, competition:competitions(*)")
            .eq("id", submission_id)
            .limit(1)
            .execute()
        )
        if not res.data:
            raise SubmissionNotFoundError(f"Submission not found: {submission_id}")
        return Submission.model_validate(res.data[0])

    def get_answer_key_path(self, competition_id: str, phase: str) -> str:
        res = (
            self.sb.table("test_datasets")
            .select("file_path")
            .eq("competition_id", competition_id)
            .eq("phase", phase)
            .limit(1)
            .execute()
        )
        if not res.data or not res.data[0].get("file_path"):
            raise AnswerKeyNotFoundError(f"Answer key not found for competition {competition_id} ({phase})")
        return res.data[0]["file_path"]

    def download(self, bucket: str, path: str) -> bytes:
        try:
            return self.sb.storage.from_(bucket).download(path)
        except Exception as e:
            raise DownloadError(f"Failed to download {bucket}/{path}: {e}") from e

    def download_submission(self, path: str) -> bytes:
        return self.download(SUBMISSIONS_BUCKET, path)

    def download_answer_key(self, path: str) -> bytes:
        return self.download(ANSWER_KEYS_BUCKET, path)

    def update_submission(self, submission_id: str, patch: dict[str, Any]) -> None:
        self.sb.table("submissions").update(patch).eq("id", submission_id).execute()
        logger.info("Updated submission %s: %s", submission_id, ", ".join(sorted(patch)))

    def list_pending(self, limit: int = 10) -> list[Submission]:
        res = (
            self.sb.table("submissions")
            .select("*, competition:competitions(*)")
            .eq("validation_status", ValidationStatus.PENDING.value)
            .order("submitted_at")
            .limit(limit)
            .execute()
        )
        return [Submission.model_validate(row) for row in res.data or []]

    def list_valid(self, competition_id: str, phase: str) -> list[Submission]:
        res = (
            self.sb.table("submissions")
            .select("*")
            .eq("competition_id", competition_id)
            .eq("phase", phase)
            .eq("validation_status", ValidationStatus.VALID.value)
            .execute()
        )
        return [Submission.model_validate(row) for row in res.data or []]

    def count_submissions(
        self,
        competition_id: str,
        *,
        user_id: Optional[str] = None,
        team_id: Optional[str] = None,
        since: Optional[datetime] = None,
        validation_status: Optional[ValidationStatus] = None,
    ) -> int:
        """Submissions by a team (when given) or a user in one competition."""
        q = self.sb.table("submissions").select("id", count="exact").eq("competition_id", competition_id)
        if team_id:
            q = q.eq("team_id", team_id)
        elif user_id:
            q = q.eq("user_id", user_id)
        if since is not None:
            q = q.gte("submitted_at", since.isoformat())
        if validation_status is not None:
            q = q.eq("validation_status", validation_status.value)
        res = q.execute()
        return res.count or 0

    def get_competition(self, competition_id: str) -> Optional[Competition]:
        res = self.sb.table("competitions").select("*").eq("id", competition_id).limit(1).execute()
        return Competition.model_validate(res.data[0]) if res.data else None


def get_store() -> SupabaseStore:
    return SupabaseStore()
