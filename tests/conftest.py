"""Pytest configuration and fixtures."""
from typing import Any

import pytest

from scorer.models.submission_schema import Competition, Submission, ValidationStatus
from scorer.services.errors import AnswerKeyNotFoundError, DownloadError, SubmissionNotFoundError


API_KEY = "test-backend-key"


class FakeStore:
    """In-memory stand-in for SupabaseStore."""

    def __init__(self):
        self.submissions: dict[str, Submission] = {}
        self.answer_keys: dict[tuple[str, str], str] = {}
        self.files: dict[tuple[str, str], bytes] = {}
        self.competitions: dict[str, Competition] = {}
        self.updates: list[tuple[str, dict[str, Any]]] = []

    def add_submission(self, submission_id: str, csv_text: str, metric: str = "accuracy",
                       competition_id: str = "comp-1", phase: str = "public", **fields) -> Submission:
        file_path = f"user-1/{competition_id}/{submission_id}.csv"
        competition = self.competitions.setdefault(
            competition_id, Competition(id=competition_id, scoring_metric=metric)
        )
        sub = Submission(
            id=submission_id,
            competition_id=competition_id,
            file_path=file_path,
            phase=phase,
            competition=competition,
            **fields,
        )
        self.submissions[submission_id] = sub
        self.files[("submissions", file_path)] = csv_text.encode("utf-8")
        return sub

    def add_answer_key(self, csv_text: str, competition_id: str = "comp-1", phase: str = "public") -> None:
        path = f"{competition_id}/{phase}.csv"
        self.answer_keys[(competition_id, phase)] = path
        self.files[("answer-keys", path)] = csv_text.encode("utf-8")

    def get_submission(self, submission_id: str) -> Submission:
        if submission_id not in self.submissions:
            raise SubmissionNotFoundError(f"Submission not found: {submission_id}")
        return self.submissions[submission_id]

    def get_answer_key_path(self, competition_id: str, phase: str) -> str:
        if (competition_id, phase) not in self.answer_keys:
            raise AnswerKeyNotFoundError(f"Answer key not found for competition {competition_id} ({phase})")
        return self.answer_keys[(competition_id, phase)]

    def _download(self, bucket: str, path: str) -> bytes:
        if (bucket, path) not in self.files:
            raise DownloadError(f"Failed to download {bucket}/{path}: object not found")
        return self.files[(bucket, path)]

    def download_submission(self, path: str) -> bytes:
        return self._download("submissions", path)

    def download_answer_key(self, path: str) -> bytes:
        return self._download("answer-keys", path)

    def update_submission(self, submission_id: str, patch: dict[str, Any]) -> None:
        self.updates.append((submission_id, patch))
        sub = self.submissions[submission_id]
        self.submissions[submission_id] = sub.model_copy(update={
            **patch,
            "validation_status": ValidationStatus(patch["validation_status"]),
        })

    def list_pending(self, limit: int = 10) -> list[Submission]:
        pending = [s for s in self.submissions.values() if s.validation_status is ValidationStatus.PENDING]
        return pending[:limit]

    def list_valid(self, competition_id: str, phase: str) -> list[Submission]:
        return [
            s for s in self.submissions.values()
            if s.competition_id == competition_id and s.phase == phase
            and s.validation_status is ValidationStatus.VALID
        ]

    def get_competition(self, competition_id: str):
        return self.competitions.get(competition_id)

    def count_submissions(self, competition_id: str, *, user_id=None, team_id=None,
                          since=None, validation_status=None) -> int:
        count = 0
        for s in self.submissions.values():
            if s.competition_id != competition_id:
                continue
            if team_id and s.team_id != team_id:
                continue
            if not team_id and user_id and s.user_id != user_id:
                continue
            if since is not None and (s.submitted_at is None or s.submitted_at < since):
                continue
            if validation_status is not None and s.validation_status is not validation_status:
                continue
            count += 1
        return count


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("BACKEND_API_KEY", API_KEY)
    return API_KEY


@pytest.fixture
def client(store, api_key):
    """TestClient wired to the in-memory store."""
    from fastapi.testclient import TestClient

    from scorer.main import app
    from scorer.services.supabase_client import get_store

    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as c:
        c.headers.update({"Authorization": f"Bearer {api_key}"})
        yield c
    app.dependency_overrides.clear()
