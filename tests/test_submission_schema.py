"""Tests for submission domain models."""
import pytest

from scorer.models.submission_schema import Submission, ValidationStatus
from scorer.services.errors import InvalidTransitionError


class TestValidationStatus:
    """Test suite for the validation status state machine."""

    @pytest.mark.parametrize("target", [ValidationStatus.VALID, ValidationStatus.INVALID])
    def test_pending_moves_to_terminal(self, target):
        assert ValidationStatus.PENDING.transition(target) is target

    def test_pending_to_pending_rejected(self):
        with pytest.raises(InvalidTransitionError):
            ValidationStatus.PENDING.transition(ValidationStatus.PENDING)

    @pytest.mark.parametrize("source", [ValidationStatus.VALID, ValidationStatus.INVALID])
    @pytest.mark.parametrize("target", list(ValidationStatus))
    def test_terminal_states_are_final(self, source, target):
        with pytest.raises(InvalidTransitionError):
            source.transition(target)

    def test_terminal_flag(self):
        assert not ValidationStatus.PENDING.is_terminal
        assert ValidationStatus.VALID.is_terminal
        assert ValidationStatus.INVALID.is_terminal


class TestSubmissionModel:
    """Test suite for parsing submission rows."""

    def test_joined_row(self):
        row = {
            "id": "s1",
            "competition_id": "c1",
            "file_path": "u1/c1/1_preds.csv",
            "phase": "private",
            "validation_status": "pending",
            "user_id": "u1",
            "team_id": None,
            "is_best_score": False,
            "competition": {"id": "c1", "scoring_metric": "rmse", "title": "Housing"},
        }
        sub = Submission.model_validate(row)
        assert sub.validation_status is ValidationStatus.PENDING
        assert sub.competition.scoring_metric == "rmse"
        assert sub.participant_id == "u1"

    def test_team_is_participant(self):
        sub = Submission(id="s", competition_id="c", file_path="p", user_id="u", team_id="t")
        assert sub.participant_id == "t"

    def test_unknown_status_rejected(self):
        with pytest.raises(ValueError):
            Submission(id="s", competition_id="c", file_path="p", validation_status="scored")
