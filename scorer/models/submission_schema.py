from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field

from scorer.services.errors import InvalidTransitionError


class ValidationStatus(str, Enum):
    PENDING = "pending"
    VALID = "valid"
    INVALID = "invalid"

    @property
    def is_terminal(self) -> bool:
        return self is not ValidationStatus.PENDING

    def transition(self, target: "ValidationStatus") -> "ValidationStatus":
        """The only allowed moves are pending -> valid and pending -> invalid."""
        if self is not ValidationStatus.PENDING or target is ValidationStatus.PENDING:
            raise InvalidTransitionError(f"Cannot move submission from {self.value} to {target.value}")
        return target


class Record(BaseModel):
    id: str
    value: Optional[str] = None


class ValidationResult(BaseModel):
    errors: list[str] = Field(default_factory=list)

    @computed_field
    @property
    def valid(self) -> bool:
        return not self.errors


class Competition(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    title: Optional[str] = None
    scoring_metric: Optional[str] = None
    daily_submission_limit: Optional[int] = None
    total_submission_limit: Optional[int] = None
    max_file_size_mb: Optional[int] = None


class Submission(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    competition_id: str
    file_path: str
    phase: str = "public"
    file_name: Optional[str] = None
    user_id: Optional[str] = None
    team_id: Optional[str] = None
    submitted_at: Optional[datetime] = None
    validation_status: ValidationStatus = ValidationStatus.PENDING
    validation_errors: Optional[list[str]] = None
    score: Optional[float] = None
    processed_at: Optional[datetime] = None
    competition: Optional[Competition] = None

    @property
    def participant_id(self) -> Optional[str]:
        return self.team_id or self.user_id


# Outcome of one orchestrator run

class Scored(BaseModel):
    kind: Literal["scored"] = "scored"
    score: float


class Invalid(BaseModel):
    kind: Literal["invalid"] = "invalid"
    errors: list[str]


class Failed(BaseModel):
    kind: Literal["failed"] = "failed"
    reason: str


ProcessOutcome = Annotated[Union[Scored, Invalid, Failed], Field(discriminator="kind")]


# HTTP payloads

class ValidateRequest(BaseModel):
    submissionId: str


class ValidateResponse(BaseModel):
    success: bool
    score: Optional[float] = None
    error: Optional[str] = None
    errors: Optional[list[str]] = None


class ProcessPendingRequest(BaseModel):
    limit: Optional[int] = Field(default=None, ge=1, le=100)


class ProcessPendingItem(BaseModel):
    submission_id: str
    outcome: ProcessOutcome


class ProcessPendingResponse(BaseModel):
    status: str = Field(..., description="ok|idle")
    count: int = 0
    results: list[ProcessPendingItem] = Field(default_factory=list)


class PrecheckResponse(BaseModel):
    valid: bool
    errors: list[str] = Field(default_factory=list)
    rows: Optional[int] = None


class LeaderboardEntry(BaseModel):
    rank: int
    participant_id: str
    user_id: Optional[str] = None
    team_id: Optional[str] = None
    score: float
    submission_id: str
    total_submissions: int
    last_submission_at: Optional[datetime] = None


class LeaderboardResponse(BaseModel):
    competition_id: str
    phase: str
    metric: str
    metric_name: str
    metric_description: str
    metric_type: str
    higher_is_better: bool
    decimals: int
    entries: list[LeaderboardEntry]
