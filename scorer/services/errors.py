"""Exceptions raised while fetching, downloading and scoring a submission."""


class ScorerError(Exception):
    """Base class for orchestration-level failures."""


class SubmissionNotFoundError(ScorerError):
    pass


class SubmissionAlreadyProcessedError(ScorerError):
    pass


class AnswerKeyNotFoundError(ScorerError):
    pass


class DownloadError(ScorerError):
    pass


class ScoringError(ScorerError):
    """A valid submission could not be turned into a score (e.g. non-numeric regression values)."""


class InvalidTransitionError(ScorerError):
    pass
