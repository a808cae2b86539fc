from datetime import datetime, timezone
from typing import Dict, List

from scorer.models.submission_schema import LeaderboardEntry, Submission
from scorer.services.metrics import METRIC_INFO, Metric


_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _submitted(sub: Submission) -> datetime:
    ts = sub.submitted_at
    if ts is None:
        return _EPOCH
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def rank_submissions(submissions: List[Submission], metric: Metric) -> List[LeaderboardEntry]:
    """
    Best scored submission per participant (team, else user), ranked in the
    metric's direction. Equal scores share a rank and the next rank is skipped;
    among equals the earlier submission is listed first.
    """
    higher_is_better = METRIC_INFO[metric].higher_is_better
    best: Dict[str, Submission] = {}
    totals: Dict[str, int] = {}
    latest: Dict[str, datetime] = {}

    for sub in submissions:
        participant = sub.participant_id
        if participant is None or sub.score is None:
            continue
        totals[participant] = totals.get(participant, 0) + 1
        if participant not in latest or _submitted(sub) > latest[participant]:
            latest[participant] = _submitted(sub)
        current = best.get(participant)
        if current is None:
            best[participant] = sub
            continue
        better = sub.score > current.score if higher_is_better else sub.score < current.score
        if better or (sub.score == current.score and _submitted(sub) < _submitted(current)):
            best[participant] = sub

    ordered = sorted(
        best.items(),
        key=lambda item: (-item[1].score if higher_is_better else item[1].score, _submitted(item[1])),
    )

    entries: List[LeaderboardEntry] = []
    for position, (participant, sub) in enumerate(ordered, start=1):
        rank = entries[-1].rank if entries and entries[-1].score == sub.score else position
        entries.append(LeaderboardEntry(
            rank=rank,
            participant_id=participant,
            user_id=sub.user_id,
            team_id=sub.team_id,
            score=sub.score,
            submission_id=sub.id,
            total_submissions=totals[participant],
            last_submission_at=latest[participant] if latest[participant] != _EPOCH else None,
        ))
    return entries
