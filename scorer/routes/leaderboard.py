from fastapi import APIRouter, Depends, HTTPException, Query

from scorer.models.submission_schema import LeaderboardResponse
from scorer.services.leaderboard import rank_submissions
from scorer.services.metrics import METRIC_INFO, resolve_metric
from scorer.services.supabase_client import SupabaseStore, get_store


router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("/{competition_id}", response_model=LeaderboardResponse)
def leaderboard(
    competition_id: str,
    phase: str = Query(default="public", pattern="^(public|private)$"),
    store: SupabaseStore = Depends(get_store),
):
    competition = store.get_competition(competition_id)
    if competition is None:
        raise HTTPException(status_code=404, detail="Competition not found")
    metric = resolve_metric(competition.scoring_metric)
    info = METRIC_INFO[metric]
    entries = rank_submissions(store.list_valid(competition_id, phase), metric)
    return LeaderboardResponse(
        competition_id=competition_id,
        phase=phase,
        metric=metric.value,
        metric_name=info.name,
        metric_description=info.description,
        metric_type=info.kind,
        higher_is_better=info.higher_is_better,
        decimals=info.decimals,
        entries=entries,
    )
