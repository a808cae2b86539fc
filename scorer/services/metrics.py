"""
metrics.py – leaderboard metrics for aligned submission / answer-key records.

Records are aligned over the answer ids; a missing prediction is scored as a
label that never matches. Precision, recall and F1 are macro-averaged over the
labels seen in the answer key or among the aligned predictions, with 0/0
counted as 0. Regression metrics parse values as floats and refuse
non-numeric input.
"""


from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple
import math

import numpy as np
from sklearn import metrics as skm

from scorer.models.submission_schema import Record
from scorer.services.errors import ScoringError
from scorer.utils.logger import get_logger


logger = get_logger("metrics")


class Metric(str, Enum):
    F1_SCORE = "f1_score"
    ACCURACY = "accuracy"
    PRECISION = "precision"
    RECALL = "recall"
    MAE = "mae"
    RMSE = "rmse"


@dataclass(frozen=True)
class MetricInfo:
    name: str
    description: str
    higher_is_better: bool
    kind: str
    decimals: int = 4


METRIC_INFO: Dict[Metric, MetricInfo] = {
    Metric.F1_SCORE: MetricInfo("F1 Score", "Harmonic mean of precision and recall", True, "classification"),
    Metric.ACCURACY: MetricInfo("Accuracy", "Share of ids predicted with the exact label", True, "classification"),
    Metric.PRECISION: MetricInfo("Precision", "True positives over predicted positives", True, "classification"),
    Metric.RECALL: MetricInfo("Recall", "True positives over actual positives", True, "classification"),
    Metric.MAE: MetricInfo("MAE (Mean Absolute Error)", "Average absolute difference from the true value", False, "regression"),
    Metric.RMSE: MetricInfo("RMSE (Root Mean Squared Error)", "Square root of the mean squared difference", False, "regression"),
}


def resolve_metric(name: Optional[str]) -> Metric:
    """Map a competition's configured metric name to a Metric, falling back to F1."""
    try:
        return Metric((name or "").strip().lower())
    except ValueError:
        logger.warning("Unknown scoring metric %r; falling back to %s", name, Metric.F1_SCORE.value)
        return Metric.F1_SCORE


def _to_map(records: List[Record]) -> Dict[str, Optional[str]]:
    # later rows win when an id repeats
    return {r.id: r.value for r in records}


_NO_PREDICTION = "\x00no-prediction"


def _aligned_labels(submission: List[Record], answer: List[Record]) -> Tuple[List[str], List[str], List[str]]:
    """(y_true, y_pred, labels) over the answer ids."""
    predicted = _to_map(submission)
    truth = _to_map(answer)
    y_true = [label or "" for label in truth.values()]
    y_pred = [predicted.get(row_id) or _NO_PREDICTION for row_id in truth]
    labels = list(dict.fromkeys(y_true + [p for p in y_pred if p != _NO_PREDICTION]))
    return y_true, y_pred, labels


def _macro(score_fn, submission: List[Record], answer: List[Record]) -> float:
    y_true, y_pred, labels = _aligned_labels(submission, answer)
    if not y_true:
        return 0.0
    return float(score_fn(y_true, y_pred, labels=labels, average="macro", zero_division=0))


def f1_score(submission: List[Record], answer: List[Record]) -> float:
    return _macro(skm.f1_score, submission, answer)


def precision(submission: List[Record], answer: List[Record]) -> float:
    return _macro(skm.precision_score, submission, answer)


def recall(submission: List[Record], answer: List[Record]) -> float:
    return _macro(skm.recall_score, submission, answer)


def accuracy(submission: List[Record], answer: List[Record]) -> float:
    y_true, y_pred, _ = _aligned_labels(submission, answer)
    if not y_true:
        return 0.0
    return float(skm.accuracy_score(y_true, y_pred))


def _parse_number(raw: Optional[str], row_id: str, source: str) -> float:
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ScoringError(f"Non-numeric {source} value for ID {row_id}: {raw!r}") from None
    if not math.isfinite(value):
        raise ScoringError(f"Non-finite {source} value for ID {row_id}: {raw!r}")
    return value


def _numeric_pairs(submission: List[Record], answer: List[Record]) -> Tuple[np.ndarray, np.ndarray]:
    predicted = _to_map(submission)
    truth = _to_map(answer)
    y_true, y_pred = [], []
    for row_id, true_raw in truth.items():
        if row_id not in predicted:
            continue
        y_true.append(_parse_number(true_raw, row_id, "answer"))
        y_pred.append(_parse_number(predicted[row_id], row_id, "prediction"))
    if not y_true:
        raise ScoringError("No overlapping IDs between submission and answer key")
    return np.asarray(y_true, dtype=float), np.asarray(y_pred, dtype=float)


def mae(submission: List[Record], answer: List[Record]) -> float:
    y_true, y_pred = _numeric_pairs(submission, answer)
    return float(skm.mean_absolute_error(y_true, y_pred))


def rmse(submission: List[Record], answer: List[Record]) -> float:
    y_true, y_pred = _numeric_pairs(submission, answer)
    return float(np.sqrt(skm.mean_squared_error(y_true, y_pred)))


MetricFn = Callable[[List[Record], List[Record]], float]

METRICS: Dict[Metric, MetricFn] = {
    Metric.F1_SCORE: f1_score,
    Metric.ACCURACY: accuracy,
    Metric.PRECISION: precision,
    Metric.RECALL: recall,
    Metric.MAE: mae,
    Metric.RMSE: rmse,
}


def calculate_score(submission: List[Record], answer: List[Record], metric: Metric | str | None) -> float:
    if not isinstance(metric, Metric):
        metric = resolve_metric(metric)
    return METRICS[metric](submission, answer)
