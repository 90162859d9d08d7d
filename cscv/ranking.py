"""Rank/logit calculator: out-of-sample standing of the in-sample winner.

Per combination:
    1. score every configuration on the training set
    2. n* = argmax(train scores), ties resolved to the lowest column index
    3. score every configuration on the validation set
    4. r = fractional (average) ascending rank of n* on validation, 1 = worst
    5. omega = r / (N + 1), always strictly inside (0, 1)
    6. lambda = ln(omega / (1 - omega))

Combinations are independent, so scoring can be fanned out over a thread
or process pool. Results are stored by combination index.
"""

from __future__ import annotations

import logging
import os
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Sequence

import numpy as np
from scipy.stats import rankdata

from cscv.combinations import TrainValPair
from cscv.errors import DegenerateMetricError
from cscv.metrics import Metric, MetricSpec, resolve_metric

logger = logging.getLogger(__name__)

_BACKENDS = {"thread": ThreadPoolExecutor, "process": ProcessPoolExecutor}


@dataclass(frozen=True)
class CombinationOutcome:
    index: int
    best_config: int
    train_score: float  # in-sample score of best_config
    val_score: float  # out-of-sample score of best_config
    rank: float  # fractional, 1 = worst
    omega: float
    logit: float


def relative_rank(rank: float, n_configs: int) -> float:
    """omega = r / (N + 1)."""
    return rank / (n_configs + 1)


def logit(omega: float) -> float:
    """ln(omega / (1 - omega))."""
    return float(np.log(omega / (1.0 - omega)))


def score_columns(
    sample: np.ndarray,
    metric: Metric,
    *,
    combination_index: int,
    sample_name: str,
) -> np.ndarray:
    """Score each column of *sample*; raise on the first non-finite score."""
    scores = np.empty(sample.shape[1], dtype=float)
    for n in range(sample.shape[1]):
        value = float(metric(sample[:, n]))
        if not np.isfinite(value):
            raise DegenerateMetricError(
                f"metric returned {value} for config {n} on the {sample_name} "
                f"set of combination {combination_index}",
                combination_index=combination_index,
                config_index=n,
                sample=sample_name,
                value=value,
            )
        scores[n] = value
    return scores


def evaluate_combination(pair: TrainValPair, metric: Metric) -> CombinationOutcome:
    """Compute the outcome for one (train, validation) pair."""
    train_scores = score_columns(
        pair.train, metric, combination_index=pair.index, sample_name="train",
    )
    # np.argmax returns the first maximum, i.e. the lowest index on ties
    best = int(np.argmax(train_scores))

    val_scores = score_columns(
        pair.val, metric, combination_index=pair.index, sample_name="validation",
    )
    rank = float(rankdata(val_scores, method="average")[best])
    omega = relative_rank(rank, len(val_scores))

    return CombinationOutcome(
        index=pair.index,
        best_config=best,
        train_score=float(train_scores[best]),
        val_score=float(val_scores[best]),
        rank=rank,
        omega=omega,
        logit=logit(omega),
    )


def resolve_workers(n_workers: int | None) -> int:
    """None or 0 means one worker per available core."""
    if n_workers is None or n_workers == 0:
        return os.cpu_count() or 1
    if n_workers < 0:
        raise ValueError(f"n_workers must be >= 0, got {n_workers}")
    return n_workers


def compute_outcomes(
    pairs: Sequence[TrainValPair],
    metric: MetricSpec = "sharpe",
    *,
    n_workers: int | None = 1,
    backend: str = "thread",
) -> list[CombinationOutcome]:
    """Evaluate every pair, returning outcomes in input order.

    A failing combination aborts the run; with a pool, the failure with the
    lowest position in *pairs* is the one raised.

    Args:
        pairs: Output of :func:`cscv.combinations.enumerate_combinations`.
        metric: ``"mean"``, ``"sharpe"`` or a scoring callable. The process
            backend needs a picklable (module-level) callable.
        n_workers: Pool size; 1 runs inline, None/0 uses all cores.
        backend: ``"thread"`` or ``"process"``.
    """
    if backend not in _BACKENDS:
        raise ValueError(f"backend must be one of {sorted(_BACKENDS)}, got '{backend}'")
    score = resolve_metric(metric)
    workers = min(resolve_workers(n_workers), max(1, len(pairs)))

    if workers == 1:
        return [evaluate_combination(p, score) for p in pairs]

    logger.info("Scoring %d combinations on %d %s workers", len(pairs), workers, backend)
    outcomes: list[CombinationOutcome | None] = [None] * len(pairs)
    chunksize = max(1, len(pairs) // (workers * 4))

    with _BACKENDS[backend](max_workers=workers) as executor:
        # map yields in submission order, so the first exception raised
        # belongs to the lowest failing position
        results = executor.map(
            evaluate_combination, pairs, [score] * len(pairs), chunksize=chunksize,
        )
        for slot, outcome in enumerate(results):
            outcomes[slot] = outcome

    return outcomes  # type: ignore[return-value]


def compute_lambda(
    pairs: Sequence[TrainValPair],
    metric: MetricSpec = "sharpe",
    *,
    n_workers: int | None = 1,
    backend: str = "thread",
) -> np.ndarray:
    """Logit distribution, one value per pair in input order."""
    outcomes = compute_outcomes(pairs, metric, n_workers=n_workers, backend=backend)
    return np.array([o.logit for o in outcomes], dtype=float)
