"""PBO aggregator: reduce the logit distribution to one probability."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from cscv.errors import EmptyDistributionError


@dataclass(frozen=True)
class LambdaSummary:
    pbo: float
    n_combinations: int
    mean: float
    variance: float  # sample variance, 0.0 for a single value
    std: float
    median: float
    interpretation: str  # low / moderate / high


def _as_distribution(lambdas: Sequence[float] | np.ndarray) -> np.ndarray:
    arr = np.asarray(lambdas, dtype=float).ravel()
    if arr.size == 0:
        raise EmptyDistributionError("cannot aggregate an empty logit distribution")
    return arr


def pbo(lambdas: Sequence[float] | np.ndarray) -> float:
    """Fraction of combinations with lambda <= 0.

    lambda <= 0 means the in-sample winner ranked at or below the
    validation median.
    """
    arr = _as_distribution(lambdas)
    return float(np.count_nonzero(arr <= 0) / arr.size)


def interpret_pbo(value: float) -> str:
    if value > 0.5:
        return "high"
    if value > 0.25:
        return "moderate"
    return "low"


def summarize_lambdas(lambdas: Sequence[float] | np.ndarray) -> LambdaSummary:
    """PBO plus mean/variance/median diagnostics of the distribution."""
    arr = _as_distribution(lambdas)
    prob = pbo(arr)
    variance = float(arr.var(ddof=1)) if arr.size > 1 else 0.0
    return LambdaSummary(
        pbo=prob,
        n_combinations=int(arr.size),
        mean=float(arr.mean()),
        variance=variance,
        std=float(np.sqrt(variance)),
        median=float(np.median(arr)),
        interpretation=interpret_pbo(prob),
    )


def lambda_histogram(
    lambdas: Sequence[float] | np.ndarray,
    bins: int = 20,
) -> tuple[np.ndarray, np.ndarray]:
    """(counts, bin_edges) for plotting layers."""
    arr = _as_distribution(lambdas)
    return np.histogram(arr, bins=bins)
