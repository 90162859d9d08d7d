"""Evaluation metrics for scoring one configuration's slice.

Every metric is a pure function of a single column. Degenerate inputs
produce NaN rather than a placeholder value; the ranking stage rejects
non-finite scores.
"""

from __future__ import annotations

from typing import Callable, Sequence, Union

import numpy as np

Metric = Callable[[Sequence[float]], float]
MetricSpec = Union[str, Metric]

METRIC_NAMES = ("mean", "sharpe", "custom")


def mean_score(values: Sequence[float]) -> float:
    """Arithmetic mean of the column."""
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        return float("nan")
    return float(arr.mean())


def sharpe_score(values: Sequence[float]) -> float:
    """Mean divided by sample standard deviation (ddof=1, not annualized).

    NaN for fewer than two observations or zero variance. A constant
    column is treated as zero variance even when rounding leaves a
    residual std (e.g. ``[0.01] * 10`` gives ~1.8e-18).
    """
    arr = np.asarray(values, dtype=float)
    if arr.size < 2:
        return float("nan")
    std = arr.std(ddof=1)
    if not np.isfinite(std):
        return float("nan")
    if np.ptp(arr) == 0 or std <= np.finfo(float).eps * max(1.0, abs(arr.mean())):
        return float("nan")
    return float(arr.mean() / std)


_BUILTIN_METRICS: dict[str, Metric] = {
    "mean": mean_score,
    "sharpe": sharpe_score,
}


def resolve_metric(metric: MetricSpec) -> Metric:
    """Map a metric option to a scoring function.

    *metric* is ``"mean"``, ``"sharpe"`` or a callable (the ``custom``
    option). ``"custom"`` as a string is rejected: the caller must supply
    the function itself.
    """
    if callable(metric):
        return metric
    if metric == "custom":
        raise ValueError("metric 'custom' requires a scoring callable")
    try:
        return _BUILTIN_METRICS[metric]
    except KeyError:
        raise ValueError(
            f"metric must be one of {sorted(_BUILTIN_METRICS)} or a callable, "
            f"got {metric!r}"
        ) from None
