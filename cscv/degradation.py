"""Selection diagnostics built on per-combination outcomes.

Performance degradation regresses the selected configuration's
out-of-sample score on its in-sample score; a negative slope means better
in-sample results predict worse out-of-sample ones. Probability of loss is
the share of combinations where the selected configuration scored below
zero out of sample.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np
import pandas as pd
from scipy import stats as sp_stats

from cscv.ranking import CombinationOutcome


@dataclass(frozen=True)
class DegradationFit:
    slope: float
    intercept: float
    r_squared: float
    p_value: float
    probability_of_loss: float


def performance_degradation(outcomes: Sequence[CombinationOutcome]) -> DegradationFit:
    """OLS of validation score on training score for the selected configs."""
    is_scores = np.array([o.train_score for o in outcomes], dtype=float)
    oos_scores = np.array([o.val_score for o in outcomes], dtype=float)

    prob_loss = float(np.mean(oos_scores < 0)) if len(oos_scores) else float("nan")

    # linregress needs at least two distinct x values
    if len(is_scores) < 2 or np.ptp(is_scores) == 0:
        nan = float("nan")
        return DegradationFit(nan, nan, nan, nan, prob_loss)

    fit = sp_stats.linregress(is_scores, oos_scores)
    return DegradationFit(
        slope=float(fit.slope),
        intercept=float(fit.intercept),
        r_squared=float(fit.rvalue ** 2),
        p_value=float(fit.pvalue),
        probability_of_loss=prob_loss,
    )


def selection_frequency(
    outcomes: Sequence[CombinationOutcome],
    labels: Sequence[Any] | None = None,
) -> pd.Series:
    """How often each configuration was the in-sample winner.

    Every configuration in *labels* appears, with zero for never-selected
    ones. Without labels, only selected column indices are listed.
    """
    picks = [o.best_config for o in outcomes]
    if labels is None:
        counts = pd.Series(picks, dtype=int).value_counts().sort_index()
        counts.name = "selected"
        return counts

    counts = np.bincount(picks, minlength=len(labels)) if picks else np.zeros(len(labels), dtype=int)
    return pd.Series(counts, index=list(labels), name="selected")
