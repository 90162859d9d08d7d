"""End-to-end CSCV run: partition → combinations → logits → PBO.

Implements the combinatorially symmetric cross-validation method of
Bailey et al. (2017), "The Probability of Backtest Overfitting".
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any

import numpy as np
import pandas as pd

from cscv.aggregate import LambdaSummary, summarize_lambdas
from cscv.combinations import check_combination_budget, enumerate_combinations
from cscv.config import CSCVConfig
from cscv.degradation import (
    DegradationFit,
    performance_degradation,
    selection_frequency,
)
from cscv.metrics import Metric, MetricSpec
from cscv.partition import as_matrix, config_labels, partition, validate_partition
from cscv.ranking import CombinationOutcome, compute_outcomes, resolve_workers

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CSCVResult:
    pbo: float
    lambdas: np.ndarray
    summary: LambdaSummary
    outcomes: tuple[CombinationOutcome, ...]
    degradation: DegradationFit
    selection_frequency: pd.Series
    n_rows: int
    n_configs: int
    n_blocks: int

    def to_dict(self, include_outcomes: bool = False) -> dict[str, Any]:
        """JSON-serializable view. NaN becomes None."""
        d: dict[str, Any] = {
            "pbo": self.pbo,
            "pbo_interpretation": self.summary.interpretation,
            "n_combinations": self.summary.n_combinations,
            "n_partitions": self.n_blocks,
            "n_strategies": self.n_configs,
            "n_periods": self.n_rows,
            "logit_mean": self.summary.mean,
            "logit_variance": self.summary.variance,
            "logit_std": self.summary.std,
            "logit_median": self.summary.median,
            "degradation": {k: _nan_to_none(v) for k, v in asdict(self.degradation).items()},
            "selection_frequency": {
                str(k): int(v) for k, v in self.selection_frequency.items()
            },
            "lambdas": [float(x) for x in self.lambdas],
        }
        if include_outcomes:
            d["outcomes"] = [asdict(o) for o in self.outcomes]
        return d


def _nan_to_none(val: float) -> float | None:
    return None if isinstance(val, float) and np.isnan(val) else val


def run_cscv(
    matrix: Any,
    config: CSCVConfig | None = None,
    *,
    metric: Metric | None = None,
) -> CSCVResult:
    """Estimate PBO for a (T, N) performance matrix.

    Args:
        matrix: (T, N) ndarray or DataFrame, T periods, N configurations.
        config: Run configuration; defaults to ``CSCVConfig()``.
        metric: Scoring callable. Overrides ``config.metric`` and is
            required when ``config.metric == "custom"``.
    """
    cfg = config or CSCVConfig()
    if metric is not None:
        score: MetricSpec = metric
    elif cfg.metric == "custom":
        raise ValueError("config.metric is 'custom' but no metric callable was given")
    else:
        score = cfg.metric

    values = as_matrix(matrix)
    # Cheap checks first: nothing is sliced or scored past a tripped guard
    if values.ndim == 2:
        validate_partition(values.shape[0], cfg.n_blocks)
        check_combination_budget(cfg.n_blocks, cfg.max_combinations)

    blocks = partition(values, cfg.n_blocks)
    pairs = enumerate_combinations(blocks, cfg.max_combinations)
    n_rows, n_configs = values.shape
    logger.info(
        "CSCV: %d periods x %d configs, S=%d, %d combinations, %d workers",
        n_rows, n_configs, cfg.n_blocks, len(pairs), resolve_workers(cfg.n_workers),
    )

    outcomes = compute_outcomes(
        pairs, score, n_workers=cfg.n_workers, backend=cfg.backend,
    )
    lambdas = np.array([o.logit for o in outcomes], dtype=float)
    summary = summarize_lambdas(lambdas)
    logger.info("CSCV: PBO=%.4f (%s)", summary.pbo, summary.interpretation)

    return CSCVResult(
        pbo=summary.pbo,
        lambdas=lambdas,
        summary=summary,
        outcomes=tuple(outcomes),
        degradation=performance_degradation(outcomes),
        selection_frequency=selection_frequency(outcomes, config_labels(matrix)),
        n_rows=n_rows,
        n_configs=n_configs,
        n_blocks=cfg.n_blocks,
    )
