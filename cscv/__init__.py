from cscv.aggregate import (
    LambdaSummary,
    lambda_histogram,
    pbo,
    summarize_lambdas,
)
from cscv.combinations import (
    DEFAULT_MAX_COMBINATIONS,
    TrainValPair,
    check_combination_budget,
    count_combinations,
    enumerate_combinations,
)
from cscv.config import CSCVConfig, load_config, merge_overrides
from cscv.degradation import (
    DegradationFit,
    performance_degradation,
    selection_frequency,
)
from cscv.errors import (
    CombinationExplosionError,
    CSCVError,
    DegenerateMetricError,
    EmptyDistributionError,
    InvalidPartitionError,
)
from cscv.metrics import mean_score, resolve_metric, sharpe_score
from cscv.partition import Block, partition
from cscv.pipeline import CSCVResult, run_cscv
from cscv.ranking import CombinationOutcome, compute_lambda, compute_outcomes

__all__ = [
    "LambdaSummary",
    "lambda_histogram",
    "pbo",
    "summarize_lambdas",
    "DEFAULT_MAX_COMBINATIONS",
    "TrainValPair",
    "check_combination_budget",
    "count_combinations",
    "enumerate_combinations",
    "CSCVConfig",
    "load_config",
    "merge_overrides",
    "DegradationFit",
    "performance_degradation",
    "selection_frequency",
    "CombinationExplosionError",
    "CSCVError",
    "DegenerateMetricError",
    "EmptyDistributionError",
    "InvalidPartitionError",
    "mean_score",
    "resolve_metric",
    "sharpe_score",
    "Block",
    "partition",
    "CSCVResult",
    "run_cscv",
    "CombinationOutcome",
    "compute_lambda",
    "compute_outcomes",
]
