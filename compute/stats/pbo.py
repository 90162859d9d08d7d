#!/usr/bin/env python3
"""Probability of Backtest Overfitting (PBO).

Runs combinatorially symmetric cross-validation (CSCV), Bailey et al.
(2017), over a CSV of per-period performance (rows = periods, columns =
configurations) and prints the result as one JSON line.
"""
import argparse
import json
import logging
import sys
from pathlib import Path

import numpy as np
import pandas as pd
import yaml

from cscv.config import CSCVConfig, load_config, merge_overrides
from cscv.errors import CSCVError
from cscv.pipeline import run_cscv


def load_returns(path: str) -> pd.DataFrame:
    """Read a numeric CSV with a header row."""
    frame = pd.read_csv(path)
    return frame.apply(pd.to_numeric, errors="raise")


def _json_safe(obj):
    """Recursively replace NaN and +-inf with None so the output is strict JSON."""
    if isinstance(obj, dict):
        return {k: _json_safe(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_json_safe(v) for v in obj]
    if isinstance(obj, np.generic):
        obj = obj.item()
    if isinstance(obj, float) and not np.isfinite(obj):
        return None
    return obj


def _emit(payload: dict) -> None:
    print(json.dumps(_json_safe(payload), allow_nan=False))


def _fail(message: str, error_type: str, **extra) -> None:
    _emit({"error": message, "error_type": error_type, **extra})
    sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Probability of Backtest Overfitting")
    parser.add_argument("--returns-file", required=True, help="Path to CSV: rows=periods, cols=strategies")
    parser.add_argument("--config", default=None, help="YAML config (default: built-in defaults)")
    parser.add_argument("--n-partitions", type=int, default=None, help="Number of CSCV partitions (even)")
    parser.add_argument("--metric", choices=["mean", "sharpe"], default=None, help="Evaluation metric")
    parser.add_argument("--max-combinations", type=int, default=None, help="Combination ceiling")
    parser.add_argument("--workers", type=int, default=None, help="Worker pool size (0 = all cores)")
    parser.add_argument("--backend", choices=["thread", "process"], default=None, help="Worker pool type")
    parser.add_argument("--include-outcomes", action="store_true", help="Emit per-combination outcomes")
    parser.add_argument("--verbose", action="store_true", help="Log progress to stderr")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        base = load_config(Path(args.config)) if args.config else CSCVConfig()
        config = merge_overrides(base, {
            "n_blocks": args.n_partitions,
            "metric": args.metric,
            "max_combinations": args.max_combinations,
            "n_workers": args.workers,
            "backend": args.backend,
        })
    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        _fail(f"Invalid configuration: {e}", type(e).__name__)

    try:
        returns = load_returns(args.returns_file)
    except (OSError, ValueError) as e:
        _fail(f"Failed to load returns file: {e}", type(e).__name__)

    if returns.shape[1] < 2:
        _fail("Need at least 2 strategy variants (columns)", "ValueError")

    try:
        result = run_cscv(returns, config)
    except (CSCVError, ValueError) as e:
        _fail(str(e), type(e).__name__, context=getattr(e, "context", {}))

    _emit(result.to_dict(include_outcomes=args.include_outcomes))


if __name__ == "__main__":
    main()
