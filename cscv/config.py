"""CSCVConfig: run configuration and YAML loading.

Defaults live in configs/cscv.yml. Overrides are merged field-by-field;
unknown keys are logged and ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from cscv.combinations import DEFAULT_MAX_COMBINATIONS
from cscv.metrics import METRIC_NAMES

logger = logging.getLogger(__name__)

_CSCV_YML = Path(__file__).resolve().parents[1] / "configs" / "cscv.yml"

_VALID_BACKENDS = ("thread", "process")


@dataclass(frozen=True)
class CSCVConfig:
    n_blocks: int = 16
    metric: str = "sharpe"
    max_combinations: int = DEFAULT_MAX_COMBINATIONS
    n_workers: int = 1  # 0 = one per core
    backend: str = "thread"

    def __post_init__(self):
        if self.n_blocks < 2 or self.n_blocks % 2 != 0:
            raise ValueError(f"n_blocks must be an even integer >= 2, got {self.n_blocks}")
        if self.metric not in METRIC_NAMES:
            raise ValueError(
                f"metric must be one of {list(METRIC_NAMES)}, got '{self.metric}'"
            )
        if self.max_combinations <= 0:
            raise ValueError("max_combinations must be > 0")
        if self.n_workers < 0:
            raise ValueError("n_workers must be >= 0")
        if self.backend not in _VALID_BACKENDS:
            raise ValueError(
                f"backend must be one of {list(_VALID_BACKENDS)}, got '{self.backend}'"
            )


_CONFIG_FIELDS = {f.name for f in fields(CSCVConfig)}


def load_config(path: Path | None = None) -> CSCVConfig:
    """Load a CSCVConfig from YAML (configs/cscv.yml by default)."""
    p = path or _CSCV_YML
    with open(p, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    unknown = sorted(k for k in raw if k not in _CONFIG_FIELDS)
    if unknown:
        logger.warning("Ignoring unknown keys in %s: %s", p, ", ".join(unknown))

    return CSCVConfig(**{k: v for k, v in raw.items() if k in _CONFIG_FIELDS})


def merge_overrides(
    base: CSCVConfig,
    overrides: Mapping[str, Any] | None,
) -> CSCVConfig:
    """Layer caller or command-line settings on top of *base*.

    A ``None`` value keeps what *base* has, so an argparse namespace can be
    passed in whole. Names that are not CSCVConfig fields are dropped.
    """
    given = {k: v for k, v in (overrides or {}).items() if v is not None}

    unknown = sorted(set(given) - _CONFIG_FIELDS)
    if unknown:
        logger.warning("Dropping unrecognized CSCV settings: %s", ", ".join(unknown))

    changes = {k: v for k, v in given.items() if k in _CONFIG_FIELDS}
    if not changes:
        return base

    logger.info(
        "CSCV settings taken from overrides: %s",
        " ".join(f"{k}={v}" for k, v in sorted(changes.items())),
    )
    return replace(base, **changes)
