"""Error taxonomy for the CSCV pipeline.

Every failure is local and synchronous. Each error carries the parameters
or indices needed to locate the offending input in ``context``.
"""

from __future__ import annotations

from typing import Any


class CSCVError(Exception):
    """Base class for all CSCV pipeline failures."""

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.context = context

    def __reduce__(self):
        # keyword-only constructors need the context to cross process pools
        return (_restore, (type(self), str(self), self.context))


def _restore(cls: type, message: str, context: dict[str, Any]) -> CSCVError:
    return cls(message, **context)


class InvalidPartitionError(CSCVError):
    """Raised when the matrix cannot be split into the requested blocks."""

    def __init__(self, message: str, *, n_rows: int, n_blocks: int):
        super().__init__(message, n_rows=n_rows, n_blocks=n_blocks)
        self.n_rows = n_rows
        self.n_blocks = n_blocks


class CombinationExplosionError(CSCVError):
    """Raised when C(S, S/2) exceeds the configured ceiling."""

    def __init__(
        self,
        message: str,
        *,
        n_blocks: int,
        n_combinations: int,
        max_combinations: int,
    ):
        super().__init__(
            message,
            n_blocks=n_blocks,
            n_combinations=n_combinations,
            max_combinations=max_combinations,
        )
        self.n_blocks = n_blocks
        self.n_combinations = n_combinations
        self.max_combinations = max_combinations


class DegenerateMetricError(CSCVError):
    """Raised when a metric returns a non-finite score."""

    def __init__(
        self,
        message: str,
        *,
        combination_index: int,
        config_index: int,
        sample: str,
        value: float,
    ):
        super().__init__(
            message,
            combination_index=combination_index,
            config_index=config_index,
            sample=sample,
            value=value,
        )
        self.combination_index = combination_index
        self.config_index = config_index
        self.sample = sample
        self.value = value


class EmptyDistributionError(CSCVError):
    """Raised when aggregating an empty logit distribution."""
