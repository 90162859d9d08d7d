"""Block partitioner: split a T×N performance matrix into S time blocks.

Rows are never shuffled: block i always covers rows [i·T/S, (i+1)·T/S).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from cscv.errors import InvalidPartitionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Block:
    index: int
    start: int  # inclusive row
    stop: int  # exclusive row
    values: np.ndarray

    @property
    def n_rows(self) -> int:
        return self.stop - self.start


def as_matrix(matrix: Any) -> np.ndarray:
    """Return a read-only float view of a performance matrix.

    Accepts a 2-D ``np.ndarray``, ``pd.DataFrame`` or nested sequence.
    The caller's object is never modified.
    """
    if isinstance(matrix, pd.DataFrame):
        values = matrix.to_numpy(dtype=float, copy=True)
    else:
        values = np.array(matrix, dtype=float, copy=True)
    values.setflags(write=False)
    return values


def config_labels(matrix: Any) -> list[Any]:
    """Column labels for a matrix: DataFrame columns, else 0..N-1."""
    if isinstance(matrix, pd.DataFrame):
        return list(matrix.columns)
    return list(range(as_matrix(matrix).shape[1]))


def validate_partition(n_rows: int, n_blocks: int) -> int:
    """Check the S/T relationship and return the block size T/S."""
    if n_blocks < 2:
        raise InvalidPartitionError(
            f"n_blocks must be >= 2, got {n_blocks}",
            n_rows=n_rows, n_blocks=n_blocks,
        )
    if n_blocks % 2 != 0:
        raise InvalidPartitionError(
            f"n_blocks must be even, got {n_blocks}",
            n_rows=n_rows, n_blocks=n_blocks,
        )
    if n_rows % n_blocks != 0:
        raise InvalidPartitionError(
            f"{n_rows} rows cannot be split evenly into {n_blocks} blocks",
            n_rows=n_rows, n_blocks=n_blocks,
        )
    return n_rows // n_blocks


def partition(matrix: Any, n_blocks: int) -> list[Block]:
    """Split *matrix* into *n_blocks* contiguous, equal-length blocks.

    Args:
        matrix: (T, N) matrix, T time periods, N configurations.
        n_blocks: Even number of blocks S, with T divisible by S.

    Raises:
        InvalidPartitionError: bad shape or S/T relationship.
    """
    values = as_matrix(matrix)
    if values.ndim != 2 or values.shape[0] == 0 or values.shape[1] == 0:
        raise InvalidPartitionError(
            f"performance matrix must be 2-D and non-empty, got shape {values.shape}",
            n_rows=int(values.shape[0]) if values.ndim >= 1 else 0,
            n_blocks=n_blocks,
        )

    n_rows = values.shape[0]
    size = validate_partition(n_rows, n_blocks)
    logger.debug("Partitioning %d rows into %d blocks of %d", n_rows, n_blocks, size)

    return [
        Block(index=i, start=i * size, stop=(i + 1) * size, values=values[i * size:(i + 1) * size])
        for i in range(n_blocks)
    ]
