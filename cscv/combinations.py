"""Combination enumerator: every balanced train/validation block split.

For S blocks, each of the C(S, S/2) subsets of size S/2 is used once as
the training selection; its complement is the validation selection. A
subset and its complement are two distinct entries.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from itertools import combinations
from typing import Sequence

import numpy as np

from cscv.errors import CombinationExplosionError, InvalidPartitionError
from cscv.partition import Block

logger = logging.getLogger(__name__)

DEFAULT_MAX_COMBINATIONS = 1_000_000


@dataclass(frozen=True)
class TrainValPair:
    index: int
    train_blocks: tuple[int, ...]
    val_blocks: tuple[int, ...]
    train: np.ndarray
    val: np.ndarray


def count_combinations(n_blocks: int) -> int:
    """C(S, S/2)."""
    return math.comb(n_blocks, n_blocks // 2)


def check_combination_budget(
    n_blocks: int,
    max_combinations: int = DEFAULT_MAX_COMBINATIONS,
) -> int:
    """Return C(S, S/2), or raise if it exceeds *max_combinations*."""
    if max_combinations <= 0:
        raise ValueError(f"max_combinations must be > 0, got {max_combinations}")

    n_combinations = count_combinations(n_blocks)
    if n_combinations > max_combinations:
        raise CombinationExplosionError(
            f"{n_blocks} blocks yield {n_combinations} combinations, "
            f"exceeding max_combinations={max_combinations}",
            n_blocks=n_blocks,
            n_combinations=n_combinations,
            max_combinations=max_combinations,
        )
    return n_combinations


def enumerate_combinations(
    blocks: Sequence[Block],
    max_combinations: int = DEFAULT_MAX_COMBINATIONS,
) -> list[TrainValPair]:
    """Materialize all (train, validation) pairs for *blocks*.

    Training subsets come out in lexicographic order. Selected blocks are
    concatenated in ascending block index, i.e. original time order.

    Raises:
        CombinationExplosionError: C(S, S/2) > *max_combinations*; raised
            before any concatenation.
    """
    n_blocks = len(blocks)
    if n_blocks < 2 or n_blocks % 2 != 0:
        raise InvalidPartitionError(
            f"need an even number of blocks >= 2, got {n_blocks}",
            n_rows=sum(b.n_rows for b in blocks),
            n_blocks=n_blocks,
        )
    n_combinations = check_combination_budget(n_blocks, max_combinations)
    logger.debug("Enumerating %d combinations of %d blocks", n_combinations, n_blocks)

    ordered = sorted(blocks, key=lambda b: b.index)
    all_idx = range(n_blocks)
    pairs: list[TrainValPair] = []

    for i, train_idx in enumerate(combinations(all_idx, n_blocks // 2)):
        val_idx = tuple(j for j in all_idx if j not in train_idx)
        pairs.append(TrainValPair(
            index=i,
            train_blocks=tuple(ordered[j].index for j in train_idx),
            val_blocks=tuple(ordered[j].index for j in val_idx),
            train=np.concatenate([ordered[j].values for j in train_idx]),
            val=np.concatenate([ordered[j].values for j in val_idx]),
        ))

    return pairs
