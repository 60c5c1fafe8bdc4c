"""
Shared utilities: set seeds, small helpers.
"""

import random

import numpy as np

from config import RANDOM_SEED


def set_seed(seed=None):
    """Fix random seeds for reproducibility (NumPy and random)."""
    seed = RANDOM_SEED if seed is None else seed
    np.random.seed(seed)
    random.seed(seed)
    return seed


def as_row_ids(row_ids, n_rows):
    """Return row_ids as an int ndarray (order kept); None means all rows."""
    if row_ids is None:
        return np.arange(n_rows)
    ids = np.asarray(row_ids).ravel()
    if ids.size == 0:
        return ids.astype(int)
    if not np.issubdtype(ids.dtype, np.integer):
        raise ValueError(f"Row ids must be integers; got dtype {ids.dtype}.")
    ids = ids.astype(int)
    if ids.min() < 0 or ids.max() >= n_rows:
        raise ValueError(f"Row ids must lie in [0, {n_rows}); got range [{ids.min()}, {ids.max()}].")
    return ids
