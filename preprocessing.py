"""
Preprocessing: drop incomplete rows, select columns, split row indices.
Scaling is done inside the learner's sklearn Pipeline (fit on train rows only).
"""

import numpy as np
from sklearn.utils import check_random_state

from data_loading import require_columns


def clean_dataset(df, columns=None, dropna_columns=None):
    """
    Drop rows with a missing value in any of dropna_columns, then keep columns.

    Args:
        df: raw DataFrame
        columns: columns to keep, in this order (default: all)
        dropna_columns: columns checked for missing values
            (default: columns; all columns when both are None)

    Returns:
        A new DataFrame; the original index is kept. Re-applying is a no-op.
    """
    columns = list(df.columns) if columns is None else list(columns)
    dropna_columns = columns if dropna_columns is None else list(dropna_columns)
    require_columns(df, columns + [c for c in dropna_columns if c not in columns])

    out = df.dropna(subset=dropna_columns)
    n_removed = len(df) - len(out)
    if n_removed > 0:
        print(f"Removed {n_removed} row(s) with missing values in {dropna_columns}. Dataset: {len(df)} -> {len(out)} rows.")
    return out[columns].copy()


def train_test_indices(n_rows, train_fraction, random_state=None):
    """
    Random train/test split of row positions 0..n_rows-1.
    Train size is floor(train_fraction * n_rows), sampled without replacement;
    test gets the rest. Both arrays are sorted.
    """
    if not 0 < train_fraction < 1:
        raise ValueError(f"train_fraction must lie in (0, 1); got {train_fraction}.")
    if n_rows < 0:
        raise ValueError(f"n_rows must be non-negative; got {n_rows}.")
    rng = check_random_state(random_state)
    n_train = int(np.floor(train_fraction * n_rows))
    train = np.sort(rng.choice(n_rows, size=n_train, replace=False))
    mask = np.ones(n_rows, dtype=bool)
    mask[train] = False
    test = np.flatnonzero(mask)
    return train, test
