"""
Load the diabetes and Palmer penguins datasets.
Declare targets and features; basic loading and column checks.
"""

import os

import pandas as pd
import seaborn as sns

from config import (
    DIABETES_DATA_PATH,
    DIABETES_URL,
    DIABETES_TARGET,
    DIABETES_FEATURES,
    PENGUINS_DATA_PATH,
    PENGUINS_TARGET,
    PENGUINS_FEATURES,
)

# Row-name columns written by R's write.csv / Rdatasets
ROWNAME_COLUMNS = ["rownames", "Unnamed: 0"]


def require_columns(df, columns, what="dataset"):
    """Raise ValueError naming every requested column absent from df."""
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ValueError(f"{what} is missing required column(s) {missing}; available: {list(df.columns)}")


def _drop_rownames(df):
    return df.drop(columns=[c for c in ROWNAME_COLUMNS if c in df.columns])


def load_diabetes(path=None):
    """
    Load the diabetes data (145 patients; glucose, insulin, sspg; class).

    Args:
        path: CSV path or URL. Defaults to config.DIABETES_DATA_PATH when that
            file exists, otherwise config.DIABETES_URL.

    Returns:
        DataFrame with columns class, glucose, insulin, sspg.
    """
    if path is None:
        path = DIABETES_DATA_PATH if os.path.exists(DIABETES_DATA_PATH) else DIABETES_URL
    df = _drop_rownames(pd.read_csv(path))
    require_columns(df, [DIABETES_TARGET] + DIABETES_FEATURES, what="diabetes data")
    print(f"Loaded diabetes data: {len(df)} rows, {df.shape[1]} columns.")
    return df


def load_penguins(path=None):
    """
    Load the Palmer penguins data. Reads path (or config.PENGUINS_DATA_PATH
    when present); otherwise uses seaborn's bundled sample dataset.
    Rows with missing measurements are kept; clean with preprocessing.clean_dataset.
    """
    if path is None and os.path.exists(PENGUINS_DATA_PATH):
        path = PENGUINS_DATA_PATH
    if path is None:
        df = sns.load_dataset("penguins")
    else:
        df = pd.read_csv(path)
    df = _drop_rownames(df)
    require_columns(df, [PENGUINS_TARGET] + PENGUINS_FEATURES, what="penguins data")
    print(f"Loaded penguins data: {len(df)} rows, {df.shape[1]} columns.")
    return df


def get_target_and_features(df, target, features=None):
    """Split into features and target. features=None means every other column."""
    features = list(features) if features is not None else [c for c in df.columns if c != target]
    require_columns(df, [target] + features)
    y = df[target].copy()
    X = df[features].copy()
    return X, y


# For reference:
# diabetes: class, glucose, insulin, sspg
# penguins: species, island, bill_length_mm, bill_depth_mm, flipper_length_mm,
# body_mass_g, sex (and year in the palmerpenguins CSV)
