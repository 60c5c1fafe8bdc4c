"""
Shared fixtures: synthetic diabetes-like and penguin-like datasets.
Plots use the non-interactive Agg backend.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from tasks import ClassificationTask


def _blobs(rng, spec, columns):
    """spec: {label: (n_rows, means, sds)} -> DataFrame with a 'label' column."""
    frames = []
    for label, (n, means, sds) in spec.items():
        values = rng.normal(loc=means, scale=sds, size=(n, len(columns)))
        frame = pd.DataFrame(values, columns=columns)
        frame["label"] = label
        frames.append(frame)
    return pd.concat(frames, ignore_index=True)


@pytest.fixture
def diabetes_df():
    """145 patients shaped like the mclust diabetes data (rownames column included)."""
    rng = np.random.RandomState(0)
    columns = ["glucose", "insulin", "sspg"]
    df = _blobs(rng, {
        "Normal": (76, [92, 350, 115], [8, 40, 40]),
        "Chemical": (36, [100, 500, 220], [9, 60, 60]),
        "Overt": (33, [220, 1050, 320], [60, 250, 90]),
    }, columns)
    df = df.rename(columns={"label": "class"})
    df = df.sample(frac=1.0, random_state=1).reset_index(drop=True)
    df.insert(0, "rownames", np.arange(1, len(df) + 1))
    return df[["rownames", "class", "glucose", "insulin", "sspg"]]


@pytest.fixture
def penguins_df():
    """Penguin-like measurements for three species, with a few incomplete rows."""
    rng = np.random.RandomState(3)
    columns = ["bill_length_mm", "flipper_length_mm", "body_mass_g"]
    df = _blobs(rng, {
        "Adelie": (60, [38.8, 190.0, 3700.0], [2.5, 6.5, 450.0]),
        "Chinstrap": (30, [48.8, 196.0, 3730.0], [3.3, 7.0, 380.0]),
        "Gentoo": (50, [47.5, 217.0, 5080.0], [3.0, 6.5, 500.0]),
    }, columns)
    df = df.rename(columns={"label": "species"})
    df["island"] = "Biscoe"
    df.loc[[3, 70], ["bill_length_mm", "flipper_length_mm", "body_mass_g"]] = np.nan
    df.loc[100, "body_mass_g"] = np.nan
    return df[["species", "island", "bill_length_mm", "flipper_length_mm", "body_mass_g"]]


@pytest.fixture
def two_cluster_task():
    """Two far-apart classes of 20 rows each; every small k classifies them perfectly."""
    rng = np.random.RandomState(7)
    a = rng.normal(0.0, 0.1, size=(20, 2))
    b = rng.normal(10.0, 0.1, size=(20, 2))
    df = pd.DataFrame(np.vstack([a, b]), columns=["x1", "x2"])
    df["label"] = ["a"] * 20 + ["b"] * 20
    return ClassificationTask.from_dataframe(df, "label", name="clusters")


@pytest.fixture
def diabetes_task(diabetes_df):
    return ClassificationTask.from_dataframe(
        diabetes_df, "class", ["insulin", "glucose", "sspg"], name="diabetes"
    )
