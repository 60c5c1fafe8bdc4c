"""
Classification task: a dataset bound to a target column and feature columns.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np
import pandas as pd

from data_loading import get_target_and_features
from utils import as_row_ids


@dataclass(frozen=True, eq=False)
class ClassificationTask:
    """
    Immutable by convention: build a new task to change the feature/target selection.
    Rows are addressed by position (0..n_rows-1); the data is re-indexed on construction.
    """
    data: pd.DataFrame
    target: str
    features: Tuple[str, ...]
    class_labels: Tuple
    name: str = ""

    @classmethod
    def from_dataframe(cls, df, target, features=None, name=""):
        """Validate columns and missing values, fix the class label set."""
        if features is not None and target in features:
            raise ValueError(f"Target column {target!r} cannot also be a feature.")
        X, y = get_target_and_features(df, target, features)
        features = tuple(X.columns)
        if not features:
            raise ValueError("A classification task needs at least one feature column.")

        data = pd.concat([y, X], axis=1).reset_index(drop=True)
        incomplete = data.columns[data.isna().any()].tolist()
        if incomplete:
            raise ValueError(f"Task columns contain missing values: {incomplete}. Clean the data first.")
        non_numeric = [c for c in features if not pd.api.types.is_numeric_dtype(data[c])]
        if non_numeric:
            raise ValueError(f"kNN features must be numeric; got non-numeric column(s) {non_numeric}.")

        y = data[target]
        if isinstance(y.dtype, pd.CategoricalDtype):
            class_labels = tuple(y.cat.categories)
        else:
            class_labels = tuple(sorted(pd.unique(y)))
        return cls(data=data, target=target, features=features, class_labels=class_labels, name=name)

    @property
    def n_rows(self):
        return len(self.data)

    @property
    def row_ids(self):
        return np.arange(self.n_rows)

    def X(self, row_ids=None):
        ids = as_row_ids(row_ids, self.n_rows)
        return self.data.loc[ids, list(self.features)]

    def y(self, row_ids=None):
        ids = as_row_ids(row_ids, self.n_rows)
        return self.data.loc[ids, self.target]

    def class_counts(self):
        return self.data[self.target].value_counts().reindex(list(self.class_labels), fill_value=0)

    def __repr__(self):
        return (
            f"ClassificationTask(name={self.name!r}, n_rows={self.n_rows}, target={self.target!r}, "
            f"features={list(self.features)}, classes={list(self.class_labels)})"
        )
