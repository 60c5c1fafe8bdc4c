"""
k-Nearest Neighbors learner and fitted model.
A learner is a kNN configuration (k, weights, metric, scaling) that is not yet fit;
training it on a task (optionally a subset of rows) yields a model that predicts labels.
Features are standardized inside the sklearn Pipeline so the scaler only sees training rows.
"""

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from numbers import Integral
from typing import Any, Tuple

import numpy as np
from sklearn.neighbors import KNeighborsClassifier
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler

from config import DEFAULT_K, WEIGHTS_OPTIONS, METRIC_OPTIONS
from data_loading import require_columns
from evaluation import PredictionResult
from utils import as_row_ids


def validate_k(k):
    """k must be a positive integer (bools rejected)."""
    if isinstance(k, bool) or not isinstance(k, Integral) or k < 1:
        raise ValueError(f"k (number of neighbors) must be a positive integer; got {k!r}.")
    return int(k)


class Learner(ABC):
    """Anything that can be trained on a classification task."""

    @property
    @abstractmethod
    def name(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def train(self, task, row_ids=None):
        """Fit on task rows (all rows when row_ids is None); return a model."""
        raise NotImplementedError


@dataclass(frozen=True)
class KNNLearner(Learner):
    k: int = DEFAULT_K
    weights: str = "uniform"
    metric: str = "euclidean"
    scale: bool = True

    def __post_init__(self):
        validate_k(self.k)
        if self.weights not in WEIGHTS_OPTIONS:
            raise ValueError(f"Unknown weights {self.weights!r}; choose from {WEIGHTS_OPTIONS}.")
        if self.metric not in METRIC_OPTIONS:
            raise ValueError(f"Unknown metric {self.metric!r}; choose from {METRIC_OPTIONS}.")

    @property
    def name(self):
        return "knn"

    def with_k(self, k):
        return replace(self, k=k)

    def build_estimator(self):
        """Unfitted sklearn Pipeline: [('scaler', StandardScaler)] + ('knn', KNeighborsClassifier)."""
        steps = [("scaler", StandardScaler())] if self.scale else []
        steps.append(("knn", KNeighborsClassifier(n_neighbors=self.k, weights=self.weights, metric=self.metric)))
        return Pipeline(steps)

    def train(self, task, row_ids=None):
        ids = as_row_ids(row_ids, task.n_rows)
        if len(ids) == 0:
            raise ValueError("Cannot train on an empty set of rows.")
        if self.k > len(ids):
            raise ValueError(f"k={self.k} exceeds the number of training rows ({len(ids)}).")

        estimator = self.build_estimator()
        t0 = time.perf_counter()
        estimator.fit(task.X(ids), task.y(ids))
        fit_sec = time.perf_counter() - t0
        return KNNModel(
            learner=self,
            task_name=task.name,
            target=task.target,
            features=task.features,
            class_labels=task.class_labels,
            train_row_ids=ids,
            estimator=estimator,
            fit_sec=fit_sec,
        )

    def describe(self):
        return {"k": self.k, "weights": self.weights, "metric": self.metric, "scale": self.scale}


@dataclass(frozen=True, eq=False)
class KNNModel:
    """Fitted artifact; only consumed by predict."""
    learner: KNNLearner
    task_name: str
    target: str
    features: Tuple[str, ...]
    class_labels: Tuple
    train_row_ids: np.ndarray
    estimator: Any = field(repr=False)
    fit_sec: float = 0.0

    def predict(self, data, row_ids=None):
        """
        Predict labels for the rows of a DataFrame. It must contain every feature
        column the model was trained on (extra columns are ignored). When the target
        column is present, the result also carries the truth.
        """
        require_columns(data, list(self.features), what="prediction data")
        X = data[list(self.features)]
        response = self.estimator.predict(X)
        truth = data[self.target].to_numpy() if self.target in data.columns else None
        ids = np.arange(len(data)) if row_ids is None else np.asarray(row_ids, dtype=int)
        return PredictionResult(row_ids=ids, response=np.asarray(response), class_labels=self.class_labels, truth=truth)

    def predict_task(self, task, row_ids=None):
        """Predict task rows (all when row_ids is None), with truth."""
        ids = as_row_ids(row_ids, task.n_rows)
        return self.predict(task.data.loc[ids], row_ids=ids)


def train(task, learner, row_ids=None):
    """Train learner on task (optionally only row_ids) and report the fit."""
    model = learner.train(task, row_ids=row_ids)
    print(
        f"[train] {learner.name} {learner.describe()} on {len(model.train_row_ids)} rows "
        f"of task {task.name!r} ({model.fit_sec:.4f}s)"
    )
    return model
