"""
Hyperparameter tuning for kNN: grid search over k.
Every candidate is scored on the same instantiated resampling splits (GridSearchCV),
the best k is selected (ties -> smallest k) and optionally retrained on the full task.
"""

from dataclasses import dataclass
from typing import Any, Optional

import numpy as np
import pandas as pd
from sklearn.model_selection import GridSearchCV

from config import K_GRID, TUNING_MEASURE
from evaluation import get_measure
from models_knn import validate_k


@dataclass(frozen=True, eq=False)
class TuningResult:
    best_k: int
    best_score: float
    measure: str
    minimize: bool
    table: pd.DataFrame
    learner: Any
    model: Optional[Any] = None

    def describe(self):
        direction = "min" if self.minimize else "max"
        return f"best k={self.best_k} ({self.measure}={self.best_score:.4f}, {direction} over {len(self.table)} candidates)"


def _validate_k_values(k_values):
    k_values = sorted({validate_k(k) for k in k_values})
    if not k_values:
        raise ValueError("k_values must contain at least one candidate.")
    return k_values


def tune_k(task, learner, resampling, k_values=K_GRID, measure=TUNING_MEASURE, refit=True, n_jobs=None):
    """
    Grid search over k for a KNNLearner.

    Args:
        task: ClassificationTask
        learner: KNNLearner; all settings except k are kept
        resampling: ResamplingSpec, instantiated once and shared by every candidate
        k_values: candidate neighbor counts
        measure: measure name; misclassification is minimized, accuracy maximized
        refit: retrain the best learner on all task rows
        n_jobs: passed to GridSearchCV

    Returns:
        TuningResult with one table row per candidate (k, score, std).
    """
    k_values = _validate_k_values(k_values)
    measure = get_measure(measure)
    splits = resampling.instantiate(task)
    smallest_train = min(len(tr) for tr, _ in splits)
    if k_values[-1] > smallest_train:
        raise ValueError(f"Candidate k={k_values[-1]} exceeds the smallest training split ({smallest_train} rows).")

    gs = GridSearchCV(
        learner.build_estimator(),
        {"knn__n_neighbors": k_values},
        scoring=measure.scorer,
        cv=splits,
        refit=False,
        error_score="raise",
        n_jobs=n_jobs,
    )
    gs.fit(task.X(), task.y())

    sign = -1.0 if measure.minimize else 1.0
    scores = sign * np.asarray(gs.cv_results_["mean_test_score"], dtype=float)
    best_idx = int(np.argmin(scores)) if measure.minimize else int(np.argmax(scores))
    best_k = k_values[best_idx]
    table = pd.DataFrame({
        "k": k_values,
        measure.name: scores,
        "std": np.asarray(gs.cv_results_["std_test_score"], dtype=float),
    })

    tuned = learner.with_k(best_k)
    model = tuned.train(task) if refit else None
    result = TuningResult(
        best_k=best_k,
        best_score=float(scores[best_idx]),
        measure=measure.name,
        minimize=measure.minimize,
        table=table,
        learner=tuned,
        model=model,
    )
    print(f"[tune_k] {resampling.strategy} ({len(splits)} iterations): {result.describe()}")
    return result
