"""
Resampling: holdout, k-fold and repeated k-fold cross-validation of a learner on a task.
Splits come from sklearn; each iteration trains on the train rows and predicts the test rows.
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import pandas as pd
from sklearn.model_selection import KFold, RepeatedKFold, RepeatedStratifiedKFold, StratifiedKFold, train_test_split

from config import CV_FOLDS, CV_REPEATS, HOLDOUT_RATIO, MEASURE_NAMES, RESAMPLING_STRATEGIES
from evaluation import PredictionResult, get_measures
from preprocessing import train_test_indices


@dataclass(frozen=True)
class ResamplingSpec:
    """How to partition task rows into train/test sets, possibly repeatedly."""
    strategy: str = "repeated_cv"
    folds: int = CV_FOLDS
    repeats: int = CV_REPEATS
    ratio: float = HOLDOUT_RATIO
    stratify: bool = False
    random_state: Optional[int] = None

    def __post_init__(self):
        if self.strategy not in RESAMPLING_STRATEGIES:
            raise ValueError(f"Unknown resampling strategy {self.strategy!r}; choose from {RESAMPLING_STRATEGIES}.")
        if self.strategy != "holdout" and self.folds < 2:
            raise ValueError(f"Cross-validation needs at least 2 folds; got {self.folds}.")
        if self.strategy == "repeated_cv" and self.repeats < 1:
            raise ValueError(f"repeats must be >= 1; got {self.repeats}.")
        if self.strategy == "holdout" and not 0 < self.ratio < 1:
            raise ValueError(f"Holdout ratio must lie in (0, 1); got {self.ratio}.")

    @property
    def iterations(self):
        if self.strategy == "holdout":
            return 1
        if self.strategy == "cv":
            return self.folds
        return self.folds * self.repeats

    @property
    def n_repeats(self):
        return self.repeats if self.strategy == "repeated_cv" else 1

    def _splitter(self):
        if self.strategy == "cv":
            cls = StratifiedKFold if self.stratify else KFold
            return cls(n_splits=self.folds, shuffle=True, random_state=self.random_state)
        cls = RepeatedStratifiedKFold if self.stratify else RepeatedKFold
        return cls(n_splits=self.folds, n_repeats=self.repeats, random_state=self.random_state)

    def instantiate(self, task):
        """Return the list of (train_row_ids, test_row_ids) for this task."""
        if self.strategy == "holdout":
            if self.stratify:
                train, test = train_test_split(
                    task.row_ids, train_size=self.ratio, stratify=task.y(), random_state=self.random_state
                )
                return [(np.sort(train), np.sort(test))]
            return [train_test_indices(task.n_rows, self.ratio, random_state=self.random_state)]
        if self.folds > task.n_rows:
            raise ValueError(f"Cannot split {task.n_rows} rows into {self.folds} folds.")
        X = task.X()
        y = task.y() if self.stratify else None
        return [(np.asarray(tr), np.asarray(te)) for tr, te in self._splitter().split(X, y)]


@dataclass(frozen=True, eq=False)
class ResampleResult:
    task_name: str
    learner: object
    resampling: ResamplingSpec
    scores: pd.DataFrame
    predictions: List[PredictionResult]

    @property
    def measure_names(self):
        return [c for c in self.scores.columns if c not in ("iteration", "repeat", "fold")]

    def aggregate(self):
        """Mean of each measure over all iterations."""
        return {m: float(self.scores[m].mean()) for m in self.measure_names}

    def prediction(self):
        """All test-set predictions stacked (rows may repeat across repeats)."""
        return PredictionResult.combine(self.predictions)


def resample(task, learner, resampling, measures=MEASURE_NAMES):
    """Train/predict once per resampling iteration and score each test set."""
    measures = get_measures(measures)
    splits = resampling.instantiate(task)
    folds_per_repeat = len(splits) // resampling.n_repeats

    rows = []
    predictions = []
    for i, (train_ids, test_ids) in enumerate(splits):
        model = learner.train(task, row_ids=train_ids)
        pred = model.predict_task(task, row_ids=test_ids)
        predictions.append(pred)
        row = {"iteration": i + 1, "repeat": i // folds_per_repeat + 1, "fold": i % folds_per_repeat + 1}
        row.update(pred.score(measures))
        rows.append(row)

    result = ResampleResult(
        task_name=task.name,
        learner=learner,
        resampling=resampling,
        scores=pd.DataFrame(rows),
        predictions=predictions,
    )
    print(
        f"[resample] {learner.name} {learner.describe()} | {resampling.strategy} "
        f"({len(splits)} iterations): "
        + ", ".join(f"{k}={v:.4f}" for k, v in result.aggregate().items())
    )
    return result
