"""
End-to-end kNN workflow as an explicit pipeline:
clean -> task -> train/test split -> train -> predict -> score -> resample -> tune -> retrain
-> (optional) predict new observations.
Every stage takes its inputs as arguments and returns its outputs; nothing is global.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

import pandas as pd

from config import (
    DEFAULT_K,
    K_GRID,
    MEASURE_NAMES,
    RANDOM_SEED,
    TRAIN_FRACTION,
    TUNING_MEASURE,
)
import eda
from evaluation import format_confusion_matrix, format_per_class, format_scores, get_measure, get_measures, print_prediction_summary
from models_knn import KNNLearner, train
from preprocessing import clean_dataset, train_test_indices
from resampling import ResamplingSpec, resample
from tasks import ClassificationTask
from tuning import tune_k
from utils import set_seed


@dataclass(frozen=True)
class WorkflowConfig:
    target: str
    features: Tuple[str, ...]
    name: str = ""
    k: int = DEFAULT_K
    weights: str = "uniform"
    metric: str = "euclidean"
    scale: bool = True
    train_fraction: float = TRAIN_FRACTION
    random_state: int = RANDOM_SEED
    resampling: ResamplingSpec = field(default_factory=lambda: ResamplingSpec(random_state=RANDOM_SEED))
    k_values: Tuple[int, ...] = tuple(K_GRID)
    measures: Tuple[str, ...] = tuple(MEASURE_NAMES)
    tuning_measure: str = TUNING_MEASURE
    confusion_normalize: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "features", tuple(self.features))
        object.__setattr__(self, "k_values", tuple(self.k_values))
        object.__setattr__(self, "measures", tuple(self.measures))
        if not 0 < self.train_fraction < 1:
            raise ValueError(f"train_fraction must lie in (0, 1); got {self.train_fraction}.")
        get_measures(self.measures)
        get_measure(self.tuning_measure)
        self.learner()  # validates k / weights / metric

    def learner(self):
        return KNNLearner(k=self.k, weights=self.weights, metric=self.metric, scale=self.scale)


@dataclass(frozen=True, eq=False)
class WorkflowResult:
    config: WorkflowConfig
    data: pd.DataFrame
    task: ClassificationTask
    learner: KNNLearner
    train_ids: Any
    test_ids: Any
    model: Any
    prediction: Any
    scores: dict
    confusion: pd.DataFrame
    resample_result: Any
    tuning: Any
    new_prediction: Optional[Any] = None
    new_prediction_tuned: Optional[Any] = None


def run_workflow(df, config, new_data=None, show_plots=False):
    """
    Run the full workflow on a raw DataFrame.

    Args:
        df: raw data containing config.target and config.features
        config: WorkflowConfig
        new_data: optional DataFrame of new observations (feature columns) to label
            with the tuned model
        show_plots: render scatter, confusion-matrix and tuning plots

    Returns:
        WorkflowResult
    """
    set_seed(config.random_state)
    columns = [config.target] + list(config.features)
    data = clean_dataset(df, columns=columns)
    print(f"=== kNN workflow: {config.name or config.target} ({len(data)} rows) ===")
    eda.class_distribution(data, config.target)
    eda.numeric_summary(data, list(config.features))
    if show_plots:
        eda.plot_feature_pairs(data, config.features, config.target)
        if len(config.features) >= 2:
            eda.plot_feature_scatter(data, config.features[0], config.features[1], config.target)

    task = ClassificationTask.from_dataframe(data, config.target, config.features, name=config.name)
    print(task)
    learner = config.learner()

    train_ids, test_ids = train_test_indices(task.n_rows, config.train_fraction, random_state=config.random_state)
    print(f"Train/test split: {len(train_ids)} / {len(test_ids)} rows (seed={config.random_state})")
    model = train(task, learner, row_ids=train_ids)
    prediction = model.predict_task(task, row_ids=test_ids)
    scores, confusion = print_prediction_summary(
        prediction, measures=config.measures, normalize=config.confusion_normalize,
        title=f"Held-out test set (k={learner.k})",
    )
    if show_plots:
        eda.plot_confusion_matrix(prediction, normalize=config.confusion_normalize,
                                  title=f"Confusion matrix — kNN (k={learner.k})")

    resample_result = resample(task, learner, config.resampling, measures=config.measures)
    if show_plots:
        eda.plot_resampling_scores(resample_result)
    tuning = tune_k(task, learner, config.resampling, k_values=config.k_values,
                    measure=config.tuning_measure, refit=True)
    if show_plots:
        eda.plot_tuning_curve(tuning)

    new_prediction = new_prediction_tuned = None
    if new_data is not None:
        new_prediction = model.predict(new_data)
        new_prediction_tuned = tuning.model.predict(new_data)
        print("--- New observations ---")
        shown = new_data[list(config.features)].copy()
        shown[f"{config.target} (k={learner.k})"] = new_prediction.response
        shown[f"{config.target} (tuned k={tuning.best_k})"] = new_prediction_tuned.response
        print(shown.to_string(index=False))
        if show_plots and len(config.features) >= 2:
            eda.plot_new_observations(data, new_data, new_prediction,
                                      config.features[0], config.features[1], config.target)

    return WorkflowResult(
        config=config,
        data=data,
        task=task,
        learner=learner,
        train_ids=train_ids,
        test_ids=test_ids,
        model=model,
        prediction=prediction,
        scores=scores,
        confusion=confusion,
        resample_result=resample_result,
        tuning=tuning,
        new_prediction=new_prediction,
        new_prediction_tuned=new_prediction_tuned,
    )


def format_report(result):
    """Plain-text report of a workflow run."""
    cfg = result.config
    rs = cfg.resampling
    lines = [
        "=" * 60,
        f"k-NEAREST NEIGHBORS — RESULTS ({cfg.name or cfg.target})",
        "=" * 60,
        "",
        f"Task: target={cfg.target}, features={list(cfg.features)}, rows={result.task.n_rows}",
        f"Classes: {list(result.task.class_labels)}",
        f"Learner: {result.learner.describe()}",
        f"Split: train={len(result.train_ids)}, test={len(result.test_ids)}, seed={cfg.random_state}",
        "",
        "--- Held-out test set ---",
        format_scores(result.scores),
        "Per-class metrics:",
        format_per_class(result.prediction.per_class_metrics()),
        "Confusion matrix (rows=truth, columns=response):",
        format_confusion_matrix(result.confusion),
        "",
        f"--- Resampling: {rs.strategy} (folds={rs.folds}, repeats={rs.n_repeats}, stratify={rs.stratify}) ---",
        format_scores(result.resample_result.aggregate()),
        "",
        f"--- Grid search over k ({cfg.tuning_measure}) ---",
        result.tuning.table.to_string(index=False, float_format=lambda v: f"{v:.4f}"),
        result.tuning.describe(),
    ]
    if result.new_prediction is not None:
        lines.extend([
            "",
            "--- New observations ---",
            f"Predicted (k={result.learner.k}): " + str(list(result.new_prediction.response)),
            f"Predicted (tuned k={result.tuning.best_k}): " + str(list(result.new_prediction_tuned.response)),
        ])
    lines.extend(["", "=" * 60])
    return "\n".join(lines)


def write_report(result, path):
    with open(path, "w", encoding="utf-8") as f:
        f.write(format_report(result))
    print("Results saved to:", path)
    return path
