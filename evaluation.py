"""
Evaluation utilities for kNN classification (multiclass).
Measures: Accuracy and misclassification rate (minimum); balanced accuracy, macro-F1.
Prediction results, confusion matrices (counts or normalized) and printable summaries.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np
import pandas as pd
from sklearn.metrics import (
    accuracy_score,
    balanced_accuracy_score,
    classification_report,
    confusion_matrix,
    f1_score,
    make_scorer,
    precision_score,
    recall_score,
)

CONFUSION_NORMALIZE_OPTIONS = [None, "true", "pred", "all"]


def misclassification_rate(y_true, y_pred):
    """Share of wrongly predicted rows (1 - accuracy)."""
    return 1.0 - accuracy_score(y_true, y_pred)


def _f1_macro(y_true, y_pred):
    return f1_score(y_true, y_pred, average="macro", zero_division=0)


@dataclass(frozen=True)
class Measure:
    name: str
    func: Callable
    minimize: bool = False

    def __call__(self, y_true, y_pred):
        return float(self.func(y_true, y_pred))

    @property
    def scorer(self):
        """sklearn scorer; sklearn maximizes, so minimized measures come back negated."""
        return make_scorer(self.func, greater_is_better=not self.minimize)

    def is_better(self, a, b):
        return a < b if self.minimize else a > b


MEASURES = {
    "accuracy": Measure("accuracy", accuracy_score),
    "misclassification": Measure("misclassification", misclassification_rate, minimize=True),
    "balanced_accuracy": Measure("balanced_accuracy", balanced_accuracy_score),
    "f1_macro": Measure("f1_macro", _f1_macro),
}


def get_measure(name):
    if isinstance(name, Measure):
        return name
    try:
        return MEASURES[name]
    except KeyError:
        raise ValueError(f"Unknown measure {name!r}; choose from {sorted(MEASURES)}.") from None


def get_measures(names):
    """Validate a measure name (or list of names) and return Measure objects."""
    if isinstance(names, (str, Measure)):
        names = [names]
    measures = [get_measure(n) for n in names]
    if not measures:
        raise ValueError("At least one measure is required.")
    return measures


@dataclass(frozen=True, eq=False)
class PredictionResult:
    """Predicted label per queried row, plus the true label when it is known."""
    row_ids: np.ndarray
    response: np.ndarray
    class_labels: Tuple
    truth: Optional[np.ndarray] = None

    def __post_init__(self):
        if self.truth is not None and len(self.truth) != len(self.response):
            raise ValueError(f"truth has {len(self.truth)} rows but response has {len(self.response)}.")
        if len(self.row_ids) != len(self.response):
            raise ValueError(f"row_ids has {len(self.row_ids)} entries but response has {len(self.response)}.")
        if self.truth is not None:
            unknown = sorted(str(v) for v in set(pd.unique(pd.Series(self.truth))) - set(self.class_labels))
            if unknown:
                raise ValueError(f"Truth contains label(s) {unknown} outside the class labels {list(self.class_labels)}.")

    def __len__(self):
        return len(self.response)

    @property
    def has_truth(self):
        return self.truth is not None

    def _require_truth(self):
        if self.truth is None:
            raise ValueError("Prediction has no ground truth; include the target column to score it.")

    def score(self, measures=("accuracy",)):
        """Return {measure name: value} for the requested measures."""
        self._require_truth()
        return {m.name: m(self.truth, self.response) for m in get_measures(measures)}

    def confusion_matrix(self, normalize=None):
        """
        Rows = true label, columns = predicted label, over every class label.
        normalize: None (counts), "true" (rows sum to 1), "pred" (columns sum to 1), "all".
        """
        self._require_truth()
        if normalize not in CONFUSION_NORMALIZE_OPTIONS:
            raise ValueError(f"normalize must be one of {CONFUSION_NORMALIZE_OPTIONS}; got {normalize!r}.")
        labels = list(self.class_labels)
        cm = confusion_matrix(self.truth, self.response, labels=labels, normalize=normalize)
        return pd.DataFrame(
            cm,
            index=pd.Index(labels, name="truth"),
            columns=pd.Index(labels, name="response"),
        )

    def per_class_metrics(self):
        """score_multiclass over the full class label set."""
        self._require_truth()
        return score_multiclass(self.truth, self.response, labels=self.class_labels)

    def to_frame(self):
        out = pd.DataFrame({"row_id": self.row_ids, "response": self.response})
        if self.truth is not None:
            out.insert(1, "truth", self.truth)
        return out

    @classmethod
    def combine(cls, predictions):
        """Stack several predictions (e.g. the test folds of a resampling)."""
        predictions = list(predictions)
        if not predictions:
            raise ValueError("Nothing to combine.")
        with_truth = [p.truth is not None for p in predictions]
        truth = np.concatenate([p.truth for p in predictions]) if all(with_truth) else None
        return cls(
            row_ids=np.concatenate([p.row_ids for p in predictions]),
            response=np.concatenate([p.response for p in predictions]),
            class_labels=predictions[0].class_labels,
            truth=truth,
        )


def score_multiclass(y_true, y_pred, labels=None):
    """
    Return dict with accuracy, misclassification, F1 (macro/weighted) and per-class metrics.
    Per-class accuracy is the per-class recall.
    """
    y_true = np.asarray(y_true)
    y_pred = np.asarray(y_pred)
    out = {
        "accuracy": float(accuracy_score(y_true, y_pred)),
        "misclassification": float(misclassification_rate(y_true, y_pred)),
        "f1_macro": float(f1_score(y_true, y_pred, average="macro", zero_division=0)),
        "f1_weighted": float(f1_score(y_true, y_pred, average="weighted", zero_division=0)),
    }

    if labels is None:
        labels = sorted(np.unique(np.concatenate([y_true, y_pred])))
    labels = list(labels)

    f1_per_class = f1_score(y_true, y_pred, average=None, labels=labels, zero_division=0)
    out["f1_per_class"] = {str(label): float(s) for label, s in zip(labels, f1_per_class)}
    recall_per_class = recall_score(y_true, y_pred, average=None, labels=labels, zero_division=0)
    out["accuracy_per_class"] = {str(label): float(s) for label, s in zip(labels, recall_per_class)}
    precision_per_class = precision_score(y_true, y_pred, average=None, labels=labels, zero_division=0)
    out["precision_per_class"] = {str(label): float(s) for label, s in zip(labels, precision_per_class)}

    out["confusion_matrix"] = confusion_matrix(y_true, y_pred, labels=labels).tolist()
    out["classification_report"] = classification_report(
        y_true, y_pred, output_dict=True, zero_division=0, labels=labels
    )
    return out


def format_scores(scores):
    return "\n".join(f"  {name:<20s}: {value:.4f}" for name, value in scores.items())


def format_confusion_matrix(cm):
    """Render a labelled confusion matrix; proportions get 3 decimals."""
    if np.issubdtype(cm.values.dtype, np.integer):
        return cm.to_string()
    return cm.to_string(float_format=lambda v: f"{v:.3f}")


def format_per_class(metrics):
    """Table of per-class precision, recall (per-class accuracy) and F1 from score_multiclass."""
    table = pd.DataFrame({
        "precision": metrics["precision_per_class"],
        "recall": metrics["accuracy_per_class"],
        "f1": metrics["f1_per_class"],
    })
    table.index.name = "class"
    return table.to_string(float_format=lambda v: f"{v:.3f}")


def print_prediction_summary(prediction, measures=("accuracy", "misclassification"), normalize=None, title="Prediction"):
    """Print scores, per-class metrics and the confusion matrix; return scores and matrix."""
    scores = prediction.score(measures)
    cm = prediction.confusion_matrix(normalize=normalize)
    print(f"--- {title} ({len(prediction)} rows) ---")
    print(format_scores(scores))
    print("Per-class metrics:")
    print(format_per_class(prediction.per_class_metrics()))
    print("Confusion matrix (rows=truth, columns=response):")
    print(format_confusion_matrix(cm))
    return scores, cm
