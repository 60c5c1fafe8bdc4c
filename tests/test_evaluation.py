"""
Unit tests for measures, prediction results and confusion matrices.
"""

import numpy as np
import pandas as pd
import pytest

from evaluation import (
    MEASURES,
    PredictionResult,
    format_confusion_matrix,
    format_per_class,
    get_measures,
    misclassification_rate,
    print_prediction_summary,
    score_multiclass,
)

LABELS = ("Adelie", "Chinstrap", "Gentoo")


@pytest.fixture
def prediction():
    truth = np.array(["Adelie", "Adelie", "Adelie", "Chinstrap", "Chinstrap", "Gentoo", "Gentoo", "Gentoo"])
    response = np.array(["Adelie", "Chinstrap", "Adelie", "Chinstrap", "Adelie", "Gentoo", "Gentoo", "Chinstrap"])
    return PredictionResult(row_ids=np.arange(8), response=response, class_labels=LABELS, truth=truth)


def test_scores(prediction):
    scores = prediction.score(["accuracy", "misclassification"])
    assert scores["accuracy"] == pytest.approx(5 / 8)
    assert scores["misclassification"] == pytest.approx(3 / 8)


def test_confusion_matrix_marginals_match_label_counts(prediction):
    cm = prediction.confusion_matrix()

    assert list(cm.index) == list(LABELS)
    assert list(cm.columns) == list(LABELS)
    truth_counts = pd.Series(prediction.truth).value_counts().reindex(LABELS, fill_value=0)
    response_counts = pd.Series(prediction.response).value_counts().reindex(LABELS, fill_value=0)
    assert cm.sum(axis=1).tolist() == truth_counts.tolist()
    assert cm.sum(axis=0).tolist() == response_counts.tolist()
    assert cm.loc["Gentoo", "Chinstrap"] == 1
    assert int(np.trace(cm.values)) == 5


def test_confusion_matrix_includes_unseen_classes():
    pred = PredictionResult(
        row_ids=np.arange(2), response=np.array(["a", "a"]), class_labels=("a", "b", "c"), truth=np.array(["a", "b"])
    )
    cm = pred.confusion_matrix()
    assert cm.shape == (3, 3)
    assert cm.loc["c"].sum() == 0


@pytest.mark.parametrize("normalize, axis", [("true", 1), ("pred", 0)])
def test_confusion_matrix_normalized(prediction, normalize, axis):
    cm = prediction.confusion_matrix(normalize=normalize)
    np.testing.assert_allclose(cm.sum(axis=axis).to_numpy(), 1.0)


def test_confusion_matrix_normalized_all(prediction):
    cm = prediction.confusion_matrix(normalize="all")
    assert cm.to_numpy().sum() == pytest.approx(1.0)


def test_confusion_matrix_rejects_unknown_normalization(prediction):
    with pytest.raises(ValueError, match="normalize"):
        prediction.confusion_matrix(normalize="rows")


def test_scoring_without_truth_fails():
    pred = PredictionResult(row_ids=np.arange(2), response=np.array(["a", "b"]), class_labels=("a", "b"))
    with pytest.raises(ValueError, match="ground truth"):
        pred.score()
    with pytest.raises(ValueError, match="ground truth"):
        pred.confusion_matrix()
    assert list(pred.to_frame().columns) == ["row_id", "response"]


def test_length_mismatch_fails():
    with pytest.raises(ValueError):
        PredictionResult(row_ids=np.arange(3), response=np.array(["a", "b", "a"]), class_labels=("a", "b"),
                         truth=np.array(["a"]))


def test_unknown_measure_fails():
    with pytest.raises(ValueError, match="Unknown measure"):
        get_measures(["accuracy", "auc"])
    with pytest.raises(ValueError):
        get_measures([])


def test_measure_direction():
    assert MEASURES["misclassification"].minimize
    assert not MEASURES["accuracy"].minimize
    assert MEASURES["misclassification"].is_better(0.1, 0.2)
    assert MEASURES["accuracy"].is_better(0.9, 0.8)
    assert misclassification_rate(["a", "b"], ["a", "a"]) == pytest.approx(0.5)


def test_combine_predictions(prediction):
    first = PredictionResult(prediction.row_ids[:3], prediction.response[:3], LABELS, prediction.truth[:3])
    second = PredictionResult(prediction.row_ids[3:], prediction.response[3:], LABELS, prediction.truth[3:])

    combined = PredictionResult.combine([first, second])

    assert np.array_equal(combined.row_ids, prediction.row_ids)
    pd.testing.assert_frame_equal(combined.confusion_matrix(), prediction.confusion_matrix())


def test_score_multiclass(prediction):
    out = score_multiclass(prediction.truth, prediction.response, labels=LABELS)
    assert out["accuracy"] == pytest.approx(5 / 8)
    assert out["misclassification"] == pytest.approx(3 / 8)
    assert out["accuracy_per_class"]["Adelie"] == pytest.approx(2 / 3)
    assert np.array(out["confusion_matrix"]).sum() == 8


def test_print_prediction_summary(prediction, capsys):
    scores, cm = print_prediction_summary(prediction, normalize="true")
    captured = capsys.readouterr().out
    assert "accuracy" in captured
    assert "Per-class metrics" in captured
    assert "Confusion matrix" in captured
    assert set(scores) == {"accuracy", "misclassification"}
    assert "0.667" in format_confusion_matrix(cm)


def test_truth_outside_class_labels_fails():
    with pytest.raises(ValueError, match="'z'"):
        PredictionResult(row_ids=np.arange(3), response=np.array(["a", "b", "a"]), class_labels=("a", "b"),
                         truth=np.array(["a", "b", "z"]))


def test_model_rejects_new_rows_with_unseen_truth_label():
    from models_knn import KNNLearner
    from tasks import ClassificationTask

    df = pd.DataFrame({"x": [0.0, 0.1, 5.0, 5.1], "label": ["a", "a", "b", "b"]})
    model = KNNLearner(k=1).train(ClassificationTask.from_dataframe(df, "label"))
    new = pd.DataFrame({"x": [0.05, 5.05, 9.0], "label": ["a", "b", "z"]})

    with pytest.raises(ValueError, match="outside the class labels"):
        model.predict(new)
    assert len(model.predict(new.drop(columns=["label"]))) == 3


def test_per_class_metrics_cover_every_label(prediction):
    metrics = prediction.per_class_metrics()
    assert set(metrics["f1_per_class"]) == set(LABELS)
    assert metrics["accuracy_per_class"]["Chinstrap"] == pytest.approx(0.5)
    table = format_per_class(metrics)
    assert "precision" in table
    assert "Gentoo" in table
