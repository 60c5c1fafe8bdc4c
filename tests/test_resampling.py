"""
Unit tests for resampling descriptors and cross-validation runs.
"""

import numpy as np
import pytest

from models_knn import KNNLearner
from resampling import ResamplingSpec, resample


def test_spec_validation():
    with pytest.raises(ValueError, match="strategy"):
        ResamplingSpec("bootstrap")
    with pytest.raises(ValueError, match="folds"):
        ResamplingSpec("cv", folds=1)
    with pytest.raises(ValueError, match="repeats"):
        ResamplingSpec("repeated_cv", repeats=0)
    with pytest.raises(ValueError, match="ratio"):
        ResamplingSpec("holdout", ratio=1.0)


def test_iterations():
    assert ResamplingSpec("repeated_cv", folds=10, repeats=10).iterations == 100
    assert ResamplingSpec("cv", folds=5).iterations == 5
    assert ResamplingSpec("holdout").iterations == 1


@pytest.mark.parametrize("stratify", [False, True])
def test_repeated_cv_partitions_rows_each_repeat(diabetes_task, stratify):
    spec = ResamplingSpec("repeated_cv", folds=5, repeats=3, stratify=stratify, random_state=0)
    splits = spec.instantiate(diabetes_task)

    assert len(splits) == 15
    for r in range(3):
        tests = [te for _, te in splits[r * 5:(r + 1) * 5]]
        assert np.array_equal(np.sort(np.concatenate(tests)), diabetes_task.row_ids)
    for tr, te in splits:
        assert len(np.intersect1d(tr, te)) == 0
        assert len(tr) + len(te) == diabetes_task.n_rows


def test_instantiate_is_reproducible(diabetes_task):
    spec = ResamplingSpec("cv", folds=4, random_state=3)
    a = spec.instantiate(diabetes_task)
    b = spec.instantiate(diabetes_task)
    for (tr_a, te_a), (tr_b, te_b) in zip(a, b):
        assert np.array_equal(tr_a, tr_b)
        assert np.array_equal(te_a, te_b)


def test_holdout(diabetes_task):
    (train, test), = ResamplingSpec("holdout", ratio=0.8, random_state=1).instantiate(diabetes_task)
    assert len(train) == 116
    assert len(test) == 29


def test_too_many_folds(two_cluster_task):
    with pytest.raises(ValueError, match="folds"):
        ResamplingSpec("cv", folds=50).instantiate(two_cluster_task)


def test_resample_scores_every_iteration(diabetes_task):
    spec = ResamplingSpec("repeated_cv", folds=5, repeats=2, random_state=0)
    result = resample(diabetes_task, KNNLearner(k=2), spec, measures=["accuracy", "misclassification"])

    assert len(result.scores) == 10
    assert list(result.scores["repeat"]) == [1] * 5 + [2] * 5
    assert list(result.scores["fold"]) == [1, 2, 3, 4, 5] * 2
    np.testing.assert_allclose(result.scores["accuracy"] + result.scores["misclassification"], 1.0)

    agg = result.aggregate()
    assert agg["accuracy"] == pytest.approx(result.scores["accuracy"].mean())
    assert agg["accuracy"] + agg["misclassification"] == pytest.approx(1.0)

    combined = result.prediction()
    assert len(combined) == 2 * diabetes_task.n_rows
    assert combined.confusion_matrix().to_numpy().sum() == 2 * diabetes_task.n_rows


def test_resample_perfect_separation(two_cluster_task):
    result = resample(two_cluster_task, KNNLearner(k=3), ResamplingSpec("cv", folds=5, stratify=True, random_state=0))
    assert result.aggregate()["misclassification"] == 0.0


def test_stratified_holdout_keeps_class_proportions(diabetes_task):
    spec = ResamplingSpec("holdout", ratio=0.8, stratify=True, random_state=5)
    (train, test), = spec.instantiate(diabetes_task)

    assert len(train) == 116
    assert len(np.intersect1d(train, test)) == 0
    assert np.array_equal(np.sort(np.concatenate([train, test])), diabetes_task.row_ids)
    test_counts = diabetes_task.y(test).value_counts()
    full_counts = diabetes_task.class_counts()
    for label in diabetes_task.class_labels:
        assert abs(test_counts.get(label, 0) - 0.2 * full_counts[label]) <= 1
