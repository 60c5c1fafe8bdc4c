"""
kNN on the diabetes data (Reaven & Miller): classify patients as Normal / Chemical / Overt
from insulin, glucose and sspg.

    python diabetes_knn.py

Steps: load -> clean -> task -> seeded 80/20 split -> train (k=2) -> predict held-out rows
-> accuracy / misclassification + confusion matrix -> repeated 10-fold CV -> grid search k=1..12
-> retrain with the best k. Writes outputs/diabetes_knn_results.txt when save=True.
"""

import os

from config import DIABETES_FEATURES, DIABETES_TARGET, OUTPUT_DIR, RANDOM_SEED
from data_loading import load_diabetes
from resampling import ResamplingSpec
from workflow import WorkflowConfig, run_workflow, write_report

DIABETES_RESULTS_PATH = os.path.join(OUTPUT_DIR, "diabetes_knn_results.txt")


def diabetes_config(**overrides):
    params = {
        "name": "diabetes",
        "target": DIABETES_TARGET,
        "features": DIABETES_FEATURES,
        "k": 2,
        "resampling": ResamplingSpec("repeated_cv", folds=10, repeats=10, random_state=RANDOM_SEED),
    }
    params.update(overrides)
    return WorkflowConfig(**params)


def run(df=None, show_plots=False, save=False, **overrides):
    """Run the diabetes workflow. df defaults to load_diabetes()."""
    df = load_diabetes() if df is None else df
    result = run_workflow(df, diabetes_config(**overrides), show_plots=show_plots)
    if save:
        write_report(result, DIABETES_RESULTS_PATH)
    return result


def main():
    result = run(show_plots=True)
    print()
    print(result.tuning.table.to_string(index=False))
    return result


if __name__ == "__main__":
    main()
