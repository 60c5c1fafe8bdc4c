"""
kNN on the Palmer penguins: classify species (Adelie / Chinstrap / Gentoo)
from bill length, flipper length and body mass, then label five new penguins.

    python penguins_knn.py

Rows with a missing measurement or species are dropped before building the task.
"""

import os

import pandas as pd

from config import OUTPUT_DIR, PENGUINS_FEATURES, PENGUINS_TARGET, RANDOM_SEED
from data_loading import load_penguins
from resampling import ResamplingSpec
from workflow import WorkflowConfig, run_workflow, write_report

PENGUINS_RESULTS_PATH = os.path.join(OUTPUT_DIR, "penguins_knn_results.txt")

# Synthetic observations: two Adelie-like, one Chinstrap-like, two Gentoo-like
NEW_PENGUINS = pd.DataFrame({
    "bill_length_mm": [38.5, 40.1, 49.6, 46.8, 50.2],
    "flipper_length_mm": [188.0, 191.0, 195.0, 216.0, 222.0],
    "body_mass_g": [3550.0, 3800.0, 3700.0, 5050.0, 5500.0],
})


def penguins_config(**overrides):
    params = {
        "name": "penguins",
        "target": PENGUINS_TARGET,
        "features": PENGUINS_FEATURES,
        "k": 2,
        "resampling": ResamplingSpec("repeated_cv", folds=10, repeats=10, stratify=True, random_state=RANDOM_SEED),
    }
    params.update(overrides)
    return WorkflowConfig(**params)


def run(df=None, new_data=None, show_plots=False, save=False, **overrides):
    """Run the penguins workflow; new_data defaults to NEW_PENGUINS."""
    df = load_penguins() if df is None else df
    new_data = NEW_PENGUINS if new_data is None else new_data
    result = run_workflow(df, penguins_config(**overrides), new_data=new_data, show_plots=show_plots)
    if save:
        write_report(result, PENGUINS_RESULTS_PATH)
    return result


def main():
    return run(show_plots=True)


if __name__ == "__main__":
    main()
