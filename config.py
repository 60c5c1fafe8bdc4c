"""
kNN classification workflows: configuration.
Reproducibility: random seeds, paths, datasets, learner options and defaults.
"""

import os

# ----- Reproducibility -----
RANDOM_SEED = 42

# ----- Paths -----
PROJECT_DIR = os.path.dirname(os.path.abspath(__file__))
OUTPUT_DIR = os.path.join(PROJECT_DIR, "outputs")
os.makedirs(OUTPUT_DIR, exist_ok=True)

# ----- Diabetes (Reaven & Miller, as shipped with R's mclust) -----
DIABETES_DATA_PATH = os.path.join(PROJECT_DIR, "diabetes.csv")
DIABETES_URL = "https://vincentarelbundock.github.io/Rdatasets/csv/mclust/diabetes.csv"
DIABETES_TARGET = "class"  # Normal / Chemical / Overt
DIABETES_FEATURES = ["insulin", "glucose", "sspg"]

# ----- Palmer penguins -----
PENGUINS_DATA_PATH = os.path.join(PROJECT_DIR, "penguins.csv")
PENGUINS_TARGET = "species"  # Adelie / Chinstrap / Gentoo
PENGUINS_FEATURES = ["bill_length_mm", "flipper_length_mm", "body_mass_g"]

# ----- Train/test split -----
TRAIN_FRACTION = 0.8

# ----- Learner -----
DEFAULT_K = 2
WEIGHTS_OPTIONS = ["uniform", "distance"]
METRIC_OPTIONS = ["euclidean", "manhattan", "minkowski"]

# ----- Resampling and tuning -----
RESAMPLING_STRATEGIES = ["holdout", "cv", "repeated_cv"]
CV_FOLDS = 10
CV_REPEATS = 10
HOLDOUT_RATIO = 2 / 3
K_GRID = list(range(1, 13))

# ----- Evaluation measures -----
MEASURE_NAMES = ["accuracy", "misclassification"]
TUNING_MEASURE = "misclassification"
