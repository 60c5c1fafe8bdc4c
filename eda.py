"""
Exploratory plots and summaries for the kNN workflows.
Class distribution, numeric summaries, feature scatter/pair plots,
confusion-matrix heatmaps, tuning and resampling curves.
Plots are shown when show=True and saved only when save_path is given.
"""

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns

from data_loading import require_columns
from evaluation import format_confusion_matrix


def _finish(fig, show, save_path):
    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    if show:
        plt.show()
    plt.close(fig)
    return fig


def class_distribution(df, target):
    """Compute and print class counts, percentages and imbalance ratio."""
    require_columns(df, [target])
    counts = df[target].value_counts()
    pct = df[target].value_counts(normalize=True) * 100
    minor = counts.min()
    major = counts.max()
    ratio = major / minor if minor > 0 else float("inf")
    print(f"Class distribution (target: {target})")
    print(counts.to_string())
    print(f"\nPercentages:\n{pct.round(2).to_string()}")
    print(f"\nImbalance ratio (majority/minority): {ratio:.2f}")
    return {"counts": counts, "ratio": ratio, "pct": pct}


def numeric_summary(df, columns=None):
    """Describe numeric features."""
    if columns is None:
        columns = df.select_dtypes(include=[np.number]).columns.tolist()
    if not columns:
        print("No numeric columns.")
        return None
    desc = df[list(columns)].describe()
    print("Numeric features — describe:")
    print(desc.to_string())
    return desc


def plot_feature_scatter(df, x, y, hue, show=True, save_path=None):
    """Scatter plot of two features colored by class."""
    require_columns(df, [x, y, hue])
    fig, ax = plt.subplots(figsize=(7, 5))
    sns.scatterplot(data=df, x=x, y=y, hue=hue, style=hue, ax=ax)
    ax.set_title(f"{y} vs {x} by {hue}")
    ax.grid(True, alpha=0.3)
    return _finish(fig, show, save_path)


def plot_feature_pairs(df, features, hue, show=True, save_path=None):
    """Pairwise scatter plots (KDE on the diagonal) of the features colored by class."""
    features = list(features)
    require_columns(df, features + [hue])
    grid = sns.pairplot(df[features + [hue]], hue=hue, corner=True)
    grid.figure.suptitle(f"Features by {hue}", y=1.02)
    return _finish(grid.figure, show, save_path)


def plot_confusion_matrix(prediction, normalize=None, title=None, show=True, save_path=None):
    """Heatmap of a prediction's confusion matrix (rows=truth, columns=response)."""
    cm = prediction.confusion_matrix(normalize=normalize)
    print(format_confusion_matrix(cm))
    fig, ax = plt.subplots(figsize=(6, 5))
    fmt = "d" if normalize is None else ".2f"
    label = "Count" if normalize is None else "Proportion"
    sns.heatmap(cm, annot=True, fmt=fmt, cmap="Blues", ax=ax, cbar_kws={"label": label})
    ax.set_xlabel("Predicted")
    ax.set_ylabel("True")
    ax.set_title(title or "Confusion matrix")
    return _finish(fig, show, save_path)


def plot_tuning_curve(tuning_result, show=True, save_path=None):
    """Cross-validated score (mean ± std) vs k; the selected k is marked."""
    table = tuning_result.table
    measure = tuning_result.measure
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(table["k"], table[measure], "o-", label=measure)
    ax.fill_between(table["k"], table[measure] - table["std"], table[measure] + table["std"], alpha=0.2)
    ax.axvline(tuning_result.best_k, color="gray", linestyle="--", label=f"best k={tuning_result.best_k}")
    ax.set_xlabel("n_neighbors (k)")
    ax.set_ylabel(f"Cross-Val {measure}")
    ax.set_xticks(table["k"])
    ax.set_title("kNN — grid search over k")
    ax.legend()
    ax.grid(True, alpha=0.3)
    return _finish(fig, show, save_path)


def plot_resampling_scores(resample_result, measure=None, show=True, save_path=None):
    """Box plot of per-iteration scores of a resampling, one box per repeat."""
    measure = measure or resample_result.measure_names[0]
    scores = resample_result.scores
    fig, ax = plt.subplots(figsize=(max(6, 0.5 * scores["repeat"].nunique() + 4), 4))
    sns.boxplot(data=scores, x="repeat", y=measure, ax=ax, color="steelblue")
    mean = float(scores[measure].mean())
    ax.axhline(mean, color="gray", linestyle="--", label=f"mean={mean:.4f}")
    ax.set_title(f"{resample_result.resampling.strategy}: {measure} per iteration")
    ax.legend()
    return _finish(fig, show, save_path)


def plot_new_observations(df, new_data, prediction, x, y, hue, show=True, save_path=None):
    """Training data scatter with new observations overlaid, labelled by predicted class."""
    require_columns(df, [x, y, hue])
    require_columns(new_data, [x, y], what="new observations")
    fig, ax = plt.subplots(figsize=(7, 5))
    sns.scatterplot(data=df, x=x, y=y, hue=hue, alpha=0.5, ax=ax)
    shown = pd.DataFrame({x: new_data[x].to_numpy(), y: new_data[y].to_numpy(), "predicted": prediction.response})
    ax.scatter(shown[x], shown[y], marker="X", s=120, color="black", label="new")
    for _, row in shown.iterrows():
        ax.annotate(str(row["predicted"]), (row[x], row[y]), textcoords="offset points", xytext=(5, 5), fontsize=8)
    ax.set_title(f"New observations ({len(shown)}) with predicted {hue}")
    ax.legend()
    return _finish(fig, show, save_path)
