"""
Evaluator for churn model experiments.

Threshold selection and metric calculation on scored splits.
"""

from typing import Tuple

import numpy as np
import pandas as pd
from sklearn.metrics import (
    accuracy_score,
    precision_score,
    recall_score,
    f1_score,
    fbeta_score,
    roc_auc_score,
    confusion_matrix,
)

from .config import ExperimentConfig

PROBABILITY_COLUMN = "churn_probability"


class Evaluator:
    """Handles thresholding and metric calculation for experiments."""

    def __init__(self, target: str = "churn", probability_column: str = PROBABILITY_COLUMN):
        self.target = target
        self.probability_column = probability_column

    def find_optimal_threshold(
        self, df: pd.DataFrame, config: ExperimentConfig
    ) -> Tuple[float, pd.DataFrame]:
        """
        Find optimal probability threshold on the validation set.

        Args:
            df: Scored DataFrame with probability and target columns
            config: ExperimentConfig with optimization settings

        Returns:
            Tuple of (best_threshold, sweep_results_df)
        """
        y_true = df[self.target]
        probabilities = df[self.probability_column]

        thresholds = np.arange(
            config.threshold_step, 1.0, config.threshold_step
        ).round(4)
        thresholds = thresholds[thresholds < 1.0]
        results = []

        for thresh in thresholds:
            y_pred = (probabilities >= thresh).astype(int)
            results.append({
                "threshold": thresh,
                "accuracy": accuracy_score(y_true, y_pred),
                "precision": precision_score(y_true, y_pred, zero_division=0),
                "recall": recall_score(y_true, y_pred, zero_division=0),
                "f1": f1_score(y_true, y_pred, zero_division=0),
                "f2": fbeta_score(y_true, y_pred, beta=2, zero_division=0),
            })

        results_df = pd.DataFrame(results)

        # Apply constraints
        valid = results_df.copy()
        if config.min_recall:
            valid = valid[valid["recall"] >= config.min_recall]
        if config.min_precision:
            valid = valid[valid["precision"] >= config.min_precision]

        if len(valid) == 0:
            valid = results_df  # Fallback to unconstrained

        # Find best threshold for specified metric
        best_idx = valid[config.optimize_metric].idxmax()
        best_threshold = float(results_df.loc[best_idx, "threshold"])

        return best_threshold, results_df

    def calculate_metrics(
        self, df: pd.DataFrame, threshold: float
    ) -> dict:
        """
        Calculate all metrics at a given threshold.

        Args:
            df: Scored DataFrame with probability and target columns
            threshold: Probability threshold for classification

        Returns:
            Dictionary with all metrics
        """
        y_true = df[self.target]
        y_prob = df[self.probability_column]
        y_pred = (y_prob >= threshold).astype(int)

        cm = confusion_matrix(y_true, y_pred, labels=[0, 1])

        return {
            "accuracy": accuracy_score(y_true, y_pred),
            "precision": precision_score(y_true, y_pred, zero_division=0),
            "recall": recall_score(y_true, y_pred, zero_division=0),
            "f1": f1_score(y_true, y_pred, zero_division=0),
            "f2": fbeta_score(y_true, y_pred, beta=2, zero_division=0),
            "auc_roc": roc_auc_score(y_true, y_prob)
            if len(np.unique(y_true)) > 1
            else 0.0,
            "true_positives": int(cm[1, 1]),
            "true_negatives": int(cm[0, 0]),
            "false_positives": int(cm[0, 1]),
            "false_negatives": int(cm[1, 0]),
        }
