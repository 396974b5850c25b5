"""
Artifact management for churn model experiments.

Saves tables, the fitted model and the config for PASSING experiments only.
"""

import json
from pathlib import Path
from typing import TYPE_CHECKING

import joblib
import pandas as pd

if TYPE_CHECKING:
    from .modeling import ModelTrainer
    from .runner import ExperimentResult


class ArtifactManager:
    """Manages saving experiment artifacts."""

    MODEL_FILE = "model.joblib"

    def __init__(self, artifacts_dir: Path):
        """
        Initialize artifact manager.

        Args:
            artifacts_dir: Base directory for artifacts
        """
        self.artifacts_dir = artifacts_dir
        self.artifacts_dir.mkdir(parents=True, exist_ok=True)

    def save_artifacts(
        self,
        result: "ExperimentResult",
        threshold_sweep: pd.DataFrame,
        test_predictions: pd.DataFrame,
        trainer: "ModelTrainer",
        exploration: dict[str, pd.DataFrame],
    ) -> Path:
        """
        Save full artifacts for a passing experiment.

        Args:
            result: ExperimentResult from runner
            threshold_sweep: DataFrame from threshold optimization
            test_predictions: Test set with probabilities and predictions
            trainer: Fitted ModelTrainer
            exploration: Tables from exploration.explore

        Returns:
            Path to experiment artifacts directory
        """
        exp_dir = self.artifacts_dir / result.experiment_id
        exp_dir.mkdir(exist_ok=True)

        # Save config
        result.config.to_yaml(exp_dir / "config.yaml")

        # Save metrics
        metrics_df = pd.DataFrame([
            {
                "split": split,
                "threshold": result.threshold,
                **{
                    k[len(split) + 1:]: v
                    for k, v in result.metrics.items()
                    if k.startswith(f"{split}_")
                },
            }
            for split in ["train", "val", "test"]
        ])
        metrics_df.to_csv(exp_dir / "metrics.csv", index=False)

        # Save model outputs
        threshold_sweep.to_csv(exp_dir / "threshold_sweep.csv", index=False)
        test_predictions.to_csv(exp_dir / "predictions.csv")
        trainer.feature_importance().to_csv(exp_dir / "feature_importance.csv", index=False)
        trainer.cv_results().to_csv(exp_dir / "search_results.csv", index=False)
        joblib.dump(
            {"preprocessor": trainer.preprocessor, "model": trainer.model,
             "feature_columns": trainer.feature_columns, "threshold": result.threshold},
            exp_dir / self.MODEL_FILE,
        )

        # Save exploration tables
        eda_dir = exp_dir / "exploration"
        eda_dir.mkdir(exist_ok=True)
        for name, table in exploration.items():
            table.to_csv(eda_dir / f"{name}.csv")

        with open(exp_dir / "cleaning.json", "w") as f:
            json.dump(result.cleaning, f, indent=2)

        return exp_dir

    def load_experiment(self, experiment_id: str) -> dict | None:
        """
        Load artifacts for a specific experiment.

        Args:
            experiment_id: Experiment ID to load

        Returns:
            Dictionary with loaded artifacts, or None if not found
        """
        exp_dir = self.artifacts_dir / experiment_id
        if not exp_dir.exists():
            return None

        from .config import ExperimentConfig

        return {
            "config": ExperimentConfig.from_yaml(exp_dir / "config.yaml"),
            "metrics": pd.read_csv(exp_dir / "metrics.csv"),
            "threshold_sweep": pd.read_csv(exp_dir / "threshold_sweep.csv"),
            "predictions": pd.read_csv(exp_dir / "predictions.csv"),
            "feature_importance": pd.read_csv(exp_dir / "feature_importance.csv"),
            "model": joblib.load(exp_dir / self.MODEL_FILE),
        }
