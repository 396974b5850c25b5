"""
Experiment history for the churn model pipeline.

Every run leaves one JSON record in the logs directory, whatever its
outcome: PASS and FAIL runs record the cleaning report, the fitted
booster and the test metrics, ERROR runs record the exception. The
records are flattened into a comparison table for the CLI.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd

if TYPE_CHECKING:
    from .runner import ExperimentResult
    from .config import ExperimentConfig


# Flattened record field -> summary column
SUMMARY_COLUMNS = {
    "experiment_id": "experiment_id",
    "config.name": "name",
    "timestamp": "timestamp",
    "status": "status",
    "cleaning.n_rows": "n_rows",
    "cleaning.imputed_rows": "imputed_rows",
    "cleaning.dropped_rows": "dropped_rows",
    "model.best_iteration": "best_iteration",
    "results.threshold": "threshold",
    "results.metrics.test_accuracy": "accuracy",
    "results.metrics.test_precision": "precision",
    "results.metrics.test_recall": "recall",
    "results.metrics.test_f1": "f1",
    "results.metrics.test_auc_roc": "auc_roc",
    "duration_seconds": "duration_seconds",
    "error": "error",
}


class ExperimentLogger:
    """One JSON record per experiment run."""

    def __init__(self, logs_dir: Path):
        self.logs_dir = logs_dir
        self.logs_dir.mkdir(parents=True, exist_ok=True)

    def log_experiment(self, result: "ExperimentResult") -> Path:
        """
        Record a completed run.

        The full config is stored so a logged run can be repeated from
        its record alone.

        Args:
            result: ExperimentResult from runner

        Returns:
            Path to the record
        """
        return self._write(result.experiment_id, {
            "experiment_id": result.experiment_id,
            "timestamp": result.timestamp.isoformat(),
            "status": "PASS" if result.passed else "FAIL",
            "duration_seconds": result.duration_seconds,
            "config": result.config.to_dict(),
            "cleaning": result.cleaning,
            "model": {
                "best_params": result.best_params,
                "best_iteration": result.best_iteration,
            },
            "results": {
                "threshold": result.threshold,
                "metrics": result.metrics,
            },
        })

    def log_failure(
        self,
        experiment_id: str,
        config: "ExperimentConfig",
        error: Exception,
    ) -> Path:
        """Record a run that raised before producing a result."""
        return self._write(experiment_id, {
            "experiment_id": experiment_id,
            "timestamp": datetime.now().isoformat(),
            "status": "ERROR",
            "config": config.to_dict(),
            "error": f"{type(error).__name__}: {error}",
        })

    def _write(self, experiment_id: str, record: dict) -> Path:
        log_path = self.logs_dir / f"{experiment_id}.json"
        with open(log_path, "w") as f:
            # numpy scalars and paths are written as strings
            json.dump(record, f, indent=2, default=str)
        return log_path

    def get_all_logs(self) -> list[dict]:
        """All experiment records, ordered by file name."""
        logs = []
        for log_file in sorted(self.logs_dir.glob("exp_*.json")):
            with open(log_file) as f:
                logs.append(json.load(f))
        return logs

    def get_summary_dataframe(self) -> pd.DataFrame:
        """
        One row per run, newest first.

        Columns cover the data each run saw (rows kept, imputed and
        dropped during cleaning), the fitted booster size, the chosen
        threshold and the test metrics. Columns a run never reached
        (an ERROR run has no metrics) are NaN.
        """
        logs = self.get_all_logs()
        if not logs:
            return pd.DataFrame()

        summary = (
            pd.json_normalize(logs)
            .reindex(columns=list(SUMMARY_COLUMNS))
            .rename(columns=SUMMARY_COLUMNS)
        )
        return summary.sort_values("timestamp", ascending=False, ignore_index=True)
