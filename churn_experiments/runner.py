"""
Experiment runner for the churn model pipeline.

Single entry point for running experiments.
"""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional
import uuid

import pandas as pd

from churn_features import FeatureDeriver

from .artifacts import ArtifactManager
from .cleaning import clean_dataset, load_dataset, split_dataset
from .config import ExperimentConfig
from .evaluator import Evaluator
from .exploration import explore
from .logger import ExperimentLogger
from .modeling import ModelTrainer


@dataclass
class ExperimentResult:
    """Container for experiment results."""

    experiment_id: str
    config: ExperimentConfig
    metrics: dict
    threshold: float
    passed: bool
    timestamp: datetime
    duration_seconds: float
    best_params: dict = field(default_factory=dict)
    best_iteration: Optional[int] = None
    cleaning: dict = field(default_factory=dict)

    def summary(self) -> str:
        """Human-readable summary."""
        status = "PASS" if self.passed else "FAIL"
        test_acc = self.metrics.get("test_accuracy", 0)
        test_rec = self.metrics.get("test_recall", 0)
        test_f1 = self.metrics.get("test_f1", 0)
        test_auc = self.metrics.get("test_auc_roc", 0)

        return (
            f"[{self.experiment_id}] {self.config.name} - {status}\n"
            f"  Accuracy:  {test_acc:.1%}\n"
            f"  Recall:    {test_rec:.1%}\n"
            f"  F1:        {test_f1:.3f}\n"
            f"  AUC:       {test_auc:.3f}\n"
            f"  Threshold: {self.threshold:.2f}"
        )


class ExperimentRunner:
    """
    Single entry point for running experiments.

    Usage:
        runner = ExperimentRunner()

        # From YAML config
        result = runner.run_from_yaml("configs/baseline.yaml")

        # From ExperimentConfig object
        config = ExperimentConfig(name="custom", ...)
        result = runner.run(config)

        # Batch run
        results = runner.run_batch(["configs/baseline.yaml", "configs/no_derived.yaml"])
    """

    def __init__(
        self,
        base_path: Optional[Path] = None,
        logs_dir: str = "logs",
        artifacts_dir: str = "artifacts",
    ):
        """
        Initialize runner.

        Args:
            base_path: Base path for data and outputs (default: this file's parent)
            logs_dir: Subdirectory for logs
            artifacts_dir: Subdirectory for artifacts
        """
        self.base_path = Path(base_path) if base_path else Path(__file__).parent
        self.logs_dir = self.base_path / logs_dir
        self.artifacts_dir = self.base_path / artifacts_dir

        self.logger = ExperimentLogger(self.logs_dir)
        self.artifact_manager = ArtifactManager(self.artifacts_dir)

    def generate_experiment_id(self) -> str:
        """Generate unique experiment ID: exp_YYYYMMDD_XXXX"""
        date_str = datetime.now().strftime("%Y%m%d")
        short_uuid = uuid.uuid4().hex[:4]
        return f"exp_{date_str}_{short_uuid}"

    def prepare_data(self, config: ExperimentConfig) -> tuple[pd.DataFrame, dict]:
        """
        Load, clean and derive features.

        Returns:
            Tuple of (model-ready DataFrame, cleaning report dict)
        """
        raw_df = load_dataset(self.base_path / config.data_path, config.sheet_name)
        clean_df, report = clean_dataset(raw_df, config)

        if config.derived_features:
            deriver = FeatureDeriver(features=config.derived_features)
            clean_df = deriver.derive(clean_df).df

        return clean_df, report.to_dict()

    def run(self, config: ExperimentConfig) -> ExperimentResult:
        """
        Run a single experiment.

        Args:
            config: ExperimentConfig to run

        Returns:
            ExperimentResult with metrics and pass/fail status
        """
        experiment_id = self.generate_experiment_id()
        start_time = datetime.now()
        evaluator = Evaluator(target=config.target)

        try:
            df, cleaning = self.prepare_data(config)
            exploration = explore(df, target=config.target)

            train_df, val_df, test_df = split_dataset(
                df,
                config.target,
                test_size=config.test_size,
                val_size=config.val_size,
                random_state=config.random_state,
            )

            # Search hyperparameters, refit with early stopping
            trainer = ModelTrainer(config).fit(train_df, val_df)

            scored = {}
            for split, split_df in [
                ("train", train_df),
                ("val", val_df),
                ("test", test_df),
            ]:
                split_df = split_df.copy()
                split_df[evaluator.probability_column] = trainer.predict_proba(split_df)
                scored[split] = split_df

            # Find optimal threshold on validation set
            threshold, val_sweep = evaluator.find_optimal_threshold(
                scored["val"], config
            )

            # Flatten metrics with split prefixes
            metrics = {}
            for split, split_df in scored.items():
                split_metrics = evaluator.calculate_metrics(split_df, threshold)
                for metric_name, value in split_metrics.items():
                    metrics[f"{split}_{metric_name}"] = value

            # Determine pass/fail
            passed = self._evaluate_pass_fail(metrics, config)

            duration = (datetime.now() - start_time).total_seconds()

            result = ExperimentResult(
                experiment_id=experiment_id,
                config=config,
                metrics=metrics,
                threshold=threshold,
                passed=passed,
                timestamp=start_time,
                duration_seconds=duration,
                best_params=trainer.best_params,
                best_iteration=trainer.best_iteration,
                cleaning=cleaning,
            )

            # Always log
            self.logger.log_experiment(result)

            # Save full artifacts only if passed
            if passed:
                test_predictions = scored["test"]
                test_predictions["predicted_churn"] = (
                    test_predictions[evaluator.probability_column] >= threshold
                ).astype(int)
                self.artifact_manager.save_artifacts(
                    result,
                    threshold_sweep=val_sweep,
                    test_predictions=test_predictions,
                    trainer=trainer,
                    exploration=exploration,
                )

            return result

        except Exception as e:
            # Log failure
            self.logger.log_failure(experiment_id, config, e)
            raise

    def run_from_yaml(self, config_path: str | Path) -> ExperimentResult:
        """
        Load config from YAML and run.

        Args:
            config_path: Path to YAML config (relative to base_path or absolute)

        Returns:
            ExperimentResult
        """
        path = Path(config_path)
        if not path.is_absolute():
            path = self.base_path / path
        config = ExperimentConfig.from_yaml(path)
        return self.run(config)

    def run_batch(
        self,
        config_paths: list[str | Path],
        stop_on_failure: bool = False,
    ) -> list[ExperimentResult]:
        """
        Run multiple experiments in sequence.

        Args:
            config_paths: List of paths to YAML configs
            stop_on_failure: Whether to stop if an experiment errors

        Returns:
            List of ExperimentResults
        """
        results = []
        for path in config_paths:
            print(f"\n{'=' * 60}")
            print(f"Running: {Path(path).name}")
            print("=" * 60)
            try:
                result = self.run_from_yaml(path)
            except Exception as e:
                print(f"ERROR: {path} - {e}")
                if stop_on_failure:
                    raise
                continue

            results.append(result)
            print(result.summary())
            if result.passed:
                print(f"\nArtifacts saved to: {self.artifacts_dir / result.experiment_id}/")

        if len(results) > 1:
            print(f"\n{'=' * 60}")
            print("BATCH SUMMARY")
            print("=" * 60)
            passed = sum(1 for r in results if r.passed)
            print(f"Total: {len(results)}, Passed: {passed}, Failed: {len(results) - passed}")

            print("\nResults:")
            for r in results:
                status = "PASS" if r.passed else "FAIL"
                auc = r.metrics.get("test_auc_roc", 0)
                print(f"  [{status}] {r.config.name}: {auc:.3f} AUC")

        return results

    def list_experiments(self) -> pd.DataFrame:
        """
        Get summary of all past experiments.

        Returns:
            DataFrame with experiment history
        """
        return self.logger.get_summary_dataframe()

    def _evaluate_pass_fail(
        self,
        metrics: dict,
        config: ExperimentConfig,
    ) -> bool:
        """Evaluate if experiment passes its acceptance criteria."""
        if metrics["test_accuracy"] < config.min_accuracy:
            return False

        # Check minimum F1 if specified
        if config.min_f1 is not None and metrics["test_f1"] < config.min_f1:
            return False

        return True
