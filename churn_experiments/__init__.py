"""
Experiment pipeline for telco churn modeling.

Usage:
    from churn_experiments import ExperimentRunner, ExperimentConfig

    # Run from YAML
    runner = ExperimentRunner()
    result = runner.run_from_yaml("configs/baseline.yaml")
    print(result.summary())

    # Run programmatically
    config = ExperimentConfig(
        name="custom",
        description="Only contract eligibility",
        derived_features=["able_to_churn"]
    )
    result = runner.run(config)

CLI:
    python -m churn_experiments.run configs/baseline.yaml
    python -m churn_experiments.run --list
"""

from .config import ExperimentConfig
from .runner import ExperimentRunner, ExperimentResult
from .cleaning import CleaningReport, clean_dataset, load_dataset, split_dataset
from .evaluator import Evaluator
from .exploration import explore
from .modeling import ModelTrainer
from .logger import ExperimentLogger
from .artifacts import ArtifactManager

__all__ = [
    "ExperimentConfig",
    "ExperimentRunner",
    "ExperimentResult",
    "CleaningReport",
    "Evaluator",
    "ExperimentLogger",
    "ArtifactManager",
    "ModelTrainer",
    "clean_dataset",
    "load_dataset",
    "split_dataset",
    "explore",
]
