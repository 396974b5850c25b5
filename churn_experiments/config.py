"""
Experiment configuration for the churn model pipeline.

Defines the ExperimentConfig dataclass for YAML-driven experimentation.
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Literal, Optional, Union

import yaml


@dataclass
class ExperimentConfig:
    """
    Configuration for a single experiment.

    Load from YAML:
        config = ExperimentConfig.from_yaml("configs/baseline.yaml")

    Create programmatically:
        config = ExperimentConfig(
            name="no_derived",
            description="Baseline without engineered features",
            derived_features=[]
        )
    """

    # Metadata
    name: str
    description: str = ""

    # Data (relative to the runner's base path)
    data_path: str = "data/Telco_customer_churn.xlsx"
    sheet_name: Union[str, int] = 0
    target: str = "churn"
    target_label_column: str = "churn_label"
    id_column: str = "customer_id"

    # Cleaning: columns that leak the outcome
    leakage_columns: list[str] = field(default_factory=lambda: [
        "churn_value",
        "churn_score",
        "cltv",
        "churn_reason",
    ])
    # Cleaning: constant or location columns with no signal
    uninformative_columns: list[str] = field(default_factory=lambda: [
        "count",
        "country",
        "state",
        "city",
        "zip_code",
        "lat_long",
        "latitude",
        "longitude",
    ])

    # Feature engineering toggles
    # Available: diff_charge, able_to_churn
    derived_features: list[str] = field(default_factory=lambda: [
        "diff_charge",
        "able_to_churn",
    ])

    # Splits
    test_size: float = 0.2
    val_size: float = 0.2
    random_state: int = 42

    # Hyperparameter search (successive halving over LightGBM)
    param_distributions: dict[str, list] = field(default_factory=lambda: {
        "num_leaves": [7, 15, 31, 63],
        "max_depth": [-1, 3, 5, 7],
        "learning_rate": [0.01, 0.03, 0.05, 0.1, 0.2],
        "min_child_samples": [5, 10, 20, 40],
        "subsample": [0.6, 0.8, 1.0],
        "subsample_freq": [1],
        "colsample_bytree": [0.6, 0.8, 1.0],
        "reg_lambda": [0.0, 0.1, 1.0, 10.0],
    })
    search_candidates: int = 32
    search_factor: int = 3
    search_estimators: int = 200
    search_scoring: str = "roc_auc"
    cv_folds: int = 5
    n_jobs: int = -1

    # Final fit with early stopping on the validation split
    max_estimators: int = 2000
    early_stopping_rounds: int = 50
    balance_classes: bool = False

    # Threshold optimization
    optimize_metric: Literal["f1", "f2", "accuracy", "precision", "recall"] = "f1"
    min_recall: Optional[float] = None
    min_precision: Optional[float] = None
    threshold_step: float = 0.05

    # Pass/fail criteria
    min_accuracy: float = 0.70
    min_f1: Optional[float] = None

    @classmethod
    def from_yaml(cls, path: Path | str) -> "ExperimentConfig":
        """Load configuration from YAML file."""
        path = Path(path)
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls(**data)

    def to_yaml(self, path: Path | str) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(asdict(self), f, default_flow_style=False, sort_keys=False)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

    @property
    def dropped_columns(self) -> list[str]:
        """Every column removed during cleaning."""
        return [*self.leakage_columns, *self.uninformative_columns]
