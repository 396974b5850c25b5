"""
Pytest fixtures for churn feature and experiment tests.
"""

import numpy as np
import pandas as pd
import pytest

# Add packages to path
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from churn_features import FeatureConfig, FeatureDeriver, generate_sample_data
from churn_experiments import ExperimentConfig


@pytest.fixture
def feature_config():
    """Default derivation configuration."""
    return FeatureConfig()


@pytest.fixture
def deriver(feature_config):
    """FeatureDeriver with default config and every feature."""
    return FeatureDeriver(feature_config)


@pytest.fixture
def sample_data():
    """100 cleaned customer records with realistic distributions."""
    return generate_sample_data(n_customers=100, seed=42)


@pytest.fixture
def edge_cases():
    """Specific records on the boundaries of both derivation rules."""
    return pd.DataFrame([
        # Brand-new account: nothing billed yet
        {"customer_id": "EDGE_NEW", "tenure_months": 0, "monthly_charges": 70.0,
         "total_charges": 0.0, "contract": "Month-to-month"},
        # Average cost above current charge (price dropped)
        {"customer_id": "EDGE_LESS", "tenure_months": 10, "monthly_charges": 50.0,
         "total_charges": 600.0, "contract": "One year"},
        # Average cost below current charge (price rose)
        {"customer_id": "EDGE_MORE", "tenure_months": 10, "monthly_charges": 70.0,
         "total_charges": 600.0, "contract": "Two year"},
        # Billed at a constant rate
        {"customer_id": "EDGE_SAME", "tenure_months": 12, "monthly_charges": 50.0,
         "total_charges": 600.0, "contract": "One year"},
        # Two-year contract on its renewal month
        {"customer_id": "EDGE_RENEWAL", "tenure_months": 48, "monthly_charges": 80.0,
         "total_charges": 3840.0, "contract": "Two year"},
        # Two-year contract on a one-year boundary only
        {"customer_id": "EDGE_LOCKED", "tenure_months": 36, "monthly_charges": 80.0,
         "total_charges": 2880.0, "contract": "Two year"},
    ])


@pytest.fixture
def single_customer():
    """Single customer record for simple tests."""
    return {
        "tenure_months": 24,
        "monthly_charges": 60.0,
        "total_charges": 1200.0,
        "contract": "One year",
    }


def make_raw_dataset(n_customers: int = 600, seed: int = 7) -> pd.DataFrame:
    """
    Raw export in the public telco churn layout.

    Title-case headers, blank Total Charges for brand-new accounts,
    Yes/No churn label plus the leakage and location columns that
    cleaning must remove.
    """
    df = generate_sample_data(n_customers=n_customers, seed=seed)
    rng = np.random.default_rng(seed)

    total = df["total_charges"].astype(object)
    total[df["tenure_months"] == 0] = " "

    return pd.DataFrame({
        "CustomerID": df["customer_id"],
        "Count": 1,
        "Country": "United States",
        "State": "California",
        "City": rng.choice(["Los Angeles", "San Diego", "Fresno"], size=n_customers),
        "Zip Code": rng.integers(90001, 96161, size=n_customers),
        "Senior Citizen": df["senior_citizen"],
        "Tenure Months": df["tenure_months"],
        "Internet Service": df["internet_service"],
        "Contract": df["contract"],
        "Paperless Billing": df["paperless_billing"],
        "Payment Method": df["payment_method"],
        "Monthly Charges": df["monthly_charges"],
        "Total Charges": total,
        "Churn Label": df["churn"].map({1: "Yes", 0: "No"}),
        "Churn Value": df["churn"],
        "Churn Score": rng.integers(0, 101, size=n_customers),
        "CLTV": rng.integers(2000, 6500, size=n_customers),
        "Churn Reason": np.where(df["churn"] == 1, "Competitor offered more data", None),
    })


@pytest.fixture
def raw_data():
    """Raw telco export with 600 customers."""
    return make_raw_dataset()


def make_experiment_config(**overrides) -> ExperimentConfig:
    """Small, fast experiment config reading data/telco.csv."""
    settings = dict(
        name="test_run",
        description="Fast settings for tests",
        data_path="data/telco.csv",
        search_candidates=4,
        search_factor=2,
        search_estimators=30,
        cv_folds=3,
        max_estimators=100,
        early_stopping_rounds=10,
        n_jobs=1,
        min_accuracy=0.0,
    )
    settings.update(overrides)
    return ExperimentConfig(**settings)


@pytest.fixture
def experiment_config():
    """Fast experiment config."""
    return make_experiment_config()


@pytest.fixture
def experiment_dir(tmp_path, raw_data):
    """Base path with the raw export written to data/telco.csv."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    raw_data.to_csv(data_dir / "telco.csv", index=False)
    return tmp_path
