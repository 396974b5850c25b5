"""
Main FeatureDeriver class - orchestrates derivation components.

Usage:
    from churn_features import FeatureDeriver, FeatureConfig

    # With default config
    deriver = FeatureDeriver()
    result = deriver.derive(df)

    # Only one of the derived features
    deriver = FeatureDeriver(features=["able_to_churn"])
    result = deriver.derive(df)

    # Access results
    print(result.df[["contract", "tenure_months", "able_to_churn"]])
    print(result.label_counts())
"""

from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from .config import FeatureConfig, DEFAULT_CONFIG
from .components import BaseDeriver, DiffChargeDeriver, AbleToChurnDeriver
from .schemas import build_input_schema, build_output_schema, build_tenure_schema


# Registry of available derived features
AVAILABLE_FEATURES = {
    "diff_charge": DiffChargeDeriver,
    "able_to_churn": AbleToChurnDeriver,
}


@dataclass
class DerivationResult:
    """
    Container for derivation results.

    Attributes:
        df: Copy of the input DataFrame with derived columns appended
        feature_columns: Names of the derived columns
    """

    df: pd.DataFrame
    feature_columns: list[str]

    def label_counts(self) -> pd.DataFrame:
        """
        Count and share of each label per derived feature.

        Returns:
            DataFrame indexed by (feature, label) with count and share
        """
        frames = []
        for col in self.feature_columns:
            counts = self.df[col].value_counts()
            frames.append(pd.DataFrame({
                "feature": col,
                "label": counts.index,
                "count": counts.values,
                "share": (counts.values / max(len(self.df), 1)).round(3),
            }))
        if not frames:
            return pd.DataFrame(columns=["count", "share"])
        return pd.concat(frames).set_index(["feature", "label"])

    def crosstab(self, feature: str, by: str = "contract") -> pd.DataFrame:
        """
        Distribution of a derived feature across another column.

        Args:
            feature: Derived column name
            by: Column to break the labels down by

        Returns:
            Counts with one row per level of `by`, one column per label
        """
        if feature not in self.feature_columns:
            raise ValueError(f"Not a derived feature: {feature}")
        return pd.crosstab(self.df[by], self.df[feature])


class FeatureDeriver:
    """
    Row-wise churn feature engineering.

    Appends derived categorical columns computed only from each
    record's own fields, so any partition of the data can be
    derived independently.

    Features:
    - diff_charge: average historical cost vs. current monthly charge
    - able_to_churn: whether the current month is a contractual exit point
    """

    def __init__(
        self,
        config: Optional[FeatureConfig] = None,
        features: Optional[Iterable[str]] = None,
    ):
        """
        Initialize deriver with configuration.

        Args:
            config: FeatureConfig instance. Uses DEFAULT_CONFIG if None.
            features: Subset of AVAILABLE_FEATURES to derive (all if None)
        """
        self.config = config or DEFAULT_CONFIG
        self.features = list(AVAILABLE_FEATURES) if features is None else list(features)

        unknown = set(self.features) - set(AVAILABLE_FEATURES)
        if unknown:
            raise ValueError(
                f"Unknown features: {unknown}. Available: {list(AVAILABLE_FEATURES)}"
            )

        self._init_components()
        self.tenure_schema = build_tenure_schema(self.config)
        self.input_schema = build_input_schema(self.config, self.required_columns)
        self.output_schema = build_output_schema(self.config)

    def _init_components(self) -> None:
        """Initialize the selected derivation components."""
        self.components: dict[str, BaseDeriver] = {
            name: AVAILABLE_FEATURES[name](self.config) for name in self.features
        }

    @property
    def required_columns(self) -> list[str]:
        """Input columns needed by the selected components."""
        columns = []
        for component in self.components.values():
            for col in component.required_columns:
                if col not in columns:
                    columns.append(col)
        return columns

    def validate_input(self, df: pd.DataFrame) -> pd.DataFrame:
        """
        Validate required columns exist and match the input schema.

        Args:
            df: Input DataFrame

        Returns:
            Validated (type-coerced) DataFrame

        Raises:
            ValueError: If required columns are missing
            pandera.errors.SchemaError: If values violate the schema, including
                a tenure that is not a whole number of months
        """
        missing = set(self.required_columns) - set(df.columns)
        if missing:
            raise ValueError(f"Missing required columns: {missing}")

        # Whole months are checked before coercion can truncate them
        self.tenure_schema.validate(df)
        return self.input_schema.validate(df)

    def derive(self, df: pd.DataFrame) -> DerivationResult:
        """
        Derive churn features for all records.

        Args:
            df: DataFrame with required columns

        Returns:
            DerivationResult with derived columns appended

        Example:
            >>> deriver = FeatureDeriver()
            >>> result = deriver.derive(customers_df)
            >>> result.crosstab("able_to_churn", by="contract")
        """
        result = self.validate_input(df.copy())

        feature_cols = []
        for component in self.components.values():
            result[component.output_column] = component.derive(result)
            feature_cols.append(component.output_column)

        self.output_schema.validate(result)
        return DerivationResult(df=result, feature_columns=feature_cols)

    def derive_single(self, record: dict) -> dict:
        """
        Derive features for a single customer (convenience method).

        Args:
            record: Dictionary with required fields

        Returns:
            Dictionary mapping derived column name to label
        """
        result = self.derive(pd.DataFrame([record]))
        row = result.df.iloc[0]
        return {col: row[col] for col in result.feature_columns}


def generate_sample_data(n_customers: int = 100, seed: int = 42) -> pd.DataFrame:
    """
    Generate realistic cleaned telco customer records for testing.

    Distributions loosely follow the public telco churn dataset:
    - Contract: Month-to-month 55%, One year 21%, Two year 24%
    - Tenure uniform over 0-72 months (brand-new accounts included)
    - ~30% of customers billed at a constant rate, others drift +/-15%
    - Churn more likely for month-to-month, fiber and short tenure
    """
    np.random.seed(seed)

    contract = np.random.choice(
        ["Month-to-month", "One year", "Two year"],
        size=n_customers,
        p=[0.55, 0.21, 0.24],
    )
    tenure = np.random.randint(0, 73, size=n_customers)
    monthly = np.random.uniform(18.25, 118.75, size=n_customers).round(2)

    # Historical average vs. current charge
    drift = np.where(
        np.random.random(n_customers) < 0.30,
        1.0,
        np.random.uniform(0.85, 1.15, size=n_customers),
    )
    total = (tenure * monthly * drift).round(2)

    internet = np.random.choice(
        ["DSL", "Fiber optic", "No"], size=n_customers, p=[0.34, 0.44, 0.22]
    )
    payment = np.random.choice(
        [
            "Electronic check",
            "Mailed check",
            "Bank transfer (automatic)",
            "Credit card (automatic)",
        ],
        size=n_customers,
    )
    paperless = np.random.choice(["Yes", "No"], size=n_customers, p=[0.59, 0.41])
    senior = np.random.choice(["No", "Yes"], size=n_customers, p=[0.84, 0.16])

    logit = (
        -1.2
        + 1.6 * (contract == "Month-to-month")
        - 0.03 * tenure
        + 0.8 * (internet == "Fiber optic")
        + 0.4 * (payment == "Electronic check")
    )
    churn = (np.random.random(n_customers) < 1 / (1 + np.exp(-logit))).astype(int)

    return pd.DataFrame(
        {
            "customer_id": [f"{i:04d}-SMPL" for i in range(n_customers)],
            "senior_citizen": senior,
            "tenure_months": tenure,
            "internet_service": internet,
            "contract": contract,
            "paperless_billing": paperless,
            "payment_method": payment,
            "monthly_charges": monthly,
            "total_charges": total,
            "churn": churn,
        }
    )
