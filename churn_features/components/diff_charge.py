"""Average historical cost vs. current charge component."""

from typing import Optional

import numpy as np
import pandas as pd

from ..config import DEFAULT_CONFIG, FeatureConfig
from .base import BaseDeriver


def derive_diff_charge(
    tenure_months: int,
    total_charges: float,
    monthly_charges: float,
    config: Optional[FeatureConfig] = None,
) -> str:
    """
    Compare a customer's average monthly cost with the current charge.

    avg_cost = total_charges / tenure_months, then (first match wins):
    - avg_cost > monthly_charges: "Less"
    - avg_cost < monthly_charges: "More"
    - otherwise: "Same"

    Brand-new accounts (tenure 0) have nothing to average and get
    config.zero_tenure_label without dividing.

    Note: the labels read inverted ("Less" means the customer paid MORE
    on average than they pay now). They are kept as the report defines them.
    """
    config = config or DEFAULT_CONFIG
    labels = config.diff_charge_labels

    if tenure_months == 0:
        return config.zero_tenure_label

    avg_cost = total_charges / tenure_months
    if avg_cost > monthly_charges:
        return labels["less"]
    if avg_cost < monthly_charges:
        return labels["more"]
    return labels["same"]


class DiffChargeDeriver(BaseDeriver):
    """
    Label each customer by how their current charge compares with
    their average historical monthly cost.

    A drop in the bill ("Less") or a price increase ("More") relative
    to what the customer is used to paying are both churn signals.

    Labels:
    - Less: average cost above current charge
    - More: average cost below current charge
    - Same: equal, or tenure 0 (configurable)
    """

    name = "diff_charge"

    @property
    def required_columns(self) -> list[str]:
        return [
            self.config.tenure_column,
            self.config.total_charges_column,
            self.config.monthly_charges_column,
        ]

    @property
    def labels(self) -> list[str]:
        return sorted(
            set(self.config.diff_charge_labels.values())
            | {self.config.zero_tenure_label}
        )

    @property
    def output_column(self) -> str:
        return self.config.diff_charge_column

    def derive(self, df: pd.DataFrame) -> pd.Series:
        """Calculate diff_charge labels."""
        self.validate(df)
        labels = self.config.diff_charge_labels
        tenure = df[self.config.tenure_column]
        monthly = df[self.config.monthly_charges_column]

        # NaN for tenure 0 so no division by zero happens
        avg_cost = df[self.config.total_charges_column] / tenure.where(tenure != 0)

        # Order matters: zero tenure is decided before any comparison
        conditions = [
            tenure == 0,
            avg_cost > monthly,
            avg_cost < monthly,
        ]
        choices = [
            self.config.zero_tenure_label,
            labels["less"],
            labels["more"],
        ]

        return pd.Series(
            np.select(conditions, choices, default=labels["same"]),
            index=df.index,
            dtype=object,
        )
