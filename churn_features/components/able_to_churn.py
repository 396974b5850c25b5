"""Contractual churn eligibility component."""

from typing import Optional

import numpy as np
import pandas as pd

from ..config import DEFAULT_CONFIG, FeatureConfig
from .base import BaseDeriver


def derive_able_to_churn(
    contract: str,
    tenure_months: int,
    config: Optional[FeatureConfig] = None,
) -> str:
    """
    Decide whether the current month lets the customer leave without penalty.

    Rules (first match wins):
    - Month-to-month: "Yes"
    - One year and tenure a multiple of 12: "Yes"
    - Two year and tenure a multiple of 24: "Yes"
    - anything else, unknown contracts included: "No"
    """
    config = config or DEFAULT_CONFIG
    labels = config.churn_labels

    if contract == config.month_to_month:
        return labels["yes"]

    period = config.renewal_periods.get(contract)
    if period and tenure_months % period == 0:
        return labels["yes"]

    return labels["no"]


class AbleToChurnDeriver(BaseDeriver):
    """
    Flag customers sitting on a contract renewal boundary.

    Month-to-month customers can leave every cycle. Customers on
    fixed-term contracts can only leave when their tenure lands
    exactly on a renewal (every 12 or 24 months).

    Labels:
    - Yes: current month is an exit point
    - No: locked in, or contract unknown
    """

    name = "able_to_churn"

    @property
    def required_columns(self) -> list[str]:
        return [self.config.contract_column, self.config.tenure_column]

    @property
    def labels(self) -> list[str]:
        return sorted(self.config.churn_labels.values())

    @property
    def output_column(self) -> str:
        return self.config.able_to_churn_column

    def derive(self, df: pd.DataFrame) -> pd.Series:
        """Calculate able_to_churn labels."""
        self.validate(df)
        contract = df[self.config.contract_column]
        tenure = df[self.config.tenure_column]

        # Build conditions from renewal periods
        conditions = [contract == self.config.month_to_month]
        for contract_name, period in self.config.renewal_periods.items():
            conditions.append((contract == contract_name) & (tenure % period == 0))
        choices = [self.config.churn_labels["yes"]] * len(conditions)

        return pd.Series(
            np.select(conditions, choices, default=self.config.churn_labels["no"]),
            index=df.index,
            dtype=object,
        )
