"""
Derivation configuration for churn feature engineering.

All labels, column names and contract rules used by the derived
features are defined here so they can be adjusted in one place.
Based on the telco churn report:
- Month-to-month customers can leave at any billing cycle
- One and two year contracts only free the customer at renewal
- Average historical cost vs. current charge flags price changes
"""

from dataclasses import dataclass, field
from typing import Dict


@dataclass
class FeatureConfig:
    """
    Configuration for the derived churn features.

    Derived columns:
    - diff_charge: Less / More / Same (average cost vs. current charge)
    - able_to_churn: Yes / No (current month is a contractual exit point)
    """

    # === Input columns ===
    tenure_column: str = "tenure_months"
    monthly_charges_column: str = "monthly_charges"
    total_charges_column: str = "total_charges"
    contract_column: str = "contract"

    # === diff_charge ===
    # Labels follow the report literally: an average cost ABOVE the
    # current charge is "Less" (the customer now pays less than usual).
    diff_charge_column: str = "diff_charge"
    diff_charge_labels: Dict[str, str] = field(default_factory=lambda: {
        "less": "Less",   # avg_cost > monthly_charges
        "more": "More",   # avg_cost < monthly_charges
        "same": "Same",   # equal
    })
    # Brand-new accounts have no billing history to average
    zero_tenure_label: str = "Same"

    # === able_to_churn ===
    able_to_churn_column: str = "able_to_churn"
    month_to_month: str = "Month-to-month"
    # Contract name -> renewal period in months
    renewal_periods: Dict[str, int] = field(default_factory=lambda: {
        "One year": 12,
        "Two year": 24,
    })
    churn_labels: Dict[str, str] = field(default_factory=lambda: {
        "yes": "Yes",
        "no": "No",
    })

    # === Metadata ===
    version: str = "1.0.0"

    @property
    def known_contracts(self) -> list[str]:
        """All contract levels the rules know about."""
        return [self.month_to_month, *self.renewal_periods]

    @property
    def input_columns(self) -> list[str]:
        return [
            self.tenure_column,
            self.monthly_charges_column,
            self.total_charges_column,
            self.contract_column,
        ]


# Default configuration instance
DEFAULT_CONFIG = FeatureConfig()
