"""
Churn Features Package

Row-wise feature engineering for telco customer churn:
diff_charge (average historical cost vs. current charge) and
able_to_churn (contract renewal eligibility).
"""

from .config import FeatureConfig, DEFAULT_CONFIG
from .components import derive_diff_charge, derive_able_to_churn
from .deriver import (
    AVAILABLE_FEATURES,
    DerivationResult,
    FeatureDeriver,
    generate_sample_data,
)

__all__ = [
    "FeatureDeriver",
    "FeatureConfig",
    "DerivationResult",
    "DEFAULT_CONFIG",
    "AVAILABLE_FEATURES",
    "derive_diff_charge",
    "derive_able_to_churn",
    "generate_sample_data",
]
__version__ = "1.0.0"
