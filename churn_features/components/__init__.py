"""Derivation components for churn features."""

from .base import BaseDeriver
from .diff_charge import DiffChargeDeriver, derive_diff_charge
from .able_to_churn import AbleToChurnDeriver, derive_able_to_churn

__all__ = [
    "BaseDeriver",
    "DiffChargeDeriver",
    "AbleToChurnDeriver",
    "derive_diff_charge",
    "derive_able_to_churn",
]
