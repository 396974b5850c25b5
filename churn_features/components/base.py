"""Base class for feature derivation components."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import pandas as pd

if TYPE_CHECKING:
    from ..config import FeatureConfig


class BaseDeriver(ABC):
    """
    Abstract base class for derived feature components.

    Each component computes one categorical column for every row
    using vectorized pandas/numpy operations. Rows are independent:
    no component looks at any other record.
    """

    name: str = "base"

    def __init__(self, config: "FeatureConfig"):
        """
        Initialize deriver with configuration.

        Args:
            config: FeatureConfig instance with labels and contract rules
        """
        self.config = config

    @abstractmethod
    def derive(self, df: pd.DataFrame) -> pd.Series:
        """
        Compute the derived label for all rows.

        Must be implemented by subclasses using vectorized operations.

        Args:
            df: DataFrame with required columns

        Returns:
            Series of string labels aligned with df.index
        """
        pass

    @property
    @abstractmethod
    def required_columns(self) -> list[str]:
        """List of columns required by this deriver."""
        pass

    @property
    @abstractmethod
    def labels(self) -> list[str]:
        """Every label this deriver can produce."""
        pass

    @property
    def output_column(self) -> str:
        return self.name

    def validate(self, df: pd.DataFrame) -> None:
        """Validate required columns exist."""
        missing = set(self.required_columns) - set(df.columns)
        if missing:
            raise ValueError(
                f"{self.__class__.__name__} requires columns: {missing}"
            )
