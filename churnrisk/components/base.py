"""Base class for risk score components."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import pandas as pd

if TYPE_CHECKING:
    from ..config import RiskConfig


class BaseComponent(ABC):
    """
    Abstract base class for risk score components.

    Each component turns one aspect of a company's activity into weighted
    risk points, for every company row at once.
    """

    name: str = "base"

    def __init__(self, config: "RiskConfig"):
        """
        Initialize component with configuration.

        Args:
            config: RiskConfig instance with weights and caps
        """
        self.config = config

    @abstractmethod
    def factor(self, df: pd.DataFrame) -> pd.Series:
        """
        Unweighted risk factor in [0, 1] for all rows.

        Args:
            df: Company-level DataFrame with required columns

        Returns:
            Series of floats
        """
        pass

    @property
    @abstractmethod
    def weight(self) -> int:
        """Points awarded when the factor is 1."""
        pass

    @property
    @abstractmethod
    def required_columns(self) -> list[str]:
        """List of columns required by this component."""
        pass

    def score(self, df: pd.DataFrame) -> pd.Series:
        """Weighted points for all rows."""
        self.validate(df)
        return self.factor(df) * self.weight

    def validate(self, df: pd.DataFrame) -> None:
        """Validate required columns exist."""
        missing = set(self.required_columns) - set(df.columns)
        if missing:
            raise ValueError(
                f"{self.__class__.__name__} requires columns: {missing}"
            )
