"""Inactive user ratio component."""

import pandas as pd

from .base import BaseComponent


class InactiveRatioComponent(BaseComponent):
    """
    Share of a company's users outside the active window.

    A company where nobody has logged in this quarter gets the full weight;
    one where everyone is active gets nothing.
    """

    name = "inactive_ratio"

    @property
    def weight(self) -> int:
        return self.config.inactive_ratio_weight

    @property
    def required_columns(self) -> list[str]:
        return ["USER_COUNT", "INACTIVE_USERS"]

    def factor(self, df: pd.DataFrame) -> pd.Series:
        """Inactive / total, 0 for empty groups."""
        counts = df["USER_COUNT"].astype(float)
        ratio = df["INACTIVE_USERS"].astype(float).div(counts.where(counts > 0))
        return ratio.fillna(0.0)
