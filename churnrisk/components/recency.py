"""Days-since-active component."""

import numpy as np
import pandas as pd

from .base import BaseComponent


class RecencyComponent(BaseComponent):
    """
    Score based on average days since users were last seen.

    Grows linearly with staleness until ``days_since_active_cap`` days,
    then stays at the full weight.
    """

    name = "recency"

    @property
    def weight(self) -> int:
        return self.config.days_since_active_weight

    @property
    def required_columns(self) -> list[str]:
        return ["AVG_DAYS_SINCE_ACTIVE"]

    def factor(self, df: pd.DataFrame) -> pd.Series:
        days = df["AVG_DAYS_SINCE_ACTIVE"].astype(float)
        return pd.Series(
            np.minimum(days / self.config.days_since_active_cap, 1.0),
            index=df.index,
            dtype=float,
        )
