"""Company size component."""

import numpy as np
import pandas as pd

from .base import BaseComponent


class UserCountComponent(BaseComponent):
    """
    Small companies carry more risk: one departure can empty the account.

    A single-user company gets nearly the full weight; at
    ``user_count_cap`` users and above the component contributes 0.
    """

    name = "user_count"

    @property
    def weight(self) -> int:
        return self.config.user_count_weight

    @property
    def required_columns(self) -> list[str]:
        return ["USER_COUNT"]

    def factor(self, df: pd.DataFrame) -> pd.Series:
        counts = df["USER_COUNT"].astype(float)
        return pd.Series(
            np.maximum(0.0, 1.0 - counts / self.config.user_count_cap),
            index=df.index,
            dtype=float,
        )
