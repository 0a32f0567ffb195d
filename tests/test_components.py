"""
Unit tests for individual score components.
"""

import pandas as pd
import pytest

from churnrisk.config import RiskConfig
from churnrisk.components import (
    InactiveRatioComponent,
    RecencyComponent,
    UserCountComponent,
)


class TestInactiveRatioComponent:
    """Tests for the inactive-user share."""

    def test_ratio_times_weight(self, default_config):
        component = InactiveRatioComponent(default_config)
        df = pd.DataFrame({"USER_COUNT": [2, 4, 5], "INACTIVE_USERS": [1, 0, 5]})
        scores = component.score(df)

        assert scores.iloc[0] == pytest.approx(15.0)
        assert scores.iloc[1] == 0
        assert scores.iloc[2] == pytest.approx(30.0)

    def test_zero_users_guarded(self, default_config):
        """An empty group scores 0 instead of dividing by zero."""
        component = InactiveRatioComponent(default_config)
        df = pd.DataFrame({"USER_COUNT": [0], "INACTIVE_USERS": [0]})

        assert component.factor(df).iloc[0] == 0

    def test_missing_column_raises_error(self, default_config):
        component = InactiveRatioComponent(default_config)
        df = pd.DataFrame({"USER_COUNT": [1]})

        with pytest.raises(ValueError, match="INACTIVE_USERS"):
            component.score(df)


class TestRecencyComponent:
    """Tests for days-since-active scoring."""

    def test_linear_until_cap(self, default_config):
        component = RecencyComponent(default_config)
        df = pd.DataFrame({"AVG_DAYS_SINCE_ACTIVE": [0, 90, 105, 180, 365]})
        factors = component.factor(df)

        assert factors.iloc[0] == 0
        assert factors.iloc[1] == pytest.approx(0.5)
        assert factors.iloc[2] == pytest.approx(0.5833, abs=1e-4)
        assert factors.iloc[3] == pytest.approx(1.0)
        assert factors.iloc[4] == pytest.approx(1.0)

    def test_weight_applied(self, default_config):
        component = RecencyComponent(default_config)
        df = pd.DataFrame({"AVG_DAYS_SINCE_ACTIVE": [105]})

        assert component.score(df).iloc[0] == pytest.approx(35.0)

    def test_custom_cap(self):
        config = RiskConfig(days_since_active_cap=90)
        component = RecencyComponent(config)
        df = pd.DataFrame({"AVG_DAYS_SINCE_ACTIVE": [45, 120]})
        factors = component.factor(df)

        assert factors.iloc[0] == pytest.approx(0.5)
        assert factors.iloc[1] == pytest.approx(1.0)


class TestUserCountComponent:
    """Tests for the company size discount."""

    def test_size_discount(self, default_config):
        component = UserCountComponent(default_config)
        df = pd.DataFrame({"USER_COUNT": [2, 10, 20, 50]})
        factors = component.factor(df)

        assert factors.iloc[0] == pytest.approx(0.9)
        assert factors.iloc[1] == pytest.approx(0.5)
        assert factors.iloc[2] == 0
        assert factors.iloc[3] == 0  # Never negative past the cap

    def test_weight_applied(self, default_config):
        component = UserCountComponent(default_config)
        df = pd.DataFrame({"USER_COUNT": [2]})

        assert component.score(df).iloc[0] == pytest.approx(9.0)

    def test_zero_weight(self):
        config = RiskConfig(
            inactive_ratio_weight=40,
            days_since_active_weight=60,
            user_count_weight=0,
        )
        component = UserCountComponent(config)
        df = pd.DataFrame({"USER_COUNT": [1]})

        assert component.score(df).iloc[0] == 0


class TestComponentBounds:

    @pytest.mark.parametrize("component_cls", [
        InactiveRatioComponent,
        RecencyComponent,
        UserCountComponent,
    ])
    def test_factor_within_unit_interval(self, default_config, component_cls):
        component = component_cls(default_config)
        df = pd.DataFrame({
            "USER_COUNT": [1, 2, 5, 20, 100],
            "INACTIVE_USERS": [0, 1, 5, 3, 100],
            "AVG_DAYS_SINCE_ACTIVE": [0, 10, 90, 365, 10000],
        })
        factors = component.factor(df)

        assert (factors >= 0).all()
        assert (factors <= 1).all()
