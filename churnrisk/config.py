"""
Risk scoring configuration for the churn risk engine.

All thresholds, weights and caps used by the aggregator and the metrics
summarizer are defined here. The defaults are tuned for accounting software
with monthly/quarterly usage:
- 90-day activity window (one quarter)
- Recency dominates the score (60 of 100 points)
- Companies with 20+ users get no size-based risk
"""

from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Mapping

import yaml


# camelCase names used by settings stores and the JSON export
FIELD_ALIASES = {
    "activeThreshold": "active_threshold",
    "highRiskThreshold": "high_risk_threshold",
    "mediumRiskThreshold": "medium_risk_threshold",
    "inactiveRatioWeight": "inactive_ratio_weight",
    "daysSinceActiveWeight": "days_since_active_weight",
    "userCountWeight": "user_count_weight",
    "daysSinceActiveCap": "days_since_active_cap",
    "userCountCap": "user_count_cap",
}

RISK_LEVELS = ["Low", "Medium", "High"]


@dataclass(frozen=True)
class RiskConfig:
    """
    Configuration for churn risk scoring.

    Weights must sum to 100 so the score lands in 0-100:
    - Inactive Ratio: 0-30
    - Days Since Active: 0-60
    - User Count: 0-10

    Instances are immutable. Pass a new instance to re-score with
    different settings; run it through ``validate_config`` first.
    """

    # === Thresholds ===
    active_threshold: int = 90        # Inactive if not seen in 90 days (quarterly)
    high_risk_threshold: int = 75
    medium_risk_threshold: int = 45

    # === Weights (must sum to 100) ===
    inactive_ratio_weight: int = 30
    days_since_active_weight: int = 60
    user_count_weight: int = 10

    # === Caps ===
    days_since_active_cap: int = 180  # 6 months saturates the recency term
    user_count_cap: int = 20          # Size discount bottoms out here

    @property
    def weight_sum(self) -> int:
        return (
            self.inactive_ratio_weight
            + self.days_since_active_weight
            + self.user_count_weight
        )

    def get_risk_level(self, score: int) -> str:
        """Map numeric score to risk band (High/Medium/Low)."""
        if score >= self.high_risk_threshold:
            return "High"
        if score >= self.medium_risk_threshold:
            return "Medium"
        return "Low"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RiskConfig":
        """
        Build a config from a settings mapping.

        Keys may be camelCase or snake_case. Absent, ``None`` and empty
        string values take the default for that field.

        Raises:
            ValueError: If a key is unknown or a value is not an integer
        """
        values = {}
        for key, value in normalize_keys(data).items():
            if value is None or (isinstance(value, str) and value.strip() == ""):
                continue
            values[key] = _coerce_int(key, value)
        return cls(**values)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "RiskConfig":
        """Load configuration from YAML file."""
        path = Path(path)
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)

    def to_yaml(self, path: Path | str) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def to_dict(self, camel_case: bool = False) -> dict:
        """Convert to dictionary, optionally with camelCase keys."""
        data = asdict(self)
        if camel_case:
            reverse = {v: k for k, v in FIELD_ALIASES.items()}
            return {reverse[k]: v for k, v in data.items()}
        return data


def normalize_keys(data: Mapping[str, Any]) -> dict:
    """
    Map camelCase keys to field names.

    Raises:
        ValueError: If data is not a mapping or a key matches no config field
    """
    if not isinstance(data, Mapping):
        raise ValueError(
            f"Risk settings must be a mapping of names to values, got {type(data).__name__}"
        )
    known = {f.name for f in fields(RiskConfig)}
    normalized = {}
    for key, value in data.items():
        name = FIELD_ALIASES.get(key, key)
        if name not in known:
            raise ValueError(f"Unknown risk setting: {key}")
        normalized[name] = value
    return normalized


def _coerce_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{key} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ValueError(f"{key} must be an integer, got {value!r}")


# Default configuration instance
DEFAULT_CONFIG = RiskConfig()
