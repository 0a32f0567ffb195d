"""
Risk configuration validation.

A candidate configuration is checked against an ordered list of named
invariants. The first failing check is reported back to the caller as a
value; nothing here raises for a bad candidate. Code that bypasses the
validator and hands an invalid RiskConfig to the engine gets an
InvalidConfigError instead.

Usage:
    result = validate_config({"inactiveRatioWeight": 40})
    if not result.is_valid:
        print(result.violation.message)

    store = ConfigStore()
    store.apply(candidate)   # active config only changes when valid
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Optional

from .config import RiskConfig, DEFAULT_CONFIG


class ViolationCode(str, Enum):
    """Invariant classes a configuration can violate."""

    INVALID_VALUE = "invalid_value"
    WEIGHT_SUM = "weight_sum"
    THRESHOLD_ORDER = "threshold_order"
    NON_POSITIVE = "non_positive"
    CAP_BELOW_THRESHOLD = "cap_below_threshold"


@dataclass(frozen=True)
class ConfigViolation:
    """A single failed invariant check."""

    code: ViolationCode
    check: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating a candidate configuration.

    Attributes:
        config: Candidate with unset fields filled from defaults
            (None when a value could not be read as an integer)
        violation: First failed check, or None when valid
    """

    config: Optional[RiskConfig]
    violation: Optional[ConfigViolation] = None

    @property
    def is_valid(self) -> bool:
        return self.violation is None

    @property
    def message(self) -> str:
        return self.violation.message if self.violation else ""


class InvalidConfigError(ValueError):
    """Raised when an unvalidated, invalid config reaches the engine."""

    def __init__(self, violation: ConfigViolation):
        super().__init__(violation.message)
        self.violation = violation


# === Invariant checks (evaluated in this order) ===

def _check_weight_sum(c: RiskConfig) -> Optional[str]:
    if c.weight_sum != 100:
        return f"Weights must sum to 100. Current sum: {c.weight_sum}"
    return None


def _check_threshold_order(c: RiskConfig) -> Optional[str]:
    if c.high_risk_threshold <= c.medium_risk_threshold:
        return "High risk threshold must be greater than medium risk threshold"
    return None


def _check_threshold_positive(c: RiskConfig) -> Optional[str]:
    if c.medium_risk_threshold <= 0 or c.high_risk_threshold <= 0:
        return "Risk thresholds must be greater than 0"
    return None


def _check_threshold_max(c: RiskConfig) -> Optional[str]:
    if c.high_risk_threshold > 100:
        return "Risk thresholds cannot exceed 100"
    return None


def _check_positive_values(c: RiskConfig) -> Optional[str]:
    if (
        c.active_threshold <= 0
        or c.days_since_active_cap <= 0
        or c.user_count_cap <= 0
    ):
        return "Thresholds and caps must be greater than 0"
    return None


def _check_weights_non_negative(c: RiskConfig) -> Optional[str]:
    if min(c.inactive_ratio_weight, c.days_since_active_weight, c.user_count_weight) < 0:
        return "Weights cannot be negative"
    return None


def _check_cap_covers_threshold(c: RiskConfig) -> Optional[str]:
    if c.days_since_active_cap < c.active_threshold:
        return "Days since active cap should be greater than or equal to active threshold"
    return None


CHECKS: list[tuple[str, ViolationCode, Callable[[RiskConfig], Optional[str]]]] = [
    ("weight_sum", ViolationCode.WEIGHT_SUM, _check_weight_sum),
    ("threshold_order", ViolationCode.THRESHOLD_ORDER, _check_threshold_order),
    ("threshold_positive", ViolationCode.THRESHOLD_ORDER, _check_threshold_positive),
    ("threshold_max", ViolationCode.THRESHOLD_ORDER, _check_threshold_max),
    ("positive_values", ViolationCode.NON_POSITIVE, _check_positive_values),
    ("weights_non_negative", ViolationCode.NON_POSITIVE, _check_weights_non_negative),
    ("cap_covers_threshold", ViolationCode.CAP_BELOW_THRESHOLD, _check_cap_covers_threshold),
]


def validate_config(candidate: RiskConfig | Mapping[str, Any]) -> ValidationResult:
    """
    Validate a candidate configuration.

    Args:
        candidate: RiskConfig, or a settings mapping (camelCase or
            snake_case keys; empty/None values fall back to defaults)

    Returns:
        ValidationResult with the resolved config and the first violation
    """
    if isinstance(candidate, RiskConfig):
        config = candidate
    else:
        try:
            config = RiskConfig.from_dict(candidate)
        except ValueError as e:
            return ValidationResult(
                config=None,
                violation=ConfigViolation(ViolationCode.INVALID_VALUE, "parse", str(e)),
            )

    for name, code, check in CHECKS:
        message = check(config)
        if message is not None:
            return ValidationResult(config, ConfigViolation(code, name, message))

    return ValidationResult(config)


def require_valid(config: RiskConfig) -> RiskConfig:
    """
    Return config unchanged if valid.

    Raises:
        InvalidConfigError: With the first violation otherwise
    """
    result = validate_config(config)
    if not result.is_valid:
        raise InvalidConfigError(result.violation)
    return config


class ConfigStore:
    """
    Holds the active configuration for a caller (settings dialog, CLI run).

    The active config is only replaced by a candidate that validates; a
    rejected candidate leaves the previous config in effect.
    """

    def __init__(self, initial: Optional[RiskConfig] = None):
        self._active = require_valid(initial or DEFAULT_CONFIG)

    @property
    def active(self) -> RiskConfig:
        return self._active

    def apply(self, candidate: RiskConfig | Mapping[str, Any]) -> ValidationResult:
        """Validate candidate and make it active if it passes."""
        result = validate_config(candidate)
        if result.is_valid:
            self._active = result.config
        return result

    def reset(self) -> RiskConfig:
        """Restore the default configuration."""
        self._active = DEFAULT_CONFIG
        return self._active
