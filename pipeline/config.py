"""
Run configuration for the churn risk batch pipeline.

Defines the RunConfig dataclass for YAML-driven runs.
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Literal, Mapping, Optional

import yaml

from churnrisk.classification import (
    USER_TYPES,
    FirstRecordClassifier,
    MajorityVoteClassifier,
    UserTypeClassifier,
)
from churnrisk.validation import ValidationResult, validate_config

EXPORT_KINDS = ["summary", "detailed", "json"]

CLASSIFIERS = {
    "first_record": FirstRecordClassifier,
    "majority_vote": MajorityVoteClassifier,
}


@dataclass
class RunConfig:
    """
    Configuration for a single pipeline run.

    Load from YAML:
        config = RunConfig.from_yaml("configs/example_run.yaml")

    Create programmatically:
        config = RunConfig(
            name="q3_review",
            input_path="data/users.csv",
            risk_settings={"activeThreshold": 60, "daysSinceActiveCap": 120},
        )
    """

    # Metadata
    name: str
    description: str = ""

    # Input user export (relative to the runner's base path)
    input_path: str = "data/users.csv"

    # Risk settings: a YAML file, inline overrides, or both (inline wins).
    # Unset fields fall back to the defaults.
    risk_config_path: Optional[str] = None
    risk_settings: dict = field(default_factory=dict)

    # Reference time for staleness (ISO date); None = now
    as_of: Optional[str] = None

    # User-type rule for company groups
    classifier: Literal["first_record", "majority_vote"] = "first_record"

    # Outputs
    output_dir: str = "output"
    user_types: list[str] = field(default_factory=lambda: list(USER_TYPES))
    exports: list[str] = field(default_factory=lambda: list(EXPORT_KINDS))
    plot: bool = False

    def __post_init__(self):
        unknown = set(self.exports) - set(EXPORT_KINDS)
        if unknown:
            raise ValueError(f"Unknown export kinds: {sorted(unknown)}")
        unknown = set(self.user_types) - set(USER_TYPES)
        if unknown:
            raise ValueError(f"Unknown user types: {sorted(unknown)}")
        if self.classifier not in CLASSIFIERS:
            raise ValueError(f"Unknown classifier: {self.classifier}")

    @classmethod
    def from_yaml(cls, path: Path | str) -> "RunConfig":
        """Load configuration from YAML file."""
        path = Path(path)
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls(**data)

    def to_yaml(self, path: Path | str) -> None:
        """Save configuration to YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(asdict(self), f, default_flow_style=False, sort_keys=False)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

    def resolve_risk_config(self, base_path: Path) -> ValidationResult:
        """
        Merge the settings file and inline settings, then validate.

        Args:
            base_path: Directory that relative paths are resolved against

        Returns:
            ValidationResult for the merged settings
        """
        settings: dict = {}
        if self.risk_config_path:
            path = Path(self.risk_config_path)
            if not path.is_absolute():
                path = base_path / path
            with open(path) as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, Mapping):
                return validate_config(data)
            settings.update(data)
        inline = self.risk_settings or {}
        if not isinstance(inline, Mapping):
            return validate_config(inline)
        settings.update(inline)
        return validate_config(settings)

    def build_classifier(self) -> UserTypeClassifier:
        return CLASSIFIERS[self.classifier]()
