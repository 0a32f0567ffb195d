"""
Churn Risk Engine Package

Groups per-user activity records into companies and scores each company's
churn risk with a configurable weighted formula.
"""

from .aggregator import CompanyAggregator, CompanyProfile, days_since
from .classification import (
    CLIENT_USERS,
    FIRM_USERS,
    FirstRecordClassifier,
    MajorityVoteClassifier,
    UserTypeClassifier,
)
from .config import RiskConfig, DEFAULT_CONFIG
from .engine import ChurnRiskEngine, PipelineResult, generate_sample_csv
from .metrics import (
    ChurnMetrics,
    calculate_churn_metrics,
    filter_companies,
    risk_band,
    sorted_users,
    summarize_metrics,
)
from .records import RecordParser, RowDiagnostic, UserRecord, extract_domain
from .validation import (
    ConfigStore,
    ConfigViolation,
    InvalidConfigError,
    ValidationResult,
    ViolationCode,
    validate_config,
)

__all__ = [
    "ChurnRiskEngine",
    "PipelineResult",
    "RiskConfig",
    "DEFAULT_CONFIG",
    "RecordParser",
    "UserRecord",
    "RowDiagnostic",
    "extract_domain",
    "CompanyAggregator",
    "CompanyProfile",
    "days_since",
    "UserTypeClassifier",
    "FirstRecordClassifier",
    "MajorityVoteClassifier",
    "CLIENT_USERS",
    "FIRM_USERS",
    "ChurnMetrics",
    "summarize_metrics",
    "calculate_churn_metrics",
    "filter_companies",
    "risk_band",
    "sorted_users",
    "ConfigStore",
    "ConfigViolation",
    "InvalidConfigError",
    "ValidationResult",
    "ViolationCode",
    "validate_config",
    "generate_sample_csv",
]
__version__ = "1.0.0"
