"""
Main ChurnRiskEngine class - runs the parse -> aggregate -> summarize pipeline.

Usage:
    from churnrisk import ChurnRiskEngine, RiskConfig

    # With default config
    engine = ChurnRiskEngine()
    result = engine.run(csv_text)

    # With custom config
    config = RiskConfig(active_threshold=60, days_since_active_cap=120)
    engine = ChurnRiskEngine(config)
    result = engine.run(csv_text, as_of="2025-01-01")

    # Access results
    print(result.client_metrics)
    print(result.component_breakdown())
"""

from dataclasses import dataclass, field
from typing import Optional

import numpy as np
import pandas as pd

from .aggregator import CompanyAggregator, CompanyProfile, resolve_as_of
from .classification import UserTypeClassifier, CLIENT_USERS, FIRM_USERS
from .config import RiskConfig, RISK_LEVELS
from .metrics import ChurnMetrics, calculate_churn_metrics, split_by_user_type
from .records import FIELD_NAMES, RecordParser, RowDiagnostic, UserRecord


@dataclass
class PipelineResult:
    """
    Container for one pipeline run.

    Attributes:
        companies: All CompanyProfiles, highest risk first
        config: RiskConfig the run was scored with
        as_of: Reference time used for staleness
        records: Parsed UserRecords in input order
        diagnostics: Rows whose field count did not match the schema
    """

    companies: list[CompanyProfile]
    config: RiskConfig
    as_of: pd.Timestamp
    records: list[UserRecord] = field(default_factory=list)
    diagnostics: list[RowDiagnostic] = field(default_factory=list)

    @property
    def metrics(self) -> ChurnMetrics:
        return calculate_churn_metrics(self.companies, self.config)

    @property
    def client_companies(self) -> list[CompanyProfile]:
        return split_by_user_type(self.companies)[CLIENT_USERS]

    @property
    def firm_companies(self) -> list[CompanyProfile]:
        return split_by_user_type(self.companies)[FIRM_USERS]

    @property
    def client_metrics(self) -> ChurnMetrics:
        return calculate_churn_metrics(self.client_companies, self.config)

    @property
    def firm_metrics(self) -> ChurnMetrics:
        return calculate_churn_metrics(self.firm_companies, self.config)

    def get_high_risk(self, min_level: str = "High") -> list[CompanyProfile]:
        """
        Get companies at or above a risk level.

        Args:
            min_level: Minimum risk level ("Low", "Medium", "High")

        Returns:
            Companies at or above the specified level, highest risk first
        """
        min_idx = RISK_LEVELS.index(min_level)
        valid_levels = RISK_LEVELS[min_idx:]
        return [
            c for c in self.companies
            if self.config.get_risk_level(c.churn_risk_score) in valid_levels
        ]

    def to_frame(self) -> pd.DataFrame:
        """One row per company (users omitted), in result order."""
        rows = [
            {
                "domain": c.domain,
                "user_count": c.user_count,
                "active_users": c.active_users,
                "inactive_users": c.inactive_users,
                "last_active_date": c.last_active_date,
                "avg_days_since_last_active": c.avg_days_since_last_active,
                "churn_risk_score": c.churn_risk_score,
                "risk_level": self.config.get_risk_level(c.churn_risk_score),
                "user_type": c.user_type,
            }
            for c in self.companies
        ]
        return pd.DataFrame(rows)

    def summary(self) -> pd.DataFrame:
        """
        Company counts and mean score by user type and risk level.

        Returns:
            DataFrame indexed by (user_type, risk_level)
        """
        df = self.to_frame()
        if df.empty:
            return pd.DataFrame(columns=["count", "avg_score"])
        return (
            df.groupby(["user_type", "risk_level"])
            .agg(
                count=("domain", "count"),
                avg_score=("churn_risk_score", "mean"),
            )
            .round(1)
        )

    def component_breakdown(self) -> pd.DataFrame:
        """
        Show average contribution of each score component.

        Returns:
            DataFrame with component statistics
        """
        aggregator = CompanyAggregator(self.config)
        frame = aggregator.aggregate_frame(self.records, as_of=self.as_of)
        stats = {}
        for name in aggregator.components:
            col = f"{name}_score"
            stats[name] = {
                "mean": frame[col].mean(),
                "max": frame[col].max(),
                "min": frame[col].min(),
            }
        return pd.DataFrame(stats).T.round(1)


class ChurnRiskEngine:
    """
    Parses raw user activity text, scores companies and summarizes them.

    The config is validated once, at construction. Every ``run`` is a full
    recomputation; nothing is cached between runs.
    """

    def __init__(
        self,
        config: Optional[RiskConfig] = None,
        classifier: Optional[UserTypeClassifier] = None,
    ):
        """
        Initialize engine with configuration.

        Args:
            config: RiskConfig instance. Uses DEFAULT_CONFIG if None.
            classifier: User-type rule. Uses FirstRecordClassifier if None.

        Raises:
            InvalidConfigError: If config fails validation
        """
        self.aggregator = CompanyAggregator(config, classifier)
        self.config = self.aggregator.config

    def run(self, text: str, as_of=None) -> PipelineResult:
        """
        Run the full pipeline over raw delimited text.

        Args:
            text: Header line followed by one user per line
            as_of: Reference time for staleness. Current UTC time if None.

        Returns:
            PipelineResult with companies and metrics
        """
        as_of = resolve_as_of(as_of)
        parser = RecordParser(text)
        records = list(parser)
        companies = self.aggregator.aggregate(records, as_of=as_of)
        return PipelineResult(
            companies=companies,
            config=self.config,
            as_of=as_of,
            records=records,
            diagnostics=list(parser.diagnostics()),
        )

    def run_records(self, records: list[UserRecord], as_of=None) -> PipelineResult:
        """Run aggregation over already-parsed records."""
        as_of = resolve_as_of(as_of)
        records = list(records)
        return PipelineResult(
            companies=self.aggregator.aggregate(records, as_of=as_of),
            config=self.config,
            as_of=as_of,
            records=records,
        )


def generate_sample_csv(
    n_users: int = 200,
    n_companies: int = 40,
    seed: int = 42,
    as_of: str = "2025-01-01",
) -> str:
    """
    Generate realistic sample input text for testing.

    Distributions:
    - ~50% of companies are client companies
    - Last seen: exponential, mean ~75 days before as_of
    - ~5% of users never seen (empty last seen)
    - ~2% of emails have no '@'
    """
    rng = np.random.default_rng(seed)
    now = resolve_as_of(as_of)

    company_ids = rng.integers(0, n_companies, size=n_users)
    is_client = rng.random(n_companies) < 0.5
    days_ago = rng.exponential(scale=75, size=n_users)
    never_seen = rng.random(n_users) < 0.05
    no_at = rng.random(n_users) < 0.02

    lines = [",".join(FIELD_NAMES)]
    for i in range(n_users):
        company = int(company_ids[i])
        domain = f"company{company:03d}.com"
        email = f"user{i:05d}" + ("" if no_at[i] else f"@{domain}")
        last_seen = now - pd.Timedelta(days=float(days_ago[i]))
        first_seen = last_seen - pd.Timedelta(days=int(rng.integers(30, 720)))
        fmt = "%Y-%m-%dT%H:%M:%S.000Z"
        lines.append(",".join([
            f"U{i:05d}",
            f"user{i:05d}",
            email,
            first_seen.strftime(fmt),
            "" if never_seen[i] else last_seen.strftime(fmt),
            f"User {i}",
            rng.choice(["Admin", "Standard", "Read-only"]),
            first_seen.strftime(fmt),
            rng.choice(["full", "limited"]),
            f"uf_{i:05d}",
            "",
            "",
            CLIENT_USERS if is_client[company] else f"Firm {company:03d}",
            "",
            rng.choice(["client", "firm"]),
            rng.choice(["true", "false"]),
            "",
            f"C{company:03d}",
        ]))
    return "\n".join(lines) + "\n"
