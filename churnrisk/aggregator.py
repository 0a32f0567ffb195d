"""
Company aggregation - groups user records by email domain and scores each
company.

Usage:
    from churnrisk import CompanyAggregator, RecordParser

    aggregator = CompanyAggregator(config)
    companies = aggregator.aggregate(RecordParser(csv_text), as_of="2025-01-01")

    # Component breakdown per company
    frame = aggregator.aggregate_frame(records, as_of="2025-01-01")
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

import numpy as np
import pandas as pd

from .classification import UserTypeClassifier, FirstRecordClassifier
from .components import (
    InactiveRatioComponent,
    RecencyComponent,
    UserCountComponent,
)
from .config import RiskConfig, DEFAULT_CONFIG
from .records import UserRecord, extract_domain
from .validation import require_valid

STALE_DAYS = 365  # Used when a timestamp is missing or unparsable
CLOCK_WORDS = ["now", "today"]  # pandas reads these as the wall clock
EPOCH = pd.Timestamp(0, tz="UTC")
MAX_SCORE = 100


@dataclass(frozen=True)
class CompanyProfile:
    """Aggregated activity and risk score for one company domain."""

    domain: str
    users: tuple[UserRecord, ...]
    user_count: int
    active_users: int
    inactive_users: int
    last_active_date: str
    avg_days_since_last_active: int
    churn_risk_score: int
    user_type: str


def resolve_as_of(as_of=None) -> pd.Timestamp:
    """Reference time as a UTC Timestamp (now when None)."""
    if as_of is None:
        return pd.Timestamp.now(tz="UTC")
    ts = pd.Timestamp(as_of)
    return ts.tz_localize("UTC") if ts.tzinfo is None else ts.tz_convert("UTC")


def parse_timestamps(values: Iterable[str]) -> pd.Series:
    """Parse timestamp strings to UTC; empty or bad values become NaT."""
    series = pd.Series(list(values), dtype=object)
    series = series.where(~series.astype(str).str.strip().str.lower().isin(CLOCK_WORDS))
    return pd.to_datetime(series, errors="coerce", utc=True, format="mixed")


def round_half_up(values):
    """Round .5 upwards, matching the dashboard's rounding."""
    return np.floor(np.asarray(values, dtype=float) + 0.5)


def days_since_series(timestamps: pd.Series, as_of: pd.Timestamp) -> pd.Series:
    """Whole days (ceiling) between as_of and each timestamp."""
    days = np.ceil((as_of - timestamps).abs() / pd.Timedelta(days=1))
    return days.fillna(STALE_DAYS).astype(int)


def days_since(value: str, as_of=None) -> int:
    """Whole days since a single timestamp string (365 if unparsable)."""
    timestamps = parse_timestamps([value])
    return int(days_since_series(timestamps, resolve_as_of(as_of)).iloc[0])


def group_by_domain(records: Iterable[UserRecord]) -> dict[str, list[UserRecord]]:
    """Group records by company key, keeping first-occurrence order."""
    groups: dict[str, list[UserRecord]] = {}
    for record in records:
        groups.setdefault(extract_domain(record.email), []).append(record)
    return groups


class CompanyAggregator:
    """
    Vectorized company aggregation and risk scoring.

    Per company:
    - Active users: last seen within ``active_threshold`` days
    - Average days since last active (rounded)
    - Risk score: inactive ratio + recency + size components, capped at 100
    """

    COMPANY_COLUMNS = [
        "DOMAIN",
        "USER_COUNT",
        "ACTIVE_USERS",
        "INACTIVE_USERS",
        "LAST_ACTIVE_DATE",
        "AVG_DAYS_SINCE_ACTIVE",
    ]

    def __init__(
        self,
        config: Optional[RiskConfig] = None,
        classifier: Optional[UserTypeClassifier] = None,
    ):
        """
        Initialize aggregator.

        Args:
            config: RiskConfig instance. Uses DEFAULT_CONFIG if None.
            classifier: User-type rule. Uses FirstRecordClassifier if None.

        Raises:
            InvalidConfigError: If config fails validation
        """
        self.config = require_valid(config or DEFAULT_CONFIG)
        self.classifier = classifier or FirstRecordClassifier()
        self.components = {
            "inactive_ratio": InactiveRatioComponent(self.config),
            "recency": RecencyComponent(self.config),
            "user_count": UserCountComponent(self.config),
        }

    def user_frame(
        self,
        records: Sequence[UserRecord],
        as_of: pd.Timestamp,
    ) -> pd.DataFrame:
        """One row per record with its domain, staleness and activity flag."""
        last_seen = parse_timestamps(r.last_seen for r in records)
        df = pd.DataFrame({
            "DOMAIN": [extract_domain(r.email) for r in records],
            "LAST_SEEN_TS": last_seen,
        })
        df["DAYS_SINCE"] = days_since_series(df["LAST_SEEN_TS"], as_of)
        df["IS_ACTIVE"] = df["DAYS_SINCE"] <= self.config.active_threshold
        return df

    def company_frame(self, users: pd.DataFrame) -> pd.DataFrame:
        """Collapse user rows into company counters (first-occurrence order)."""
        if users.empty:
            return pd.DataFrame(columns=self.COMPANY_COLUMNS)

        users = users.assign(LAST_SEEN_TS=users["LAST_SEEN_TS"].fillna(EPOCH))
        grouped = (
            users.groupby("DOMAIN", sort=False)
            .agg(
                USER_COUNT=("DAYS_SINCE", "size"),
                ACTIVE_USERS=("IS_ACTIVE", "sum"),
                MEAN_DAYS=("DAYS_SINCE", "mean"),
                LAST_ACTIVE=("LAST_SEEN_TS", "max"),
            )
            .reset_index()
        )

        result = pd.DataFrame({
            "DOMAIN": grouped["DOMAIN"],
            "USER_COUNT": grouped["USER_COUNT"].astype(int),
            "ACTIVE_USERS": grouped["ACTIVE_USERS"].astype(int),
        })
        result["INACTIVE_USERS"] = result["USER_COUNT"] - result["ACTIVE_USERS"]
        result["LAST_ACTIVE_DATE"] = grouped["LAST_ACTIVE"].dt.strftime("%Y-%m-%d")
        result["AVG_DAYS_SINCE_ACTIVE"] = round_half_up(grouped["MEAN_DAYS"]).astype(int)
        return result

    def score_frame(self, companies: pd.DataFrame) -> pd.DataFrame:
        """Add component points, raw score and final CHURN_RISK_SCORE."""
        result = companies.copy()

        component_cols = []
        for name, component in self.components.items():
            col_name = f"{name}_score"
            result[col_name] = component.score(result)
            component_cols.append(col_name)

        raw = result[component_cols[0]]
        for col in component_cols[1:]:
            raw = raw + result[col]
        result["RAW_SCORE"] = raw.astype(float)
        result["CHURN_RISK_SCORE"] = round_half_up(
            np.minimum(result["RAW_SCORE"], MAX_SCORE)
        ).astype(int)
        return result

    def aggregate_frame(
        self,
        records: Iterable[UserRecord],
        as_of=None,
    ) -> pd.DataFrame:
        """
        Company-level DataFrame with counters and component breakdown.

        Rows are in first-occurrence order of each domain (unsorted).
        """
        records = list(records)
        users = self.user_frame(records, resolve_as_of(as_of))
        return self.score_frame(self.company_frame(users))

    def aggregate(
        self,
        records: Iterable[UserRecord],
        as_of=None,
    ) -> list[CompanyProfile]:
        """
        Group records by domain and score each company.

        Args:
            records: UserRecords (any iterable; consumed once)
            as_of: Reference time for staleness. Current UTC time if None.

        Returns:
            CompanyProfiles by descending risk score; ties keep the order
            in which each domain first appeared
        """
        records = list(records)
        groups = group_by_domain(records)
        frame = self.aggregate_frame(records, as_of).set_index("DOMAIN")

        profiles = []
        for domain, members in groups.items():
            row = frame.loc[domain]
            profiles.append(
                CompanyProfile(
                    domain=domain,
                    users=tuple(members),
                    user_count=int(row["USER_COUNT"]),
                    active_users=int(row["ACTIVE_USERS"]),
                    inactive_users=int(row["INACTIVE_USERS"]),
                    last_active_date=str(row["LAST_ACTIVE_DATE"]),
                    avg_days_since_last_active=int(row["AVG_DAYS_SINCE_ACTIVE"]),
                    churn_risk_score=int(row["CHURN_RISK_SCORE"]),
                    user_type=self.classifier.classify(members),
                )
            )

        return sorted(profiles, key=lambda p: -p.churn_risk_score)


def group_by_company(
    records: Iterable[UserRecord],
    config: Optional[RiskConfig] = None,
    as_of=None,
) -> list[CompanyProfile]:
    """Convenience wrapper around CompanyAggregator.aggregate."""
    return CompanyAggregator(config).aggregate(records, as_of=as_of)
