"""
Cross-company churn metrics and risk-band helpers.

The three risk bands are exclusive and exhaustive:
- High:   score >= high_risk_threshold
- Medium: medium_risk_threshold <= score < high_risk_threshold
- Low:    score < medium_risk_threshold
"""

from dataclasses import dataclass, asdict
from typing import Optional, Sequence

import pandas as pd

from .aggregator import CompanyProfile, parse_timestamps, round_half_up
from .classification import CLIENT_USERS, FIRM_USERS
from .config import RiskConfig, DEFAULT_CONFIG
from .records import UserRecord

BANDS = ["all", "high", "medium", "low"]


def risk_band(score: int, config: Optional[RiskConfig] = None) -> str:
    """High, Medium or Low for a score under the given thresholds."""
    return (config or DEFAULT_CONFIG).get_risk_level(score)


@dataclass(frozen=True)
class ChurnMetrics:
    """Aggregate counts over a set of companies."""

    total_companies: int = 0
    high_risk_count: int = 0
    medium_risk_count: int = 0
    low_risk_count: int = 0
    inactive_companies: int = 0
    average_churn_score: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def summarize_metrics(
    companies: Sequence[CompanyProfile],
    high_risk_threshold: int,
    medium_risk_threshold: int,
) -> ChurnMetrics:
    """
    Reduce company profiles to band counts and the mean score.

    Args:
        companies: CompanyProfiles from the aggregator
        high_risk_threshold: Scores at or above this are High
        medium_risk_threshold: Scores at or above this (below High) are Medium

    Returns:
        ChurnMetrics (all zeros for an empty input)
    """
    if not companies:
        return ChurnMetrics()

    scores = pd.Series([c.churn_risk_score for c in companies], dtype=int)
    active = pd.Series([c.active_users for c in companies], dtype=int)

    high = scores >= high_risk_threshold
    medium = (scores >= medium_risk_threshold) & ~high
    low = scores < medium_risk_threshold

    return ChurnMetrics(
        total_companies=len(companies),
        high_risk_count=int(high.sum()),
        medium_risk_count=int(medium.sum()),
        low_risk_count=int(low.sum()),
        inactive_companies=int((active == 0).sum()),
        average_churn_score=int(round_half_up(scores.mean())),
    )


def calculate_churn_metrics(
    companies: Sequence[CompanyProfile],
    config: Optional[RiskConfig] = None,
) -> ChurnMetrics:
    """summarize_metrics with the thresholds of a RiskConfig."""
    config = config or DEFAULT_CONFIG
    return summarize_metrics(
        companies,
        config.high_risk_threshold,
        config.medium_risk_threshold,
    )


def split_by_user_type(
    companies: Sequence[CompanyProfile],
) -> dict[str, list[CompanyProfile]]:
    """Client and firm companies, each in their original order."""
    return {
        CLIENT_USERS: [c for c in companies if c.user_type == CLIENT_USERS],
        FIRM_USERS: [c for c in companies if c.user_type == FIRM_USERS],
    }


def filter_companies(
    companies: Sequence[CompanyProfile],
    config: Optional[RiskConfig] = None,
    search: str = "",
    band: str = "all",
) -> list[CompanyProfile]:
    """
    Filter companies by domain substring and risk band.

    Args:
        companies: CompanyProfiles to filter
        config: Supplies the band thresholds
        search: Case-insensitive substring of the domain
        band: One of "all", "high", "medium", "low"

    Returns:
        Matching companies in their original order
    """
    band = band.lower()
    if band not in BANDS:
        raise ValueError(f"Unknown risk band: {band}. Expected one of {BANDS}")
    config = config or DEFAULT_CONFIG
    needle = search.lower()

    matches = []
    for company in companies:
        if needle not in company.domain.lower():
            continue
        if band != "all" and risk_band(company.churn_risk_score, config).lower() != band:
            continue
        matches.append(company)
    return matches


def sorted_users(company: CompanyProfile) -> list[UserRecord]:
    """Members ordered by most recent last-seen first (unparsable last)."""
    last_seen = parse_timestamps(u.last_seen for u in company.users)
    order = last_seen.sort_values(ascending=False, na_position="last", kind="stable").index
    return [company.users[i] for i in order]
