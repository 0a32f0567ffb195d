"""
Export collaborators for churn risk results.

Writes the summary CSV, detailed per-user CSV, JSON document and an
optional score distribution plot. Column order and names are fixed for
downstream consumers.
"""

import json
from pathlib import Path
from typing import Sequence

import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns

from churnrisk.aggregator import (
    CompanyProfile,
    days_since_series,
    parse_timestamps,
    resolve_as_of,
)
from churnrisk.config import RiskConfig
from churnrisk.schemas import DETAILED_SCHEMA, SUMMARY_SCHEMA

SUMMARY_COLUMNS = [
    "Domain",
    "User Count",
    "Active Users",
    "Inactive Users",
    "Last Active Date",
    "Avg Days Since Last Active",
    "Churn Risk Score",
    "User Type",
]

DETAILED_COLUMNS = [
    "Company Domain",
    "User Name",
    "User Email",
    "Access Level",
    "First Seen",
    "Last Seen",
    "Days Since Last Active",
    "Company Churn Risk Score",
    "User Type",
]


def summary_frame(companies: Sequence[CompanyProfile]) -> pd.DataFrame:
    """One row per company, validated against SUMMARY_SCHEMA."""
    rows = [
        [
            c.domain,
            c.user_count,
            c.active_users,
            c.inactive_users,
            c.last_active_date,
            c.avg_days_since_last_active,
            c.churn_risk_score,
            c.user_type,
        ]
        for c in companies
    ]
    return SUMMARY_SCHEMA.validate(pd.DataFrame(rows, columns=SUMMARY_COLUMNS))


def detailed_frame(companies: Sequence[CompanyProfile], as_of=None) -> pd.DataFrame:
    """One row per user, validated against DETAILED_SCHEMA."""
    as_of = resolve_as_of(as_of)
    rows = []
    last_seen = []
    for company in companies:
        for user in company.users:
            rows.append([
                company.domain,
                user.name,
                user.email,
                user.primary_access,
                user.first_seen.split("T")[0],
                user.last_seen.split("T")[0],
                0,
                company.churn_risk_score,
                company.user_type,
            ])
            last_seen.append(user.last_seen)

    df = pd.DataFrame(rows, columns=DETAILED_COLUMNS)
    if len(df):
        df["Days Since Last Active"] = days_since_series(
            parse_timestamps(last_seen), as_of
        ).to_numpy()
    return DETAILED_SCHEMA.validate(df)


def json_document(companies: Sequence[CompanyProfile]) -> list[dict]:
    """Companies with camelCase keys and a trimmed user list."""
    return [
        {
            "domain": c.domain,
            "userCount": c.user_count,
            "activeUsers": c.active_users,
            "inactiveUsers": c.inactive_users,
            "lastActiveDate": c.last_active_date,
            "avgDaysSinceLastActive": c.avg_days_since_last_active,
            "churnRiskScore": c.churn_risk_score,
            "userType": c.user_type,
            "users": [
                {
                    "name": u.name,
                    "email": u.email,
                    "firstSeen": u.first_seen,
                    "lastSeen": u.last_seen,
                    "primaryAccess": u.primary_access,
                }
                for u in c.users
            ],
        }
        for c in companies
    ]


def export_filename(user_type: str, kind: str, as_of=None) -> str:
    """e.g. Client_Users_churn_risk_2025-01-01.csv"""
    prefix = user_type.replace(" ", "_")
    date = resolve_as_of(as_of).strftime("%Y-%m-%d")
    if kind == "summary":
        return f"{prefix}_churn_risk_{date}.csv"
    if kind == "detailed":
        return f"{prefix}_detailed_churn_risk_{date}.csv"
    if kind == "json":
        return f"{prefix}_churn_risk_{date}.json"
    raise ValueError(f"Unknown export kind: {kind}")


class ExportWriter:
    """Writes export files for one run into an output directory."""

    def __init__(self, output_dir: Path):
        """
        Initialize export writer.

        Args:
            output_dir: Directory for export files
        """
        self.output_dir = output_dir
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def write_summary_csv(self, companies, user_type: str, as_of=None) -> Path:
        path = self.output_dir / export_filename(user_type, "summary", as_of)
        summary_frame(companies).to_csv(path, index=False, lineterminator="\n")
        return path

    def write_detailed_csv(self, companies, user_type: str, as_of=None) -> Path:
        path = self.output_dir / export_filename(user_type, "detailed", as_of)
        detailed_frame(companies, as_of).to_csv(path, index=False, lineterminator="\n")
        return path

    def write_json(self, companies, user_type: str, as_of=None) -> Path:
        path = self.output_dir / export_filename(user_type, "json", as_of)
        with open(path, "w") as f:
            json.dump(json_document(companies), f, indent=2)
        return path

    def save_exports(
        self,
        companies: Sequence[CompanyProfile],
        user_type: str,
        kinds: Sequence[str],
        as_of=None,
    ) -> list[Path]:
        """
        Write the requested export kinds for one user type.

        Args:
            companies: CompanyProfiles of that user type
            user_type: "Client Users" or "Firm Users" (used in file names)
            kinds: Any of "summary", "detailed", "json"
            as_of: Reference time (file date and days since last active)

        Returns:
            Paths of the written files
        """
        writers = {
            "summary": self.write_summary_csv,
            "detailed": self.write_detailed_csv,
            "json": self.write_json,
        }
        return [writers[kind](companies, user_type, as_of) for kind in kinds]

    def plot_score_distribution(
        self,
        companies: Sequence[CompanyProfile],
        config: RiskConfig,
        user_type: str,
        as_of=None,
    ) -> Path:
        """Histogram of company risk scores with the band thresholds marked."""
        scores = [c.churn_risk_score for c in companies]

        fig, ax = plt.subplots(figsize=(10, 6))
        sns.histplot(x=scores, bins=range(0, 105, 5), ax=ax, color="steelblue")

        ax.axvline(
            x=config.medium_risk_threshold,
            color="orange",
            linestyle="--",
            label=f"Medium ({config.medium_risk_threshold})",
        )
        ax.axvline(
            x=config.high_risk_threshold,
            color="red",
            linestyle="--",
            label=f"High ({config.high_risk_threshold})",
        )
        ax.set_xlabel("Churn Risk Score")
        ax.set_ylabel("Companies")
        ax.set_title(f"{user_type} - Risk Score Distribution")
        ax.set_xlim(0, 100)
        ax.legend()
        ax.grid(True, alpha=0.3)

        plt.tight_layout()
        prefix = user_type.replace(" ", "_")
        date = resolve_as_of(as_of).strftime("%Y-%m-%d")
        path = self.output_dir / f"{prefix}_score_distribution_{date}.png"
        plt.savefig(path, dpi=150)
        plt.close(fig)
        return path
