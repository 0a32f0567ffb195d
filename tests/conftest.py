"""
Pytest fixtures for churn risk engine tests.
"""

import os

import pandas as pd
import pytest

# Add packages to path
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))
os.environ.setdefault("MPLBACKEND", "Agg")

from churnrisk.aggregator import CompanyAggregator, CompanyProfile
from churnrisk.config import RiskConfig
from churnrisk.engine import ChurnRiskEngine, generate_sample_csv
from churnrisk.records import FIELD_NAMES

AS_OF = pd.Timestamp("2025-01-01T00:00:00Z")
HEADER = ",".join(FIELD_NAMES)


def iso_days_ago(days: float) -> str:
    """Timestamp string exactly `days` days before AS_OF."""
    return (AS_OF - pd.Timedelta(days=days)).strftime("%Y-%m-%dT%H:%M:%S.000Z")


def csv_line(
    email: str,
    last_seen: str = "",
    company_name: str = "Acme Corp",
    name: str = "",
    first_seen: str = "",
    primary_access: str = "Standard",
    user_id: str = "U1",
) -> str:
    """One full 18-field input row."""
    values = [""] * len(FIELD_NAMES)
    values[0] = user_id
    values[1] = email.split("@")[0]
    values[2] = email
    values[3] = first_seen
    values[4] = last_seen
    values[5] = name
    values[6] = primary_access
    values[12] = company_name
    return ",".join(values)


@pytest.fixture
def as_of():
    """Fixed reference time for staleness."""
    return AS_OF


@pytest.fixture
def days_ago():
    """Builder for timestamps relative to AS_OF."""
    return iso_days_ago


@pytest.fixture
def make_csv():
    """Builder for input text: header plus csv_line(**row) for each row."""
    def _make(*rows: dict) -> str:
        return "\n".join([HEADER] + [csv_line(**row) for row in rows]) + "\n"
    return _make


@pytest.fixture
def default_config():
    """Default risk configuration."""
    return RiskConfig()


@pytest.fixture
def aggregator(default_config):
    """CompanyAggregator with default config."""
    return CompanyAggregator(default_config)


@pytest.fixture
def engine(default_config):
    """ChurnRiskEngine with default config."""
    return ChurnRiskEngine(default_config)


@pytest.fixture
def acme_csv(make_csv):
    """
    acme.com with two users: one seen 10 days ago, one 200 days ago.

    Under defaults: 1 active, 1 inactive, avg 105 days, score 59 (Medium).
    """
    return make_csv(
        {"email": "alice@acme.com", "last_seen": iso_days_ago(10), "name": "Alice"},
        {"email": "bob@acme.com", "last_seen": iso_days_ago(200), "name": "Bob"},
    )


@pytest.fixture
def mixed_csv(make_csv):
    """Several companies covering each risk band and both user types."""
    rows = [
        # bigco.com: 20 users, none active for 200 days -> 30 + 60 + 0 = 90 (High)
        *[
            {"email": f"u{i}@bigco.com", "last_seen": iso_days_ago(200)}
            for i in range(20)
        ],
        # acme.com: score 59 (Medium)
        {"email": "alice@acme.com", "last_seen": iso_days_ago(10)},
        {"email": "bob@acme.com", "last_seen": iso_days_ago(200)},
        # fresh.io: 4 client users seen 5 days ago -> 0 + 1.67 + 8 = 10 (Low)
        *[
            {
                "email": f"c{i}@fresh.io",
                "last_seen": iso_days_ago(5),
                "company_name": "Client Users",
            }
            for i in range(4)
        ],
    ]
    return make_csv(*rows)


@pytest.fixture
def sample_text():
    """200 generated users across 40 companies."""
    return generate_sample_csv(n_users=200, n_companies=40, seed=42, as_of="2025-01-01")


def make_profile(
    domain: str,
    score: int,
    active_users: int = 1,
    user_count: int = 2,
    user_type: str = "Firm Users",
    users: tuple = (),
) -> CompanyProfile:
    """CompanyProfile built directly, for metrics tests."""
    return CompanyProfile(
        domain=domain,
        users=users,
        user_count=user_count,
        active_users=active_users,
        inactive_users=user_count - active_users,
        last_active_date="2024-12-22",
        avg_days_since_last_active=30,
        churn_risk_score=score,
        user_type=user_type,
    )


@pytest.fixture
def profile_factory():
    return make_profile
