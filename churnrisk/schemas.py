"""
Data schema definitions for churn risk outputs.

Uses Pandera for runtime validation of the tables handed to export
collaborators. Input rows are not schema-checked: the parser accepts any
text and no row is ever rejected.
"""

import pandera as pa
from pandera import Column, Check, DataFrameSchema

from .classification import USER_TYPES


# Company-level frame produced by CompanyAggregator.aggregate_frame
COMPANY_SCORE_SCHEMA = DataFrameSchema(
    {
        "DOMAIN": Column(str, nullable=False, unique=True),
        "USER_COUNT": Column(int, checks=Check.greater_than_or_equal_to(1)),
        "ACTIVE_USERS": Column(int, checks=Check.greater_than_or_equal_to(0)),
        "INACTIVE_USERS": Column(int, checks=Check.greater_than_or_equal_to(0)),
        "AVG_DAYS_SINCE_ACTIVE": Column(int, checks=Check.greater_than_or_equal_to(0)),
        "CHURN_RISK_SCORE": Column(
            int,
            checks=[
                Check.greater_than_or_equal_to(0),
                Check.less_than_or_equal_to(100),
            ],
        ),
    },
    strict=False,  # Component columns ride along
    coerce=True,
    description="Scored company frame",
)


# Summary export: one row per company
SUMMARY_SCHEMA = DataFrameSchema(
    {
        "Domain": Column(str, nullable=False),
        "User Count": Column(int, checks=Check.greater_than_or_equal_to(1)),
        "Active Users": Column(int, checks=Check.greater_than_or_equal_to(0)),
        "Inactive Users": Column(int, checks=Check.greater_than_or_equal_to(0)),
        "Last Active Date": Column(
            str,
            checks=Check.str_matches(r"^\d{4}-\d{2}-\d{2}$"),
        ),
        "Avg Days Since Last Active": Column(int, checks=Check.greater_than_or_equal_to(0)),
        "Churn Risk Score": Column(
            int,
            checks=[
                Check.greater_than_or_equal_to(0),
                Check.less_than_or_equal_to(100),
            ],
        ),
        "User Type": Column(str, checks=Check.isin(USER_TYPES)),
    },
    strict=True,
    ordered=True,  # Downstream consumers read columns by position
    coerce=True,
    description="Company summary export",
)


# Detailed export: one row per user
DETAILED_SCHEMA = DataFrameSchema(
    {
        "Company Domain": Column(str, nullable=False),
        "User Name": Column(str),
        "User Email": Column(str),
        "Access Level": Column(str),
        "First Seen": Column(str),
        "Last Seen": Column(str),
        "Days Since Last Active": Column(int, checks=Check.greater_than_or_equal_to(0)),
        "Company Churn Risk Score": Column(
            int,
            checks=[
                Check.greater_than_or_equal_to(0),
                Check.less_than_or_equal_to(100),
            ],
        ),
        "User Type": Column(str, checks=Check.isin(USER_TYPES)),
    },
    strict=True,
    ordered=True,
    coerce=True,
    description="Per-user detailed export",
)

SchemaError = pa.errors.SchemaError
