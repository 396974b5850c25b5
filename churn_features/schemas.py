"""
Data schema definitions for churn feature derivation.

Uses Pandera for runtime validation at the pipeline boundary. The
derivation rules themselves never reject a record: suspicious but
tolerated input (unknown contract levels, billed brand-new accounts)
is reported as a schema warning instead of an error.
"""

from typing import Optional

import pandas as pd
from pandera import Column, Check, DataFrameSchema

from .config import DEFAULT_CONFIG, FeatureConfig


def build_input_schema(
    config: FeatureConfig = DEFAULT_CONFIG,
    columns: Optional[list[str]] = None,
) -> DataFrameSchema:
    """
    Schema for customer records entering the deriver.

    Args:
        config: FeatureConfig with the input column names
        columns: Restrict the schema to these input columns (all if None)
    """
    tenure = config.tenure_column
    total = config.total_charges_column
    columns = config.input_columns if columns is None else columns

    schema_columns = {
        tenure: Column(
            int,
            nullable=False,
            checks=Check.greater_than_or_equal_to(0),
            description="Months since account opened (0 = brand-new)"
        ),
        config.monthly_charges_column: Column(
            float,
            nullable=False,
            checks=Check.greater_than_or_equal_to(0),
            description="Current month's billing rate"
        ),
        total: Column(
            float,
            nullable=False,
            checks=Check.greater_than_or_equal_to(0),
            description="Cumulative billing since account opened"
        ),
        config.contract_column: Column(
            str,
            nullable=True,
            checks=Check.isin(config.known_contracts, raise_warning=True),
            description="Contract type (unknown levels derive as not able to churn)"
        ),
    }

    checks = []
    if tenure in columns and total in columns:
        # Upstream imputation guarantees this; warn if it slipped through
        checks.append(Check(
            lambda df: (df[tenure] > 0) | (df[total] == 0),
            raise_warning=True,
            error=f"{total} must be 0 when {tenure} is 0",
        ))

    return DataFrameSchema(
        {name: col for name, col in schema_columns.items() if name in columns},
        checks=checks,
        strict=False,  # Customer records carry many other columns
        coerce=True,
        description="Schema for churn feature derivation input"
    )


def _whole_number(series: pd.Series) -> pd.Series:
    values = pd.to_numeric(series, errors="coerce")
    # Unparseable values are left to the coercing input schema
    return values.isna() | (values % 1 == 0)


def build_tenure_schema(config: FeatureConfig = DEFAULT_CONFIG) -> DataFrameSchema:
    """
    Schema run on the raw records before any type coercion.

    Integer coercion truncates, so 12.5 months would silently become a
    renewal month. Tenure must already be a whole number of months.
    """
    return DataFrameSchema(
        {
            config.tenure_column: Column(
                nullable=True,
                required=False,
                checks=Check(
                    _whole_number,
                    error=f"{config.tenure_column} must be a whole number of months",
                ),
            ),
        },
        strict=False,
        description="Pre-coercion tenure check for churn feature derivation"
    )


def build_output_schema(config: FeatureConfig = DEFAULT_CONFIG) -> DataFrameSchema:
    """Schema for derived columns (each optional, features can be toggled)."""
    diff_labels = list(config.diff_charge_labels.values()) + [config.zero_tenure_label]

    return DataFrameSchema(
        {
            config.diff_charge_column: Column(
                str,
                nullable=False,
                required=False,
                checks=Check.isin(diff_labels),
            ),
            config.able_to_churn_column: Column(
                str,
                nullable=False,
                required=False,
                checks=Check.isin(list(config.churn_labels.values())),
            ),
        },
        strict=False,
        coerce=True,
        description="Schema for churn feature derivation output"
    )


# Schemas for the default column layout
RECORD_TENURE_SCHEMA = build_tenure_schema(DEFAULT_CONFIG)
RECORD_INPUT_SCHEMA = build_input_schema(DEFAULT_CONFIG)
RECORD_OUTPUT_SCHEMA = build_output_schema(DEFAULT_CONFIG)
