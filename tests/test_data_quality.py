"""
Data quality and schema validation tests.

Tests input validation at the deriver boundary, range checks and the
warnings raised for tolerated but suspicious records.
"""

import warnings

import pandas as pd
import pandera as pa
import pytest

from churn_features import FeatureDeriver, generate_sample_data
from churn_features.schemas import (
    RECORD_INPUT_SCHEMA,
    RECORD_OUTPUT_SCHEMA,
    RECORD_TENURE_SCHEMA,
    build_input_schema,
)


def make_records(**overrides) -> pd.DataFrame:
    record = {
        "tenure_months": 12,
        "monthly_charges": 50.0,
        "total_charges": 600.0,
        "contract": "One year",
    }
    record.update(overrides)
    return pd.DataFrame([record])


class TestInputSchema:
    """Hard schema violations raise SchemaError."""

    def test_sample_data_valid(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error", UserWarning)
            validated = RECORD_INPUT_SCHEMA.validate(generate_sample_data(200))
        assert len(validated) == 200

    @pytest.mark.parametrize(
        "column, value",
        [
            ("tenure_months", -1),
            ("monthly_charges", -5.0),
            ("total_charges", -0.01),
        ],
    )
    def test_negative_values_rejected(self, column, value):
        with pytest.raises(pa.errors.SchemaError):
            RECORD_INPUT_SCHEMA.validate(make_records(**{column: value}))

    def test_null_charges_rejected(self):
        with pytest.raises(pa.errors.SchemaError):
            RECORD_INPUT_SCHEMA.validate(make_records(total_charges=None))

    def test_deriver_validates_schema(self):
        """FeatureDeriver should reject negative tenure before deriving."""
        with pytest.raises(pa.errors.SchemaError):
            FeatureDeriver().derive(make_records(tenure_months=-3))

    def test_fractional_tenure_rejected(self):
        """12.5 months must not be truncated into a renewal month."""
        df = make_records(tenure_months=12.5, monthly_charges=100.0, total_charges=1250.0)

        with pytest.raises(pa.errors.SchemaError, match="whole number"):
            FeatureDeriver().derive(df)

    def test_fractional_tenure_rejected_by_tenure_schema(self):
        with pytest.raises(pa.errors.SchemaError):
            RECORD_TENURE_SCHEMA.validate(pd.DataFrame({"tenure_months": [24.0, 0.25]}))

    def test_whole_float_tenure_accepted(self):
        result = FeatureDeriver().derive(make_records(tenure_months=12.0))

        assert result.df["tenure_months"].iloc[0] == 12
        assert result.df["able_to_churn"].iloc[0] == "Yes"

    def test_extra_columns_allowed(self):
        df = make_records()
        df["payment_method"] = "Mailed check"

        validated = RECORD_INPUT_SCHEMA.validate(df)
        assert "payment_method" in validated.columns


class TestSchemaWarnings:
    """Tolerated records are reported as warnings, not errors."""

    def test_unknown_contract_warns(self):
        df = make_records(contract="Three year")

        with pytest.warns(UserWarning):
            result = FeatureDeriver().derive(df)

        assert result.df["able_to_churn"].iloc[0] == "No"

    def test_billed_new_account_warns(self):
        df = make_records(tenure_months=0, total_charges=35.0)

        with pytest.warns(UserWarning):
            result = FeatureDeriver().derive(df)

        assert result.df["diff_charge"].iloc[0] == "Same"

    def test_known_contracts_no_warning(self, edge_cases):
        with warnings.catch_warnings():
            warnings.simplefilter("error", UserWarning)
            FeatureDeriver().derive(edge_cases)

    def test_subset_schema_skips_unused_checks(self):
        """Only the selected input columns are checked."""
        schema = build_input_schema(columns=["contract", "tenure_months"])
        df = pd.DataFrame({"contract": ["One year"], "tenure_months": [0]})

        with warnings.catch_warnings():
            warnings.simplefilter("error", UserWarning)
            assert len(schema.validate(df)) == 1


class TestOutputSchema:
    """Derived columns are restricted to their label sets."""

    def test_derived_output_valid(self, deriver, sample_data):
        result = deriver.derive(sample_data)
        assert len(RECORD_OUTPUT_SCHEMA.validate(result.df)) == len(sample_data)

    def test_invalid_label_rejected(self):
        df = pd.DataFrame({"diff_charge": ["Less", "Lower"]})

        with pytest.raises(pa.errors.SchemaError):
            RECORD_OUTPUT_SCHEMA.validate(df)

    def test_derived_columns_optional(self):
        df = pd.DataFrame({"able_to_churn": ["Yes", "No"]})
        assert len(RECORD_OUTPUT_SCHEMA.validate(df)) == 2


class TestDataRanges:
    """Sanity checks on the synthetic customer records."""

    @pytest.fixture
    def records(self):
        return generate_sample_data(n_customers=1000, seed=11)

    def test_tenure_within_bounds(self, records):
        assert records["tenure_months"].between(0, 72).all()

    def test_monthly_charges_within_bounds(self, records):
        assert records["monthly_charges"].between(18.25, 118.75).all()

    def test_contract_distribution_reasonable(self, records):
        shares = records["contract"].value_counts(normalize=True)

        assert set(shares.index) == {"Month-to-month", "One year", "Two year"}
        assert 0.45 < shares["Month-to-month"] < 0.65

    def test_churn_rate_reasonable(self, records):
        assert 0.10 < records["churn"].mean() < 0.50

    def test_no_duplicate_customer_ids(self, records):
        assert records["customer_id"].is_unique
