"""
Tests for loading, cleaning and splitting the raw telco export.
"""

import pandas as pd
import pytest

from churn_experiments import ExperimentConfig
from churn_experiments.cleaning import (
    clean_dataset,
    load_dataset,
    normalize_column_name,
    normalize_columns,
    split_dataset,
)


@pytest.fixture
def config():
    return ExperimentConfig(name="cleaning")


class TestColumnNames:
    """Tests for header normalization."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Tenure Months", "tenure_months"),
            ("tenure", "tenure_months"),
            ("MonthlyCharges", "monthly_charges"),
            ("Monthly Charges", "monthly_charges"),
            ("CustomerID", "customer_id"),
            ("Churn Label", "churn_label"),
            ("Churn", "churn_label"),
            ("Zip Code", "zip_code"),
            ("Lat Long", "lat_long"),
            ("CLTV", "cltv"),
            ("  Senior Citizen ", "senior_citizen"),
        ],
    )
    def test_normalize_column_name(self, raw, expected):
        assert normalize_column_name(raw) == expected

    def test_normalize_columns(self, raw_data):
        df = normalize_columns(raw_data)

        assert "tenure_months" in df.columns
        assert "total_charges" in df.columns
        assert len(df.columns) == len(raw_data.columns)


class TestCleanDataset:
    """Tests for clean_dataset."""

    def test_leakage_columns_dropped(self, raw_data, config):
        df, report = clean_dataset(raw_data, config)

        for col in ["churn_value", "churn_score", "cltv", "churn_reason"]:
            assert col not in df.columns
            assert col in report.dropped_columns

    def test_uninformative_columns_dropped(self, raw_data, config):
        df, _ = clean_dataset(raw_data, config)

        for col in ["count", "country", "state", "city", "zip_code"]:
            assert col not in df.columns

    def test_absent_columns_ignored(self, raw_data, config):
        """lat_long, latitude and longitude are not in this export."""
        _, report = clean_dataset(raw_data, config)

        assert "lat_long" not in report.dropped_columns

    def test_customer_id_is_index(self, raw_data, config):
        df, _ = clean_dataset(raw_data, config)

        assert df.index.name == "customer_id"
        assert df.index.is_unique

    def test_blank_total_charges_imputed_for_new_accounts(self, raw_data, config):
        new_accounts = int((raw_data["Tenure Months"] == 0).sum())
        df, report = clean_dataset(raw_data, config)

        assert new_accounts > 0
        assert report.imputed_rows == new_accounts
        assert report.dropped_rows == 0
        assert (df.loc[df["tenure_months"] == 0, "total_charges"] == 0).all()
        assert pd.api.types.is_float_dtype(df["total_charges"])

    def test_unrecoverable_rows_dropped(self, raw_data, config):
        raw = raw_data.copy()
        billed = raw.index[raw["Tenure Months"] > 0][:3]
        raw.loc[billed, "Total Charges"] = " "

        df, report = clean_dataset(raw, config)

        assert report.dropped_rows == 3
        assert len(df) == len(raw) - 3
        assert df["total_charges"].notna().all()

    def test_target_encoded(self, raw_data, config):
        df, _ = clean_dataset(raw_data, config)

        assert "churn_label" not in df.columns
        assert set(df["churn"]) == {0, 1}
        assert df["churn"].sum() == (raw_data["Churn Label"] == "Yes").sum()

    def test_numeric_target_kept(self, sample_data, config):
        df, _ = clean_dataset(sample_data, config)

        assert df["churn"].tolist() == sample_data["churn"].tolist()

    def test_missing_target_raises(self, raw_data, config):
        raw = raw_data.drop(columns=["Churn Label", "Churn Value"])

        with pytest.raises(ValueError, match="Target not found"):
            clean_dataset(raw, config)

    @pytest.mark.parametrize("label", [None, "", "  ", "Maybe"])
    def test_unrecognised_label_raises(self, raw_data, config, label):
        raw = raw_data.copy()
        raw.loc[3, "Churn Label"] = label

        with pytest.raises(ValueError, match="Unrecognised values in 'churn_label'"):
            clean_dataset(raw, config)

    def test_report_shape(self, raw_data, config):
        df, report = clean_dataset(raw_data, config)

        assert (report.n_rows, report.n_columns) == df.shape
        assert report.to_dict()["n_rows"] == len(df)

    def test_input_not_mutated(self, raw_data, config):
        original = raw_data.copy()
        clean_dataset(raw_data, config)

        pd.testing.assert_frame_equal(raw_data, original)


class TestLoadDataset:
    """Tests for reading the raw export from disk."""

    def test_load_csv(self, tmp_path, raw_data):
        path = tmp_path / "telco.csv"
        raw_data.to_csv(path, index=False)

        df = load_dataset(path)
        assert df.shape == raw_data.shape

    def test_load_xlsx(self, tmp_path, raw_data):
        path = tmp_path / "telco.xlsx"
        raw_data.head(50).to_excel(path, index=False)

        df = load_dataset(path)
        assert len(df) == 50
        assert "Tenure Months" in df.columns

    def test_unsupported_type_raises(self, tmp_path):
        path = tmp_path / "telco.parquet"
        path.write_bytes(b"")

        with pytest.raises(ValueError, match="Unsupported data file type"):
            load_dataset(path)


class TestSplitDataset:
    """Tests for stratified train/validation/test splits."""

    @pytest.fixture
    def cleaned(self, raw_data, config):
        df, _ = clean_dataset(raw_data, config)
        return df

    def test_splits_disjoint_and_complete(self, cleaned):
        train, val, test = split_dataset(cleaned, "churn")

        assert len(train) + len(val) + len(test) == len(cleaned)
        assert not set(train.index) & set(val.index)
        assert not set(train.index) & set(test.index)
        assert not set(val.index) & set(test.index)

    def test_split_sizes(self, cleaned):
        train, val, test = split_dataset(cleaned, "churn", test_size=0.2, val_size=0.2)

        assert len(test) == pytest.approx(0.2 * len(cleaned), abs=1)
        assert len(val) == pytest.approx(0.2 * len(cleaned), abs=1)

    def test_stratified(self, cleaned):
        overall = cleaned["churn"].mean()
        for split in split_dataset(cleaned, "churn"):
            assert split["churn"].mean() == pytest.approx(overall, abs=0.03)

    def test_reproducible(self, cleaned):
        first = split_dataset(cleaned, "churn", random_state=1)
        second = split_dataset(cleaned, "churn", random_state=1)

        for a, b in zip(first, second):
            assert a.index.tolist() == b.index.tolist()
