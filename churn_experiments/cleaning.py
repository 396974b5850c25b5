"""
Data loading and cleaning for the telco churn dataset.

Turns the raw spreadsheet into model-ready customer records by:
1. Normalizing column names to snake_case
2. Removing columns that leak the outcome or carry no signal
3. Imputing TotalCharges for brand-new accounts
4. Encoding the churn target as 0/1
"""

import re
from dataclasses import dataclass, field, asdict
from pathlib import Path

import pandas as pd
from sklearn.model_selection import train_test_split

from .config import ExperimentConfig


# Raw header aliases (after snake_casing) -> canonical name
COLUMN_ALIASES = {
    "tenure": "tenure_months",
    "churn": "churn_label",
}

SPREADSHEET_SUFFIXES = {".xlsx", ".xls"}


@dataclass
class CleaningReport:
    """What the cleaning step did to the raw data."""

    dropped_columns: list[str] = field(default_factory=list)
    imputed_rows: int = 0
    dropped_rows: int = 0
    n_rows: int = 0
    n_columns: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def load_dataset(path: Path | str, sheet_name: str | int = 0) -> pd.DataFrame:
    """
    Load the raw customer table from a spreadsheet or CSV.

    Args:
        path: .xlsx/.xls (read with openpyxl) or .csv file
        sheet_name: Sheet to read for spreadsheets

    Raises:
        ValueError: For any other file type
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in SPREADSHEET_SUFFIXES:
        return pd.read_excel(path, sheet_name=sheet_name)
    if suffix == ".csv":
        return pd.read_csv(path)
    raise ValueError(f"Unsupported data file type: {path.name}")


def normalize_column_name(name: str) -> str:
    """
    Convert a raw header to snake_case.

    "Tenure Months" -> "tenure_months", "MonthlyCharges" -> "monthly_charges",
    "CustomerID" -> "customer_id", "Churn" -> "churn_label".
    """
    name = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", str(name).strip())
    name = re.sub(r"[^0-9a-zA-Z]+", "_", name).strip("_").lower()
    return COLUMN_ALIASES.get(name, name)


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Rename every column with normalize_column_name."""
    return df.rename(columns=normalize_column_name)


def clean_dataset(
    df: pd.DataFrame, config: ExperimentConfig
) -> tuple[pd.DataFrame, CleaningReport]:
    """
    Clean raw customer records.

    Args:
        df: Raw DataFrame (any header style)
        config: ExperimentConfig with column lists and target settings

    Returns:
        Tuple of (cleaned DataFrame indexed by customer id, CleaningReport)

    Raises:
        ValueError: If the target cannot be found
    """
    report = CleaningReport()
    df = normalize_columns(df)

    if config.id_column in df.columns:
        df = df.set_index(config.id_column)

    # Leakage and non-informative columns
    to_drop = [col for col in config.dropped_columns if col in df.columns]
    df = df.drop(columns=to_drop)
    report.dropped_columns = to_drop

    # TotalCharges is blank for accounts that were never billed
    if "total_charges" in df.columns:
        df["total_charges"] = pd.to_numeric(df["total_charges"], errors="coerce")
        if "tenure_months" in df.columns:
            new_accounts = df["tenure_months"] == 0
            report.imputed_rows = int(
                (new_accounts & df["total_charges"].isna()).sum()
            )
            df.loc[new_accounts, "total_charges"] = 0.0

        missing = df["total_charges"].isna()
        report.dropped_rows = int(missing.sum())
        df = df.loc[~missing].copy()

    df = _encode_target(df, config)

    report.n_rows, report.n_columns = df.shape
    return df, report


def _encode_target(df: pd.DataFrame, config: ExperimentConfig) -> pd.DataFrame:
    """Yes/No churn label -> 0/1 target column."""
    if config.target_label_column in df.columns:
        labels = df[config.target_label_column]
        if pd.api.types.is_numeric_dtype(labels):
            target = labels
        else:
            target = labels.astype(str).str.strip().str.lower().map({"yes": 1, "no": 0})
        if target.isna().any():
            unknown = sorted(map(str, labels[target.isna()].unique()))
            raise ValueError(
                f"Unrecognised values in '{config.target_label_column}': {unknown} "
                f"(expected Yes/No)"
            )
        df = df.drop(columns=[config.target_label_column])
        df[config.target] = target.astype(int)
    elif config.target in df.columns:
        df[config.target] = df[config.target].astype(int)
    else:
        raise ValueError(
            f"Target not found: expected '{config.target_label_column}' "
            f"or '{config.target}' column"
        )
    return df


def split_dataset(
    df: pd.DataFrame,
    target: str,
    test_size: float = 0.2,
    val_size: float = 0.2,
    random_state: int = 42,
) -> tuple[pd.DataFrame, pd.DataFrame, pd.DataFrame]:
    """
    Create stratified train/validation/test splits.

    Sizes are fractions of the full dataset; train gets the remainder.
    """
    assert 0 < test_size + val_size < 1.0

    # First split: train+val vs test
    train_val_df, test_df = train_test_split(
        df,
        test_size=test_size,
        stratify=df[target],
        random_state=random_state
    )

    # Second split: train vs val
    val_relative_ratio = val_size / (1.0 - test_size)
    train_df, val_df = train_test_split(
        train_val_df,
        test_size=val_relative_ratio,
        stratify=train_val_df[target],
        random_state=random_state
    )

    return train_df, val_df, test_df
