"""
Exploratory summaries for churn experiments.

Group-by tables describing the cleaned data: class balance, missing
values, numeric feature profiles by outcome and churn rate per level
of every categorical column (derived features included).
"""

from typing import Optional

import pandas as pd


def churn_rate_by(df: pd.DataFrame, column: str, target: str = "churn") -> pd.DataFrame:
    """
    Churn rate for each level of a column.

    Returns:
        DataFrame indexed by level with count, churned and churn_rate,
        sorted by churn_rate descending
    """
    grouped = df.groupby(column, dropna=False)[target]
    table = pd.DataFrame({
        "count": grouped.size(),
        "churned": grouped.sum(),
    })
    table["churn_rate"] = (table["churned"] / table["count"]).round(4)
    return table.sort_values("churn_rate", ascending=False)


def numeric_summary(
    df: pd.DataFrame,
    columns: list[str],
    target: str = "churn",
) -> pd.DataFrame:
    """Mean, median and std of numeric columns by outcome class."""
    return (
        df.groupby(target)[columns]
        .agg(["mean", "median", "std"])
        .round(2)
    )


def missing_summary(df: pd.DataFrame) -> pd.DataFrame:
    """Missing count and share per column (only columns with gaps)."""
    missing = df.isna().sum()
    table = pd.DataFrame({
        "missing": missing,
        "share": (missing / max(len(df), 1)).round(4),
    })
    return table[table["missing"] > 0]


def explore(
    df: pd.DataFrame,
    target: str = "churn",
    categorical: Optional[list[str]] = None,
    numeric: Optional[list[str]] = None,
) -> dict[str, pd.DataFrame]:
    """
    Build the full set of exploration tables.

    Args:
        df: Cleaned DataFrame with target column
        target: 0/1 outcome column
        categorical: Columns to break churn rate down by (default: non-numeric)
        numeric: Columns to profile (default: numeric, target excluded)

    Returns:
        Dictionary of table name -> DataFrame
    """
    features = df.drop(columns=[target])
    if categorical is None:
        categorical = features.select_dtypes(exclude="number").columns.tolist()
    if numeric is None:
        numeric = features.select_dtypes(include="number").columns.tolist()

    counts = df[target].value_counts().sort_index()
    tables = {
        "class_balance": pd.DataFrame({
            "count": counts,
            "share": (counts / max(len(df), 1)).round(4),
        }),
        "missing": missing_summary(df),
    }
    if numeric:
        tables["numeric_by_churn"] = numeric_summary(df, numeric, target)

    for column in categorical:
        tables[f"churn_rate_{column}"] = churn_rate_by(df, column, target)

    return tables
