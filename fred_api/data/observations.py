"""Conversion of FRED observation responses to DataFrames."""

import pandas as pd

from fred_api.data.fields import FieldIter


def observations_frame(data: bytes) -> pd.DataFrame:
    """
    Parse a ``series/observations`` XML response.

    Args:
        data: Response body as returned by send_request

    Returns:
        DataFrame with date index and value column. FRED's "." placeholders
        for missing values are dropped.

    Raises:
        FieldExtractionError: If an observation lacks a date or value
    """
    rows = list(FieldIter("observation", ["date", "value"], data))
    if not rows:
        return pd.DataFrame(columns=["value"])

    df = pd.DataFrame(rows, columns=["date", "value"])
    df["date"] = pd.to_datetime(df["date"])
    df["value"] = pd.to_numeric(df["value"], errors="coerce")
    df = df.dropna()
    df.set_index("date", inplace=True)

    return df
