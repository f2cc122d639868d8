"""Aggregate raw samples into chart rows with means and error values."""

from typing import List, Optional, Tuple

import pandas as pd
from scipy.stats import norm

from .errors import InvalidConfiguration, MissingKey


def error_scale(kind: Optional[str]) -> Tuple[Optional[str], float]:
    """Parse an error kind into its canonical name and multiplier.

    Error kinds:
    - "std": sample standard deviation
    - "sem": standard error of the mean
    - "ciNN": NN% normal confidence half-width, z * SEM (e.g. "ci95")
    - None: no error values
    """
    if kind is None:
        return None, 0.0
    mode = str(kind).strip().lower()
    if mode in ("std", "sem"):
        return mode, 1.0
    if mode.startswith("ci"):
        digits = mode[2:] or "95"
        try:
            level = float(digits) / 100.0
        except ValueError:
            raise InvalidConfiguration(f"confidence level must be a percentage, e.g. 'ci95', got {kind!r}") from None
        if not 0.0 < level < 1.0:
            raise InvalidConfiguration(f"confidence level must be between 0 and 100, got {kind!r}")
        return f"ci{digits}", float(norm.ppf(0.5 + level / 2.0))
    raise InvalidConfiguration(f"error must be one of 'std', 'sem', 'ciNN' or None, got {kind!r}")


def summarize_samples(
    df: pd.DataFrame,
    label_col: str,
    value_col: str,
    series_col: Optional[str] = None,
    error: Optional[str] = "sem",
) -> Tuple[pd.DataFrame, List[str], List[str]]:
    """Reduce long-format samples to one row per label.

    Args:
        df: Long-format samples, one measurement per row
        label_col: Column holding the x-axis label
        value_col: Column holding the measured value
        series_col: Optional column splitting each label into series
        error: Error kind, see error_scale()

    Returns:
        Tuple of (wide DataFrame, value column names, error column names).
        Labels and series keep their order of first appearance. A label with
        no samples for a series gets a zero mean and a zero error for it.
    """
    for col in (label_col, value_col, series_col):
        if col is not None and col not in df.columns:
            raise MissingKey(col)
    kind, scale = error_scale(error)

    frame = pd.DataFrame(
        {
            "label": df[label_col],
            "series": df[series_col] if series_col is not None else value_col,
            "value": pd.to_numeric(df[value_col], errors="coerce"),
        }
    ).dropna(subset=["value"])

    labels = pd.unique(frame["label"])
    series = pd.unique(frame["series"])
    grouped = frame.groupby(["label", "series"], sort=False)["value"]
    means = grouped.mean()
    if kind == "std":
        spread = grouped.std(ddof=1)
    elif kind is not None:
        spread = grouped.sem() * scale
    else:
        spread = None

    value_cols = [str(s) for s in series]
    error_cols = [f"{s}_{kind}" for s in value_cols] if kind is not None else []

    rows = []
    for label in labels:
        row = {label_col: label}
        for i, s in enumerate(series):
            row[value_cols[i]] = means.get((label, s), 0.0)
            if spread is not None:
                row[error_cols[i]] = spread.get((label, s), 0.0)
        rows.append(row)

    columns = [label_col] + [c for pair in zip(value_cols, error_cols) for c in pair]
    if not error_cols:
        columns = [label_col] + value_cols
    return pd.DataFrame(rows, columns=columns), value_cols, error_cols
