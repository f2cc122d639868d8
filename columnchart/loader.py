"""Table loading for chart data (CSV and Excel uploads)."""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

EXCEL_SUFFIXES = (".xlsx", ".xlsm")
LEGACY_EXCEL_SUFFIXES = (".xls",)


def _clean_cell(value):
    """Map NaN cells to None so they read as missing."""
    if isinstance(value, float) and np.isnan(value):
        return None
    return value


def _source_name(uploaded_file) -> str:
    name = getattr(uploaded_file, "name", None)
    if name is None and isinstance(uploaded_file, (str, Path)):
        name = str(uploaded_file)
    return str(name or "")


def _first_sheet_with_data(xl: pd.ExcelFile) -> Tuple[Optional[pd.DataFrame], Optional[str]]:
    for name in xl.sheet_names:
        df = pd.read_excel(xl, sheet_name=name, engine="openpyxl")
        df = df.dropna(how="all").dropna(axis=1, how="all")
        if not df.empty:
            return df, None
    return None, "活頁簿中沒有包含資料的工作表"


def frame_to_rows(df: pd.DataFrame) -> List[Dict[Any, Any]]:
    """Convert a DataFrame into one mapping per row, NaN cells as None."""
    return [
        {col: _clean_cell(val) for col, val in record.items()}
        for record in df.to_dict(orient="records")
    ]


def numeric_columns(df: pd.DataFrame) -> List[str]:
    """Columns that can serve as value or error selectors."""
    return [col for col in df.columns if pd.api.types.is_numeric_dtype(df[col])]


def load_table(uploaded_file) -> Tuple[pd.DataFrame, Optional[str]]:
    """Load a CSV or .xlsx file, returning DataFrame and optional error message.

    Legacy .xls workbooks are rejected, since openpyxl only reads the xlsx family.
    """
    try:
        suffix = Path(_source_name(uploaded_file)).suffix.lower()
        if suffix in LEGACY_EXCEL_SUFFIXES:
            return pd.DataFrame(), "不支援舊版 .xls 檔案，請另存為 .xlsx 後再上傳"
        if suffix in EXCEL_SUFFIXES:
            xl = pd.ExcelFile(uploaded_file, engine="openpyxl")
            df, err = _first_sheet_with_data(xl)
            if err:
                return pd.DataFrame(), err
        else:
            df = pd.read_csv(uploaded_file)
            df = df.dropna(how="all").dropna(axis=1, how="all")
        df.columns = [str(c).strip() for c in df.columns]
        if df.empty:
            return df, "檔案中沒有任何資料列"
        return df.reset_index(drop=True), None
    except Exception as exc:
        return pd.DataFrame(), str(exc)
