"""Integration tests for loading chart data from CSV and Excel files."""

from __future__ import annotations

import pandas as pd
import pytest

from columnchart import frame_to_rows, load_table, numeric_columns, render_column_chart

pytestmark = pytest.mark.integration


def test_load_csv(tmp_path) -> None:
    path = tmp_path / "sales.csv"
    path.write_text(" region ,q1,q2\nNorth,1,2\nSouth,3,\n,,\n", encoding="utf-8")

    df, err = load_table(path)

    assert err is None
    assert list(df.columns) == ["region", "q1", "q2"]
    assert len(df) == 2
    assert numeric_columns(df) == ["q1", "q2"]


def test_load_excel_first_sheet_with_data(tmp_path) -> None:
    path = tmp_path / "sales.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame().to_excel(writer, sheet_name="blank", index=False)
        pd.DataFrame({"region": ["N", "S"], "q1": [1.0, 2.0]}).to_excel(writer, sheet_name="data", index=False)

    df, err = load_table(path)

    assert err is None
    assert df["region"].tolist() == ["N", "S"]


def test_load_empty_csv_reports_error(tmp_path) -> None:
    path = tmp_path / "empty.csv"
    path.write_text("region,q1\n", encoding="utf-8")

    df, err = load_table(path)

    assert df.empty
    assert err


def test_legacy_xls_is_rejected(tmp_path) -> None:
    """An old binary workbook is refused up front instead of parsed as CSV."""

    path = tmp_path / "sales.xls"
    path.write_bytes(b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 64)

    df, err = load_table(path)

    assert df.empty
    assert ".xls" in err
    assert ".xlsx" in err


def test_load_missing_file_reports_error(tmp_path) -> None:
    df, err = load_table(tmp_path / "nope.csv")

    assert df.empty
    assert err


def test_loaded_table_renders(tmp_path) -> None:
    path = tmp_path / "sales.csv"
    path.write_text("region,q1,q2\nNorth,1,2\nSouth,3,1\n", encoding="utf-8")
    df, _ = load_table(path)

    fig = render_column_chart(df, "region", ["q1", "q2"], mode="stacked")

    assert len(fig.data) == 2
    assert frame_to_rows(df)[1] == {"region": "South", "q1": 3, "q2": 1}
