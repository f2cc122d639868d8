"""Tests for geometry tables, workbook export and PNG fallback."""

from __future__ import annotations

import io
import math

import pandas as pd
import pytest

from columnchart import build_geometry, figure_png_bytes, geometry_excel_bytes, geometry_frame


@pytest.fixture
def clustered(quarter_rows):
    return build_geometry(quarter_rows, "name", ["q1", "q2", "q3"], ["e1", "e2", "e3"], mode="clustered")


@pytest.mark.unit
def test_geometry_frame_has_one_row_per_bar(clustered) -> None:
    frame = geometry_frame(clustered)

    assert len(frame) == 6
    assert frame["label"].tolist() == ["x", "x", "x", "y", "y", "y"]
    assert frame["series"].tolist() == [0, 1, 2, 0, 1, 2]
    assert frame.loc[0, "y_high"] == pytest.approx(1.1)


@pytest.mark.unit
def test_geometry_frame_without_whiskers(quarter_rows) -> None:
    geometry = build_geometry(quarter_rows, "name", ["q1", "q2"], mode="stacked")

    frame = geometry_frame(geometry)

    assert frame["y_base"].tolist() == [0.0, 1.0, 0.0, 4.0]
    assert all(math.isnan(v) for v in frame["y_low"])


@pytest.mark.integration
def test_geometry_workbook_sheets(clustered) -> None:
    sheets = pd.read_excel(io.BytesIO(geometry_excel_bytes(clustered)), sheet_name=None, engine="openpyxl")

    assert set(sheets) == {"bars", "whiskers", "ticks", "axis"}
    assert len(sheets["bars"]) == 6
    assert len(sheets["whiskers"]) == 6
    assert sheets["ticks"]["label"].tolist() == ["x", "y"]
    assert sheets["axis"].loc[0, "mode"] == "clustered"
    assert sheets["axis"].loc[0, "x_min"] == pytest.approx(-1.0)


@pytest.mark.unit
def test_png_export_unavailable_returns_none() -> None:
    class NoKaleido:
        def to_image(self, **_kwargs):
            raise ValueError("kaleido not installed")

    assert figure_png_bytes(NoKaleido()) is None
