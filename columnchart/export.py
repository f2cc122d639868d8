"""Export functions for downloading chart geometry and figures."""

import io
import logging
from typing import Optional

import numpy as np
import pandas as pd
import streamlit as st

from .geometry import ChartGeometry

logger = logging.getLogger(__name__)


def geometry_frame(geometry: ChartGeometry) -> pd.DataFrame:
    """One row per bar, with the bar's whisker (NaN when there is none)."""
    labels = dict(geometry.x_ticks)
    whiskers = {(w.row_index, w.series_index): w for w in geometry.whiskers}
    rows = []
    for b in geometry.bars:
        w = whiskers.get((b.row_index, b.series_index))
        rows.append(
            {
                "row": b.row_index,
                "label": labels.get(b.row_index),
                "series": b.series_index,
                "x_center": b.x_center,
                "x_half_width": b.x_half_width,
                "y_base": b.y_base,
                "y_extent": b.y_extent,
                "y_low": w.y_low if w else np.nan,
                "y_high": w.y_high if w else np.nan,
                "cap_half_width": w.cap_half_width if w else np.nan,
            }
        )
    columns = [
        "row", "label", "series", "x_center", "x_half_width", "y_base", "y_extent",
        "y_low", "y_high", "cap_half_width",
    ]
    return pd.DataFrame(rows, columns=columns)


def axis_frame(geometry: ChartGeometry) -> pd.DataFrame:
    x_min, x_max = geometry.x_range
    return pd.DataFrame(
        {
            "mode": [geometry.mode.value],
            "series_count": [geometry.series_count],
            "x_min": [x_min],
            "x_max": [x_max],
        }
    )


def geometry_excel_bytes(geometry: ChartGeometry) -> bytes:
    """Workbook with ``bars``, ``whiskers``, ``ticks`` and ``axis`` sheets."""
    bars = geometry_frame(geometry)
    whiskers = pd.DataFrame(
        [vars(w) for w in geometry.whiskers],
        columns=["row_index", "series_index", "y_low", "y_high", "cap_half_width"],
    )
    ticks = pd.DataFrame(list(geometry.x_ticks), columns=["tick", "label"])
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        bars.to_excel(writer, index=False, sheet_name="bars")
        whiskers.to_excel(writer, index=False, sheet_name="whiskers")
        ticks.to_excel(writer, index=False, sheet_name="ticks")
        axis_frame(geometry).to_excel(writer, index=False, sheet_name="axis")
    return buffer.getvalue()


def figure_png_bytes(fig, scale: int = 3) -> Optional[bytes]:
    """Render a figure to PNG with kaleido, or None when it is unavailable."""
    try:
        return fig.to_image(format="png", scale=scale)
    except Exception as exc:
        logger.warning("PNG export unavailable: %s", exc)
        return None


def download_plot_button(fig, filename: str) -> None:
    """Create download button for plot PNG."""
    img_bytes = figure_png_bytes(fig)
    if img_bytes:
        st.download_button(
            "下載圖表 (PNG)",
            data=img_bytes,
            file_name=filename,
            mime="image/png",
        )
    else:
        st.caption("PNG 下載需要 kaleido，請確認已安裝")


def download_geometry_button(geometry: ChartGeometry, filename: str) -> None:
    """Create download button for the geometry workbook."""
    st.download_button(
        "下載幾何資料 (Excel)",
        data=geometry_excel_bytes(geometry),
        file_name=filename,
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
