"""Column Chart Builder - Streamlit Web Application."""

import logging
import os

# Kaleido needs sandbox disabled on Cloud environment
os.environ["KALEIDO_DISABLE_SANDBOX"] = "1"

import pandas as pd
import streamlit as st

from columnchart import (
    BarStyle,
    ChartError,
    ChartMode,
    build_figure,
    build_geometry,
    download_geometry_button,
    download_plot_button,
    geometry_frame,
    load_table,
    numeric_columns,
    summarize_samples,
)

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

MODE_LABELS = {
    ChartMode.BASIC: "單一長條",
    ChartMode.CLUSTERED: "群組長條",
    ChartMode.STACKED: "堆疊長條",
    ChartMode.STACKED100: "百分比堆疊",
}
ERROR_KINDS = {"不顯示": None, "標準差 (std)": "std", "標準誤 (sem)": "sem", "95% 信賴區間": "ci95"}


def _demo_table() -> pd.DataFrame:
    """Small wide table shown before anything is uploaded."""
    return pd.DataFrame(
        {
            "產品": ["A", "B", "C", "D"],
            "Q1": [12.0, 9.5, 14.2, 7.8],
            "Q2": [13.1, 10.2, 12.9, 8.4],
            "Q3": [11.4, 11.0, 15.6, 9.1],
            "Q1_err": [1.2, 0.8, 1.5, 0.6],
            "Q2_err": [1.0, 0.9, 1.1, 0.7],
            "Q3_err": [1.4, 1.0, 1.3, 0.5],
        }
    )


# ============================================================================
# Streamlit App
# ============================================================================

st.set_page_config(page_title="Column Chart Builder", layout="wide")

st.title("長條圖產生工具")
st.caption("上傳 CSV 或 Excel，選擇標籤與數值欄位，支援群組、堆疊與百分比堆疊。")

uploaded_file = st.file_uploader("上傳資料檔 (csv/xlsx/xlsm)", type=["csv", "xlsx", "xlsm"])

if uploaded_file is None:
    st.info("尚未上傳檔案，使用範例資料")
    raw = _demo_table()
else:
    raw, err = load_table(uploaded_file)
    if err:
        st.error(f"{uploaded_file.name}: {err}")
        st.stop()

with st.expander("原始資料", expanded=False):
    st.dataframe(raw, use_container_width=True)

all_columns = list(raw.columns)
number_cols = numeric_columns(raw)
if not number_cols:
    st.error("沒有可用的數值欄位")
    st.stop()

# Long-format samples can be aggregated into means with error values first
aggregate = st.checkbox("資料為原始樣本（先計算平均值與誤差）", value=False)

if aggregate:
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        label_col = st.selectbox("標籤欄位", options=all_columns)
    with c2:
        value_col = st.selectbox("數值欄位", options=number_cols)
    with c3:
        series_col = st.selectbox("系列欄位 (可選)", options=["(無)"] + all_columns)
    with c4:
        error_kind = ERROR_KINDS[st.selectbox("誤差", options=list(ERROR_KINDS), index=2)]
    try:
        table, value_keys, error_keys = summarize_samples(
            raw,
            label_col,
            value_col,
            series_col=None if series_col == "(無)" else series_col,
            error=error_kind,
        )
    except ChartError as exc:
        st.error(str(exc))
        st.stop()
    with st.expander("彙總結果", expanded=False):
        st.dataframe(table, use_container_width=True)
else:
    table = raw
    label_col = st.selectbox("標籤欄位", options=all_columns)
    value_keys = st.multiselect(
        "數值欄位 (順序即為系列順序)",
        options=[c for c in number_cols if c != label_col],
        default=[c for c in number_cols if c != label_col][:1],
    )
    error_keys = st.multiselect(
        "誤差欄位 (可選，需與數值欄位數量相同)",
        options=[c for c in number_cols if c != label_col and c not in value_keys],
    )

if not value_keys:
    st.info("請至少選擇一個數值欄位")
    st.stop()

# Display mode selection
available_modes = [m for m in ChartMode if m is not ChartMode.BASIC or len(value_keys) == 1]
mode = st.radio(
    "顯示模式",
    options=available_modes,
    format_func=lambda m: MODE_LABELS[m],
    index=0,
    horizontal=True,
)

# Chart settings
s1, s2, s3, s4 = st.columns(4)
with s1:
    bar_width = st.slider("長條寬度", min_value=0.1, max_value=1.0, value=0.8, step=0.05)
with s2:
    cluster_gap = st.slider("群組間距", min_value=0.0, max_value=0.2, value=0.0, step=0.01)
with s3:
    inset = st.slider("左右留白", min_value=0.0, max_value=1.5, value=1.0, step=0.1)
with s4:
    whisker_size = st.slider("誤差端線寬度", min_value=0.0, max_value=1.0, value=0.25, step=0.05)
chart_height = st.slider("圖表高度", min_value=360, max_value=900, value=520, step=20)
title = st.text_input("圖表標題", value="")

try:
    style = BarStyle(bar_width=bar_width, cluster_gap=cluster_gap, inset=inset, whisker_size=whisker_size)
    geometry = build_geometry(
        table,
        label_col,
        value_keys,
        error_keys or None,
        mode=mode,
        style=style,
    )
except ChartError as exc:
    st.error(f"無法產生圖表：{exc}")
    st.stop()

if error_keys and not mode.allows_whiskers:
    st.caption("堆疊模式不顯示誤差線")

fig = build_figure(
    geometry,
    value_keys,
    size=(None, chart_height),
    title=title or None,
    xaxis_title=label_col,
)
st.plotly_chart(fig, use_container_width=True)

col_left, col_right = st.columns(2)
with col_left:
    download_plot_button(fig, "column_chart.png")
with col_right:
    download_geometry_button(geometry, "column_chart_geometry.xlsx")

with st.expander("長條幾何資料", expanded=False):
    st.dataframe(geometry_frame(geometry), use_container_width=True)
