"""Plotly rendering of column chart geometry."""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import plotly.express as px
import plotly.graph_objects as go

from .config import BarStyle, ChartMode, Key, Selector, as_key_tuple
from .errors import InvalidConfiguration
from .geometry import ChartGeometry, build_geometry

logger = logging.getLogger(__name__)

# Chinese font setting (Noto Sans CJK available on Linux)
CJK_FONT = "Noto Sans CJK TC, Noto Sans TC, Microsoft JhengHei, PingFang TC, sans-serif"
DEFAULT_SIZE = (800, 480)
DEFAULT_PALETTE = px.colors.qualitative.Plotly
WHISKER_COLOR = "#2f2f2f"

SeriesColor = Union[str, Callable[[int], str]]


def series_colors(series_count: int, colors: Optional[Sequence[SeriesColor]] = None) -> List[SeriesColor]:
    """Pick one colour (or row-index colour function) per series, cycling the palette."""
    palette = list(colors) if colors else list(DEFAULT_PALETTE)
    if not palette:
        raise InvalidConfiguration("colors must not be empty")
    return [palette[i % len(palette)] for i in range(series_count)]


def _selector_name(key: Key, position: int) -> str:
    if callable(key):
        return getattr(key, "__name__", f"Series {position + 1}")
    return str(key)


def series_labels(
    value_keys: Selector, series_count: int, labels: Optional[Sequence[str]] = None
) -> List[str]:
    """Legend text per series: explicit labels, else the value selector names."""
    if labels is not None:
        labels = list(labels)
        if len(labels) != series_count:
            raise InvalidConfiguration(f"got {len(labels)} label(s) for {series_count} series")
        return [str(label) for label in labels]
    keys = as_key_tuple(value_keys)
    if len(keys) == series_count:
        return [_selector_name(key, i) for i, key in enumerate(keys)]
    return [f"Series {i + 1}" for i in range(series_count)]


def _marker_color(color: SeriesColor, row_indices: Iterable[int]):
    if callable(color):
        return [color(i) for i in row_indices]
    return color


def add_bar_traces(
    fig: go.Figure, geometry: ChartGeometry, colors: Sequence[SeriesColor], names: Sequence[str]
) -> None:
    """Add one bar trace per series, positioned exactly as the geometry says."""
    labels = dict(geometry.x_ticks)
    for k in range(geometry.series_count):
        bars = geometry.bars_for_series(k)
        fig.add_trace(
            go.Bar(
                x=[b.x_center for b in bars],
                y=[b.y_extent for b in bars],
                base=[b.y_base for b in bars],
                width=[2 * b.x_half_width for b in bars],
                name=names[k],
                legendgroup=names[k],
                marker_color=_marker_color(colors[k], [b.row_index for b in bars]),
                hovertext=[str(labels[b.row_index]) for b in bars],
                hovertemplate="%{hovertext}<br>%{y}<extra>" + names[k] + "</extra>",
            )
        )


def whisker_path(geometry: ChartGeometry, series_index: int) -> Tuple[List[Any], List[Any]]:
    """Line coordinates for one series' whiskers: stem, low cap, high cap, split by None."""
    centers: Dict[Tuple[int, int], float] = {
        (b.row_index, b.series_index): b.x_center for b in geometry.bars
    }
    xs: List[Any] = []
    ys: List[Any] = []
    for w in geometry.whiskers_for_series(series_index):
        x = centers[(w.row_index, w.series_index)]
        left, right = x - w.cap_half_width, x + w.cap_half_width
        xs += [x, x, None, left, right, None, left, right, None]
        ys += [w.y_low, w.y_high, None, w.y_low, w.y_low, None, w.y_high, w.y_high, None]
    return xs, ys


def add_whisker_traces(fig: go.Figure, geometry: ChartGeometry, names: Sequence[str]) -> None:
    if not geometry.whiskers:
        return
    for k in range(geometry.series_count):
        xs, ys = whisker_path(geometry, k)
        if not xs:
            continue
        fig.add_trace(
            go.Scatter(
                x=xs,
                y=ys,
                mode="lines",
                line=dict(color=WHISKER_COLOR, width=1.5),
                legendgroup=names[k],
                showlegend=False,
                hoverinfo="skip",
            )
        )


def apply_axes(
    fig: go.Figure,
    geometry: ChartGeometry,
    y_format: Optional[str] = None,
    tick_angle: Optional[float] = None,
) -> None:
    """Set the x range and tick labels; percent axis for 100% stacks."""
    ticks = geometry.x_ticks
    # With no rows the computed range can be reversed when the margin is under 0.5.
    x_range = list(geometry.x_range) if geometry.rows else [-0.5, 0.5]
    fig.update_xaxes(
        range=x_range,
        tickmode="array",
        tickvals=[i for i, _ in ticks],
        ticktext=[str(label) for _, label in ticks],
        tickangle=tick_angle,
        zeroline=False,
    )
    yaxis: Dict[str, Any] = {}
    if y_format:
        yaxis["tickformat"] = y_format
    if geometry.mode is ChartMode.STACKED100:
        yaxis["ticksuffix"] = "%"
        lows = [min(b.y_base, b.y_top) for b in geometry.bars]
        highs = [max(b.y_base, b.y_top) for b in geometry.bars]
        if not geometry.bars or (min(lows) >= -1e-9 and max(highs) <= 100 + 1e-9):
            yaxis["range"] = [0, 100]
    if yaxis:
        fig.update_yaxes(**yaxis)


def build_figure(
    geometry: ChartGeometry,
    value_keys: Selector = (),
    labels: Optional[Sequence[str]] = None,
    colors: Optional[Sequence[SeriesColor]] = None,
    size: Optional[Tuple[int, int]] = None,
    title: Optional[str] = None,
    xaxis_title: Optional[str] = None,
    yaxis_title: Optional[str] = None,
    y_format: Optional[str] = None,
    tick_angle: Optional[float] = None,
    show_legend: Optional[bool] = None,
) -> go.Figure:
    """Draw precomputed geometry as a plotly figure."""
    names = series_labels(value_keys, geometry.series_count, labels)
    palette = series_colors(geometry.series_count, colors)
    width, height = size or DEFAULT_SIZE

    fig = go.Figure()
    add_bar_traces(fig, geometry, palette, names)
    add_whisker_traces(fig, geometry, names)
    apply_axes(fig, geometry, y_format=y_format, tick_angle=tick_angle)

    if not geometry.rows:
        title = f"{title or ''} (無資料)".strip()
    if show_legend is None:
        show_legend = geometry.series_count > 1
    fig.update_layout(
        title=title,
        xaxis_title=xaxis_title,
        yaxis_title=yaxis_title,
        barmode="overlay",
        showlegend=show_legend,
        width=width,
        height=height,
        margin=dict(l=60, r=40, t=60, b=60),
        font=dict(family=CJK_FONT),
    )
    return fig


def render_column_chart(
    data,
    label_key: Key,
    value_keys: Selector,
    error_keys: Optional[Selector] = None,
    mode: Union[ChartMode, str] = ChartMode.BASIC,
    size: Optional[Tuple[int, int]] = None,
    bar_style: Optional[Union[BarStyle, Dict[str, float]]] = None,
    labels: Optional[Sequence[str]] = None,
    colors: Optional[Sequence[SeriesColor]] = None,
    **axis_options: Any,
) -> go.Figure:
    """Build a column chart figure from rows.

    Args:
        data: Rows (mappings, sequences, objects) or a DataFrame
        label_key: Selector for the x-axis label of each row
        value_keys: Value selector(s); their order is the series order
        error_keys: Optional error selector(s), one per value selector
        mode: "basic", "clustered", "stacked" or "stacked100"
        size: (width, height) in pixels
        bar_style: BarStyle or a partial mapping of its options
        labels: Legend text per series
        colors: Colour or row-index colour function per series
        **axis_options: title, xaxis_title, yaxis_title, y_format, tick_angle, show_legend

    Returns:
        Plotly figure with bars placed at their computed geometry

    Raises:
        InvalidConfiguration, MissingKey, InvalidValue: before anything is drawn
    """
    geometry = build_geometry(data, label_key, value_keys, error_keys, mode, bar_style)
    return build_figure(geometry, value_keys, labels=labels, colors=colors, size=size, **axis_options)
