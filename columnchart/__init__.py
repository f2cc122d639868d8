"""Column chart geometry and rendering."""

from .config import BarStyle, ChartMode, ChartSelectors
from .errors import ChartError, InvalidConfiguration, InvalidValue, MissingKey
from .normalize import NormalizedRow, make_accessor, normalize
from .modes import resolve_series, to_percent
from .geometry import (
    BarGeometry,
    WhiskerGeometry,
    ChartGeometry,
    axis_range,
    x_ticks,
    build_bars,
    build_whiskers,
    build_geometry,
)
from .visualization import build_figure, render_column_chart, series_colors, series_labels
from .loader import load_table, frame_to_rows, numeric_columns
from .statistics import summarize_samples
from .export import (
    geometry_frame,
    geometry_excel_bytes,
    figure_png_bytes,
    download_plot_button,
    download_geometry_button,
)

__all__ = [
    # Configuration
    "BarStyle",
    "ChartMode",
    "ChartSelectors",
    # Errors
    "ChartError",
    "InvalidConfiguration",
    "InvalidValue",
    "MissingKey",
    # Normalization
    "NormalizedRow",
    "make_accessor",
    "normalize",
    "resolve_series",
    "to_percent",
    # Geometry
    "BarGeometry",
    "WhiskerGeometry",
    "ChartGeometry",
    "axis_range",
    "x_ticks",
    "build_bars",
    "build_whiskers",
    "build_geometry",
    # Rendering
    "build_figure",
    "render_column_chart",
    "series_colors",
    "series_labels",
    # Data
    "load_table",
    "frame_to_rows",
    "numeric_columns",
    "summarize_samples",
    # Export
    "geometry_frame",
    "geometry_excel_bytes",
    "figure_png_bytes",
    "download_plot_button",
    "download_geometry_button",
]
