"""Data-space geometry of column charts: bars, stack segments, whiskers, x range."""

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union

from .config import BarStyle, ChartMode, ChartSelectors, Key, Selector
from .modes import resolve_series
from .normalize import NormalizedRow, normalize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BarGeometry:
    """One bar, or one segment of a stacked bar."""

    row_index: int
    series_index: int
    x_center: float
    x_half_width: float
    y_base: float
    y_extent: float

    @property
    def x_left(self) -> float:
        return self.x_center - self.x_half_width

    @property
    def x_right(self) -> float:
        return self.x_center + self.x_half_width

    @property
    def y_top(self) -> float:
        return self.y_base + self.y_extent


@dataclass(frozen=True)
class WhiskerGeometry:
    """Error whisker drawn over the bar with the same row and series index."""

    row_index: int
    series_index: int
    y_low: float
    y_high: float
    cap_half_width: float


@dataclass(frozen=True)
class ChartGeometry:
    """Everything a renderer needs to place a column chart's marks."""

    mode: ChartMode
    series_count: int
    rows: Tuple[NormalizedRow, ...]
    bars: Tuple[BarGeometry, ...]
    whiskers: Tuple[WhiskerGeometry, ...]
    x_range: Tuple[float, float]
    x_ticks: Tuple[Tuple[int, Any], ...]

    def bars_for_series(self, series_index: int) -> List[BarGeometry]:
        return [b for b in self.bars if b.series_index == series_index]

    def whiskers_for_series(self, series_index: int) -> List[WhiskerGeometry]:
        return [w for w in self.whiskers if w.series_index == series_index]


def axis_range(row_count: int, inset: float, bar_width: float) -> Tuple[float, float]:
    """Return ``(x_min, x_max)`` leaving room for the outermost bars.

    The effective margin is the larger of the inset and half a bar, so a wide
    bar is never clipped by a small inset.
    """
    margin = max(inset, bar_width / 2)
    return -margin, row_count - 1 + margin


def x_ticks(rows: Sequence[NormalizedRow]) -> Tuple[Tuple[int, Any], ...]:
    return tuple((row.index, row.label) for row in rows)


def build_bars(
    rows: Sequence[NormalizedRow],
    series_count: int,
    mode: Union[ChartMode, str],
    bar_width: float,
    cluster_gap: float = 0.0,
) -> Tuple[BarGeometry, ...]:
    """Place every bar (or stack segment) of the chart.

    Args:
        rows: Rows as returned by resolve_series
        series_count: Number of series per row
        mode: Chart mode
        bar_width: Width of one row's bar or cluster, in row slots
        cluster_gap: Gap between neighbouring bars of a cluster

    Returns:
        Bars ordered by row, then by series
    """
    mode = ChartMode.parse(mode)
    half = bar_width / 2
    bars: List[BarGeometry] = []

    if mode is ChartMode.BASIC:
        for row in rows:
            bars.append(BarGeometry(row.index, 0, float(row.index), half, 0.0, row.values[0]))

    elif mode is ChartMode.CLUSTERED:
        single = bar_width / series_count if series_count else 0.0
        step = single + cluster_gap
        middle = (series_count - 1) / 2
        for row in rows:
            for k, value in enumerate(row.values):
                center = row.index + (k - middle) * step
                bars.append(BarGeometry(row.index, k, center, single / 2, 0.0, value))

    else:
        # Straight running sum: negative segments pull the next base down.
        for row in rows:
            base = 0.0
            for k, value in enumerate(row.values):
                bars.append(BarGeometry(row.index, k, float(row.index), half, base, value))
                base += value

    return tuple(bars)


def build_whiskers(
    bars: Iterable[BarGeometry],
    errors: Sequence[Sequence[float]],
    whisker_size: float,
    mode: Union[ChartMode, str] = ChartMode.BASIC,
) -> Tuple[WhiskerGeometry, ...]:
    """Compute one whisker per bar from ``errors[row_index][series_index]``.

    Stacked modes get no whiskers. A zero error still yields a (flat) whisker.
    """
    mode = ChartMode.parse(mode)
    if not mode.allows_whiskers:
        return ()
    whiskers = []
    for bar in bars:
        value = bar.y_top
        error = errors[bar.row_index][bar.series_index]
        whiskers.append(
            WhiskerGeometry(
                row_index=bar.row_index,
                series_index=bar.series_index,
                y_low=value - error,
                y_high=value + error,
                cap_half_width=whisker_size * bar.x_half_width,
            )
        )
    return tuple(whiskers)


def build_geometry(
    rows: Iterable[Any],
    label_key: Key,
    value_keys: Selector,
    error_keys: Optional[Selector] = None,
    mode: Union[ChartMode, str] = ChartMode.BASIC,
    style: Optional[BarStyle] = None,
) -> ChartGeometry:
    """Compute the complete geometry of a column chart.

    All validation happens before any geometry is produced, so a failure
    leaves nothing half built.
    """
    mode = ChartMode.parse(mode)
    style = BarStyle.from_options(style)
    selectors = ChartSelectors.build(label_key, value_keys, error_keys, mode)

    normalized = normalize(rows, selectors.label_key, selectors.value_keys, selectors.error_keys)
    series_count, resolved = resolve_series(normalized, mode)

    if selectors.error_keys and not mode.allows_whiskers:
        logger.warning("Error keys %s are ignored in %s mode", list(selectors.error_keys), mode.value)

    bars = build_bars(resolved, series_count, mode, style.bar_width, style.cluster_gap)
    whiskers = ()
    if selectors.error_keys:
        whiskers = build_whiskers(bars, [row.errors for row in resolved], style.whisker_size, mode)

    logger.debug(
        "Built %s chart: %d rows, %d series, %d bars, %d whiskers",
        mode.value, len(resolved), series_count, len(bars), len(whiskers),
    )
    return ChartGeometry(
        mode=mode,
        series_count=series_count,
        rows=resolved,
        bars=bars,
        whiskers=whiskers,
        x_range=axis_range(len(resolved), style.inset, style.bar_width),
        x_ticks=x_ticks(resolved),
    )
