"""Resolve how many series a chart has and how their values combine."""

import logging
from dataclasses import replace
from typing import Sequence, Tuple, Union

from .config import ChartMode
from .errors import InvalidConfiguration
from .normalize import NormalizedRow

logger = logging.getLogger(__name__)


def _series_count(rows: Sequence[NormalizedRow]) -> int:
    if not rows:
        return 0
    count = len(rows[0].values)
    for row in rows:
        if len(row.values) != count:
            raise InvalidConfiguration(
                f"row {row.index} has {len(row.values)} value(s), expected {count}"
            )
    if count == 0:
        raise InvalidConfiguration("rows carry no values")
    return count


def to_percent(values: Sequence[float]) -> Tuple[float, ...]:
    """Rescale values so they sum to 100; an all-zero sum gives all zeros."""
    total = sum(values)
    if total == 0:
        return tuple(0.0 for _ in values)
    return tuple(v / total * 100.0 for v in values)


def resolve_series(
    rows: Sequence[NormalizedRow], mode: Union[ChartMode, str]
) -> Tuple[int, Tuple[NormalizedRow, ...]]:
    """Return the series count and the rows with mode-specific values.

    Only ``stacked100`` changes values: each row is rescaled to percentages of
    its own total. Zero rows give a series count of 0 (``1`` in basic mode).
    """
    mode = ChartMode.parse(mode)
    count = _series_count(rows)

    if mode is ChartMode.BASIC:
        if count > 1:
            raise InvalidConfiguration(f"basic mode takes one value per row, got {count}")
        return 1, tuple(rows)

    if mode is ChartMode.STACKED100:
        resolved = []
        for row in rows:
            if sum(row.values) == 0:
                logger.warning("Row %s (%r) sums to zero; drawing an empty bar", row.index, row.label)
            resolved.append(replace(row, values=to_percent(row.values)))
        return count, tuple(resolved)

    return count, tuple(rows)
