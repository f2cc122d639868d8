"""Turn heterogeneous input rows into uniform label/values/errors records."""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Tuple

import numpy as np
import pandas as pd

from .config import Key, Selector, as_key_tuple
from .errors import InvalidConfiguration, InvalidValue, MissingKey

Accessor = Callable[[Any], Any]

_MISSING = object()


@dataclass(frozen=True)
class NormalizedRow:
    """One input row reduced to its label and numeric series values."""

    index: int
    label: Any
    values: Tuple[float, ...]
    errors: Tuple[float, ...]


def make_accessor(key: Key) -> Accessor:
    """Build a lookup function for one selector.

    Integers read by position (``iloc`` on pandas rows), callables are applied
    to the row, anything else is a named key looked up by item access on
    mappings and by attribute access on other objects. The accessor returns a
    sentinel instead of raising when the key is absent.
    """
    if callable(key):

        def _call(row: Any) -> Any:
            try:
                return key(row)
            except (KeyError, IndexError, AttributeError):
                return _MISSING

        return _call

    if isinstance(key, (int, np.integer)) and not isinstance(key, bool):

        def _position(row: Any) -> Any:
            try:
                if isinstance(row, pd.Series):
                    return row.iloc[key]
                return row[key]
            except (KeyError, IndexError, TypeError):
                return _MISSING

        return _position

    def _named(row: Any) -> Any:
        if isinstance(row, (Mapping, pd.Series)):
            try:
                return row[key]
            except (KeyError, IndexError, TypeError):
                return _MISSING
        if isinstance(key, str):
            return getattr(row, key, _MISSING)
        return _MISSING

    return _named


def _flatten(value: Any) -> List[Any]:
    if isinstance(value, (str, bytes)):
        return [value]
    if isinstance(value, (pd.Series, np.ndarray)):
        return [v for v in np.ravel(np.asarray(value, dtype=object))]
    if isinstance(value, (list, tuple)):
        out: List[Any] = []
        for item in value:
            out.extend(_flatten(item))
        return out
    return [value]


def _as_number(value: Any, key: Key, row_index: int) -> float:
    if value is None or isinstance(value, bool):
        raise InvalidValue(key, row_index, value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidValue(key, row_index, value) from None
    if not math.isfinite(number):
        raise InvalidValue(key, row_index, value)
    return number


def _as_error(value: Any) -> float:
    # Blank error cells (None/NaN) count as no error.
    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return abs(number)


def _is_blank(value: Any) -> bool:
    return value is None or value is pd.NA or (isinstance(value, float) and math.isnan(value))


def frame_records(df: pd.DataFrame) -> List[pd.Series]:
    """One Series per DataFrame row, so named and positional selectors both apply."""
    return [row for _, row in df.iterrows()]


def normalize(
    rows: Iterable[Any],
    label_key: Key,
    value_keys: Selector,
    error_keys: Optional[Selector] = None,
) -> Tuple[NormalizedRow, ...]:
    """Normalize input rows, in input order.

    Args:
        rows: Sequence of rows, or a DataFrame (one row per record)
        label_key: Selector for the x-axis label
        value_keys: One or more selectors for the series values
        error_keys: Optional selectors paired by position with value_keys;
            an absent or blank error gives zeros for all of its key's values

    Returns:
        Tuple of NormalizedRow with ``index`` equal to the input position

    Raises:
        MissingKey: The label or a value selector is absent on a row
        InvalidValue: A value is not a finite number
        InvalidConfiguration: Error and value selectors do not pair up, or an
            error selector holds a different number of values than its value selector
    """
    if isinstance(rows, pd.DataFrame):
        rows = frame_records(rows)

    value_keys = as_key_tuple(value_keys)
    error_keys = as_key_tuple(error_keys)
    if error_keys and len(error_keys) != len(value_keys):
        raise InvalidConfiguration(
            f"got {len(error_keys)} error key(s) for {len(value_keys)} value key(s)"
        )
    label_get = make_accessor(label_key)
    value_gets = [(key, make_accessor(key)) for key in value_keys]
    error_gets = [(key, make_accessor(key)) for key in error_keys]

    out = []
    for index, row in enumerate(rows):
        label = label_get(row)
        if label is _MISSING or _is_blank(label):
            raise MissingKey(label_key, index)

        values: List[float] = []
        widths: List[int] = []
        for key, get in value_gets:
            raw = get(row)
            if raw is _MISSING:
                raise MissingKey(key, index)
            found = [_as_number(v, key, index) for v in _flatten(raw)]
            values.extend(found)
            widths.append(len(found))

        errors: List[float] = []
        if not error_gets:
            errors = [0.0] * len(values)
        for (key, get), width in zip(error_gets, widths):
            raw = get(row)
            if raw is _MISSING or _is_blank(raw):
                errors.extend([0.0] * width)
                continue
            found = [_as_error(v) for v in _flatten(raw)]
            if len(found) != width:
                raise InvalidConfiguration(
                    f"row {index}: key {key!r} holds {len(found)} error value(s) for {width} value(s)"
                )
            errors.extend(found)

        out.append(
            NormalizedRow(index=index, label=label, values=tuple(values), errors=tuple(errors))
        )
    return tuple(out)
