"""Chart modes, style options and selector configuration."""

from collections.abc import Iterable
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Hashable, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .errors import InvalidConfiguration

Key = Union[Hashable, Any]
Selector = Union[Key, Sequence[Key]]

DEFAULT_BAR_WIDTH = 0.8
DEFAULT_CLUSTER_GAP = 0.0
DEFAULT_INSET = 1.0
DEFAULT_WHISKER_SIZE = 0.25


class ChartMode(str, Enum):
    """How the values of one row are laid out."""

    BASIC = "basic"
    CLUSTERED = "clustered"
    STACKED = "stacked"
    STACKED100 = "stacked100"

    @classmethod
    def parse(cls, mode: Union["ChartMode", str]) -> "ChartMode":
        """Return the mode for an enum member or a loosely spelled name.

        ``"Stacked-100"``, ``"stacked 100"`` and ``"stacked100"`` all map to
        :attr:`STACKED100`.
        """
        if isinstance(mode, cls):
            return mode
        if not isinstance(mode, str):
            raise InvalidConfiguration(f"unknown chart mode {mode!r}")
        token = mode.strip().lower().replace("-", "").replace("_", "").replace(" ", "")
        for member in cls:
            if member.value == token:
                return member
        raise InvalidConfiguration(
            f"unknown chart mode {mode!r}; expected one of {[m.value for m in cls]}"
        )

    @property
    def is_stacked(self) -> bool:
        return self in (ChartMode.STACKED, ChartMode.STACKED100)

    @property
    def allows_whiskers(self) -> bool:
        return self in (ChartMode.BASIC, ChartMode.CLUSTERED)


@dataclass(frozen=True)
class BarStyle:
    """Resolved numeric style of a column chart.

    Attributes:
        bar_width: Width of a row's bar (or whole cluster) as a fraction of one row slot
        cluster_gap: Horizontal gap between neighbouring bars of a cluster
        inset: Minimum margin between the outermost row and the plot edge
        whisker_size: Whisker cap half-width as a fraction of the bar half-width
    """

    bar_width: float = DEFAULT_BAR_WIDTH
    cluster_gap: float = DEFAULT_CLUSTER_GAP
    inset: float = DEFAULT_INSET
    whisker_size: float = DEFAULT_WHISKER_SIZE

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidConfiguration(f"{f.name} must be a number, got {value!r}")
            if value != value:
                raise InvalidConfiguration(f"{f.name} must not be NaN")
        if self.bar_width <= 0:
            raise InvalidConfiguration(f"bar_width must be positive, got {self.bar_width}")
        if self.cluster_gap < 0:
            raise InvalidConfiguration(f"cluster_gap must be >= 0, got {self.cluster_gap}")
        if self.inset < 0:
            raise InvalidConfiguration(f"inset must be >= 0, got {self.inset}")
        if self.whisker_size < 0:
            raise InvalidConfiguration(f"whisker_size must be >= 0, got {self.whisker_size}")

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]] = None) -> "BarStyle":
        """Merge a partial option mapping over the defaults."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if unknown:
            raise InvalidConfiguration(f"unknown bar style option(s): {', '.join(unknown)}")
        return cls(**dict(options))


def as_key_tuple(selector: Optional[Selector]) -> Tuple[Key, ...]:
    """Normalize a single key or a sequence of keys into a tuple of keys.

    Strings, bytes and callables count as single keys. Any other iterable,
    including a pandas Index such as ``df.columns[1:]``, is a sequence of keys.
    """
    if selector is None:
        return ()
    if isinstance(selector, (str, bytes)) or callable(selector):
        return (selector,)
    if isinstance(selector, (pd.Index, np.ndarray)):
        return tuple(np.ravel(np.asarray(selector, dtype=object)).tolist())
    if isinstance(selector, Iterable):
        return tuple(selector)
    return (selector,)


@dataclass(frozen=True)
class ChartSelectors:
    """Label, value and error selectors, normalized and checked against a mode."""

    label_key: Key
    value_keys: Tuple[Key, ...]
    error_keys: Tuple[Key, ...] = ()

    @classmethod
    def build(
        cls,
        label_key: Key,
        value_keys: Selector,
        error_keys: Optional[Selector] = None,
        mode: Union[ChartMode, str] = ChartMode.BASIC,
    ) -> "ChartSelectors":
        mode = ChartMode.parse(mode)
        if label_key is None:
            raise InvalidConfiguration("label_key is required")
        values = as_key_tuple(value_keys)
        errors = as_key_tuple(error_keys)
        if not values:
            raise InvalidConfiguration("value_keys must name at least one selector")
        if mode is ChartMode.BASIC and len(values) != 1:
            raise InvalidConfiguration(
                f"basic mode takes exactly one value key, got {len(values)}"
            )
        if errors and len(errors) != len(values):
            raise InvalidConfiguration(
                f"got {len(errors)} error key(s) for {len(values)} value key(s)"
            )
        return cls(label_key=label_key, value_keys=values, error_keys=errors)
