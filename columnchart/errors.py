"""Exceptions raised while building column chart geometry."""

from typing import Any, Optional


class ChartError(Exception):
    """Base class for every chart build failure."""


class InvalidConfiguration(ChartError, ValueError):
    """Mode, selectors or style options cannot describe a valid chart."""


class MissingKey(ChartError, KeyError):
    """A required label or value selector did not resolve on a row."""

    def __init__(self, key: Any, row_index: Optional[int] = None):
        self.key = key
        self.row_index = row_index
        super().__init__(key)

    def __str__(self) -> str:
        if self.row_index is None:
            return f"key {self.key!r} not found"
        return f"row {self.row_index}: key {self.key!r} not found"


class InvalidValue(ChartError, ValueError):
    """A value selector resolved to something that is not a finite number."""

    def __init__(self, key: Any, row_index: int, value: Any):
        self.key = key
        self.row_index = row_index
        self.value = value
        super().__init__(f"row {row_index}: key {key!r} holds non-numeric value {value!r}")
