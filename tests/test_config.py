"""Unit tests for chart modes, style options and selector validation."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from columnchart import BarStyle, ChartMode, ChartSelectors, InvalidConfiguration
from columnchart.config import as_key_tuple

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("basic", ChartMode.BASIC),
        ("Clustered", ChartMode.CLUSTERED),
        ("stacked", ChartMode.STACKED),
        ("stacked-100", ChartMode.STACKED100),
        ("stacked 100", ChartMode.STACKED100),
        (ChartMode.STACKED100, ChartMode.STACKED100),
    ],
)
def test_mode_parse(raw, expected) -> None:
    assert ChartMode.parse(raw) is expected


@pytest.mark.parametrize("raw", ["pie", "", 3, None])
def test_unknown_mode(raw) -> None:
    with pytest.raises(InvalidConfiguration):
        ChartMode.parse(raw)


def test_whiskers_only_in_unstacked_modes() -> None:
    assert ChartMode.BASIC.allows_whiskers
    assert ChartMode.CLUSTERED.allows_whiskers
    assert not ChartMode.STACKED.allows_whiskers
    assert not ChartMode.STACKED100.allows_whiskers


def test_style_defaults() -> None:
    style = BarStyle()

    assert (style.bar_width, style.cluster_gap, style.inset, style.whisker_size) == (0.8, 0.0, 1.0, 0.25)


def test_style_from_partial_options() -> None:
    style = BarStyle.from_options({"bar_width": 0.5})

    assert style == BarStyle(bar_width=0.5)
    assert BarStyle.from_options(None) == BarStyle()
    assert BarStyle.from_options(style) is style


def test_style_rejects_unknown_option() -> None:
    with pytest.raises(InvalidConfiguration, match="bar_gap"):
        BarStyle.from_options({"bar_gap": 0.1})


@pytest.mark.parametrize(
    "options",
    [
        {"bar_width": 0},
        {"bar_width": -0.5},
        {"cluster_gap": -0.1},
        {"inset": -1},
        {"whisker_size": -0.2},
        {"bar_width": "wide"},
        {"inset": float("nan")},
    ],
)
def test_style_rejects_invalid_values(options) -> None:
    with pytest.raises(InvalidConfiguration):
        BarStyle.from_options(options)


def test_selectors_normalize_single_keys() -> None:
    selectors = ChartSelectors.build("label", "v", "e", "basic")

    assert selectors.value_keys == ("v",)
    assert selectors.error_keys == ("e",)


def test_basic_mode_takes_one_value_key() -> None:
    with pytest.raises(InvalidConfiguration, match="basic"):
        ChartSelectors.build("label", ["a", "b"], mode="basic")


def test_error_key_count_must_match() -> None:
    with pytest.raises(InvalidConfiguration):
        ChartSelectors.build("label", ["a", "b"], ["ea"], mode="clustered")


def test_value_keys_required() -> None:
    with pytest.raises(InvalidConfiguration):
        ChartSelectors.build("label", [], mode="clustered")


@pytest.mark.parametrize(
    "selector",
    [pd.Index(["a", "b"]), np.array(["a", "b"]), iter(["a", "b"]), ("a", "b")],
)
def test_iterable_selectors_are_key_sequences(selector) -> None:
    assert as_key_tuple(selector) == ("a", "b")


def test_string_and_callable_selectors_are_single_keys() -> None:
    assert as_key_tuple("ab") == ("ab",)
    assert as_key_tuple(len) == (len,)
    assert as_key_tuple(0) == (0,)
    assert as_key_tuple(None) == ()


def test_frame_columns_as_value_keys() -> None:
    columns = pd.DataFrame({"l": ["A"], "a": [1], "b": [2]}).columns

    selectors = ChartSelectors.build("l", columns[1:], mode="clustered")

    assert selectors.value_keys == ("a", "b")
