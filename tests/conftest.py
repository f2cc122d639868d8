"""Pytest fixtures shared across the column chart tests."""

from __future__ import annotations

from collections import namedtuple

import pytest

SPEED_MARKERS = frozenset({"unit", "integration"})

Record = namedtuple("Record", ["name", "low", "high"])


@pytest.fixture
def abc_rows() -> list[dict]:
    """Three labelled rows with one value each."""

    return [{"label": "A", "v": 1}, {"label": "B", "v": 2}, {"label": "C", "v": 3}]


@pytest.fixture
def quarter_rows() -> list[dict]:
    """Rows with three series and an error per series."""

    return [
        {"name": "x", "q1": 1.0, "q2": 1.0, "q3": 2.0, "e1": 0.1, "e2": 0.2, "e3": 0.3},
        {"name": "y", "q1": 4.0, "q2": 0.0, "q3": 4.0, "e1": 0.0, "e2": 0.5},
    ]


@pytest.fixture
def records() -> list[Record]:
    """Attribute-style rows."""

    return [Record("r1", 1.0, 2.0), Record("r2", 3.0, 4.0)]


def _speed_markers(item: pytest.Item) -> set[str]:
    return {mark.name for mark in item.iter_markers() if mark.name in SPEED_MARKERS}


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Fail collection unless each test is marked either unit or integration."""

    unmarked = [item.nodeid for item in items if not _speed_markers(item)]
    doubled = [item.nodeid for item in items if len(_speed_markers(item)) > 1]
    if not (unmarked or doubled):
        return

    lines = [f"{nodeid}: no speed marker" for nodeid in unmarked]
    lines += [f"{nodeid}: marked both unit and integration" for nodeid in doubled]
    raise pytest.UsageError(
        "tests need one of pytest.mark.unit or pytest.mark.integration (per test or via pytestmark):\n  "
        + "\n  ".join(lines)
    )
