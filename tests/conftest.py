"""Shared pytest fixtures for COVE tests."""

import csv
from pathlib import Path
from typing import Iterable, Sequence

import pytest

from cove.config import default_sources
from cove.engine import Cove

HEADER = ["Province/State", "Country/Region", "Lat", "Long", "3/11/20", "3/12/20"]

CONFIRMED = [
    ["", "US", "37.09", "-95.71", "90", "100"],
    ["California", "US", "36.77", "-119.41", "5", "7"],
    ["", "Italy", "43.0", "12.0", "12000", "15000"],
    ["Hubei", "China", "30.97", "112.27", "67000", "67100"],
]
DEATHS = [
    ["", "US", "37.09", "-95.71", "1", "2"],
    ["California", "US", "36.77", "-119.41", "0", "1"],
    ["", "Italy", "43.0", "12.0", "800", "1000"],
    ["Hubei", "China", "30.97", "112.27", "3000", "3050"],
]
RECOVERED = [
    ["", "US", "37.09", "-95.71", "", ""],
    ["California", "US", "36.77", "-119.41", "0", ""],
    ["", "Italy", "43.0", "12.0", "1000", "1200"],
    ["Hubei", "China", "30.97", "112.27", "50000", "52000"],
]


def write_table(path: Path, rows: Iterable[Sequence[str]], header: Sequence[str] = HEADER) -> Path:
    """Write a JHU-style wide table to `path`."""
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(header)
        w.writerows(rows)
    return path


@pytest.fixture
def jhu_dir(tmp_path: Path) -> Path:
    """Directory holding the three time-series tables."""
    sources = default_sources(tmp_path)
    for spec, rows in zip(sources, (CONFIRMED, DEATHS, RECOVERED)):
        write_table(spec.path, rows)
    return tmp_path


@pytest.fixture
def engine(jhu_dir: Path) -> Cove:
    return Cove.from_sources(default_sources(jhu_dir))
