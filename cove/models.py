"""
Data model (Observation)
========================

Each numeric cell in a time-series table becomes one `Observation`:
a (country, region, date, metric) -> count fact.

Records are immutable (`frozen=True`) so that:
- observations cannot be modified after normalization, and
- the index builder only ever reads them.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

# Region key for rows that describe a whole country (empty Province/State).
ALL_REGIONS = "all"


class Metric(str, Enum):
    """Closed set of case categories. One source table per category."""
    CONFIRMED = "confirmed"
    DEATHS = "deaths"
    RECOVERED = "recovered"

    @classmethod
    def parse(cls, name: str) -> "Metric":
        try:
            return cls(name.strip().lower())
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise ValueError(f"unknown metric {name!r} (expected one of: {allowed})") from None


@dataclass(frozen=True)
class Observation:
    """One (country, region, date, metric) -> count fact."""
    country: str
    region: str
    date: str
    metric: Metric
    count: int


@dataclass(frozen=True)
class SourceSpec:
    """A tabular resource and the metric its cells hold."""
    path: Path
    metric: Metric
