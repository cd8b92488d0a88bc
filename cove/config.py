"""
Configuration
=============

Settings come from the environment and are read once at startup:

- `COVE_DATA_DIR`      directory holding the three time-series CSVs
- `COVE_ON_DUPLICATE`  `overwrite` (later source wins) or `fail`
- `COVE_HOST`, `COVE_PORT`  where `cove --serve` listens

Command-line flags override these.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Tuple
import os

from .indices import DuplicatePolicy
from .models import Metric, SourceSpec

DEFAULT_DATA_DIR = "csse_covid_19_data/csse_covid_19_time_series"

# Source order matters: it is the order metrics are merged into each date node.
SOURCE_FILES: Tuple[Tuple[str, Metric], ...] = (
    ("time_series_19-covid-Confirmed.csv", Metric.CONFIRMED),
    ("time_series_19-covid-Deaths.csv", Metric.DEATHS),
    ("time_series_19-covid-Recovered.csv", Metric.RECOVERED),
)


@dataclass(frozen=True)
class Settings:
    data_dir: Path = Path(DEFAULT_DATA_DIR)
    on_duplicate: DuplicatePolicy = DuplicatePolicy.OVERWRITE
    host: str = "127.0.0.1"
    port: int = 8080


def default_sources(data_dir) -> List[SourceSpec]:
    base = Path(data_dir)
    return [SourceSpec(path=base / name, metric=metric) for name, metric in SOURCE_FILES]


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from environment variables (or `env`, for tests)."""
    env = os.environ if env is None else env
    policy_raw = env.get("COVE_ON_DUPLICATE", DuplicatePolicy.OVERWRITE.value).strip().lower()
    try:
        policy = DuplicatePolicy(policy_raw)
    except ValueError:
        raise ValueError(f"COVE_ON_DUPLICATE must be 'overwrite' or 'fail', got {policy_raw!r}") from None
    port_raw = env.get("COVE_PORT", "8080")
    try:
        port = int(port_raw)
    except ValueError:
        raise ValueError(f"COVE_PORT must be an integer, got {port_raw!r}") from None
    return Settings(
        data_dir=Path(env.get("COVE_DATA_DIR", DEFAULT_DATA_DIR)).expanduser(),
        on_duplicate=policy,
        host=env.get("COVE_HOST", "127.0.0.1"),
        port=port,
    )
