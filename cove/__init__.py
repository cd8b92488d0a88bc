"""
COVE package
============

COVID Observation Engine: merges the JHU CSSE confirmed/deaths/recovered
time-series tables into one country -> region -> date -> metric index and
answers wildcard queries against it.

- The CLI entry point is in `cove/cli.py`.
- The query engine (filter + pruning) is in `cove/engine.py`.
- Source loading is in `cove/loader.py`; the index tree is in `cove/indices.py`.
"""

__version__ = '0.3.0'

from .engine import Cove, query
from .errors import BuildError, InvalidDateFormat, InvalidRegionConstraint, QueryError
from .indices import DuplicatePolicy, HierarchicalIndex, build_index
from .models import ALL_REGIONS, Metric, Observation, SourceSpec

__all__ = [
    "ALL_REGIONS",
    "BuildError",
    "Cove",
    "DuplicatePolicy",
    "HierarchicalIndex",
    "InvalidDateFormat",
    "InvalidRegionConstraint",
    "Metric",
    "Observation",
    "QueryError",
    "SourceSpec",
    "build_index",
    "query",
    "__version__",
]
